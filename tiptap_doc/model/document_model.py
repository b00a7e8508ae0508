# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Editing sessions over a rich document

ARCHITECTURE OVERVIEW:
=====================

A DocumentModel is one editing session: it is created from the last saved
canonical JSON (or empty), is the only owner of the tree while the session
lasts, and hands out the current tree as immutable value data.

    store JSON --parse--> DocumentModel --edits--> Doc --serialize--> store JSON

Edits never mutate a node. Each block operation builds a new Doc around the
untouched siblings, so a Doc obtained from ``document`` before an edit stays
exactly as it was. That is what lets a preview pane render one copy while the
session keeps editing.

DocumentManager keeps several sessions open over a DocumentStore, loading on
first access and writing canonical JSON back on save.

EVENTS:
======

When an ``event_callback`` is given it receives ``(event_type, data)`` with
event types from DocumentEventType; ``data`` always carries ``doc_id``.
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..constants import MAX_NESTING_DEPTH
from ..store import DocumentNotFound, DocumentStore
from . import builders, codec
from .errors import ModelError, ParseError
from .nodes import BLOCK_CLASSES, Doc, Node, TextAlign
from .text import block_summary, extract_text, nesting_depth

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Dict[str, Any]], None]


class DocumentEventType(Enum):
    """Event types emitted by editing sessions"""
    DOCUMENT_CHANGED = "document_changed"
    DOCUMENT_SAVED = "document_saved"
    DOCUMENT_CREATED = "document_created"
    DOCUMENT_REMOVED = "document_removed"


class DocumentModel:
    """
    One editing session over a document tree.
    """

    def __init__(
        self,
        document: Optional[Doc] = None,
        doc_id: Optional[str] = None,
        event_callback: Optional[EventCallback] = None,
    ):
        """
        Initialize an editing session

        Args:
            document: Starting tree (an empty doc when omitted)
            doc_id: Identifier used in events and by the manager
            event_callback: Optional callback receiving change notifications
        """
        self.doc_id = doc_id
        self._document = document if document is not None else Doc()
        self._event_callback = event_callback
        self.modification_count = 0
        self.last_modified: Optional[int] = None

    @property
    def document(self) -> Doc:
        """The current tree; safe to hand to other consumers"""
        return self._document

    def _emit_event(self, event_type: DocumentEventType, event_data: Dict[str, Any]) -> None:
        if self._event_callback:
            try:
                self._event_callback(event_type.value, {"doc_id": self.doc_id, **event_data})
            except Exception as e:
                # Log error but don't break the model operation
                logger.error(f"Error in event callback: {e}")

    def _replace_blocks(self, blocks: Tuple[Node, ...], operation: str, index: int) -> None:
        self._document = Doc(content=blocks)
        self.modification_count += 1
        self.last_modified = int(time.time() * 1000)
        self._emit_event(DocumentEventType.DOCUMENT_CHANGED, {
            "operation": operation,
            "index": index,
            "block_count": len(blocks),
        })

    @staticmethod
    def _check_block(block: Node) -> Node:
        if not isinstance(block, BLOCK_CLASSES):
            raise ModelError(f"{type(block).__name__} is not a block node")
        if nesting_depth(block) + 1 > MAX_NESTING_DEPTH:
            raise ModelError(f"block nests deeper than {MAX_NESTING_DEPTH} levels")
        return block

    # Block operations

    def get_blocks(self) -> Tuple[Node, ...]:
        """Get all top-level blocks"""
        return self._document.content

    def get_block_at_index(self, index: int) -> Optional[Node]:
        """
        Get a block at a specific index

        Args:
            index: Index of the block to retrieve (0-based)

        Returns:
            The block, or None if index is out of range
        """
        blocks = self._document.content
        if 0 <= index < len(blocks):
            return blocks[index]
        return None

    def add_block(self, block: Node, index: Optional[int] = None) -> int:
        """
        Insert a block, appending when ``index`` is None

        Args:
            block: Block node built through the construction API
            index: Position to insert at (clamped to the document bounds)

        Returns:
            The index the block ended up at

        Raises:
            ModelError: If ``block`` is not a block node
        """
        self._check_block(block)
        blocks = self._document.content
        if index is None or index > len(blocks):
            index = len(blocks)
        index = max(index, 0)
        self._replace_blocks(blocks[:index] + (block,) + blocks[index:], "add", index)
        return index

    def append_block(self, block: Node) -> int:
        return self.add_block(block)

    def append_paragraph(self, text: str, text_align: TextAlign = TextAlign.LEFT) -> int:
        """Append a plain paragraph (an empty string appends an empty paragraph)"""
        content = (builders.text(text),) if text else ()
        return self.add_block(builders.paragraph(*content, text_align=text_align))

    def update_block(self, index: int, block: Node) -> bool:
        """Replace the block at ``index``; False when out of range"""
        self._check_block(block)
        blocks = self._document.content
        if not 0 <= index < len(blocks):
            return False
        self._replace_blocks(blocks[:index] + (block,) + blocks[index + 1:], "update", index)
        return True

    def transform_block(self, index: int, command: Callable[[Node], Node]) -> bool:
        """
        Apply an editing command to the block at ``index``

        Example:
            model.transform_block(2, lambda image: commands.scale_image(image, 480))
        """
        block = self.get_block_at_index(index)
        if block is None:
            return False
        return self.update_block(index, command(block))

    def remove_block(self, index: int) -> bool:
        """Remove a block by index; False when out of range"""
        blocks = self._document.content
        if not 0 <= index < len(blocks):
            return False
        self._replace_blocks(blocks[:index] + blocks[index + 1:], "remove", index)
        return True

    def move_block(self, from_index: int, to_index: int) -> bool:
        """Move a block to a new position; False when either index is out of range"""
        blocks = list(self._document.content)
        if not (0 <= from_index < len(blocks) and 0 <= to_index < len(blocks)):
            return False
        blocks.insert(to_index, blocks.pop(from_index))
        self._replace_blocks(tuple(blocks), "move", to_index)
        return True

    def replace_document(self, document: Doc) -> None:
        """Replace the whole tree, e.g. with the editor's latest state"""
        self._document = document
        self.modification_count += 1
        self.last_modified = int(time.time() * 1000)
        self._emit_event(DocumentEventType.DOCUMENT_CHANGED, {
            "operation": "replace",
            "index": 0,
            "block_count": len(document.content),
        })

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        return codec.serialize(self._document)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Canonical JSON text of the current tree"""
        return codec.dumps(self._document, indent=indent)

    @classmethod
    def from_json(
        cls,
        json_data: codec.JsonInput,
        doc_id: Optional[str] = None,
        event_callback: Optional[EventCallback] = None,
    ) -> "DocumentModel":
        """
        Create a session from stored JSON

        Raises:
            ParseError: If the JSON cannot be a document
        """
        document = codec.parse(json_data)
        logger.debug(f"[Session] Opened {doc_id or 'document'} with {len(document.content)} blocks")
        return cls(document=document, doc_id=doc_id, event_callback=event_callback)

    def save_to_file(self, file_path: str, indent: Optional[int] = 2) -> bool:
        """
        Save the canonical JSON to a file

        Returns:
            True if successful, False otherwise
        """
        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(self.to_json(indent=indent))
            logger.info(f"[Session] Saved {self} to {file_path}")
            return True
        except OSError as e:
            logger.error(f"[Session] Error saving to file {file_path}: {e}")
            return False

    @classmethod
    def load_from_file(cls, file_path: str, doc_id: Optional[str] = None) -> Optional["DocumentModel"]:
        """
        Load a session from a JSON file

        Returns:
            DocumentModel instance, or None if the file does not exist

        Raises:
            ParseError: If the file does not hold a document
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                json_data = f.read()
        except FileNotFoundError:
            logger.warning(f"[Session] File not found: {file_path}")
            return None
        return cls.from_json(json_data, doc_id=doc_id)

    # Introspection

    def get_block_summary(self) -> Dict[str, Any]:
        """Get a summary of the current blocks structure"""
        return block_summary(self._document)

    def get_document_info(self) -> Dict[str, Any]:
        return {
            "doc_id": self.doc_id,
            "block_count": len(self._document.content),
            "content_length": len(self.to_json()),
            "modification_count": self.modification_count,
            "last_modified": self.last_modified,
        }

    def __str__(self) -> str:
        return f"DocumentModel(doc_id={self.doc_id!r}, blocks={len(self._document.content)})"

    def __repr__(self) -> str:
        block_summaries = []
        for i, block in enumerate(self._document.content):
            text_content = extract_text((block,))
            # Truncate long text for readability
            if len(text_content) > 50:
                text_content = text_content[:47] + "..."
            block_summaries.append(f"{i+1}.{block.type_name}:'{text_content}'")

        summaries_str = "[" + ", ".join(block_summaries) + "]"
        return (f"DocumentModel(doc_id={self.doc_id!r}, "
                f"blocks={len(self._document.content)}, "
                f"summaries={summaries_str}, "
                f"modifications={self.modification_count})")


class DocumentManager:
    """
    Manages editing sessions for several documents over one DocumentStore.
    """

    ON_PARSE_ERROR_POLICIES = ("empty", "raise")

    def __init__(
        self,
        store: DocumentStore,
        event_callback: Optional[EventCallback] = None,
        on_parse_error: str = "raise",
    ):
        """
        Initialize the document manager.

        Args:
            store: Backend holding canonical JSON per document id
            event_callback: Callback for events from any managed document
            on_parse_error: "raise" to propagate ParseError when stored content
                is not a document, "empty" to open an empty document instead
        """
        if on_parse_error not in self.ON_PARSE_ERROR_POLICIES:
            raise ValueError(f"on_parse_error must be one of {self.ON_PARSE_ERROR_POLICIES}")
        self.store = store
        self.models: Dict[str, DocumentModel] = {}
        self.event_callback = event_callback
        self.on_parse_error = on_parse_error

    def _load(self, doc_id: str) -> Doc:
        try:
            json_text = self.store.fetch_document_json(doc_id)
        except DocumentNotFound:
            logger.info(f"[Session] No stored content for {doc_id}, starting empty")
            return Doc()

        try:
            return codec.parse(json_text)
        except ParseError as e:
            if self.on_parse_error == "raise":
                raise
            logger.warning(f"[Session] Stored content for {doc_id} is unavailable ({e}), starting empty")
            return Doc()

    def get_or_create_document(self, doc_id: str) -> DocumentModel:
        """
        Get an open session or open one from the store.

        Args:
            doc_id: Unique identifier for the document

        Returns:
            DocumentModel for the document

        Raises:
            ParseError: If stored content is not a document and the policy is "raise"
        """
        if doc_id not in self.models:
            model = DocumentModel(
                document=self._load(doc_id),
                doc_id=doc_id,
                event_callback=self.event_callback,
            )
            self.models[doc_id] = model

            if self.event_callback:
                self.event_callback(DocumentEventType.DOCUMENT_CREATED.value, {
                    "doc_id": doc_id,
                    "model": model,
                })

        return self.models[doc_id]

    def save_document(self, doc_id: str) -> bool:
        """
        Write a session's canonical JSON to the store.

        Returns:
            True if saved, False if no session is open for ``doc_id``
        """
        model = self.models.get(doc_id)
        if model is None:
            return False

        self.store.store_document_json(doc_id, model.to_json())
        logger.info(f"[Session] Saved {doc_id} ({len(model.document.content)} blocks)")
        if self.event_callback:
            self.event_callback(DocumentEventType.DOCUMENT_SAVED.value, {"doc_id": doc_id})
        return True

    def save_all(self) -> int:
        """Save every open session; returns how many were saved"""
        return sum(1 for doc_id in list(self.models) if self.save_document(doc_id))

    def list_documents(self) -> List[str]:
        """Ids of open sessions and stored documents"""
        return sorted(set(self.models) | set(self.store.list_documents()))

    def get_document_info(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Information about an open session, or None if it is not open"""
        model = self.models.get(doc_id)
        if model is None:
            return None
        return model.get_document_info()

    def close_document(self, doc_id: str, save: bool = True) -> bool:
        """
        Close a session, saving it first unless ``save`` is False.

        Returns:
            True if a session was closed, False if it was not open
        """
        if doc_id not in self.models:
            return False

        if save:
            self.save_document(doc_id)
        del self.models[doc_id]

        if self.event_callback:
            self.event_callback(DocumentEventType.DOCUMENT_REMOVED.value, {"doc_id": doc_id})
        return True

    def cleanup(self, save: bool = True):
        """Close all open sessions"""
        for doc_id in list(self.models):
            self.close_document(doc_id, save=save)

    def __repr__(self) -> str:
        doc_list = list(self.models.keys())
        return f"DocumentManager(documents={len(doc_list)}, doc_ids={doc_list}, store={self.store!r})"

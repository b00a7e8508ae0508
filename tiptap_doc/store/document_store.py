# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Storage collaborator for canonical document JSON

The store treats a document as opaque JSON text keyed by an id; it never
parses it. Storage failures surface as DocumentNotFound or OSError, never as
model or codec errors.

- MemoryDocumentStore: process-local dictionary, for tests and previews
- FileDocumentStore: one ``<doc_id>.json`` file per document under a base
  directory; ids containing slashes map to sub-directories
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Union

logger = logging.getLogger(__name__)


class DocumentNotFound(KeyError):
    """No document stored under the requested id"""


class DocumentStore(ABC):
    """Interface every storage backend implements"""

    @abstractmethod
    def fetch_document_json(self, doc_id: str) -> str:
        """
        Load the stored JSON text of a document.

        Raises:
            DocumentNotFound: If nothing is stored under ``doc_id``
        """

    @abstractmethod
    def store_document_json(self, doc_id: str, json_text: str) -> None:
        """Store (create or replace) the JSON text of a document"""

    @abstractmethod
    def list_documents(self) -> List[str]:
        """Ids of all stored documents, sorted"""

    @abstractmethod
    def delete_document(self, doc_id: str) -> bool:
        """Remove a document; False when it did not exist"""


class MemoryDocumentStore(DocumentStore):

    def __init__(self):
        self._documents: Dict[str, str] = {}

    def fetch_document_json(self, doc_id: str) -> str:
        try:
            return self._documents[doc_id]
        except KeyError:
            raise DocumentNotFound(doc_id)

    def store_document_json(self, doc_id: str, json_text: str) -> None:
        self._documents[doc_id] = json_text

    def list_documents(self) -> List[str]:
        return sorted(self._documents)

    def delete_document(self, doc_id: str) -> bool:
        return self._documents.pop(doc_id, None) is not None

    def __repr__(self) -> str:
        return f"MemoryDocumentStore(documents={len(self._documents)})"


class FileDocumentStore(DocumentStore):

    def __init__(self, base_path: Union[str, Path] = "./documents"):
        """
        Initialize a file backed store

        Args:
            base_path: Directory holding the ``.json`` files (created on first write)
        """
        self.base_path = Path(base_path)

    def _path_for(self, doc_id: str) -> Path:
        parts = doc_id.split("/") if isinstance(doc_id, str) else []
        if not parts or any(part in ("", ".", "..") or "\\" in part for part in parts):
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return self.base_path.joinpath(*parts[:-1], f"{parts[-1]}.json")

    def fetch_document_json(self, doc_id: str) -> str:
        path = self._path_for(doc_id)
        if not path.is_file():
            logger.debug(f"📂 [Store] No stored content for '{doc_id}'")
            raise DocumentNotFound(doc_id)

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        logger.debug(f"📂 [Store] Loaded document {doc_id} from {path}")
        return content

    def store_document_json(self, doc_id: str, json_text: str) -> None:
        path = self._path_for(doc_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(json_text)
        logger.debug(f"💾 [Store] Saved document {doc_id} to {path}")

    def list_documents(self) -> List[str]:
        if not self.base_path.is_dir():
            return []
        return sorted(
            path.relative_to(self.base_path).with_suffix("").as_posix()
            for path in self.base_path.rglob("*.json")
        )

    def delete_document(self, doc_id: str) -> bool:
        path = self._path_for(doc_id)
        if not path.is_file():
            return False
        path.unlink()
        logger.info(f"🗑️ [Store] Deleted document {doc_id}")
        return True

    def __repr__(self) -> str:
        return f"FileDocumentStore(base_path='{self.base_path}')"

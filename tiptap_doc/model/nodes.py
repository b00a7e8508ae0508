# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Rich document tree: node and mark variants

DOCUMENT STRUCTURE:
==================

The document is the JSON tree produced by the TipTap/ProseMirror editor:

{
  "type": "doc",
  "content": [
    {
      "type": "paragraph",
      "attrs": {"textAlign": "left"},
      "content": [
        {"type": "text", "text": "Hello", "marks": [{"type": "bold"}]}
      ]
    }
  ]
}

Every node kind is a frozen dataclass and every child sequence is a tuple,
so a tree handed off for storage or rendering is plain value data: two
documents parsed from the same JSON compare equal and share nothing.

NODE KINDS:
==========

Blocks:  Paragraph, Heading, BulletList, OrderedList, ListItem, Image,
         Blockquote, CodeBlock, HorizontalRule, YouTube
Inline:  Text, HardBreak
Root:    Doc
Other:   UnknownNode (a type this version does not know, kept as an opaque container)

MARK KINDS:
==========

Bold, Italic, Underline, Code, TextStyle (color + fontSize), Link
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, Union

from ..constants import (
    BLOCKQUOTE,
    BOLD,
    BULLET_LIST,
    CODE,
    CODE_BLOCK,
    DEFAULT_LINK_REL,
    DEFAULT_LINK_TARGET,
    DOC,
    HARD_BREAK,
    HEADING,
    HORIZONTAL_RULE,
    IMAGE,
    ITALIC,
    LINK,
    LIST_ITEM,
    ORDERED_LIST,
    PARAGRAPH,
    TEXT,
    TEXT_STYLE,
    UNDERLINE,
    YOUTUBE,
)
from .uris import is_allowed_uri, is_valid_video_id


class TextAlign(str, Enum):
    """Paragraph alignment"""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class ImageAlign(str, Enum):
    """Image placement within the column"""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


###############################################################################
# Marks

@dataclass(frozen=True)
class Bold:
    type_name: ClassVar[str] = BOLD


@dataclass(frozen=True)
class Italic:
    type_name: ClassVar[str] = ITALIC


@dataclass(frozen=True)
class Underline:
    type_name: ClassVar[str] = UNDERLINE


@dataclass(frozen=True)
class Code:
    type_name: ClassVar[str] = CODE


@dataclass(frozen=True)
class TextStyle:
    """Color and font size carried together on a single mark"""
    type_name: ClassVar[str] = TEXT_STYLE

    color: Optional[str] = None
    font_size: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.color is None and self.font_size is None


@dataclass(frozen=True)
class Link:
    """
    Hyperlink mark.

    The dataclass itself accepts any ``href`` so that untrusted stored data can
    still be represented; the construction API refuses disallowed schemes and
    the renderer treats an unsafe link as inert.
    """
    type_name: ClassVar[str] = LINK

    href: str
    target: str = DEFAULT_LINK_TARGET
    rel: str = DEFAULT_LINK_REL
    title: Optional[str] = None

    @property
    def is_safe(self) -> bool:
        return is_allowed_uri(self.href)


Mark = Union[Bold, Italic, Underline, Code, TextStyle, Link]


###############################################################################
# Inline nodes

@dataclass(frozen=True)
class Text:
    type_name: ClassVar[str] = TEXT

    text: str
    marks: Tuple[Mark, ...] = ()

    def mark_of(self, mark_class: Type) -> Optional[Any]:
        """Return the mark of the given class, if applied"""
        for mark in self.marks:
            if isinstance(mark, mark_class):
                return mark
        return None


@dataclass(frozen=True)
class HardBreak:
    type_name: ClassVar[str] = HARD_BREAK


###############################################################################
# Block nodes

@dataclass(frozen=True)
class Paragraph:
    type_name: ClassVar[str] = PARAGRAPH

    content: Tuple["Node", ...] = ()
    text_align: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class Heading:
    type_name: ClassVar[str] = HEADING

    level: int = 1
    content: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class ListItem:
    type_name: ClassVar[str] = LIST_ITEM

    content: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class BulletList:
    type_name: ClassVar[str] = BULLET_LIST

    content: Tuple[ListItem, ...] = ()


@dataclass(frozen=True)
class OrderedList:
    type_name: ClassVar[str] = ORDERED_LIST

    content: Tuple[ListItem, ...] = ()
    start: int = 1


@dataclass(frozen=True)
class Image:
    """
    Image reference.

    ``natural_width``/``natural_height`` record the pixel size of the source
    file; they only feed aspect-ratio computation when the author resizes.
    """
    type_name: ClassVar[str] = IMAGE

    src: str
    alt: Optional[str] = None
    title: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    align: Optional[ImageAlign] = None
    natural_width: Optional[int] = None
    natural_height: Optional[int] = None


@dataclass(frozen=True)
class Blockquote:
    type_name: ClassVar[str] = BLOCKQUOTE

    content: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class CodeBlock:
    """Verbatim code; serialized as a single unmarked text child"""
    type_name: ClassVar[str] = CODE_BLOCK

    text: str = ""
    language: Optional[str] = None


@dataclass(frozen=True)
class HorizontalRule:
    type_name: ClassVar[str] = HORIZONTAL_RULE


@dataclass(frozen=True)
class YouTube:
    type_name: ClassVar[str] = YOUTUBE

    video_id: Optional[str] = None

    @property
    def has_valid_id(self) -> bool:
        return is_valid_video_id(self.video_id)


@dataclass(frozen=True)
class UnknownNode:
    """A node type this version does not know; children are kept, presentation is skipped"""
    type_name: str
    attrs: Mapping[str, Any] = field(default_factory=dict, hash=False)
    content: Tuple["Node", ...] = ()

    def __post_init__(self):
        # Private read-only copy; nested values never alias the source JSON
        object.__setattr__(self, "attrs", MappingProxyType(copy.deepcopy(dict(self.attrs))))


@dataclass(frozen=True)
class Doc:
    type_name: ClassVar[str] = DOC

    content: Tuple["Node", ...] = ()


Node = Union[
    Doc, Paragraph, Heading, BulletList, OrderedList, ListItem, Image,
    Blockquote, CodeBlock, HorizontalRule, HardBreak, YouTube, Text, UnknownNode,
]

NODE_CLASSES: Dict[str, Type] = {
    cls.type_name: cls
    for cls in (
        Doc, Paragraph, Heading, BulletList, OrderedList, ListItem, Image,
        Blockquote, CodeBlock, HorizontalRule, HardBreak, YouTube, Text,
    )
}

MARK_CLASSES: Dict[str, Type] = {
    cls.type_name: cls
    for cls in (Bold, Italic, Underline, Code, TextStyle, Link)
}

INLINE_CLASSES = (Text, HardBreak)
BLOCK_CLASSES = (
    Paragraph, Heading, BulletList, OrderedList, Image, Blockquote,
    CodeBlock, HorizontalRule, YouTube,
)


def children_of(node: Node) -> Tuple[Node, ...]:
    """Child nodes of any node kind (leaves have none)"""
    return getattr(node, "content", ())


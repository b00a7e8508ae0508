# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from .codec import dumps, loads, parse, serialize
from .document_model import DocumentEventType, DocumentManager, DocumentModel
from .errors import ModelError, ParseError
from .nodes import (
    Blockquote,
    Bold,
    BulletList,
    Code,
    CodeBlock,
    Doc,
    HardBreak,
    Heading,
    HorizontalRule,
    Image,
    ImageAlign,
    Italic,
    Link,
    ListItem,
    Mark,
    Node,
    OrderedList,
    Paragraph,
    Text,
    TextAlign,
    TextStyle,
    Underline,
    UnknownNode,
    YouTube,
)

__all__ = [
    'parse', 'serialize', 'dumps', 'loads',
    'DocumentModel', 'DocumentManager', 'DocumentEventType',
    'ModelError', 'ParseError',
    'Doc', 'Paragraph', 'Heading', 'BulletList', 'OrderedList', 'ListItem', 'Image',
    'Blockquote', 'CodeBlock', 'HorizontalRule', 'HardBreak', 'YouTube', 'Text', 'UnknownNode',
    'Bold', 'Italic', 'Underline', 'Code', 'TextStyle', 'Link',
    'Mark', 'Node', 'TextAlign', 'ImageAlign',
]

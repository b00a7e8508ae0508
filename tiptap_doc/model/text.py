# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""Text extraction and summaries over a document tree."""

from typing import Any, Dict, Iterator, List, Optional

from ..constants import EXCERPT_MAX_LENGTH
from .nodes import CodeBlock, Doc, Image, Node, Text, YouTube, children_of


def iter_nodes(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order walk in document order"""
    yield node
    for child in children_of(node):
        yield from iter_nodes(child)


def nesting_depth(node: Node) -> int:
    """Levels below ``node`` in its deepest branch; a leaf is 0"""
    deepest = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children_of(current))
    return deepest


def extract_text(nodes) -> str:
    """
    Flattened text of a node sequence.

    Text runs are concatenated without separators and hard breaks contribute
    nothing; this is the value the renderer tests for emptiness.
    """
    parts = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(node.text)
        elif isinstance(node, CodeBlock):
            parts.append(node.text)
        else:
            parts.append(extract_text(children_of(node)))
    return "".join(parts)


def plain_text(document: Doc) -> str:
    """Readable text of a document, one line per top-level block with text"""
    lines = []
    for block in document.content:
        block_text = extract_text((block,)).strip()
        if block_text:
            lines.append(block_text)
    return "\n".join(lines)


def excerpt(document: Doc, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """
    Leading text of a document for listings, cut at a word boundary.

    Args:
        document: Document to summarize
        max_length: Maximum length of the result, ellipsis included

    Returns:
        Whitespace-collapsed text, suffixed with "..." when truncated
    """
    collapsed = " ".join(plain_text(document).split())
    if len(collapsed) <= max_length:
        return collapsed

    cut = collapsed[:max(max_length - 3, 0)]
    if " " in cut:
        cut = cut[:cut.rindex(" ")]
    return cut.rstrip() + "..."


def first_image_src(document: Doc) -> Optional[str]:
    """Source of the first image in document order, the default thumbnail"""
    for node in iter_nodes(document):
        if isinstance(node, Image) and node.src:
            return node.src
    return None


def block_summary(document: Doc) -> Dict[str, Any]:
    """Get a summary of the document's block structure"""
    block_types: Dict[str, int] = {}
    for block in document.content:
        block_types[block.type_name] = block_types.get(block.type_name, 0) + 1

    images: List[str] = []
    embeds = 0
    for node in iter_nodes(document):
        if isinstance(node, Image):
            images.append(node.src)
        elif isinstance(node, YouTube):
            embeds += 1

    return {
        "total_blocks": len(document.content),
        "block_types": block_types,
        "total_text_length": len(extract_text(document.content)),
        "word_count": len(plain_text(document).split()),
        "images": images,
        "embeds": embeds,
    }

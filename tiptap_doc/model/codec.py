# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Codec: canonical JSON <-> document tree

PARSE POLICY:
============

Parsing is lenient reconstruction, not rejection. Only a root that is not an
object, or that has no recognizable ``type``, raises ParseError. Below the root
every anomaly is repaired locally and the same input always repairs the same way:

- unknown node type      -> UnknownNode, children parsed, presentation skipped
- missing ``content``    -> empty content
- image without ``src``  -> node dropped
- empty/missing text     -> text node dropped
- unknown mark type      -> mark dropped
- duplicate mark type    -> first kept; textStyle duplicates merged field by field
- list child not listItem-> wrapped in a listItem
- root of a known non-doc kind -> wrapped in a doc
- node nested deeper than MAX_NESTING_DEPTH -> node dropped

JSON text is decoded exactly once, so a document encoded twice has a string
root and is rejected.

SERIALIZE POLICY:
================

Key order is type, attrs, text, content, marks. Kinds with attributes always
emit every attribute (null explicit); kinds without attributes never emit
``attrs``. Containers always emit ``content``; text always emits ``marks``.
"""

import copy
import json
import logging
import math
from typing import Any, Callable, Dict, List, Optional, Union

from ..constants import (
    DEFAULT_LINK_REL,
    DEFAULT_LINK_TARGET,
    DOC,
    HARD_BREAK,
    MAX_NESTING_DEPTH,
    TEXT,
)
from .errors import ParseError
from .nodes import (
    MARK_CLASSES,
    NODE_CLASSES,
    Blockquote,
    BulletList,
    CodeBlock,
    Doc,
    HardBreak,
    Heading,
    HorizontalRule,
    Image,
    ImageAlign,
    Link,
    ListItem,
    Mark,
    Node,
    OrderedList,
    Paragraph,
    Text,
    TextAlign,
    TextStyle,
    UnknownNode,
    YouTube,
)
from .text import nesting_depth

logger = logging.getLogger(__name__)

JsonInput = Union[str, bytes, Dict[str, Any]]


###############################################################################
# Public API

def loads(json_text: Union[str, bytes]) -> Doc:
    """Parse a JSON string into a document"""
    try:
        data = json.loads(json_text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"invalid JSON: {e}")
    except RecursionError:
        raise ParseError("invalid JSON: nesting exceeds the decoder limit")
    return _parse_root(data)


def parse(data: JsonInput) -> Doc:
    """
    Reconstruct a document from its JSON form.

    Args:
        data: Decoded JSON value, or JSON text

    Returns:
        The document

    Raises:
        ParseError: If the root is not an object or has no recognizable type
    """
    if isinstance(data, (str, bytes)):
        return loads(data)
    return _parse_root(data)


def _parse_root(data: Any) -> Doc:
    if not isinstance(data, dict):
        raise ParseError("document root must be an object")

    root_type = data.get("type")
    if not isinstance(root_type, str) or root_type not in NODE_CLASSES:
        raise ParseError(f"document root has no recognizable type: {root_type!r}", "$.type")

    if root_type == DOC:
        return Doc(content=_parse_children(data, "$", 0))

    logger.debug(f"Wrapping root {root_type} node in a doc")
    node = _parse_node(data, "$", 1)
    return Doc(content=(node,) if node is not None else ())


def serialize(node: Node) -> Dict[str, Any]:
    """
    Canonical JSON value of a document (or of any node).

    Identical trees always produce equal values, so ``json.dumps`` of the
    result is byte-identical across calls.
    """
    return _SERIALIZERS[type(node)](node)


def dumps(document: Node, indent: Optional[int] = None) -> str:
    """Canonical JSON text: compact unless ``indent`` is given, non-ASCII kept"""
    if indent is None:
        return json.dumps(serialize(document), ensure_ascii=False, separators=(",", ":"))
    return json.dumps(serialize(document), ensure_ascii=False, indent=indent)


###############################################################################
# Value coercion

def _attrs(raw: Dict[str, Any]) -> Dict[str, Any]:
    attrs = raw.get("attrs")
    return attrs if isinstance(attrs, dict) else {}


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _coerce_int(value: Any) -> Optional[int]:
    """Integers, integral floats and numeric strings (optionally suffixed px)"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        candidate = value.strip()
        if candidate.lower().endswith("px"):
            candidate = candidate[:-2].strip()
        try:
            return int(candidate)
        except ValueError:
            try:
                return _coerce_int(float(candidate))
            except ValueError:
                return None
    return None


def _positive_int(value: Any) -> Optional[int]:
    number = _coerce_int(value)
    return number if number is not None and number > 0 else None


def _enum_or(enum_class, value: Any, default):
    try:
        return enum_class(value)
    except ValueError:
        return default


###############################################################################
# Node parsing

def _parse_children(raw: Dict[str, Any], path: str, depth: int) -> tuple:
    """Children of the node at ``depth``"""
    content = raw.get("content")
    if content is None:
        return ()
    if not isinstance(content, list):
        logger.debug(f"Ignoring non-list content at {path}.content")
        return ()

    nodes = []
    for index, child in enumerate(content):
        node = _parse_node(child, f"{path}.content[{index}]", depth + 1)
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


def _parse_node(raw: Any, path: str, depth: int) -> Optional[Node]:
    if depth > MAX_NESTING_DEPTH:
        logger.debug(f"Dropping node nested deeper than {MAX_NESTING_DEPTH} levels at {path}")
        return None

    if not isinstance(raw, dict):
        logger.debug(f"Dropping non-object node at {path}")
        return None

    node_type = raw.get("type")
    if not isinstance(node_type, str) or not node_type:
        logger.debug(f"Dropping node without type at {path}")
        return None

    parser = _NODE_PARSERS.get(node_type)
    if parser is None:
        logger.debug(f"Keeping unknown node type {node_type!r} at {path} as a container")
        return UnknownNode(
            type_name=node_type,
            attrs=_attrs(raw),
            content=_parse_children(raw, path, depth),
        )
    return parser(raw, path, depth)


def _parse_doc(raw, path, depth):
    return Doc(content=_parse_children(raw, path, depth))


def _parse_paragraph(raw, path, depth):
    align = _enum_or(TextAlign, _attrs(raw).get("textAlign"), TextAlign.LEFT)
    return Paragraph(content=_parse_children(raw, path, depth), text_align=align)


def _parse_heading(raw, path, depth):
    # Out of range levels are kept; the renderer clamps them
    level = _coerce_int(_attrs(raw).get("level"))
    return Heading(level=1 if level is None else level, content=_parse_children(raw, path, depth))


def _list_items(raw, path, depth) -> tuple:
    items = []
    for node in _parse_children(raw, path, depth):
        if isinstance(node, ListItem):
            items.append(node)
        elif depth + 2 + nesting_depth(node) > MAX_NESTING_DEPTH:
            logger.debug(f"Dropping stray {node.type_name} child of list at {path}, too deep to wrap")
        else:
            logger.debug(f"Wrapping stray {node.type_name} child of list at {path} in a listItem")
            items.append(ListItem(content=(node,)))
    return tuple(items)


def _parse_bullet_list(raw, path, depth):
    return BulletList(content=_list_items(raw, path, depth))


def _parse_ordered_list(raw, path, depth):
    start = _coerce_int(_attrs(raw).get("start"))
    return OrderedList(content=_list_items(raw, path, depth), start=1 if start is None else start)


def _parse_list_item(raw, path, depth):
    return ListItem(content=_parse_children(raw, path, depth))


def _parse_image(raw, path, depth):
    attrs = _attrs(raw)
    src = attrs.get("src")
    if not isinstance(src, str) or not src.strip():
        logger.debug(f"Dropping image without src at {path}")
        return None
    return Image(
        src=src,
        alt=_optional_str(attrs.get("alt")),
        title=_optional_str(attrs.get("title")),
        width=_positive_int(attrs.get("width")),
        height=_positive_int(attrs.get("height")),
        align=_enum_or(ImageAlign, attrs.get("align"), None),
        natural_width=_positive_int(attrs.get("naturalWidth")),
        natural_height=_positive_int(attrs.get("naturalHeight")),
    )


def _parse_blockquote(raw, path, depth):
    return Blockquote(content=_parse_children(raw, path, depth))


def _code_text(raw: Any, depth: int) -> str:
    """All descendant text of a code block, hard breaks as newlines, marks ignored"""
    if not isinstance(raw, dict) or depth > MAX_NESTING_DEPTH:
        return ""
    if raw.get("type") == TEXT:
        value = raw.get("text")
        return value if isinstance(value, str) else ""
    if raw.get("type") == HARD_BREAK:
        return "\n"
    content = raw.get("content")
    if not isinstance(content, list):
        return ""
    return "".join(_code_text(child, depth + 1) for child in content)


def _parse_code_block(raw, path, depth):
    language = _optional_str(_attrs(raw).get("language"))
    return CodeBlock(text=_code_text({"content": raw.get("content")}, depth), language=language or None)


def _parse_horizontal_rule(raw, path, depth):
    return HorizontalRule()


def _parse_hard_break(raw, path, depth):
    return HardBreak()


def _parse_youtube(raw, path, depth):
    # Invalid ids are kept so the author sees a placeholder for the broken embed
    return YouTube(video_id=_optional_str(_attrs(raw).get("videoId")))


def _parse_text(raw, path, depth):
    value = raw.get("text")
    if not isinstance(value, str) or not value:
        logger.debug(f"Dropping empty text node at {path}")
        return None
    return Text(text=value, marks=_parse_marks(raw.get("marks"), path))


_NODE_PARSERS: Dict[str, Callable[[Dict[str, Any], str, int], Optional[Node]]] = {
    Doc.type_name: _parse_doc,
    Paragraph.type_name: _parse_paragraph,
    Heading.type_name: _parse_heading,
    BulletList.type_name: _parse_bullet_list,
    OrderedList.type_name: _parse_ordered_list,
    ListItem.type_name: _parse_list_item,
    Image.type_name: _parse_image,
    Blockquote.type_name: _parse_blockquote,
    CodeBlock.type_name: _parse_code_block,
    HorizontalRule.type_name: _parse_horizontal_rule,
    HardBreak.type_name: _parse_hard_break,
    YouTube.type_name: _parse_youtube,
    Text.type_name: _parse_text,
}


###############################################################################
# Mark parsing

def _parse_mark(raw: Any, path: str) -> Optional[Mark]:
    if not isinstance(raw, dict):
        return None
    mark_type = raw.get("type")
    if mark_type not in MARK_CLASSES:
        logger.debug(f"Dropping unknown mark {mark_type!r} at {path}")
        return None

    attrs = _attrs(raw)
    if mark_type == TextStyle.type_name:
        return TextStyle(
            color=_optional_str(attrs.get("color")),
            font_size=_positive_int(attrs.get("fontSize")),
        )
    if mark_type == Link.type_name:
        href = attrs.get("href")
        if not isinstance(href, str):
            logger.debug(f"Dropping link mark without href at {path}")
            return None
        return Link(
            href=href,
            target=_optional_str(attrs.get("target")) or DEFAULT_LINK_TARGET,
            rel=_optional_str(attrs.get("rel")) or DEFAULT_LINK_REL,
            title=_optional_str(attrs.get("title")),
        )
    return MARK_CLASSES[mark_type]()


def _merge_text_styles(first: TextStyle, later: TextStyle) -> TextStyle:
    return TextStyle(
        color=later.color if later.color is not None else first.color,
        font_size=later.font_size if later.font_size is not None else first.font_size,
    )


def _parse_marks(raw: Any, path: str) -> tuple:
    if not isinstance(raw, list):
        return ()

    marks: List[Mark] = []
    positions: Dict[str, int] = {}
    for index, item in enumerate(raw):
        mark = _parse_mark(item, f"{path}.marks[{index}]")
        if mark is None:
            continue
        if mark.type_name not in positions:
            positions[mark.type_name] = len(marks)
            marks.append(mark)
        elif isinstance(mark, TextStyle):
            logger.debug(f"Merging duplicate textStyle mark at {path}.marks[{index}]")
            position = positions[mark.type_name]
            marks[position] = _merge_text_styles(marks[position], mark)
        else:
            logger.debug(f"Dropping duplicate {mark.type_name} mark at {path}.marks[{index}]")

    return tuple(mark for mark in marks if not (isinstance(mark, TextStyle) and mark.is_empty))


###############################################################################
# Serialization

def _content(node) -> List[Dict[str, Any]]:
    return [serialize(child) for child in node.content]


def _serialize_mark(mark: Mark) -> Dict[str, Any]:
    if isinstance(mark, TextStyle):
        return {"type": mark.type_name, "attrs": {"color": mark.color, "fontSize": mark.font_size}}
    if isinstance(mark, Link):
        return {
            "type": mark.type_name,
            "attrs": {"href": mark.href, "target": mark.target, "rel": mark.rel, "title": mark.title},
        }
    return {"type": mark.type_name}


def _serialize_text(node: Text) -> Dict[str, Any]:
    return {
        "type": node.type_name,
        "text": node.text,
        "marks": [_serialize_mark(mark) for mark in node.marks],
    }


def _serialize_container(node) -> Dict[str, Any]:
    return {"type": node.type_name, "content": _content(node)}


def _serialize_leaf(node) -> Dict[str, Any]:
    return {"type": node.type_name}


def _serialize_paragraph(node: Paragraph) -> Dict[str, Any]:
    return {"type": node.type_name, "attrs": {"textAlign": node.text_align.value}, "content": _content(node)}


def _serialize_heading(node: Heading) -> Dict[str, Any]:
    return {"type": node.type_name, "attrs": {"level": node.level}, "content": _content(node)}


def _serialize_ordered_list(node: OrderedList) -> Dict[str, Any]:
    return {"type": node.type_name, "attrs": {"start": node.start}, "content": _content(node)}


def _serialize_image(node: Image) -> Dict[str, Any]:
    return {
        "type": node.type_name,
        "attrs": {
            "src": node.src,
            "alt": node.alt,
            "title": node.title,
            "width": node.width,
            "height": node.height,
            "align": node.align.value if node.align is not None else None,
            "naturalWidth": node.natural_width,
            "naturalHeight": node.natural_height,
        },
    }


def _serialize_code_block(node: CodeBlock) -> Dict[str, Any]:
    content = [_serialize_text(Text(text=node.text))] if node.text else []
    return {"type": node.type_name, "attrs": {"language": node.language}, "content": content}


def _serialize_youtube(node: YouTube) -> Dict[str, Any]:
    return {"type": node.type_name, "attrs": {"videoId": node.video_id}}


def _serialize_unknown(node: UnknownNode) -> Dict[str, Any]:
    data: Dict[str, Any] = {"type": node.type_name}
    if node.attrs:
        data["attrs"] = copy.deepcopy(dict(node.attrs))
    data["content"] = _content(node)
    return data


_SERIALIZERS: Dict[type, Callable[[Any], Dict[str, Any]]] = {
    Doc: _serialize_container,
    Paragraph: _serialize_paragraph,
    Heading: _serialize_heading,
    BulletList: _serialize_container,
    OrderedList: _serialize_ordered_list,
    ListItem: _serialize_container,
    Image: _serialize_image,
    Blockquote: _serialize_container,
    CodeBlock: _serialize_code_block,
    HorizontalRule: _serialize_leaf,
    HardBreak: _serialize_leaf,
    YouTube: _serialize_youtube,
    Text: _serialize_text,
    UnknownNode: _serialize_unknown,
}

_missing = set(NODE_CLASSES.values()) - set(_SERIALIZERS)
if _missing:
    raise RuntimeError(f"No serializer for node kinds: {sorted(cls.__name__ for cls in _missing)}")

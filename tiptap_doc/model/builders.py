# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Construction API for documents

Every function here validates its arguments and raises ModelError rather than
building a node that breaks a kind's invariant. Trees built exclusively through
these functions survive ``parse(serialize(d)) == d``.

USAGE:
=====

    from tiptap_doc.model import builders as b

    document = b.doc(
        b.heading(1, "Release notes"),
        b.paragraph(b.text("Hello ", b.bold()), b.text("world", b.bold(), b.italic())),
        b.bullet_list(b.list_item(b.paragraph("first")), b.list_item(b.paragraph("second"))),
        b.image("https://cdn.example.com/a.png", alt="Diagram", width=320, height=200),
        b.youtube("https://youtu.be/dQw4w9WgXcQ"),
    )
"""

from typing import Optional, Tuple, Union

from ..constants import (
    DEFAULT_LINK_REL,
    DEFAULT_LINK_TARGET,
    HEX_COLOR_PATTERN,
    MAX_HEADING_LEVEL,
    MAX_NESTING_DEPTH,
    MIN_HEADING_LEVEL,
)
from .errors import ModelError
from .nodes import (
    BLOCK_CLASSES,
    INLINE_CLASSES,
    MARK_CLASSES,
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
    YouTube,
)
from .text import nesting_depth
from .uris import is_allowed_uri, youtube_video_id

InlineArg = Union[str, Text, HardBreak]


###############################################################################
# Validation helpers

def _inline_content(owner: str, content: Tuple) -> Tuple[Node, ...]:
    nodes = []
    for item in content:
        if isinstance(item, str):
            item = text(item)
        if not isinstance(item, INLINE_CLASSES):
            raise ModelError(f"{owner} accepts inline content only, got {type(item).__name__}")
        nodes.append(item)
    return tuple(nodes)


def _block_content(owner: str, content: Tuple) -> Tuple[Node, ...]:
    for item in content:
        if not isinstance(item, BLOCK_CLASSES):
            raise ModelError(f"{owner} accepts block content only, got {type(item).__name__}")
    return tuple(content)


def _optional_positive_int(name: str, value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ModelError(f"{name} must be a positive integer, got {value!r}")
    return value


def _optional_text(name: str, value) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ModelError(f"{name} must be a string, got {value!r}")
    return value


def _required_text(name: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ModelError(f"{name} must be a non-empty string, got {value!r}")
    return value


def _enum_value(enum_class, name: str, value):
    if value is None or isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_class)
        raise ModelError(f"{name} must be one of {allowed}, got {value!r}")


###############################################################################
# Nodes

def doc(*blocks: Node) -> Doc:
    """Document root; zero blocks is an empty document"""
    document = Doc(content=_block_content("doc", blocks))
    if nesting_depth(document) > MAX_NESTING_DEPTH:
        raise ModelError(f"document nests deeper than {MAX_NESTING_DEPTH} levels")
    return document


def paragraph(*content: InlineArg, text_align: Union[str, TextAlign] = TextAlign.LEFT) -> Paragraph:
    align = _enum_value(TextAlign, "textAlign", text_align)
    if align is None:
        raise ModelError("textAlign cannot be null")
    return Paragraph(content=_inline_content("paragraph", content), text_align=align)


def heading(level: int, *content: InlineArg) -> Heading:
    if isinstance(level, bool) or not isinstance(level, int) \
            or not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL:
        raise ModelError(f"heading level must be {MIN_HEADING_LEVEL}..{MAX_HEADING_LEVEL}, got {level!r}")
    return Heading(level=level, content=_inline_content("heading", content))


def list_item(*content: Union[InlineArg, Node]) -> ListItem:
    """List item holding blocks, inline nodes, or a mix of both"""
    nodes = []
    for item in content:
        if isinstance(item, str):
            item = text(item)
        if not isinstance(item, BLOCK_CLASSES + INLINE_CLASSES):
            raise ModelError(f"listItem cannot contain {type(item).__name__}")
        nodes.append(item)
    return ListItem(content=tuple(nodes))


def _items(owner: str, items: Tuple) -> Tuple[ListItem, ...]:
    if not items:
        raise ModelError(f"{owner} needs at least one listItem")
    for item in items:
        if not isinstance(item, ListItem):
            raise ModelError(f"{owner} accepts listItem children only, got {type(item).__name__}")
    return tuple(items)


def bullet_list(*items: ListItem) -> BulletList:
    return BulletList(content=_items("bulletList", items))


def ordered_list(*items: ListItem, start: int = 1) -> OrderedList:
    if isinstance(start, bool) or not isinstance(start, int):
        raise ModelError(f"orderedList start must be an integer, got {start!r}")
    return OrderedList(content=_items("orderedList", items), start=start)


def image(
    src: str,
    alt: Optional[str] = None,
    title: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    align: Optional[Union[str, ImageAlign]] = None,
    natural_width: Optional[int] = None,
    natural_height: Optional[int] = None,
) -> Image:
    """
    Image node referencing an already uploaded file.

    Args:
        src: Resolved image URL (required, non-empty)
        alt: Alternative text for assistive technology
        title: Caption shown under the image
        width: Display width in pixels
        height: Display height in pixels
        align: left, center or right
        natural_width: Pixel width of the source file
        natural_height: Pixel height of the source file
    """
    return Image(
        src=_required_text("image src", src),
        alt=_optional_text("alt", alt),
        title=_optional_text("title", title),
        width=_optional_positive_int("width", width),
        height=_optional_positive_int("height", height),
        align=_enum_value(ImageAlign, "align", align),
        natural_width=_optional_positive_int("naturalWidth", natural_width),
        natural_height=_optional_positive_int("naturalHeight", natural_height),
    )


def blockquote(*blocks: Node) -> Blockquote:
    return Blockquote(content=_block_content("blockquote", blocks))


def code_block(source: str = "", language: Optional[str] = None) -> CodeBlock:
    if not isinstance(source, str):
        raise ModelError("codeBlock content must be a string")
    return CodeBlock(text=source, language=_optional_text("language", language) or None)


def horizontal_rule() -> HorizontalRule:
    return HorizontalRule()


def hard_break() -> HardBreak:
    return HardBreak()


def youtube(url_or_id: str) -> YouTube:
    """YouTube embed from a video id or any supported YouTube URL"""
    video_id = youtube_video_id(url_or_id)
    if video_id is None or not YouTube(video_id).has_valid_id:
        raise ModelError(f"not a YouTube video: {url_or_id!r}")
    return YouTube(video_id=video_id)


def text(value: str, *marks: Mark) -> Text:
    """
    Text run with marks listed innermost first.

    Raises:
        ModelError: If the text is empty or a mark type appears twice
    """
    if not value or not isinstance(value, str):
        raise ModelError("text nodes cannot be empty")
    seen = set()
    for mark in marks:
        if not isinstance(mark, tuple(MARK_CLASSES.values())):
            raise ModelError(f"text marks must be mark nodes, got {type(mark).__name__}")
        if mark.type_name in seen:
            raise ModelError(f"mark {mark.type_name} applied twice")
        seen.add(mark.type_name)
    return Text(text=value, marks=tuple(marks))


###############################################################################
# Marks

def bold() -> Bold:
    return Bold()


def italic() -> Italic:
    return Italic()


def underline() -> Underline:
    return Underline()


def code() -> Code:
    return Code()


def text_style(color: Optional[str] = None, font_size: Optional[int] = None) -> TextStyle:
    """Single textStyle mark carrying color and/or font size (pixels)"""
    if color is not None and (not isinstance(color, str) or not HEX_COLOR_PATTERN.match(color)):
        raise ModelError(f"color must be a hex color like #RRGGBB, got {color!r}")
    style = TextStyle(color=color, font_size=_optional_positive_int("fontSize", font_size))
    if style.is_empty:
        raise ModelError("textStyle needs a color or a font size")
    return style


def link(
    href: str,
    target: str = DEFAULT_LINK_TARGET,
    rel: str = DEFAULT_LINK_REL,
    title: Optional[str] = None,
) -> Link:
    """
    Link mark.

    Raises:
        ModelError: If ``href`` is not http(s), mailto or tel, or ``target``/``rel`` are empty
    """
    if not is_allowed_uri(href):
        raise ModelError(f"link scheme not allowed: {href!r}")
    return Link(
        href=href.strip(),
        target=_required_text("link target", target),
        rel=_required_text("link rel", rel),
        title=_optional_text("link title", title),
    )

# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Deterministic renderer: document tree -> presentation tree

RENDERING RULES:
===============

The walk is recursive, depth-first, children in array order. Each node kind
has exactly one rule, looked up by class; a kind without a rule fails at
import time rather than falling through to a default.

1. paragraph / heading whose flattened text is empty or whitespace render as
   nothing. codeBlock, image, youtube, lists and blockquote are exempt.
2. Marks wrap a text run in declaration order: the first mark is innermost,
   the last is outermost. ``[bold, italic]`` renders ``<em><strong>..</strong></em>``.
   A textStyle mark yields one element carrying both color and font size.
3. Lists keep every listItem, even a blank one; paragraphs inside an item still
   follow rule 1.
4. image without src renders nothing; youtube without a valid id renders a
   visible placeholder.
5. codeBlock text is emitted verbatim in the code font.
6. Unknown node kinds render their children in place of themselves.
7. heading levels outside 1..6 clamp to the nearest valid level.

The output depends only on the document and the RendererConfig.
"""

from typing import Callable, Dict, List, Optional, Sequence

from ..constants import HEX_COLOR_PATTERN, MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
from ..model.nodes import (
    MARK_CLASSES,
    NODE_CLASSES,
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
    Italic,
    Link,
    ListItem,
    Mark,
    Node,
    OrderedList,
    Paragraph,
    Text,
    TextStyle,
    Underline,
    UnknownNode,
    YouTube,
)
from ..model.text import extract_text
from ..model.uris import youtube_embed_url
from .config import DEFAULT_CONFIG, RendererConfig
from .presentation import Element, PresentationNode, TextRun

Rendered = List[PresentationNode]


###############################################################################
# Public API

def render(document: Doc, config: Optional[RendererConfig] = None) -> Element:
    """
    Render a document to a presentation tree.

    Args:
        document: Parsed document
        config: Style mapping table (the default table when omitted)

    Returns:
        Root element whose children are the rendered top-level blocks
    """
    config = config or DEFAULT_CONFIG
    return Element(
        config.root_tag,
        attrs=_class_attr(config.root_class),
        children=tuple(render_nodes(document.content, config)),
    )


def render_html(document: Doc, config: Optional[RendererConfig] = None) -> str:
    """Render a document to an HTML string"""
    return render(document, config).to_html()


def render_nodes(nodes: Sequence[Node], config: RendererConfig) -> Rendered:
    """Render sibling nodes in order, concatenating their output"""
    rendered: Rendered = []
    for node in nodes:
        rendered.extend(_NODE_RENDERERS[type(node)](node, config))
    return rendered


###############################################################################
# Helpers

def _classes(*names: Optional[str]) -> str:
    return " ".join(name for name in names if name)


def _class_attr(*names: Optional[str]) -> tuple:
    classes = _classes(*names)
    return (("class", classes),) if classes else ()


def _is_blank(nodes: Sequence[Node]) -> bool:
    return not extract_text(nodes).strip()


def clamp_heading_level(level: int) -> int:
    return max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, level))


###############################################################################
# Node rules

def _render_doc(node: Doc, config: RendererConfig) -> Rendered:
    return render_nodes(node.content, config)


def _render_paragraph(node: Paragraph, config: RendererConfig) -> Rendered:
    if _is_blank(node.content):
        return []
    align_class = config.alignment_classes.get(node.text_align.value) or config.alignment_classes.get("left")
    return [Element(
        "p",
        attrs=_class_attr(align_class, config.paragraph_class),
        children=tuple(render_nodes(node.content, config)),
    )]


def _render_heading(node: Heading, config: RendererConfig) -> Rendered:
    if _is_blank(node.content):
        return []
    level = clamp_heading_level(node.level)
    return [Element(
        f"h{level}",
        attrs=_class_attr(config.heading_classes.get(level), config.heading_text_class),
        children=tuple(render_nodes(node.content, config)),
    )]


def _render_items(items: Sequence[ListItem], config: RendererConfig) -> tuple:
    return tuple(
        Element("li", attrs=_class_attr(config.list_item_class), children=tuple(render_nodes(item.content, config)))
        for item in items
    )


def _render_bullet_list(node: BulletList, config: RendererConfig) -> Rendered:
    if not node.content:
        return []
    return [Element("ul", attrs=_class_attr(config.bullet_list_class), children=_render_items(node.content, config))]


def _render_ordered_list(node: OrderedList, config: RendererConfig) -> Rendered:
    if not node.content:
        return []
    attrs = _class_attr(config.ordered_list_class)
    if node.start != 1:
        attrs += (("start", str(node.start)),)
    return [Element("ol", attrs=attrs, children=_render_items(node.content, config))]


def _render_list_item(node: ListItem, config: RendererConfig) -> Rendered:
    return [Element(
        "div",
        attrs=_class_attr(config.orphan_list_item_class),
        children=tuple(render_nodes(node.content, config)),
    )]


def _image_style(node: Image) -> Optional[str]:
    if node.width is not None and node.height is not None:
        return f"width: {node.width}px; height: {node.height}px"
    if node.width is not None:
        return f"width: {node.width}px; height: auto"
    if node.height is not None:
        return f"width: auto; height: {node.height}px"
    return None


def _render_image(node: Image, config: RendererConfig) -> Rendered:
    if not node.src:
        return []

    style = _image_style(node)
    img_attrs = (("src", node.src), ("alt", node.alt or ""))
    img_attrs += _class_attr(config.sized_image_class if style else config.image_class)
    if style:
        img_attrs += (("style", style),)

    align_class = config.image_alignment_classes.get(node.align.value) if node.align is not None else None
    children: tuple = (Element("img", attrs=img_attrs),)
    if node.title:
        children += (Element("p", attrs=_class_attr(config.image_caption_class), children=(TextRun(node.title),)),)
    return [Element("div", attrs=_class_attr(config.image_wrapper_class, align_class), children=children)]


def _render_blockquote(node: Blockquote, config: RendererConfig) -> Rendered:
    return [Element(
        "blockquote",
        attrs=_class_attr(config.blockquote_class),
        children=tuple(render_nodes(node.content, config)),
    )]


def _render_code_block(node: CodeBlock, config: RendererConfig) -> Rendered:
    language_class = f"language-{node.language}" if node.language else None
    code = Element(
        "code",
        attrs=_class_attr(config.code_block_font_class, language_class),
        children=(TextRun(node.text),) if node.text else (),
    )
    return [Element("pre", attrs=_class_attr(config.code_block_class), children=(code,))]


def _render_horizontal_rule(node: HorizontalRule, config: RendererConfig) -> Rendered:
    return [Element("hr", attrs=_class_attr(config.horizontal_rule_class))]


def _render_hard_break(node: HardBreak, config: RendererConfig) -> Rendered:
    return [Element("br")]


def _render_youtube(node: YouTube, config: RendererConfig) -> Rendered:
    if not node.has_valid_id:
        return [Element(
            "div",
            attrs=_class_attr(config.youtube_placeholder_class),
            children=(TextRun(config.youtube_placeholder_text),),
        )]

    iframe = Element("iframe", attrs=(
        ("src", youtube_embed_url(node.video_id)),
        ("class", config.youtube_iframe_class),
        ("width", config.youtube_width),
        ("height", config.youtube_height),
        ("frameborder", "0"),
        ("allowfullscreen", "true"),
        ("allow", config.youtube_allow),
        ("title", config.youtube_placeholder_text),
    ))
    return [Element(
        "div",
        attrs=_class_attr(config.youtube_wrapper_class) + (("data-youtube-video-id", node.video_id),),
        children=(iframe,),
    )]


def _render_text(node: Text, config: RendererConfig) -> Rendered:
    if not node.text:
        return []
    rendered: PresentationNode = TextRun(node.text)
    for mark in node.marks:
        rendered = _MARK_RENDERERS[type(mark)](mark, rendered, config)
    return [rendered]


def _render_unknown(node: UnknownNode, config: RendererConfig) -> Rendered:
    return render_nodes(node.content, config)


###############################################################################
# Mark rules

def _wrap(tag: str, attrs: tuple = ()) -> Callable:
    def wrap(mark: Mark, inner: PresentationNode, config: RendererConfig) -> PresentationNode:
        return Element(tag, attrs=attrs, children=(inner,))
    return wrap


def _render_code_mark(mark: Code, inner: PresentationNode, config: RendererConfig) -> PresentationNode:
    return Element("code", attrs=_class_attr(config.inline_code_class), children=(inner,))


def text_style_declaration(mark: TextStyle) -> str:
    """CSS declaration for a textStyle mark; unsafe or missing values are left out"""
    declarations = []
    if isinstance(mark.color, str) and HEX_COLOR_PATTERN.match(mark.color):
        declarations.append(f"color: {mark.color}")
    if isinstance(mark.font_size, int) and mark.font_size > 0:
        declarations.append(f"font-size: {mark.font_size}px")
    return "; ".join(declarations)


def _render_text_style(mark: TextStyle, inner: PresentationNode, config: RendererConfig) -> PresentationNode:
    declaration = text_style_declaration(mark)
    if not declaration:
        return inner
    return Element("span", attrs=(("style", declaration),), children=(inner,))


def _render_link(mark: Link, inner: PresentationNode, config: RendererConfig) -> PresentationNode:
    attrs: tuple = ()
    if mark.is_safe:
        attrs += (("href", mark.href.strip()), ("target", mark.target or config.link_target))
    attrs += (("rel", mark.rel or config.link_rel),)
    if mark.title:
        attrs += (("title", mark.title),)
    return Element("a", attrs=attrs, children=(inner,))


_NODE_RENDERERS: Dict[type, Callable[[Node, RendererConfig], Rendered]] = {
    Doc: _render_doc,
    Paragraph: _render_paragraph,
    Heading: _render_heading,
    BulletList: _render_bullet_list,
    OrderedList: _render_ordered_list,
    ListItem: _render_list_item,
    Image: _render_image,
    Blockquote: _render_blockquote,
    CodeBlock: _render_code_block,
    HorizontalRule: _render_horizontal_rule,
    HardBreak: _render_hard_break,
    YouTube: _render_youtube,
    Text: _render_text,
    UnknownNode: _render_unknown,
}

_MARK_RENDERERS: Dict[type, Callable[[Mark, PresentationNode, RendererConfig], PresentationNode]] = {
    Bold: _wrap("strong"),
    Italic: _wrap("em"),
    Underline: _wrap("u"),
    Code: _render_code_mark,
    TextStyle: _render_text_style,
    Link: _render_link,
}

_missing = (set(NODE_CLASSES.values()) - set(_NODE_RENDERERS)) | (set(MARK_CLASSES.values()) - set(_MARK_RENDERERS))
if _missing:
    raise RuntimeError(f"No rendering rule for: {sorted(cls.__name__ for cls in _missing)}")

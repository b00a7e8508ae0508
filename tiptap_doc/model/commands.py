# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Editing commands as pure tree transformations

The interactive editor owns cursor handling, toolbars and resize gestures; what
reaches the stored document is only the outcome of each command. These
functions compute that outcome and return a new node, leaving the input untouched.

Image sizing follows the editor's resize menu:

- scale to a width, keeping the current aspect ratio (display size first,
  natural size second, square as a last resort)
- width only / height only, letting the other dimension follow the image
- drag resize, clamped to 100..1200 px wide
"""

import math
from dataclasses import replace
from typing import Optional, Type, Union

from ..constants import MAX_HEADING_LEVEL, MAX_IMAGE_WIDTH, MIN_HEADING_LEVEL, MIN_IMAGE_WIDTH
from . import builders
from .errors import ModelError
from .nodes import (
    Heading,
    Image,
    ImageAlign,
    Link,
    Mark,
    Paragraph,
    Text,
    TextAlign,
    TextStyle,
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


###############################################################################
# Marks

def has_mark(node: Text, mark_class: Type) -> bool:
    return node.mark_of(mark_class) is not None


def set_mark(node: Text, mark: Mark) -> Text:
    """Apply ``mark``, replacing a mark of the same type in place"""
    marks = list(node.marks)
    for index, existing in enumerate(marks):
        if existing.type_name == mark.type_name:
            marks[index] = mark
            return replace(node, marks=tuple(marks))
    return replace(node, marks=tuple(marks) + (mark,))


def unset_mark(node: Text, mark_class: Type) -> Text:
    return replace(node, marks=tuple(mark for mark in node.marks if not isinstance(mark, mark_class)))


def toggle_mark(node: Text, mark: Mark) -> Text:
    """Remove the mark's type when present, apply the mark otherwise"""
    if has_mark(node, type(mark)):
        return unset_mark(node, type(mark))
    return set_mark(node, mark)


def _with_text_style(node: Text, color, font_size) -> Text:
    style = TextStyle(color=color, font_size=font_size)
    if style.is_empty:
        return unset_mark(node, TextStyle)
    # Validate through the construction API
    return set_mark(node, builders.text_style(color=style.color, font_size=style.font_size))


def set_color(node: Text, color: str) -> Text:
    current = node.mark_of(TextStyle) or TextStyle()
    return _with_text_style(node, color, current.font_size)


def unset_color(node: Text) -> Text:
    current = node.mark_of(TextStyle) or TextStyle()
    return _with_text_style(node, None, current.font_size)


def set_font_size(node: Text, font_size: int) -> Text:
    current = node.mark_of(TextStyle) or TextStyle()
    return _with_text_style(node, current.color, font_size)


def unset_font_size(node: Text) -> Text:
    current = node.mark_of(TextStyle) or TextStyle()
    return _with_text_style(node, current.color, None)


def set_link(node: Text, href: str, title: Optional[str] = None) -> Text:
    """
    Link the text run.

    Raises:
        ModelError: If ``href`` uses a scheme outside the allow-list
    """
    return set_mark(node, builders.link(href, title=title))


def unset_link(node: Text) -> Text:
    return unset_mark(node, Link)


###############################################################################
# Blocks

def set_text_align(node: Paragraph, align: Union[str, TextAlign]) -> Paragraph:
    return builders.paragraph(*node.content, text_align=align)


def set_heading_level(node: Heading, level: int) -> Heading:
    if not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL:
        raise ModelError(f"heading level must be {MIN_HEADING_LEVEL}..{MAX_HEADING_LEVEL}, got {level!r}")
    return replace(node, level=level)


###############################################################################
# Images

def aspect_ratio(image: Image) -> float:
    """Height over width, from the display size, then the natural size, else 1"""
    if image.width and image.height:
        return image.height / image.width
    if image.natural_width and image.natural_height:
        return image.natural_height / image.natural_width
    return 1.0


def _check_size(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ModelError(f"{name} must be a positive integer, got {value!r}")
    return value


def scale_image(image: Image, width: Optional[int]) -> Image:
    """Resize to ``width`` keeping the aspect ratio; None restores the natural size"""
    if width is None:
        return reset_image_size(image)
    width = _check_size("width", width)
    return replace(image, width=width, height=max(_round_half_up(width * aspect_ratio(image)), 1))


def set_image_width(image: Image, width: int) -> Image:
    return replace(image, width=_check_size("width", width), height=None)


def set_image_height(image: Image, height: int) -> Image:
    return replace(image, width=None, height=_check_size("height", height))


def reset_image_size(image: Image) -> Image:
    return replace(image, width=None, height=None)


def resize_image_by_drag(image: Image, start_width: float, start_height: float, delta_x: float) -> Image:
    """
    Final size after dragging the resize handle horizontally.

    Args:
        image: Image being resized
        start_width: Rendered width when the drag started
        start_height: Rendered height when the drag started
        delta_x: Horizontal pointer travel in pixels

    Returns:
        Image with integer width/height, width clamped to 100..1200
    """
    if start_width <= 0 or start_height <= 0:
        raise ModelError("cannot resize an image with no rendered size")
    ratio = start_height / start_width
    new_width = max(MIN_IMAGE_WIDTH, min(MAX_IMAGE_WIDTH, start_width + delta_x))
    # Truncate like the handle does when it reads the style back
    return replace(image, width=int(new_width), height=max(int(new_width * ratio), 1))


def set_image_align(image: Image, align: Optional[Union[str, ImageAlign]]) -> Image:
    if align is not None and not isinstance(align, ImageAlign):
        try:
            align = ImageAlign(align)
        except ValueError:
            raise ModelError(f"align must be left, center or right, got {align!r}")
    return replace(image, align=align)


def record_natural_size(image: Image, natural_width: int, natural_height: int) -> Image:
    """Store the source file's pixel size once it is known"""
    return replace(
        image,
        natural_width=_check_size("naturalWidth", natural_width),
        natural_height=_check_size("naturalHeight", natural_height),
    )

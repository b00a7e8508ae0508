# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Renderer configuration: the style mapping table

Every host that renders documents (web preview, public post page, mobile app)
has to apply the same table to look the same. The defaults below are the
table the mobile app implements; a host can override any entry from a dict
or a JSON file:

    {
      "heading_classes": {"1": "title"},
      "link_target": "_self"
    }

Mapping entries (heading_classes, alignment_classes, image_alignment_classes)
are merged over the defaults key by key; scalar entries replace the default.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Optional

from ..constants import DEFAULT_LINK_REL, DEFAULT_LINK_TARGET, MAX_HEADING_LEVEL, MIN_HEADING_LEVEL

MAPPING_FIELDS = ("heading_classes", "alignment_classes", "image_alignment_classes")
OPTIONAL_FIELDS = ("root_class",)


def _heading_classes() -> Dict[int, str]:
    return {
        1: "text-3xl font-bold mb-4 mt-6",
        2: "text-2xl font-bold mb-4 mt-6",
        3: "text-xl font-bold mb-3 mt-5",
        4: "text-lg font-bold mb-3 mt-4",
        5: "text-base font-bold mb-2 mt-3",
        6: "text-sm font-bold mb-2 mt-3",
    }


def _alignment_classes() -> Dict[str, str]:
    return {
        "left": "text-left",
        "center": "text-center",
        "right": "text-right",
        "justify": "text-justify",
    }


def _image_alignment_classes() -> Dict[str, str]:
    return {
        "left": "mr-auto",
        "center": "mx-auto",
        "right": "ml-auto",
    }


def _string_mapping(name: str, value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object, got {type(value).__name__}")
    for key, classes in value.items():
        if not isinstance(classes, str):
            raise ValueError(f"{name}[{key!r}] must be a string, got {type(classes).__name__}")
    return value


def _heading_level(key: Any) -> int:
    try:
        level = int(key)
    except (TypeError, ValueError):
        raise ValueError(f"heading_classes key must be a heading level, got {key!r}")
    if not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL:
        raise ValueError(f"heading_classes level must be {MIN_HEADING_LEVEL}..{MAX_HEADING_LEVEL}, got {key!r}")
    return level


@dataclass(frozen=True)
class RendererConfig:
    """Style mapping per node and mark kind"""

    root_tag: str = "div"
    root_class: Optional[str] = None

    # Headings: level -> classes, plus classes shared by every level
    heading_classes: Dict[int, str] = field(default_factory=_heading_classes)
    heading_text_class: str = "text-gray-900"

    # Paragraphs: textAlign -> class, plus the paragraph body class
    alignment_classes: Dict[str, str] = field(default_factory=_alignment_classes)
    paragraph_class: str = "mb-3 text-base leading-relaxed text-gray-900"

    bullet_list_class: str = "list-disc list-inside mb-3 space-y-1 ml-4"
    ordered_list_class: str = "list-decimal list-inside mb-3 space-y-1 ml-4"
    list_item_class: str = "text-base text-gray-900"
    # A listItem reached outside of a list renders as a plain block
    orphan_list_item_class: str = "mb-1"

    blockquote_class: str = "border-l-4 border-indigo-500 pl-4 py-2 my-3 italic text-gray-700 bg-gray-50 rounded-r"

    code_block_class: str = "bg-gray-100 p-4 rounded-lg overflow-x-auto mb-3"
    code_block_font_class: str = "text-sm font-mono text-gray-800"
    inline_code_class: str = "bg-gray-100 px-1 rounded text-sm font-mono"

    horizontal_rule_class: str = "my-4 border-gray-200 opacity-30"

    # Images: full width unless the author sized them
    image_wrapper_class: str = "mb-4"
    image_class: str = "w-full rounded-lg"
    sized_image_class: str = "max-w-full rounded-lg"
    image_alignment_classes: Dict[str, str] = field(default_factory=_image_alignment_classes)
    image_caption_class: str = "text-sm text-gray-500 text-center mt-2"

    link_target: str = DEFAULT_LINK_TARGET
    link_rel: str = DEFAULT_LINK_REL

    youtube_wrapper_class: str = "youtube-embed-wrapper"
    youtube_iframe_class: str = "youtube-embed"
    youtube_width: str = "100%"
    youtube_height: str = "315"
    youtube_allow: str = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"
    youtube_placeholder_class: str = "youtube-placeholder"
    youtube_placeholder_text: str = "YouTube video"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RendererConfig":
        """
        Build a configuration from overrides

        Raises:
            ValueError: If a key is not a configuration entry or a value has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"renderer configuration must be an object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown renderer configuration keys: {', '.join(unknown)}")

        defaults = cls()
        values = dict(data)
        for name, value in values.items():
            if name in MAPPING_FIELDS:
                _string_mapping(name, value)
            elif not isinstance(value, str) and not (name in OPTIONAL_FIELDS and value is None):
                raise ValueError(f"{name} must be a string, got {type(value).__name__}")

        if "heading_classes" in values:
            values["heading_classes"] = {
                **defaults.heading_classes,
                **{_heading_level(level): classes for level, classes in values["heading_classes"].items()},
            }
        for name in ("alignment_classes", "image_alignment_classes"):
            if name in values:
                values[name] = {**getattr(defaults, name), **values[name]}
        return cls(**values)

    @classmethod
    def from_file(cls, file_path: str) -> "RendererConfig":
        """Load overrides from a JSON file"""
        with open(file_path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["heading_classes"] = {str(level): classes for level, classes in self.heading_classes.items()}
        return data


DEFAULT_CONFIG = RendererConfig()

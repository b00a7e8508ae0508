# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Presentation tree produced by the renderer

Two node kinds: Element (tag, ordered attributes, children) and TextRun
(literal text). Attributes keep insertion order so that ``to_html`` is
byte-for-byte reproducible. ``to_dict`` gives the same tree as JSON for hosts
that draw natively instead of consuming markup.
"""

from dataclasses import dataclass
from html import escape
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

VOID_TAGS = frozenset(("br", "hr", "img"))


@dataclass(frozen=True)
class TextRun:
    text: str

    def to_html(self) -> str:
        return escape(self.text, quote=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}

    def text_content(self) -> str:
        return self.text


@dataclass(frozen=True)
class Element:
    tag: str
    attrs: Tuple[Tuple[str, str], ...] = ()
    children: Tuple["PresentationNode", ...] = ()

    def attr(self, name: str) -> Optional[str]:
        for key, value in self.attrs:
            if key == name:
                return value
        return None

    def iter(self) -> Iterator["Element"]:
        """This element and every descendant element, in document order"""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find_all(self, tag: str) -> List["Element"]:
        return [element for element in self.iter() if element.tag == tag]

    def text_content(self) -> str:
        return "".join(child.text_content() for child in self.children)

    def to_html(self) -> str:
        attrs = "".join(f' {key}="{escape(value, quote=True)}"' for key, value in self.attrs)
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        inner = "".join(child.to_html() for child in self.children)
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "attrs": dict(self.attrs),
            "children": [child.to_dict() for child in self.children],
        }


PresentationNode = Union[Element, TextRun]

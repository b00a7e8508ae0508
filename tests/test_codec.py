# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Unit tests for codec.py

Covers the lenient parse policy, the canonical serialization shape and the
round trip law for documents built through the construction API.
"""

import json
import unittest

import pytest

from tiptap_doc.constants import MAX_NESTING_DEPTH
from tiptap_doc.model import builders as b
from tiptap_doc.model import codec
from tiptap_doc.model.errors import ParseError
from tiptap_doc.model.nodes import (
    Bold,
    BulletList,
    CodeBlock,
    Doc,
    Heading,
    Image,
    ImageAlign,
    Italic,
    Link,
    ListItem,
    Paragraph,
    Text,
    TextAlign,
    TextStyle,
    UnknownNode,
    YouTube,
)
from tiptap_doc.model.text import nesting_depth


def sample_document() -> Doc:
    return b.doc(
        b.heading(2, "Release notes"),
        b.paragraph(
            b.text("Hello ", b.bold()),
            b.text("world", b.bold(), b.italic()),
            b.hard_break(),
            b.text("docs", b.link("https://example.com/docs", title="Docs")),
            text_align="center",
        ),
        b.bullet_list(
            b.list_item(b.paragraph("first")),
            b.list_item(b.paragraph(b.text("second", b.text_style(color="#ff0000", font_size=18)))),
        ),
        b.ordered_list(b.list_item(b.paragraph("one")), start=3),
        b.image("https://cdn.example.com/a.png", alt="Diagram", title="Figure 1",
                width=320, height=200, align="center", natural_width=1600, natural_height=1000),
        b.blockquote(b.paragraph(b.text("quoted", b.underline()))),
        b.code_block("print('hi')\n", language="python"),
        b.horizontal_rule(),
        b.youtube("https://www.youtube.com/watch?v=dQw4w9WgXcQ"),
        b.paragraph(b.text("x = 1", b.code())),
    )


class TestRoundTrip(unittest.TestCase):
    """parse(serialize(d)) == d for documents built through the model API"""

    def test_sample_document_round_trip(self):
        """Test the full sample survives serialize then parse"""
        document = sample_document()
        self.assertEqual(codec.parse(codec.serialize(document)), document)

    def test_round_trip_through_json_text(self):
        """Test dumps/loads agree with serialize/parse"""
        document = sample_document()
        self.assertEqual(codec.loads(codec.dumps(document)), document)

    def test_empty_document_round_trip(self):
        """Test an empty doc is a doc with zero children"""
        document = b.doc()
        self.assertEqual(codec.serialize(document), {"type": "doc", "content": []})
        self.assertEqual(codec.parse(codec.serialize(document)), document)

    def test_serialize_is_byte_identical(self):
        """Test repeated serialization yields the same bytes"""
        document = sample_document()
        self.assertEqual(codec.dumps(document), codec.dumps(document))
        self.assertEqual(codec.dumps(codec.loads(codec.dumps(document))), codec.dumps(document))

    def test_parsed_copies_are_independent(self):
        """Test two parses of the same JSON are equal but not the same objects"""
        json_text = codec.dumps(sample_document())
        first, second = codec.loads(json_text), codec.loads(json_text)
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertIsNot(first.content[0], second.content[0])


class TestSerializeShape(unittest.TestCase):
    """Field presence rules of the canonical form"""

    def test_paragraph_always_has_attrs_and_content(self):
        data = codec.serialize(b.paragraph())
        self.assertEqual(data, {"type": "paragraph", "attrs": {"textAlign": "left"}, "content": []})

    def test_text_always_has_marks(self):
        self.assertEqual(codec.serialize(b.text("hi")), {"type": "text", "text": "hi", "marks": []})

    def test_image_emits_every_attribute(self):
        data = codec.serialize(b.image("https://x/y.png"))
        self.assertEqual(list(data["attrs"]), [
            "src", "alt", "title", "width", "height", "align", "naturalWidth", "naturalHeight",
        ])
        self.assertIsNone(data["attrs"]["width"])
        self.assertNotIn("content", data)

    def test_leaves_without_attributes(self):
        self.assertEqual(codec.serialize(b.horizontal_rule()), {"type": "horizontalRule"})
        self.assertEqual(codec.serialize(b.hard_break()), {"type": "hardBreak"})

    def test_marks_shape(self):
        node = b.text("a", b.bold(), b.text_style(color="#000000"), b.link("mailto:me@example.com"))
        self.assertEqual(codec.serialize(node)["marks"], [
            {"type": "bold"},
            {"type": "textStyle", "attrs": {"color": "#000000", "fontSize": None}},
            {"type": "link", "attrs": {
                "href": "mailto:me@example.com",
                "target": "_blank",
                "rel": "noopener noreferrer nofollow",
                "title": None,
            }},
        ])

    def test_code_block_holds_single_text_child(self):
        data = codec.serialize(b.code_block("a < b"))
        self.assertEqual(data["content"], [{"type": "text", "text": "a < b", "marks": []}])
        self.assertEqual(codec.serialize(b.code_block())["content"], [])

    def test_key_order(self):
        data = codec.serialize(b.heading(1, "Title"))
        self.assertEqual(list(data), ["type", "attrs", "content"])
        self.assertEqual(list(codec.serialize(b.text("x"))), ["type", "text", "marks"])

    def test_dumps_is_compact_and_keeps_unicode(self):
        text = codec.dumps(b.doc(b.paragraph("नमस्ते")))
        self.assertNotIn(" ", text.replace("नमस्ते", ""))
        self.assertIn("नमस्ते", text)


class TestParseErrors(unittest.TestCase):
    """Only shape-level failures raise"""

    def test_root_not_object(self):
        for value in ([], "null", 42, None):
            with self.assertRaises(ParseError) as ctx:
                codec.parse(value)
            self.assertEqual(ctx.exception.path, "$")

    def test_root_without_type(self):
        with self.assertRaises(ParseError) as ctx:
            codec.parse({"content": []})
        self.assertEqual(ctx.exception.path, "$.type")

    def test_root_with_unknown_type(self):
        with self.assertRaises(ParseError):
            codec.parse({"type": "spreadsheet"})

    def test_invalid_json_text(self):
        with self.assertRaises(ParseError) as ctx:
            codec.loads("{not json")
        self.assertIn("invalid JSON", ctx.exception.reason)

    def test_parse_error_is_value_error(self):
        with self.assertRaises(ValueError):
            codec.parse([])

    def test_double_encoded_document_is_rejected(self):
        twice = json.dumps(json.dumps({"type": "doc", "content": []}))
        for decode in (codec.loads, codec.parse):
            with self.subTest(decode=decode.__name__):
                with self.assertRaises(ParseError) as ctx:
                    decode(twice)
                self.assertEqual(ctx.exception.path, "$")


class TestNestingLimit(unittest.TestCase):
    """Deep input is cut at a fixed depth instead of exhausting the stack"""

    def _nested(self, levels, leaf):
        raw = leaf
        for _ in range(levels):
            raw = {"type": "blockquote", "content": [raw]}
        return {"type": "doc", "content": [raw]}

    def test_deep_document_is_truncated(self):
        raw = self._nested(300, {"type": "paragraph", "content": [{"type": "text", "text": "deep"}]})
        with self.assertLogs("tiptap_doc.model.codec", level="DEBUG") as logs:
            document = codec.loads(json.dumps(raw))
        self.assertEqual(nesting_depth(document), MAX_NESTING_DEPTH)
        self.assertTrue(any("nested deeper" in line for line in logs.output))
        self.assertEqual(codec.loads(codec.dumps(document)), document)
        self.assertEqual(codec.parse(raw), document)

    def test_document_at_the_limit_is_kept(self):
        raw = self._nested(MAX_NESTING_DEPTH - 1, {"type": "horizontalRule"})
        document = codec.parse(raw)
        self.assertEqual(nesting_depth(document), MAX_NESTING_DEPTH)
        self.assertEqual(codec.serialize(document), codec.serialize(codec.parse(codec.serialize(document))))

    def test_deep_code_block_content(self):
        inner = {"type": "text", "text": "x"}
        for _ in range(400):
            inner = {"type": "callout", "content": [inner]}
        document = codec.parse({"type": "doc", "content": [{"type": "codeBlock", "content": [inner]}]})
        self.assertIsInstance(document.content[0], CodeBlock)
        self.assertEqual(document.content[0].text, "")

    def test_stray_list_child_stays_within_limit(self):
        stray = self._nested(MAX_NESTING_DEPTH - 2, {"type": "horizontalRule"})["content"][0]
        document = codec.parse({"type": "doc", "content": [{"type": "bulletList", "content": [stray]}]})
        self.assertLessEqual(nesting_depth(document), MAX_NESTING_DEPTH)

    def test_decoder_overflow_is_parse_error(self):
        with self.assertRaises(ParseError):
            codec.loads("[" * 200000 + "]" * 200000)


class TestLenientParse(unittest.TestCase):
    """Node-level anomalies are repaired, never raised"""

    def test_unknown_node_keeps_children(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "futureBlock", "attrs": {"mood": "calm"}, "content": [{"type": "text", "text": "hi"}]},
        ]})
        node = document.content[0]
        self.assertIsInstance(node, UnknownNode)
        self.assertEqual(node.type_name, "futureBlock")
        self.assertEqual(node.attrs, {"mood": "calm"})
        self.assertEqual(node.content, (Text("hi"),))

    def test_unknown_node_attrs_are_isolated(self):
        raw = {"type": "doc", "content": [{"type": "callout", "attrs": {"tags": ["a"]}, "content": []}]}
        node = codec.parse(raw).content[0]
        raw["content"][0]["attrs"]["tags"].append("b")
        self.assertEqual(node.attrs["tags"], ["a"])

        serialized = codec.serialize(Doc(content=(node,)))
        serialized["content"][0]["attrs"]["tags"].append("c")
        self.assertEqual(node.attrs, {"tags": ["a"]})
        with self.assertRaises(TypeError):
            node.attrs["tone"] = "info"

    def test_unknown_node_round_trips(self):
        raw = {"type": "doc", "content": [
            {"type": "callout", "attrs": {"tone": "info"}, "content": [{"type": "text", "text": "hi", "marks": []}]},
        ]}
        self.assertEqual(codec.serialize(codec.parse(raw)), raw)

    def test_missing_content_is_empty(self):
        document = codec.parse({"type": "doc", "content": [{"type": "paragraph"}, {"type": "blockquote"}]})
        self.assertEqual(document.content[0].content, ())
        self.assertEqual(document.content[1].content, ())

    def test_missing_doc_content(self):
        self.assertEqual(codec.parse({"type": "doc"}), Doc())

    def test_image_without_src_is_dropped(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "image", "attrs": {"alt": "lost"}},
            {"type": "image", "attrs": {"src": None}},
            {"type": "image", "attrs": {"src": ""}},
            {"type": "image", "attrs": {"src": "https://x/y.png"}},
        ]})
        self.assertEqual(document.content, (Image(src="https://x/y.png"),))

    def test_non_object_and_untyped_children_are_dropped(self):
        document = codec.parse({"type": "doc", "content": [
            "stray", 7, {"content": []}, {"type": "paragraph", "content": [{"type": "text", "text": "ok"}]},
        ]})
        self.assertEqual(len(document.content), 1)

    def test_empty_text_is_dropped(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": ""}, {"type": "text"}]},
        ]})
        self.assertEqual(document.content[0].content, ())

    def test_non_list_content_is_ignored(self):
        document = codec.parse({"type": "doc", "content": {"type": "paragraph"}})
        self.assertEqual(document.content, ())

    def test_invalid_text_align_defaults_to_left(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "paragraph", "attrs": {"textAlign": "diagonal"}},
            {"type": "paragraph", "attrs": {"textAlign": None}},
        ]})
        self.assertEqual([p.text_align for p in document.content], [TextAlign.LEFT, TextAlign.LEFT])

    def test_heading_level_is_kept_for_the_renderer(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "heading", "attrs": {"level": 9}},
            {"type": "heading", "attrs": {"level": "2"}},
            {"type": "heading"},
        ]})
        self.assertEqual([h.level for h in document.content], [9, 2, 1])

    def test_stray_list_children_are_wrapped(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "bulletList", "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "loose"}]},
                {"type": "listItem", "content": []},
            ]},
        ]})
        bullet_list = document.content[0]
        self.assertIsInstance(bullet_list, BulletList)
        self.assertIsInstance(bullet_list.content[0], ListItem)
        self.assertIsInstance(bullet_list.content[0].content[0], Paragraph)
        self.assertEqual(bullet_list.content[1], ListItem())

    def test_code_block_collects_text_and_drops_marks(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "codeBlock", "attrs": {"language": "js"}, "content": [
                {"type": "text", "text": "let a", "marks": [{"type": "bold"}]},
                {"type": "hardBreak"},
                {"type": "text", "text": "a++"},
            ]},
        ]})
        self.assertEqual(document.content[0], CodeBlock(text="let a\na++", language="js"))

    def test_youtube_invalid_id_is_kept(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "youtube", "attrs": {"videoId": "nope"}},
            {"type": "youtube", "attrs": {"videoId": None}},
            {"type": "youtube"},
        ]})
        self.assertEqual(document.content, (YouTube("nope"), YouTube(None), YouTube(None)))

    def test_known_non_doc_root_is_wrapped(self):
        document = codec.parse({"type": "paragraph", "content": [{"type": "text", "text": "solo"}]})
        self.assertEqual(document, Doc(content=(Paragraph(content=(Text("solo"),)),)))

    def test_legacy_image_sizes_are_coerced(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "image", "attrs": {
                "src": "https://x/y.png", "width": "300", "height": 150.4, "align": "middle",
                "naturalWidth": -5, "naturalHeight": True,
            }},
        ]})
        image = document.content[0]
        self.assertEqual((image.width, image.height), (300, 150))
        self.assertIsNone(image.align)
        self.assertIsNone(image.natural_width)
        self.assertIsNone(image.natural_height)

    def test_image_align_enum(self):
        document = codec.parse({"type": "doc", "content": [
            {"type": "image", "attrs": {"src": "https://x/y.png", "align": "right"}},
        ]})
        self.assertEqual(document.content[0].align, ImageAlign.RIGHT)


class TestMarkParsing(unittest.TestCase):

    def _marks(self, marks):
        document = codec.parse({"type": "doc", "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "t", "marks": marks}]},
        ]})
        return document.content[0].content[0].marks

    def test_unknown_marks_are_dropped(self):
        self.assertEqual(self._marks([{"type": "sparkle"}, {"type": "bold"}]), (Bold(),))

    def test_duplicate_marks_keep_first(self):
        self.assertEqual(self._marks([{"type": "bold"}, {"type": "italic"}, {"type": "bold"}]), (Bold(), Italic()))

    def test_duplicate_text_styles_merge(self):
        marks = self._marks([
            {"type": "italic"},
            {"type": "textStyle", "attrs": {"color": "#111111", "fontSize": None}},
            {"type": "textStyle", "attrs": {"fontSize": "18px"}},
            {"type": "textStyle", "attrs": {"color": "#222222"}},
        ])
        self.assertEqual(marks, (Italic(), TextStyle(color="#222222", font_size=18)))

    def test_empty_text_style_is_dropped(self):
        self.assertEqual(self._marks([{"type": "textStyle", "attrs": {"color": None, "fontSize": None}}]), ())

    def test_link_defaults_and_unsafe_href_kept(self):
        marks = self._marks([{"type": "link", "attrs": {"href": "javascript:alert(1)"}}])
        self.assertEqual(marks, (Link(href="javascript:alert(1)"),))
        self.assertFalse(marks[0].is_safe)

    def test_link_without_href_is_dropped(self):
        self.assertEqual(self._marks([{"type": "link", "attrs": {}}]), ())

    def test_non_list_marks(self):
        self.assertEqual(self._marks("bold"), ())


@pytest.mark.parametrize("raw, expected", [
    ("18", 18),
    ("18px", 18),
    (" 24 PX", 24),
    (16.0, 16),
    ("large", None),
    (0, None),
    (False, None),
])
def test_font_size_coercion(raw, expected):
    document = codec.parse({"type": "doc", "content": [{"type": "paragraph", "content": [
        {"type": "text", "text": "t", "marks": [{"type": "textStyle", "attrs": {"color": "#fff", "fontSize": raw}}]},
    ]}]})
    style = document.content[0].content[0].marks[0]
    assert style.font_size == expected


def test_parse_accepts_json_text_and_bytes():
    raw = json.dumps({"type": "doc", "content": [{"type": "horizontalRule"}]})
    assert codec.parse(raw) == codec.parse(raw.encode("utf-8"))
    assert len(codec.parse(raw).content) == 1


def test_heading_round_trip_keeps_level():
    document = b.doc(b.heading(6, "Small"))
    assert codec.parse(codec.serialize(document)).content[0] == Heading(level=6, content=(Text("Small"),))

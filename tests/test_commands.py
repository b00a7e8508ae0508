# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Tests for the pure editing commands
"""

import pytest

from tiptap_doc.model import builders as b
from tiptap_doc.model import commands
from tiptap_doc.model.errors import ModelError
from tiptap_doc.model.nodes import (
    Bold,
    Image,
    ImageAlign,
    Italic,
    Link,
    TextAlign,
    TextStyle,
)


@pytest.fixture
def run():
    return b.text("word", b.bold())


@pytest.fixture
def photo():
    return b.image("https://cdn.example.com/p.jpg", natural_width=1600, natural_height=900)


class TestMarks:

    def test_set_mark_appends(self, run):
        assert commands.set_mark(run, Italic()).marks == (Bold(), Italic())

    def test_set_mark_replaces_in_place(self):
        node = b.text("x", b.link("https://a.example"), b.bold())
        updated = commands.set_mark(node, b.link("https://b.example"))
        assert updated.marks[0].href == "https://b.example"
        assert updated.marks[1] == Bold()

    def test_toggle_mark(self, run):
        assert commands.toggle_mark(run, Bold()).marks == ()
        assert commands.toggle_mark(commands.toggle_mark(run, Italic()), Italic()) == run

    def test_commands_do_not_mutate_input(self, run):
        commands.set_mark(run, Italic())
        assert run.marks == (Bold(),)

    def test_color_and_font_size_share_one_mark(self, run):
        styled = commands.set_font_size(commands.set_color(run, "#ff0000"), 20)
        assert styled.marks == (Bold(), TextStyle(color="#ff0000", font_size=20))

    def test_unset_last_style_field_removes_mark(self, run):
        styled = commands.set_color(run, "#00ff00")
        assert commands.unset_color(styled).marks == (Bold(),)

    def test_unset_one_style_field_keeps_other(self, run):
        styled = commands.set_font_size(commands.set_color(run, "#123456"), 12)
        assert commands.unset_font_size(styled).mark_of(TextStyle) == TextStyle(color="#123456")

    def test_set_color_validates(self, run):
        with pytest.raises(ModelError):
            commands.set_color(run, "blue")

    def test_set_link_rejects_unsafe_href(self, run):
        with pytest.raises(ModelError):
            commands.set_link(run, "javascript:alert(1)")

    def test_set_and_unset_link(self, run):
        linked = commands.set_link(run, "https://example.com", title="Example")
        assert linked.mark_of(Link).title == "Example"
        assert commands.has_mark(linked, Link)
        assert commands.unset_link(linked) == run


class TestBlocks:

    def test_set_text_align(self):
        paragraph = commands.set_text_align(b.paragraph("x"), "right")
        assert paragraph.text_align == TextAlign.RIGHT

    def test_set_heading_level(self):
        assert commands.set_heading_level(b.heading(1, "t"), 3).level == 3
        with pytest.raises(ModelError):
            commands.set_heading_level(b.heading(1, "t"), 7)


class TestImages:

    def test_aspect_ratio_prefers_display_size(self):
        image = b.image("https://x/y.png", width=200, height=100, natural_width=100, natural_height=100)
        assert commands.aspect_ratio(image) == 0.5

    def test_aspect_ratio_falls_back_to_natural_then_square(self, photo):
        assert commands.aspect_ratio(photo) == 900 / 1600
        assert commands.aspect_ratio(b.image("https://x/y.png")) == 1.0

    def test_scale_image_keeps_ratio(self, photo):
        scaled = commands.scale_image(photo, 400)
        assert (scaled.width, scaled.height) == (400, 225)

    def test_scale_image_rounds_half_up(self):
        image = b.image("https://x/y.png", natural_width=4, natural_height=1)
        assert commands.scale_image(image, 10).height == 3

    def test_scale_image_to_none_resets(self, photo):
        sized = commands.scale_image(photo, 400)
        assert commands.scale_image(sized, None) == photo

    def test_width_only_and_height_only(self, photo):
        assert (commands.set_image_width(photo, 300).width, commands.set_image_width(photo, 300).height) == (300, None)
        only_height = commands.set_image_height(commands.scale_image(photo, 400), 120)
        assert (only_height.width, only_height.height) == (None, 120)

    @pytest.mark.parametrize("delta_x, expected_width", [(100, 500), (-350, 100), (2000, 1200)])
    def test_drag_resize_clamps_width(self, photo, delta_x, expected_width):
        resized = commands.resize_image_by_drag(photo, 400, 200, delta_x)
        assert resized.width == expected_width
        assert resized.height == expected_width // 2

    def test_drag_resize_truncates(self, photo):
        resized = commands.resize_image_by_drag(photo, 300, 100, 1.9)
        assert (resized.width, resized.height) == (301, 100)

    def test_drag_resize_needs_rendered_size(self, photo):
        with pytest.raises(ModelError):
            commands.resize_image_by_drag(photo, 0, 100, 10)

    def test_set_image_align(self, photo):
        assert commands.set_image_align(photo, "center").align == ImageAlign.CENTER
        assert commands.set_image_align(photo, None).align is None
        with pytest.raises(ModelError):
            commands.set_image_align(photo, "top")

    def test_record_natural_size(self):
        image = commands.record_natural_size(b.image("https://x/y.png"), 640, 480)
        assert isinstance(image, Image)
        assert (image.natural_width, image.natural_height) == (640, 480)
        with pytest.raises(ModelError):
            commands.record_natural_size(image, 0, 480)

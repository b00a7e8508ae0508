# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""Shared names and limits for the document model, codec and renderer."""

import re

###############################################################################
# Node and mark type names (wire format)

DOC = "doc"
PARAGRAPH = "paragraph"
HEADING = "heading"
BULLET_LIST = "bulletList"
ORDERED_LIST = "orderedList"
LIST_ITEM = "listItem"
IMAGE = "image"
BLOCKQUOTE = "blockquote"
CODE_BLOCK = "codeBlock"
HORIZONTAL_RULE = "horizontalRule"
HARD_BREAK = "hardBreak"
YOUTUBE = "youtube"
TEXT = "text"

BOLD = "bold"
ITALIC = "italic"
UNDERLINE = "underline"
CODE = "code"
TEXT_STYLE = "textStyle"
LINK = "link"

###############################################################################
# Links

ALLOWED_URI_PATTERN = re.compile(r"^(https?://|mailto:|tel:)", re.IGNORECASE)
DEFAULT_LINK_TARGET = "_blank"
DEFAULT_LINK_REL = "noopener noreferrer nofollow"

###############################################################################
# Embeds and media

YOUTUBE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}\Z")
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"
YOUTUBE_HOSTS = ("youtube.com", "m.youtube.com", "youtu.be")

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})\Z")

MIN_IMAGE_WIDTH = 100
MAX_IMAGE_WIDTH = 1200

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

# Matches the excerpt column width of the posts table
EXCERPT_MAX_LENGTH = 500

# Deepest node level the codec keeps below the doc root; deeper nodes are dropped
MAX_NESTING_DEPTH = 100

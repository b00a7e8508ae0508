# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""Syntactic checks for the URLs and ids a document references."""

import re
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from ..constants import (
    ALLOWED_URI_PATTERN,
    YOUTUBE_EMBED_BASE,
    YOUTUBE_HOSTS,
    YOUTUBE_ID_PATTERN,
)

_EMBED_PATH = re.compile(r"^/embed/([a-zA-Z0-9_-]+)")


def is_allowed_uri(uri: Any) -> bool:
    """True when ``uri`` uses one of the allow-listed link schemes (http, https, mailto, tel)"""
    if not uri or not isinstance(uri, str):
        return False
    return ALLOWED_URI_PATTERN.match(uri.strip()) is not None


def is_valid_video_id(video_id: Any) -> bool:
    """True for an 11 character YouTube video id"""
    if not video_id or not isinstance(video_id, str):
        return False
    return YOUTUBE_ID_PATTERN.match(video_id) is not None


def youtube_video_id(url_or_id: Any) -> Optional[str]:
    """
    Extract a YouTube video id from a pasted URL or bare id.

    Supports ``youtube.com/watch?v=ID``, ``youtu.be/ID`` and
    ``youtube.com/embed/ID``, with or without scheme and ``www.``.

    Args:
        url_or_id: Whatever the author pasted

    Returns:
        The video id, or None when nothing usable was found
    """
    if not url_or_id or not isinstance(url_or_id, str):
        return None

    candidate = url_or_id.strip()
    if is_valid_video_id(candidate):
        return candidate

    if not candidate.lower().startswith("http"):
        candidate = f"https://{candidate}"
    try:
        url = urlparse(candidate)
    except ValueError:
        return None

    host = (url.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    if host not in YOUTUBE_HOSTS:
        return None

    if host == "youtu.be":
        return url.path.lstrip("/").split("/")[0] or None

    query = parse_qs(url.query)
    if url.path == "/watch" and query.get("v"):
        return query["v"][0]
    match = _EMBED_PATH.match(url.path)
    if match:
        return match.group(1)
    return query["v"][0] if query.get("v") else None


def youtube_embed_url(video_id: Optional[str]) -> str:
    """Embeddable player URL for a video id (empty string without an id)"""
    if not video_id:
        return ""
    return f"{YOUTUBE_EMBED_BASE}{video_id}"

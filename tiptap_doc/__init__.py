# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
TipTap Doc - rich document model, canonical JSON codec and deterministic renderer
"""

from .model import DocumentManager, DocumentModel, ModelError, ParseError, dumps, loads, parse, serialize
from .renderer import RendererConfig, render, render_html

__version__ = "0.1.0"

__all__ = [
    "parse", "serialize", "dumps", "loads",
    "render", "render_html", "RendererConfig",
    "DocumentModel", "DocumentManager",
    "ModelError", "ParseError",
]

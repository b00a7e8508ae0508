# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from .config import DEFAULT_CONFIG, RendererConfig
from .html_renderer import render, render_html, render_nodes
from .presentation import Element, PresentationNode, TextRun

__all__ = [
    'render', 'render_html', 'render_nodes',
    'RendererConfig', 'DEFAULT_CONFIG',
    'Element', 'TextRun', 'PresentationNode',
]

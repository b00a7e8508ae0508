# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""
Command line interface for rendering, validating and storing documents.
"""

from .main import main

__all__ = ["main"]

# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

"""Error types raised by the document model and codec."""


class ModelError(ValueError):
    """Raised when the construction API is asked to build an invalid node or mark."""


class ParseError(ValueError):
    """
    Raised by the codec when the input cannot be a document at all.

    Only shape-level failures reach the caller: a root that is not an object,
    or one without a recognizable ``type``. Anything deeper is repaired node by node.

    Attributes:
        reason: Human readable description of the failure
        path: JSON path of the offending value (``$`` is the root)
    """

    def __init__(self, reason: str, path: str = "$"):
        super().__init__(f"{reason} (at {path})")
        self.reason = reason
        self.path = path

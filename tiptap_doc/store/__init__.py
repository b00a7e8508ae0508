# Copyright (c) 2023-2025 Datalayer, Inc.
# Distributed under the terms of the MIT License.

from .document_store import DocumentNotFound, DocumentStore, FileDocumentStore, MemoryDocumentStore

__all__ = ["DocumentNotFound", "DocumentStore", "FileDocumentStore", "MemoryDocumentStore"]

"""Storage backends for promptcanvas."""

from __future__ import annotations

from promptcanvas.storage.base import ShapeStoreProtocol, StorageProtocol
from promptcanvas.storage.memory import InMemoryStorage

__all__ = ["InMemoryStorage", "ShapeStoreProtocol", "StorageProtocol"]

"""Memory backends for testing and development."""

from __future__ import annotations

from .console import ConsoleBackend
from .fake import InMemoryBackend

__all__ = ["ConsoleBackend", "InMemoryBackend"]

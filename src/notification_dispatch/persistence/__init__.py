"""Store adapters."""

from __future__ import annotations

from .memory import InMemoryNotificationStore

__all__ = ["InMemoryNotificationStore"]

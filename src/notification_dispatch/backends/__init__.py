"""Channel backends and the capability table."""

from __future__ import annotations

from .memory import ConsoleBackend, InMemoryBackend
from .table import BackendTable, build_backend_table

__all__ = [
    "BackendTable",
    "ConsoleBackend",
    "InMemoryBackend",
    "build_backend_table",
]

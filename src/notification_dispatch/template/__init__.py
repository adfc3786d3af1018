"""Placeholder rendering."""

from __future__ import annotations

from .engine import TemplateRenderer
from .transforms import TRANSFORMS

__all__ = ["TRANSFORMS", "TemplateRenderer"]

"""Helpers shaping template variables into push payload data."""

from __future__ import annotations

import json
from typing import Any

from ...template.transforms import stringify


def string_values(data: dict[str, Any] | None) -> dict[str, str]:
    """FCM data messages accept string values only."""
    if not data:
        return {}
    return {
        str(key): value if isinstance(value, str) else _encode(value)
        for key, value in data.items()
    }


def _encode(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return stringify(value)

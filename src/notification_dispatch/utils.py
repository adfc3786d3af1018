"""Small shared helpers."""

from __future__ import annotations

import json
from typing import Any


def json_safe(data: dict[str, Any] | None) -> dict[str, Any]:
    """Round-trip through JSON so dates and other objects become strings."""
    if not data:
        return {}
    return json.loads(json.dumps(data, default=str))

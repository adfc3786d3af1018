"""Column types shared by the notification tables."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON, DateTime, TypeDecorator


class JSONType(TypeDecorator[Any]):
    """
    JSON column stored as JSONB on PostgreSQL and plain JSON elsewhere.

    Bound values are normalized first, so dates, tuples and other values found in
    template variables are written in their string or list form.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Any) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Any, dialect: Any) -> Any:
        if value is None:
            return None
        return json.loads(json.dumps(value, default=str))


class UTCDateTime(TypeDecorator[datetime]):
    """
    ``DateTime(timezone=True)`` that always reads back timezone-aware UTC values.

    SQLite keeps no offset, so values are converted to UTC before binding and
    naive results are taken to be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

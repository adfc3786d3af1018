"""Email channel backends."""

from __future__ import annotations

from .smtp import SmtpEmailBackend

__all__ = ["SmtpEmailBackend"]

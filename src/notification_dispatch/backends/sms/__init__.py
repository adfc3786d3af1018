"""SMS channel backends."""

from __future__ import annotations

from .twilio import TwilioSmsBackend

__all__ = ["TwilioSmsBackend"]

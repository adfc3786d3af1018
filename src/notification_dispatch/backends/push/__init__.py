"""Push channel backends."""

from __future__ import annotations

from .apns import ApnsPushBackend
from .fcm import FcmPushBackend

__all__ = ["ApnsPushBackend", "FcmPushBackend"]

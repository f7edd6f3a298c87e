"""Use cases for user account events."""

from .announce_registration import announce_registration
from .record_login import record_login

__all__ = [
    "announce_registration",
    "record_login",
]

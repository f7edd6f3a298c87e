"""Aggregate application use cases."""

from .budgets import announce_budget_request
from .users import announce_registration, record_login

__all__ = [
    "announce_budget_request",
    "announce_registration",
    "record_login",
]

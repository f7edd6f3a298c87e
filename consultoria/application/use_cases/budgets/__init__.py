"""Use cases for budget workflow events."""

from .announce_budget_request import announce_budget_request

__all__ = ["announce_budget_request"]

"""Domain entity representing a user role."""

from dataclasses import dataclass


@dataclass
class Role:
    """Role assigned to a user; ``alias`` is the value notifications target."""

    id: int | None
    name: str
    alias: str

    def display_name(self) -> str:
        return self.alias.upper()


__all__ = ["Role"]

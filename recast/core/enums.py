"""Naming policy and member kind enumerations."""

from __future__ import annotations

from enum import Enum


class NamingPolicy(Enum):
    """How source and target member names are compared."""

    EXACT = "exact"
    IGNORE_CASE = "ignore_case"

    def fold(self, name: str) -> str:
        """Normalize a member name for comparison under this policy."""
        if self is NamingPolicy.IGNORE_CASE:
            return name.casefold()
        return name


class MemberKind(Enum):
    """Where a member descriptor was discovered."""

    FIELD = "field"  # dataclass or Pydantic field
    ATTRIBUTE = "attribute"  # class-level annotation on a plain class
    PARAMETER = "parameter"  # __init__ parameter of a plain class
    PROPERTY = "property"
    KEY = "key"  # key of an open Mapping source

"""Recast exception hierarchy.

Errors raised by transformers are never wrapped: they reach the caller
unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from recast.mapping.descriptor import MemberDescriptor


class RecastError(Exception):
    """Base exception for all Recast errors."""


# --- Mapping ---


class MappingError(RecastError):
    """Base for mapping errors."""


class AssignmentTypeError(MappingError):
    """Raised when a resolved value is not assignable to its target member."""

    def __init__(self, value_type: type, target_member: MemberDescriptor) -> None:
        self.value_type = value_type
        self.target_member = target_member
        super().__init__(
            f"Cannot assign value of type '{value_type.__name__}' to "
            f"{target_member.owner.__name__}.{target_member.name} "
            f"(declared {_type_name(target_member.annotation)})"
        )


class ConstructionError(MappingError):
    """Raised when no instance of the target type could be produced."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        super().__init__(f"Cannot construct {target_class}: {detail}")


class PlanCompilationError(MappingError):
    """Raised when a type pair or configuration cannot be compiled into a plan."""


class TransformerError(MappingError):
    """Raised when a transformer does not honour the engine it runs in."""


def _type_name(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)

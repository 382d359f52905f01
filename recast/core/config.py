"""Mapping configuration.

MappingConfig is a frozen Pydantic model: immutable for the duration of a
mapping call and never mutated by the engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from recast.core.enums import NamingPolicy


class MappingConfig(BaseModel):
    """Directives for one mapping: renames, skips, transformers, error policy.

    Attributes:
        naming: Name comparison policy for member matching.
        renames: Ordered ``(source_name, target_name)`` directives. A dict
            is accepted and kept in insertion order.
        skips: Member names excluded on both sides.
        transformers: Transformers consulted in order; first acceptance wins.
        throw_exceptions: Raise on type mismatches (default) or skip the
            offending member.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    naming: NamingPolicy = NamingPolicy.EXACT
    renames: tuple[tuple[str, str], ...] = ()
    skips: frozenset[str] = frozenset()
    transformers: tuple[Any, ...] = ()
    throw_exceptions: bool = True

    @field_validator("renames", mode="before")
    @classmethod
    def _renames_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @field_validator("skips", mode="before")
    @classmethod
    def _skips_from_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return frozenset({value})
        return value

    @property
    def ignore_case(self) -> bool:
        return self.naming is NamingPolicy.IGNORE_CASE

    @property
    def has_transformers(self) -> bool:
        return bool(self.transformers)

"""Mapping plan data classes.

Frozen dataclasses representing compiled mapping plans. Owned by the
PlanCache and shared read-only by every call mapping the same type pair
under the same configuration.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from recast.core.types import unwrap_optional
from recast.mapping.accessor import Getter, Setter
from recast.mapping.descriptor import MemberDescriptor


@dataclass(frozen=True)
class MemberPair:
    """A source member, its target member, and their compiled accessors."""

    source: MemberDescriptor
    target: MemberDescriptor
    getter: Getter
    setter: Setter | None
    storage_writer: Setter

    def write(self, instance: Any, value: Any) -> None:
        """Write through the setter, or into storage for write-once members."""
        if self.setter is not None:
            self.setter(instance, value)
        else:
            self.storage_writer(instance, value)


@dataclass(frozen=True)
class Binding:
    """One initializer parameter fed by one member pair."""

    pair_index: int
    parameter: str
    positional: bool = False
    default: Any = field(default=inspect.Parameter.empty, compare=False)

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty


@dataclass(frozen=True)
class Factory:
    """Direct construction of the target through a matched initializer."""

    initializer: Callable[..., Any]
    bindings: tuple[Binding, ...]
    create: Callable[[Mapping[int, Any]], Any]  # pair index -> value

    @property
    def consumed(self) -> frozenset[int]:
        """Indexes of the pairs written by the initializer."""
        return frozenset(b.pair_index for b in self.bindings)


@dataclass(frozen=True)
class MappingPlan:
    """Compiled plan for one (source type, target type, configuration) shape."""

    source_type: type
    target_type: type
    pairs: tuple[MemberPair, ...] = field(default_factory=tuple)
    factory: Factory | None = None

    def is_self_referential(self, pair: MemberPair) -> bool:
        """True when *pair* maps a nested source-typed value to the target type."""
        return (
            self.source_type is not self.target_type
            and unwrap_optional(pair.source.annotation) is self.source_type
            and unwrap_optional(pair.target.annotation) is self.target_type
        )

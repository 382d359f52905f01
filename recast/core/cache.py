"""Plan cache - compiles mapping plans once per type pair and configuration shape.

Two process-wide caches live here: one for statically known source types and
one for sources whose concrete type (and, for open mappings, key set) is only
discovered at call time. Both are intentionally unbounded: their size is the
number of distinct type pairs the program maps.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

from recast.core.config import MappingConfig
from recast.core.enums import NamingPolicy
from recast.mapping.accessor import compile_getter, compile_setter, compile_storage_writer
from recast.mapping.descriptor import (
    TypeDescriptor,
    describe,
    describe_mapping,
    describe_open_target,
)
from recast.mapping.initializer import match_initializer
from recast.mapping.plan import MappingPlan, MemberPair
from recast.mapping.resolver import filter_skipped, resolve_members

logger = logging.getLogger(__name__)


class PlanKey(NamedTuple):
    """Cache key. Directives are keyed by content, not by count."""

    source_type: type
    target_type: type
    naming: NamingPolicy
    renames: tuple[tuple[str, str], ...]
    skips: frozenset[str]
    shape: tuple[str, ...] = ()  # key set of an open Mapping source


def compile_plan(
    source: TypeDescriptor,
    target: TypeDescriptor,
    config: MappingConfig,
) -> MappingPlan:
    """Resolve members, compile accessors, and match an initializer."""
    policy = config.naming
    sources = filter_skipped(source.members, config.skips, policy)
    targets = [m for m in filter_skipped(target.members, config.skips, policy) if m.assignable]

    pairs = tuple(
        MemberPair(
            source=s,
            target=t,
            getter=compile_getter(s),
            setter=compile_setter(t),
            storage_writer=compile_storage_writer(t),
        )
        for s, t in resolve_members(sources, targets, policy, config.renames)
    )
    plan = MappingPlan(source_type=source.type, target_type=target.type, pairs=pairs)
    # Nested values are mapped after construction, never passed to an initializer
    nested = frozenset(i for i, pair in enumerate(pairs) if plan.is_self_referential(pair))
    factory = match_initializer(target.type, pairs, policy, nested)
    return dataclasses.replace(plan, factory=factory)


class PlanCache:
    """Thread-safe memo of compiled MappingPlans.

    Reads take no lock. A miss compiles outside the lock and inserts with
    ``setdefault`` under it, so concurrent misses for one key may compile
    twice but the first inserted plan wins.
    """

    def __init__(self) -> None:
        self._plans: dict[PlanKey, MappingPlan] = {}
        self._runtime_plans: dict[PlanKey, MappingPlan] = {}
        self._open_plans: dict[PlanKey, MappingPlan] = {}
        self._lock = threading.Lock()
        self._compilations = 0

    def build_plan(
        self,
        source_type: type,
        target_type: type,
        config: MappingConfig,
    ) -> MappingPlan:
        """Get or compile the plan for a statically known source type."""
        key = PlanKey(source_type, target_type, config.naming, config.renames, config.skips)
        plan = self._plans.get(key)
        if plan is None:
            plan = self._store(
                self._plans,
                key,
                lambda: compile_plan(describe(source_type), describe(target_type), config),
            )
        return plan

    def runtime_plan(
        self,
        source: Any,
        target_type: type,
        config: MappingConfig,
    ) -> MappingPlan:
        """Get or compile the plan for the concrete runtime type of *source*."""
        source_type = type(source)
        is_open = isinstance(source, Mapping)
        shape = tuple(k for k in source if isinstance(k, str)) if is_open else ()
        key = PlanKey(
            source_type, target_type, config.naming, config.renames, config.skips, shape
        )
        plan = self._runtime_plans.get(key)
        if plan is None:

            def compile_runtime() -> MappingPlan:
                descriptor = describe_mapping(source) if is_open else describe(source_type)
                return compile_plan(descriptor, describe(target_type), config)

            plan = self._store(self._runtime_plans, key, compile_runtime)
        return plan

    def open_plan(self, source: Any, config: MappingConfig) -> MappingPlan:
        """Get or compile the plan copying *source* into a plain ``dict``."""
        source_type = type(source)
        is_open = isinstance(source, Mapping)
        shape = tuple(k for k in source if isinstance(k, str)) if is_open else ()
        key = PlanKey(
            source_type, dict, config.naming, config.renames, config.skips, shape
        )
        plan = self._open_plans.get(key)
        if plan is None:

            def compile_open() -> MappingPlan:
                descriptor = describe_mapping(source) if is_open else describe(source_type)
                target = describe_open_target(descriptor, config.renames, config.naming)
                return compile_plan(descriptor, target, config)

            plan = self._store(self._open_plans, key, compile_open)
        return plan

    def _store(
        self,
        plans: dict[PlanKey, MappingPlan],
        key: PlanKey,
        compiler: Callable[[], MappingPlan],
    ) -> MappingPlan:
        plan = compiler()
        with self._lock:
            self._compilations += 1
            stored = plans.setdefault(key, plan)
        logger.debug(
            "Compiled plan %s -> %s (%d pairs, factory=%s)",
            key.source_type.__name__,
            key.target_type.__name__,
            len(plan.pairs),
            plan.factory is not None,
        )
        return stored

    @property
    def compilations(self) -> int:
        """Number of plan compilations performed so far."""
        return self._compilations

    def clear(self) -> None:
        """Drop every cached plan."""
        with self._lock:
            self._plans.clear()
            self._runtime_plans.clear()
            self._open_plans.clear()
            self._compilations = 0

    def __len__(self) -> int:
        """Number of cached plans across all caches."""
        return len(self._plans) + len(self._runtime_plans) + len(self._open_plans)


default_cache = PlanCache()

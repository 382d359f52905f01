"""Copy/build engines.

Mapper and AsyncMapper look up (or compile) the mapping plan, construct the
target through the initializer fast path or a default instance, then drive
every member pair through the transform resolution chain in plan order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from recast.core.cache import PlanCache, default_cache
from recast.core.config import MappingConfig
from recast.core.exceptions import AssignmentTypeError, ConstructionError, PlanCompilationError
from recast.core.instance import new_instance
from recast.core.types import is_assignable, zero_value
from recast.mapping.chain import (
    Memo,
    memo_scope,
    resolve_value,
    resolve_value_async,
    write_value,
)
from recast.mapping.plan import MappingPlan, MemberPair

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _select_plan(
    cache: PlanCache,
    config: MappingConfig,
    source: Any,
    target_type: type,
    source_type: type | None,
) -> MappingPlan:
    """Static plan for a declared source type, runtime plan otherwise."""
    if not isinstance(target_type, type):
        raise PlanCompilationError(f"Target type must be a class, got {target_type!r}")
    if source_type is None or source_type is object or issubclass(source_type, Mapping):
        return cache.runtime_plan(source, target_type, config)
    return cache.build_plan(source_type, target_type, config)


def _construct(
    plan: MappingPlan,
    config: MappingConfig,
    source: Any,
) -> tuple[Any, Sequence[MemberPair]]:
    """Create the target and return it with the pairs still to be written.

    The initializer fast path is only taken when no transformers are
    configured; pairs consumed by the initializer are not written again.
    Under the suppress policy a rejected argument is replaced by the
    parameter default, or the zero value of the member type.
    """
    factory = plan.factory
    if factory is None or config.transformers:
        return new_instance(plan.target_type), plan.pairs

    values = {
        b.pair_index: plan.pairs[b.pair_index].getter(source) for b in factory.bindings
    }
    for binding in factory.bindings:
        index = binding.pair_index
        target_member = plan.pairs[index].target
        if is_assignable(values[index], target_member.annotation):
            continue
        if config.throw_exceptions:
            raise AssignmentTypeError(type(values[index]), target_member)
        logger.debug(
            "Skipped %s.%s: %s value not assignable",
            plan.target_type.__name__,
            target_member.name,
            type(values[index]).__name__,
        )
        # Rejected arguments fall back to what the member holds when never mapped
        values[index] = (
            binding.default if binding.has_default else zero_value(target_member.annotation)
        )

    try:
        target = factory.create(values)
    except (TypeError, ValueError) as e:
        raise ConstructionError(plan.target_type.__name__, str(e)) from e
    consumed = factory.consumed
    return target, tuple(p for i, p in enumerate(plan.pairs) if i not in consumed)


class Mapper:
    """Synchronous copy/build engine.

    Safe to reuse sequentially. Plans are shared and immutable; the
    resolution memo is private to each call.

    Args:
        cache: Plan cache to use. Defaults to the process-wide cache.
    """

    def __init__(self, cache: PlanCache | None = None) -> None:
        self._cache = cache if cache is not None else default_cache

    @property
    def cache(self) -> PlanCache:
        return self._cache

    def build(
        self,
        config: MappingConfig,
        source: Any,
        target_type: type[T],
        source_type: type | None = None,
    ) -> T | None:
        """Build a new *target_type* instance from *source*.

        Returns None, without side effects, when *source* is None.

        Args:
            config: Mapping directives.
            source: Instance (or mapping) to read from.
            target_type: Class to construct.
            source_type: Declared source class. When omitted the concrete
                runtime type of *source* is used.

        Raises:
            AssignmentTypeError: On a type mismatch under the default policy.
            ConstructionError: If no target instance can be produced.
        """
        if source is None:
            return None
        plan = _select_plan(self._cache, config, source, target_type, source_type)
        memo: Memo = {}
        with memo_scope(memo):
            target, pairs = _construct(plan, config, source)
            self._copy_pairs(plan, pairs, config, source, target, memo)
        return target  # type: ignore[no-any-return]

    def copy(
        self,
        config: MappingConfig,
        source: Any,
        target: T,
        source_type: type | None = None,
    ) -> T:
        """Copy mapped members of *source* into the existing *target*."""
        if source is None:
            return target
        plan = _select_plan(self._cache, config, source, type(target), source_type)
        memo: Memo = {}
        with memo_scope(memo):
            self._copy_pairs(plan, plan.pairs, config, source, target, memo)
        return target

    def to_dict(self, config: MappingConfig, source: Any) -> dict[str, Any] | None:
        """Shape *source* into a plain ``dict`` keyed by target member names.

        Renames, skips and transformers apply as for a typed target. Returns
        None when *source* is None.
        """
        if source is None:
            return None
        plan = self._cache.open_plan(source, config)
        shaped: dict[str, Any] = {}
        memo: Memo = {}
        with memo_scope(memo):
            self._copy_pairs(plan, plan.pairs, config, source, shaped, memo)
        return shaped

    def _copy_pairs(
        self,
        plan: MappingPlan,
        pairs: Sequence[MemberPair],
        config: MappingConfig,
        source: Any,
        target: Any,
        memo: Memo,
    ) -> None:
        def build_nested(value: Any) -> Any:
            return Mapper(self._cache).build(config, value, plan.target_type, plan.source_type)

        for pair in pairs:
            value = resolve_value(plan, pair, source, config, memo, build_nested)
            write_value(pair, target, value, config, memo)


class AsyncMapper:
    """Asynchronous copy/build engine.

    Awaits async transformers. Pairs are still processed one at a time in
    plan order, since later pairs may read values resolved by earlier ones.

    Args:
        cache: Plan cache to use. Defaults to the process-wide cache.
    """

    def __init__(self, cache: PlanCache | None = None) -> None:
        self._cache = cache if cache is not None else default_cache

    @property
    def cache(self) -> PlanCache:
        return self._cache

    async def build(
        self,
        config: MappingConfig,
        source: Any,
        target_type: type[T],
        source_type: type | None = None,
    ) -> T | None:
        """Build a new *target_type* instance from *source* asynchronously."""
        if source is None:
            return None
        plan = _select_plan(self._cache, config, source, target_type, source_type)
        memo: Memo = {}
        with memo_scope(memo):
            target, pairs = _construct(plan, config, source)
            await self._copy_pairs(plan, pairs, config, source, target, memo)
        return target  # type: ignore[no-any-return]

    async def copy(
        self,
        config: MappingConfig,
        source: Any,
        target: T,
        source_type: type | None = None,
    ) -> T:
        """Copy mapped members of *source* into the existing *target* asynchronously."""
        if source is None:
            return target
        plan = _select_plan(self._cache, config, source, type(target), source_type)
        memo: Memo = {}
        with memo_scope(memo):
            await self._copy_pairs(plan, plan.pairs, config, source, target, memo)
        return target

    async def to_dict(self, config: MappingConfig, source: Any) -> dict[str, Any] | None:
        """Shape *source* into a plain ``dict`` asynchronously."""
        if source is None:
            return None
        plan = self._cache.open_plan(source, config)
        shaped: dict[str, Any] = {}
        memo: Memo = {}
        with memo_scope(memo):
            await self._copy_pairs(plan, plan.pairs, config, source, shaped, memo)
        return shaped

    async def _copy_pairs(
        self,
        plan: MappingPlan,
        pairs: Sequence[MemberPair],
        config: MappingConfig,
        source: Any,
        target: Any,
        memo: Memo,
    ) -> None:
        async def build_nested(value: Any) -> Any:
            return await AsyncMapper(self._cache).build(
                config, value, plan.target_type, plan.source_type
            )

        for pair in pairs:
            value = await resolve_value_async(plan, pair, source, config, memo, build_nested)
            write_value(pair, target, value, config, memo)

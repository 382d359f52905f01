"""Transform resolution chain - decide the value written for each member pair.

Order per pair:

1. the memoized value for the source member, offered as ``prior`` to the
   transformers (first acceptance wins);
2. the transformers again, without prior;
3. the memoized value itself, a recursive map for self-referential members,
   or the compiled getter;
4. a second read through the getter when step 3 produced None;
5. type check and write (see write_value).

The memo is private to one mapping call. Transformer functions can read it
through ``resolved()`` while that call is running.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from recast.core.config import MappingConfig
from recast.core.exceptions import AssignmentTypeError, TransformerError
from recast.core.types import is_assignable
from recast.mapping.descriptor import MemberDescriptor
from recast.mapping.plan import MappingPlan, MemberPair
from recast.mapping.protocol import DECLINED, NO_PRIOR, Resolution

logger = logging.getLogger(__name__)

Memo = dict[MemberDescriptor, Any]

_active_memo: ContextVar[Memo | None] = ContextVar("recast_active_memo", default=None)


@contextmanager
def memo_scope(memo: Memo) -> Iterator[Memo]:
    """Expose *memo* to resolved() for the duration of one mapping call."""
    token = _active_memo.set(memo)
    try:
        yield memo
    finally:
        _active_memo.reset(token)


def resolved(name: str, default: Any = None) -> Any:
    """Value already resolved for member *name* in the mapping call in progress.

    The most recent entry wins, so a written target value shadows the source
    value it was derived from.
    """
    memo = _active_memo.get()
    if memo:
        for member, value in reversed(memo.items()):
            if member.name == name:
                return value
    return default


def _ensure_sync(result: Resolution | Awaitable[Resolution], transformer: Any) -> Resolution:
    if inspect.isawaitable(result):
        close = getattr(result, "close", None)
        if close is not None:
            close()
        raise TransformerError(
            f"{transformer!r} returned an awaitable; use AsyncMapper for async transformers"
        )
    return result


def consult(
    transformers: Sequence[Any],
    source: Any,
    pair: MemberPair,
    memo: Memo,
) -> Resolution:
    """Steps 1 and 2: the first transformer acceptance, memoized under the source member."""
    prior = memo.get(pair.source, NO_PRIOR)
    if prior is not NO_PRIOR:
        for transformer in transformers:
            result = _ensure_sync(
                transformer.try_resolve(source, pair.source, pair.target, prior), transformer
            )
            if result.accepted:
                memo[pair.source] = result.value
                return result

    for transformer in transformers:
        result = _ensure_sync(
            transformer.try_resolve(source, pair.source, pair.target), transformer
        )
        if result.accepted:
            memo[pair.source] = result.value
            return result
    return DECLINED


async def consult_async(
    transformers: Sequence[Any],
    source: Any,
    pair: MemberPair,
    memo: Memo,
) -> Resolution:
    """Async variant of consult; awaits transformers that suspend."""
    prior = memo.get(pair.source, NO_PRIOR)
    if prior is not NO_PRIOR:
        for transformer in transformers:
            result = transformer.try_resolve(source, pair.source, pair.target, prior)
            if inspect.isawaitable(result):
                result = await result
            if result.accepted:
                memo[pair.source] = result.value
                return result

    for transformer in transformers:
        result = transformer.try_resolve(source, pair.source, pair.target)
        if inspect.isawaitable(result):
            result = await result
        if result.accepted:
            memo[pair.source] = result.value
            return result
    return DECLINED


def _fallback_read(pair: MemberPair, source: Any, value: Any) -> Any:
    # Step 4
    if value is None and pair.source.readable:
        fresh = pair.getter(source)
        if fresh is not None:
            return fresh
    return value


def resolve_value(
    plan: MappingPlan,
    pair: MemberPair,
    source: Any,
    config: MappingConfig,
    memo: Memo,
    build_nested: Callable[[Any], Any],
) -> Any:
    """Resolve the value to write for *pair*."""
    if config.transformers:
        resolution = consult(config.transformers, source, pair, memo)
        if resolution.accepted:
            return resolution.value

    prior = memo.get(pair.source, NO_PRIOR)
    if prior is not NO_PRIOR:
        value = prior
    elif plan.is_self_referential(pair):
        value = build_nested(pair.getter(source))
    else:
        value = pair.getter(source)
    return _fallback_read(pair, source, value)


async def resolve_value_async(
    plan: MappingPlan,
    pair: MemberPair,
    source: Any,
    config: MappingConfig,
    memo: Memo,
    build_nested: Callable[[Any], Awaitable[Any]],
) -> Any:
    """Async variant of resolve_value."""
    if config.transformers:
        resolution = await consult_async(config.transformers, source, pair, memo)
        if resolution.accepted:
            return resolution.value

    prior = memo.get(pair.source, NO_PRIOR)
    if prior is not NO_PRIOR:
        value = prior
    elif plan.is_self_referential(pair):
        value = await build_nested(pair.getter(source))
    else:
        value = pair.getter(source)
    return _fallback_read(pair, source, value)


def write_value(
    pair: MemberPair,
    target: Any,
    value: Any,
    config: MappingConfig,
    memo: Memo,
) -> bool:
    """Step 5: type-check, write, and memoize under the target member.

    Returns False when the pair was skipped under the suppress policy.

    Raises:
        AssignmentTypeError: If the value does not fit the target member
            and the configuration throws.
    """
    if not is_assignable(value, pair.target.annotation):
        if config.throw_exceptions:
            raise AssignmentTypeError(type(value), pair.target)
        logger.debug(
            "Skipped %s.%s: %s value not assignable",
            pair.target.owner.__name__,
            pair.target.name,
            type(value).__name__,
        )
        return False
    pair.write(target, value)
    memo[pair.target] = value
    return True

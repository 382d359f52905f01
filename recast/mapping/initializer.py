"""Initializer matching - find a constructor fully satisfiable by mapped members.

Candidates are the class constructor itself plus any classmethod marked with
``@initializer``. The fully-satisfiable candidate binding the fewest
parameters wins; ties go to the first one found.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from recast.core.enums import NamingPolicy
from recast.core.types import accepts
from recast.mapping.descriptor import init_signature
from recast.mapping.plan import Binding, Factory, MemberPair

logger = logging.getLogger(__name__)

F = TypeVar("F")

_INITIALIZER_MARK = "__recast_initializer__"
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def initializer(func: F) -> F:
    """Mark a classmethod as an alternate initializer for factory matching.

    Works above or below ``@classmethod``::

        @initializer
        @classmethod
        def from_parts(cls, first: str, last: str) -> Person: ...
    """
    target = func.__func__ if isinstance(func, classmethod) else func
    setattr(target, _INITIALIZER_MARK, True)
    return func


def _candidates(cls: type) -> list[Callable[..., Any]]:
    candidates: list[Callable[..., Any]] = [cls]
    seen: set[str] = set()
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            # The most derived definition of a name decides, marked or not
            if name in seen:
                continue
            seen.add(name)
            if isinstance(attr, classmethod) and getattr(attr.__func__, _INITIALIZER_MARK, False):
                candidates.append(getattr(cls, name))
    return candidates


def _bind(
    sig: inspect.Signature,
    pairs: Sequence[MemberPair],
    policy: NamingPolicy,
    reserved: frozenset[int],
) -> tuple[Binding, ...] | None:
    """Bind parameters to pairs; None when a required parameter is unmet."""
    by_target: dict[str, int] = {}
    for index, pair in enumerate(pairs):
        by_target.setdefault(policy.fold(pair.target.name), index)

    bindings: list[Binding] = []
    used: set[int] = set(reserved)
    for param in sig.parameters.values():
        if param.kind in _VARIADIC:
            continue
        required = param.default is param.empty
        index = by_target.get(policy.fold(param.name))
        if index is None or index in used:
            if required:
                return None
            continue

        pair = pairs[index]
        declared = param.annotation
        if declared is param.empty or isinstance(declared, str):
            declared = pair.target.annotation
        if not accepts(declared, pair.source.annotation):
            if required:
                return None
            continue

        used.add(index)
        bindings.append(
            Binding(
                pair_index=index,
                parameter=param.name,
                positional=param.kind is param.POSITIONAL_ONLY,
                default=param.default,
            )
        )
    return tuple(bindings)


def compile_factory(init: Callable[..., Any], bindings: tuple[Binding, ...]) -> Factory:
    """Compile ``(values by pair index) -> instance`` for an initializer."""
    positional = tuple(b.pair_index for b in bindings if b.positional)
    keyword = tuple((b.parameter, b.pair_index) for b in bindings if not b.positional)

    def create(values: Mapping[int, Any]) -> Any:
        return init(
            *[values[index] for index in positional],
            **{name: values[index] for name, index in keyword},
        )

    return Factory(initializer=init, bindings=bindings, create=create)


def match_initializer(
    cls: type,
    pairs: Sequence[MemberPair],
    policy: NamingPolicy = NamingPolicy.EXACT,
    reserved: frozenset[int] = frozenset(),
) -> Factory | None:
    """Select the best initializer for *cls* given the mapped pairs.

    Pairs whose index is in *reserved* are never bound. Returns None when no
    candidate binds at least one parameter.
    """
    if not pairs:
        return None

    best: tuple[Callable[..., Any], tuple[Binding, ...]] | None = None
    for candidate in _candidates(cls):
        sig = init_signature(candidate)
        if sig is None:
            continue
        bindings = _bind(sig, pairs, policy, reserved)
        if not bindings:
            continue
        if best is None or len(bindings) < len(best[1]):
            best = (candidate, bindings)

    if best is None:
        return None

    init, bindings = best
    logger.debug(
        "Matched initializer %s for %s (%d parameters)",
        getattr(init, "__qualname__", repr(init)),
        cls.__name__,
        len(bindings),
    )
    return compile_factory(init, bindings)

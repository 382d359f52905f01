"""Type compatibility helpers over ``typing`` annotations.

``is_assignable`` answers the runtime question (can this value be written to
a member declared as ``annotation``); ``accepts`` answers the static one used
when matching initializer parameters against mapped members.
"""

from __future__ import annotations

import types
from typing import Annotated, Any, ClassVar, Literal, TypeVar, Union, get_args, get_origin

_UNION_ORIGINS = (Union, types.UnionType)
_NONE_TYPE = type(None)


def strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *extras]`` into ``(T, extras)``."""
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        return base, tuple(extras)
    return annotation, ()


def is_class_var(annotation: Any) -> bool:
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def unwrap_optional(annotation: Any) -> Any:
    """Return ``T`` for ``T | None``; other annotations unchanged."""
    if get_origin(annotation) in _UNION_ORIGINS:
        arms = [arm for arm in get_args(annotation) if arm is not _NONE_TYPE]
        if len(arms) == 1:
            return arms[0]
    return annotation


def _normalize(annotation: Any) -> Any:
    annotation, _ = strip_annotated(annotation)
    # NewType chains down to a real class
    while hasattr(annotation, "__supertype__"):
        annotation = annotation.__supertype__
    return annotation


def _is_open(annotation: Any) -> bool:
    return (
        annotation is Any
        or annotation is object
        or isinstance(annotation, (TypeVar, str))
    )


def is_assignable(value: Any, annotation: Any) -> bool:
    """Check whether *value* may be written to a member declared as *annotation*.

    ``None`` is always assignable. Annotations that cannot be checked at
    runtime accept any value.
    """
    if value is None:
        return True
    annotation = _normalize(annotation)
    if _is_open(annotation):
        return True

    origin = get_origin(annotation)
    if origin in _UNION_ORIGINS:
        return any(is_assignable(value, arm) for arm in get_args(annotation))
    if origin is Literal:
        return value in get_args(annotation)
    if origin is not None:
        annotation = origin

    if annotation is float:
        return isinstance(value, (int, float))
    if annotation is complex:
        return isinstance(value, (int, float, complex))
    if isinstance(annotation, type):
        try:
            return isinstance(value, annotation)
        except TypeError:
            return True
    return True


def accepts(expected: Any, actual: Any) -> bool:
    """Check whether a slot declared *expected* accepts members declared *actual*."""
    expected = _normalize(expected)
    actual = _normalize(actual)
    if _is_open(expected) or _is_open(actual) or expected == actual:
        return True

    expected_origin = get_origin(expected)
    actual_origin = get_origin(actual)

    if actual_origin in _UNION_ORIGINS:
        # None flows anywhere, so Optional[T] only has to satisfy on T
        return all(
            arm is _NONE_TYPE or accepts(expected, arm) for arm in get_args(actual)
        )
    if expected_origin in _UNION_ORIGINS:
        return any(accepts(arm, actual) for arm in get_args(expected))
    if actual_origin is Literal:
        return all(is_assignable(v, expected) for v in get_args(actual))
    if expected_origin is Literal:
        return False

    expected = expected_origin or expected
    actual = actual_origin or actual
    if expected is float and actual in (int, float):
        return True
    if isinstance(expected, type) and isinstance(actual, type):
        try:
            return issubclass(actual, expected)
        except TypeError:
            return True
    return True


def zero_value(annotation: Any) -> Any:
    """Value an unset member declared as *annotation* starts from.

    Builtin types give their no-argument value (``int()`` -> ``0``,
    ``str()`` -> ``""``), optional and unknown types give ``None``.
    """
    annotation = _normalize(annotation)
    if _is_open(annotation):
        return None

    origin = get_origin(annotation)
    if origin in _UNION_ORIGINS:
        arms = get_args(annotation)
        if _NONE_TYPE in arms:
            return None
        return zero_value(arms[0])
    if origin is Literal:
        return get_args(annotation)[0]
    if origin is not None:
        annotation = origin

    if isinstance(annotation, type) and annotation.__module__ == "builtins":
        try:
            return annotation()
        except TypeError:
            return None
    return None

"""Convenience entry points.

Thin wrappers over Mapper / AsyncMapper for one-off calls.
"""

from __future__ import annotations

from typing import Any, TypeVar

from recast.core.config import MappingConfig
from recast.core.engine import AsyncMapper, Mapper
from recast.mapping.transformers import ValueTransformer

T = TypeVar("T")

_EMPTY = MappingConfig()


def to(source: Any, target_type: type[T], config: MappingConfig | None = None) -> T | None:
    """Map *source* onto a new *target_type* instance."""
    return Mapper().build(config or _EMPTY, source, target_type)


async def to_async(
    source: Any,
    target_type: type[T],
    config: MappingConfig | None = None,
) -> T | None:
    """Map *source* onto a new *target_type* instance, awaiting async transformers."""
    return await AsyncMapper().build(config or _EMPTY, source, target_type)


def copy_into(target: T, source: Any, config: MappingConfig | None = None) -> T:
    """Copy the mapped members of *source* into the existing *target*."""
    return Mapper().copy(config or _EMPTY, source, target)


async def copy_into_async(target: T, source: Any, config: MappingConfig | None = None) -> T:
    """Async variant of copy_into."""
    return await AsyncMapper().copy(config or _EMPTY, source, target)


def with_(instance: T, config: MappingConfig | None = None, /, **changes: Any) -> T | None:
    """Return a copy of *instance* with the given members replaced.

    Works for immutable types: the copy is built, never mutated in place.
    Replacements take precedence over the configuration's transformers.

    Example::

        older = with_(person, age=person.age + 1)
    """
    config = config or _EMPTY
    if changes:
        overrides = tuple(ValueTransformer(name, value) for name, value in changes.items())
        config = config.model_copy(update={"transformers": overrides + config.transformers})
    return Mapper().build(config, instance, type(instance), type(instance))


def to_dict(source: Any, config: MappingConfig | None = None) -> dict[str, Any] | None:
    """Shape *source* into a plain ``dict``.

    Example::

        row = to_dict(person, configure().rename("last_name", "surname").skip("age").build())
    """
    return Mapper().to_dict(config or _EMPTY, source)


async def to_dict_async(source: Any, config: MappingConfig | None = None) -> dict[str, Any] | None:
    """Async variant of to_dict."""
    return await AsyncMapper().to_dict(config or _EMPTY, source)

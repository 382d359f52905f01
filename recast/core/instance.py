"""Default-instance factory.

Used when a plan has no initializer fast path, or when transformers are
configured. Detection order:

1. ``target_class()``
2. Pydantic BaseModel -> ``model_construct()`` (no validation), required
   fields filled with placeholders
3. ``target_class.__new__(target_class)`` (uninitialized instance), every
   declared member primed with its default or the zero value of its type

Members the mapping never writes (skipped, unmatched, or rejected under the
suppress policy) therefore read as their default instead of being absent.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, TypeVar

from recast.core.exceptions import ConstructionError
from recast.core.types import zero_value
from recast.mapping.accessor import compile_storage_writer
from recast.mapping.descriptor import describe, init_signature, is_pydantic_model

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_instance(target_class: type[T]) -> T:
    """Produce an instance of *target_class* without mapped arguments.

    Raises:
        ConstructionError: If every construction strategy fails.
    """
    try:
        return target_class()
    except (TypeError, ValueError) as e:
        logger.debug("%s() failed (%s); trying fallbacks", target_class.__name__, e)

    if is_pydantic_model(target_class):
        placeholders = {
            name: zero_value(info.annotation)
            for name, info in target_class.model_fields.items()  # type: ignore[attr-defined]
            if info.is_required()
        }
        return target_class.model_construct(**placeholders)  # type: ignore[attr-defined, no-any-return]

    try:
        instance = target_class.__new__(target_class)
    except TypeError as e:
        raise ConstructionError(target_class.__name__, str(e)) from e
    _prime(instance, target_class)
    return instance


def _declared_defaults(cls: type) -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            if f.default is not dataclasses.MISSING:
                defaults[f.name] = f.default
            elif f.default_factory is not dataclasses.MISSING:
                defaults[f.name] = f.default_factory()
        return defaults

    sig = init_signature(cls.__init__)  # type: ignore[misc]
    if sig is not None:
        for name, param in sig.parameters.items():
            if param.default is not param.empty:
                defaults[name] = param.default
    return defaults


def _prime(instance: Any, cls: type) -> None:
    """Give every declared member of an uninitialized *instance* a value."""
    defaults = _declared_defaults(cls)
    for member in describe(cls).members:
        value = defaults.get(member.name, zero_value(member.annotation))
        if member.write_once and member.storage:
            compile_storage_writer(member)(instance, value)
        elif member.writable and member.readable and not isinstance(
            getattr(cls, member.name, None), property
        ):
            try:
                object.__setattr__(instance, member.name, value)
            except (AttributeError, TypeError) as e:
                logger.debug("Could not prime %s.%s: %s", cls.__name__, member.name, e)

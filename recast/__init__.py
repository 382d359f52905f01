"""Recast - plan-cached object-to-object mapping engine."""

from __future__ import annotations

from recast.api.functions import (
    copy_into,
    copy_into_async,
    to,
    to_async,
    to_dict,
    to_dict_async,
    with_,
)
from recast.core.cache import PlanCache, default_cache
from recast.core.config import MappingConfig
from recast.core.engine import AsyncMapper, Mapper
from recast.core.enums import NamingPolicy
from recast.core.exceptions import (
    AssignmentTypeError,
    ConstructionError,
    MappingError,
    PlanCompilationError,
    RecastError,
    TransformerError,
)
from recast.mapping.builder import configure
from recast.mapping.chain import resolved
from recast.mapping.initializer import initializer
from recast.mapping.transformers import (
    PropertyTransformer,
    TagTransformer,
    TypeTransformer,
    ValueTransformer,
)

__all__ = [
    # Engine
    "Mapper",
    "AsyncMapper",
    # Plans
    "PlanCache",
    "default_cache",
    # Configuration
    "MappingConfig",
    "NamingPolicy",
    "configure",
    "initializer",
    # Transformers
    "TypeTransformer",
    "TagTransformer",
    "PropertyTransformer",
    "ValueTransformer",
    "resolved",
    # Shortcuts
    "to",
    "to_async",
    "copy_into",
    "copy_into_async",
    "to_dict",
    "to_dict_async",
    "with_",
    # Exceptions
    "RecastError",
    "MappingError",
    "AssignmentTypeError",
    "ConstructionError",
    "PlanCompilationError",
    "TransformerError",
]

"""Mapping layer - member discovery, plans, and value transformers."""

from __future__ import annotations

from recast.mapping.builder import ConfigurationBuilder, configure
from recast.mapping.chain import resolved
from recast.mapping.descriptor import MemberDescriptor, TypeDescriptor, describe
from recast.mapping.initializer import initializer
from recast.mapping.plan import Binding, Factory, MappingPlan, MemberPair
from recast.mapping.protocol import DECLINED, NO_PRIOR, Resolution, Transformer
from recast.mapping.transformers import (
    BaseTransformer,
    PropertyTransformer,
    TagTransformer,
    TypeTransformer,
    ValueTransformer,
)

__all__ = [
    "configure",
    "ConfigurationBuilder",
    "describe",
    "MemberDescriptor",
    "TypeDescriptor",
    "initializer",
    "resolved",
    "MappingPlan",
    "MemberPair",
    "Factory",
    "Binding",
    "Transformer",
    "Resolution",
    "DECLINED",
    "NO_PRIOR",
    "BaseTransformer",
    "TypeTransformer",
    "TagTransformer",
    "PropertyTransformer",
    "ValueTransformer",
]

"""Shared test fixtures."""

from __future__ import annotations

import pytest

from recast.core.cache import PlanCache
from recast.core.config import MappingConfig
from recast.core.engine import AsyncMapper, Mapper


@pytest.fixture
def plan_cache() -> PlanCache:
    """Fresh plan cache, isolated from the process-wide one."""
    return PlanCache()


@pytest.fixture
def mapper(plan_cache: PlanCache) -> Mapper:
    """Synchronous mapper bound to the isolated cache."""
    return Mapper(plan_cache)


@pytest.fixture
def async_mapper(plan_cache: PlanCache) -> AsyncMapper:
    """Asynchronous mapper bound to the isolated cache."""
    return AsyncMapper(plan_cache)


@pytest.fixture
def empty_config() -> MappingConfig:
    """Configuration with no directives."""
    return MappingConfig()


@pytest.fixture
def suppress_config() -> MappingConfig:
    """Configuration that skips mismatched members instead of raising."""
    return MappingConfig(throw_exceptions=False)

"""Mapping configuration DSL builder.

Provides a fluent builder for MappingConfig.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from recast.core.config import MappingConfig
from recast.core.enums import NamingPolicy
from recast.core.exceptions import PlanCompilationError
from recast.mapping.descriptor import describe
from recast.mapping.transformers import PropertyTransformer, TagTransformer, TypeTransformer


def configure(
    source_type: type | None = None,
    target_type: type | None = None,
) -> ConfigurationBuilder:
    """Entry point for the configuration DSL.

    Args:
        source_type: Optional source class. When given, renames and
                     property transformers are checked against its members.
        target_type: Optional target class. When given, rename targets are
                     checked against its members.

    Returns:
        A builder for chaining mapping directives.
    """
    return ConfigurationBuilder(source_type, target_type)


class ConfigurationBuilder:
    """Fluent builder for MappingConfig."""

    def __init__(self, source_type: type | None, target_type: type | None) -> None:
        self._source_type = source_type
        self._target_type = target_type
        self._renames: list[tuple[str, str]] = []
        self._skips: set[str] = set()
        self._transformers: list[Any] = []
        self._naming = NamingPolicy.EXACT
        self._throw_exceptions = True

    def rename(self, source_name: str, target_name: str) -> ConfigurationBuilder:
        """Map source member *source_name* onto target member *target_name*."""
        self._renames.append((source_name, target_name))
        return self

    def skip(self, *names: str) -> ConfigurationBuilder:
        """Exclude members by name on both sides."""
        self._skips.update(names)
        return self

    def ignore_case(self, enabled: bool = True) -> ConfigurationBuilder:
        """Match member names case-insensitively."""
        self._naming = NamingPolicy.IGNORE_CASE if enabled else NamingPolicy.EXACT
        return self

    def suppress_errors(self, enabled: bool = True) -> ConfigurationBuilder:
        """Skip mismatched members instead of raising."""
        self._throw_exceptions = not enabled
        return self

    def map_type(self, value_type: type, func: Callable[[Any], Any]) -> ConfigurationBuilder:
        """Transform every member declared as *value_type*."""
        self._transformers.append(TypeTransformer(value_type, func))
        return self

    def map_tag(self, tag_type: type, func: Callable[[Any, Any], Any]) -> ConfigurationBuilder:
        """Transform members tagged with a *tag_type* instance; func gets ``(tag, value)``."""
        self._transformers.append(TagTransformer(tag_type, func))
        return self

    def map_property(self, name: str, func: Callable[[Any], Any]) -> ConfigurationBuilder:
        """Transform the source member called *name*."""
        self._transformers.append(PropertyTransformer(name, func))
        return self

    def transform(self, transformer: Any) -> ConfigurationBuilder:
        """Append a custom transformer object."""
        self._transformers.append(transformer)
        return self

    def _member_names(self, cls: type | None) -> set[str] | None:
        if cls is None:
            return None
        policy = self._naming
        return {policy.fold(name) for name in describe(cls).names}

    def build(self) -> MappingConfig:
        """Validate the directives and produce a MappingConfig."""
        policy = self._naming
        source_names = self._member_names(self._source_type)
        target_names = self._member_names(self._target_type)

        seen_sources: set[str] = set()
        for source_name, target_name in self._renames:
            if not source_name or not target_name:
                raise PlanCompilationError("Rename directives need non-empty member names")
            folded = policy.fold(source_name)
            if folded in seen_sources:
                raise PlanCompilationError(
                    f"Duplicate rename for source member '{source_name}'"
                )
            seen_sources.add(folded)
            if source_names is not None and folded not in source_names:
                raise PlanCompilationError(
                    f"Unknown source member '{source_name}' in rename "
                    f"for {self._source_type.__name__}"  # type: ignore[union-attr]
                )
            if target_names is not None and policy.fold(target_name) not in target_names:
                raise PlanCompilationError(
                    f"Unknown target member '{target_name}' in rename "
                    f"for {self._target_type.__name__}"  # type: ignore[union-attr]
                )

        if self._source_type is not None:
            declared = set(describe(self._source_type).names)
            for transformer in self._transformers:
                if isinstance(transformer, PropertyTransformer) and transformer.name not in declared:
                    raise PlanCompilationError(
                        f"Unknown source member '{transformer.name}' in map_property"
                    )

        return MappingConfig(
            naming=policy,
            renames=tuple(self._renames),
            skips=frozenset(self._skips),
            transformers=tuple(self._transformers),
            throw_exceptions=self._throw_exceptions,
        )

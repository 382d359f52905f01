"""Unit tests for the configuration DSL."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from recast.core.enums import NamingPolicy
from recast.core.exceptions import PlanCompilationError
from recast.mapping.builder import configure
from recast.mapping.transformers import PropertyTransformer, TagTransformer, TypeTransformer


@dataclass
class Person:
    first_name: str = ""
    last_name: str = ""
    born: date | None = None


@dataclass
class Contact:
    first_name: str = ""
    surname: str = ""


class Custom:
    def try_resolve(self, source, source_member, target_member, prior=None):  # type: ignore[no-untyped-def]
        raise NotImplementedError


class TestConfigurationBuilder:
    def test_defaults(self) -> None:
        config = configure().build()
        assert config.naming is NamingPolicy.EXACT
        assert config.renames == ()
        assert config.skips == frozenset()
        assert config.transformers == ()
        assert config.throw_exceptions

    def test_chained_directives(self) -> None:
        custom = Custom()
        config = (
            configure(Person, Contact)
            .rename("last_name", "surname")
            .skip("born")
            .ignore_case()
            .suppress_errors()
            .map_type(date, date.isoformat)
            .map_tag(str, lambda tag, value: value)
            .map_property("first_name", str.title)
            .transform(custom)
            .build()
        )
        assert config.renames == (("last_name", "surname"),)
        assert config.skips == frozenset({"born"})
        assert config.ignore_case
        assert not config.throw_exceptions
        assert [type(t) for t in config.transformers] == [
            TypeTransformer,
            TagTransformer,
            PropertyTransformer,
            Custom,
        ]
        assert config.transformers[-1] is custom

    def test_toggles_can_be_reverted(self) -> None:
        config = configure().ignore_case().ignore_case(False).suppress_errors(False).build()
        assert config.naming is NamingPolicy.EXACT
        assert config.throw_exceptions

    def test_rename_order_preserved(self) -> None:
        config = configure().rename("b", "x").rename("a", "y").build()
        assert config.renames == (("b", "x"), ("a", "y"))


class TestBuilderValidation:
    def test_empty_rename(self) -> None:
        with pytest.raises(PlanCompilationError, match="non-empty"):
            configure().rename("", "surname").build()

    def test_duplicate_source_rename(self) -> None:
        with pytest.raises(PlanCompilationError, match="Duplicate rename"):
            configure().rename("a", "x").rename("a", "y").build()

    def test_duplicate_source_rename_ignore_case(self) -> None:
        with pytest.raises(PlanCompilationError, match="Duplicate rename"):
            configure().ignore_case().rename("a", "x").rename("A", "y").build()

    def test_unknown_source_member(self) -> None:
        with pytest.raises(PlanCompilationError, match="Unknown source member 'nope'"):
            configure(Person, Contact).rename("nope", "surname").build()

    def test_unknown_target_member(self) -> None:
        with pytest.raises(PlanCompilationError, match="Unknown target member 'nope'"):
            configure(Person, Contact).rename("last_name", "nope").build()

    def test_unchecked_without_types(self) -> None:
        config = configure().rename("nope", "missing").build()
        assert config.renames == (("nope", "missing"),)

    def test_unknown_map_property(self) -> None:
        with pytest.raises(PlanCompilationError, match="map_property"):
            configure(Person).map_property("First_Name", str.upper).build()

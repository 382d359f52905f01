"""Unit tests for type descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any

import pytest
from pydantic import BaseModel, ConfigDict

from recast.core.enums import MemberKind
from recast.core.exceptions import PlanCompilationError
from recast.mapping.descriptor import (
    MemberDescriptor,
    describe,
    describe_mapping,
    is_pydantic_model,
)


@dataclass(frozen=True)
class Mask:
    char: str


@dataclass
class Person:
    first_name: str
    last_name: str
    age: int = 0


@dataclass(frozen=True)
class FrozenPerson:
    first_name: str
    age: int


class PersonModel(BaseModel):
    first_name: str
    age: int


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class Plain:
    nickname: str

    def __init__(self, name: str, score: int = 0) -> None:
        self.name = name
        self.score = score

    @property
    def label(self) -> str:
        return f"{self.name}:{self.score}"


class Badge:
    def __init__(self, code: str) -> None:
        self._code = code

    @property
    def code(self) -> str:
        return self._code


@dataclass
class Tagged:
    secret: Annotated[str, Mask("*")]
    note: str = field(default="", metadata={"mask": Mask("#")})


class TestDataclassDescriptor:
    def test_members_in_declaration_order(self) -> None:
        descriptor = describe(Person)
        assert descriptor.type is Person
        assert descriptor.names == ["first_name", "last_name", "age"]

    def test_annotations_resolved(self) -> None:
        descriptor = describe(Person)
        assert descriptor.get("first_name").annotation is str  # type: ignore[union-attr]
        assert descriptor.get("age").annotation is int  # type: ignore[union-attr]

    def test_mutable_fields_are_writable(self) -> None:
        member = describe(Person).get("age")
        assert member is not None
        assert member.kind is MemberKind.FIELD
        assert member.writable
        assert not member.write_once

    def test_frozen_fields_are_write_once(self) -> None:
        member = describe(FrozenPerson).get("first_name")
        assert member is not None
        assert not member.writable
        assert member.write_once
        assert member.storage == ("first_name",)
        assert member.assignable

    def test_annotated_and_field_metadata_tags(self) -> None:
        descriptor = describe(Tagged)
        assert descriptor.get("secret").annotation is str  # type: ignore[union-attr]
        assert descriptor.get("secret").find_tag(Mask) == Mask("*")  # type: ignore[union-attr]
        assert descriptor.get("note").find_tag(Mask) == Mask("#")  # type: ignore[union-attr]

    def test_find_tag_missing(self) -> None:
        assert describe(Person).get("age").find_tag(Mask) is None  # type: ignore[union-attr]


class TestPydanticDescriptor:
    def test_is_pydantic_model(self) -> None:
        assert is_pydantic_model(PersonModel)
        assert not is_pydantic_model(Person)

    def test_fields_only(self) -> None:
        # BaseModel's own properties (model_extra, model_fields_set) are excluded
        assert describe(PersonModel).names == ["first_name", "age"]

    def test_field_annotation(self) -> None:
        assert describe(PersonModel).get("age").annotation is int  # type: ignore[union-attr]

    def test_frozen_model_write_once(self) -> None:
        member = describe(FrozenModel).get("name")
        assert member is not None
        assert member.write_once
        assert member.storage == ("name",)


class TestPlainClassDescriptor:
    def test_annotations_then_init_parameters_then_properties(self) -> None:
        assert describe(Plain).names == ["nickname", "name", "score", "label"]

    def test_kinds(self) -> None:
        descriptor = describe(Plain)
        assert descriptor.get("nickname").kind is MemberKind.ATTRIBUTE  # type: ignore[union-attr]
        assert descriptor.get("name").kind is MemberKind.PARAMETER  # type: ignore[union-attr]
        assert descriptor.get("label").kind is MemberKind.PROPERTY  # type: ignore[union-attr]

    def test_read_only_property(self) -> None:
        member = describe(Plain).get("label")
        assert member is not None
        assert member.annotation is str
        assert member.readable
        assert not member.writable
        assert member.write_once
        assert member.storage == ("_label", "_Plain__label")

    def test_property_replaces_init_parameter(self) -> None:
        descriptor = describe(Badge)
        assert descriptor.names == ["code"]
        assert descriptor.get("code").kind is MemberKind.PROPERTY  # type: ignore[union-attr]


class TestMappingDescriptor:
    def test_string_keys_become_members(self) -> None:
        descriptor = describe_mapping({"a": 1, "b": 2, 3: "ignored"})
        assert descriptor.type is dict
        assert descriptor.names == ["a", "b"]

    def test_keys_are_read_only(self) -> None:
        member = describe_mapping({"a": 1}).get("a")
        assert member is not None
        assert member.kind is MemberKind.KEY
        assert member.annotation is Any
        assert not member.assignable


class TestMemberDescriptor:
    def test_identity_is_owner_and_name(self) -> None:
        a = MemberDescriptor(Person, "age", int)
        b = MemberDescriptor(Person, "age", str, writable=False)
        assert a == b
        assert hash(a) == hash(b)

    def test_different_owner_not_equal(self) -> None:
        assert MemberDescriptor(Person, "age") != MemberDescriptor(FrozenPerson, "age")

    def test_describe_rejects_non_class(self) -> None:
        with pytest.raises(PlanCompilationError, match="expected a class"):
            describe(42)  # type: ignore[arg-type]

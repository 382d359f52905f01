"""Unit tests for annotation helpers."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, NewType, Optional, TypeVar, Union

import pytest

from recast.core.types import (
    accepts,
    is_assignable,
    is_class_var,
    strip_annotated,
    unwrap_optional,
    zero_value,
)

UserId = NewType("UserId", int)
T = TypeVar("T")


class Base:
    pass


class Derived(Base):
    pass


class TestIsAssignable:
    @pytest.mark.parametrize("annotation", [int, str, list[int], Optional[int], Derived])
    def test_none_always_assignable(self, annotation: Any) -> None:
        assert is_assignable(None, annotation)

    def test_exact_and_subclass(self) -> None:
        assert is_assignable(1, int)
        assert is_assignable(Derived(), Base)
        assert not is_assignable(Base(), Derived)
        assert not is_assignable("1", int)

    def test_numeric_widening(self) -> None:
        assert is_assignable(1, float)
        assert is_assignable(1.5, complex)
        assert not is_assignable(1.5, int)

    def test_open_annotations(self) -> None:
        assert is_assignable(object(), Any)
        assert is_assignable(object(), object)
        assert is_assignable(object(), T)
        assert is_assignable(object(), "Unresolved")

    def test_unions(self) -> None:
        assert is_assignable("a", Union[int, str])
        assert is_assignable("a", int | str)
        assert not is_assignable(1.5, int | str)

    def test_literal(self) -> None:
        assert is_assignable("a", Literal["a", "b"])
        assert not is_assignable("c", Literal["a", "b"])

    def test_generic_checks_origin_only(self) -> None:
        assert is_assignable(["x"], list[int])
        assert not is_assignable(("x",), list[int])

    def test_newtype_and_annotated(self) -> None:
        assert is_assignable(5, UserId)
        assert is_assignable(5, Annotated[int, "tag"])
        assert not is_assignable("5", Annotated[int, "tag"])


class TestAccepts:
    def test_same_and_subclass(self) -> None:
        assert accepts(int, int)
        assert accepts(Base, Derived)
        assert not accepts(Derived, Base)

    def test_open_sides(self) -> None:
        assert accepts(int, Any)
        assert accepts(Any, str)

    def test_optional_actual(self) -> None:
        assert accepts(int, Optional[int])
        assert not accepts(int, Optional[str])

    def test_union_expected(self) -> None:
        assert accepts(int | str, str)
        assert not accepts(int | str, bytes)

    def test_float_accepts_int(self) -> None:
        assert accepts(float, int)
        assert not accepts(int, float)

    def test_mismatch(self) -> None:
        assert not accepts(int, str)


class TestAnnotationHelpers:
    def test_strip_annotated(self) -> None:
        assert strip_annotated(Annotated[int, "a", "b"]) == (int, ("a", "b"))
        assert strip_annotated(int) == (int, ())

    def test_unwrap_optional(self) -> None:
        assert unwrap_optional(Optional[int]) is int
        assert unwrap_optional(int | None) is int
        assert unwrap_optional(int | str) == int | str

    def test_is_class_var(self) -> None:
        assert is_class_var(ClassVar[int])
        assert not is_class_var(int)


class TestZeroValue:
    @pytest.mark.parametrize(
        ("annotation", "expected"),
        [(int, 0), (str, ""), (float, 0.0), (bool, False), (list[int], []), (dict, {})],
    )
    def test_builtins(self, annotation: Any, expected: Any) -> None:
        assert zero_value(annotation) == expected

    def test_optional_and_open_types(self) -> None:
        assert zero_value(Optional[int]) is None
        assert zero_value(Any) is None
        assert zero_value(T) is None
        assert zero_value(Derived) is None

    def test_union_uses_first_arm(self) -> None:
        assert zero_value(int | str) == 0

    def test_literal_uses_first_value(self) -> None:
        assert zero_value(Literal["a", "b"]) == "a"

    def test_wrapped_annotations(self) -> None:
        assert zero_value(Annotated[int, "tag"]) == 0
        assert zero_value(UserId) == 0

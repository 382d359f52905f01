"""Unit tests for member resolution."""

from __future__ import annotations

from recast.core.enums import NamingPolicy
from recast.mapping.descriptor import MemberDescriptor
from recast.mapping.resolver import filter_skipped, resolve_members


class Source:
    pass


class Target:
    pass


def _members(owner: type, *names: str) -> list[MemberDescriptor]:
    return [MemberDescriptor(owner, name) for name in names]


def _names(pairs: list[tuple[MemberDescriptor, MemberDescriptor]]) -> list[tuple[str, str]]:
    return [(s.name, t.name) for s, t in pairs]


class TestAutomaticMatching:
    def test_exact_join_preserves_source_order(self) -> None:
        sources = _members(Source, "c", "a", "b", "unmatched")
        targets = _members(Target, "a", "b", "c")
        pairs = resolve_members(sources, targets, NamingPolicy.EXACT)
        assert _names(pairs) == [("c", "c"), ("a", "a"), ("b", "b")]

    def test_exact_is_case_sensitive(self) -> None:
        pairs = resolve_members(
            _members(Source, "Name"), _members(Target, "name"), NamingPolicy.EXACT
        )
        assert pairs == []

    def test_ignore_case(self) -> None:
        pairs = resolve_members(
            _members(Source, "FirstName"),
            _members(Target, "firstname"),
            NamingPolicy.IGNORE_CASE,
        )
        assert _names(pairs) == [("FirstName", "firstname")]


class TestRenames:
    def test_rename_replaces_automatic_match(self) -> None:
        sources = _members(Source, "a", "b")
        targets = _members(Target, "a", "b")
        pairs = resolve_members(sources, targets, NamingPolicy.EXACT, [("a", "b")])
        assert _names(pairs) == [("a", "b")]

    def test_source_used_once(self) -> None:
        sources = _members(Source, "last_name", "age")
        targets = _members(Target, "last_name", "surname", "age")
        pairs = resolve_members(
            sources, targets, NamingPolicy.EXACT, [("last_name", "surname")]
        )
        assert [s.name for s, _ in pairs].count("last_name") == 1
        assert _names(pairs) == [("age", "age"), ("last_name", "surname")]

    def test_renames_follow_automatic_matches(self) -> None:
        sources = _members(Source, "x", "y", "z")
        targets = _members(Target, "y", "z", "w")
        pairs = resolve_members(sources, targets, NamingPolicy.EXACT, [("x", "w")])
        assert _names(pairs) == [("y", "y"), ("z", "z"), ("x", "w")]

    def test_rename_with_absent_member_is_ignored(self) -> None:
        sources = _members(Source, "a")
        targets = _members(Target, "a")
        pairs = resolve_members(
            sources, targets, NamingPolicy.EXACT, [("missing", "a"), ("a", "missing")]
        )
        assert _names(pairs) == [("a", "a")]

    def test_rename_ignore_case(self) -> None:
        pairs = resolve_members(
            _members(Source, "LastName"),
            _members(Target, "Surname"),
            NamingPolicy.IGNORE_CASE,
            [("lastname", "SURNAME")],
        )
        assert _names(pairs) == [("LastName", "Surname")]

    def test_same_type_rename(self) -> None:
        members = _members(Source, "a", "b")
        pairs = resolve_members(members, members, NamingPolicy.EXACT, [("a", "b")])
        assert _names(pairs) == [("a", "b")]


class TestFilterSkipped:
    def test_exact(self) -> None:
        kept = filter_skipped(_members(Source, "a", "B"), {"b"}, NamingPolicy.EXACT)
        assert [m.name for m in kept] == ["a", "B"]

    def test_ignore_case(self) -> None:
        kept = filter_skipped(_members(Source, "a", "B"), {"b"}, NamingPolicy.IGNORE_CASE)
        assert [m.name for m in kept] == ["a"]

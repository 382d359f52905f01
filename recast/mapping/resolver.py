"""Member resolution - pair source members with target members.

Pure functions; caching happens one level up in the PlanCache.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from recast.core.enums import NamingPolicy
from recast.mapping.descriptor import MemberDescriptor

MemberMatch = tuple[MemberDescriptor, MemberDescriptor]


def filter_skipped(
    members: Iterable[MemberDescriptor],
    skips: Iterable[str],
    policy: NamingPolicy,
) -> list[MemberDescriptor]:
    """Drop members whose name is in *skips* under the naming policy."""
    skipped = {policy.fold(name) for name in skips}
    return [m for m in members if policy.fold(m.name) not in skipped]


def resolve_members(
    sources: Sequence[MemberDescriptor],
    targets: Sequence[MemberDescriptor],
    policy: NamingPolicy,
    renames: Iterable[tuple[str, str]] = (),
) -> list[MemberMatch]:
    """Pair source and target members.

    Automatic same-name matches come first, in source order. Each rename
    directive then removes every pair involving either of its members and
    appends the explicit pair, so a member is never used twice. Directives
    naming an absent member are ignored.
    """
    by_name: dict[str, MemberDescriptor] = {}
    for target in targets:
        by_name.setdefault(policy.fold(target.name), target)

    pairs: list[MemberMatch] = [
        (source, by_name[policy.fold(source.name)])
        for source in sources
        if policy.fold(source.name) in by_name
    ]

    for source_name, target_name in renames:
        folded = policy.fold(source_name)
        source = next((m for m in sources if policy.fold(m.name) == folded), None)
        target = by_name.get(policy.fold(target_name))
        if source is None or target is None:
            continue
        pairs = [(s, t) for s, t in pairs if s != source and t != target]
        pairs.append((source, target))

    return pairs

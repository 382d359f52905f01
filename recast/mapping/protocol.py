"""Transformer protocol.

The engines consult transformers in order for every member pair. A
transformer either declines or accepts with a replacement value; the first
acceptance wins.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from recast.mapping.descriptor import MemberDescriptor


class _NoPrior:
    """Marker for 'no value resolved yet for this member'."""

    _instance: _NoPrior | None = None

    def __new__(cls) -> _NoPrior:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_PRIOR"

    def __bool__(self) -> bool:
        return False


NO_PRIOR: Any = _NoPrior()


class Resolution(NamedTuple):
    """Outcome of consulting one transformer."""

    accepted: bool
    value: Any = None


DECLINED = Resolution(False)


@runtime_checkable
class Transformer(Protocol):
    """Base transformer protocol.

    ``try_resolve`` returns a Resolution, or an awaitable of one for
    transformers that must suspend. Awaitables are only valid under
    AsyncMapper.
    """

    def try_resolve(
        self,
        source: Any,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        prior: Any = NO_PRIOR,
    ) -> Resolution | Awaitable[Resolution]:
        """Decline, or accept with the value to write.

        Args:
            source: The source instance being mapped.
            source_member: Member read from.
            target_member: Member written to.
            prior: Value already resolved for source_member in this call,
                or NO_PRIOR.
        """
        ...

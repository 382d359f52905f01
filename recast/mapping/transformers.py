"""Built-in transformers.

Each wraps a function that receives the current value (the prior value when
one was resolved earlier in the call, else the source member's value) and
returns the replacement. The function may be ``async``; the returned
Resolution is then awaitable and only usable under AsyncMapper.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from recast.core.types import unwrap_optional
from recast.mapping.descriptor import MemberDescriptor
from recast.mapping.protocol import DECLINED, NO_PRIOR, Resolution


def read_member(source: Any, member: MemberDescriptor) -> Any:
    """Read *member* from *source* (attribute or mapping key)."""
    if isinstance(source, Mapping):
        return source.get(member.name)
    return getattr(source, member.name, None)


async def _accept_later(pending: Awaitable[Any]) -> Resolution:
    return Resolution(True, await pending)


class BaseTransformer:
    """Shared try_resolve for function-backed transformers."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self._func = func

    def applies(
        self,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        value: Any,
    ) -> bool:
        raise NotImplementedError

    def invoke(
        self,
        value: Any,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
    ) -> Any:
        return self._func(value)

    def try_resolve(
        self,
        source: Any,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        prior: Any = NO_PRIOR,
    ) -> Resolution | Awaitable[Resolution]:
        value = prior if prior is not NO_PRIOR else read_member(source, source_member)
        if not self.applies(source_member, target_member, value):
            return DECLINED
        result = self.invoke(value, source_member, target_member)
        if inspect.isawaitable(result):
            return _accept_later(result)
        return Resolution(True, result)


class TypeTransformer(BaseTransformer):
    """Applies to every member whose declared type is *value_type*.

    Members without a usable declaration (open mapping keys) match on the
    runtime type of their value instead.
    """

    def __init__(self, value_type: type, func: Callable[[Any], Any]) -> None:
        super().__init__(func)
        self.value_type = value_type

    def applies(
        self,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        value: Any,
    ) -> bool:
        declared = unwrap_optional(source_member.annotation)
        if declared is Any:
            return isinstance(value, self.value_type)
        return declared is self.value_type

    def __repr__(self) -> str:
        return f"TypeTransformer({self.value_type.__name__})"


class TagTransformer(BaseTransformer):
    """Applies when the source or target member carries a *tag_type* tag.

    Tags come from ``Annotated[...]`` extras and dataclass field metadata.
    The function receives ``(tag, value)``.
    """

    def __init__(self, tag_type: type, func: Callable[[Any, Any], Any]) -> None:
        super().__init__(func)
        self.tag_type = tag_type

    def _tag(self, source_member: MemberDescriptor, target_member: MemberDescriptor) -> Any:
        tag = source_member.find_tag(self.tag_type)
        if tag is None:
            tag = target_member.find_tag(self.tag_type)
        return tag

    def applies(
        self,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        value: Any,
    ) -> bool:
        return self._tag(source_member, target_member) is not None

    def invoke(
        self,
        value: Any,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
    ) -> Any:
        return self._func(self._tag(source_member, target_member), value)

    def __repr__(self) -> str:
        return f"TagTransformer({self.tag_type.__name__})"


class PropertyTransformer(BaseTransformer):
    """Applies to the one source member called *name*."""

    def __init__(self, name: str, func: Callable[[Any], Any]) -> None:
        super().__init__(func)
        self.name = name

    def applies(
        self,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        value: Any,
    ) -> bool:
        return source_member.name == self.name

    def __repr__(self) -> str:
        return f"PropertyTransformer({self.name!r})"


class ValueTransformer(BaseTransformer):
    """Writes a fixed value into the target member called *name*."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(lambda _: value)
        self.name = name

    def applies(
        self,
        source_member: MemberDescriptor,
        target_member: MemberDescriptor,
        value: Any,
    ) -> bool:
        return target_member.name == self.name

    def __repr__(self) -> str:
        return f"ValueTransformer({self.name!r})"

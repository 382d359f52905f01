"""Accessor compilation - reusable read and write functions per member.

Compiled once per plan and shared by every call that uses the plan.
"""

from __future__ import annotations

import logging
import operator
import types
from collections.abc import Callable
from typing import Any

from recast.core.enums import MemberKind
from recast.mapping.descriptor import MemberDescriptor

logger = logging.getLogger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


def compile_getter(member: MemberDescriptor) -> Getter:
    """Compile ``(instance) -> value`` for a source member."""
    name = member.name

    if member.kind is MemberKind.KEY:

        def get_item(instance: Any) -> Any:
            return instance.get(name)

        return get_item

    if not member.readable:
        return _read_nothing

    if member.kind in (MemberKind.FIELD, MemberKind.PROPERTY):
        return operator.attrgetter(name)

    # Annotated or __init__-declared attributes may be unset on an instance
    def get_attribute(instance: Any) -> Any:
        return getattr(instance, name, None)

    return get_attribute


def compile_setter(member: MemberDescriptor) -> Setter | None:
    """Compile ``(instance, value) -> None`` for a directly writable member.

    Returns None for write-once members; see compile_storage_writer.
    """
    if not member.writable or member.write_once:
        return None
    name = member.name

    if member.kind is MemberKind.KEY:

        def set_item(instance: Any, value: Any) -> None:
            instance[name] = value

        return set_item

    def set_attribute(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return set_attribute


def _find_slot(owner: type, cell: str) -> Any | None:
    for klass in owner.__mro__:
        slot = vars(klass).get(cell)
        if isinstance(slot, types.MemberDescriptorType):
            return slot
    return None


def compile_storage_writer(member: MemberDescriptor) -> Setter:
    """Compile a direct write into the storage cell behind a write-once member.

    Slots are written through their descriptor, everything else straight
    into the instance ``__dict__``, bypassing ``__setattr__``. A cell already
    present on the instance wins; otherwise the first conventional cell
    (``_name`` for a read-only property) is created. Instances without a
    ``__dict__`` and without a matching slot keep their constructed value.
    """
    if not member.write_once or not member.storage:
        return _write_nothing

    slots = {cell: _find_slot(member.owner, cell) for cell in member.storage}
    cells = member.storage
    own_name = member.name

    def write_storage(instance: Any, value: Any) -> None:
        state = getattr(instance, "__dict__", None)
        for cell in cells:
            slot = slots[cell]
            if slot is not None:
                slot.__set__(instance, value)
                return
            if state is not None and (cell == own_name or cell in state):
                state[cell] = value
                return
        if state is not None:
            state[cells[0]] = value
            return
        logger.debug(
            "No storage found for %s.%s; member left unchanged",
            member.owner.__name__,
            own_name,
        )

    return write_storage


def _read_nothing(instance: Any) -> None:
    return None


def _write_nothing(instance: Any, value: Any) -> None:
    return None

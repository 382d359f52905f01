"""Type descriptors - the reflective view of a structured type's members.

Supports Pydantic models, dataclasses, plain classes (annotations,
``__init__`` parameters and properties), open ``Mapping`` sources such as
row dicts, and open ``dict`` targets.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from recast.core.enums import MemberKind, NamingPolicy
from recast.core.exceptions import PlanCompilationError
from recast.core.types import is_class_var, strip_annotated


@dataclass(frozen=True)
class MemberDescriptor:
    """A named, typed slot on a structured type.

    Equality and hashing use ``(owner, name)`` only.
    """

    owner: type
    name: str
    annotation: Any = field(default=Any, compare=False)
    kind: MemberKind = field(default=MemberKind.ATTRIBUTE, compare=False)
    readable: bool = field(default=True, compare=False)
    writable: bool = field(default=True, compare=False)
    write_once: bool = field(default=False, compare=False)
    storage: tuple[str, ...] = field(default=(), compare=False)
    metadata: tuple[Any, ...] = field(default=(), compare=False)

    def find_tag(self, tag_type: type) -> Any | None:
        """Return the first metadata entry that is an instance of *tag_type*."""
        for item in self.metadata:
            if isinstance(item, tag_type):
                return item
        return None

    @property
    def assignable(self) -> bool:
        """Whether the member can be a mapping target at all."""
        return self.writable or self.write_once


@dataclass(frozen=True)
class TypeDescriptor:
    """A structured type and its members in declaration order."""

    type: type
    members: tuple[MemberDescriptor, ...]

    def get(self, name: str) -> MemberDescriptor | None:
        for member in self.members:
            if member.name == name:
                return member
        return None

    @property
    def names(self) -> list[str]:
        return [m.name for m in self.members]


_BASE_MODEL_MRO = frozenset(BaseModel.__mro__)


def is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _class_annotations(klass: type) -> dict[str, Any]:
    """Annotations declared directly on *klass*, evaluated where possible."""
    try:
        return inspect.get_annotations(klass, eval_str=True, locals={klass.__name__: klass})
    except (NameError, TypeError, SyntaxError, AttributeError):
        raw = inspect.get_annotations(klass)
        # Unresolvable forward references degrade to Any
        return {name: (Any if isinstance(ann, str) else ann) for name, ann in raw.items()}


def _type_hints(cls: type) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        hints.update(_class_annotations(klass))
    return hints


def _is_private(name: str) -> bool:
    return name.startswith("__")


def _return_annotation(func: Any) -> Any:
    try:
        annotations = inspect.get_annotations(func, eval_str=True)
    except (NameError, TypeError, SyntaxError):
        return Any
    return annotations.get("return", Any)


def _property_members(cls: type) -> dict[str, MemberDescriptor]:
    members: dict[str, MemberDescriptor] = {}
    for klass in reversed(cls.__mro__):
        # BaseModel's own properties (model_extra, ...) are not data members
        if klass in _BASE_MODEL_MRO:
            continue
        for name, attr in vars(klass).items():
            if not isinstance(attr, property) or _is_private(name):
                continue
            annotation, tags = strip_annotated(_return_annotation(attr.fget))
            read_only = attr.fset is None
            members[name] = MemberDescriptor(
                owner=cls,
                name=name,
                annotation=annotation,
                kind=MemberKind.PROPERTY,
                readable=attr.fget is not None,
                writable=not read_only,
                write_once=read_only,
                storage=(f"_{name}", f"_{klass.__name__}__{name}") if read_only else (),
                metadata=tags,
            )
    return members


def _pydantic_members(cls: type[BaseModel]) -> dict[str, MemberDescriptor]:
    frozen = bool(cls.model_config.get("frozen", False))
    members: dict[str, MemberDescriptor] = {}
    for name, info in cls.model_fields.items():
        read_only = frozen or bool(info.frozen)
        members[name] = MemberDescriptor(
            owner=cls,
            name=name,
            annotation=info.annotation if info.annotation is not None else Any,
            kind=MemberKind.FIELD,
            writable=not read_only,
            write_once=read_only,
            storage=(name,) if read_only else (),
            metadata=tuple(info.metadata),
        )
    return members


def _dataclass_members(cls: type) -> dict[str, MemberDescriptor]:
    hints = _type_hints(cls)
    frozen = cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    members: dict[str, MemberDescriptor] = {}
    for f in dataclasses.fields(cls):
        annotation, tags = strip_annotated(hints.get(f.name, Any))
        members[f.name] = MemberDescriptor(
            owner=cls,
            name=f.name,
            annotation=annotation,
            kind=MemberKind.FIELD,
            writable=not frozen,
            write_once=frozen,
            storage=(f.name,) if frozen else (),
            metadata=tags + tuple(f.metadata.values()),
        )
    return members


def init_signature(func: Any) -> inspect.Signature | None:
    """Signature of *func* with string annotations evaluated where possible."""
    try:
        return inspect.signature(func, eval_str=True)
    except (NameError, SyntaxError, AttributeError, TypeError):
        pass
    except ValueError:
        return None
    try:
        return inspect.signature(func)
    except (ValueError, TypeError):
        return None


def _plain_members(cls: type) -> dict[str, MemberDescriptor]:
    hints = _type_hints(cls)
    members: dict[str, MemberDescriptor] = {}
    for name, hint in hints.items():
        if _is_private(name) or is_class_var(hint) or isinstance(hint, dataclasses.InitVar):
            continue
        annotation, tags = strip_annotated(hint)
        members[name] = MemberDescriptor(
            owner=cls, name=name, annotation=annotation, metadata=tags
        )

    # Plain class - fall back to __init__ parameters
    sig = init_signature(cls.__init__)  # type: ignore[misc]
    if sig is None:
        return members
    for name, param in sig.parameters.items():
        if name == "self" or name in members or param.kind in (
            param.VAR_POSITIONAL,
            param.VAR_KEYWORD,
        ):
            continue
        annotation = param.annotation
        if annotation is param.empty or isinstance(annotation, str):
            annotation = Any
        annotation, tags = strip_annotated(annotation)
        members[name] = MemberDescriptor(
            owner=cls,
            name=name,
            annotation=annotation,
            kind=MemberKind.PARAMETER,
            metadata=tags,
        )
    return members


def describe(cls: type) -> TypeDescriptor:
    """Build the descriptor of a class (dataclass, Pydantic, or plain).

    Raises:
        PlanCompilationError: If *cls* is not a class.
    """
    if not isinstance(cls, type):
        raise PlanCompilationError(f"Cannot describe {cls!r}: expected a class")

    if is_pydantic_model(cls):
        members = _pydantic_members(cls)
    elif dataclasses.is_dataclass(cls):
        members = _dataclass_members(cls)
    else:
        members = _plain_members(cls)

    # Properties replace same-named entries in place
    members.update(_property_members(cls))
    return TypeDescriptor(type=cls, members=tuple(members.values()))


def describe_mapping(source: Mapping[str, Any]) -> TypeDescriptor:
    """Build a descriptor from the string keys of an open mapping."""
    cls = type(source)
    members = tuple(
        MemberDescriptor(
            owner=cls,
            name=key,
            kind=MemberKind.KEY,
            writable=False,
        )
        for key in source
        if isinstance(key, str)
    )
    return TypeDescriptor(type=cls, members=members)


def describe_open_target(
    source: TypeDescriptor,
    renames: Iterable[tuple[str, str]],
    policy: NamingPolicy,
) -> TypeDescriptor:
    """Build a ``dict`` target descriptor whose keys mirror the readable source members.

    A renamed source member contributes its new name instead of its own.
    """
    renamed = {policy.fold(source_name): target_name for source_name, target_name in renames}
    members: dict[str, MemberDescriptor] = {}
    for member in source.members:
        if not member.readable:
            continue
        key = renamed.get(policy.fold(member.name), member.name)
        members.setdefault(key, MemberDescriptor(owner=dict, name=key, kind=MemberKind.KEY))
    return TypeDescriptor(type=dict, members=tuple(members.values()))

"""Member descriptors: the metadata a thunk is compiled from.

A descriptor names one method, property or field of one declaring type and
carries the signature the compiler needs. Descriptors are frozen; callers own
them and may build them by hand or with the describe_* helpers below, which
read a live class through `inspect` and `typing`.

Finding which members a class has is the caller's business. The helpers only
answer "what is `name` on `cls`".
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass, field
from typing import Callable, Literal

from .convert import NoneType, type_name
from .errors import MemberError, UnsupportedMemberError

Binding = Literal["instance", "class", "static"]


# ============================================================
# DESCRIPTORS
# ============================================================


@dataclass(frozen=True)
class Member:
    """Base for all member descriptors. Abstract.

    Invariants:
    - declaring_type is the class whose namespace defines the member
    - name is the attribute name as stored (already mangled for __private names)
    """

    declaring_type: type
    name: str

    @property
    def qualname(self) -> str:
        return self.declaring_type.__qualname__ + "." + self.name


@dataclass(frozen=True)
class Parameter:
    """Formal parameter of a method.

    Semantics:
    - Bound from arguments[i], where i is its position in the parameter list
    - keyword_only parameters are passed by keyword, still read positionally
    """

    name: str
    type: object = object
    keyword_only: bool = False


@dataclass(frozen=True)
class MethodDescriptor(Member):
    """Method callable through an instance.

    Semantics:
    - parameters excludes the receiver (self / cls)
    - return_type None (NoneType) marks a void method; its thunk returns None

    | binding  | Python form    | receiver   |
    |----------|----------------|------------|
    | instance | def m(self)    | the target |
    | class    | @classmethod   | its class  |
    | static   | @staticmethod  | none       |
    """

    parameters: tuple[Parameter, ...] = ()
    return_type: object = object
    binding: Binding = "instance"

    @property
    def is_void(self) -> bool:
        return self.return_type is None or self.return_type is NoneType


@dataclass(frozen=True)
class PropertyDescriptor(Member):
    """Property routed through getter and setter functions.

    Invariants:
    - getter takes (instance), setter takes (instance, value)
    - either may be None; the matching thunk kind then cannot be built
    """

    property_type: object = object
    getter: Callable[..., object] | None = field(default=None, compare=False)
    setter: Callable[..., object] | None = field(default=None, compare=False)


@dataclass(frozen=True)
class FieldDescriptor(Member):
    """Instance attribute stored in the instance __dict__ or a __slots__ slot."""

    field_type: object = object


# ============================================================
# DESCRIBING LIVE CLASSES
# ============================================================


def _lookup(cls: type, name: str) -> tuple[type, object] | None:
    """Find the class in cls.__mro__ whose namespace defines name."""
    for klass in cls.__mro__:
        namespace = vars(klass)
        if name in namespace:
            return klass, namespace[name]
    return None


def _hints(obj: object, qualname: str) -> dict[str, object]:
    """Resolved annotations of a function or class."""
    try:
        return typing.get_type_hints(obj)
    except NameError as e:
        raise UnsupportedMemberError("unresolved annotation: " + str(e), qualname) from e
    except TypeError:
        # builtins and C methods carry no annotations
        return {}


def _check_not_generic(typ: object, what: str, qualname: str) -> None:
    if isinstance(typ, typing.TypeVar):
        raise UnsupportedMemberError(
            what + " has generic type " + type_name(typ), qualname
        )


def describe_method(cls: type, name: str) -> MethodDescriptor:
    """Describe method name of cls."""
    found = _lookup(cls, name)
    qualname = cls.__qualname__ + "." + name
    if found is None:
        raise MemberError("no such method", qualname)
    owner, raw = found
    qualname = owner.__qualname__ + "." + name
    binding: Binding = "instance"
    if isinstance(raw, staticmethod):
        func = raw.__func__
        binding = "static"
    elif isinstance(raw, classmethod):
        func = raw.__func__
        binding = "class"
    elif isinstance(raw, property):
        raise MemberError("is a property, not a method", qualname)
    elif inspect.isroutine(raw):
        func = raw
    else:
        raise MemberError("is not a method", qualname)
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise UnsupportedMemberError("signature unavailable: " + str(e), qualname) from e
    formals = list(signature.parameters.values())
    if binding != "static":
        formals = formals[1:]
    hints = _hints(func, qualname)
    parameters: list[Parameter] = []
    for formal in formals:
        if formal.kind in (formal.VAR_POSITIONAL, formal.VAR_KEYWORD):
            raise UnsupportedMemberError(
                "variadic parameter '" + formal.name + "'", qualname
            )
        typ = hints.get(formal.name, object)
        _check_not_generic(typ, "parameter '" + formal.name + "'", qualname)
        parameters.append(
            Parameter(formal.name, typ, formal.kind == formal.KEYWORD_ONLY)
        )
    return_type = hints.get("return", object)
    _check_not_generic(return_type, "return value", qualname)
    return MethodDescriptor(owner, name, tuple(parameters), return_type, binding)


def describe_property(cls: type, name: str) -> PropertyDescriptor:
    """Describe property name of cls. Its type comes from the getter, else the setter."""
    found = _lookup(cls, name)
    if found is None or not isinstance(found[1], property):
        raise MemberError("no such property", cls.__qualname__ + "." + name)
    owner, prop = found
    qualname = owner.__qualname__ + "." + name
    typ: object = object
    if prop.fget is not None:
        typ = _hints(prop.fget, qualname).get("return", object)
    if typ is object and prop.fset is not None:
        setter_hints = _hints(prop.fset, qualname)
        names = list(inspect.signature(prop.fset).parameters)
        if len(names) >= 2:
            typ = setter_hints.get(names[1], object)
    _check_not_generic(typ, "property", qualname)
    return PropertyDescriptor(owner, name, typ, prop.fget, prop.fset)


def _slots(klass: type) -> tuple[str, ...]:
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def describe_field(cls: type, name: str) -> FieldDescriptor:
    """Describe instance field name of cls.

    A field is declared by a class-level annotation (not ClassVar) or by
    __slots__ somewhere in the MRO.
    """
    found = _lookup(cls, name)
    if found is not None and (
        isinstance(found[1], property) or inspect.isroutine(found[1])
    ):
        raise MemberError("is not a field", found[0].__qualname__ + "." + name)
    for klass in cls.__mro__:
        annotations = inspect.get_annotations(klass)
        if name not in annotations and name not in _slots(klass):
            continue
        qualname = klass.__qualname__ + "." + name
        typ: object = object
        if name in annotations:
            typ = _hints(klass, qualname).get(name, object)
            if typ is typing.ClassVar or typing.get_origin(typ) is typing.ClassVar:
                raise MemberError("is a class variable, not a field", qualname)
        _check_not_generic(typ, "field", qualname)
        return FieldDescriptor(klass, name, typ)
    raise MemberError("no such field", cls.__qualname__ + "." + name)


def describe(cls: type, name: str) -> Member:
    """Describe name of cls as whichever kind of member it is."""
    found = _lookup(cls, name)
    if found is not None:
        raw = found[1]
        if isinstance(raw, property):
            return describe_property(cls, name)
        if isinstance(raw, (staticmethod, classmethod)) or inspect.isroutine(raw):
            return describe_method(cls, name)
    return describe_field(cls, name)

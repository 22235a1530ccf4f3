"""Thunk factory: one entry point per member kind.

Reads (method calls, property and field reads) go through the expression
strategy, writes (property and field setters) through the emit strategy. The
factory never caches: every call compiles a new, independent thunk, so callers
that invoke the same member repeatedly should keep the thunk they got.
"""

from __future__ import annotations

from typing import Callable, Sequence

from .config import DEFAULT_OPTIONS, Options
from .emit import EmitCompiler
from .errors import MemberError
from .expressions import ExpressionCompiler
from .members import FieldDescriptor, Member, MethodDescriptor, PropertyDescriptor

LateBoundMethod = Callable[[object, Sequence[object]], object]
"""(target, arguments) -> result; None for void methods."""

LateBoundProperty = Callable[[object], object]
"""(target) -> property value."""

LateBoundField = Callable[[object], object]
"""(target) -> field value."""

LateBoundPropertySet = Callable[[object, object], None]
"""(target, value) -> None, through the property setter."""

LateBoundFieldSet = Callable[[object, object], None]
"""(target, value) -> None, straight into the field slot."""


def strategy_for(
    member: Member, write: bool, options: Options = DEFAULT_OPTIONS
) -> ExpressionCompiler | EmitCompiler:
    """Pick the compilation strategy for a read or write thunk of member."""
    if write:
        if not isinstance(member, (PropertyDescriptor, FieldDescriptor)):
            raise MemberError("only properties and fields can be set", member.qualname)
        return EmitCompiler(options)
    return ExpressionCompiler(options)


def create_method(
    method: MethodDescriptor, options: Options | None = None
) -> LateBoundMethod:
    """Compile a thunk calling method with converted arguments."""
    if not isinstance(method, MethodDescriptor):
        raise MemberError("expected a method descriptor, got " + type(method).__name__)
    return strategy_for(method, False, options or DEFAULT_OPTIONS).build(method)


def create_property(
    prop: PropertyDescriptor, options: Options | None = None
) -> LateBoundProperty:
    """Compile a thunk reading prop through its getter."""
    if not isinstance(prop, PropertyDescriptor):
        raise MemberError("expected a property descriptor, got " + type(prop).__name__)
    return strategy_for(prop, False, options or DEFAULT_OPTIONS).build(prop)


def create_field(
    fld: FieldDescriptor, options: Options | None = None
) -> LateBoundField:
    """Compile a thunk reading fld."""
    if not isinstance(fld, FieldDescriptor):
        raise MemberError("expected a field descriptor, got " + type(fld).__name__)
    return strategy_for(fld, False, options or DEFAULT_OPTIONS).build(fld)


def create_property_set(
    prop: PropertyDescriptor, options: Options | None = None
) -> LateBoundPropertySet:
    """Compile a thunk writing prop through its setter, public or not."""
    if not isinstance(prop, PropertyDescriptor):
        raise MemberError("expected a property descriptor, got " + type(prop).__name__)
    return strategy_for(prop, True, options or DEFAULT_OPTIONS).build(prop)


def create_field_set(
    fld: FieldDescriptor, options: Options | None = None
) -> LateBoundFieldSet:
    """Compile a thunk storing into fld directly."""
    if not isinstance(fld, FieldDescriptor):
        raise MemberError("expected a field descriptor, got " + type(fld).__name__)
    return strategy_for(fld, True, options or DEFAULT_OPTIONS).build(fld)


def create(member: Member, options: Options | None = None) -> Callable[..., object]:
    """Read-side thunk for any member: method call, property read or field read."""
    if isinstance(member, MethodDescriptor):
        return create_method(member, options)
    if isinstance(member, PropertyDescriptor):
        return create_property(member, options)
    if isinstance(member, FieldDescriptor):
        return create_field(member, options)
    raise MemberError("unknown member kind " + type(member).__name__)


def create_set(member: Member, options: Options | None = None) -> Callable[..., object]:
    """Write-side thunk for a property or field."""
    if isinstance(member, PropertyDescriptor):
        return create_property_set(member, options)
    if isinstance(member, FieldDescriptor):
        return create_field_set(member, options)
    raise MemberError("only properties and fields can be set", member.qualname)


def thunk_source(member: Member, write: bool = False, options: Options | None = None) -> str:
    """Python source of the thunk create (or create_set, if write) would compile."""
    return strategy_for(member, write, options or DEFAULT_OPTIONS).source(member)

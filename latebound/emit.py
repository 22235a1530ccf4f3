"""Emit strategy: property and field setters.

A write thunk is a DynamicMethod of two erased arguments whose IL is

    LoadArg 0; CastClass <declaring type>; LoadArg 1; UnboxAny <member type>;
    StoreField <field> | CallSetter <property>; Ret

Lowering verifies the stack discipline and turns each stack slot into a local,
one line per instruction, so the listing reads like the IL it came from:

    def Setcount(arg0, arg1):
        s0 = arg0
        s0 = cast_0(s0)
        s1 = arg1
        s1 = unbox_1(s1)
        store_2(s0, 'count', s1)
        return None

Both conversions run before the store, so a rejected value never leaves a
partial write behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from . import il
from .config import DEFAULT_OPTIONS, Options
from .convert import UnboxAny, cast_class, unbox_any
from .errors import EmitError, MemberError, MissingAccessorError, UnsupportedMemberError
from .expressions import member_conversion
from .loader import identifier, load_function
from .members import FieldDescriptor, Member, PropertyDescriptor

logger = logging.getLogger(__name__)


@dataclass
class Listing:
    """Lowered dynamic method: source text plus the globals it refers to."""

    name: str
    source: str
    constants: dict[str, object]


class VirtualSetter:
    """Setter of one property, dispatched on the runtime type of each target.

    A subclass that overrides the property with a setter of its own gets that
    setter called. Otherwise the setter found on the declaring type runs.
    """

    __slots__ = ("name", "setter")

    def __init__(self, prop: PropertyDescriptor):
        self.name = prop.name
        self.setter = prop.setter

    def resolve(self, cls: type) -> Callable[..., object]:
        for klass in cls.__mro__:
            namespace = vars(klass)
            if self.name in namespace:
                raw = namespace[self.name]
                if isinstance(raw, property) and raw.fset is not None:
                    return raw.fset
                break
        return self.setter

    def __call__(self, target: object, value: object) -> None:
        self.resolve(type(target))(target, value)

    def __repr__(self) -> str:
        return f"VirtualSetter({self.name!r})"


class Lowering:
    """Lower one DynamicMethod to Python source."""

    def __init__(self, method: il.DynamicMethod):
        self.method = method
        self.name = identifier(method.name)
        self.indent = 0
        self.lines: list[str] = []
        self.stack: list[str] = []
        self.constants: dict[str, object] = {}

    def lower(self) -> Listing:
        params = ", ".join("arg" + str(i) for i in range(self.method.parameter_count))
        self._line(f"def {self.name}({params}):")
        self.indent += 1
        returned = False
        for offset, instruction in enumerate(self.method.instructions):
            if returned:
                raise self._error("instruction after Ret", offset, instruction)
            self._lower(offset, instruction)
            returned = isinstance(instruction, il.Ret)
        if not returned:
            raise EmitError("dynamic method does not end with Ret", self.method.name)
        self.indent -= 1
        return Listing(self.name, "\n".join(self.lines), self.constants)

    def _line(self, text: str) -> None:
        self.lines.append("    " * self.indent + text)

    def _error(self, msg: str, offset: int, instruction: il.Instruction) -> EmitError:
        return EmitError(f"{msg} at IL_{offset:04d} {instruction!r}", self.method.name)

    def _constant(self, value: object, hint: str) -> str:
        name = hint + "_" + str(len(self.constants))
        self.constants[name] = value
        return name

    def _push(self) -> str:
        slot = "s" + str(len(self.stack))
        self.stack.append(slot)
        return slot

    def _pop(self, offset: int, instruction: il.Instruction) -> str:
        if not self.stack:
            raise self._error("stack underflow", offset, instruction)
        return self.stack.pop()

    def _lower(self, offset: int, instruction: il.Instruction) -> None:
        if isinstance(instruction, il.LoadArg):
            if not 0 <= instruction.index < self.method.parameter_count:
                raise self._error("no such argument", offset, instruction)
            slot = self._push()
            self._line(f"{slot} = arg{instruction.index}")
        elif isinstance(instruction, il.CastClass):
            value = self._pop(offset, instruction)
            cast = self._constant(cast_class(instruction.type), "cast")
            slot = self._push()
            self._line(f"{slot} = {cast}({value})")
        elif isinstance(instruction, il.UnboxAny):
            value = self._pop(offset, instruction)
            try:
                conversion = unbox_any(instruction.type)
            except UnsupportedMemberError as e:
                raise UnsupportedMemberError(e.msg, self.method.name) from e
            slot = self._push()
            if conversion is not None:
                hint = "unbox" if isinstance(conversion, UnboxAny) else "cast"
                self._line(f"{slot} = {self._constant(conversion, hint)}({value})")
        elif isinstance(instruction, il.StoreField):
            value = self._pop(offset, instruction)
            target = self._pop(offset, instruction)
            store = self._constant(object.__setattr__, "store")
            self._line(f"{store}({target}, {instruction.field.name!r}, {value})")
        elif isinstance(instruction, il.CallSetter):
            value = self._pop(offset, instruction)
            target = self._pop(offset, instruction)
            setter = self._constant(VirtualSetter(instruction.property), "setter")
            self._line(f"{setter}({target}, {value})")
        elif isinstance(instruction, il.Ret):
            if self.stack:
                raise self._error("stack not empty", offset, instruction)
            self._line("return None")
        else:
            raise self._error("unknown instruction", offset, instruction)


def lower(method: il.DynamicMethod) -> Listing:
    """Verify and lower method to Python source."""
    return Lowering(method).lower()


def create_delegate(
    method: il.DynamicMethod, options: Options = DEFAULT_OPTIONS
) -> Callable[..., object]:
    """Lower method and load it as a function."""
    listing = lower(method)
    return load_function(
        listing.source, listing.name, listing.source, listing.constants, options
    )


class EmitCompiler:
    """Write-side strategy: emits a setter DynamicMethod per member."""

    kind = "emit"

    def __init__(self, options: Options = DEFAULT_OPTIONS):
        self.options = options

    def dynamic_method_for(self, member: Member) -> il.DynamicMethod:
        if isinstance(member, FieldDescriptor):
            value_type = member.field_type
            store: il.Instruction = il.StoreField(member)
        elif isinstance(member, PropertyDescriptor):
            if member.setter is None:
                raise MissingAccessorError("property has no setter", member.qualname)
            value_type = member.property_type
            store = il.CallSetter(member)
        else:
            raise MemberError(
                "write thunks exist only for properties and fields", member.qualname
            )
        # unconvertible annotations fail here, before any IL exists
        member_conversion(value_type, member)
        method = il.DynamicMethod("Set" + member.name, 2)
        gen = method.get_il_generator()
        gen.emit(il.LoadArg(0))
        gen.emit(il.CastClass(member.declaring_type))
        gen.emit(il.LoadArg(1))
        gen.emit(il.UnboxAny(value_type))
        gen.emit(store)
        gen.emit(il.Ret())
        return method

    def source(self, member: Member) -> str:
        return lower(self.dynamic_method_for(member)).source

    def build(self, member: Member) -> Callable[..., object]:
        method = self.dynamic_method_for(member)
        thunk = create_delegate(method, self.options)
        logger.debug("emitted %s for %s", method.name, member.qualname)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s", lower(method).source)
        return thunk

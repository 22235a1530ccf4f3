"""Instruction set for dynamic methods.

Write thunks are not built as expression trees. They are emitted as a short
sequence of stack-machine instructions into a DynamicMethod, which emit.py
verifies and lowers to a Python function.

Stack discipline: every instruction pops `pops` values and pushes `pushes`
values. Arguments are loaded with LoadArg; a method returns with Ret on an
empty stack (all dynamic methods are void).

| Instruction | Stack before       | Stack after | Effect                            |
|-------------|--------------------|-------------|-----------------------------------|
| LoadArg i   | ...                | ..., arg_i  | push argument i                   |
| CastClass T | ..., v             | ..., v'     | checked cast of v to T            |
| UnboxAny T  | ..., v             | ..., v'     | unbox (value T) or cast (other T) |
| StoreField  | ..., target, value | ...         | write value into the field slot   |
| CallSetter  | ..., target, value | ...         | call the (overriding) setter      |
| Ret         | (empty)            | (empty)     | return None                       |
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .members import FieldDescriptor, PropertyDescriptor


@dataclass(frozen=True)
class Instruction:
    """Base for all instructions. Abstract."""

    pops: ClassVar[int] = 0
    pushes: ClassVar[int] = 0


@dataclass(frozen=True)
class LoadArg(Instruction):
    """Push argument `index` of the dynamic method."""

    pushes: ClassVar[int] = 1

    index: int


@dataclass(frozen=True)
class CastClass(Instruction):
    """Narrow the top of stack to a reference type; InvalidCastError otherwise."""

    pops: ClassVar[int] = 1
    pushes: ClassVar[int] = 1

    type: type


@dataclass(frozen=True)
class UnboxAny(Instruction):
    """Convert the top of stack to a declared type.

    Value types are unboxed (exact type match, UnboxError otherwise), any other
    type is cast as CastClass would. `object` is a no-op.
    """

    pops: ClassVar[int] = 1
    pushes: ClassVar[int] = 1

    type: object


@dataclass(frozen=True)
class StoreField(Instruction):
    """Store into a field of the target, bypassing any __setattr__ override.

    Semantics:
    - Works for __dict__ attributes, __slots__ members and frozen dataclasses
    """

    pops: ClassVar[int] = 2

    field: FieldDescriptor


@dataclass(frozen=True)
class CallSetter(Instruction):
    """Call the setter of a property with (target, value).

    Semantics:
    - Dispatched on the runtime type of target: an override of the property
      in a subclass has its own setter called

    Invariants:
    - property.setter is not None
    """

    pops: ClassVar[int] = 2

    property: PropertyDescriptor


@dataclass(frozen=True)
class Ret(Instruction):
    """Return None. Must be the last instruction."""


class ILGenerator:
    """Append-only instruction buffer of one DynamicMethod."""

    def __init__(self) -> None:
        self.instructions: list[Instruction] = []

    def emit(self, instruction: Instruction) -> None:
        self.instructions.append(instruction)


class DynamicMethod:
    """A void function of `parameter_count` erased arguments, defined by its IL."""

    def __init__(self, name: str, parameter_count: int):
        self.name = name
        self.parameter_count = parameter_count
        self._il = ILGenerator()

    def get_il_generator(self) -> ILGenerator:
        return self._il

    @property
    def instructions(self) -> list[Instruction]:
        return self._il.instructions

"""Conversions between erased values and declared types.

Every value crossing a thunk boundary is erased to `object`. Recovering the
declared type is one of two checked operations:

| Declared type                     | Operation | Check                  | Failure          |
|-----------------------------------|-----------|------------------------|------------------|
| bool, int, float, complex (value) | unbox     | type(v) is T           | UnboxError       |
| any other class (reference)       | cast      | isinstance(v, T)       | InvalidCastError |
| object, Any, no annotation        | identity  | none                   | none             |

`X | None` admits None on top of the check for X. A union admits anything one
of its members admits. Value types are matched exactly, so True is rejected
where int is declared and 3 where float is declared.
"""

from __future__ import annotations

import inspect
import types
import typing

from .errors import InvalidCastError, UnboxError, UnsupportedMemberError

VALUE_TYPES: tuple[type, ...] = (bool, int, float, complex)

NoneType = type(None)


def type_name(typ: object) -> str:
    """Readable name of a type or annotation, used in messages and generated code."""
    if typ is NoneType:
        return "None"
    if isinstance(typ, type):
        return typ.__qualname__
    return repr(typ).replace("typing.", "")


def is_value_type(typ: object) -> bool:
    """Check if values of typ are unboxed (exact type) rather than cast."""
    return isinstance(typ, type) and issubclass(typ, VALUE_TYPES)


def is_erased(typ: object) -> bool:
    """Check if typ is the erased type itself, so conversion is the identity."""
    return typ is object or typ is typing.Any or typ is inspect.Parameter.empty


class Conversion:
    """Checked conversion from an erased value to one declared type. Abstract.

    Instances are immutable and callable: `conversion(value)` returns value
    unchanged when the check passes and raises otherwise.
    """

    __slots__ = ("nullable",)

    def __init__(self, nullable: bool):
        self.nullable = nullable

    def accepts(self, value: object) -> bool:
        raise NotImplementedError

    def failure(self, value: object) -> Exception:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __call__(self, value: object) -> object:
        if value is None and self.nullable:
            return value
        if self.accepts(value):
            return value
        raise self.failure(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"


class CastClass(Conversion):
    """Checked downcast to a reference type."""

    __slots__ = ("type",)

    def __init__(self, typ: type, nullable: bool = False):
        super().__init__(nullable)
        self.type = typ

    def accepts(self, value: object) -> bool:
        return isinstance(value, self.type)

    def failure(self, value: object) -> Exception:
        return InvalidCastError(
            f"cannot cast {type_name(type(value))} to {self.describe()}"
        )

    def describe(self) -> str:
        if self.nullable:
            return type_name(self.type) + " | None"
        return type_name(self.type)


class UnboxAny(Conversion):
    """Exact-type unbox to a value type."""

    __slots__ = ("type",)

    def __init__(self, typ: type, nullable: bool = False):
        super().__init__(nullable)
        self.type = typ

    def accepts(self, value: object) -> bool:
        return type(value) is self.type

    def failure(self, value: object) -> Exception:
        return UnboxError(
            f"cannot unbox {type_name(type(value))} to {self.describe()}"
        )

    def describe(self) -> str:
        if self.nullable:
            return type_name(self.type) + " | None"
        return type_name(self.type)


class UnionOf(Conversion):
    """Admits a value when any of its member conversions admits it."""

    __slots__ = ("options",)

    def __init__(self, options: tuple[Conversion, ...], nullable: bool = False):
        super().__init__(nullable)
        self.options = options

    def accepts(self, value: object) -> bool:
        return any(option.accepts(value) for option in self.options)

    def failure(self, value: object) -> Exception:
        # Only a pure value-type union reports an unbox failure.
        if all(isinstance(option, UnboxAny) for option in self.options):
            return UnboxError(
                f"cannot unbox {type_name(type(value))} to {self.describe()}"
            )
        return InvalidCastError(
            f"cannot cast {type_name(type(value))} to {self.describe()}"
        )

    def describe(self) -> str:
        parts = [option.describe() for option in self.options]
        if self.nullable:
            parts.append("None")
        return " | ".join(parts)


def _is_union(typ: object) -> bool:
    origin = typing.get_origin(typ)
    return origin is typing.Union or origin is types.UnionType


def conversion_for(typ: object, nullable: bool = False) -> Conversion | None:
    """Build the conversion for a declared type; None means identity.

    Raises UnsupportedMemberError for annotations with no runtime check
    (type variables, Literal, forward references left as strings).
    """
    if typ is None:
        typ = NoneType
    if is_erased(typ):
        return None
    if _is_union(typ):
        args = typing.get_args(typ)
        if NoneType in args:
            nullable = True
        members = [a for a in args if a is not NoneType]
        options: list[Conversion] = []
        for member in members:
            option = conversion_for(member)
            if option is None:
                return None
            options.append(option)
        if len(options) == 1:
            options[0].nullable = nullable
            return options[0]
        return UnionOf(tuple(options), nullable)
    if typing.get_origin(typ) is typing.Annotated:
        return conversion_for(typing.get_args(typ)[0], nullable)
    supertype = getattr(typ, "__supertype__", None)
    if supertype is not None:
        return conversion_for(supertype, nullable)
    if isinstance(typ, typing.TypeVar):
        raise UnsupportedMemberError(
            "generic parameter " + type_name(typ) + " cannot be converted"
        )
    origin = typing.get_origin(typ)
    if isinstance(origin, type):
        return CastClass(origin, nullable)
    if isinstance(typ, type):
        if is_value_type(typ):
            return UnboxAny(typ, nullable)
        return CastClass(typ, nullable)
    raise UnsupportedMemberError("annotation " + type_name(typ) + " cannot be converted")


def cast_class(typ: type) -> Conversion:
    """Conversion narrowing a target to its declaring type (never nullable)."""
    return CastClass(typ)


def unbox_any(typ: object) -> Conversion | None:
    """Conversion of an erased value to a member's declared type.

    Like the IL instruction it is named after, it unboxes value types and
    casts reference types.
    """
    return conversion_for(typ)

"""latebound: compile fast late-bound thunks for methods, properties and fields."""

from __future__ import annotations

from .config import Options
from .convert import CastClass, Conversion, UnboxAny, UnionOf, conversion_for
from .errors import (
    EmitError,
    InvalidCastError,
    LateBoundError,
    MemberError,
    MissingAccessorError,
    UnboxError,
    UnsupportedMemberError,
)
from .factory import (
    LateBoundField,
    LateBoundFieldSet,
    LateBoundMethod,
    LateBoundProperty,
    LateBoundPropertySet,
    create,
    create_field,
    create_field_set,
    create_method,
    create_property,
    create_property_set,
    create_set,
    thunk_source,
)
from .members import (
    FieldDescriptor,
    Member,
    MethodDescriptor,
    Parameter,
    PropertyDescriptor,
    describe,
    describe_field,
    describe_method,
    describe_property,
)

__all__ = [
    "CastClass",
    "Conversion",
    "EmitError",
    "FieldDescriptor",
    "InvalidCastError",
    "LateBoundError",
    "LateBoundField",
    "LateBoundFieldSet",
    "LateBoundMethod",
    "LateBoundProperty",
    "LateBoundPropertySet",
    "Member",
    "MemberError",
    "MethodDescriptor",
    "MissingAccessorError",
    "Options",
    "Parameter",
    "PropertyDescriptor",
    "UnboxAny",
    "UnboxError",
    "UnionOf",
    "UnsupportedMemberError",
    "conversion_for",
    "create",
    "create_field",
    "create_field_set",
    "create_method",
    "create_property",
    "create_property_set",
    "create_set",
    "describe",
    "describe_field",
    "describe_method",
    "describe_property",
    "thunk_source",
]

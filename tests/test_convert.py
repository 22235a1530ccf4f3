"""Conversions from erased values to declared types."""

import inspect
from typing import Annotated, Any, Literal, NewType, Optional, TypeVar, Union

import pytest

from latebound import (
    CastClass,
    InvalidCastError,
    UnboxAny,
    UnboxError,
    UnionOf,
    UnsupportedMemberError,
    conversion_for,
)
from samples import Calc, Color, ScientificCalc

UserId = NewType("UserId", int)


def test_erased_types_convert_as_identity():
    assert conversion_for(object) is None
    assert conversion_for(Any) is None
    assert conversion_for(inspect.Parameter.empty) is None


def test_value_types_unbox_exactly():
    to_int = conversion_for(int)
    assert isinstance(to_int, UnboxAny)
    assert to_int(5) == 5
    with pytest.raises(UnboxError):
        to_int(True)
    with pytest.raises(UnboxError):
        to_int(5.0)
    with pytest.raises(UnboxError, match="cannot unbox None to int"):
        to_int(None)
    with pytest.raises(UnboxError):
        conversion_for(float)(3)
    assert conversion_for(Color)(Color.RED) is Color.RED


def test_reference_types_cast_with_isinstance():
    to_calc = conversion_for(Calc)
    assert isinstance(to_calc, CastClass)
    special = ScientificCalc()
    assert to_calc(special) is special
    with pytest.raises(InvalidCastError, match="cannot cast str to Calc"):
        to_calc("calc")


def test_conversion_failures_are_type_errors():
    with pytest.raises(TypeError):
        conversion_for(int)("1")
    with pytest.raises(TypeError):
        conversion_for(str)(1)


def test_optional_accepts_none():
    to_int = conversion_for(Optional[int])
    assert to_int(None) is None
    assert to_int(3) == 3
    assert repr(to_int) == "UnboxAny(int | None)"
    assert conversion_for(str | None)(None) is None


def test_unions():
    to_number = conversion_for(int | float)
    assert isinstance(to_number, UnionOf)
    assert to_number(1.5) == 1.5
    with pytest.raises(UnboxError):
        to_number("1")
    with pytest.raises(InvalidCastError):
        conversion_for(int | str)(b"1")
    assert conversion_for(Union[int, Any]) is None


def test_generic_aliases_check_their_origin():
    to_list = conversion_for(list[int])
    assert to_list(["not", "checked"]) == ["not", "checked"]
    with pytest.raises(InvalidCastError):
        to_list((1, 2))


def test_annotated_and_newtype_convert_as_their_base():
    assert isinstance(conversion_for(Annotated[int, "meta"]), UnboxAny)
    assert conversion_for(UserId)(UserId(7)) == 7


def test_unconvertible_annotations():
    with pytest.raises(UnsupportedMemberError):
        conversion_for(Literal["a"])
    with pytest.raises(UnsupportedMemberError):
        conversion_for(TypeVar("T"))

"""Property and field write thunks: (target, value) -> None."""

import pytest

from latebound import (
    InvalidCastError,
    MemberError,
    MissingAccessorError,
    UnboxError,
    create,
    create_field_set,
    create_property_set,
    create_set,
    describe_field,
    describe_method,
    describe_property,
)
from samples import (
    Account,
    Calc,
    Color,
    Counter,
    DisplayThermostat,
    Guarded,
    Masked,
    Pixel,
    Point,
    Slotted,
    SmartThermostat,
    TallyCounter,
    Thermostat,
)


def test_field_round_trip(counter: Counter):
    member = describe_field(Counter, "count")
    write = create_field_set(member)
    read = create(member)
    assert write(counter, 42) is None
    assert read(counter) == 42


def test_property_round_trip(account: Account):
    member = describe_property(Account, "balance")
    create_property_set(member)(account, 250)
    assert create(member)(account) == 250
    assert account._balance == 250


def test_non_public_setter_is_called(account: Account):
    owner = describe_property(Account, "owner")
    assert owner.property_type is str
    create_set(owner)(account, "alice")
    assert account.summary == "alice: 100"


def test_write_only_property(account: Account):
    create_set(describe_property(Account, "secret"))(account, {"pin": 1234})
    assert account._secret == {"pin": 1234}


def test_property_without_setter_fails_at_build_time():
    summary = describe_property(Account, "summary")
    with pytest.raises(MissingAccessorError, match="property has no setter"):
        create_property_set(summary)


def test_methods_cannot_be_set():
    with pytest.raises(MemberError):
        create_set(describe_method(Calc, "add"))


def test_frozen_dataclass_field_is_written_directly():
    point = Point(1, 2)
    create_field_set(describe_field(Point, "x"))(point, 10)
    assert point == Point(10, 2)


def test_setattr_override_is_bypassed():
    guarded = Guarded()
    create_field_set(describe_field(Guarded, "name"))(guarded, "changed")
    assert guarded.name == "changed"


def test_slot_field_is_written():
    slotted = Slotted(1.0)
    create_field_set(describe_field(Slotted, "value"))(slotted, 2.5)
    assert slotted.value == 2.5


def test_incompatible_value_leaves_field_unmodified(counter: Counter):
    write = create_field_set(describe_field(Counter, "count"))
    with pytest.raises(UnboxError):
        write(counter, "42")
    with pytest.raises(UnboxError):
        write(counter, 42.0)
    assert counter.count == 5


def test_incompatible_value_leaves_property_unmodified(account: Account):
    write = create_property_set(describe_property(Account, "balance"))
    with pytest.raises(UnboxError, match="cannot unbox str to int"):
        write(account, "lots")
    assert account.balance == 100


def test_reference_field_is_cast(counter: Counter):
    write = create_field_set(describe_field(Counter, "label"))
    with pytest.raises(InvalidCastError, match="cannot cast int to str"):
        write(counter, 3)
    assert counter.label == "apples"


def test_wrong_target_is_invalid_cast(account: Account):
    write = create_field_set(describe_field(Counter, "count"))
    with pytest.raises(InvalidCastError):
        write(account, 1)
    assert not hasattr(account, "count")


def test_enum_value_must_match_exactly():
    pixel = Pixel()
    write = create_field_set(describe_field(Pixel, "color"))
    write(pixel, Color.GREEN)
    assert pixel.color is Color.GREEN
    with pytest.raises(UnboxError):
        write(pixel, 1)
    assert pixel.color is Color.GREEN


def test_optional_field_accepts_none():
    pixel = Pixel()
    write = create_field_set(describe_field(Pixel, "owner"))
    write(pixel, "carol")
    assert pixel.owner == "carol"
    write(pixel, None)
    assert pixel.owner is None


def test_independent_write_thunks_are_interchangeable():
    member = describe_field(Counter, "count")
    first, second = create_set(member), create_set(member)
    a, b = Counter(), Counter()
    first(a, 3)
    second(b, 3)
    assert a.count == b.count == 3


def test_property_write_dispatches_to_overriding_setter():
    member = describe_property(Thermostat, "target")
    write, read = create_set(member), create(member)
    smart = SmartThermostat()
    write(smart, 42)
    assert read(smart) == 42
    assert smart._schedule == 42
    assert smart._target == 20


def test_property_write_on_declaring_type_uses_declared_setter():
    member = describe_property(Thermostat, "target")
    plain = Thermostat()
    create_set(member)(plain, 18)
    assert create(member)(plain) == 18


def test_getter_only_override_keeps_the_inherited_setter():
    member = describe_property(Thermostat, "target")
    display = DisplayThermostat()
    create_set(member)(display, 25)
    assert create(member)(display) == 25


def test_field_round_trip_on_subclass_redeclaring_the_field():
    member = describe_field(Counter, "count")
    tally = TallyCounter()
    create_set(member)(tally, 11)
    assert create(member)(tally) == 11
    assert create(describe_field(TallyCounter, "count"))(tally) == 11


def test_field_round_trip_ignores_getattribute_override():
    member = describe_field(Masked, "count")
    masked = Masked()
    create_set(member)(masked, 42)
    assert create(member)(masked) == 42
    assert masked.count == -1

"""Property and field read thunks: (target) -> value."""

import pytest

from latebound import (
    FieldDescriptor,
    InvalidCastError,
    MissingAccessorError,
    create,
    create_field,
    create_property,
    describe_field,
    describe_property,
)
from samples import Account, Counter, Masked, Point, Slotted


def test_field_read(counter: Counter):
    count = create_field(describe_field(Counter, "count"))
    assert count(counter) == 5


def test_field_read_matches_getattr(counter: Counter):
    label = create(describe_field(Counter, "label"))
    assert label(counter) == getattr(counter, "label")


def test_property_read_goes_through_getter(account: Account):
    balance = create_property(describe_property(Account, "balance"))
    assert balance(account) == 100
    account._balance = 7
    assert balance(account) == 7


def test_read_only_property(account: Account):
    summary = create(describe_property(Account, "summary"))
    assert summary(account) == "nobody: 100"


def test_slots_and_frozen_dataclass_fields():
    value = create_field(describe_field(Slotted, "value"))
    x = create_field(describe_field(Point, "x"))
    assert value(Slotted(2.5)) == 2.5
    assert x(Point(3, 4)) == 3


def test_unset_slot_raises_attribute_error():
    value = create_field(describe_field(Slotted, "value"))
    empty = Slotted.__new__(Slotted)
    with pytest.raises(AttributeError):
        value(empty)


def test_subclass_target_is_accepted():
    class Special(Counter):
        pass

    count = create_field(describe_field(Counter, "count"))
    assert count(Special(count=9)) == 9


def test_wrong_target_is_invalid_cast(account: Account):
    count = create_field(describe_field(Counter, "count"))
    with pytest.raises(InvalidCastError):
        count(account)


def test_property_without_getter_fails_at_build_time():
    secret = describe_property(Account, "secret")
    assert secret.getter is None
    with pytest.raises(MissingAccessorError, match="property has no getter"):
        create_property(secret)


def test_hand_built_descriptor_with_odd_name():
    class Bag:
        pass

    bag = Bag()
    setattr(bag, "odd name", 1)
    read = create(FieldDescriptor(Bag, "odd name"))
    assert read(bag) == 1


def test_field_read_is_direct():
    count = create_field(describe_field(Masked, "count"))
    masked = Masked(7)
    assert masked.count == -1
    assert count(masked) == 7

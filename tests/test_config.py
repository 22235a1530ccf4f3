"""Compiler options."""

from latebound import Options


def test_defaults():
    options = Options()
    assert options.register_source is True
    assert options.filename("Setcount", 3) == "<latebound Setcount#3>"


def test_from_env():
    options = Options.from_env(
        {"LATEBOUND_REGISTER_SOURCE": "off", "LATEBOUND_NAME_PREFIX": "thunks"}
    )
    assert options == Options(register_source=False, name_prefix="thunks")


def test_from_env_ignores_missing_keys():
    assert Options.from_env({}) == Options()
    assert Options.from_env({"LATEBOUND_REGISTER_SOURCE": "1"}).register_source

"""Compiler options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class Options:
    """Settings shared by both compilation strategies.

    - register_source: put emitted source into linecache so tracebacks through
      a write thunk show the generated lines
    - name_prefix: prefix of the pseudo-filenames generated code is compiled
      under, e.g. "<latebound Setcount#3>"
    """

    register_source: bool = True
    name_prefix: str = "latebound"

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> Options:
        """Read LATEBOUND_REGISTER_SOURCE and LATEBOUND_NAME_PREFIX from env."""
        register_source = cls.register_source
        raw = env.get("LATEBOUND_REGISTER_SOURCE")
        if raw is not None:
            register_source = raw.strip().lower() not in _FALSE_VALUES
        name_prefix = env.get("LATEBOUND_NAME_PREFIX", cls.name_prefix)
        return cls(register_source=register_source, name_prefix=name_prefix)

    def filename(self, name: str, serial: int) -> str:
        return f"<{self.name_prefix} {name}#{serial}>"


DEFAULT_OPTIONS = Options()

"""Loading generated code as a live function.

Both strategies end here: a syntax tree or a source string is compiled under a
unique pseudo-filename, executed in a fresh namespace holding the constants
the code refers to, and the single function it defines is returned. Its
linecache entry is dropped once that function is garbage collected.
"""

from __future__ import annotations

import ast
import itertools
import linecache
import weakref
from typing import Callable, Mapping

from .config import Options

_serial = itertools.count(1)


def identifier(text: str) -> str:
    """Squash text into something usable as a Python identifier."""
    chars = [c if c.isalnum() or c == "_" else "_" for c in text]
    result = "".join(chars)
    if not result or result[0].isdigit():
        result = "_" + result
    return result


def _register(filename: str, source: str) -> None:
    """Make source visible to traceback and inspect.getsource."""
    lines = [line + "\n" for line in source.split("\n")]
    linecache.cache[filename] = (len(source), None, lines, filename)


def load_function(
    code: ast.Module | str,
    name: str,
    source: str,
    constants: Mapping[str, object],
    options: Options,
) -> Callable[..., object]:
    """Compile code, run it in a namespace seeded with constants, return function name."""
    filename = options.filename(name, next(_serial))
    compiled = compile(code, filename, "exec")
    namespace: dict[str, object] = dict(constants)
    exec(compiled, namespace)
    function = namespace[name]
    if options.register_source:
        _register(filename, source)
        weakref.finalize(function, linecache.cache.pop, filename, None)
    return function

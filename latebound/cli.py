"""latebound CLI: print the thunk source compiled for a class member."""

from __future__ import annotations

import importlib
import logging
import os
import sys

from .config import Options
from .errors import LateBoundError
from .factory import create, create_set, thunk_source
from .members import describe

USAGE: str = """\
latebound [OPTIONS] MODULE:CLASS.MEMBER

Print the Python source of the thunk compiled for a method, property or field.

Options:
  --set          Print the write thunk (properties and fields only)
  -v, --verbose  Also compile the thunk, logging at DEBUG level on stderr
  --help         Show this help message

Environment:
  LATEBOUND_REGISTER_SOURCE, LATEBOUND_NAME_PREFIX
"""


def resolve(target: str) -> tuple[type, str]:
    """Split MODULE:CLASS.MEMBER and import the class. CLASS may be dotted."""
    module_name, sep, path = target.partition(":")
    if not sep or not module_name or "." not in path:
        raise ValueError("expected MODULE:CLASS.MEMBER, got '" + target + "'")
    owner_path, _, member = path.rpartition(".")
    obj: object = importlib.import_module(module_name)
    for part in owner_path.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError("'" + module_name + ":" + owner_path + "' is not a class")
    return obj, member


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    target: str = ""
    write = False
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--set":
            write = True
            i += 1
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("latebound: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif target == "":
            target = arg
            i += 1
        else:
            print("latebound: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if target == "":
        print("latebound: missing MODULE:CLASS.MEMBER argument", file=sys.stderr)
        return 2

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    options = Options.from_env(os.environ)

    try:
        cls, name = resolve(target)
    except ValueError as e:
        print("latebound: " + str(e), file=sys.stderr)
        return 2
    except (ImportError, AttributeError) as e:
        print("latebound: cannot resolve '" + target + "': " + str(e), file=sys.stderr)
        return 1

    try:
        member = describe(cls, name)
        source = thunk_source(member, write, options)
        if verbose:
            if write:
                create_set(member, options)
            else:
                create(member, options)
    except LateBoundError as e:
        print("latebound: error: " + str(e), file=sys.stderr)
        return 1

    print(source)
    return 0


if __name__ == "__main__":
    sys.exit(main())

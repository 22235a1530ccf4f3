"""Diagnostics raised while building or invoking thunks.

Construction-time errors (MemberError, EmitError and subclasses) abort a build
before any thunk exists. Invocation-time errors (InvalidCastError, UnboxError)
come out of the thunk call itself and are TypeErrors, like a direct call with
bad arguments.
"""

from __future__ import annotations


class LateBoundError(Exception):
    """Base error for descriptor lookup, compilation and conversion."""

    def __init__(self, msg: str, member: str | None = None):
        if member is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg} ({member})")
        self.msg = msg
        self.member = member


# ============================================================
# CONSTRUCTION TIME
# ============================================================


class MemberError(LateBoundError):
    """Member could not be found or is the wrong kind for the request."""


class MissingAccessorError(MemberError):
    """Property has no getter (read thunk) or no setter (write thunk)."""


class UnsupportedMemberError(MemberError):
    """Member signature uses something thunks cannot express (*args, TypeVar...)."""


class EmitError(LateBoundError):
    """Instruction stream of a dynamic method is malformed."""


# ============================================================
# INVOCATION TIME
# ============================================================


class InvalidCastError(LateBoundError, TypeError):
    """Erased value is not an instance of the reference type it was cast to."""


class UnboxError(LateBoundError, TypeError):
    """Erased value is not exactly the value type it was unboxed to."""

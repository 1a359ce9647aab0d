"""
Protover Errors

Structured exceptions for the protocol-version stack. Each carries a stable
integer code (see `ErrorCode`) so callers (voting, descriptor checks, CLI) can
classify failures without string-matching.

Hierarchy
---------
- ProtoverError          : base class.
- MalformedInput         : structural violation of the protocol-list grammar.
  - IntegerOutOfRange    : version number does not fit in 32 bits.
  - InvalidRange         : range token with low > high.
- EmptyInput             : caller required a non-empty list and got none.
- ConfigError            : the local support table is misconfigured.

`MalformedInput` also derives from `ValueError`, so code that only knows the
stdlib contract (``except ValueError``) keeps working.

NOTE: Keep this module free of heavy imports; the parser raises from hot paths.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(IntEnum):
    """Stable error codes for protover exceptions."""
    PROTOVER_GENERIC    = 3000
    MALFORMED_INPUT     = 3001
    INTEGER_OUT_OF_RANGE = 3002
    INVALID_RANGE       = 3003
    EMPTY_INPUT         = 3004
    CONFIG              = 3005


class ProtoverError(Exception):
    """
    Base class for protover exceptions.

    Parameters
    ----------
    message : str
        Human-readable description.
    code : ErrorCode | int
        Stable code for programmatic handling (default: PROTOVER_GENERIC).
    context : Mapping[str, Any] | None
        Optional structured fields (entry, token, ...). Keep it small.
    cause : BaseException | None
        Optional underlying exception; also set via `raise ... from ...`.
    """

    default_code: ErrorCode = ErrorCode.PROTOVER_GENERIC

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | int | None = None,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: int = int(code if code is not None else self.default_code)
        self.context: Dict[str, Any] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause  # type: ignore[attr-defined]

    def __str__(self) -> str:  # pragma: no cover - trivial
        tail = f" context={self.context}" if self.context else ""
        return f"[{self.code}] {self.message}{tail}"

    def to_dict(self) -> Dict[str, Any]:
        """Structured view suitable for logs."""
        out: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.context:
            out["context"] = self.context
        return out


class MalformedInput(ProtoverError, ValueError):
    """
    Raised by the parser when a protocol list violates the grammar.

    Context fields
    --------------
    - entry : the offending `Name=spec` entry (if known)
    - token : the offending version token (if known)
    """

    default_code = ErrorCode.MALFORMED_INPUT

    def __init__(
        self,
        message: str,
        *,
        entry: Optional[str] = None,
        token: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if entry is not None:
            base["entry"] = entry
        if token is not None:
            base["token"] = token
        if context:
            base.update(context)
        super().__init__(message, context=base, cause=cause)


# The parser contract names entry-level failures "malformed entry".
MalformedEntry = MalformedInput


class IntegerOutOfRange(MalformedInput):
    """A version number exceeds the 32-bit unsigned width."""

    default_code = ErrorCode.INTEGER_OUT_OF_RANGE

    @classmethod
    def for_value(cls, value: int, *, token: Optional[str] = None, entry: Optional[str] = None) -> "IntegerOutOfRange":
        return cls(
            f"version {value} does not fit in 32 bits",
            entry=entry,
            token=token,
            context={"value": value},
        )


class InvalidRange(MalformedInput):
    """A range has its lower bound above its upper bound."""

    default_code = ErrorCode.INVALID_RANGE

    @classmethod
    def for_bounds(cls, low: int, high: int, *, token: Optional[str] = None, entry: Optional[str] = None) -> "InvalidRange":
        return cls(
            f"range lower bound {low} exceeds upper bound {high}",
            entry=entry,
            token=token,
            context={"low": low, "high": high},
        )


class EmptyInput(ProtoverError):
    """The caller required at least one entry and the list was empty."""

    default_code = ErrorCode.EMPTY_INPUT


class ConfigError(ProtoverError):
    """
    Raised when the local support table cannot be loaded or fails validation.

    This is a startup condition, never a request-time one.
    """

    default_code = ErrorCode.CONFIG

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        protocol: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if path is not None:
            base["path"] = path
        if protocol is not None:
            base["protocol"] = protocol
        if context:
            base.update(context)
        super().__init__(message, context=base, cause=cause)


__all__ = [
    "ErrorCode",
    "ProtoverError",
    "MalformedInput",
    "MalformedEntry",
    "IntegerOutOfRange",
    "InvalidRange",
    "EmptyInput",
    "ConfigError",
]

# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except Exception:
        return default


def _clamp_exit_code(code: int) -> int:
    # Exit codes are 0..255; a failure must never map to 0.
    if code <= 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    return ", ".join(f"{k}={ctx[k]!r}" for k in sorted(ctx.keys()))


class ErrorKind(Enum):
    """Sub-classification of a failure within its error family."""

    USAGE = "usage"
    NOT_FOUND = "not-found"
    RUNNING_NOT_SHUT_OFF = "running-not-shut-off"
    TOOL_FAILURE = "tool-failure"
    PARSE_FAILURE = "parse-failure"
    NO_DEVICES_FOUND = "no-devices-found"
    IO_FAILURE = "io-failure"


@dataclass(eq=False)
class PersistNetError(Exception):
    """
    Base project error with:
      - stable fields for reporting
      - readable __str__ (what users see)
      - safe code handling (never crashes on int(), never exits 0)

    Pipeline stages return these inside a Result rather than raising them;
    only the CLI parse layer raises (UsageError).
    """
    code: int = 1
    msg: str = "error"
    kind: Optional[ErrorKind] = None
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=1))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        """
        Human-friendly message for CLI output/logs.
        """
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context))}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message(include_context=False, include_cause=False)


class UsageError(PersistNetError):
    """Bad command line invocation (missing/extra positional args, bad flag values)."""

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ErrorKind.USAGE
        if self.code == 1:
            self.code = 2
        super().__post_init__()


class VMStateError(PersistNetError):
    """The VM is missing, or exists but is not shut off."""
    pass


class DiscoveryError(PersistNetError):
    """Reading MAC addresses from the domain description failed."""
    pass


class RenderError(PersistNetError):
    """Writing the rendered rules to the local artifact failed."""

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ErrorKind.IO_FAILURE
        super().__post_init__()


class DeliveryError(PersistNetError):
    """Installing the rules file into the guest filesystem failed."""

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ErrorKind.TOOL_FAILURE
        super().__post_init__()


class ToolInvocationError(PersistNetError):
    """
    An external tool could not be run, exited non-zero or timed out.

    Raised by the command runner only; backends translate it into the error
    family of the stage they serve.
    """

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ErrorKind.TOOL_FAILURE
        super().__post_init__()


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output for CLI.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, PersistNetError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )

    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__

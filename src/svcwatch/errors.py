"""Error types raised by the systemctl and journalctl adapters.

Everything derives from :class:`SystemdError`, itself a ``RuntimeError``, so
callers that only care about "the call failed" can catch a single type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .journalctl import Entry


class SystemdError(RuntimeError):
    """Base class for every failure surfaced by svcwatch."""

    retryable = False


class CommandNotFoundError(SystemdError):
    """The external tool could not be found on ``PATH``."""

    def __init__(self, cmd: Sequence[str]) -> None:
        self.cmd = list(cmd)
        super().__init__(f"Command not found: {self.cmd[0]}")


class CommandFailedError(SystemdError):
    """The external tool could not be started or exited non-zero.

    Attributes:
        cmd: The full argument list that was executed.
        returncode: Exit status, or ``None`` if the process never started.
        stderr: Diagnostic text written by the tool (stripped).
    """

    def __init__(self, cmd: Sequence[str], returncode: Optional[int], stderr: str = "") -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.cmd)}"
        if stderr:
            msg += f"\n{stderr}"
        super().__init__(msg)


class CommandTimeoutError(SystemdError):
    """The external tool did not exit before the deadline and was killed."""

    retryable = True

    def __init__(self, cmd: Sequence[str], timeout: float) -> None:
        self.cmd = list(cmd)
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {' '.join(self.cmd)}")


class StateUnavailableError(SystemdError):
    """``systemctl show`` failed or did not report all three unit states."""

    def __init__(self, unit: str, missing: Sequence[str] = ()) -> None:
        self.unit = unit
        self.missing = list(missing)
        msg = f"Unable to read state for unit {unit}"
        if self.missing:
            msg += f" (missing {', '.join(self.missing)})"
        super().__init__(msg)


class EntryParseError(SystemdError):
    """A journal record could not be decoded.

    Attributes:
        entries: Entries successfully parsed before the bad line.
        line_number: 1-based line of the output that failed to parse.
    """

    def __init__(self, message: str, entries: Optional[List["Entry"]] = None, line_number: int = 0) -> None:
        self.entries: List["Entry"] = list(entries or [])
        self.line_number = line_number
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)

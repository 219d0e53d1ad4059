"""Error presentation utilities.

Centralized gate error formatting and exit code mapping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chkapr.approval.errors import (
    FetchFailed,
    GateError,
    GhMissing,
    PullRequestListMissing,
    ReleaseInvalid,
    ReleaseMismatch,
    ReleaseMissing,
    SnapshotInvalid,
)
from chkapr.core.errors import ErrorCode
from chkapr.output.console import Style

if TYPE_CHECKING:
    from chkapr.output.console import ConsoleProtocol

__all__ = ["print_gate_error", "gate_error_exit_code"]


def print_gate_error(error: GateError, console: ConsoleProtocol) -> None:
    match error:
        case ReleaseMissing(repository=repository):
            console.error(f"release error: no release found in {repository or 'repository'}")
        case ReleaseInvalid(summary=summary):
            console.error(f"release error: {summary}")
        case ReleaseMismatch(expected=expected, actual=actual):
            console.error(f"release error: snapshot is for {actual}, expected {expected}")
        case PullRequestListMissing(repository=repository):
            console.error(f"pr error: no pull request list returned for {repository or 'repository'}")
        case SnapshotInvalid(reason=reason, source=source):
            console.error(f"invalid snapshot: {reason}")
            if source:
                console.print(f"source: {source}", Style.DIM)
        case GhMissing(hint=hint):
            console.error("gh: missing")
            console.print(f"hint: {hint}", Style.DIM)
        case FetchFailed(repository=repository, hint=hint):
            console.error(f"GitHub query failed: {repository}")
            if hint:
                console.print(f"hint: {hint}", Style.DIM)


def gate_error_exit_code(error: GateError) -> int:
    match error:
        case ReleaseMissing() | ReleaseInvalid() | ReleaseMismatch() | PullRequestListMissing():
            return int(ErrorCode.GATE_ERROR)
        case SnapshotInvalid():
            return int(ErrorCode.IO_ERROR)
        case GhMissing():
            return int(ErrorCode.ENV_ERROR)
        case FetchFailed():
            return int(ErrorCode.NETWORK_ERROR)
    return int(ErrorCode.GATE_ERROR)

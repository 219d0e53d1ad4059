"""Tests for chkapr.output.errors module."""

from __future__ import annotations

import pytest

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
from chkapr.output.console import MockConsole, Style
from chkapr.output.errors import gate_error_exit_code, print_gate_error


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ReleaseMissing(repository="r"), ErrorCode.GATE_ERROR),
        (ReleaseInvalid(tag_name="", summary="s"), ErrorCode.GATE_ERROR),
        (ReleaseMismatch(expected="a", actual="b"), ErrorCode.GATE_ERROR),
        (PullRequestListMissing(repository="r"), ErrorCode.GATE_ERROR),
        (SnapshotInvalid(reason="bad"), ErrorCode.IO_ERROR),
        (GhMissing(), ErrorCode.ENV_ERROR),
        (FetchFailed(repository="o/r"), ErrorCode.NETWORK_ERROR),
    ],
)
def test_exit_codes(error: GateError, code: ErrorCode) -> None:
    assert gate_error_exit_code(error) == int(code)


def test_release_invalid_prints_summary() -> None:
    console = MockConsole()
    summary = "The structure of release is not correct. [name: ]"
    print_gate_error(ReleaseInvalid(tag_name="", summary=summary), console)
    assert console.messages == [f"error: release error: {summary}"]


def test_fetch_failed_prints_hint() -> None:
    console = MockConsole()
    print_gate_error(FetchFailed(repository="o/r", hint="HTTP 401"), console)
    assert console.has_error()
    assert console.outputs[-1].message == "hint: HTTP 401"
    assert console.outputs[-1].style == Style.DIM


def test_gh_missing_prints_install_hint() -> None:
    console = MockConsole()
    print_gate_error(GhMissing(), console)
    assert console.find("cli.github.com")

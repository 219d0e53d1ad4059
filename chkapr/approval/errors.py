from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReleaseMissing:
    repository: str


@dataclass(frozen=True, slots=True)
class ReleaseInvalid:
    tag_name: str
    summary: str


@dataclass(frozen=True, slots=True)
class ReleaseMismatch:
    expected: str
    actual: str


@dataclass(frozen=True, slots=True)
class PullRequestListMissing:
    repository: str


@dataclass(frozen=True, slots=True)
class SnapshotInvalid:
    reason: str
    source: str | None = None


@dataclass(frozen=True, slots=True)
class GhMissing:
    hint: str = "Install GitHub CLI: https://cli.github.com/"


@dataclass(frozen=True, slots=True)
class FetchFailed:
    repository: str
    hint: str | None = None


GateError = (
    ReleaseMissing
    | ReleaseInvalid
    | ReleaseMismatch
    | PullRequestListMissing
    | SnapshotInvalid
    | GhMissing
    | FetchFailed
)

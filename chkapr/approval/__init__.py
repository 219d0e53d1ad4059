"""Canary release approval gate.

Layout:
- model: snapshot entities and their predicates
- evaluator: the approval decision
- snapshot: GraphQL JSON decoding
- gh: fetching the snapshot through the GitHub CLI
- service: glue used by the CLI
"""

from __future__ import annotations

from .errors import (
    FetchFailed,
    GateError,
    GhMissing,
    PullRequestListMissing,
    ReleaseInvalid,
    ReleaseMismatch,
    ReleaseMissing,
    SnapshotInvalid,
)
from .evaluator import GateReport, evaluate, explain, select_approved
from .model import (
    ParentCommit,
    PullRequestRecord,
    ReleaseDescriptor,
    Review,
    Snapshot,
    TeamRoster,
)

__all__ = [
    "FetchFailed",
    "GateError",
    "GateReport",
    "GhMissing",
    "ParentCommit",
    "PullRequestListMissing",
    "PullRequestRecord",
    "ReleaseDescriptor",
    "ReleaseInvalid",
    "ReleaseMismatch",
    "ReleaseMissing",
    "Review",
    "Snapshot",
    "SnapshotInvalid",
    "TeamRoster",
    "evaluate",
    "explain",
    "select_approved",
]

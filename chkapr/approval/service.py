from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from chkapr.approval.errors import GateError, ReleaseMismatch
from chkapr.approval.evaluator import GateReport, evaluate, explain
from chkapr.approval.gh import fetch_snapshot
from chkapr.approval.model import Snapshot
from chkapr.approval.snapshot import load_snapshot
from chkapr.core.config import GateSettings
from chkapr.core.result import Err, Ok, Result

SnapshotFetcher = Callable[..., Result[Snapshot, GateError]]


@dataclass(frozen=True, slots=True)
class GateOutcome:
    snapshot: Snapshot
    report: GateReport
    # (pull request number, reason) for every pull request that was not approved
    rejected: tuple[tuple[int, str], ...]


class GateService:
    """Load a snapshot (from GitHub or a saved file) and run the gate on it."""

    def __init__(
        self,
        *,
        settings: GateSettings,
        cwd: Path,
        snapshot_path: Path | None = None,
        fetcher: SnapshotFetcher | None = None,
    ) -> None:
        self._settings = settings
        self._cwd = cwd
        self._snapshot_path = snapshot_path
        self._fetcher = fetcher

    def load_snapshot(self) -> Result[Snapshot, GateError]:
        if self._snapshot_path is not None:
            return load_snapshot(self._snapshot_path)
        fetcher = self._fetcher or fetch_snapshot
        return fetcher(cwd=self._cwd, settings=self._settings)

    def run(self) -> Result[GateOutcome, GateError]:
        snapshot = self.load_snapshot()
        if isinstance(snapshot, Err):
            return snapshot

        team = self._settings.approvable_team
        result = evaluate(snapshot.value, team)
        if isinstance(result, Err):
            return result

        report = result.value
        if report.release.tag_name != self._settings.target:
            return Err(
                ReleaseMismatch(expected=self._settings.target, actual=report.release.tag_name)
            )

        rejected = tuple(
            (pr.number, reason)
            for pr, reason in explain(report.release, snapshot.value.pull_requests or (), team)
            if reason is not None
        )
        return Ok(GateOutcome(snapshot=snapshot.value, report=report, rejected=rejected))

from __future__ import annotations

from pathlib import Path

from chkapr.approval.errors import FetchFailed, GateError, ReleaseMismatch, ReleaseMissing
from chkapr.approval.model import Snapshot
from chkapr.approval.service import GateService
from chkapr.core.config import GateSettings
from chkapr.core.result import Err, Ok, Result

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "test_data.json"
SETTINGS = GateSettings(target="canary_release", repository="payments-api")


def test_run_from_snapshot_file(tmp_path: Path) -> None:
    service = GateService(settings=SETTINGS, cwd=tmp_path, snapshot_path=FIXTURE)
    result = service.run()
    assert isinstance(result, Ok)

    outcome = result.value
    assert [pr.number for pr in outcome.report.approved] == [12, 8]
    assert outcome.rejected == (
        (11, "missing label canary_release"),
        (10, "no commits"),
        (9, "not approved by tech-leads"),
    )


def test_run_uses_fetcher_without_snapshot_file(tmp_path: Path) -> None:
    seen: list[GateSettings] = []

    def fetcher(*, cwd: Path, settings: GateSettings) -> Result[Snapshot, GateError]:
        del cwd
        seen.append(settings)
        return Ok(Snapshot(repository="payments-api", release=None, pull_requests=()))

    service = GateService(settings=SETTINGS, cwd=tmp_path, fetcher=fetcher)
    assert service.run() == Err(ReleaseMissing(repository="payments-api"))
    assert seen == [SETTINGS]


def test_run_propagates_fetch_error(tmp_path: Path) -> None:
    def fetcher(*, cwd: Path, settings: GateSettings) -> Result[Snapshot, GateError]:
        del cwd, settings
        return Err(FetchFailed(repository="Pay-Baymax/payments-api"))

    service = GateService(settings=SETTINGS, cwd=tmp_path, fetcher=fetcher)
    assert service.run() == Err(FetchFailed(repository="Pay-Baymax/payments-api"))


def test_run_rejects_snapshot_for_other_release(tmp_path: Path) -> None:
    settings = GateSettings(target="canary_v2", repository="payments-api")
    service = GateService(settings=settings, cwd=tmp_path, snapshot_path=FIXTURE)
    assert service.run() == Err(ReleaseMismatch(expected="canary_v2", actual="canary_release"))

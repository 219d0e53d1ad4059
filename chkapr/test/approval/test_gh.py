from __future__ import annotations

import json
from pathlib import Path

import pytest

from chkapr.approval import gh as gh_mod
from chkapr.approval.errors import FetchFailed, GhMissing, SnapshotInvalid
from chkapr.core.config import GateSettings
from chkapr.core.result import Err, Ok
from chkapr.platform.process import ProcessError

SETTINGS = GateSettings(target="canary_release", repository="payments-api")

EMPTY_RESPONSE = json.dumps(
    {
        "data": {
            "repository": {
                "name": "payments-api",
                "pullRequests": {"nodes": []},
                "release": {
                    "tagName": "canary_release",
                    "tag": {"target": {"oid": "46f663b32c01d20ce14f58b5d81ac0f813c4b691"}},
                },
            }
        }
    }
)


def _err(*, stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "api", "graphql"),
            returncode=returncode,
            stdout="",
            stderr=stderr,
        )
    )


def _no_sleep(seconds: float) -> None:
    del seconds


@pytest.fixture
def gh_installed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(gh_mod, "sleep", _no_sleep)


def test_build_command_passes_variables() -> None:
    cmd = gh_mod.build_command(SETTINGS)
    assert cmd[:3] == ["gh", "api", "graphql"]
    assert "owner=Pay-Baymax" in cmd
    assert "team=tech-leads" in cmd
    assert "base=pay2release" in cmd
    assert "head=master" in cmd
    assert "name=payments-api" in cmd
    assert "tagName=canary_release" in cmd


def test_query_requests_committer_flag_and_team_members() -> None:
    assert "authoredByCommitter" in gh_mod.SNAPSHOT_QUERY
    assert "team(slug: $team)" in gh_mod.SNAPSHOT_QUERY
    assert "reviews(states: APPROVED, last: 10)" in gh_mod.SNAPSHOT_QUERY
    assert "pullRequests(first: 5" in gh_mod.SNAPSHOT_QUERY


def test_fetch_snapshot_retries_transient_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    calls: list[list[str]] = []
    responses = [
        _err(stderr="HTTP 502 Bad Gateway"),
        Ok(EMPTY_RESPONSE),
    ]

    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cwd, extra_env, timeout
        calls.append(cmd)
        return responses.pop(0)

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS)
    assert isinstance(result, Ok)
    assert result.value.repository == "payments-api"
    assert result.value.pull_requests == ()
    assert len(calls) == 2


def test_fetch_snapshot_does_not_retry_permanent_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cwd, extra_env, timeout
        calls.append(cmd)
        return _err(stderr="HTTP 401: Bad credentials\n")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS)
    assert result == Err(
        FetchFailed(repository="Pay-Baymax/payments-api", hint="HTTP 401: Bad credentials")
    )
    assert len(calls) == 1


def test_fetch_snapshot_gives_up_after_attempts(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cwd, extra_env, timeout
        calls.append(cmd)
        return _err(stderr="HTTP 503 Service Unavailable")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS, retry_attempts=2)
    assert isinstance(result, Err)
    assert isinstance(result.error, FetchFailed)
    assert len(calls) == 2


def test_token_is_passed_as_gh_token(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    seen: list[object] = []

    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cmd, cwd, timeout
        seen.append(extra_env)
        return Ok(EMPTY_RESPONSE)

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    settings = GateSettings(target="canary_release", repository="payments-api", github_token="t0k")
    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=settings)
    assert isinstance(result, Ok)
    assert seen == [{"GH_TOKEN": "t0k"}]


def test_fetch_snapshot_invalid_json(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cmd, cwd, extra_env, timeout
        return Ok("<html>")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS)
    assert isinstance(result, Err)
    assert isinstance(result.error, SnapshotInvalid)


def test_fetch_snapshot_without_gh(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)
    assert gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS) == Err(GhMissing())


def test_fetch_snapshot_partial_data_with_errors_fails_with_graphql_message(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, gh_installed: None
) -> None:
    partial = json.dumps(
        {
            "data": {"repository": {"name": "payments-api", "pullRequests": {"nodes": []}}},
            "errors": [
                {
                    "type": "FORBIDDEN",
                    "message": "Resource not accessible by integration",
                }
            ],
        }
    )

    def fake_run(cmd: list[str], *, cwd: Path, extra_env: object = None, timeout: float | None = None):
        del cmd, cwd, extra_env, timeout
        return Err(
            ProcessError(
                command=("gh", "api", "graphql"),
                returncode=1,
                stdout=partial,
                stderr="gh: Resource not accessible by integration\n",
            )
        )

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = gh_mod.fetch_snapshot(cwd=tmp_path, settings=SETTINGS)
    assert result == Err(
        FetchFailed(
            repository="Pay-Baymax/payments-api",
            hint="Resource not accessible by integration",
        )
    )

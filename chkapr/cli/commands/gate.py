"""Gate commands - decide approvals for a canary release."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from chkapr.approval.gh import ensure_gh_available, run_graphql
from chkapr.approval.service import GateService
from chkapr.cli.commands._helpers import exit_with_code, settings_or_exit
from chkapr.cli.context import build_context
from chkapr.core.errors import ErrorCode
from chkapr.core.result import Err
from chkapr.output.console import Style
from chkapr.output.errors import gate_error_exit_code, print_gate_error


def _target_option() -> Any:
    return typer.Option(None, "--target", envvar="TARGET", help="Target tag and label")


def _repository_option() -> Any:
    return typer.Option(None, "--repository", envvar="TARGET_REPO", help="Target repository name")


def _base_ref_option() -> Any:
    return typer.Option(
        None, "--base-ref", envvar="BASE_REF", help="Base ref name [default: pay2release]"
    )


def _head_ref_option() -> Any:
    return typer.Option(None, "--head-ref", envvar="HEAD_REF", help="Head ref name [default: master]")


def _organization_option() -> Any:
    return typer.Option(
        None, "--organization", envvar="ORGANIZATION", help="Organization name [default: Pay-Baymax]"
    )


def _team_option() -> Any:
    return typer.Option(
        None,
        "--approvable-team",
        envvar="APPROVABLE_TEAM",
        help="Team whose members can approve [default: tech-leads]",
    )


def _token_option() -> Any:
    return typer.Option(
        None,
        "--github-token",
        envvar="GITHUB_TOKEN",
        show_envvar=False,
        help="GitHub token (falls back to gh auth)",
    )


def _config_option() -> Any:
    return typer.Option(
        None, "--config", envvar="CHKAPR_CONFIG", help="TOML config file", show_default=False
    )


def check(
    target: str | None = _target_option(),
    repository: str | None = _repository_option(),
    base_ref: str | None = _base_ref_option(),
    head_ref: str | None = _head_ref_option(),
    organization: str | None = _organization_option(),
    approvable_team: str | None = _team_option(),
    github_token: str | None = _token_option(),
    config: Path | None = _config_option(),
    snapshot: Path | None = typer.Option(
        None,
        "--snapshot",
        help="Evaluate a saved GraphQL response instead of querying GitHub",
        show_default=False,
    ),
    require_approval: bool = typer.Option(
        False, "--require-approval", help="Fail when no pull request is approved"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Explain rejected pull requests"),
) -> None:
    """Print the pull requests approved for a release."""
    ctx = build_context(config)
    settings = settings_or_exit(
        ctx,
        target=target,
        repository=repository,
        base_ref=base_ref,
        head_ref=head_ref,
        organization=organization,
        approvable_team=approvable_team,
        github_token=github_token,
        require_repository=snapshot is None,
        verbose=verbose,
    )

    service = GateService(settings=settings, cwd=ctx.cwd, snapshot_path=snapshot)
    result = service.run()
    if isinstance(result, Err):
        print_gate_error(result.error, ctx.console)
        exit_with_code(gate_error_exit_code(result.error))

    outcome = result.value
    for line in outcome.report.lines():
        ctx.console.result(line)

    if verbose:
        for number, reason in outcome.rejected:
            ctx.console.print(f"#{number}: {reason}", Style.DIM)

    if not outcome.report.has_approvals:
        ctx.console.info(f"no approved pull requests for {settings.target}")
        if require_approval:
            exit_with_code(int(ErrorCode.NO_APPROVAL))
        return

    ctx.console.success(f"{len(outcome.report.approved)} pull request(s) approved")


def fetch(
    output: Path = typer.Argument(..., help="File to write the GraphQL response to"),
    target: str | None = _target_option(),
    repository: str | None = _repository_option(),
    base_ref: str | None = _base_ref_option(),
    head_ref: str | None = _head_ref_option(),
    organization: str | None = _organization_option(),
    approvable_team: str | None = _team_option(),
    github_token: str | None = _token_option(),
    config: Path | None = _config_option(),
) -> None:
    """Save the raw GitHub response for a later `check --snapshot`."""
    ctx = build_context(config)
    settings = settings_or_exit(
        ctx,
        target=target,
        repository=repository,
        base_ref=base_ref,
        head_ref=head_ref,
        organization=organization,
        approvable_team=approvable_team,
        github_token=github_token,
    )

    available = ensure_gh_available()
    if isinstance(available, Err):
        print_gate_error(available.error, ctx.console)
        exit_with_code(gate_error_exit_code(available.error))

    raw = run_graphql(cwd=ctx.cwd, settings=settings)
    if isinstance(raw, Err):
        print_gate_error(raw.error, ctx.console)
        exit_with_code(gate_error_exit_code(raw.error))

    try:
        output.write_text(raw.value, encoding="utf-8")
    except OSError as e:
        ctx.console.error(f"cannot write {output}: {e}")
        exit_with_code(int(ErrorCode.IO_ERROR))

    ctx.console.success(f"saved {output}")

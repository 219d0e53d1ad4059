"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from chkapr.core.config import GateSettings, resolve_settings
from chkapr.core.errors import ErrorCode
from chkapr.core.result import Err
from chkapr.output.console import Style

if TYPE_CHECKING:
    from chkapr.cli.context import CLIContext


def settings_or_exit(
    ctx: CLIContext,
    *,
    target: str | None,
    repository: str | None,
    base_ref: str | None,
    head_ref: str | None,
    organization: str | None,
    approvable_team: str | None,
    github_token: str | None,
    require_repository: bool = True,
    verbose: bool = False,
) -> GateSettings:
    """Resolve gate settings or exit with a user error."""
    result = resolve_settings(
        file_config=ctx.file_config,
        target=target,
        repository=repository,
        base_ref=base_ref,
        head_ref=head_ref,
        organization=organization,
        approvable_team=approvable_team,
        github_token=github_token,
        require_repository=require_repository,
    )
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        exit_with_code(int(ErrorCode.USER_ERROR))

    settings = result.value
    if verbose:
        for line in settings.describe():
            ctx.console.print(line, Style.DIM)
    return settings


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from chkapr.core.config import DEFAULT_CONFIG_FILE, FileConfig, load_config
from chkapr.core.errors import ErrorCode
from chkapr.core.result import Err
from chkapr.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    file_config: FileConfig
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Build the command context.

    An explicit ``config_path`` must exist. Without one, ``chkapr.toml`` in
    the working directory is used when present.
    """
    cwd = Path.cwd()
    console = RichConsole()

    path = config_path
    if path is None and (cwd / DEFAULT_CONFIG_FILE).is_file():
        path = cwd / DEFAULT_CONFIG_FILE

    file_config = FileConfig()
    if path is not None:
        result = load_config(path)
        if isinstance(result, Err):
            console.error(result.error.message)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        file_config = result.value

    return CLIContext(cwd=cwd, file_config=file_config, console=console)

"""Gate configuration.

Values come from CLI options (typer also reads their environment variables),
then from the ``[gate]`` table of an optional TOML file, then from the
defaults below. Example file:

    [gate]
    repository = "payments-api"
    organization = "Pay-Baymax"
    approvable_team = "tech-leads"
    base_ref = "pay2release"
    head_ref = "master"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "ConfigError",
    "FileConfig",
    "GateSettings",
    "load_config",
    "resolve_settings",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_BASE_REF",
    "DEFAULT_HEAD_REF",
    "DEFAULT_ORGANIZATION",
    "DEFAULT_APPROVABLE_TEAM",
]

DEFAULT_CONFIG_FILE = "chkapr.toml"

DEFAULT_BASE_REF = "pay2release"
DEFAULT_HEAD_REF = "master"
DEFAULT_ORGANIZATION = "Pay-Baymax"
DEFAULT_APPROVABLE_TEAM = "tech-leads"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Config file unreadable, or a required setting is missing."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class FileConfig:
    """The ``[gate]`` table. Unset keys stay None."""

    target: str | None = None
    repository: str | None = None
    base_ref: str | None = None
    head_ref: str | None = None
    organization: str | None = None
    approvable_team: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FileConfig:
        gate: StrDict = get_table(data, "gate") or {}
        return cls(
            target=get_str(gate, "target"),
            repository=get_str(gate, "repository"),
            base_ref=get_str(gate, "base_ref"),
            head_ref=get_str(gate, "head_ref"),
            organization=get_str(gate, "organization"),
            approvable_team=get_str(gate, "approvable_team"),
        )


@dataclass(frozen=True, slots=True)
class GateSettings:
    """Fully resolved parameters of one gate run.

    ``repository`` may be None only when the snapshot is read from a file.
    The token is never printed.
    """

    target: str
    repository: str | None
    base_ref: str = DEFAULT_BASE_REF
    head_ref: str = DEFAULT_HEAD_REF
    organization: str = DEFAULT_ORGANIZATION
    approvable_team: str = DEFAULT_APPROVABLE_TEAM
    github_token: str | None = None

    def describe(self) -> list[str]:
        return [
            f"target: {self.target}",
            f"repository: {self.organization}/{self.repository or '-'}",
            f"refs: {self.head_ref} -> {self.base_ref}",
            f"approvable team: {self.approvable_team}",
            f"token: {'set' if self.github_token else 'gh auth'}",
        ]


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[FileConfig, ConfigError]:
    """Load the ``[gate]`` table from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return Ok(FileConfig.from_dict(result.value))


def _pick(cli: str | None, file: str | None) -> str | None:
    if cli is not None and cli.strip():
        return cli.strip()
    return file


def resolve_settings(
    *,
    file_config: FileConfig,
    target: str | None,
    repository: str | None,
    base_ref: str | None = None,
    head_ref: str | None = None,
    organization: str | None = None,
    approvable_team: str | None = None,
    github_token: str | None = None,
    require_repository: bool = True,
) -> Result[GateSettings, ConfigError]:
    """Merge CLI values over file values over defaults.

    Returns:
        Ok(GateSettings), or Err(ConfigError) naming the first missing
        required setting.
    """
    resolved_target = _pick(target, file_config.target)
    if resolved_target is None:
        return Err(ConfigError("missing target tag (--target or TARGET)"))

    resolved_repo = _pick(repository, file_config.repository)
    if resolved_repo is None and require_repository:
        return Err(ConfigError("missing repository (--repository or TARGET_REPO)"))

    settings = GateSettings(target=resolved_target, repository=resolved_repo)
    return Ok(
        replace(
            settings,
            base_ref=_pick(base_ref, file_config.base_ref) or settings.base_ref,
            head_ref=_pick(head_ref, file_config.head_ref) or settings.head_ref,
            organization=_pick(organization, file_config.organization) or settings.organization,
            approvable_team=_pick(approvable_team, file_config.approvable_team)
            or settings.approvable_team,
            github_token=_pick(github_token, None),
        )
    )

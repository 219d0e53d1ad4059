"""Core types shared by the gate: results, exit codes, config."""

from .config import ConfigError, FileConfig, GateSettings, load_config, resolve_settings
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "FileConfig",
    "GateSettings",
    "load_config",
    "resolve_settings",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]

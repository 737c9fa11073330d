from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


@dataclass
class ShellConfig:
    """Pseudo-terminal shell invocation settings.

    An empty ``command`` means: pick the first available of zsh, bash, sh.
    """

    command: str = ""
    args: list[str] = field(default_factory=list)
    cwd: str = "~"
    env: dict[str, str] = field(default_factory=dict)
    cols: int = 80
    rows: int = 24


@dataclass
class InterpreterConfig:
    """Output interpreter limits and polling cadence."""

    activity_log_limit: int = 100
    recent_activity_count: int = 10
    poll_interval_ms: int = 50


@dataclass
class DebugConfig:
    """Debug mode settings."""

    enabled: bool = False
    trace: bool = False
    verbose: bool = False


@dataclass
class AppConfig:
    """Top-level application configuration aggregating all subsections."""

    shell: ShellConfig = field(default_factory=ShellConfig)
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


def _positive_int(section: dict, key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"{name}.{key} must be a positive integer, got {value!r}")
    return value


def load_config(path: str) -> AppConfig:
    """Load and validate application configuration from a YAML file.

    Every section is optional; missing keys take the dataclass defaults.

    Args:
        path: Filesystem path to the YAML configuration file.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        ConfigError: If the file does not exist, is not a mapping, or a
            size/limit field is not a positive integer.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    # An empty file loads as None
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    # `or {}` fallback handles YAML null values for optional sections
    shell_raw = raw.get("shell", {}) or {}
    interpreter_raw = raw.get("interpreter", {}) or {}
    debug_raw = raw.get("debug", {}) or {}

    shell = ShellConfig(
        command=shell_raw.get("command", "") or "",
        args=list(shell_raw.get("args", []) or []),
        cwd=shell_raw.get("cwd", "~") or "~",
        env={str(k): str(v) for k, v in (shell_raw.get("env", {}) or {}).items()},
        cols=_positive_int(shell_raw, "cols", 80, "shell"),
        rows=_positive_int(shell_raw, "rows", 24, "shell"),
    )
    interpreter = InterpreterConfig(
        activity_log_limit=_positive_int(
            interpreter_raw, "activity_log_limit", 100, "interpreter"
        ),
        recent_activity_count=_positive_int(
            interpreter_raw, "recent_activity_count", 10, "interpreter"
        ),
        poll_interval_ms=_positive_int(
            interpreter_raw, "poll_interval_ms", 50, "interpreter"
        ),
    )

    logger.debug("Loaded config from %s", path)
    logger.debug("Shell command=%r size=%dx%d", shell.command or "<auto>", shell.cols, shell.rows)

    return AppConfig(
        shell=shell,
        interpreter=interpreter,
        debug=DebugConfig(
            enabled=bool(debug_raw.get("enabled", False)),
            trace=bool(debug_raw.get("trace", False)),
            verbose=bool(debug_raw.get("verbose", False)),
        ),
    )

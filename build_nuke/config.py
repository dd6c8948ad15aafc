from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values

from .engine import DEFAULT_MAX_ATTEMPTS


ENV_NUKE_VERBOSE = "NUKE_VERBOSE"
ENV_NUKE_MAX_ATTEMPTS = "NUKE_MAX_ATTEMPTS"
ENV_NUKE_LOG_LEVEL = "NUKE_LOG_LEVEL"
ENV_NUKE_API_HOST = "NUKE_API_HOST"
ENV_NUKE_API_PORT = "NUKE_API_PORT"

DEFAULT_ENV_FILE = ".env.nuke"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 9110


@dataclass
class NukeConfig:
    verbose: bool = False
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    log_level: str = "INFO"
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT


def parse_boolish(value: str, *, default: bool = False) -> bool:
    normalized = str(value or "").strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_int(key: str, value: str, *, minimum: int) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got '{value}'") from exc
    if parsed < minimum:
        raise ValueError(f"{key} must be >= {minimum}")
    return parsed


def read_dotenv_file(dotenv_path: Path | None) -> dict[str, str]:
    if dotenv_path is None or not dotenv_path.is_file():
        return {}
    raw = dotenv_values(dotenv_path)
    return {str(key): str(value or "").strip() for key, value in raw.items()}


def load_config(
    *,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    env_file: str | os.PathLike | None = None,
) -> NukeConfig:
    """Resolve settings: overrides -> environment -> env file -> defaults.

    ``overrides`` carries explicit CLI values; ``None`` entries fall through.
    """
    overrides = dict(overrides or {})
    environ = os.environ if env is None else env
    dotenv_path = Path(env_file) if env_file is not None else Path.cwd() / DEFAULT_ENV_FILE
    file_values = read_dotenv_file(dotenv_path)

    def resolve(field_name: str, env_key: str) -> str:
        value = overrides.get(field_name)
        if value is not None:
            return str(value).strip()
        from_env = str(environ.get(env_key) or "").strip()
        if from_env:
            return from_env
        return file_values.get(env_key, "")

    config = NukeConfig()

    verbose_raw = resolve("verbose", ENV_NUKE_VERBOSE)
    config.verbose = parse_boolish(verbose_raw, default=config.verbose)

    max_attempts_raw = resolve("max_attempts", ENV_NUKE_MAX_ATTEMPTS)
    if max_attempts_raw:
        config.max_attempts = _parse_int(ENV_NUKE_MAX_ATTEMPTS, max_attempts_raw, minimum=1)

    log_level_raw = resolve("log_level", ENV_NUKE_LOG_LEVEL)
    if log_level_raw:
        config.log_level = log_level_raw.upper()

    api_host_raw = resolve("api_host", ENV_NUKE_API_HOST)
    if api_host_raw:
        config.api_host = api_host_raw

    api_port_raw = resolve("api_port", ENV_NUKE_API_PORT)
    if api_port_raw:
        config.api_port = _parse_int(ENV_NUKE_API_PORT, api_port_raw, minimum=1)

    return config

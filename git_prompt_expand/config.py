"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigError


DEFAULT_SEPARATOR = "\n"


@dataclass(frozen=True)
class Settings:
    """Knobs for talking to git and joining output."""

    git_executable: str = "git"
    timeout: float = 2.0
    separator: str = DEFAULT_SEPARATOR


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        git_executable=env.get("GIT_PROMPT_EXPAND_GIT") or Settings.git_executable,
        timeout=_parse_timeout(env.get("GIT_PROMPT_EXPAND_TIMEOUT")),
        separator=env.get("GIT_PROMPT_EXPAND_SEP") or DEFAULT_SEPARATOR,
    )


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return Settings.timeout
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"GIT_PROMPT_EXPAND_TIMEOUT must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError("GIT_PROMPT_EXPAND_TIMEOUT must be positive.")
    return value

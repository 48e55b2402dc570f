"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_FILENAME = ".kanban.json"

ENV_FILE = "TERMBAN_FILE"
ENV_HELP = "TERMBAN_HELP"
ENV_LOG_FILE = "TERMBAN_LOG_FILE"
ENV_LOG_LEVEL = "TERMBAN_LOG_LEVEL"


def truthy(value: str | None, default: bool = True) -> bool:
    """Interpret an environment flag. Unset means default."""
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def home_dir() -> Path:
    """The user's home directory, or the current directory if there is none."""
    try:
        return Path.home()
    except RuntimeError:
        return Path(".")


@dataclass(frozen=True)
class Settings:
    save_path: Path
    show_help: bool = True
    log_file: Path | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ
        save_path = env.get(ENV_FILE) or home_dir() / DEFAULT_FILENAME
        log_file = env.get(ENV_LOG_FILE)
        return cls(
            save_path=Path(save_path).expanduser(),
            show_help=truthy(env.get(ENV_HELP)),
            log_file=Path(log_file).expanduser() if log_file else None,
            log_level=(env.get(ENV_LOG_LEVEL) or "WARNING").upper(),
        )

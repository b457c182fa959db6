"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_SHEET_ID = "1F-6sChzjRI85AsLV2FQACXTX17PN9iud6Ecxnn0wJC4"
DEFAULT_HOST = "docs.google.com/spreadsheets/d"


def _default_state_dir() -> Path:
    """
    Directory for user state (recent modules, remembered department).

    Using a function instead of a constant makes testing easier,
    because tests can pass their own directory.
    """
    return Path.home() / ".notefinder"


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(slots=True)
class AppConfig:
    sheet_id: str = DEFAULT_SHEET_ID
    sheet_name: str = "notes"
    host: str = DEFAULT_HOST
    timeout: float = 30.0
    recent_limit: int = 5
    departments: tuple[str, ...] = ("CSE", "ECE", "IT")
    schemes: tuple[str, ...] = ("2020", "2019")
    state_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.state_dir is None:
            self.state_dir = _default_state_dir()
        if self.recent_limit < 1:
            raise ValueError("recent_limit must be at least 1")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build a config from NOTEFINDER_* environment variables.
        """
        env = os.environ if environ is None else environ
        state_dir = env.get("NOTEFINDER_STATE_DIR", "").strip()
        return cls(
            sheet_id=env.get("NOTEFINDER_SHEET_ID", "").strip() or DEFAULT_SHEET_ID,
            sheet_name=env.get("NOTEFINDER_SHEET_NAME", "").strip() or "notes",
            timeout=_env_float(env, "NOTEFINDER_TIMEOUT", 30.0),
            recent_limit=_env_int(env, "NOTEFINDER_RECENT_LIMIT", 5),
            state_dir=Path(state_dir).expanduser() if state_dir else None,
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/{self.sheet_id}/gviz/tq"

    @property
    def recent_path(self) -> Path:
        return Path(self.state_dir) / "recent_modules.json"

    @property
    def department_path(self) -> Path:
        return Path(self.state_dir) / "department.json"

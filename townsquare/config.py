"""Settings loaded from the environment (and a .env file if present)."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_STATE_PATH = "state.json"


def parse_log_level(value: str) -> str:
    """Normalise a log level name, falling back to INFO if it is unknown."""
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    An empty ``storytellers`` set means anyone may run storyteller commands.
    """

    state_path: Path = Path(DEFAULT_STATE_PATH)
    storytellers: frozenset[str] = field(default_factory=frozenset)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Build settings from TOWNSQUARE_* environment variables."""
        load_dotenv(env_file)
        storytellers = os.getenv("TOWNSQUARE_STORYTELLERS", "")
        return cls(
            state_path=Path(os.getenv("TOWNSQUARE_STATE_PATH", DEFAULT_STATE_PATH)),
            storytellers=frozenset(s.strip() for s in storytellers.split(",") if s.strip()),
            log_level=parse_log_level(os.getenv("TOWNSQUARE_LOG_LEVEL", "INFO")),
        )

    def is_storyteller(self, player: str) -> bool:
        """Check if a player may run storyteller commands."""
        return not self.storytellers or player in self.storytellers

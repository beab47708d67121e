"""
Configuration management for the command bot.
Loads environment variables and provides configuration settings.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from chatcmd.utils.prefix import Prefix, compile_pattern

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str

    # Owner of owner-only commands
    OWNER_ID: str

    # Prefixes
    PREFIXES: Tuple[str, ...] = ("!",)
    PREFIX_PATTERN: Optional[str] = None
    MENTION_PREFIX: bool = True

    # Command loading
    COMMAND_DIRECTORY: str = "./commands"
    AUTO_LOAD: bool = True
    DEFAULT_HELP: bool = True

    # Debug
    DEBUG: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        prefixes = tuple(p for p in os.getenv("PREFIXES", "!").split(",") if p)
        return cls(
            DISCORD_TOKEN=os.getenv("DISCORD_TOKEN", ""),
            OWNER_ID=os.getenv("OWNER_ID", ""),
            PREFIXES=prefixes,
            PREFIX_PATTERN=os.getenv("PREFIX_PATTERN") or None,
            MENTION_PREFIX=_flag("MENTION_PREFIX", "true"),
            COMMAND_DIRECTORY=os.getenv("COMMAND_DIRECTORY", "./commands"),
            AUTO_LOAD=_flag("AUTO_LOAD", "true"),
            DEFAULT_HELP=_flag("DEFAULT_HELP", "true"),
            DEBUG=_flag("DEBUG", "false"),
        )

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not self.OWNER_ID:
            raise ValueError("OWNER_ID is required")
        if not self.PREFIXES and not self.PREFIX_PATTERN and not self.MENTION_PREFIX:
            raise ValueError("At least one prefix is required")
        if self.PREFIX_PATTERN:
            try:
                compile_pattern(self.PREFIX_PATTERN)
            except (re.error, ValueError) as e:
                raise ValueError(f"PREFIX_PATTERN is not a valid pattern: {e}") from e

    def prefix_list(self) -> List[Prefix]:
        """Literal prefixes in declared order, then the pattern prefix."""
        prefixes: List[Prefix] = list(self.PREFIXES)
        if self.PREFIX_PATTERN:
            prefixes.append(compile_pattern(self.PREFIX_PATTERN))
        return prefixes


# Global config instance
config = Config.from_env()

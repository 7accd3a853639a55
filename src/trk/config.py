"""
Configuration management for trk.

Loads configuration from .trkrc files in the following priority:
1. Path specified via --config flag
2. .trkrc in current directory
3. .trkrc.toml in current directory
4. ~/.config/trk/config.toml
5. ~/.trkrc
"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class RecorderKind(str, Enum):
    """Backends the post-checkout hook can hand a branch visit to."""

    TIMESHEET = "timesheet"
    COMMAND = "command"


class StorageConfig(BaseModel):
    """Where and how the timesheet is persisted."""

    directory: str = Field(
        default=".trk",
        description="Directory holding the timesheet (relative to repo root)",
    )
    filename: str = Field(
        default="timesheet.json",
        description="Name of the timesheet file inside the directory",
    )
    max_visits: int = Field(
        default=1000,
        ge=1,
        description="Number of visit events kept before the oldest are dropped",
    )


class HookConfig(BaseModel):
    """Configuration for the post-checkout hook."""

    recorder: RecorderKind = Field(
        default=RecorderKind.TIMESHEET,
        description="Record in-process (timesheet) or by running an external command",
    )
    command: str = Field(
        default="trk",
        description="Executable invoked as '<command> branch <name>' by the command recorder",
    )
    timeout_seconds: int = Field(
        default=10,
        ge=1,
        description="Seconds to wait for the external command",
    )

    def command_available(self) -> bool:
        """Check if the configured command is on PATH."""
        return shutil.which(self.command) is not None


class Config(BaseModel):
    """Main configuration model for trk."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    hook: HookConfig = Field(default_factory=HookConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        Config instance with loaded or default values.
    """
    search_paths = [
        Path(config_path) if config_path else None,
        Path.cwd() / ".trkrc",
        Path.cwd() / ".trkrc.toml",
        Path.home() / ".config" / "trk" / "config.toml",
        Path.home() / ".trkrc",
    ]

    for path in search_paths:
        if path and path.exists():
            try:
                data = toml.load(path)
                return Config(**data)
            except (OSError, toml.TomlDecodeError, ValidationError) as e:
                logger.warning(f"Ignoring invalid config file {path}: {e}")
                continue

    return Config()

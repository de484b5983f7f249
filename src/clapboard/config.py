from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from platformdirs import user_cache_path, user_config_path
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError, field_validator

from clapboard.errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "clapboard"

DEFAULT_LAUNCHER = ["tofi", "--fuzzy-match=true", "--prompt-text=clapboard: "]
DEFAULT_HISTORY_SIZE = 50
DEFAULT_PREVIEW_LENGTH = 200

BLOBS_DIRNAME = "blobs"
INDEX_FILENAME = "history.json"


def default_config_path() -> Path:
    return user_config_path(APP_NAME) / "config.toml"


def default_cache_dir() -> Path:
    return user_cache_path(APP_NAME)


class ClapboardConfig(BaseModel):
    """Settings for one invocation, built once and handed to each component."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    launcher: List[str] = Field(default_factory=lambda: list(DEFAULT_LAUNCHER), min_length=1)
    history_size: PositiveInt = DEFAULT_HISTORY_SIZE
    favorites: Dict[str, str] = Field(default_factory=dict)
    store_empty: bool = False
    preview_length: PositiveInt = DEFAULT_PREVIEW_LENGTH
    copy_command: Optional[List[str]] = None
    cache_dir: Path = Field(default_factory=default_cache_dir)

    @field_validator("launcher", "copy_command")
    @classmethod
    def _program_named(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and (not value or not value[0].strip()):
            raise ValueError("command must start with a program name")
        return value

    @field_validator("cache_dir")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def blobs_dir(self) -> Path:
        return self.cache_dir / BLOBS_DIRNAME

    @property
    def index_path(self) -> Path:
        return self.cache_dir / INDEX_FILENAME

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ClapboardConfig":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"invalid configuration: {e}", e) from e

    @classmethod
    def from_file(cls, path: Path, **overrides: Any) -> "ClapboardConfig":
        """Parse a TOML config file; a missing file means all defaults."""
        data: Dict[str, Any] = {}
        if path.exists():
            try:
                with path.open("rb") as handle:
                    data = tomllib.load(handle)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"cannot parse {path}", e) from e
            except OSError as e:
                raise ConfigError(f"cannot read {path}", e) from e
            logger.debug(f"Loaded configuration from {path}")
        else:
            logger.debug(f"No configuration at {path}, using defaults")

        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, *, config_path: Optional[Path] = None) -> "ClapboardConfig":
        """Resolve config and cache locations from the environment, then load.

        ``CLAPBOARD_CONFIG`` points at an alternative config file and
        ``CLAPBOARD_CACHE_DIR`` at an alternative cache directory. A ``.env``
        file in the working directory is honoured without overriding variables
        already set.
        """
        env_file = find_dotenv(usecwd=True)
        if env_file:
            load_dotenv(dotenv_path=env_file, override=False)

        path = config_path or Path(os.getenv("CLAPBOARD_CONFIG") or default_config_path())
        cache_dir = os.getenv("CLAPBOARD_CACHE_DIR") or None
        return cls.from_file(path.expanduser(), cache_dir=cache_dir)

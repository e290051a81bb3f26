"""Configuration loading for sysreview.

Settings for the command-line tool: where study reviews are stored, the
search source label recorded on imports, and the default question form.
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from sysreview.core.exceptions import ConfigError
from sysreview.review.repository import DEFAULT_STORE_DIR


class SysReviewConfig(BaseModel):
    """Root configuration for sysreview.

    Attributes:
        store_dir: Root directory of the JSON study review store.
        default_search_source: Search source recorded on imports when the
            command line gives none. ``None`` means "use the file stem".
        questions_file: Default YAML question form for ``answer``.
    """

    store_dir: Path = Field(default=DEFAULT_STORE_DIR)
    default_search_source: str | None = None
    questions_file: Path | None = None


def load_config(path: Path) -> SysReviewConfig:
    """Load configuration from a YAML file.

    Relative paths in the file are resolved against the file's directory.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        SysReviewConfig with the file's settings over the defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the YAML content is not a valid configuration.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path) as f:  # noqa: PTH123
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        config = SysReviewConfig(**data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    base = path.parent
    if not config.store_dir.is_absolute() and "store_dir" in data:
        config.store_dir = base / config.store_dir
    if config.questions_file is not None and not config.questions_file.is_absolute():
        config.questions_file = base / config.questions_file
    return config

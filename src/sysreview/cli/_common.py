"""Helpers shared by the sysreview sub-commands."""
from __future__ import annotations

from pathlib import Path

import typer

from sysreview.config import SysReviewConfig, load_config
from sysreview.core.exceptions import SysReviewError
from sysreview.review.repository import JsonSearchSessionRepository, JsonStudyReviewRepository

_DEFAULT_CONFIG = Path("sysreview.yaml")


def load_cli_config(config_path: Path | None) -> SysReviewConfig:
    """Load config from the given file, ``./sysreview.yaml`` or defaults.

    Args:
        config_path: Optional path to the config file.

    Returns:
        SysReviewConfig instance.
    """
    if config_path is not None:
        return load_config(config_path)
    if _DEFAULT_CONFIG.exists():
        return load_config(_DEFAULT_CONFIG)
    return SysReviewConfig()


def open_repository(config: SysReviewConfig, store: Path | None) -> JsonStudyReviewRepository:
    """JSON store at ``store`` when given, else at the configured directory."""
    return JsonStudyReviewRepository(store if store is not None else config.store_dir)


def open_session_repository(
    config: SysReviewConfig, store: Path | None
) -> JsonSearchSessionRepository:
    """Search session store sharing the study review store directory."""
    return JsonSearchSessionRepository(store if store is not None else config.store_dir)


def fail(exc: SysReviewError | FileNotFoundError) -> typer.Exit:
    """Print an error and return the exit to raise."""
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)

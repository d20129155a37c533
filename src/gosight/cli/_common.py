"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    fail_fast: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if workers is not None:
        overrides["workers"] = workers
    if fail_fast:
        overrides["fail_fast"] = True
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)

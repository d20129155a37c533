"""Public API for gosight.

Example:
    >>> from gosight import analyze, summarize
    >>>
    >>> report = analyze("/path/to/module")
    >>> summary = summarize(report)
    >>> [h.name for h in summary.hotspots]
    >>>
    >>> # With customization
    >>> report = analyze("/path/to/module", workers=4, fail_fast=True)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .analysis.engine import AnalysisEngine
from .config import ThresholdConfig, load_config
from .logging_config import get_logger
from .models import AnalysisReport
from .summary import CodeSummary
from .summary import summarize as _summarize

logger = get_logger(__name__)


def analyze(
    path: str | Path = ".",
    config_file: Optional[Path] = None,
    **overrides,
) -> AnalysisReport:
    """Analyze every Go file under ``path``.

    Args:
        path: Root directory of the source tree (default: current directory)
        config_file: Optional explicit TOML config file
        **overrides: Configuration overrides (e.g. ``workers=4``)

    Returns:
        The run's AnalysisReport. Files that could not be read or parsed
        are listed in ``report.errors``.

    Raises:
        InvalidPathError: If path is missing or not a directory
        ConfigurationError: If configuration is invalid
        AnalysisError: With ``fail_fast``, the first per-file failure
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Analyzing {path} with {config.workers or 'auto'} workers")
    return AnalysisEngine(config).run(path)


def summarize(
    report: AnalysisReport, thresholds: Optional[ThresholdConfig] = None
) -> CodeSummary:
    """Summarize a report. See ``gosight.summary.summarize``."""
    return _summarize(report, thresholds)

"""Exception hierarchy for gosight."""

from .analysis import AnalysisError, ExtractionError, FileAccessError, ParsingError
from .base import GosightError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError

__all__ = [
    "GosightError",
    "AnalysisError",
    "ExtractionError",
    "FileAccessError",
    "ParsingError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]

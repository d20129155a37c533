"""Per-file extraction, metrics, duplicate detection and the run pipeline."""

from .duplicates import DuplicateDetector
from .engine import AnalysisEngine, FileAnalyzer
from .extractor import EntityExtractor
from .metrics import MetricsEngine
from .type_cache import TypeStringCache

__all__ = [
    "AnalysisEngine",
    "DuplicateDetector",
    "EntityExtractor",
    "FileAnalyzer",
    "MetricsEngine",
    "TypeStringCache",
]

"""Analysis pipeline: per-file worker and single-threaded aggregation.

Workers (one per file, on the scanner's pool) read, parse, extract and
compute metrics. They share only the run's ``TypeStringCache``.

After every worker has finished, ``AnalysisEngine`` merges the file
results in path order:

1. Functions go into one map keyed by qualified name; a later file wins
   a name clash and the clash is logged.
2. Body fingerprints are registered with the ``DuplicateDetector`` in
   path then declaration order, so the first occurrence is stable across
   runs.
3. Recursion, dead-code and interface passes run over the complete map.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import AnalysisConfig
from ..exceptions import ExtractionError, FileAccessError
from ..graph.callgraph import CallGraphAnalyzer
from ..logging_config import get_logger
from ..models import AnalysisReport, FileAnalysis, FunctionRecord
from ..scanning.scanner import ConcurrentScanner, discover_files
from ..scanning.treesitter_parser import GoParser
from .duplicates import DuplicateDetector
from .extractor import EntityExtractor
from .metrics import MetricsEngine, refresh_maintainability
from .type_cache import TypeStringCache

logger = get_logger(__name__)


class FileAnalyzer:
    """Worker callable: source file path -> ``FileAnalysis``."""

    def __init__(self, root: Path, extractor: EntityExtractor, parser: Optional[GoParser] = None):
        self.root = Path(root)
        self.extractor = extractor
        self.parser = parser or GoParser()

    def __call__(self, filepath: Path) -> FileAnalysis:
        try:
            source = filepath.read_bytes()
        except OSError as e:
            raise FileAccessError(filepath, e.strerror or str(e))

        rel_path = filepath.relative_to(self.root).as_posix()
        tree = self.parser.parse(source, rel_path)
        try:
            result = self.extractor.extract(tree, rel_path)
        except RecursionError:
            raise ExtractionError(filepath, "declarations nested too deeply")
        logger.debug(f"Analyzed {rel_path}: {len(result.functions)} functions")
        return result


class AnalysisEngine:
    """Owns the shared state of one run and produces the report."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()
        self.type_cache = TypeStringCache(self.config.type_cache_size)
        self.duplicates = DuplicateDetector(strict=self.config.strict_duplicates)
        self.extractor = EntityExtractor(self.type_cache, MetricsEngine())
        self.name_collisions = 0

    def run(self, root: Path | str) -> AnalysisReport:
        root = Path(root).resolve()
        files = discover_files(root, self.config)

        scanner = ConcurrentScanner(
            FileAnalyzer(root, self.extractor),
            root,
            max_workers=self.config.workers,
            fail_fast=self.config.fail_fast,
        )
        results, issues = scanner.scan(files)

        report = self.aggregate(results)
        report.root = str(root)
        report.errors = issues + report.errors
        logger.debug(
            f"Type cache: {len(self.type_cache)} entries, {self.type_cache.misses} misses"
        )
        return report

    def aggregate(self, results: list[FileAnalysis]) -> AnalysisReport:
        self.duplicates = DuplicateDetector(strict=self.config.strict_duplicates)
        self.name_collisions = 0
        report = AnalysisReport(files_analyzed=len(results))
        functions: dict[str, FunctionRecord] = {}

        for result in sorted(results, key=lambda r: r.path):
            report.structs.extend(result.structs)
            report.interfaces.extend(result.interfaces)
            report.globals.extend(result.globals)
            report.imports.extend(result.imports)
            report.errors.extend(result.issues)

            for fn in result.functions:
                self._register_duplicate(fn)
                name = fn.qualified_name
                previous = functions.get(name)
                if previous is not None:
                    self.name_collisions += 1
                    logger.warning(
                        f"Duplicate qualified name {name}: {fn.file} replaces {previous.file}"
                    )
                functions[name] = fn

        graph = CallGraphAnalyzer(functions)
        graph.detect_recursion()
        graph.detect_dead_code(self.config.entry_points)
        report.implements = graph.find_implementations(report.structs, report.interfaces)

        report.functions = [functions[name] for name in sorted(functions)]
        logger.info(
            f"Aggregated {len(report.functions)} functions from {report.files_analyzed} files"
        )
        return report

    def _register_duplicate(self, fn: FunctionRecord) -> None:
        if fn.fingerprint is None or not self.duplicates.check(fn.fingerprint):
            return
        fn.is_duplicate = True
        fn.metrics.is_duplicate = True
        refresh_maintainability(fn.metrics)

"""Source discovery and the concurrent per-file scan.

``discover_files`` walks the root once and applies extension, exclusion,
hidden-file, size and count filters. ``ConcurrentScanner`` fans a worker
out over the discovered files on a thread pool and fans the results back
in; it never merges anything itself.

A worker exception is either recorded as a ``ScanIssue`` and the scan goes
on, or, with ``fail_fast``, cancels the pending files and is re-raised.
Exceptions outside the ``AnalysisError`` hierarchy land in the
``analyze`` stage.
"""

from __future__ import annotations

import fnmatch
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from threading import Lock
from typing import Callable, Optional

from ..config import AnalysisConfig
from ..exceptions import ExtractionError, FileAccessError, InvalidPathError, ParsingError
from ..logging_config import get_logger
from ..models import FileAnalysis, ScanIssue

logger = get_logger(__name__)

# Default worker count: use CPU count, capped at 8 to avoid overwhelming I/O
_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

Worker = Callable[[Path], FileAnalysis]


def should_skip_file(rel_path: str, exclude_patterns: list[str]) -> bool:
    """
    Check a root-relative POSIX path against exclusion globs.

    ``dir/*`` patterns match the directory at any depth, so ``vendor/*``
    excludes ``a/vendor/b/c.go`` as well.
    """
    name = rel_path.rsplit("/", 1)[-1]
    parts = rel_path.split("/")[:-1]
    for pattern in exclude_patterns:
        if fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern):
            return True
        if pattern.endswith("/*") and pattern[:-2] in parts:
            return True
    return False


def discover_files(root: Path, config: AnalysisConfig) -> list[Path]:
    """Collect analysable source files under ``root``, sorted.

    Raises:
        InvalidPathError: If root is missing or not a directory
        FileAccessError: If the root cannot be listed
    """
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "does not exist")
    if not root.is_dir():
        raise InvalidPathError(root, "not a directory")

    ext_set = set(config.extensions)
    files: list[Path] = []
    skipped = 0

    def _on_error(error: OSError) -> None:
        if Path(error.filename or "") == root:
            raise FileAccessError(root, str(error))
        logger.warning(f"Cannot list {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_on_error, followlinks=config.follow_symlinks
    ):
        if not config.allow_hidden_files:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        dirnames.sort()

        for filename in sorted(filenames):
            filepath = Path(dirpath) / filename
            if filepath.suffix not in ext_set:
                continue
            if not config.allow_hidden_files and filename.startswith("."):
                skipped += 1
                continue

            rel_path = filepath.relative_to(root).as_posix()
            if should_skip_file(rel_path, config.exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {rel_path}")
                continue

            if filepath.is_symlink() and not config.follow_symlinks:
                skipped += 1
                logger.debug(f"Skipped (symlink): {rel_path}")
                continue

            try:
                size = filepath.stat().st_size
            except OSError as e:
                logger.warning(f"Cannot stat {rel_path}: {e}")
                continue
            if size > config.max_file_size_bytes:
                skipped += 1
                logger.debug(f"Skipped (size): {rel_path} ({size} bytes)")
                continue

            if len(files) >= config.max_files:
                logger.warning(f"Reached max files limit ({config.max_files})")
                return sorted(files)
            files.append(filepath)

    logger.info(f"Discovered {len(files)} source files under {root} ({skipped} skipped)")
    return sorted(files)


class ConcurrentScanner:
    """Runs a per-file worker over many files on a thread pool.

    Attributes:
        processed: Files whose worker returned a result
        failed: Files whose worker raised
    """

    def __init__(
        self,
        worker: Worker,
        root: Path,
        max_workers: Optional[int] = None,
        fail_fast: bool = False,
    ) -> None:
        self._worker = worker
        self._root = Path(root)
        self._max_workers = max_workers or _DEFAULT_WORKERS
        self._fail_fast = fail_fast
        self._lock = Lock()
        self.processed = 0
        self.failed = 0

    def scan(self, files: list[Path]) -> tuple[list[FileAnalysis], list[ScanIssue]]:
        """Analyse every file; results come back sorted by path."""
        results: list[FileAnalysis] = []
        issues: list[ScanIssue] = []
        if not files:
            return results, issues

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {executor.submit(self._worker, fp): fp for fp in files}
            for future in as_completed(futures):
                fp = futures[future]
                try:
                    result = future.result()
                except Exception as e:
                    with self._lock:
                        self.failed += 1
                    if self._fail_fast:
                        for pending in futures:
                            pending.cancel()
                        logger.error(f"Aborting scan: {e}")
                        raise
                    logger.warning(f"Skipping {self._relative(fp)}: {e}")
                    issues.append(self._issue(fp, e))
                    continue

                with self._lock:
                    self.processed += 1
                results.append(result)

        results.sort(key=lambda r: r.path)
        issues.sort(key=lambda i: i.path)
        logger.info(
            f"Scan complete: {self.processed} analyzed, {self.failed} failed "
            f"({self._max_workers} workers)"
        )
        return results, issues

    def _relative(self, fp: Path) -> str:
        try:
            return fp.relative_to(self._root).as_posix()
        except ValueError:
            return str(fp)

    def _issue(self, fp: Path, error: Exception) -> ScanIssue:
        if isinstance(error, ParsingError):
            stage, reason = "parse", error.reason
        elif isinstance(error, FileAccessError):
            stage, reason = "read", error.reason
        elif isinstance(error, ExtractionError):
            stage, reason = "analyze", error.reason
        else:
            stage, reason = "analyze", str(error)
        return ScanIssue(path=self._relative(fp), stage=stage, reason=reason)

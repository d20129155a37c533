"""Analysis-related exceptions: file access and parsing."""

from pathlib import Path

from .base import GosightError


class AnalysisError(GosightError):
    """Base class for analysis-related errors."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a source file or directory cannot be read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when a source file does not parse cleanly."""

    def __init__(self, filepath: Path, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": str(filepath), "language": language, "reason": reason},
        )
        self.filepath = filepath
        self.language = language
        self.reason = reason


class ExtractionError(AnalysisError):
    """Raised when a parsed file cannot be turned into entities."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Failed to extract entities: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason

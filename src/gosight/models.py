"""Report data model.

Every record produced by a run lives here. Records are created once by
the per-file extractor, metrics are filled in during the same pass, and
the aggregation step only flips the duplicate/recursive/unused flags.

``AnalysisReport.to_dict()`` is the stable external shape consumed by the
JSON formatter, the graph store and the visualization export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HalsteadMetrics:
    """Halstead size measures.

    Attributes:
        distinct_operators: n1, unique operator symbols
        distinct_operands: n2, unique identifier names and literal texts
        total_operators: N1
        total_operands: N2
    """

    volume: float = 0.0
    difficulty: float = 0.0
    effort: float = 0.0
    distinct_operators: int = 0
    distinct_operands: int = 0
    total_operators: int = 0
    total_operands: int = 0

    def to_dict(self) -> dict[str, float]:
        return {"volume": self.volume, "difficulty": self.difficulty, "effort": self.effort}


@dataclass
class CognitiveComplexity:
    score: int = 0
    nested_depth: int = 0
    logical_ops: int = 0
    branching_score: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "score": self.score,
            "nested_depth": self.nested_depth,
            "logical_ops": self.logical_ops,
            "branching_score": self.branching_score,
        }


@dataclass
class ReadabilityMetrics:
    nesting_depth: int = 0
    comment_density: float = 0.0
    branch_density: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nesting_depth": self.nesting_depth,
            "comment_density": self.comment_density,
            "branch_density": self.branch_density,
        }


@dataclass
class Metrics:
    """Per-function quality metrics."""

    cyclomatic_complexity: int = 1
    lines_of_code: int = 0
    halstead: HalsteadMetrics = field(default_factory=HalsteadMetrics)
    cognitive: CognitiveComplexity = field(default_factory=CognitiveComplexity)
    readability: ReadabilityMetrics = field(default_factory=ReadabilityMetrics)
    maintainability_index: float = 0.0
    is_duplicate: bool = False
    is_unused: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "lines_of_code": self.lines_of_code,
            "is_duplicate": self.is_duplicate,
            "is_unused": self.is_unused,
            "halstead_metrics": self.halstead.to_dict(),
            "cognitive_complexity": self.cognitive.to_dict(),
            "readability": self.readability.to_dict(),
            "maintainability_index": self.maintainability_index,
        }


@dataclass
class BodyFingerprint:
    """Canonical token string of a function body and its rolling hash."""

    canonical: str
    hash: int


@dataclass
class FunctionRecord:
    """A function or method declaration.

    ``receiver`` is the receiver's struct name with pointer and type
    arguments stripped; it is None for plain functions.
    """

    name: str
    package: str
    file: str
    receiver: Optional[str] = None
    params: list[str] = field(default_factory=list)
    returns: list[str] = field(default_factory=list)
    callees: list[str] = field(default_factory=list)
    referenced_globals: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    is_recursive: bool = False
    is_duplicate: bool = False
    metrics: Metrics = field(default_factory=Metrics)
    start_line: int = 0
    end_line: int = 0
    fingerprint: Optional[BodyFingerprint] = field(default=None, repr=False, compare=False)

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @property
    def qualified_name(self) -> str:
        """``package[.Receiver].name``, the call-graph identity."""
        if self.receiver:
            return f"{self.package}.{self.receiver}.{self.name}"
        return f"{self.package}.{self.name}"

    @property
    def is_exported(self) -> bool:
        return self.name[:1].isupper()

    def to_dict(self) -> dict[str, Any]:
        return {
            "caller": self.qualified_name,
            "callees": list(self.callees),
            "file": self.file,
            "package": self.package,
            "params": list(self.params),
            "returns": list(self.returns),
            "is_method": self.is_method,
            "struct": self.receiver or "",
            "is_recursive": self.is_recursive,
            "is_duplicate": self.is_duplicate,
            "cyclomatic_complexity": self.metrics.cyclomatic_complexity,
            "lines_of_code": self.metrics.lines_of_code,
            "referenced_globals": list(self.referenced_globals),
            "dependencies": list(self.dependencies),
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class StructRecord:
    name: str
    file: str
    package: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "file": self.file, "package": self.package}


@dataclass
class InterfaceRecord:
    """An interface type.

    ``methods`` holds declared method names; ``embeds`` holds the rendered
    embedded types (other interfaces or constraint unions).
    """

    name: str
    file: str
    package: str
    methods: list[str] = field(default_factory=list)
    embeds: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "package": self.package,
            "methods": list(self.methods),
        }


@dataclass
class GlobalRecord:
    """A package-level ``var`` or ``const``.

    ``value`` is the literal initializer text when the initializer is a
    plain literal, otherwise None.
    """

    name: str
    type: str
    file: str
    package: str
    value: Optional[str] = None
    kind: str = "var"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "value": self.value or "",
            "file": self.file,
            "package": self.package,
        }


@dataclass
class ImportRecord:
    path: str
    file: str
    package: str
    alias: Optional[str] = None

    @property
    def local_name(self) -> Optional[str]:
        """Identifier the import is referred to by inside the file.

        Blank and dot imports have no local name.
        """
        if self.alias is not None:
            return None if self.alias in ("_", ".") else self.alias
        parts = self.path.split("/")
        last = parts[-1]
        # major-version suffix: example.com/mod/v2 is referred to as "mod"
        if len(parts) > 1 and last[:1] == "v" and last[1:].isdigit():
            last = parts[-2]
        return last

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "file": self.file, "package": self.package}


@dataclass(frozen=True)
class ImplementsRecord:
    struct: str
    interface: str

    def to_dict(self) -> dict[str, str]:
        return {"struct": self.struct, "interface": self.interface}


@dataclass
class ScanIssue:
    """A recoverable failure surfaced with the report.

    Attributes:
        path: Root-relative file path
        stage: "read", "parse", "metrics" or "analyze"
        reason: Human-readable cause
        function: Qualified name for metrics failures
    """

    path: str
    stage: str
    reason: str
    function: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {"path": self.path, "stage": self.stage, "reason": self.reason}
        if self.function:
            data["function"] = self.function
        return data


@dataclass
class FileAnalysis:
    """Everything extracted from one source file."""

    path: str
    package: str
    functions: list[FunctionRecord] = field(default_factory=list)
    structs: list[StructRecord] = field(default_factory=list)
    interfaces: list[InterfaceRecord] = field(default_factory=list)
    globals: list[GlobalRecord] = field(default_factory=list)
    imports: list[ImportRecord] = field(default_factory=list)
    issues: list[ScanIssue] = field(default_factory=list)


@dataclass
class AnalysisReport:
    """The single in-memory result of one run."""

    root: str = ""
    functions: list[FunctionRecord] = field(default_factory=list)
    structs: list[StructRecord] = field(default_factory=list)
    interfaces: list[InterfaceRecord] = field(default_factory=list)
    globals: list[GlobalRecord] = field(default_factory=list)
    imports: list[ImportRecord] = field(default_factory=list)
    implements: list[ImplementsRecord] = field(default_factory=list)
    errors: list[ScanIssue] = field(default_factory=list)
    files_analyzed: int = 0

    def function(self, qualified_name: str) -> Optional[FunctionRecord]:
        for fn in self.functions:
            if fn.qualified_name == qualified_name:
                return fn
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "functions": [f.to_dict() for f in self.functions],
            "structs": [s.to_dict() for s in self.structs],
            "interfaces": [i.to_dict() for i in self.interfaces],
            "globals": [g.to_dict() for g in self.globals],
            "imports": [i.to_dict() for i in self.imports],
            "implements": [i.to_dict() for i in self.implements],
            "errors": [e.to_dict() for e in self.errors],
        }

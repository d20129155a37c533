"""Entity extraction from a parsed Go file.

Imports and globals are collected before anything else so that function
bodies can be cross-checked against them:

- ``referenced_globals``: identifiers in the body naming a package-level
  var/const of the same file.
- ``dependencies``: import paths whose local name is used as a selector
  operand (``strings.Split``) or type qualifier (``bytes.Buffer``).

Callees are syntactic. A bare ``helper()`` is recorded as
``package.helper``; a selector call ``fmt.Println`` or ``s.run`` is
recorded as rendered. Nothing is resolved against types, so a callee may
name a function that does not exist in the analysed tree.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from ..models import (
    FileAnalysis,
    FunctionRecord,
    GlobalRecord,
    ImportRecord,
    InterfaceRecord,
    ScanIssue,
    StructRecord,
)
from ..scanning.syntax import Node, NodeKind, classify, line_span, text, walk
from .duplicates import fingerprint
from .metrics import MetricsEngine, zeroed_metrics
from .type_cache import TypeStringCache

logger = get_logger(__name__)


class EntityExtractor:
    """Turns one file's syntax tree into a ``FileAnalysis``.

    The type cache is shared between extractors of the same run; the
    extractor itself holds no per-file state and is safe to reuse across
    threads.
    """

    def __init__(
        self,
        type_cache: Optional[TypeStringCache] = None,
        metrics: Optional[MetricsEngine] = None,
    ) -> None:
        # TypeStringCache defines __len__, so an empty shared cache is falsy
        self.type_cache = type_cache if type_cache is not None else TypeStringCache()
        self.metrics = metrics if metrics is not None else MetricsEngine()

    def extract(self, tree, path: str) -> FileAnalysis:
        root = tree.root_node
        package = _package_name(root)
        result = FileAnalysis(path=path, package=package)

        for node in root.named_children:
            if node.type == "import_declaration":
                result.imports.extend(self._imports(node, path, package))
        for node in root.named_children:
            if node.type in ("var_declaration", "const_declaration"):
                result.globals.extend(self._globals(node, path, package))

        for node in root.named_children:
            if node.type == "type_declaration":
                self._types(node, result)

        global_names = {g.name for g in result.globals}
        imports_by_name: dict[str, str] = {}
        for imp in result.imports:
            local = imp.local_name
            if local:
                imports_by_name.setdefault(local, imp.path)

        for node in root.named_children:
            if node.type in ("function_declaration", "method_declaration"):
                result.functions.append(
                    self._function(node, result, global_names, imports_by_name)
                )

        return result

    # ── declarations ──────────────────────────────────────────────

    def _imports(self, decl: Node, path: str, package: str) -> list[ImportRecord]:
        records = []
        for spec in _specs(decl, "import_spec"):
            alias_node = spec.child_by_field_name("name")
            records.append(
                ImportRecord(
                    path=text(spec.child_by_field_name("path")).strip('"`'),
                    file=path,
                    package=package,
                    alias=text(alias_node) if alias_node is not None else None,
                )
            )
        return records

    def _globals(self, decl: Node, path: str, package: str) -> list[GlobalRecord]:
        kind = "const" if decl.type == "const_declaration" else "var"
        records = []
        for spec in _specs(decl, f"{kind}_spec"):
            type_str = self.type_cache.render(spec.child_by_field_name("type"))
            values_node = spec.child_by_field_name("value")
            values = values_node.named_children if values_node is not None else []
            for i, name_node in enumerate(spec.children_by_field_name("name")):
                name = text(name_node)
                if name == "_":
                    continue
                value = None
                if i < len(values) and classify(values[i]) is NodeKind.LITERAL:
                    value = text(values[i])
                records.append(
                    GlobalRecord(
                        name=name, type=type_str, file=path, package=package, value=value, kind=kind
                    )
                )
        return records

    def _types(self, decl: Node, result: FileAnalysis) -> None:
        for spec in decl.named_children:
            if spec.type not in ("type_spec", "type_alias"):
                continue
            name = text(spec.child_by_field_name("name"))
            type_node = spec.child_by_field_name("type")
            kind = classify(type_node) if type_node is not None else NodeKind.UNSUPPORTED
            if kind is NodeKind.STRUCT_TYPE:
                result.structs.append(
                    StructRecord(name=name, file=result.path, package=result.package)
                )
            elif kind is NodeKind.INTERFACE_TYPE:
                result.interfaces.append(self._interface(name, type_node, result))

    def _interface(self, name: str, node: Node, result: FileAnalysis) -> InterfaceRecord:
        record = InterfaceRecord(name=name, file=result.path, package=result.package)
        for member in node.named_children:
            if member.type in ("method_elem", "method_spec"):
                record.methods.append(text(member.child_by_field_name("name")))
            elif member.type != "comment":
                record.embeds.append(self.type_cache.render(member))
        return record

    def _function(
        self,
        node: Node,
        result: FileAnalysis,
        global_names: set[str],
        imports_by_name: dict[str, str],
    ) -> FunctionRecord:
        receiver = None
        if node.type == "method_declaration":
            receiver = _receiver_struct(node.child_by_field_name("receiver"))

        body = node.child_by_field_name("body")
        start, end = line_span(node)
        record = FunctionRecord(
            name=text(node.child_by_field_name("name")),
            package=result.package,
            file=result.path,
            receiver=receiver,
            params=self.type_cache.parameter_types(node.child_by_field_name("parameters")),
            returns=self.type_cache.parameter_types(node.child_by_field_name("result")),
            start_line=start,
            end_line=end,
        )

        if body is not None:
            self._scan_body(body, record, global_names, imports_by_name)

        try:
            record.metrics = self.metrics.compute(body)
        except Exception as e:
            logger.warning(f"Metrics failed for {record.qualified_name} in {result.path}: {e}")
            result.issues.append(
                ScanIssue(
                    path=result.path,
                    stage="metrics",
                    reason=str(e),
                    function=record.qualified_name,
                )
            )
            record.metrics = zeroed_metrics()

        record.fingerprint = fingerprint(body)
        return record

    def _scan_body(
        self,
        body: Node,
        record: FunctionRecord,
        global_names: set[str],
        imports_by_name: dict[str, str],
    ) -> None:
        callees: dict[str, None] = {}
        referenced: dict[str, None] = {}
        dependencies: dict[str, None] = {}

        for node in walk(body):
            kind = classify(node)
            if kind is NodeKind.CALL:
                callee = self._callee_name(node.child_by_field_name("function"), record.package)
                if callee:
                    callees.setdefault(callee, None)
            elif kind is NodeKind.IDENTIFIER:
                if node.type == "identifier" and text(node) in global_names:
                    referenced.setdefault(text(node), None)
            elif kind is NodeKind.SELECTOR:
                qualifier = node.child_by_field_name(
                    "package" if node.type == "qualified_type" else "operand"
                )
                if qualifier is not None and classify(qualifier) is NodeKind.IDENTIFIER:
                    import_path = imports_by_name.get(text(qualifier))
                    if import_path is not None:
                        dependencies.setdefault(import_path, None)

        record.callees = list(callees)
        record.referenced_globals = list(referenced)
        record.dependencies = list(dependencies)

    def _callee_name(self, callee: Optional[Node], package: str) -> Optional[str]:
        if callee is None:
            return None
        kind = classify(callee)
        if kind is NodeKind.IDENTIFIER:
            return f"{package}.{text(callee)}"
        if kind is NodeKind.SELECTOR:
            return self.type_cache.render(callee)
        return None


def extract_file(
    tree, path: str | Path, type_cache: Optional[TypeStringCache] = None
) -> FileAnalysis:
    """One-shot extraction helper."""
    return EntityExtractor(type_cache).extract(tree, str(path))


def _package_name(root: Node) -> str:
    for node in root.named_children:
        if node.type == "package_clause":
            for child in node.named_children:
                if child.type == "package_identifier":
                    return text(child)
    return ""


def _specs(decl: Node, spec_type: str) -> list[Node]:
    """Specs of a declaration, looking through ``( ... )`` spec lists."""
    specs = []
    for child in decl.named_children:
        if child.type == spec_type:
            specs.append(child)
        elif child.type.endswith("_list"):
            specs.extend(c for c in child.named_children if c.type == spec_type)
    return specs


def _receiver_struct(receiver: Optional[Node]) -> Optional[str]:
    """Struct name of a receiver: ``(s *Server[T])`` -> ``Server``."""
    if receiver is None:
        return None
    for decl in receiver.named_children:
        if decl.type != "parameter_declaration":
            continue
        type_node = decl.child_by_field_name("type")
        while type_node is not None:
            kind = classify(type_node)
            if kind is NodeKind.POINTER_TYPE:
                type_node = type_node.named_children[-1]
            elif kind is NodeKind.GENERIC_TYPE:
                type_node = type_node.child_by_field_name("type")
            elif kind is NodeKind.PARENTHESIZED:
                type_node = type_node.named_children[0]
            else:
                return text(type_node)
    return None

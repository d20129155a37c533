"""Call-graph passes over the merged function map.

The graph is never materialised as linked objects: nodes are qualified
names, edges are the callee lists of ``FunctionRecord`` entries, and only
callees that are themselves keys of the map become edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..logging_config import get_logger
from ..models import FunctionRecord, ImplementsRecord, InterfaceRecord, StructRecord
from .algorithms import cyclic_components, reachable

logger = get_logger(__name__)


@dataclass
class DeadCodeInfo:
    reachable: set[str] = field(default_factory=set)
    unused_functions: list[str] = field(default_factory=list)


class CallGraphAnalyzer:
    """Recursion, dead-code and interface passes for one report."""

    def __init__(self, functions: dict[str, FunctionRecord]) -> None:
        self.functions = functions
        self.adjacency: dict[str, list[str]] = {
            name: [c for c in fn.callees if c in functions] for name, fn in functions.items()
        }

    def detect_recursion(self) -> list[set[str]]:
        """Flag recursive functions; return the mutually recursive groups.

        Every member of a cyclic component is marked, self-calls included.
        Only components of two or more functions are returned.
        """
        cycles = []
        for component in cyclic_components(self.adjacency, set(self.functions)):
            for name in component:
                self.functions[name].is_recursive = True
            if len(component) > 1:
                cycles.append(component)

        logger.debug(f"Recursion pass: {len(cycles)} mutually recursive groups")
        return cycles

    def detect_dead_code(self, entry_points: Iterable[str]) -> DeadCodeInfo:
        """Mark functions unreachable from entry points and exported API.

        An entry point matches a qualified name, or the bare name of any
        plain (non-method) function. Reachability only follows same-package
        unqualified calls; a call through a selector (``pkg.F``, ``s.m``)
        does not propagate.
        """
        entries = set(entry_points)
        seeds = {
            name
            for name, fn in self.functions.items()
            if fn.is_exported or _is_entry(name, fn, entries)
        }

        local_edges = {name: self._local_callees(fn) for name, fn in self.functions.items()}
        info = DeadCodeInfo(reachable=reachable(local_edges, seeds))

        for name in sorted(self.functions):
            fn = self.functions[name]
            unused = name not in info.reachable
            fn.metrics.is_unused = unused
            if unused:
                info.unused_functions.append(name)

        logger.debug(f"Dead-code pass: {len(info.unused_functions)} unused functions")
        return info

    def find_implementations(
        self, structs: list[StructRecord], interfaces: list[InterfaceRecord]
    ) -> list[ImplementsRecord]:
        """Method-set heuristic: a struct implements an interface of the
        same package when it declares every method the interface requires.

        Interfaces without any required method are skipped so ``any``-like
        interfaces do not match every struct.
        """
        method_sets: dict[tuple[str, str], set[str]] = {}
        for fn in self.functions.values():
            if fn.receiver:
                method_sets.setdefault((fn.package, fn.receiver), set()).add(fn.name)

        by_name = {(i.package, i.name): i for i in interfaces}
        records = []
        for iface in interfaces:
            required = _required_methods(iface, by_name)
            if not required:
                continue
            for struct in structs:
                if struct.package != iface.package:
                    continue
                if required <= method_sets.get((struct.package, struct.name), set()):
                    records.append(ImplementsRecord(struct=struct.name, interface=iface.name))
        return records

    def _local_callees(self, fn: FunctionRecord) -> list[str]:
        prefix = fn.package + "."
        return [
            c
            for c in fn.callees
            if c.startswith(prefix) and "." not in c[len(prefix) :] and c in self.functions
        ]


def _is_entry(name: str, fn: FunctionRecord, entries: set[str]) -> bool:
    return name in entries or (not fn.is_method and fn.name in entries)


def _required_methods(
    iface: InterfaceRecord, by_name: dict[tuple[str, str], InterfaceRecord]
) -> set[str]:
    required: set[str] = set()
    seen: set[str] = set()
    pending = [iface]
    while pending:
        current = pending.pop()
        if current.name in seen:
            continue
        seen.add(current.name)
        required.update(current.methods)
        for embed in current.embeds:
            nested = by_name.get((iface.package, embed))
            if nested is not None:
                pending.append(nested)
    return required

"""Strongly connected components and reachability over name-keyed edge maps.

Edge maps are plain ``dict[str, list[str]]``. Targets missing from the node
set passed to a function are dropped before any traversal starts.
"""

from collections import deque
from typing import Iterable


def _restrict(adjacency: dict[str, list[str]], nodes: set[str]) -> dict[str, list[str]]:
    return {n: [w for w in adjacency.get(n, ()) if w in nodes] for n in nodes}


def tarjan_scc(adjacency: dict[str, list[str]], nodes: set[str]) -> list[set[str]]:
    """Partition ``nodes`` into strongly connected components.

    Components come out in reverse topological order of the condensed
    graph. Each work frame is ``(node, next_edge)`` so arbitrarily long call
    chains never touch the interpreter stack.
    """
    edges = _restrict(adjacency, nodes)
    order: dict[str, int] = {}
    low: dict[str, int] = {}
    path: list[str] = []
    on_path: set[str] = set()
    components: list[set[str]] = []

    for start in sorted(nodes):
        if start in order:
            continue
        work = [(start, 0)]
        while work:
            node, pos = work.pop()
            if pos == 0:
                order[node] = low[node] = len(order)
                path.append(node)
                on_path.add(node)

            descended = False
            succs = edges[node]
            for j in range(pos, len(succs)):
                succ = succs[j]
                if succ not in order:
                    work.append((node, j + 1))
                    work.append((succ, 0))
                    descended = True
                    break
                if succ in on_path:
                    low[node] = min(low[node], order[succ])
            if descended:
                continue

            if low[node] == order[node]:
                component = set()
                member = None
                while member != node:
                    member = path.pop()
                    on_path.discard(member)
                    component.add(member)
                components.append(component)
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])

    return components


def cyclic_components(adjacency: dict[str, list[str]], nodes: set[str]) -> list[set[str]]:
    """Components that contain a cycle: two or more members, or a self-edge."""
    edges = _restrict(adjacency, nodes)
    return [
        c
        for c in tarjan_scc(edges, nodes)
        if len(c) > 1 or next(iter(c)) in edges[next(iter(c))]
    ]


def reachable(adjacency: dict[str, list[str]], seeds: Iterable[str]) -> set[str]:
    """Everything reachable from ``seeds``, seeds included (breadth first)."""
    seen: set[str] = set()
    frontier: deque[str] = deque(seeds)
    while frontier:
        node = frontier.popleft()
        if node in seen:
            continue
        seen.add(node)
        frontier.extend(w for w in adjacency.get(node, ()) if w not in seen)
    return seen

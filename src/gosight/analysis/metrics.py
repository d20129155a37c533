"""Per-function complexity metrics.

All counts are gathered in one iterative pre-order traversal of the body:

- Halstead: operators are binary/unary operator symbols, operands are
  identifier names and literal texts.
- Decision points: each if, for/range, case or communication clause,
  select statement and short-circuit operator. Cyclomatic complexity is
  one plus the decision points, which is also reported as the cognitive
  ``branching_score``.
- Cognitive score: if +1, loop +2, switch/select +1, ``&&``/``||`` +1.
  If-branches, loop bodies, case clauses and closures are visited one
  nesting level deeper; an ``else if`` stays at the level of its ``if``.
- Readability: block nesting, comment and branch-statement densities.

The maintainability index is::

    100 - 20*min(loc, 100)/100 - 30*min(cc, 50)/50 + 10*min(comments/loc, 0.4)

then x0.8 for duplicates, x0.9 for nesting deeper than 3 and x0.9 for
more than one branch statement every two lines.
"""

from __future__ import annotations

import math
from typing import Optional

from ..models import CognitiveComplexity, HalsteadMetrics, Metrics, ReadabilityMetrics
from ..scanning.syntax import (
    BRANCH_KINDS,
    LEAF_KINDS,
    Node,
    NodeKind,
    classify,
    is_logical,
    line_span,
    operator,
    text,
)

# Cognitive weights
IF_WEIGHT = 1
LOOP_WEIGHT = 2
SWITCH_WEIGHT = 1
SELECT_WEIGHT = 1
LOGICAL_WEIGHT = 1

_DECISION_KINDS = frozenset({NodeKind.IF, NodeKind.FOR, NodeKind.CASE, NodeKind.SELECT})


def compute_halstead(operators: dict[str, int], operands: dict[str, int]) -> HalsteadMetrics:
    n1, n2 = len(operators), len(operands)
    total_operators, total_operands = sum(operators.values()), sum(operands.values())

    vocabulary = n1 + n2
    length = total_operators + total_operands
    volume = length * math.log2(vocabulary) if vocabulary > 0 else 0.0
    difficulty = (n1 / 2) * (total_operands / n2) if n2 > 0 else 0.0

    return HalsteadMetrics(
        volume=volume,
        difficulty=difficulty,
        effort=difficulty * volume,
        distinct_operators=n1,
        distinct_operands=n2,
        total_operators=total_operators,
        total_operands=total_operands,
    )


def maintainability_index(
    lines_of_code: int,
    cyclomatic_complexity: int,
    comment_density: float,
    nesting_depth: int,
    branch_density: float,
    is_duplicate: bool,
) -> float:
    score = 100.0
    score -= 20.0 * min(lines_of_code, 100) / 100
    score -= 30.0 * min(cyclomatic_complexity, 50) / 50
    score += 10.0 * min(comment_density, 0.4)

    if is_duplicate:
        score *= 0.8
    if nesting_depth > 3:
        score *= 0.9
    if branch_density > 0.5:
        score *= 0.9
    return score


def refresh_maintainability(metrics: Metrics) -> None:
    """Recompute the index after a flag that feeds it has changed."""
    metrics.maintainability_index = maintainability_index(
        metrics.lines_of_code,
        metrics.cyclomatic_complexity,
        metrics.readability.comment_density,
        metrics.readability.nesting_depth,
        metrics.readability.branch_density,
        metrics.is_duplicate,
    )


def zeroed_metrics() -> Metrics:
    metrics = Metrics(cyclomatic_complexity=1)
    refresh_maintainability(metrics)
    return metrics


class MetricsEngine:
    """Computes ``Metrics`` for a function body node."""

    def compute(self, body: Optional[Node], is_duplicate: bool = False) -> Metrics:
        if body is None:
            return zeroed_metrics()

        operators: dict[str, int] = {}
        operands: dict[str, int] = {}
        decisions = 0
        cognitive = 0
        logical_ops = 0
        max_nesting = 0
        max_depth = 0
        comments = 0
        branches = 0

        # (node, cognitive nesting, block depth below the body)
        stack: list[tuple[Node, int, int]] = [(body, 0, 0)]
        while stack:
            node, nesting, depth = stack.pop()
            kind = classify(node)
            max_nesting = max(max_nesting, nesting)
            max_depth = max(max_depth, depth)

            if kind is NodeKind.IDENTIFIER or kind is NodeKind.LITERAL:
                name = text(node)
                operands[name] = operands.get(name, 0) + 1
            elif kind is NodeKind.BINARY or kind is NodeKind.UNARY:
                op = operator(node)
                operators[op] = operators.get(op, 0) + 1
                if is_logical(node):
                    decisions += 1
                    cognitive += LOGICAL_WEIGHT
                    logical_ops += 1
            elif kind is NodeKind.COMMENT:
                comments += 1

            if kind in _DECISION_KINDS:
                decisions += 1
            if kind in BRANCH_KINDS:
                branches += 1

            if kind is NodeKind.IF:
                cognitive += IF_WEIGHT
            elif kind is NodeKind.FOR:
                cognitive += LOOP_WEIGHT
            elif kind is NodeKind.SWITCH:
                cognitive += SWITCH_WEIGHT
            elif kind is NodeKind.SELECT:
                cognitive += SELECT_WEIGHT

            if kind in LEAF_KINDS:
                continue

            for child in reversed(node.named_children):
                child_kind = classify(child)
                child_depth = depth + 1 if child_kind in (NodeKind.BLOCK, NodeKind.CASE) else depth
                child_nesting = _child_nesting(node, kind, child, child_kind, nesting)
                stack.append((child, child_nesting, child_depth))

        start, end = line_span(body)
        loc = end - start + 1
        comment_density = comments / loc if loc > 0 else 0.0
        branch_density = branches / loc if loc > 0 else 0.0
        cyclomatic = 1 + decisions

        return Metrics(
            cyclomatic_complexity=cyclomatic,
            lines_of_code=loc,
            halstead=compute_halstead(operators, operands),
            cognitive=CognitiveComplexity(
                score=cognitive,
                nested_depth=max_nesting,
                logical_ops=logical_ops,
                branching_score=decisions,
            ),
            readability=ReadabilityMetrics(
                nesting_depth=max_depth,
                comment_density=comment_density,
                branch_density=branch_density,
            ),
            maintainability_index=maintainability_index(
                loc, cyclomatic, comment_density, max_depth, branch_density, is_duplicate
            ),
            is_duplicate=is_duplicate,
        )


def _child_nesting(
    parent: Node, kind: NodeKind, child: Node, child_kind: NodeKind, nesting: int
) -> int:
    if kind is NodeKind.IF:
        if child.type == "if_statement":
            return nesting
        if _is_field(parent, "consequence", child) or _is_field(parent, "alternative", child):
            return nesting + 1
        return nesting
    if kind is NodeKind.FOR:
        return nesting + 1 if _is_field(parent, "body", child) else nesting
    if kind in (NodeKind.SWITCH, NodeKind.SELECT):
        return nesting + 1 if child_kind is NodeKind.CASE else nesting
    if kind is NodeKind.FUNC_LITERAL:
        return nesting + 1 if _is_field(parent, "body", child) else nesting
    return nesting


def _is_field(parent: Node, field_name: str, child: Node) -> bool:
    target = parent.child_by_field_name(field_name)
    return target is not None and target == child

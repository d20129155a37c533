"""Duplicate function body detection.

A body is reduced to a canonical token string: identifier names, literal
texts, operator symbols and a fixed token for each return/if/for/switch,
in pre-order, comments dropped. The string is hashed with a base-31
polynomial rolling hash over its UTF-8 bytes, wrapping at 64 bits.

The first body seen with a given hash is the original; every later body
with the same hash is a duplicate. In strict mode a hash hit is only
accepted when the stored canonical string is equal too, so a collision
cannot produce a false positive.
"""

from __future__ import annotations

import threading
from typing import Optional

from ..logging_config import get_logger
from ..models import BodyFingerprint
from ..scanning.syntax import Node, NodeKind, classify, operator, text, walk

logger = get_logger(__name__)

HASH_BASE = 31
HASH_MASK = 0xFFFFFFFFFFFFFFFF

_KEYWORD_TOKENS = {
    NodeKind.RETURN: "return",
    NodeKind.IF: "if",
    NodeKind.FOR: "for",
    NodeKind.SWITCH: "switch",
}


def canonicalize(body: Node) -> str:
    tokens: list[str] = []
    for node in walk(body):
        kind = classify(node)
        if kind is NodeKind.IDENTIFIER or kind is NodeKind.LITERAL:
            tokens.append(text(node))
        elif kind is NodeKind.BINARY or kind is NodeKind.UNARY:
            tokens.append(operator(node))
        elif kind in _KEYWORD_TOKENS:
            tokens.append(_KEYWORD_TOKENS[kind])
    return " ".join(tokens)


def rolling_hash(value: str) -> int:
    h = 0
    for byte in value.encode("utf-8"):
        h = (h * HASH_BASE + byte) & HASH_MASK
    return h


def fingerprint(body: Optional[Node]) -> Optional[BodyFingerprint]:
    if body is None:
        return None
    canonical = canonicalize(body)
    return BodyFingerprint(canonical=canonical, hash=rolling_hash(canonical))


class DuplicateDetector:
    """Shared first-seen table of body hashes."""

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict
        self._seen: dict[int, str] = {}
        self._lock = threading.Lock()
        self.collisions = 0

    def __len__(self) -> int:
        return len(self._seen)

    def check(self, fp: BodyFingerprint) -> bool:
        """Register a fingerprint; True if an equal body was seen before."""
        with self._lock:
            seen = self._seen.get(fp.hash)
            if seen is None:
                self._seen[fp.hash] = fp.canonical
                return False
            if self.strict and seen != fp.canonical:
                self.collisions += 1
                logger.warning("Body hash collision on %#x; not flagged as duplicate", fp.hash)
                return False
            return True

    def detect(self, body: Optional[Node]) -> bool:
        fp = fingerprint(body)
        return fp is not None and self.check(fp)

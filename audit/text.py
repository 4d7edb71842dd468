"""Text helpers shared by the audit evaluators.

Every evaluator looks at the same combined text (title, headings and meta
description joined by single spaces), so it is built in one place.
"""

from __future__ import annotations

import math
from typing import Iterable

from schemas.audit import ProposedContent


def normalize_text(text: str) -> str:
    """Normalize text for comparisons.

    Lowercases and collapses whitespace.
    """
    return " ".join((text or "").strip().lower().split())


def collapse_ws(text: str) -> str:
    """Trim and collapse runs of whitespace without changing case."""
    return " ".join((text or "").strip().split())


def combined_text(proposed: ProposedContent) -> str:
    return " ".join([proposed.title, *proposed.headings, proposed.meta_description])


def combined_text_lower(proposed: ProposedContent) -> str:
    return combined_text(proposed).lower()


def lower_all(items: Iterable[str]) -> list[str]:
    return [(s or "").lower() for s in items]


def contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(n in text for n in needles)


def any_heading_contains(headings: Iterable[str], needles: Iterable[str]) -> bool:
    """True if any (already lowercased) heading contains any needle."""
    needles = list(needles)
    return any(contains_any(h, needles) for h in headings)


def dedupe_exact(items: Iterable[str]) -> list[str]:
    """Set semantics with first-seen order. Empty strings are dropped."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def truncate_with_ellipsis(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max(0, max_len - 3)] + "..."

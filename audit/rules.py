"""Lookup tables for the audit gate.

Tables here are data, not branches: adding an intent, AEO question or risk
category means adding a row, then a detector for it where one is needed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from schemas.common import SearchIntent


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TitlePattern:
    pattern: str
    example: str
    best_for: tuple[SearchIntent, ...]


GOOD_TITLE_PATTERNS: tuple[TitlePattern, ...] = (
    TitlePattern(
        pattern="How to [action] in [location] ([costs/mistakes/timeline])",
        example="How to Choose a Wedding Photographer in Sydney (Costs, Mistakes, Timeline)",
        best_for=(SearchIntent.learn, SearchIntent.compare),
    ),
    TitlePattern(
        pattern="[X] vs [Y]: What Actually Matters for [audience]",
        example="Studio vs Outdoor Portraits: What Actually Matters for Family Photos",
        best_for=(SearchIntent.compare,),
    ),
    TitlePattern(
        pattern="When You Need [service] in [location] — Signs, Costs, Next Steps",
        example="When You Need Professional Headshots in Melbourne — Signs, Costs, Next Steps",
        best_for=(SearchIntent.buy, SearchIntent.learn),
    ),
    TitlePattern(
        pattern="[Number] [Things] to [Know/Avoid] Before [Action]",
        example="7 Things to Know Before Booking a Newborn Photographer",
        best_for=(SearchIntent.learn,),
    ),
    TitlePattern(
        pattern="[Service] for [Audience]: [Outcome] in [Location]",
        example="Corporate Photography for Law Firms: Professional Images in Sydney CBD",
        best_for=(SearchIntent.buy,),
    ),
    TitlePattern(
        pattern="Why [Audience] [Choose/Trust] [Service] in [Location]",
        example="Why Sydney Families Trust New Age for Milestone Photography",
        best_for=(SearchIntent.trust,),
    ),
)


# Corporate / generic phrasing. Each hit costs the title 20 points.
BAD_TITLE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bcomplete guide\b",
        r"\bindustry insights?\b",
        r"\boverview\b",
        r"\bprovider\b",
        r"\bsolutions?\b",
        r"\bservices?\s*$",
        r"\bexpertise\b",
        r"\bour\s+(approach|philosophy|mission)\b",
        r"\bwhat we (do|offer)\b",
        r"\blearn more about\b",
        r"\bdiscover\b",
        r"\bunlock(ing)?\b",
        r"\beverything you need to know\b",
        r"\bultimate\b",
        r"\bdefinitive\b",
        r"\bcomprehensive\b",
    )
)


# ---------------------------------------------------------------------------
# AEO questions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AEOQuestion:
    id: str
    question: str
    required: bool


AEO_QUESTIONS: tuple[AEOQuestion, ...] = (
    AEOQuestion("what", "What is this?", True),
    AEOQuestion("who", "Who is it for?", True),
    AEOQuestion("when", "When do I need it?", True),
    AEOQuestion("how", "How does it work?", True),
    AEOQuestion("cost", "What does it cost / involve?", False),
    AEOQuestion("mistakes", "What mistakes should I avoid?", False),
    AEOQuestion("next", "What should I do next?", True),
)

AEO_QUESTION_BY_ID: dict[str, AEOQuestion] = {q.id: q for q in AEO_QUESTIONS}


# Narrative order for outline sections. Unknown tags sort with "inform".
SECTION_INTENT_ORDER: dict[str, int] = {
    "define": 1,
    "audience": 2,
    "timing": 3,
    "process": 4,
    "investment": 5,
    "warnings": 6,
    "inform": 7,
    "action": 8,
}


# ---------------------------------------------------------------------------
# Search intent
# ---------------------------------------------------------------------------


INTENT_REQUIREMENTS: dict[SearchIntent, tuple[str, ...]] = {
    SearchIntent.buy: ("CTA logic", "process explanation", "next step clarity", "pricing context"),
    SearchIntent.compare: ("criteria for comparison", "alternatives listed", "pros/cons", "recommendation"),
    SearchIntent.learn: ("clear explanations", "examples", "definitions", "step-by-step"),
    SearchIntent.trust: ("experience signals", "proof elements", "reassurance", "transparency"),
}


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------


RISK_KEYWORDS: dict[str, tuple[str, ...]] = {
    "legal": ("lawsuit", "sue", "court", "legal action", "attorney", "lawyer", "contract", "liability"),
    "medical": ("diagnose", "treat", "cure", "heal", "medical", "health condition", "symptom", "prescription"),
    "finance": ("invest", "return", "profit", "guaranteed", "income", "tax advice", "financial advice"),
    "children": ("child", "minor", "underage", "kid", "baby", "newborn", "infant", "toddler"),
    "guarantees": ("guarantee", "promise", "always", "never fail", "100%", "certain", "definitely"),
}

# Ordered by precedence when choosing the primary risk category.
DISCLAIMER_CATEGORIES: tuple[str, ...] = ("legal", "medical", "finance", "children")

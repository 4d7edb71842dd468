"""Search-intent validation.

Each intent carries four requirements, detected by substring signals over the
title, headings and meta description. The score is the percentage of
requirements met; a proposal is valid at 50 or more (configurable) unless buy intent is
declared on a page that is not a money page.

Outline alignment is a coarser check: four heading tests per intent, one point
each, aligned at two points (configurable).
"""

from __future__ import annotations

from dataclasses import dataclass

from audit.rules import INTENT_REQUIREMENTS
from audit.text import any_heading_contains, combined_text_lower, contains_any, lower_all, percent
from schemas.audit import ApprovedOutline, ProposedContent, TaskContext
from schemas.common import PageRole, SearchIntent
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig


@dataclass(frozen=True)
class IntentValidation:
    is_valid: bool
    score: int
    matched_requirements: list[str]
    missing_requirements: list[str]
    issues: list[str]
    suggestions: list[str]


@dataclass(frozen=True)
class OutlineIntentCheck:
    aligned: bool
    score: int
    points: int
    issues: list[str]


# Substring signals per requirement, matched against the lowercased
# title + headings + meta description.
REQUIREMENT_SIGNALS: dict[str, tuple[str, ...]] = {
    # buy
    "CTA logic": (
        "book", "schedule", "contact", "call", "get started", "enquire", "request",
        "learn more", "find out", "get in touch", "start", "begin", "order",
    ),
    "process explanation": (
        "process", "how it works", "what happens", "steps", "stages",
        "first", "then", "after", "during", "before", "session",
    ),
    "next step clarity": (
        "next step", "what to do", "ready to", "start by", "begin with",
        "your next", "take action", "get started",
    ),
    "pricing context": (
        "price", "cost", "rate", "fee", "investment", "budget", "afford",
        "package", "quote", "estimate", "value", "$", "dollar",
    ),
    # compare
    "criteria for comparison": (
        "criteria", "factor", "consider", "look for", "important",
        "matter", "quality", "feature", "aspect", "requirement",
    ),
    "alternatives listed": (
        "vs", "versus", "or", "alternative", "option", "choice",
        "instead", "compare", "between", "difference",
    ),
    "pros/cons": (
        "pro", "con", "advantage", "disadvantage", "benefit", "drawback",
        "good", "bad", "upside", "downside", "strength", "weakness",
    ),
    "recommendation": (
        "recommend", "suggest", "best for", "ideal for", "perfect for",
        "choose", "pick", "go with", "opt for", "better for",
    ),
    # learn
    "clear explanations": (
        "what is", "means", "explain", "understand", "basically",
        "simply", "in other words", "definition", "refers to",
    ),
    "examples": (
        "example", "for instance", "such as", "like", "sample",
        "case", "scenario", "situation", "illustration",
    ),
    "definitions": (
        "what is", "definition", "meaning", "refers to", "known as",
        "called", "term", "concept", "is a type of",
    ),
    "step-by-step": (
        "step", "first", "second", "third", "next", "then", "finally",
        "how to", "guide", "process", "stages",
    ),
    # trust
    "experience signals": (
        "experience", "years", "worked with", "photographed", "completed",
        "sessions", "clients", "families", "weddings", "projects",
    ),
    "proof elements": (
        "review", "testimonial", "client", "feedback", "said",
        "rated", "award", "certified", "recognised", "featured",
    ),
    "reassurance": (
        "worry", "stress", "relax", "comfortable", "easy",
        "hassle", "support", "help", "guide", "care",
    ),
    "transparency": (
        "honest", "transparent", "clear", "upfront", "no hidden",
        "what to expect", "process", "how we work", "our approach",
    ),
}

REQUIREMENT_SUGGESTIONS: dict[str, str] = {
    "CTA logic": "Add clear call-to-action in headings or meta",
    "process explanation": 'Include "How it works" or "The process" section',
    "next step clarity": 'Add "What happens next" or "Your next step" section',
    "pricing context": "Include pricing, packages, or investment information",
    "criteria for comparison": 'Add "What to look for" or evaluation criteria',
    "alternatives listed": "List and compare alternatives explicitly",
    "pros/cons": "Add advantages/disadvantages for each option",
    "recommendation": 'Include "Best for..." or clear recommendation',
    "clear explanations": 'Add "What is..." or definition sections',
    "examples": "Include concrete examples or case scenarios",
    "step-by-step": "Add numbered steps or process breakdown",
    "experience signals": "Include years of experience or client numbers",
    "proof elements": "Add reviews, testimonials, or credentials",
    "reassurance": "Address common concerns or worries",
    "transparency": "Show process, pricing, or expectation clarity",
}

# Heading vocabulary each intent should show somewhere in the outline.
_INTENT_HEADING_HINTS: dict[SearchIntent, tuple[tuple[str, ...], str]] = {
    SearchIntent.buy: (
        ("book", "contact", "next step", "get started", "process"),
        "Add a heading about booking/next steps for buy intent",
    ),
    SearchIntent.compare: (
        ("vs", "compare", "difference"),
        "Add explicit comparison headings for compare intent",
    ),
    SearchIntent.learn: (
        ("what", "how", "why"),
        "Add educational question-based headings for learn intent",
    ),
}

# Four coarse heading checks per intent for an outline; one point each.
_OUTLINE_ALIGNMENT: dict[SearchIntent, tuple[tuple[str, ...], ...]] = {
    SearchIntent.buy: (
        ("process", "how it works"),
        ("price", "cost", "investment"),
        ("book", "contact", "next"),
        ("expect", "include"),
    ),
    SearchIntent.compare: (
        ("vs", "compare"),
        ("differ", "pro", "con"),
        ("best", "recommend"),
        ("choose", "decision"),
    ),
    SearchIntent.learn: (
        ("what is", "meaning"),
        ("how", "why"),
        ("example", "type"),
        ("tip", "mistake", "avoid"),
    ),
    SearchIntent.trust: (
        ("about", "story", "who"),
        ("experience", "background"),
        ("client", "review", "testimonial"),
        ("approach", "philosophy", "why"),
    ),
}


def has_requirement_signal(requirement: str, text: str) -> bool:
    """Detector for one requirement against already-lowercased text."""
    return contains_any(text, REQUIREMENT_SIGNALS.get(requirement, ()))


def _intent_specific_checks(proposed: ProposedContent, task_context: TaskContext) -> tuple[list[str], list[str]]:
    issues: list[str] = []
    suggestions: list[str] = []

    # Trust intent is fine on any role; only buy is tied to money pages.
    if task_context.intent == SearchIntent.buy and task_context.role != PageRole.money:
        issues.append("Buy intent declared but role is not money page")

    hint = _INTENT_HEADING_HINTS.get(task_context.intent)
    if hint:
        needles, suggestion = hint
        if not any_heading_contains(lower_all(proposed.headings), needles):
            suggestions.append(suggestion)

    return issues, suggestions


def validate_intent(
    proposed: ProposedContent,
    task_context: TaskContext,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> IntentValidation:
    """Check that the proposal carries the signals its declared intent needs."""
    intent = task_context.intent
    requirements = INTENT_REQUIREMENTS[intent]
    text = combined_text_lower(proposed)

    matched = [r for r in requirements if has_requirement_signal(r, text)]
    missing = [r for r in requirements if r not in matched]
    score = percent(len(matched), len(requirements))

    issues: list[str] = []
    suggestions: list[str] = []
    if missing:
        issues.append(f"Missing {intent.value} intent signals: {', '.join(missing)}")
        suggestions.extend(REQUIREMENT_SUGGESTIONS[r] for r in missing if r in REQUIREMENT_SUGGESTIONS)

    mismatch_issues, hint_suggestions = _intent_specific_checks(proposed, task_context)
    issues.extend(mismatch_issues)
    suggestions.extend(hint_suggestions)

    return IntentValidation(
        is_valid=score >= config.intent_valid_at and not mismatch_issues,
        score=score,
        matched_requirements=matched,
        missing_requirements=missing,
        issues=issues,
        suggestions=suggestions,
    )


def validate_outline_intent(
    outline: ApprovedOutline,
    intent: SearchIntent,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> OutlineIntentCheck:
    """Coarse check that a (possibly rewritten) outline still serves the intent."""
    headings = lower_all(s.h2 for s in outline.sections)
    checks = _OUTLINE_ALIGNMENT[intent]

    points = sum(1 for needles in checks if any_heading_contains(headings, needles))
    max_points = len(checks)

    issues: list[str] = []
    aligned = points >= config.outline_alignment_min_points
    if not aligned:
        issues.append(f"Outline weakly aligned with {intent.value} intent ({points}/{max_points} signals)")

    return OutlineIntentCheck(
        aligned=aligned,
        score=percent(points, max_points),
        points=points,
        issues=issues,
    )

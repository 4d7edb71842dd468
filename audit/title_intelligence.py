"""Title intelligence.

Scores a proposed title and rewrites it when it is weak. Deterministic: the
same proposal and context always give the same score and the same rewrite.

Scoring starts at 100 and subtracts:
- 20 per corporate/generic phrase (see audit.rules.BAD_TITLE_PATTERNS)
- 15 when no service term appears
- 10 when a money page with a location omits the location
- 10 when the title does not signal the declared intent
- 5 when the length falls outside 30-60 characters
- 10 when there is no outcome or benefit framing

Titles scoring below the rewrite threshold (70) are regenerated from
intent-specific templates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from audit.rules import BAD_TITLE_PATTERNS, GOOD_TITLE_PATTERNS, TitlePattern
from audit.text import collapse_ws, contains_any
from schemas.audit import ProposedContent, TaskContext, UserContext
from schemas.common import PageRole, SearchIntent
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig


TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60

PatternQuality = Literal["excellent", "good", "acceptable", "poor"]


@dataclass(frozen=True)
class TitlePatternMatch:
    matched: bool
    quality: PatternQuality
    pattern: Optional[str] = None


@dataclass(frozen=True)
class TitleAnalysis:
    is_valid: bool
    issues: list[str]
    suggestions: list[str]
    rewritten_title: str
    score: int
    pattern_quality: PatternQuality


@dataclass(frozen=True)
class _IntentClarityRule:
    signals: tuple[str, ...]
    suggestion: str


_INTENT_CLARITY: dict[SearchIntent, _IntentClarityRule] = {
    SearchIntent.buy: _IntentClarityRule(
        signals=("book", "hire", "get", "schedule", "pricing", "cost", "rates", "how to"),
        suggestion="Add action-oriented language (book, hire, get started, pricing)",
    ),
    SearchIntent.compare: _IntentClarityRule(
        signals=("vs", "versus", "compare", "difference", "or", "which"),
        suggestion="Add comparison language (vs, compared to, difference between)",
    ),
    SearchIntent.learn: _IntentClarityRule(
        signals=("how", "what", "why", "when", "guide", "tips", "explained"),
        suggestion="Add educational framing (how to, what is, guide to)",
    ),
    SearchIntent.trust: _IntentClarityRule(
        signals=("about", "meet", "story", "why", "trust", "experience"),
        suggestion="Add trust-building language (meet, about, our story, why)",
    ),
}

_OUTCOME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"what (to|you|actually)",
        r"how to",
        r"get (the|your|better)",
        r"\d+ (tips|things|ways|reasons)",
        r"(save|avoid|prevent|achieve|get)",
        r"\((costs?|pricing|timeline|mistakes?)\)",
        r"—\s*\w+,\s*\w+",
    )
)


def extract_service_terms(service: str) -> list[str]:
    """Service string, its longer words (multi-word services) and a naive singular/plural."""
    service = service.strip()
    terms = [service]

    words = service.split()
    if len(words) > 1:
        terms.extend(w for w in words if len(w) > 3)

    if service.endswith("s"):
        terms.append(service[:-1])
    else:
        terms.append(service + "s")

    return [t for t in terms if t]


def has_service_reference(title: str, service: str) -> bool:
    lower = title.lower()
    return any(term.lower() in lower for term in extract_service_terms(service))


def check_intent_clarity(title: str, intent: SearchIntent) -> tuple[bool, str]:
    """Return (clear, suggestion) for the declared intent."""
    rule = _INTENT_CLARITY[intent]
    return contains_any(title.lower(), rule.signals), rule.suggestion


def check_for_outcome(title: str) -> bool:
    lower = title.lower()
    return any(p.search(lower) for p in _OUTCOME_PATTERNS)


def _find_pattern(prefix: str) -> TitlePattern:
    for p in GOOD_TITLE_PATTERNS:
        if p.pattern.startswith(prefix):
            return p
    raise KeyError(prefix)


_PATTERN_RULES: tuple[tuple[Callable[[str], bool], str, PatternQuality], ...] = (
    (lambda t: " vs " in t, "[X] vs [Y]", "excellent"),
    (lambda t: t.startswith("how to "), "How to", "excellent"),
    (lambda t: t.startswith("when you need "), "When You Need", "excellent"),
    (lambda t: re.match(r"^\d+\s+\w+\s+to\s+", t) is not None, "[Number]", "good"),
    (lambda t: " for " in t and ":" in t, "[Service] for", "good"),
    (lambda t: "why " in t and " trust" in t, "Why [Audience]", "good"),
)


def match_title_pattern(title: str) -> TitlePatternMatch:
    """Classify a title against the known good title shapes."""
    lower = title.lower()

    for predicate, prefix, quality in _PATTERN_RULES:
        if predicate(lower):
            return TitlePatternMatch(matched=True, quality=quality, pattern=_find_pattern(prefix).pattern)

    if "—" in lower or ":" in lower:
        return TitlePatternMatch(matched=True, quality="acceptable")

    if re.search(r"\([^)]+\)$", title):
        return TitlePatternMatch(matched=True, quality="acceptable")

    return TitlePatternMatch(matched=False, quality="poor")


def _buy_title(proposed: ProposedContent, task: TaskContext, user: UserContext) -> str:
    if task.location:
        return f"{task.primary_service} in {task.location} — What to Expect, Costs, Next Steps"
    return f"{task.primary_service}: Process, Pricing, and What to Expect"


def _compare_title(proposed: ProposedContent, task: TaskContext, user: UserContext) -> str:
    m = re.search(r"(.+?)\s+vs\.?\s+(.+)", proposed.title, re.IGNORECASE)
    if m:
        return f"{m.group(1).strip()} vs {m.group(2).strip()}: What Actually Matters"
    return f"Choosing {task.primary_service}: What Really Matters (Comparison Guide)"


def _learn_title(proposed: ProposedContent, task: TaskContext, user: UserContext) -> str:
    if task.location:
        return f"How to Choose {task.primary_service} in {task.location} (Costs, Mistakes, Timeline)"
    return f"{task.primary_service} Explained: What You Need to Know"


def _trust_title(proposed: ProposedContent, task: TaskContext, user: UserContext) -> str:
    if task.location:
        return f"Why {task.location} Clients Trust Us for {task.primary_service}"
    years = user.experience.years
    experience = f"{years}+ Years of" if years else ""
    return collapse_ws(f"{experience} {task.primary_service}: Our Story")


_REWRITE_TEMPLATES: dict[SearchIntent, Callable[[ProposedContent, TaskContext, UserContext], str]] = {
    SearchIntent.buy: _buy_title,
    SearchIntent.compare: _compare_title,
    SearchIntent.learn: _learn_title,
    SearchIntent.trust: _trust_title,
}


def generate_better_title(proposed: ProposedContent, task_context: TaskContext, user_context: UserContext) -> str:
    build = _REWRITE_TEMPLATES[task_context.intent]
    return collapse_ws(build(proposed, task_context, user_context))


def analyze_title(
    proposed: ProposedContent,
    task_context: TaskContext,
    user_context: UserContext,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> TitleAnalysis:
    issues: list[str] = []
    suggestions: list[str] = []
    score = 100

    title = proposed.title.strip()

    for pattern in BAD_TITLE_PATTERNS:
        m = pattern.search(title)
        if m:
            issues.append(f'Title contains weak/corporate pattern: "{m.group(0)}"')
            score -= 20

    if not has_service_reference(title, task_context.primary_service):
        issues.append(f'Title missing service reference: "{task_context.primary_service}"')
        suggestions.append(f'Include "{task_context.primary_service}" or related term')
        score -= 15

    if task_context.location and task_context.role == PageRole.money:
        if task_context.location.lower() not in title.lower():
            issues.append(f'Title missing location for local service: "{task_context.location}"')
            suggestions.append(f'Add location "{task_context.location}" for local SEO')
            score -= 10

    clear, clarity_suggestion = check_intent_clarity(title, task_context.intent)
    if not clear:
        issues.append(f"Title doesn't clearly signal {task_context.intent.value} intent")
        suggestions.append(clarity_suggestion)
        score -= 10

    if len(title) > TITLE_MAX_LENGTH:
        issues.append(f"Title too long for SERP display ({len(title)} chars, max {TITLE_MAX_LENGTH})")
        score -= 5
    if len(title) < TITLE_MIN_LENGTH:
        issues.append(f"Title too short, missing context ({len(title)} chars)")
        score -= 5

    if not check_for_outcome(title):
        issues.append("Title missing clear outcome or benefit")
        suggestions.append("Add what the reader will gain or achieve")
        score -= 10

    rewritten = title
    if score < config.title_rewrite_below:
        rewritten = generate_better_title(proposed, task_context, user_context)

    return TitleAnalysis(
        is_valid=score >= config.title_valid_at,
        issues=issues,
        suggestions=suggestions,
        rewritten_title=rewritten,
        score=max(0, score),
        pattern_quality=match_title_pattern(title).quality,
    )

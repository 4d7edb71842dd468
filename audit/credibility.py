"""Credibility (EEAT) signals.

Five signal categories are checked independently. Each detector walks a
strong -> moderate -> weak cascade and stops at the first hit:

- experience: numeric experience, then experience phrasing, then first person
- proof: quotes/ratings/awards, then review language, then trust adjectives
- local: location repeated, then a known local phrase, then one mention
  (skipped when the task has no location)
- process: a process heading, then process phrasing, then sequence words
  (missing only counts on money pages)
- visual: supplied by the vision evidence summary

A proposal is credible with two present signals of any strength. Score is
25 per strong, 15 per moderate, 5 per weak signal, capped at 100.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from audit.text import combined_text_lower, contains_any, lower_all
from schemas.audit import (
    CredibilityInjection,
    ProposedContent,
    TaskContext,
    UserContext,
    VisionEvidencePack,
)
from schemas.common import CredibilitySignalType, PageRole, SignalStrength
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig


STRENGTH_POINTS: dict[str, int] = {"strong": 25, "moderate": 15, "weak": 5}


@dataclass(frozen=True)
class SignalCheck:
    found: bool
    description: str = ""
    strength: SignalStrength = "weak"


@dataclass(frozen=True)
class CredibilitySignal:
    type: CredibilitySignalType
    description: str
    strength: SignalStrength


@dataclass(frozen=True)
class CredibilityResult:
    score: int
    is_valid: bool
    present_signals: list[CredibilitySignal]
    missing_signals: list[CredibilitySignal]
    injections: list[CredibilityInjection]
    issues: list[str]
    suggestions: list[str]


_NOT_FOUND = SignalCheck(found=False)


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _cascade(
    text: str,
    tiers: tuple[tuple[tuple[re.Pattern[str], ...], SignalStrength, str], ...],
) -> SignalCheck:
    for patterns, strength, description in tiers:
        if any(p.search(text) for p in patterns):
            return SignalCheck(found=True, description=description, strength=strength)
    return _NOT_FOUND


_EXPERIENCE_TIERS = (
    (
        _compile(
            r"\b\d+\+?\s*years?\b",
            r"\bover\s+\d+\s+years?\b",
            r"\b\d+\+?\s*(sessions?|clients?|weddings?|families?|projects?)\b",
            r"\bsince\s+\d{4}\b",
        ),
        "strong",
        "Specific experience metrics found",
    ),
    (
        _compile(
            r"\b(we've|i've)\s+(photographed|worked|completed|helped)\b",
            r"\bin our (studio|experience)\b",
            r"\bour team\b",
            r"\bexperienced\b",
        ),
        "moderate",
        "General experience language found",
    ),
    (_compile(r"\b(we|our|my|i)\b"), "weak", "First-person perspective present"),
)

_PROOF_TIERS = (
    (
        _compile(
            r"[\"“”][^\"“”]+[\"“”]",
            r"\b\d+(\.\d+)?\s*(star|rating|out of)\b",
            r"\b\d+%",
            r"\baward",
            r"\bcertified\b",
            r"\bfeatured (in|on)\b",
        ),
        "strong",
        "Specific proof elements found",
    ),
    (
        _compile(
            r"\b(clients?|customers?)\s+(say|said|mention|love)\b",
            r"\b(review|testimonial|feedback)\b",
            r"\b(trusted|recommended)\s+by\b",
        ),
        "moderate",
        "Review references found",
    ),
    (_compile(r"\b(trusted|reliable|professional)\b"), "weak", "General trust language present"),
)

_PROCESS_HEADING_SIGNALS = ("process", "how it works", "what to expect", "step")

_PROCESS_TIERS = (
    (
        _compile(
            r"\bstep\s+\d+\b",
            r"\bfirst,?\s+\w+\.\s+then\b",
            r"\bthe process\b",
            r"\bhow (it|we) work",
        ),
        "moderate",
        "Process language found",
    ),
    (_compile(r"\b(then|next|after|before|during)\b"), "weak", "Sequential language present"),
)


def check_experience_signals(text: str) -> SignalCheck:
    return _cascade(text, _EXPERIENCE_TIERS)


def check_proof_signals(text: str) -> SignalCheck:
    return _cascade(text, _PROOF_TIERS)


def check_local_signals(text: str, location: Optional[str], local_signals: list[str]) -> SignalCheck:
    if not location:
        return _NOT_FOUND

    text = text.lower()
    location_lower = location.lower()

    if len(re.findall(re.escape(location_lower), text)) >= 2:
        return SignalCheck(found=True, description=f"Multiple references to {location}", strength="strong")

    for signal in local_signals:
        if signal and signal.lower() in text:
            return SignalCheck(found=True, description="Local signal phrase found", strength="moderate")

    if location_lower in text:
        return SignalCheck(found=True, description="Location mentioned", strength="weak")

    return _NOT_FOUND


def check_process_signals(text: str, headings: list[str]) -> SignalCheck:
    if any(contains_any(h, _PROCESS_HEADING_SIGNALS) for h in lower_all(headings)):
        return SignalCheck(found=True, description="Dedicated process section found", strength="strong")
    return _cascade(text, _PROCESS_TIERS)


def check_visual_signals(vision: Optional[VisionEvidencePack]) -> SignalCheck:
    if vision is None:
        return _NOT_FOUND

    if vision.evidence_strength == "strong":
        return SignalCheck(found=True, description="Strong visual evidence available", strength="strong")

    if vision.hero_image is not None or vision.inline_images:
        strength: SignalStrength = "moderate" if vision.evidence_strength == "moderate" else "weak"
        return SignalCheck(found=True, description="Visual assets available", strength=strength)

    return _NOT_FOUND


# ---------------------------------------------------------------------------
# Injections and suggestions
# ---------------------------------------------------------------------------


def experience_injection(user: UserContext, task: TaskContext) -> Optional[CredibilityInjection]:
    exp = user.experience
    if exp.years:
        return CredibilityInjection(
            type="experience",
            content=f"With {exp.years}+ years of {task.primary_service} experience...",
            placement_hint="Opening paragraph or About section",
        )
    if exp.volume:
        return CredibilityInjection(
            type="experience",
            content=f"Having completed {exp.volume}...",
            placement_hint="Opening paragraph or credentials section",
        )
    if exp.specialties:
        return CredibilityInjection(
            type="experience",
            content=f"Specialising in {' and '.join(exp.specialties[:2])}...",
            placement_hint="Service description section",
        )
    return None


def proof_injection(user: UserContext, task: TaskContext) -> Optional[CredibilityInjection]:
    if user.reviews:
        review = user.reviews[0]
        return CredibilityInjection(
            type="proof",
            content=f'"{review.snippet}" — reflects our {review.theme}',
            placement_hint="After key claims or in testimonial section",
        )
    if user.credentials:
        return CredibilityInjection(
            type="proof",
            content=", ".join(user.credentials[:2]),
            placement_hint="About section or credentials callout",
        )
    return None


def local_injection(user: UserContext, task: TaskContext) -> Optional[CredibilityInjection]:
    if not task.location:
        return None
    if user.local_signals:
        return CredibilityInjection(
            type="local",
            content=user.local_signals[0],
            placement_hint="Location section or service description",
        )
    return CredibilityInjection(
        type="local",
        content=f"Serving {task.location} and surrounding areas",
        placement_hint="Footer or service area section",
    )


def process_injection(user: UserContext, task: TaskContext) -> Optional[CredibilityInjection]:
    return CredibilityInjection(
        type="process",
        content=f"Clear explanation of the {task.primary_service} process",
        placement_hint="After introduction, before pricing",
    )


def credibility_suggestion(signal_type: CredibilitySignalType, task: TaskContext, user: UserContext) -> str:
    if signal_type == "experience":
        if user.experience.years:
            return f'Add "{user.experience.years}+ years experience" to content'
        return "Add specific experience metrics (years, number of clients/projects)"
    if signal_type == "proof":
        if user.reviews:
            return f'Include review quote about "{user.reviews[0].theme}"'
        return "Add testimonial, case study, or specific achievement"
    if signal_type == "local":
        return f"Mention {task.location} more specifically with local landmarks or area names"
    if signal_type == "process":
        return 'Add "How It Works" or process explanation section'
    if signal_type == "visual":
        return "Reference specific images that demonstrate work quality"
    return "Add more credibility signals"


_MISSING_DESCRIPTIONS: dict[str, str] = {
    "experience": "No experience signals found",
    "proof": "No proof signals found",
    "local": "No local signals found for location-based content",
    "process": "No process transparency for money page",
    "visual": "No visual evidence referenced",
}

_INJECTORS = {
    "experience": experience_injection,
    "proof": proof_injection,
    "local": local_injection,
    "process": process_injection,
}


def check_credibility(
    proposed: ProposedContent,
    task_context: TaskContext,
    user_context: UserContext,
    vision_context: Optional[VisionEvidencePack] = None,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> CredibilityResult:
    text = combined_text_lower(proposed)

    # (type, check result, whether absence counts as missing)
    checks: list[tuple[CredibilitySignalType, SignalCheck, bool]] = [
        ("experience", check_experience_signals(text), True),
        ("proof", check_proof_signals(text), True),
        (
            "local",
            check_local_signals(text, task_context.location, user_context.local_signals),
            bool(task_context.location),
        ),
        (
            "process",
            check_process_signals(text, proposed.headings),
            task_context.role == PageRole.money,
        ),
        ("visual", check_visual_signals(vision_context), True),
    ]

    present: list[CredibilitySignal] = []
    missing: list[CredibilitySignal] = []
    injections: list[CredibilityInjection] = []
    suggestions: list[str] = []

    for signal_type, result, counts_when_absent in checks:
        if result.found:
            present.append(CredibilitySignal(signal_type, result.description, result.strength))
            continue
        if not counts_when_absent:
            continue

        missing.append(CredibilitySignal(signal_type, _MISSING_DESCRIPTIONS[signal_type], "weak"))
        injector = _INJECTORS.get(signal_type)
        injection = injector(user_context, task_context) if injector else None
        if injection is not None:
            injections.append(injection)
        if signal_type == "visual":
            suggestions.append("Include image references with relevant alt text")

    score = min(100, sum(STRENGTH_POINTS[s.strength] for s in present))
    is_valid = len(present) >= config.credibility_min_signals

    issues: list[str] = []
    if not is_valid:
        issues.append(
            f"Only {len(present)} credibility signals found (minimum {config.credibility_min_signals} required)"
        )

    suggestions.extend(credibility_suggestion(m.type, task_context, user_context) for m in missing)

    return CredibilityResult(
        score=score,
        is_valid=is_valid,
        present_signals=present,
        missing_signals=missing,
        injections=injections,
        issues=issues,
        suggestions=suggestions,
    )

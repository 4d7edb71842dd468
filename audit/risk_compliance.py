"""Risk and compliance scan.

Three independent scans over the combined proposal text:

1. category keywords (legal, medical, finance, children, guarantees)
2. guarantee / absolute-promise phrasing
3. unsubstantiated outcome claims

Any blocker makes the risk level critical. Risk score is
15 per detected category + 5 per warning phrase + 20 per blocking phrase,
capped at 100.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

from audit.rules import DISCLAIMER_CATEGORIES, RISK_KEYWORDS
from audit.text import combined_text_lower, dedupe_exact
from schemas.audit import ComplianceResult, ProposedContent, TaskContext


Severity = Literal["warning", "block"]
RiskLevel = Literal["none", "low", "medium", "high", "critical"]


@dataclass(frozen=True)
class FlaggedPhrase:
    phrase: str
    category: str
    severity: Severity
    suggestion: str


@dataclass(frozen=True)
class OutcomeClaim:
    phrase: str
    blocking: bool
    suggestion: str


@dataclass(frozen=True)
class RiskScanResult:
    score: int
    risk_level: RiskLevel
    detected_categories: list[str]
    flagged_phrases: list[FlaggedPhrase]
    compliance: ComplianceResult
    issues: list[str]
    blockers: list[str]


# Keyword hits containing any of these are always blocking.
BLOCKING_PHRASES: tuple[str, ...] = (
    "guarantee",
    "cure",
    "diagnose",
    "legal action",
    "100%",
    "never fail",
    "always",
    "definitely",
)

# Any hit in these categories blocks regardless of wording.
ALWAYS_BLOCKING_CATEGORIES: frozenset[str] = frozenset({"medical", "legal"})

SAFER_ALTERNATIVES: dict[str, str] = {
    "guarantee": "we aim to...",
    "promise": "we strive to...",
    "always": "typically",
    "never": "rarely",
    "100%": "consistently high",
    "definitely": "generally",
    "cure": "may help with",
    "diagnose": "identify potential",
    "legal action": "legal considerations",
    "invest": "consider",
    "profit": "potential benefits",
    "return": "potential outcome",
}

SHORT_DISCLAIMERS: dict[str, str] = {
    "legal": "This information is for general guidance only and does not constitute legal advice.",
    "medical": "This content is informational only and should not replace professional medical advice.",
    "finance": "This is general information and not financial advice. Consult a qualified financial advisor.",
    "children": "All sessions involving minors require parent/guardian presence and consent.",
}

_DISCLAIMER_ISSUES: dict[str, str] = {
    "legal": "Legal content detected - requires disclaimer",
    "medical": "Medical content detected - requires health disclaimer",
    "finance": "Financial content detected - requires finance disclaimer",
    "children": "Content involves children - privacy considerations apply",
}

LONG_DISCLAIMERS: dict[str, str] = {
    "legal": (
        "This information is provided for general guidance only and does not constitute legal advice. "
        "Please consult a qualified legal professional for advice specific to your situation."
    ),
    "medical": (
        "This content is for informational purposes only and should not be considered medical advice. "
        "Always consult with a qualified healthcare provider regarding any health concerns."
    ),
    "finance": (
        "This information is general in nature and does not constitute financial advice. "
        "Please consult a licensed financial advisor for guidance specific to your circumstances."
    ),
    "children": (
        "Sessions involving minors require parent or guardian presence and written consent. "
        "All child safety protocols are followed in accordance with relevant regulations."
    ),
}

_GUARANTEE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"guarantee[ds]?\b",
        r"100%\s*(satisfaction|guarantee|success)",
        r"money.back",
        r"risk.free",
        r"no.risk",
        r"always\s+\w+\s+results?",
        r"never\s+fail",
        r"definitely\s+\w+",
    )
)

_ABSOLUTE_WORDS = re.compile(r"guarantee|100%|never fail", re.IGNORECASE)

# (pattern, blocking, suggestion)
_OUTCOME_CLAIM_PATTERNS: tuple[tuple[re.Pattern[str], bool, str], ...] = (
    (
        re.compile(r"will\s+(definitely|always|certainly)\s+\w+", re.IGNORECASE),
        True,
        'Use "may" or "typically" instead of absolutes',
    ),
    (
        re.compile(r"guaranteed\s+\w+", re.IGNORECASE),
        True,
        "Remove guarantee language or qualify with conditions",
    ),
    (
        re.compile(r"best\s+(in|around|near)\s+\w+", re.IGNORECASE),
        False,
        'Substantiate "best" claims with awards or reviews',
    ),
    (
        re.compile(r"#1\s+\w+", re.IGNORECASE),
        False,
        "Provide source for ranking claims",
    ),
    (
        re.compile(r"leading\s+(provider|expert|specialist)", re.IGNORECASE),
        False,
        "Qualify leadership claims with context",
    ),
)

_UNSUPERVISED_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"alone\s+with\s+(child|minor|kid|baby)",
        r"unsupervised",
        r"without\s+parent",
    )
)

_MINOR_PHOTO_SHARING = re.compile(r"share\s+(photo|image|picture).*?(child|minor|kid|baby)", re.IGNORECASE)

_SOFTENINGS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(p, re.IGNORECASE), r)
    for p, r in (
        (r"\bguarantee\b", "aim to ensure"),
        (r"\bwill\s+always\b", "strives to"),
        (r"\balways\b", "consistently"),
        (r"\bnever\b", "rarely"),
        (r"100%", "high degree of"),
        (r"\bdefinitely\b", "typically"),
        (r"\bbest\s+in\b", "highly rated in"),
        (r"#1\b", "top-rated"),
    )
)


def phrase_severity(phrase: str, category: str) -> Severity:
    lower = phrase.lower()
    if any(bp in lower for bp in BLOCKING_PHRASES):
        return "block"
    if category in ALWAYS_BLOCKING_CATEGORIES:
        return "block"
    return "warning"


def safer_alternative(phrase: str) -> str:
    lower = phrase.lower()
    for risky, safe in SAFER_ALTERNATIVES.items():
        if risky in lower:
            return f'Consider using "{safe}" instead of "{risky}"'
    return "Soften or qualify this claim"


def detect_category_keywords(text: str) -> dict[str, list[str]]:
    """Category -> matched keywords, in table order. `text` must be lowercased."""
    hits: dict[str, list[str]] = {}
    for category, keywords in RISK_KEYWORDS.items():
        matched = [kw for kw in keywords if kw.lower() in text]
        if matched:
            hits[category] = matched
    return hits


def find_guarantee_phrases(text: str) -> list[str]:
    phrases: list[str] = []
    for pattern in _GUARANTEE_PATTERNS:
        phrases.extend(m.group(0) for m in pattern.finditer(text))
    return dedupe_exact(phrases)


def is_absolute_claim(phrase: str) -> bool:
    return _ABSOLUTE_WORDS.search(phrase) is not None


def find_outcome_claims(text: str) -> list[OutcomeClaim]:
    claims: list[OutcomeClaim] = []
    for pattern, blocking, suggestion in _OUTCOME_CLAIM_PATTERNS:
        for m in pattern.finditer(text):
            claims.append(OutcomeClaim(phrase=m.group(0), blocking=blocking, suggestion=suggestion))
    return claims


def check_child_safety(text: str) -> list[str]:
    """Concerns for content involving minors. Every concern is a blocker."""
    concerns: list[str] = []
    if any(p.search(text) for p in _UNSUPERVISED_PATTERNS):
        concerns.append("Content implies unsupervised access to minors")
    if _MINOR_PHOTO_SHARING.search(text):
        concerns.append("Review image sharing policy for content involving minors")
    return concerns


def risk_level_for(score: int, blocker_count: int) -> RiskLevel:
    if blocker_count > 0:
        return "critical"
    if score >= 70:
        return "high"
    if score >= 40:
        return "medium"
    if score >= 10:
        return "low"
    return "none"


def primary_risk_category(categories: Iterable[str]) -> Optional[str]:
    categories = list(categories)
    if not categories:
        return None
    for c in DISCLAIMER_CATEGORIES:
        if c in categories:
            return c
    return "general"


def scan_for_risks(proposed: ProposedContent, task_context: TaskContext) -> RiskScanResult:
    """Scan the proposal for risky claims and compliance requirements."""
    text = combined_text_lower(proposed)

    detected: list[str] = []
    flagged: list[FlaggedPhrase] = []
    issues: list[str] = []
    blockers: list[str] = []
    disclaimers: list[str] = []
    restricted: list[str] = []

    for category, matches in detect_category_keywords(text).items():
        detected.append(category)
        for match in matches:
            severity = phrase_severity(match, category)
            flagged.append(FlaggedPhrase(match, category, severity, safer_alternative(match)))
            if severity == "block":
                blockers.append(f'Blocked phrase "{match}" in {category} category')
            else:
                issues.append(f'Warning: "{match}" may need careful handling')

    guarantee_phrases = find_guarantee_phrases(text)
    for phrase in guarantee_phrases:
        blocking = is_absolute_claim(phrase)
        flagged.append(
            FlaggedPhrase(phrase, "guarantees", "block" if blocking else "warning", safer_alternative(phrase))
        )
        if blocking:
            blockers.append(f'Absolute claim "{phrase}" not allowed')
        restricted.append(phrase)
    if guarantee_phrases and "guarantees" not in detected:
        detected.append("guarantees")

    for category in DISCLAIMER_CATEGORIES:
        if category not in detected:
            continue
        disclaimers.append(SHORT_DISCLAIMERS[category])
        issues.append(_DISCLAIMER_ISSUES[category])
        if category == "children":
            blockers.extend(check_child_safety(text))

    for claim in find_outcome_claims(text):
        flagged.append(
            FlaggedPhrase(claim.phrase, "outcome_claims", "block" if claim.blocking else "warning", claim.suggestion)
        )
        if claim.blocking:
            blockers.append(f'Outcome claim "{claim.phrase}" needs substantiation')
        restricted.append(claim.phrase)

    warning_count = sum(1 for f in flagged if f.severity == "warning")
    block_count = sum(1 for f in flagged if f.severity == "block")
    score = min(100, len(detected) * 15 + warning_count * 5 + block_count * 20)

    blockers = dedupe_exact(blockers)

    return RiskScanResult(
        score=score,
        risk_level=risk_level_for(score, len(blockers)),
        detected_categories=detected,
        flagged_phrases=flagged,
        compliance=ComplianceResult(
            requires_disclaimer=bool(disclaimers),
            disclaimers=disclaimers,
            restricted_claims=dedupe_exact(restricted),
            risk_category=primary_risk_category(detected),
        ),
        issues=issues,
        blockers=blockers,
    )


def generate_disclaimers(detected_categories: Iterable[str]) -> list[str]:
    """Long-form disclaimer copy for publishing, in fixed category order."""
    detected = set(detected_categories)
    return [LONG_DISCLAIMERS[c] for c in DISCLAIMER_CATEGORIES if c in detected]


def soften_claim(claim: str) -> str:
    """Replace absolute wording with qualified wording."""
    softened = claim
    for pattern, replacement in _SOFTENINGS:
        softened = pattern.sub(replacement, softened)
    return softened

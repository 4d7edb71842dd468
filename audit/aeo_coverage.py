"""AEO (answer-engine) coverage.

Seven canonical questions; an outline must answer at least four of them. When
it does not, a replacement outline is synthesized from the proposal's own
headings plus one templated section per unanswered question, then sorted into
a fixed narrative order (define, audience, timing, process, investment,
warnings, inform, action).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from audit.rules import AEO_QUESTION_BY_ID, AEO_QUESTIONS, SECTION_INTENT_ORDER
from audit.text import combined_text_lower, contains_any, lower_all, normalize_text, percent
from schemas.audit import ApprovedOutline, OutlineSection, ProposedContent, TaskContext
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig


@dataclass(frozen=True)
class AEOCoverageResult:
    score: int
    covered_questions: list[str]
    missing_questions: list[str]
    required_missing: list[str]
    is_valid: bool
    rewritten_outline: Optional[ApprovedOutline]
    issues: list[str]
    suggestions: list[str]


@dataclass(frozen=True)
class _QuestionDetector:
    text_signals: tuple[str, ...]
    heading_prefixes: tuple[str, ...] = ()
    heading_signals: tuple[str, ...] = ()

    def covered(self, text: str, headings: list[str]) -> bool:
        if contains_any(text, self.text_signals):
            return True
        for h in headings:
            if self.heading_prefixes and h.startswith(self.heading_prefixes):
                return True
            if contains_any(h, self.heading_signals):
                return True
        return False


QUESTION_DETECTORS: dict[str, _QuestionDetector] = {
    "what": _QuestionDetector(
        text_signals=("what is", "definition", "meaning"),
        heading_prefixes=("what ",),
        heading_signals=("overview", "introduction"),
    ),
    "who": _QuestionDetector(
        text_signals=("who", "for ", "ideal for", "perfect for", "audience"),
        heading_signals=("who", "for "),
    ),
    "when": _QuestionDetector(
        text_signals=("when", "timing", "right time", "signs"),
        heading_signals=("when", "sign"),
    ),
    "how": _QuestionDetector(
        text_signals=("how", "process", "steps", "works"),
        heading_signals=("how", "process", "step"),
    ),
    "cost": _QuestionDetector(
        text_signals=("cost", "price", "investment", "budget", "involve"),
        heading_signals=("cost", "price", "invest"),
    ),
    "mistakes": _QuestionDetector(
        text_signals=("mistake", "avoid", "don't", "never", "wrong"),
        heading_signals=("mistake", "avoid", "common"),
    ),
    "next": _QuestionDetector(
        text_signals=("next step", "get started", "book", "contact", "call"),
        heading_signals=("next", "start", "book", "contact"),
    ),
}


_SUGGESTIONS: dict[str, Callable[[TaskContext], str]] = {
    "what": lambda t: f"Add section explaining what {t.primary_service} is and what it involves",
    "who": lambda t: f"Add section clarifying who {t.primary_service} is ideal for",
    "when": lambda t: f"Add section on when you need {t.primary_service} (signs, timing, occasions)",
    "how": lambda t: f"Add section explaining how {t.primary_service} works (process, steps)",
    "cost": lambda t: f"Add section on {t.primary_service} pricing, packages, or what's involved",
    "mistakes": lambda t: f"Add section on common mistakes when choosing {t.primary_service}",
    "next": lambda t: "Add clear next step section (how to book, contact, get started)",
}


def _next_heading(t: TaskContext) -> str:
    if t.location:
        return f"Book {t.primary_service} in {t.location}"
    return f"Get Started with {t.primary_service}"


# question id -> (h2 builder, section intent, h3s)
_SECTION_TEMPLATES: dict[str, tuple[Callable[[TaskContext], str], str, tuple[str, ...]]] = {
    "what": (lambda t: f"What is {t.primary_service}?", "define", ("Overview", "What It Includes", "Types Available")),
    "who": (lambda t: f"Who Needs {t.primary_service}?", "audience", ("Ideal Clients", "Common Situations", "Not Right For")),
    "when": (lambda t: f"When to Get {t.primary_service}", "timing", ("Signs You Need It", "Best Timing", "How to Prepare")),
    "how": (lambda t: f"How {t.primary_service} Works", "process", ("The Process", "What to Expect", "Timeline")),
    "cost": (
        lambda t: f"{t.primary_service} Pricing & Packages",
        "investment",
        ("What Affects Cost", "Package Options", "Getting a Quote"),
    ),
    "mistakes": (
        lambda t: f"Common {t.primary_service} Mistakes to Avoid",
        "warnings",
        ("What Not to Do", "Red Flags", "How to Choose Wisely"),
    ),
    "next": (_next_heading, "action", ("How to Book", "What Happens Next", "Contact Us")),
}

# First match wins, so the order matters ("who" before "for" etc.).
_HEADING_INTENT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("what is", "overview"), "define"),
    (("who", "for"), "audience"),
    (("when", "sign"), "timing"),
    (("how", "process"), "process"),
    (("cost", "price"), "investment"),
    (("mistake", "avoid"), "warnings"),
    (("next", "book"), "action"),
)


def is_question_covered(question_id: str, text: str, headings: Iterable[str]) -> bool:
    """Detector for one AEO question. `text` must already be lowercased."""
    detector = QUESTION_DETECTORS.get(question_id)
    if detector is None:
        return False
    return detector.covered(text, lower_all(headings))


def covered_question_ids(text: str, headings: Iterable[str]) -> list[str]:
    headings = list(headings)
    return [q.id for q in AEO_QUESTIONS if is_question_covered(q.id, text, headings)]


def detect_heading_intent(heading: str) -> str:
    lower = heading.lower()
    for needles, intent in _HEADING_INTENT_RULES:
        if contains_any(lower, needles):
            return intent
    return "inform"


def generate_section_for_question(question_id: str, task_context: TaskContext) -> Optional[OutlineSection]:
    template = _SECTION_TEMPLATES.get(question_id)
    if template is None:
        return None
    build_h2, intent, h3s = template
    return OutlineSection(h2=build_h2(task_context), intent=intent, h3s=list(h3s))


def reorder_sections(sections: Iterable[OutlineSection]) -> list[OutlineSection]:
    """Stable sort by narrative order; ties keep insertion order."""
    fallback = SECTION_INTENT_ORDER["inform"]
    return sorted(sections, key=lambda s: SECTION_INTENT_ORDER.get(s.intent, fallback))


def _append_unique(sections: list[OutlineSection], seen: set[str], section: Optional[OutlineSection]) -> None:
    if section is None:
        return
    key = normalize_text(section.h2)
    if key in seen:
        return
    seen.add(key)
    sections.append(section)


def generate_aeo_compliant_outline(
    proposed: ProposedContent,
    task_context: TaskContext,
    missing_questions: Iterable[str],
) -> ApprovedOutline:
    sections: list[OutlineSection] = []
    seen: set[str] = set()

    for heading in proposed.headings:
        _append_unique(sections, seen, OutlineSection(h2=heading, intent=detect_heading_intent(heading)))

    for qid in missing_questions:
        _append_unique(sections, seen, generate_section_for_question(qid, task_context))

    return ApprovedOutline(h1=proposed.title, sections=reorder_sections(sections))


def check_aeo_coverage(
    proposed: ProposedContent,
    task_context: TaskContext,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> AEOCoverageResult:
    """Check coverage of the seven AEO questions; synthesize an outline when short."""
    text = combined_text_lower(proposed)
    covered = covered_question_ids(text, proposed.headings)
    missing = [q.id for q in AEO_QUESTIONS if q.id not in covered]
    required_missing = [qid for qid in missing if AEO_QUESTION_BY_ID[qid].required]

    issues: list[str] = []
    if required_missing:
        labels = [AEO_QUESTION_BY_ID[qid].question for qid in required_missing]
        issues.append(f"Missing required AEO questions: {', '.join(labels)}")

    suggestions = [_SUGGESTIONS[qid](task_context) for qid in missing]

    # Validity counts covered questions only; "required" just decides the issue text.
    is_valid = len(covered) >= config.aeo_min_covered

    rewritten = None
    if not is_valid:
        rewritten = generate_aeo_compliant_outline(proposed, task_context, missing)

    return AEOCoverageResult(
        score=percent(len(covered), len(AEO_QUESTIONS)),
        covered_questions=covered,
        missing_questions=missing,
        required_missing=required_missing,
        is_valid=is_valid,
        rewritten_outline=rewritten,
        issues=issues,
        suggestions=suggestions,
    )


def outline_coverage(
    outline: ApprovedOutline,
    task_context: TaskContext,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> AEOCoverageResult:
    """Coverage of an outline, reading its H1 and section headings."""
    proposed = ProposedContent(title=outline.h1, headings=[s.h2 for s in outline.sections])
    return check_aeo_coverage(proposed, task_context, config=config)


def enhance_outline_for_aeo(
    outline: ApprovedOutline,
    task_context: TaskContext,
    coverage: Optional[AEOCoverageResult] = None,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> ApprovedOutline:
    """Add sections for missing required questions.

    Returns the same outline object when coverage is already valid. Without an
    explicit coverage result the outline's own coverage is measured.
    """
    if coverage is None:
        coverage = outline_coverage(outline, task_context, config=config)
    if coverage.is_valid:
        return outline

    sections = list(outline.sections)
    seen = {normalize_text(s.h2) for s in sections}
    for qid in coverage.required_missing:
        _append_unique(sections, seen, generate_section_for_question(qid, task_context))

    return ApprovedOutline(h1=outline.h1, sections=reorder_sections(sections))

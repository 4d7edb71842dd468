"""Content-quality audit gate.

Runs the five evaluators over one proposal and renders an approve/block
decision. The gate runs twice in a content lifecycle:

  planning     advisory: evaluator failures become warnings
  pre-publish  enforcing: evaluator failures become blockers and the weighted
               overall score must reach the configured minimum

Risk-scanner blockers block in both modes.

The gate is a pure function of its input, mode and config. The optional
RunLogger only observes; it never changes the result.
"""

from __future__ import annotations

import re
from typing import Optional

from app_logging.run_logger import RunLogger
from audit.aeo_coverage import check_aeo_coverage, enhance_outline_for_aeo
from audit.credibility import check_credibility
from audit.intent_validation import validate_intent, validate_outline_intent
from audit.risk_compliance import scan_for_risks, soften_claim
from audit.text import collapse_ws, dedupe_exact, round_half_up, truncate_with_ellipsis
from audit.title_intelligence import analyze_title
from schemas.audit import (
    ApprovedOutline,
    AuditGateInput,
    AuditScores,
    ContentIntelGateResult,
    GateVerdict,
    OutlineSection,
    TaskContext,
    UserContext,
)
from schemas.common import GateMode, PageRole, SearchIntent
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig, ScoreWeights


_META_CTA = re.compile(r"\b(book|call|contact|learn|discover|find out|get)\b", re.IGNORECASE)


def compute_overall_score(scores: AuditScores, weights: ScoreWeights = DEFAULT_GATE_CONFIG.weights) -> int:
    risk_contribution = max(0, 100 - scores.risk)
    return round_half_up(
        scores.serp_strength * weights.serp_strength
        + scores.aeo_coverage * weights.aeo_coverage
        + scores.credibility * weights.credibility
        + scores.intent_match * weights.intent_match
        + risk_contribution * weights.risk
    )


def _meta_is_acceptable(meta: str, task: TaskContext, config: GateConfig) -> bool:
    if not (config.meta_min_length <= len(meta) <= config.meta_max_length):
        return False
    lower = meta.lower()
    has_service = task.primary_service.lower() in lower
    has_location = not task.location or task.location.lower() in lower
    return has_service and has_location and _META_CTA.search(meta) is not None


def build_approved_meta_description(
    proposed_meta: str,
    task_context: TaskContext,
    user_context: UserContext,
    *,
    config: GateConfig = DEFAULT_GATE_CONFIG,
) -> str:
    """Keep the proposed meta when it is structurally sound, otherwise write one."""
    if _meta_is_acceptable(proposed_meta, task_context, config):
        return proposed_meta

    service = task_context.primary_service
    where = f" in {task_context.location}" if task_context.location else ""
    years = user_context.experience.years
    experience = f"{years}+ years experience." if years else ""

    templates = {
        SearchIntent.buy: f"{service}{where}. {experience} See our process, pricing, and book your session today.",
        SearchIntent.compare: (
            f"Comparing {service} options{where}? {experience} See what matters, costs, and how to choose."
        ),
        SearchIntent.learn: f"Learn about {service}{where}: what to expect, costs, timing, and how to get started.",
        SearchIntent.trust: (
            f"Meet the team behind {user_context.brand_tone.personality or 'our work'}. "
            f"{experience} See why clients trust us for {service}."
        ),
    }
    meta = collapse_ws(templates[task_context.intent])
    return truncate_with_ellipsis(meta, config.meta_max_length)


def wrap_proposed_headings(title: str, headings: list[str]) -> ApprovedOutline:
    """Proposal headings 1:1; the last one is the call to action."""
    last = len(headings) - 1
    return ApprovedOutline(
        h1=title,
        sections=[OutlineSection(h2=h, intent="action" if i == last else "inform") for i, h in enumerate(headings)],
    )


def run_audit_gate(
    input: AuditGateInput | dict,
    mode: GateMode | str = GateMode.planning,
    *,
    config: Optional[GateConfig] = None,
    run_logger: Optional[RunLogger] = None,
) -> ContentIntelGateResult:
    """Run all five checks and decide approval."""
    inp = AuditGateInput.coerce(input)
    mode = GateMode(mode)
    cfg = config or DEFAULT_GATE_CONFIG
    enforcing = mode == GateMode.pre_publish

    task = inp.task_context
    user = inp.user_context
    proposed = inp.proposed

    if run_logger:
        run_logger.start("audit-gate", {"mode": mode.value, "title": proposed.title})

    warnings: list[str] = []
    blockers: list[str] = []
    suggestions: list[str] = []

    def fail(blocker: str, warning: str) -> None:
        if enforcing:
            blockers.append(blocker)
        else:
            warnings.append(warning)

    def log(stage: str, output: dict, score: int) -> None:
        if run_logger:
            run_logger.end(stage, output, metrics={"score": score})

    # 1. Title
    title = analyze_title(proposed, task, user, config=cfg)
    if not title.is_valid:
        fail("Title failed intelligence check", "Title needs improvement")
    suggestions.extend(title.suggestions)
    approved_title = title.rewritten_title if title.score < cfg.title_rewrite_below else proposed.title
    log("title-intelligence", {"rewritten": approved_title != proposed.title, "issues": title.issues}, title.score)

    # 2. Intent
    intent = validate_intent(proposed, task, config=cfg)
    if not intent.is_valid:
        fail(
            f"Content does not match declared {task.intent.value} intent",
            f"Weak {task.intent.value} intent signals",
        )
    warnings.extend(intent.issues)
    suggestions.extend(intent.suggestions)
    log("intent-validation", {"missing": intent.missing_requirements}, intent.score)

    # 3. AEO coverage
    aeo = check_aeo_coverage(proposed, task, config=cfg)
    if not aeo.is_valid:
        fail(
            f"Insufficient AEO coverage ({len(aeo.covered_questions)}/7 questions)",
            f"AEO coverage below threshold - {len(aeo.missing_questions)} questions missing",
        )
    warnings.extend(aeo.issues)
    suggestions.extend(aeo.suggestions)
    log("aeo-coverage", {"covered": aeo.covered_questions, "missing": aeo.missing_questions}, aeo.score)

    # 4. Credibility
    cred = check_credibility(proposed, task, user, inp.vision_context, config=cfg)
    if not cred.is_valid:
        if enforcing and task.role == PageRole.money:
            blockers.append("Money page requires minimum credibility signals")
        else:
            warnings.append(
                f"Only {len(cred.present_signals)} credibility signals (minimum {cfg.credibility_min_signals})"
            )
    warnings.extend(cred.issues)
    suggestions.extend(cred.suggestions)
    log("credibility", {"present": [s.type for s in cred.present_signals]}, cred.score)

    # 5. Risk: its blockers block in every mode
    risk = scan_for_risks(proposed, task)
    blockers.extend(risk.blockers)
    warnings.extend(risk.issues)
    suggestions.extend(f.suggestion for f in risk.flagged_phrases if f.severity == "warning")
    for claim in risk.compliance.restricted_claims:
        softened = soften_claim(claim)
        if softened != claim:
            suggestions.append(f'Rephrase "{claim}" as "{softened}"')
    log("risk-compliance", {"level": risk.risk_level, "categories": risk.detected_categories}, risk.score)

    # Outline synthesis must follow the AEO verdict; intent alignment follows synthesis.
    if aeo.rewritten_outline is not None:
        outline = aeo.rewritten_outline.model_copy(update={"h1": approved_title})
    else:
        outline = wrap_proposed_headings(approved_title, list(proposed.headings))
    if not aeo.is_valid:
        outline = enhance_outline_for_aeo(outline, task, aeo, config=cfg)

    alignment = validate_outline_intent(outline, task.intent, config=cfg)
    if not alignment.aligned:
        warnings.extend(alignment.issues)

    meta = build_approved_meta_description(proposed.meta_description, task, user, config=cfg)

    scores = AuditScores(
        serp_strength=title.score,
        aeo_coverage=aeo.score,
        credibility=cred.score,
        intent_match=intent.score,
        risk=risk.score,
    )
    overall = compute_overall_score(scores, cfg.weights)
    if enforcing and overall < cfg.min_overall_score:
        blockers.append(f"Overall quality score {overall} is below the pre-publish minimum of {cfg.min_overall_score}")

    blockers = dedupe_exact(blockers)
    result = ContentIntelGateResult(
        approved=not blockers,
        mode=mode,
        rewritten_title=approved_title,
        approved_outline=outline,
        approved_keyphrase=proposed.keyphrase,
        meta_description=meta,
        scores=scores,
        overall_score=overall,
        warnings=dedupe_exact(warnings),
        blockers=blockers,
        suggestions=dedupe_exact(suggestions),
        credibility_injections=cred.injections,
        compliance=risk.compliance,
    )

    if run_logger:
        run_logger.end(
            "audit-gate",
            {"approved": result.approved, "blockers": result.blockers},
            metrics={"overall_score": overall, **scores.model_dump()},
        )
    return result


def would_pass_gate(
    input: AuditGateInput | dict,
    mode: GateMode | str = GateMode.planning,
    *,
    config: Optional[GateConfig] = None,
) -> GateVerdict:
    result = run_audit_gate(input, mode, config=config)
    return GateVerdict(passed=result.approved, reason=result.blockers[0] if result.blockers else None)


def rewrite_title(input: AuditGateInput | dict, *, config: Optional[GateConfig] = None) -> str:
    """Title Intelligence's title only, without running the full gate."""
    inp = AuditGateInput.coerce(input)
    analysis = analyze_title(inp.proposed, inp.task_context, inp.user_context, config=config or DEFAULT_GATE_CONFIG)
    return analysis.rewritten_title


def get_enhanced_outline(input: AuditGateInput | dict, *, config: Optional[GateConfig] = None) -> ApprovedOutline:
    """The AEO-synthesized outline, or the proposal's headings as-is when already compliant."""
    inp = AuditGateInput.coerce(input)
    aeo = check_aeo_coverage(inp.proposed, inp.task_context, config=config or DEFAULT_GATE_CONFIG)
    if aeo.rewritten_outline is not None:
        return aeo.rewritten_outline
    return ApprovedOutline(
        h1=inp.proposed.title,
        sections=[OutlineSection(h2=h, intent="inform") for h in inp.proposed.headings],
    )

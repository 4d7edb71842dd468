from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from app_logging.run_logger import RunLogger
from audit.gate import (
    build_approved_meta_description,
    compute_overall_score,
    get_enhanced_outline,
    rewrite_title,
    run_audit_gate,
    would_pass_gate,
)
from schemas.audit import AuditGateInput, AuditScores, Experience, TaskContext, UserContext
from schemas.common import GateMode
from schemas.gate_config import GateConfig, ScoreWeights


COMPLIANT_META = (
    "Award-winning wedding photography in Bristol for couples. "
    "See how it works, what it costs and book your date with our friendly team."
)


def _input(title: str, headings: list[str], meta: str = "", **task_overrides) -> AuditGateInput:
    task = {
        "role": "money",
        "intent": "buy",
        "primary_service": "wedding photography",
        "location": "Bristol",
    }
    task.update(task_overrides)
    return AuditGateInput.model_validate(
        {
            "task_context": task,
            "proposed": {
                "title": title,
                "headings": headings,
                "keyphrase": "wedding photography bristol",
                "meta_description": meta,
            },
        }
    )


def _compliant() -> AuditGateInput:
    return _input(
        "Wedding Photography in Bristol — Pricing, Process, Next Steps",
        ["How It Works", "Pricing", "Book Your Date"],
        COMPLIANT_META,
    )


def _guarantee() -> AuditGateInput:
    return _input(
        "100% Guaranteed Results for Your Case",
        ["Talk to a Lawyer Today"],
        primary_service="legal advice",
        location=None,
    )


def _no_credibility() -> AuditGateInput:
    return _input(
        "Wedding Photography Packages",
        ["Pricing", "Packages", "Book a Date"],
        location=None,
    )


def _thin_outline() -> AuditGateInput:
    return _input(
        "Wedding Photography Guide",
        ["What Is Wedding Photography", "The Process", "Pricing Explained", "Book Your Date"],
    )


ALL_INPUTS = (_compliant, _guarantee, _no_credibility, _thin_outline)


class TestAuditGate(unittest.TestCase):
    def test_compliant_buy_page(self) -> None:
        inp = _compliant()
        self.assertEqual(len(COMPLIANT_META), 132)

        for mode in GateMode:
            result = run_audit_gate(inp, mode)
            self.assertTrue(result.approved, msg=f"{mode}: {result.blockers}")
            self.assertEqual(result.rewritten_title, inp.proposed.title)
            self.assertEqual(result.meta_description, COMPLIANT_META)
            self.assertEqual(result.approved_keyphrase, "wedding photography bristol")

        result = run_audit_gate(inp, GateMode.pre_publish)
        self.assertEqual(
            result.scores.model_dump(),
            {"serp_strength": 95, "aeo_coverage": 57, "credibility": 80, "intent_match": 100, "risk": 0},
        )
        self.assertEqual(result.overall_score, 85)
        self.assertEqual(
            [(s.h2, s.intent) for s in result.approved_outline.sections],
            [("How It Works", "inform"), ("Pricing", "inform"), ("Book Your Date", "action")],
        )

    def test_guarantee_blocks_in_both_modes(self) -> None:
        for mode in GateMode:
            result = run_audit_gate(_guarantee(), mode)
            self.assertFalse(result.approved)
            self.assertTrue(any("guarantee" in b.lower() or "100%" in b for b in result.blockers))
            self.assertEqual(result.compliance.risk_category, "legal")

    def test_money_page_without_credibility(self) -> None:
        blocked = run_audit_gate(_no_credibility(), GateMode.pre_publish)
        self.assertFalse(blocked.approved)
        self.assertIn("Money page requires minimum credibility signals", blocked.blockers)

        advisory = run_audit_gate(_no_credibility(), GateMode.planning)
        self.assertTrue(advisory.approved)
        self.assertIn("Only 0 credibility signals (minimum 2)", advisory.warnings)
        self.assertEqual(
            [i.type for i in advisory.credibility_injections],
            ["process"],
        )

    def test_thin_outline_is_rewritten(self) -> None:
        planning = run_audit_gate(_thin_outline(), GateMode.planning)
        self.assertIn("AEO coverage below threshold - 4 questions missing", planning.warnings)

        rewritten = "wedding photography in Bristol — What to Expect, Costs, Next Steps"
        self.assertEqual(planning.rewritten_title, rewritten)
        self.assertEqual(planning.approved_outline.h1, rewritten)
        self.assertEqual(len(planning.approved_outline.sections), 8)
        self.assertEqual(planning.approved_outline.sections[0].intent, "define")
        self.assertEqual(planning.approved_outline.sections[-1].intent, "action")

        enforcing = run_audit_gate(_thin_outline(), GateMode.pre_publish)
        self.assertIn("Insufficient AEO coverage (3/7 questions)", enforcing.blockers)
        self.assertFalse(enforcing.approved)

    def test_overall_score_minimum_only_applies_pre_publish(self) -> None:
        strict = GateConfig(min_overall_score=90)

        blocked = run_audit_gate(_compliant(), GateMode.pre_publish, config=strict)
        self.assertEqual(
            blocked.blockers,
            ["Overall quality score 85 is below the pre-publish minimum of 90"],
        )

        self.assertTrue(run_audit_gate(_compliant(), GateMode.planning, config=strict).approved)

    def test_custom_weights_keep_overall_score_in_range(self) -> None:
        even = GateConfig(weights=ScoreWeights(
            serp_strength=0.2, aeo_coverage=0.2, credibility=0.2, intent_match=0.2, risk=0.2,
        ))
        result = run_audit_gate(_compliant(), GateMode.pre_publish, config=even)
        self.assertEqual(result.overall_score, 86)
        self.assertTrue(result.approved)

    def test_blocker_invariant(self) -> None:
        for make in ALL_INPUTS:
            for mode in GateMode:
                result = run_audit_gate(make(), mode)
                self.assertEqual(result.approved, not result.blockers)
                if mode == GateMode.pre_publish and result.overall_score < 60:
                    self.assertFalse(result.approved)

    def test_gate_is_deterministic(self) -> None:
        for make in ALL_INPUTS:
            for mode in GateMode:
                self.assertEqual(run_audit_gate(make(), mode).to_dict(), run_audit_gate(make(), mode).to_dict())

    def test_gate_does_not_mutate_input(self) -> None:
        inp = _thin_outline()
        before = inp.model_dump()
        run_audit_gate(inp, GateMode.pre_publish)
        self.assertEqual(inp.model_dump(), before)

    def test_accepts_plain_dict_and_mode_string(self) -> None:
        as_dict = _compliant().model_dump(mode="json")
        result = run_audit_gate(as_dict, "pre-publish")
        self.assertEqual(result.mode, GateMode.pre_publish)
        self.assertTrue(result.approved)

    def test_run_logger_observes_without_changing_result(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            log_path = Path(td) / "runs.jsonl"
            logger = RunLogger(run_id="run-1", subject="test", log_path=log_path)

            logged = run_audit_gate(_compliant(), GateMode.pre_publish, run_logger=logger)
            plain = run_audit_gate(_compliant(), GateMode.pre_publish)
            self.assertEqual(logged.to_dict(), plain.to_dict())

            events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
            self.assertEqual(len(events), 7)
            self.assertEqual((events[0]["stage"], events[0]["event"]), ("audit-gate", "start"))
            self.assertEqual(
                [e["stage"] for e in events[1:6]],
                ["title-intelligence", "intent-validation", "aeo-coverage", "credibility", "risk-compliance"],
            )
            self.assertEqual(events[-1]["metrics"]["overall_score"], 85)


class TestGateHelpers(unittest.TestCase):
    def test_compute_overall_score(self) -> None:
        self.assertEqual(compute_overall_score(AuditScores(
            serp_strength=100, aeo_coverage=100, credibility=100, intent_match=100, risk=0,
        )), 100)
        self.assertEqual(compute_overall_score(AuditScores(
            serp_strength=0, aeo_coverage=0, credibility=0, intent_match=0, risk=100,
        )), 0)
        self.assertEqual(compute_overall_score(AuditScores(
            serp_strength=95, aeo_coverage=57, credibility=80, intent_match=100, risk=0,
        )), 85)

    def test_would_pass_gate(self) -> None:
        verdict = would_pass_gate(_guarantee())
        self.assertFalse(verdict.passed)
        self.assertEqual(verdict.reason, 'Blocked phrase "lawyer" in legal category')

        verdict = would_pass_gate(_compliant(), GateMode.pre_publish)
        self.assertTrue(verdict.passed)
        self.assertIsNone(verdict.reason)

    def test_rewrite_title(self) -> None:
        self.assertEqual(rewrite_title(_guarantee()), "legal advice: Process, Pricing, and What to Expect")
        self.assertEqual(rewrite_title(_compliant()), _compliant().proposed.title)

    def test_get_enhanced_outline(self) -> None:
        compliant = get_enhanced_outline(_compliant())
        self.assertEqual(compliant.h1, _compliant().proposed.title)
        self.assertEqual([s.h2 for s in compliant.sections], ["How It Works", "Pricing", "Book Your Date"])

        thin = get_enhanced_outline(_thin_outline())
        self.assertEqual(thin.h1, "Wedding Photography Guide")
        self.assertEqual(len(thin.sections), 8)

    def test_meta_description_is_generated_when_too_short(self) -> None:
        task = TaskContext(role="money", intent="buy", primary_service="wedding photography", location="Bristol")
        user = UserContext(experience=Experience(years=10))

        meta = build_approved_meta_description("Too short.", task, user)
        self.assertEqual(
            meta,
            "wedding photography in Bristol. 10+ years experience. "
            "See our process, pricing, and book your session today.",
        )
        self.assertLessEqual(len(meta), 160)


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

import unittest

from audit.risk_compliance import (
    LONG_DISCLAIMERS,
    SHORT_DISCLAIMERS,
    find_outcome_claims,
    generate_disclaimers,
    phrase_severity,
    risk_level_for,
    scan_for_risks,
    soften_claim,
)
from schemas.audit import ProposedContent, TaskContext
from schemas.common import PageRole, SearchIntent


TASK = TaskContext(role=PageRole.money, intent=SearchIntent.buy, primary_service="legal advice")


class TestRiskCompliance(unittest.TestCase):
    def test_guarantee_language_blocks(self) -> None:
        proposed = ProposedContent(
            title="100% Guaranteed Results for Your Case",
            headings=["Talk to a Lawyer Today"],
        )
        out = scan_for_risks(proposed, TASK)

        self.assertEqual(out.detected_categories, ["legal", "finance", "guarantees"])
        self.assertEqual(out.risk_level, "critical")
        self.assertEqual(out.score, 100)
        self.assertEqual(
            out.blockers,
            [
                'Blocked phrase "lawyer" in legal category',
                'Blocked phrase "guaranteed" in finance category',
                'Blocked phrase "guarantee" in guarantees category',
                'Blocked phrase "100%" in guarantees category',
                'Absolute claim "guaranteed" not allowed',
                'Absolute claim "100% guarantee" not allowed',
                'Outcome claim "guaranteed results" needs substantiation',
            ],
        )
        self.assertEqual(out.compliance.restricted_claims, ["guaranteed", "100% guarantee", "guaranteed results"])
        self.assertEqual(out.compliance.disclaimers, [SHORT_DISCLAIMERS["legal"], SHORT_DISCLAIMERS["finance"]])
        self.assertEqual(out.compliance.risk_category, "legal")
        self.assertTrue(out.compliance.requires_disclaimer)

    def test_children_keyword_is_a_warning(self) -> None:
        proposed = ProposedContent(title="Portraits for Every Toddler", headings=["Plan Your Session"])
        out = scan_for_risks(proposed, TASK)

        self.assertEqual(out.blockers, [])
        self.assertEqual(out.score, 20)
        self.assertEqual(out.risk_level, "low")
        self.assertIn('Warning: "toddler" may need careful handling', out.issues)
        self.assertIn("Content involves children - privacy considerations apply", out.issues)
        self.assertEqual(out.compliance.disclaimers, [SHORT_DISCLAIMERS["children"]])
        self.assertEqual(out.compliance.risk_category, "children")

    def test_unsupervised_minors_block(self) -> None:
        proposed = ProposedContent(title="Unsupervised Play Sessions for Kids")
        out = scan_for_risks(proposed, TASK)

        self.assertEqual(out.blockers, ["Content implies unsupervised access to minors"])
        self.assertEqual(out.risk_level, "critical")

    def test_money_back_is_restricted_but_not_blocking(self) -> None:
        proposed = ProposedContent(title="Money-back offer on portraits")
        out = scan_for_risks(proposed, TASK)

        self.assertEqual(out.blockers, [])
        self.assertEqual(out.detected_categories, ["guarantees"])
        self.assertEqual(out.compliance.restricted_claims, ["money-back"])
        self.assertEqual(out.compliance.risk_category, "general")
        self.assertFalse(out.compliance.requires_disclaimer)
        self.assertEqual(out.risk_level, "low")

    def test_clean_proposal_has_no_risk(self) -> None:
        proposed = ProposedContent(title="Spring Portraits in the Park", headings=["Plan Your Session"])
        out = scan_for_risks(proposed, TASK)

        self.assertEqual(out.score, 0)
        self.assertEqual(out.risk_level, "none")
        self.assertIsNone(out.compliance.risk_category)

    def test_outcome_claims(self) -> None:
        claims = find_outcome_claims("the #1 studio and leading provider")
        self.assertEqual([c.phrase for c in claims], ["#1 studio", "leading provider"])
        self.assertFalse(any(c.blocking for c in claims))

    def test_phrase_severity(self) -> None:
        self.assertEqual(phrase_severity("promise", "guarantees"), "warning")
        self.assertEqual(phrase_severity("always", "guarantees"), "block")
        self.assertEqual(phrase_severity("court", "legal"), "block")

    def test_risk_level_for(self) -> None:
        self.assertEqual(risk_level_for(0, 0), "none")
        self.assertEqual(risk_level_for(10, 0), "low")
        self.assertEqual(risk_level_for(40, 0), "medium")
        self.assertEqual(risk_level_for(70, 0), "high")
        self.assertEqual(risk_level_for(5, 1), "critical")

    def test_generate_disclaimers_in_fixed_order(self) -> None:
        self.assertEqual(
            generate_disclaimers(["children", "legal", "guarantees"]),
            [LONG_DISCLAIMERS["legal"], LONG_DISCLAIMERS["children"]],
        )
        self.assertEqual(generate_disclaimers([]), [])

    def test_soften_claim(self) -> None:
        self.assertEqual(soften_claim("100% satisfaction, always"), "high degree of satisfaction, consistently")
        self.assertEqual(soften_claim("The #1 studio"), "The top-rated studio")
        self.assertEqual(soften_claim("money-back"), "money-back")
        self.assertEqual(soften_claim("will always win"), "strives to win")


if __name__ == "__main__":
    unittest.main()

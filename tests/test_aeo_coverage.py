from __future__ import annotations

import unittest

from audit.aeo_coverage import (
    check_aeo_coverage,
    detect_heading_intent,
    enhance_outline_for_aeo,
    generate_section_for_question,
    is_question_covered,
)
from audit.gate import wrap_proposed_headings
from schemas.audit import ProposedContent, TaskContext
from schemas.common import PageRole, SearchIntent


TASK = TaskContext(
    role=PageRole.money,
    intent=SearchIntent.buy,
    primary_service="wedding photography",
    location="Bristol",
)

# what, how, next
THREE_COVERED = ProposedContent(
    title="Wedding Photography Guide",
    headings=["What Is Wedding Photography", "The Process", "Pricing Explained", "Book Your Date"],
)

# what, how, cost, next
FOUR_COVERED = ProposedContent(
    title="Wedding Photography Guide",
    headings=["What Is Wedding Photography", "The Process", "Costs Explained", "Book Your Date"],
)


class TestAEOCoverage(unittest.TestCase):
    def test_four_covered_questions_is_valid(self) -> None:
        out = check_aeo_coverage(FOUR_COVERED, TASK)
        self.assertTrue(out.is_valid)
        self.assertEqual(out.covered_questions, ["what", "how", "cost", "next"])
        self.assertEqual(out.score, 57)
        self.assertIsNone(out.rewritten_outline)

    def test_three_covered_questions_is_invalid(self) -> None:
        out = check_aeo_coverage(THREE_COVERED, TASK)
        self.assertFalse(out.is_valid)
        self.assertEqual(out.covered_questions, ["what", "how", "next"])
        self.assertEqual(out.missing_questions, ["who", "when", "cost", "mistakes"])
        self.assertEqual(out.required_missing, ["who", "when"])
        self.assertEqual(out.score, 43)
        self.assertEqual(out.issues, ["Missing required AEO questions: Who is it for?, When do I need it?"])
        self.assertEqual(len(out.suggestions), 4)

    def test_rewritten_outline_is_in_narrative_order(self) -> None:
        out = check_aeo_coverage(THREE_COVERED, TASK)
        outline = out.rewritten_outline
        self.assertIsNotNone(outline)
        assert outline is not None

        self.assertEqual(outline.h1, "Wedding Photography Guide")
        self.assertEqual(
            [s.h2 for s in outline.sections],
            [
                "What Is Wedding Photography",
                "Who Needs wedding photography?",
                "When to Get wedding photography",
                "The Process",
                "wedding photography Pricing & Packages",
                "Common wedding photography Mistakes to Avoid",
                "Pricing Explained",
                "Book Your Date",
            ],
        )
        self.assertEqual(
            [s.intent for s in outline.sections],
            ["define", "audience", "timing", "process", "investment", "warnings", "inform", "action"],
        )

    def test_proposal_is_not_mutated(self) -> None:
        before = THREE_COVERED.model_dump()
        check_aeo_coverage(THREE_COVERED, TASK)
        self.assertEqual(THREE_COVERED.model_dump(), before)

    def test_enhance_returns_valid_outline_unchanged(self) -> None:
        outline = wrap_proposed_headings(FOUR_COVERED.title, list(FOUR_COVERED.headings))
        once = enhance_outline_for_aeo(outline, TASK)
        twice = enhance_outline_for_aeo(once, TASK)
        self.assertIs(once, outline)
        self.assertIs(twice, outline)

    def test_enhance_adds_required_sections_once(self) -> None:
        outline = wrap_proposed_headings(THREE_COVERED.title, list(THREE_COVERED.headings))
        enhanced = enhance_outline_for_aeo(outline, TASK)

        h2s = [s.h2 for s in enhanced.sections]
        self.assertIn("Who Needs wedding photography?", h2s)
        self.assertIn("When to Get wedding photography", h2s)
        self.assertEqual(len(h2s), 6)

        # Now valid, so a second pass leaves it alone.
        self.assertIs(enhance_outline_for_aeo(enhanced, TASK), enhanced)

    def test_enhance_does_not_duplicate_existing_sections(self) -> None:
        coverage = check_aeo_coverage(THREE_COVERED, TASK)
        assert coverage.rewritten_outline is not None

        enhanced = enhance_outline_for_aeo(coverage.rewritten_outline, TASK, coverage)
        self.assertEqual(
            [s.h2 for s in enhanced.sections],
            [s.h2 for s in coverage.rewritten_outline.sections],
        )

    def test_detect_heading_intent(self) -> None:
        self.assertEqual(detect_heading_intent("Who Is This For"), "audience")
        self.assertEqual(detect_heading_intent("Signs You Need Help"), "timing")
        self.assertEqual(detect_heading_intent("Avoid These Mistakes"), "warnings")
        self.assertEqual(detect_heading_intent("Next Steps"), "action")
        self.assertEqual(detect_heading_intent("Random Heading"), "inform")

    def test_question_detectors(self) -> None:
        self.assertTrue(is_question_covered("when", "", ["Signs It Is Time"]))
        self.assertTrue(is_question_covered("what", "", ["What You Get"]))
        self.assertFalse(is_question_covered("cost", "pricing explained", []))
        self.assertFalse(is_question_covered("unknown", "anything", []))

    def test_next_section_uses_location(self) -> None:
        section = generate_section_for_question("next", TASK)
        assert section is not None
        self.assertEqual(section.h2, "Book wedding photography in Bristol")
        self.assertEqual(section.intent, "action")

        no_location = TASK.model_copy(update={"location": None})
        section = generate_section_for_question("next", no_location)
        assert section is not None
        self.assertEqual(section.h2, "Get Started with wedding photography")


if __name__ == "__main__":
    unittest.main()

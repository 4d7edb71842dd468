from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from app_logging.run_logger import RunLogger


def _read(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestRunLogger(unittest.TestCase):
    def test_start_end_error_lines(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "logs" / "runs.jsonl"
            logger = RunLogger(run_id="abc", subject="Wedding Photography", log_path=path)

            logger.start("audit-gate", {"mode": "planning"})
            logger.end("audit-gate", {"approved": True}, metrics={"overall_score": 81})
            logger.end("credibility", {"present": []})
            logger.error("audit-gate", {"mode": "planning"}, ValueError("bad input"))

            events = _read(path)
            self.assertEqual([e["event"] for e in events], ["start", "end", "end", "error"])
            self.assertTrue(all(e["run_id"] == "abc" and e["subject"] == "Wedding Photography" for e in events))

            self.assertEqual(events[1]["metrics"], {"overall_score": 81})
            self.assertIn("elapsed_ms", events[1])

            # No matching start, so no timing.
            self.assertEqual(events[2]["metrics"], {})
            self.assertNotIn("elapsed_ms", events[2])

            self.assertEqual(events[3]["status"], "error")
            self.assertEqual(events[3]["error"], {"type": "ValueError", "message": "bad input"})

    def test_appends_across_instances(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "runs.jsonl"
            RunLogger(run_id="one", subject="a", log_path=path).start("audit-gate", {})
            RunLogger(run_id="two", subject="b", log_path=path).start("audit-gate", {})
            self.assertEqual([e["run_id"] for e in _read(path)], ["one", "two"])


if __name__ == "__main__":
    unittest.main()

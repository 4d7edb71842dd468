from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from lib.gate_config_loader import GATE_CONFIG_ENV_VAR, load_gate_config, resolve_gate_config_path
from schemas.gate_config import GateConfig, ScoreWeights


class TestGateConfigLoader(unittest.TestCase):
    def test_shipped_config_matches_defaults(self) -> None:
        repo = Path(__file__).resolve().parents[1]
        cfg = load_gate_config(repo / "config" / "audit_gate.yaml")
        self.assertEqual(cfg, GateConfig())

    def test_partial_override(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "gate.yaml"
            p.write_text("min_overall_score: 75\naeo_min_covered: 5\n", encoding="utf-8")

            cfg = load_gate_config(p)
            self.assertEqual(cfg.min_overall_score, 75)
            self.assertEqual(cfg.aeo_min_covered, 5)
            self.assertEqual(cfg.credibility_min_signals, 2)

    def test_weights_must_sum_to_one(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "gate.yaml"
            p.write_text("weights:\n  risk: 0.5\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_gate_config(p)

    def test_malformed_yaml_raises_value_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "gate.yaml"
            p.write_text("weights: {serp_strength: [\n", encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "Malformed YAML"):
                load_gate_config(p)

    def test_unknown_keys_are_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "gate.yaml"
            p.write_text("min_score: 60\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_gate_config(p)

    def test_explicit_missing_path_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_gate_config(Path(td) / "missing.yaml")

    def test_env_var_is_used_when_no_path_given(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "gate.yaml"
            p.write_text("title_rewrite_below: 80\n", encoding="utf-8")

            with mock.patch.dict(os.environ, {GATE_CONFIG_ENV_VAR: str(p)}):
                path, explicit = resolve_gate_config_path()
                self.assertEqual(path, p)
                self.assertTrue(explicit)
                self.assertEqual(load_gate_config().title_rewrite_below, 80)


class TestGateConfigModel(unittest.TestCase):
    def test_weights_over_one_are_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            ScoreWeights(serp_strength=1, aeo_coverage=1, credibility=1, intent_match=1, risk=1)

    def test_partial_weights_are_rejected_in_code(self) -> None:
        with self.assertRaises(ValidationError):
            GateConfig(weights={"risk": 0.5})

    def test_default_and_even_weights_are_accepted(self) -> None:
        self.assertAlmostEqual(ScoreWeights().total(), 1.0)
        even = ScoreWeights(serp_strength=0.2, aeo_coverage=0.2, credibility=0.2, intent_match=0.2, risk=0.2)
        self.assertAlmostEqual(even.total(), 1.0)


if __name__ == "__main__":
    unittest.main()

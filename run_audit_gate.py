from __future__ import annotations

import argparse
import json
import uuid
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from agents.audit_gate_agent import AuditGateAgent
from app_logging.run_logger import RunLogger
from lib.gate_config_loader import load_gate_config
from schemas.audit import AuditGateInput
from schemas.common import GateMode


def load_gate_input(path: Path) -> AuditGateInput:
    """Read a YAML or JSON gate input file (JSON is valid YAML)."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Gate input must be a mapping, got {type(raw).__name__}")
    return AuditGateInput.model_validate(raw)


def _print_list(label: str, items: List[str]) -> None:
    if not items:
        return
    print(f"{label}:")
    for it in items:
        print(f"- {it}")


def _print_summary(result: dict[str, Any]) -> None:
    status = "APPROVED" if result["approved"] else "BLOCKED"
    print(f"[{result['mode']}] {status} (overall score {result['overall_score']})")
    print(f"Title: {result['rewritten_title']}")
    print(f"Meta: {result['meta_description']}")
    scores = result["scores"]
    print("Scores: " + ", ".join(f"{k}={v}" for k, v in scores.items()))
    print("Outline:")
    for sec in result["approved_outline"]["sections"]:
        print(f"  [{sec['intent']}] {sec['h2']}")
    _print_list("Blockers", result.get("blockers", []))
    _print_list("Warnings", result.get("warnings", []))
    _print_list("Suggestions", result.get("suggestions", []))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the content-quality audit gate on a proposed article")
    parser.add_argument("input", type=str, help="YAML or JSON file with task_context, user_context and proposed")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GateMode],
        default=GateMode.planning.value,
        help="planning (advisory) or pre-publish (enforcing)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Gate constants YAML (defaults to $AUDIT_GATE_CONFIG, then config/audit_gate.yaml)",
    )
    parser.add_argument("--log-path", type=str, default=None, help="Append JSONL run events to this file")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"[error] Input file not found: {input_path}")
        return 2

    try:
        config = load_gate_config(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"[error] {e}")
        return 2

    try:
        gate_input = load_gate_input(input_path)
    except (ValidationError, ValueError) as e:
        print(f"[error] Invalid gate input {input_path}: {e}")
        return 2

    run_logger: Optional[RunLogger] = None
    if args.log_path:
        run_logger = RunLogger(
            run_id=uuid.uuid4().hex[:12],
            subject=gate_input.proposed.title,
            log_path=Path(args.log_path),
        )

    agent = AuditGateAgent(args.mode, config=config, run_logger=run_logger)
    result = agent.run(gate_input)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        _print_summary(result)

    return 0 if result["approved"] else 1


if __name__ == "__main__":
    raise SystemExit(main())

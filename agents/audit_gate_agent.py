"""Audit gate as a pipeline agent.

Wraps audit.gate.run_audit_gate behind the dict-in / dict-out agent contract
so the content pipeline can call it like any other step.
"""

from __future__ import annotations

from typing import Any, Optional

from agents.base import BaseAgent
from app_logging.run_logger import RunLogger
from audit.gate import run_audit_gate
from schemas.audit import AuditGateInput
from schemas.common import GateMode
from schemas.gate_config import DEFAULT_GATE_CONFIG, GateConfig


class AuditGateAgent(BaseAgent):
    """Approve or block a proposed article skeleton."""

    name = "audit-gate"
    input_model = AuditGateInput

    def __init__(
        self,
        mode: GateMode | str = GateMode.planning,
        *,
        config: Optional[GateConfig] = None,
        run_logger: Optional[RunLogger] = None,
    ) -> None:
        self.mode = GateMode(mode)
        self.config = config or DEFAULT_GATE_CONFIG
        self.run_logger = run_logger

    def run(self, input: AuditGateInput | dict) -> dict[str, Any]:
        inp: AuditGateInput = self.parse_input(input)
        try:
            result = run_audit_gate(inp, self.mode, config=self.config, run_logger=self.run_logger)
        except Exception as e:
            if self.run_logger:
                self.run_logger.error(self.name, inp.to_dict(), e)
            raise
        return result.to_dict()

from __future__ import annotations

from typing import Any

from agents.base import BaseAgent
from audit.page_audit import generate_fix_items, run_page_audit
from schemas.page_audit import PageAuditContext


class PageAuditAgent(BaseAgent):
    """Audit one crawled page and attach fix items for its failed checks."""

    name = "page-audit"
    input_model = PageAuditContext

    def run(self, input: PageAuditContext | dict) -> dict[str, Any]:
        ctx: PageAuditContext = self.parse_input(input)
        result = run_page_audit(ctx)
        out = result.to_dict()
        out["fix_items"] = [f.to_dict() for f in generate_fix_items(result.checks)]
        return out

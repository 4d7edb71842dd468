from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from schemas.base import SchemaBase


class AuditSeverity(str, Enum):
    critical = "critical"
    warning = "warning"
    info = "info"


class AuditCategory(str, Enum):
    seo = "seo"
    content = "content"
    conversion = "conversion"
    technical = "technical"
    aeo = "aeo"
    trust = "trust"


class AuditCheck(SchemaBase):
    id: str
    category: AuditCategory
    name: str
    passed: bool
    severity: AuditSeverity
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AuditPageData(SchemaBase):
    """Crawled facts about one page. Only the fields the checks read."""

    id: str
    url: str
    status_code: int
    title: Optional[str] = None
    h1: Optional[str] = None
    meta_description: Optional[str] = None
    canonical: Optional[str] = None
    word_count: int = Field(0, ge=0)
    text_hash: Optional[str] = None
    role: Optional[str] = None


class SiblingPage(SchemaBase):
    id: str
    url: str
    title: Optional[str] = None
    h1: Optional[str] = None
    text_hash: Optional[str] = None


class PageAuditContext(SchemaBase):
    page: AuditPageData
    all_pages: List[SiblingPage] = Field(default_factory=list)
    internal_links_in: int = Field(0, ge=0)
    internal_links_out: int = Field(0, ge=0)


class PageAuditResult(SchemaBase):
    checks: List[AuditCheck]
    health_score: int
    technical_score: int
    content_score: int
    trust_score: int
    linking_score: int


EffortEstimate = Literal["low", "medium", "high"]


class FixItem(SchemaBase):
    severity: AuditSeverity
    category: AuditCategory
    title: str
    description: str
    why_it_matters: str
    fix_actions: List[str]
    acceptance_criteria: List[str]
    effort_estimate: EffortEstimate

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import Field

from schemas.base import FrozenSchema, SchemaBase
from schemas.common import (
    CredibilitySignalType,
    EvidenceStrength,
    GateMode,
    PageRole,
    RiskCategory,
    SearchIntent,
)


# ---------------------------------------------------------------------------
# Gate input
# ---------------------------------------------------------------------------


class TaskContext(FrozenSchema):
    """
    What the page is for.

    Created by the caller before each gate invocation and never mutated.
    """

    role: PageRole = Field(..., description="Declared page role")
    intent: SearchIntent = Field(..., description="Declared search intent")
    primary_service: str = Field(..., description="Primary service or topic, e.g. 'wedding photography'")
    location: Optional[str] = Field(None, description="Service location for local pages")
    supports_page: Optional[str] = Field(None, description="Path of the money page this content supports")


class SitePage(FrozenSchema):
    path: str
    title: str
    role: PageRole


class SiteContext(FrozenSchema):
    """
    Site-level facts. Accepted for forward compatibility; no check reads it.
    """

    sitemap: List[str] = Field(default_factory=list)
    existing_pages: List[SitePage] = Field(default_factory=list)
    internal_link_graph: Dict[str, List[str]] = Field(default_factory=dict)
    competitors: List[str] = Field(default_factory=list)


class BrandTone(FrozenSchema):
    personality: str = ""
    formality: Literal["casual", "professional", "formal"] = "professional"
    confidence: Literal["humble", "confident", "authoritative"] = "confident"
    local_flavour: Optional[str] = None


class Review(FrozenSchema):
    theme: str
    snippet: str


class Experience(FrozenSchema):
    years: Optional[int] = Field(None, ge=0)
    volume: Optional[str] = Field(None, description="Free-text volume, e.g. '500 weddings'")
    specialties: List[str] = Field(default_factory=list)


class UserContext(FrozenSchema):
    """
    Business facts used for credibility injections.

    Supplied once per business and reused across evaluations.
    """

    brand_tone: BrandTone = Field(default_factory=BrandTone)
    usps: List[str] = Field(default_factory=list, description="Unique selling points")
    reviews: List[Review] = Field(default_factory=list)
    experience: Experience = Field(default_factory=Experience)
    credentials: List[str] = Field(default_factory=list)
    beads: List[str] = Field(default_factory=list, description="Reusable brand fact snippets")
    local_signals: List[str] = Field(default_factory=list)


class HeroImage(FrozenSchema):
    image_id: str
    description: str = ""
    rationale: str = ""
    suggested_alt: str = ""


class InlineImage(FrozenSchema):
    image_id: str
    description: str = ""
    placement_hint: str = ""
    suggested_alt: str = ""


class VisionEvidencePack(FrozenSchema):
    """Summary of externally analysed image evidence."""

    hero_image: Optional[HeroImage] = None
    inline_images: List[InlineImage] = Field(default_factory=list)
    evidence_strength: EvidenceStrength = "none"


class ProposedContent(FrozenSchema):
    """The candidate artifact under audit. Rewrites never touch it."""

    title: str
    headings: List[str] = Field(default_factory=list)
    keyphrase: str = ""
    meta_description: str = ""


class AuditGateInput(SchemaBase):
    task_context: TaskContext
    site_context: SiteContext = Field(default_factory=SiteContext)
    user_context: UserContext = Field(default_factory=UserContext)
    vision_context: Optional[VisionEvidencePack] = None
    proposed: ProposedContent


# ---------------------------------------------------------------------------
# Gate output
# ---------------------------------------------------------------------------


SectionIntent = Literal[
    "define",
    "audience",
    "timing",
    "process",
    "investment",
    "warnings",
    "inform",
    "action",
]


class OutlineSection(SchemaBase):
    h2: str
    intent: SectionIntent = "inform"
    h3s: Optional[List[str]] = None


class ApprovedOutline(SchemaBase):
    h1: str
    sections: List[OutlineSection] = Field(default_factory=list)


class AuditScores(SchemaBase):
    """Five independent 0-100 scores. Higher risk is worse."""

    serp_strength: int = Field(..., ge=0, le=100)
    aeo_coverage: int = Field(..., ge=0, le=100)
    credibility: int = Field(..., ge=0, le=100)
    intent_match: int = Field(..., ge=0, le=100)
    risk: int = Field(..., ge=0, le=100)


class CredibilityInjection(SchemaBase):
    """Suggested trust snippet. Surfaced as guidance, never inserted."""

    type: CredibilitySignalType
    content: str
    placement_hint: str


class ComplianceResult(SchemaBase):
    requires_disclaimer: bool = False
    disclaimers: List[str] = Field(default_factory=list)
    restricted_claims: List[str] = Field(default_factory=list)
    risk_category: Optional[RiskCategory] = None


class ContentIntelGateResult(SchemaBase):
    approved: bool
    mode: GateMode
    rewritten_title: str = Field(..., description="Rewritten title, or the proposed title when it was good enough")
    approved_outline: ApprovedOutline
    approved_keyphrase: str
    meta_description: str
    scores: AuditScores
    overall_score: int = Field(..., ge=0, le=100, description="Weighted blend of the five scores")
    warnings: List[str] = Field(default_factory=list)
    blockers: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    credibility_injections: List[CredibilityInjection] = Field(default_factory=list)
    compliance: ComplianceResult = Field(default_factory=ComplianceResult)


class GateVerdict(SchemaBase):
    passed: bool
    reason: Optional[str] = Field(None, description="First blocker when the gate did not pass")

from pydantic import Field, model_validator

from schemas.base import SchemaBase


class ScoreWeights(SchemaBase):
    """
    Weights for the overall score. Risk is inverted (100 - risk) before blending.
    """

    serp_strength: float = Field(0.25, ge=0, le=1)
    aeo_coverage: float = Field(0.20, ge=0, le=1)
    credibility: float = Field(0.25, ge=0, le=1)
    intent_match: float = Field(0.20, ge=0, le=1)
    risk: float = Field(0.10, ge=0, le=1)

    def total(self) -> float:
        return self.serp_strength + self.aeo_coverage + self.credibility + self.intent_match + self.risk

    @model_validator(mode="after")
    def _check_total(self) -> "ScoreWeights":
        total = self.total()
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Score weights must sum to 1.0, got {total:.4f}")
        return self


class GateConfig(SchemaBase):
    """
    Product-tuned constants for the audit gate.

    The defaults are the values the gate has always shipped with; override them
    from config/audit_gate.yaml rather than editing code.
    """

    weights: ScoreWeights = Field(default_factory=ScoreWeights)

    min_overall_score: int = Field(60, ge=0, le=100, description="Pre-publish approval minimum")

    title_rewrite_below: int = Field(70, ge=0, le=100, description="Rewrite titles scoring below this")
    title_valid_at: int = Field(60, ge=0, le=100)

    intent_valid_at: int = Field(50, ge=0, le=100)
    outline_alignment_min_points: int = Field(2, ge=0, le=4)

    aeo_min_covered: int = Field(4, ge=0, le=7, description="Covered AEO questions needed, of 7")
    credibility_min_signals: int = Field(2, ge=0, le=5, description="Present signals needed, of 5")

    meta_min_length: int = Field(120, ge=0)
    meta_max_length: int = Field(160, ge=1)

    @model_validator(mode="after")
    def _check_ranges(self) -> "GateConfig":
        if self.meta_min_length > self.meta_max_length:
            raise ValueError(
                f"meta_min_length ({self.meta_min_length}) exceeds meta_max_length ({self.meta_max_length})"
            )
        return self


DEFAULT_GATE_CONFIG = GateConfig()

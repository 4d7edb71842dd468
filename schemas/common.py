from enum import Enum
from typing import Literal


class PageRole(str, Enum):
    money = "money"
    trust = "trust"
    support = "support"
    authority = "authority"


class SearchIntent(str, Enum):
    buy = "buy"
    compare = "compare"
    learn = "learn"
    trust = "trust"


class GateMode(str, Enum):
    """Planning is advisory; pre-publish enforces the overall score."""

    planning = "planning"
    pre_publish = "pre-publish"


SignalStrength = Literal["strong", "moderate", "weak"]
EvidenceStrength = Literal["strong", "moderate", "weak", "none"]
CredibilitySignalType = Literal["experience", "proof", "local", "process", "visual"]
RiskCategory = Literal["legal", "medical", "finance", "children", "general"]

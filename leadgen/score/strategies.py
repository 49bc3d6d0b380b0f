"""Named scoring strategies behind a common interface."""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from leadgen.entity.records import FirmographicRecord, ManualLeadInput
from leadgen.score.manual import score_manual_lead
from leadgen.score.scorer import LeadScore, compute_lead_score


class ScoringStrategy(ABC):
    """Turns one lead input into a LeadScore."""

    name: str = ""

    def __init__(self, as_of: Optional[date] = None):
        self.as_of = as_of

    @abstractmethod
    def score(self, record: Any) -> LeadScore:
        """Score a single lead input."""


class FirmographicScorer(ScoringStrategy):
    """Rank, size, age, industry and operating-status rules used by the lead list."""

    name = "firmographic"

    def score(self, record: FirmographicRecord) -> LeadScore:
        return compute_lead_score(record, self.as_of)


class ManualEntryScorer(ScoringStrategy):
    """Industry, size, keyword, engagement and funding rules used by the add-lead form."""

    name = "manual_entry"

    def score(self, record: ManualLeadInput) -> LeadScore:
        return score_manual_lead(record, self.as_of).as_lead_score()

    def breakdown(self, record: ManualLeadInput):
        """Full component breakdown for display."""
        return score_manual_lead(record, self.as_of)


STRATEGIES = {
    FirmographicScorer.name: FirmographicScorer,
    ManualEntryScorer.name: ManualEntryScorer,
}


def get_strategy(name: str, as_of: Optional[date] = None) -> ScoringStrategy:
    """
    Look up a scoring strategy by name.

    Raises:
        ValueError: If the name is not registered
    """
    try:
        return STRATEGIES[name](as_of=as_of)
    except KeyError:
        raise ValueError(f"Unknown scoring strategy: {name}")

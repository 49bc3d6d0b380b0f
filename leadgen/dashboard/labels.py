"""Display labels for score statuses."""
from typing import Dict, Union

from leadgen.score.scorer import LeadStatus

# Lead list badges. The cold -> contacted mapping mirrors the list view as it
# ships; it is a label only and says nothing about outreach history.
LEAD_LIST_LABELS: Dict[LeadStatus, str] = {
    LeadStatus.HOT: "qualified",
    LeadStatus.WARM: "pending",
    LeadStatus.COLD: "contacted",
}

TIER_LABELS: Dict[LeadStatus, str] = {status: status.value for status in LeadStatus}

VOCABULARIES: Dict[str, Dict[LeadStatus, str]] = {
    "lead_list": LEAD_LIST_LABELS,
    "tier": TIER_LABELS,
}


def status_label(status: Union[LeadStatus, str], vocabulary: str = "tier") -> str:
    """
    Label for a score status in one of the display vocabularies.

    Args:
        status: LeadStatus or its value ("hot", "warm", "cold")
        vocabulary: "tier" (hot/warm/cold) or "lead_list" (qualified/pending/contacted)

    Raises:
        ValueError: If the status or vocabulary is unknown
    """
    if vocabulary not in VOCABULARIES:
        raise ValueError(f"Unknown label vocabulary: {vocabulary}")
    return VOCABULARIES[vocabulary][LeadStatus(status)]

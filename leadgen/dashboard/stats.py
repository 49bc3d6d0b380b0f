"""Dashboard summary counts."""
import logging
from typing import Dict

from leadgen.store import count_company_data_by_status

logger = logging.getLogger(__name__)


def company_stats(db_path: str) -> Dict[str, int]:
    """
    Summarize the company-data cache by review status.

    Pending is everything that is neither qualified nor rejected.

    Returns:
        Dict with total, qualified, rejected and pending counts
    """
    counts = count_company_data_by_status(db_path)
    total = sum(counts.values())
    qualified = counts.get("qualified", 0)
    rejected = counts.get("rejected", 0)

    stats = {
        "total": total,
        "qualified": qualified,
        "rejected": rejected,
        "pending": total - qualified - rejected,
    }
    logger.debug(f"Company stats: {stats}")
    return stats

"""Lead list rows, search and pagination."""
import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from leadgen.config import settings
from leadgen.dashboard.labels import status_label
from leadgen.entity.records import record_from_company
from leadgen.score.scorer import compute_lead_score
from leadgen.utils.parsing import as_text

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of lead rows."""
    items: List[Dict]
    page: int
    per_page: int
    total_items: int
    total_pages: int
    page_numbers: List[int] = field(default_factory=list)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def build_lead_row(
    company: Dict,
    as_of: Optional[date] = None,
    default_rank_metric: Optional[int] = None,
    default_industry: Optional[str] = None,
    vocabulary: str = "lead_list"
) -> Dict:
    """
    Score a company row and shape it for the lead list.

    Args:
        company: Company row (id, name, industries, founded_date,
            num_employees, operating_status, cb_rank, contact_email, about)
        as_of: Reference date for company age
        default_rank_metric: Rank used when the row has none
        default_industry: Industry used when the row has none
        vocabulary: Status label vocabulary

    Returns:
        Lead row dict
    """
    record = record_from_company(company, default_rank_metric, default_industry)
    lead_score = compute_lead_score(record, as_of)

    email = as_text(company.get("contact_email"))
    email = email.strip() if email and email.strip() else "-"

    return {
        "id": str(company.get("id")),
        "name": as_text(company.get("name")) or "",
        "email": email,
        "industry": as_text(record.industries) or "",
        "company_size": as_text(company.get("num_employees")) or "",
        "founded": as_text(company.get("founded_date")) or "",
        "profile_summary": as_text(company.get("about")) or "",
        "score": int(round(lead_score.total_score)),
        "status": status_label(lead_score.status, vocabulary),
        "score_status": lead_score.status.value,
        "conversion_probability": lead_score.conversion_probability,
    }


def build_lead_rows(
    df: pd.DataFrame,
    as_of: Optional[date] = None,
    vocabulary: str = "lead_list"
) -> List[Dict]:
    """
    Build lead rows for every company in a DataFrame.

    List defaults for missing rank/industry come from settings.
    """
    rows = [
        build_lead_row(
            company,
            as_of=as_of,
            default_rank_metric=settings.list_default_rank_metric,
            default_industry=settings.list_default_industry,
            vocabulary=vocabulary,
        )
        for company in df.to_dict("records")
    ]
    logger.debug(f"Built {len(rows)} lead rows")
    return rows


def filter_leads(rows: List[Dict], query: Optional[str]) -> List[Dict]:
    """Rows whose name or email contains the query (case-insensitive)."""
    if not query:
        return list(rows)
    needle = query.lower()
    return [
        row for row in rows
        if needle in (row.get("name") or "").lower() or needle in (row.get("email") or "").lower()
    ]


def paginate(
    rows: List[Dict],
    page: int = 1,
    per_page: Optional[int] = None,
    window: Optional[int] = None
) -> Page:
    """
    Slice rows into a page.

    Out-of-range page numbers are clamped. page_numbers lists the pages
    within +/- window of the current page.

    Args:
        rows: All (filtered) rows
        page: 1-based page number
        per_page: Rows per page (uses settings if not provided)
        window: Page-number window (uses settings if not provided)
    """
    per_page = per_page or settings.leads_per_page
    window = settings.page_window if window is None else window

    total_pages = math.ceil(len(rows) / per_page)
    page = max(1, min(page, total_pages)) if total_pages else 1

    start = (page - 1) * per_page
    start_page = max(1, page - window)
    end_page = min(total_pages, page + window)

    return Page(
        items=rows[start:start + per_page],
        page=page,
        per_page=per_page,
        total_items=len(rows),
        total_pages=total_pages,
        page_numbers=list(range(start_page, end_page + 1)),
    )

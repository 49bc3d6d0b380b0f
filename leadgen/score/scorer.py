"""Firmographic lead scoring module."""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple

import pandas as pd

from leadgen.entity.records import FirmographicRecord, record_from_company
from leadgen.score.reasons import compose_reasons
from leadgen.score.rules import (
    ACTIVE_STATUS,
    AGE_GROWTH_MAX,
    AGE_YOUNG_MAX,
    CONVERSION_COLD,
    CONVERSION_HOT,
    CONVERSION_WARM,
    EMPLOYEES_LARGE_MIN,
    EMPLOYEES_MID_MIN,
    EMPLOYEES_SMALL_MIN,
    HOT_MIN,
    RANK_MID_MAX,
    RANK_TOP_MAX,
    SCORING_RULES,
    TARGET_INDUSTRIES,
    UNKNOWN_EMPLOYEES,
    WARM_MIN,
)
from leadgen.store import save_lead_scores
from leadgen.utils.parsing import as_text, parse_date, parse_leading_int, parse_number

logger = logging.getLogger(__name__)


class LeadStatus(str, Enum):
    """Qualitative score tier."""
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


@dataclass(frozen=True)
class LeadScore:
    """Result of scoring one lead."""
    total_score: int
    status: LeadStatus
    conversion_probability: int
    reason_codes: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "score": self.total_score,
            "status": self.status.value,
            "conversion_probability": self.conversion_probability,
            "reason_codes": ",".join(self.reason_codes),
        }


def classify_status(total_score: int) -> LeadStatus:
    """Map a total score onto the hot/warm/cold tiers."""
    if total_score >= HOT_MIN:
        return LeadStatus.HOT
    elif total_score >= WARM_MIN:
        return LeadStatus.WARM
    return LeadStatus.COLD


def conversion_probability(total_score: int) -> int:
    """Estimated conversion percentage for a total score."""
    if total_score >= HOT_MIN:
        return CONVERSION_HOT
    elif total_score >= WARM_MIN:
        return CONVERSION_WARM
    return CONVERSION_COLD


def rank_reason(rank_metric) -> Optional[str]:
    """Reason code for the rank rule, or None if the rank is absent."""
    rank = parse_number(rank_metric)
    if rank is None:
        return None
    if rank < RANK_TOP_MAX:
        return "RANK_TOP"
    elif rank < RANK_MID_MAX:
        return "RANK_MID"
    return "RANK_LOW"


def employee_count(employee_count_range) -> Optional[int]:
    """
    Effective employee count: the lower bound of a range such as "101-250".

    Returns:
        Lower bound (0 when it does not parse), or None when the range is
        absent, empty or "N/A"
    """
    text = as_text(employee_count_range)
    if not text or text == UNKNOWN_EMPLOYEES:
        return None
    return parse_leading_int(text.split("-", 1)[0])


def employee_reason(employee_count_range) -> Optional[str]:
    """Reason code for the employee-count rule."""
    count = employee_count(employee_count_range)
    if count is None:
        return None
    if count > EMPLOYEES_LARGE_MIN:
        return "EMP_500"
    elif count >= EMPLOYEES_MID_MIN:
        return "EMP_200"
    elif count >= EMPLOYEES_SMALL_MIN:
        return "EMP_100"
    return "EMP_SMALL"


def company_age(founded_date, as_of: Optional[date] = None) -> Optional[int]:
    """Company age in whole calendar years, or None if the date is unusable."""
    founded = parse_date(founded_date)
    if founded is None:
        return None
    current_year = (as_of or date.today()).year
    return current_year - founded.year


def age_reason(founded_date, as_of: Optional[date] = None) -> Optional[str]:
    """Reason code for the company-age rule."""
    age = company_age(founded_date, as_of)
    if age is None:
        return None
    if age < AGE_YOUNG_MAX:
        return "AGE_YOUNG"
    elif age < AGE_GROWTH_MAX:
        return "AGE_GROWTH"
    return "AGE_MATURE"


def industry_reason(industries) -> Optional[str]:
    """Reason code for the target-industry rule (flat bonus on any match)."""
    text = as_text(industries)
    if not text:
        return None
    industry_text = text.lower()
    if any(target in industry_text for target in TARGET_INDUSTRIES):
        return "INDUSTRY"
    return None


def status_reason(operating_status) -> Optional[str]:
    """Reason code for the operating-status rule."""
    if isinstance(operating_status, str) and operating_status.lower() == ACTIVE_STATUS:
        return "ACTIVE"
    return None


def compute_lead_score(record: FirmographicRecord, as_of: Optional[date] = None) -> LeadScore:
    """
    Calculate the firmographic lead score for a company.

    Five additive rules are applied in a fixed order: rank, employee count,
    company age, target industry and operating status. A missing or
    malformed field contributes nothing; scoring never raises.

    Args:
        record: Firmographic attributes of the company
        as_of: Reference date for company age (defaults to today)

    Returns:
        LeadScore with total, status, conversion probability and reason codes
    """
    reason_codes: List[str] = []

    for code in (
        rank_reason(record.rank_metric),
        employee_reason(record.employee_count_range),
        age_reason(record.founded_date, as_of),
        industry_reason(record.industries),
        status_reason(record.operating_status),
    ):
        if code is not None:
            reason_codes.append(code)

    score = sum(SCORING_RULES[code] for code in reason_codes)

    return LeadScore(
        total_score=score,
        status=classify_status(score),
        conversion_probability=conversion_probability(score),
        reason_codes=tuple(reason_codes),
    )


def score_companies(
    df: pd.DataFrame,
    db_path: Optional[str] = None,
    as_of: Optional[date] = None,
    default_rank_metric: Optional[int] = None,
    default_industry: Optional[str] = None
) -> pd.DataFrame:
    """
    Score all companies in DataFrame.

    Args:
        df: DataFrame with company rows (must include an id column)
        db_path: DuckDB path; when given, scores are cached in lead_score
        as_of: Reference date for company age
        default_rank_metric: Rank used for rows without cb_rank
        default_industry: Industry used for rows without industries

    Returns:
        DataFrame with company_id, score, status, conversion_probability,
        reason_codes, reason_text columns
    """
    logger.info(f"Scoring {len(df)} companies...")

    results = []
    for _, row in df.iterrows():
        company = row.to_dict()
        record = record_from_company(company, default_rank_metric, default_industry)
        lead_score = compute_lead_score(record, as_of)

        results.append({
            "company_id": str(company.get("id")),
            **lead_score.to_dict(),
            "reason_text": compose_reasons(lead_score.reason_codes, company),
        })

    result_df = pd.DataFrame(
        results,
        columns=["company_id", "score", "status", "conversion_probability", "reason_codes", "reason_text"]
    )

    if db_path:
        save_lead_scores(result_df, db_path)
        logger.info("Scoring complete. Cached to DuckDB.")
    else:
        logger.info("Scoring complete.")
    return result_df

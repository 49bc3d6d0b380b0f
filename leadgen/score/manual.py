"""Scoring for leads entered by hand through the add-lead form."""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from leadgen.entity.records import Engagement, ManualLeadInput, engagement_date
from leadgen.score.rules import (
    MANUAL_ENGAGEMENT_MAX,
    MANUAL_ENGAGEMENT_POINTS,
    MANUAL_FUNDING_LARGE,
    MANUAL_FUNDING_LARGE_POINTS,
    MANUAL_FUNDING_SMALL,
    MANUAL_FUNDING_SMALL_POINTS,
    MANUAL_INDUSTRY_POINTS,
    MANUAL_KEYWORD_MAX,
    MANUAL_KEYWORD_POINTS,
    MANUAL_RECENCY_HOT,
    MANUAL_RECENCY_HOT_DAYS,
    MANUAL_RECENCY_WARM,
    MANUAL_RECENCY_WARM_DAYS,
    MANUAL_SIZE_POINTS,
    MANUAL_TARGET_KEYWORDS,
    MAX_SCORE,
)
from leadgen.score.scorer import LeadScore, LeadStatus, classify_status, conversion_probability
from leadgen.utils.parsing import parse_number


@dataclass(frozen=True)
class ManualLeadScore:
    """Component breakdown of a manual-entry score."""
    industry_score: int
    size_score: int
    keyword_score: int
    engagement_score: int
    recency_score: int
    funding_score: int
    total_score: int
    status: LeadStatus

    def as_lead_score(self) -> LeadScore:
        """Common LeadScore view of this breakdown."""
        return LeadScore(
            total_score=self.total_score,
            status=self.status,
            conversion_probability=conversion_probability(self.total_score),
        )


def industry_points(industry: Optional[str]) -> int:
    if not isinstance(industry, str):
        return 0
    return MANUAL_INDUSTRY_POINTS.get(industry.strip().lower(), 0)


def size_points(company_size: Optional[str]) -> int:
    if not isinstance(company_size, str):
        return 0
    return MANUAL_SIZE_POINTS.get(company_size.strip().lower(), 0)


def keyword_points(keywords: Iterable[str]) -> int:
    """Points per distinct target keyword, capped."""
    matched = {k.strip().lower() for k in keywords if isinstance(k, str)} & set(MANUAL_TARGET_KEYWORDS)
    return min(len(matched) * MANUAL_KEYWORD_POINTS, MANUAL_KEYWORD_MAX)


def engagement_points(engagements: Iterable[Engagement]) -> int:
    """Points summed over engagement events, capped."""
    total = sum(MANUAL_ENGAGEMENT_POINTS.get(e.type, 0) for e in engagements)
    return min(total, MANUAL_ENGAGEMENT_MAX)


def recency_points(engagements: Iterable[Engagement], as_of: Optional[date] = None) -> int:
    """Points for how recently the lead last engaged."""
    dates = [d for d in (engagement_date(e) for e in engagements) if d is not None]
    if not dates:
        return 0
    days_since = ((as_of or date.today()) - max(dates)).days
    if days_since <= MANUAL_RECENCY_HOT_DAYS:
        return MANUAL_RECENCY_HOT
    elif days_since <= MANUAL_RECENCY_WARM_DAYS:
        return MANUAL_RECENCY_WARM
    return 0


def funding_points(funding) -> int:
    amount = parse_number(funding)
    if amount is None:
        return 0
    if amount > MANUAL_FUNDING_LARGE:
        return MANUAL_FUNDING_LARGE_POINTS
    elif amount > MANUAL_FUNDING_SMALL:
        return MANUAL_FUNDING_SMALL_POINTS
    return 0


def score_manual_lead(lead: ManualLeadInput, as_of: Optional[date] = None) -> ManualLeadScore:
    """
    Score a lead captured through the add-lead form.

    Args:
        lead: Form input (industry, size, keywords, engagements, funding)
        as_of: Reference date for engagement recency (defaults to today)

    Returns:
        ManualLeadScore with per-component points; total capped at 100
    """
    components = {
        "industry_score": industry_points(lead.industry),
        "size_score": size_points(lead.company_size),
        "keyword_score": keyword_points(lead.keywords),
        "engagement_score": engagement_points(lead.engagements),
        "recency_score": recency_points(lead.engagements, as_of),
        "funding_score": funding_points(lead.funding),
    }
    total = min(sum(components.values()), MAX_SCORE)

    return ManualLeadScore(total_score=total, status=classify_status(total), **components)

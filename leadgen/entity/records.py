"""Scoring inputs built from upstream company rows and form submissions."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from leadgen.utils.parsing import as_text, is_missing, parse_date, parse_number

ENGAGEMENT_TYPES = (
    "website_visit",
    "content_download",
    "demo_request",
    "email_open",
    "email_click",
)

COMPANY_SIZES = ("enterprise", "mid-market", "small business", "startup", "unknown")


@dataclass(frozen=True)
class FirmographicRecord:
    """
    Company-level attributes used by the firmographic scorer.

    Every field is optional. Values are kept as supplied; the scorer
    decides what counts as malformed.
    """
    rank_metric: Optional[Any] = None
    employee_count_range: Optional[Any] = None
    founded_date: Optional[Union[date, datetime, str]] = None
    industries: Optional[Any] = None
    operating_status: Optional[Any] = None


@dataclass(frozen=True)
class Engagement:
    """A single engagement event recorded against a lead."""
    type: str
    date: Optional[Union[date, datetime, str]] = None
    details: Optional[str] = None


@dataclass(frozen=True)
class ManualLeadInput:
    """Fields captured by the add-lead form."""
    company_name: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    website: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    engagements: Tuple[Engagement, ...] = ()
    funding: Optional[float] = None


def record_from_company(
    company: Dict,
    default_rank_metric: Optional[int] = None,
    default_industry: Optional[str] = None
) -> FirmographicRecord:
    """
    Build a FirmographicRecord from a company row.

    Args:
        company: Company row (cb_rank, num_employees, founded_date,
            industries, operating_status columns)
        default_rank_metric: Rank used when the row has none
        default_industry: Industry text used when the row has none

    Returns:
        FirmographicRecord for scoring
    """
    rank = company.get("cb_rank")
    if is_missing(rank):
        rank = default_rank_metric

    industries = company.get("industries")
    if is_missing(industries) or industries == "":
        industries = default_industry

    return FirmographicRecord(
        rank_metric=rank,
        employee_count_range=company.get("num_employees"),
        founded_date=company.get("founded_date"),
        industries=industries,
        operating_status=company.get("operating_status"),
    )


def split_keywords(keywords: Any) -> Tuple[str, ...]:
    """Split a comma-separated keyword string into trimmed, non-empty keywords."""
    if is_missing(keywords):
        return ()
    if isinstance(keywords, str):
        parts = keywords.split(",")
    elif isinstance(keywords, (list, tuple, set)):
        parts = [str(k) for k in keywords if not is_missing(k)]
    else:
        return ()
    return tuple(k.strip() for k in parts if k.strip())


def parse_engagements(raw: Any) -> Tuple[Engagement, ...]:
    """
    Parse engagement dicts ({"type": ..., "date": ...}) into Engagement objects.

    Entries with an unknown type are dropped.
    """
    if not isinstance(raw, (list, tuple)):
        return ()
    engagements: List[Engagement] = []
    for item in raw:
        if isinstance(item, Engagement):
            engagements.append(item)
            continue
        if not isinstance(item, dict):
            continue
        kind = item.get("type")
        if kind not in ENGAGEMENT_TYPES:
            continue
        engagements.append(Engagement(type=kind, date=item.get("date"), details=item.get("details")))
    return tuple(engagements)


def manual_input_from_form(form: Dict, enriched: Optional[Dict] = None) -> ManualLeadInput:
    """
    Build a ManualLeadInput from an add-lead form submission.

    Enriched company data, when available, takes precedence over the typed
    industry, size and name.

    Args:
        form: Form fields (companyName, industry, companySize, website,
            keywords, engagements, funding)
        enriched: Optional CompanyData dict from enrichment

    Returns:
        ManualLeadInput for scoring
    """
    enriched = enriched or {}

    def _pick(enriched_key: str, form_key: str) -> Optional[str]:
        return as_text(enriched.get(enriched_key)) or as_text(form.get(form_key))

    funding = parse_number(enriched.get("funding"))
    if funding is None:
        funding = parse_number(form.get("funding"))

    return ManualLeadInput(
        company_name=_pick("name", "companyName"),
        industry=_pick("industry", "industry"),
        company_size=_pick("size", "companySize"),
        website=as_text(form.get("website")),
        keywords=split_keywords(form.get("keywords")),
        engagements=parse_engagements(form.get("engagements")),
        funding=funding,
    )


def engagement_date(engagement: Engagement) -> Optional[date]:
    """Date of an engagement, or None if it cannot be parsed."""
    return parse_date(engagement.date)

"""Fuzzy header matching for company imports."""
import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd
from rapidfuzz import fuzz, process

logger = logging.getLogger(__name__)

# Canonical company column -> header names seen in Crunchbase-style exports
COMPANY_HEADER_ALIASES: Dict[str, List[str]] = {
    "id": ["id", "uuid", "company_id", "organization_id"],
    "name": ["name", "company_name", "organization_name", "company"],
    "industries": ["industries", "industry", "categories"],
    "founded_date": ["founded_date", "founded_on", "founded", "year_founded"],
    "num_employees": ["num_employees", "employee_count", "employees", "number_of_employees"],
    "operating_status": ["operating_status", "status"],
    "cb_rank": ["cb_rank", "rank", "cb_rank_company"],
    "contact_email": ["contact_email", "email"],
    "about": ["about", "description", "short_description"],
    "website": ["website", "homepage_url", "url", "domain"],
}


def _normalize(header: str) -> str:
    return str(header).strip().lower().replace(" ", "_").replace("-", "_")


def find_header_match(
    target: str,
    candidate_headers: Sequence[str],
    threshold: float = 85.0
) -> Optional[str]:
    """
    Best fuzzy match for a header name.

    Args:
        target: The header name to match
        candidate_headers: Candidate header names
        threshold: Minimum similarity score (0-100)

    Returns:
        Best matching header name or None if below threshold
    """
    if not candidate_headers:
        return None

    normalized = {_normalize(h): h for h in candidate_headers}
    match = process.extractOne(_normalize(target), list(normalized), scorer=fuzz.ratio, score_cutoff=threshold)
    if match is None:
        return None
    return normalized[match[0]]


def map_company_headers(
    actual_headers: Sequence[str],
    threshold: float = 85.0
) -> Dict[str, str]:
    """
    Map canonical company columns to headers found in a file.

    Exact (normalized) alias matches win; remaining columns are matched
    fuzzily against their aliases. A file header is used at most once.

    Returns:
        Dict of canonical name -> actual header, for columns that were found
    """
    by_normalized = {_normalize(h): h for h in actual_headers}
    mapping: Dict[str, str] = {}
    used = set()

    for canonical, aliases in COMPANY_HEADER_ALIASES.items():
        for alias in aliases:
            actual = by_normalized.get(alias)
            if actual is not None and actual not in used:
                mapping[canonical] = actual
                used.add(actual)
                break

    for canonical, aliases in COMPANY_HEADER_ALIASES.items():
        if canonical in mapping:
            continue
        remaining = [h for h in actual_headers if h not in used]
        for alias in aliases:
            match = find_header_match(alias, remaining, threshold)
            if match:
                mapping[canonical] = match
                used.add(match)
                break

    return mapping


def rename_company_columns(df: pd.DataFrame, threshold: float = 85.0) -> pd.DataFrame:
    """
    Rename a company file's columns to the canonical names.

    Unmapped columns are dropped. Canonical columns missing from the file
    are added as empty.
    """
    mapping = map_company_headers(list(df.columns), threshold)
    missing = [c for c in COMPANY_HEADER_ALIASES if c not in mapping]
    if missing:
        logger.warning(f"No column found for: {', '.join(missing)}")

    renamed = df[list(mapping.values())].rename(columns={v: k for k, v in mapping.items()})
    for column in missing:
        renamed[column] = None
    return renamed[list(COMPANY_HEADER_ALIASES)]

"""Apollo.io people bulk match."""
import logging
from typing import Dict, List

from leadgen.utils.web import ApiClient

logger = logging.getLogger(__name__)

# Apollo accepts at most 10 details per bulk match call
BULK_MATCH_LIMIT = 10

PERSON_FIELDS = (
    "first_name",
    "last_name",
    "name",
    "email",
    "hashed_email",
    "organization_name",
    "domain",
    "id",
    "linkedin_url",
)


def person_detail(**fields) -> Dict:
    """Build a person detail, dropping empty and unknown fields."""
    return {k: v for k, v in fields.items() if k in PERSON_FIELDS and v}


def bulk_match_people(details: List[Dict], client: ApiClient) -> List[Dict]:
    """
    Match people against Apollo in batches.

    Args:
        details: Person detail dicts (see PERSON_FIELDS)
        client: Apollo client

    Returns:
        Matched person records, in request order

    Raises:
        ApiError: If a batch fails
    """
    matches: List[Dict] = []
    for start in range(0, len(details), BULK_MATCH_LIMIT):
        batch = details[start:start + BULK_MATCH_LIMIT]
        response = client.post("people/bulk_match", json={"details": batch})
        batch_matches = response.get("matches") if isinstance(response, dict) else None
        matches.extend(m for m in (batch_matches or []) if m)
        logger.info(f"Apollo matched {len(batch_matches or [])} of {len(batch)} people")
    return matches

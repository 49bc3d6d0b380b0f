"""Company enrichment from JigsawStack, Crunchbase, LinkedIn and BuiltWith."""
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from leadgen.store import get_company_data, upsert_company_data
from leadgen.utils.parsing import is_missing, parse_number
from leadgen.utils.web import ApiClient, ApiError

logger = logging.getLogger(__name__)

DEFAULT_INDUSTRY = "technology"


def extract_domain_from_url(url: str) -> str:
    """
    Extract the bare domain from a website URL.

    Args:
        url: URL with or without scheme (e.g. "www.acme.io/about")

    Returns:
        Hostname without "www."
    """
    url = (url or "").strip()
    url_with_protocol = url if url.startswith("http") else f"https://{url}"
    try:
        hostname = urlparse(url_with_protocol).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname.replace("www.", "")
    return url.replace("www.", "").split("/")[0]


def map_company_size(employees: Any) -> str:
    """
    Map an employee count onto a size band.

    Args:
        employees: Employee count (None/0 means unknown)

    Returns:
        enterprise, mid-market, small business, startup or unknown
    """
    count = parse_number(employees)
    if not count:
        return "unknown"
    if count > 1000:
        return "enterprise"
    if count > 250:
        return "mid-market"
    if count > 50:
        return "small business"
    return "startup"


def _first(*values: Any) -> Any:
    """First value that is present and non-empty."""
    for value in values:
        if not is_missing(value) and value != "":
            return value
    return None


def merge_company_data(domain: str, jigsaw: Dict, crunchbase: Dict) -> Dict:
    """
    Merge provider responses into a CompanyData dict.

    JigsawStack fields win over Crunchbase fields; the domain stands in for
    a missing name.
    """
    jigsaw = jigsaw or {}
    props = (crunchbase or {}).get("properties") or {}

    industry = _first(jigsaw.get("industry"), props.get("industry_group"))
    technologies = jigsaw.get("technologies")

    return {
        "name": _first(jigsaw.get("name"), props.get("name")) or domain,
        "industry": industry.lower() if isinstance(industry, str) else DEFAULT_INDUSTRY,
        "size": map_company_size(_first(jigsaw.get("employees"), props.get("employee_count"))),
        "revenue": _first(jigsaw.get("revenue"), props.get("annual_revenue")),
        "description": _first(jigsaw.get("description"), props.get("short_description")),
        "technologies": technologies if isinstance(technologies, list) else [],
        "funding": props.get("funding_total") or None,
        "founded": props.get("founded_on") or None,
        "social": {
            "linkedin": jigsaw.get("linkedin") or None,
            "twitter": jigsaw.get("twitter") or None,
        },
        "location": {
            "country": _first(jigsaw.get("country"), props.get("country")),
            "city": _first(jigsaw.get("city"), props.get("city")),
        },
    }


def enrich_company_data(
    domain: str,
    jigsaw: ApiClient,
    crunchbase: ApiClient,
    db_path: Optional[str] = None
) -> Dict:
    """
    Enrich a company from JigsawStack and Crunchbase in parallel.

    Args:
        domain: Company domain
        jigsaw: JigsawStack client
        crunchbase: Crunchbase client
        db_path: DuckDB path; when given, the result is cached as pending_review

    Returns:
        CompanyData dict

    Raises:
        ApiError: If either provider fails
    """
    logger.info(f"Enriching company data for {domain}")
    with ThreadPoolExecutor(max_workers=2) as executor:
        jigsaw_future = executor.submit(jigsaw.get, "enrich/company", {"domain": domain})
        crunchbase_future = executor.submit(crunchbase.get, "organizations/lookup", {"domain": domain})
        jigsaw_data = jigsaw_future.result()
        crunchbase_data = crunchbase_future.result()

    company_data = merge_company_data(domain, jigsaw_data, crunchbase_data)

    if db_path:
        upsert_company_data(domain, company_data, db_path)
        logger.info(f"Cached company data for {domain}")
    return company_data


def get_cached_company_data(domain: str, db_path: str) -> Optional[Dict]:
    """Cached CompanyData for a domain, or None."""
    cached = get_company_data(domain, db_path)
    if cached is None:
        return None
    cached["name"] = cached.get("name") or domain.split(".")[0]
    cached["industry"] = cached.get("industry") or DEFAULT_INDUSTRY
    cached["size"] = cached.get("size") or "unknown"
    return cached


def _contact_from(raw: Dict) -> Dict:
    name = f"{raw.get('firstName') or ''} {raw.get('lastName') or ''}".strip()
    return {
        "id": str(uuid.uuid4()),
        "name": name or "Unknown",
        "title": raw.get("title") or raw.get("position") or "Unknown",
        "email": raw.get("email") or None,
        "linkedin": raw.get("linkedin") or raw.get("profileUrl") or None,
        "seniority": raw.get("seniority") or "Unknown",
        "department": raw.get("department") or "Unknown",
    }


def dedupe_contacts(contacts: List[Dict]) -> List[Dict]:
    """
    Drop duplicate contacts by email (or LinkedIn URL when there is no email).

    The last contact seen for a key wins, keeping first-seen order.
    """
    by_key: Dict[Any, Dict] = {}
    for contact in contacts:
        key = contact.get("email") or contact.get("linkedin")
        by_key[key] = contact
    return list(by_key.values())


def find_company_contacts(domain: str, jigsaw: ApiClient, linkedin: ApiClient) -> List[Dict]:
    """
    Find decision makers at a company.

    Args:
        domain: Company domain
        jigsaw: JigsawStack client
        linkedin: LinkedIn client

    Returns:
        Deduplicated contact dicts; empty list on API failure
    """
    try:
        with ThreadPoolExecutor(max_workers=2) as executor:
            jigsaw_future = executor.submit(jigsaw.get, "enrich/contacts", {"domain": domain})
            linkedin_future = executor.submit(
                linkedin.get,
                "people/search",
                {
                    "company_domain": domain,
                    "count": 10,
                    "roles": ["SENIOR_LEADERSHIP", "DECISION_MAKER"],
                },
            )
            jigsaw_contacts = jigsaw_future.result()
            linkedin_contacts = linkedin_future.result()
    except ApiError as e:
        logger.error(f"Error finding contacts for {domain}: {e}")
        return []

    raw_contacts = []
    if isinstance(jigsaw_contacts, list):
        raw_contacts.extend(jigsaw_contacts)
    if isinstance(linkedin_contacts, dict):
        raw_contacts.extend(linkedin_contacts.get("elements") or [])

    contacts = [_contact_from(c) for c in raw_contacts if isinstance(c, dict)]
    return dedupe_contacts(contacts)


def analyze_technology_stack(domain: str, jigsaw: ApiClient, builtwith: ApiClient) -> Dict[str, List]:
    """
    Collect the technologies a company's site uses.

    Returns:
        {"technologies": [...]}; empty on API failure
    """
    try:
        with ThreadPoolExecutor(max_workers=2) as executor:
            tech_future = executor.submit(jigsaw.get, "enrich/technology", {"domain": domain})
            builtwith_future = executor.submit(builtwith.get, domain)
            tech_data = tech_future.result()
            builtwith_data = builtwith_future.result()
    except ApiError as e:
        logger.error(f"Error analyzing technology stack for {domain}: {e}")
        return {"technologies": []}

    technologies = []
    for data in (tech_data, builtwith_data):
        found = data.get("technologies") if isinstance(data, dict) else None
        if isinstance(found, list):
            technologies.extend(found)
    return {"technologies": technologies}

"""HubSpot payload builders."""
from typing import Dict, Optional, Tuple

from leadgen.utils.parsing import is_missing


def split_name(full_name: Optional[str]) -> Tuple[str, str]:
    """Split "Jane Q Doe" into ("Jane", "Q Doe")."""
    if not isinstance(full_name, str) or not full_name.strip():
        return "", ""
    parts = full_name.strip().split(None, 1)
    return parts[0], parts[1] if len(parts) > 1 else ""


def build_contact_payload(
    email: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    company: Optional[str] = None,
    lead_score: Optional[int] = None,
    lead_status: Optional[str] = None,
    conversion_probability: Optional[int] = None,
    **kwargs
) -> Dict:
    """
    Build contact properties for the HubSpot API.

    Args:
        email: Email address (required)
        first_name: First name
        last_name: Last name
        company: Company name
        lead_score: Lead score (custom property)
        lead_status: Score status, hot/warm/cold (custom property)
        conversion_probability: Conversion percentage (custom property)
        **kwargs: Additional contact properties

    Returns:
        Contact properties dictionary
    """
    payload = {
        "email": email,
        **{k: v for k, v in kwargs.items() if not is_missing(v)}
    }

    if first_name:
        payload["firstname"] = first_name
    if last_name:
        payload["lastname"] = last_name
    if company:
        payload["company"] = company

    # Custom properties
    if lead_score is not None:
        payload["lead_score"] = int(lead_score)
    if lead_status:
        payload["lead_score_status"] = lead_status
    if conversion_probability is not None:
        payload["conversion_probability"] = int(conversion_probability)

    return payload


def contact_payload_from_lead(lead: Dict) -> Optional[Dict]:
    """
    Build contact properties from a scored company row.

    Returns:
        Properties dict, or None when the lead has no usable email
    """
    email = lead.get("contact_email") or lead.get("email")
    if is_missing(email) or not str(email).strip() or str(email).strip() == "-":
        return None

    first_name, last_name = split_name(lead.get("contact_name"))
    score = lead.get("score")
    probability = lead.get("conversion_probability")

    return build_contact_payload(
        email=str(email).strip(),
        first_name=first_name,
        last_name=last_name,
        company=None if is_missing(lead.get("name")) else lead.get("name"),
        lead_score=None if is_missing(score) else score,
        lead_status=None if is_missing(lead.get("status")) else lead.get("status"),
        conversion_probability=None if is_missing(probability) else probability,
        website=lead.get("website"),
        industry=lead.get("industries"),
    )

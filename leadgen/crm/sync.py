"""CRM sync module with idempotency."""
import logging
from typing import Dict, Optional

from leadgen.config import settings
from leadgen.crm.hubspot import HubSpotClient
from leadgen.crm.payloads import contact_payload_from_lead
from leadgen.store import is_synced, record_sync
from leadgen.utils.web import ApiError

logger = logging.getLogger(__name__)


def push_lead_to_crm(
    lead: Dict,
    client: Optional[HubSpotClient] = None,
    db_path: Optional[str] = None
) -> Optional[str]:
    """
    Upsert a scored lead into HubSpot with idempotency.

    Args:
        lead: Scored company row (id, name, contact_email, score, status, ...)
        client: Optional HubSpotClient instance
        db_path: DuckDB path (uses settings if not provided)

    Returns:
        HubSpot contact ID if successful, None otherwise
    """
    db_path = db_path or settings.duckdb_path
    lead_id = lead.get("id")
    if not lead_id:
        logger.warning("Lead missing id, skipping sync")
        return None
    lead_id = str(lead_id)

    # Check if already synced
    if is_synced(lead_id, db_path):
        logger.debug(f"Lead {lead_id} already synced, skipping")
        return None

    payload = contact_payload_from_lead(lead)
    if payload is None:
        logger.info(f"Lead {lead_id} has no contact email, skipping")
        return None

    if client is None:
        client = HubSpotClient()

    try:
        email = payload.pop("email")
        result = client.upsert_contact(email, payload)
        contact_id = str(result.get("id") or "")
        if not contact_id:
            raise ApiError(f"HubSpot returned no contact id for {email}")

        record_sync(lead_id, contact_id, "Contact", "success", db_path)
        logger.info(f"Upserted contact {contact_id} for lead {lead_id}")
        return contact_id

    except ApiError as e:
        logger.error(f"Error syncing lead {lead_id} to HubSpot: {e}")
        record_sync(lead_id, "", "Contact", "error", db_path)
        return None

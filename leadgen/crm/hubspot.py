"""HubSpot CRM REST API client."""
import logging
from typing import Any, Dict, Optional

from leadgen.config import settings
from leadgen.utils.web import ApiClient, ApiError, RateLimiter

logger = logging.getLogger(__name__)

CONTACTS_PATH = "crm/v3/objects/contacts"


class HubSpotClient:
    """HubSpot contacts API client using a private-app access token."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        api: Optional[ApiClient] = None,
        rate_limiter: Optional[RateLimiter] = None
    ):
        """
        Initialize HubSpot client.

        Args:
            access_token: Private-app access token (uses settings if not provided)
            base_url: HubSpot API base URL (uses settings if not provided)
            api: Pre-built ApiClient (tests and shared sessions)
            rate_limiter: Limiter for the underlying ApiClient

        Raises:
            ValueError: If no access token is configured
        """
        if api is not None:
            self.api = api
            return

        access_token = access_token or settings.hubspot_access_token
        if not access_token:
            raise ValueError("HubSpot authentication not configured. Provide HUBSPOT_ACCESS_TOKEN")

        self.api = ApiClient(
            base_url or settings.hubspot_base_url,
            api_key=access_token,
            rate_limiter=rate_limiter,
        )

    def create_contact(self, properties: Dict[str, Any]) -> Dict:
        """Create a contact."""
        return self.api.post(CONTACTS_PATH, json={"properties": properties})

    def update_contact(self, contact_id: str, properties: Dict[str, Any]) -> Dict:
        """Update a contact."""
        return self.api.patch(f"{CONTACTS_PATH}/{contact_id}", json={"properties": properties})

    def search_contacts_by_email(self, email: str) -> Dict:
        """Search contacts by exact email."""
        return self.api.post(f"{CONTACTS_PATH}/search", json={
            "filterGroups": [
                {"filters": [{"propertyName": "email", "operator": "EQ", "value": email}]}
            ],
            "properties": ["email"],
        })

    def upsert_contact(self, email: str, properties: Dict[str, Any]) -> Dict:
        """
        Create a contact, or update it when HubSpot reports it already exists.

        Args:
            email: Contact email (HubSpot's unique key for contacts)
            properties: Contact properties (firstname, lastname, company, ...)

        Returns:
            HubSpot contact object

        Raises:
            ApiError: If creation fails for any reason other than a conflict,
                or the conflicting contact cannot be found
        """
        payload = {"email": email, **properties}
        try:
            return self.create_contact(payload)
        except ApiError as e:
            if e.status_code != 409:
                raise
            logger.info(f"Contact {email} already exists, updating")

        search_result = self.search_contacts_by_email(email)
        results = search_result.get("results") or []
        if not results:
            raise ApiError(f"Contact {email} conflicted on create but was not found", 409)

        contact_id = results[0]["id"]
        return self.update_contact(contact_id, payload)

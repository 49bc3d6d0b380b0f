"""JigsawStack web search."""
import logging
from typing import Dict

from leadgen.utils.web import ApiClient

logger = logging.getLogger(__name__)


def search_web(query: str, client: ApiClient) -> Dict:
    """
    Run a web search.

    Args:
        query: Search query
        client: JigsawStack client

    Returns:
        Raw search response

    Raises:
        ValueError: If the query is blank
        ApiError: If the search fails
    """
    if not query or not query.strip():
        raise ValueError("Search query is empty")
    logger.info(f"Searching the web for: {query}")
    return client.get("web/search", {"query": query.strip()})

"""Profile scraping and rescan scheduling."""
import logging
import time
from typing import Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from leadgen.config import settings
from leadgen.store import get_scan_interval, load_due_profiles, save_scraped_profile, update_scan_interval
from leadgen.utils.web import ApiClient, ApiError

logger = logging.getLogger(__name__)

PROFILE_PROMPTS = [
    "full name",
    "current position",
    "company",
    "location",
    "skills",
]


def parse_skills(raw) -> List[str]:
    """Skills arrive either as a list or a comma-separated string."""
    if isinstance(raw, list):
        return [str(s).strip() for s in raw if str(s).strip()]
    if isinstance(raw, str):
        return [s.strip() for s in raw.split(",") if s.strip()]
    return []


def profile_from_scrape(url: str, scraped: Dict) -> Dict:
    """Structure an AI scrape response into a ScrapedProfile dict."""
    return {
        "url": url,
        "full_name": scraped.get("full name"),
        "current_position": scraped.get("current position"),
        "company": scraped.get("company"),
        "location": scraped.get("location"),
        "skills": parse_skills(scraped.get("skills")),
        "raw_data": scraped,
    }


def scrape_profile(
    url: str,
    client: ApiClient,
    db_path: Optional[str] = None,
    scan_interval_days: Optional[int] = None
) -> Dict:
    """
    Scrape a profile page and schedule its next scan.

    Args:
        url: Profile URL
        client: JigsawStack client
        db_path: DuckDB path; when given, the profile is stored
        scan_interval_days: Days until next scan (keeps the stored interval,
            or uses settings for a new profile, if not provided)

    Returns:
        ScrapedProfile dict

    Raises:
        ApiError: If the scrape fails
    """
    scraped = client.post("ai/scrape", json={"url": url, "element_prompts": PROFILE_PROMPTS})
    profile = profile_from_scrape(url, scraped if isinstance(scraped, dict) else {})

    if db_path:
        interval = scan_interval_days
        if interval is None:
            interval = get_scan_interval(url, db_path) or settings.scrape_interval_days
        save_scraped_profile(profile, db_path, interval)
    return profile


def batch_scrape_profiles(
    urls: List[str],
    client: ApiClient,
    db_path: Optional[str] = None,
    delay_seconds: Optional[float] = None
) -> List[Dict]:
    """
    Scrape several profiles one at a time.

    Args:
        urls: Profile URLs
        client: JigsawStack client
        db_path: DuckDB path for storing profiles
        delay_seconds: Pause between requests (uses settings if not provided)

    Returns:
        One dict per URL: {"url", "status": "success", "data"} or
        {"url", "status": "error", "error"}
    """
    delay = delay_seconds if delay_seconds is not None else settings.scrape_delay_seconds
    results = []
    for i, url in enumerate(tqdm(urls, desc="Scraping profiles", disable=len(urls) < 2)):
        try:
            profile = scrape_profile(url, client, db_path)
            results.append({"url": url, "status": "success", "data": profile})
        except ApiError as e:
            logger.warning(f"Scrape failed for {url}: {e}")
            results.append({"url": url, "status": "error", "error": str(e)})
        if delay > 0 and i < len(urls) - 1:
            time.sleep(delay)
    return results


def get_scraping_schedule(db_path: str) -> pd.DataFrame:
    """Profiles due for a rescan, oldest first."""
    return load_due_profiles(db_path)


def update_scraping_schedule(url: str, scan_interval_days: int, db_path: str) -> bool:
    """
    Change how often a profile is rescanned.

    Raises:
        ValueError: If the interval is not positive
    """
    if scan_interval_days <= 0:
        raise ValueError("Scan interval must be at least one day")
    updated = update_scan_interval(url, scan_interval_days, db_path)
    if not updated:
        logger.warning(f"No scraped profile for {url}")
    return updated

"""Re-scrape profiles whose next scan date has passed."""
import argparse
import logging
import sys

from leadgen.config import settings
from leadgen.enrich.scraping import batch_scrape_profiles, get_scraping_schedule
from leadgen.utils.logs import setup_job_logging
from leadgen.utils.web import jigsawstack_client

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main entry point for the profile rescan job."""
    parser = argparse.ArgumentParser(description="Re-scrape profiles that are due for a scan")
    parser.add_argument("--limit", type=int, help="Limit number of profiles to rescan")
    parser.add_argument("--db", default=None, help="DuckDB path (defaults to settings)")
    args = parser.parse_args(argv)

    setup_job_logging("rescan_profiles")
    db_path = args.db or settings.duckdb_path

    due_df = get_scraping_schedule(db_path)
    if args.limit:
        due_df = due_df.head(args.limit)
    if due_df.empty:
        logger.info("No profiles due for a rescan")
        return 0

    urls = due_df["url"].tolist()
    logger.info(f"Rescanning {len(urls)} profiles...")
    results = batch_scrape_profiles(urls, jigsawstack_client(), db_path=db_path)

    succeeded = sum(1 for r in results if r["status"] == "success")
    logger.info(f"Rescan complete: {succeeded} succeeded, {len(results) - succeeded} failed")
    return 0


if __name__ == "__main__":
    sys.exit(main())

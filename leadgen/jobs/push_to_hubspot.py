"""Push scored leads to HubSpot."""
import argparse
import logging
import sys

from leadgen.config import settings
from leadgen.crm.hubspot import HubSpotClient
from leadgen.crm.payloads import contact_payload_from_lead
from leadgen.crm.sync import push_lead_to_crm
from leadgen.store import is_synced, load_scored_companies
from leadgen.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main entry point for HubSpot sync job."""
    parser = argparse.ArgumentParser(description="Push scored leads to HubSpot")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Dry run mode: print what would be sent without calling API"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Limit number of records to process"
    )
    parser.add_argument(
        "--statuses",
        type=str,
        help="Comma-separated score statuses to push (defaults to settings)"
    )
    parser.add_argument("--db", default=None, help="DuckDB path (defaults to settings)")
    args = parser.parse_args(argv)

    setup_job_logging("push_to_hubspot")
    db_path = args.db or settings.duckdb_path
    statuses = (
        [s.strip().lower() for s in args.statuses.split(",") if s.strip()]
        if args.statuses else settings.crm_push_statuses
    )

    logger.info(f"Starting HubSpot sync job for statuses {statuses}...")

    leads_df = load_scored_companies(db_path, statuses=statuses)
    if not leads_df.empty:
        leads_df = leads_df[~leads_df["id"].apply(lambda x: is_synced(str(x), db_path))]
    if args.limit:
        leads_df = leads_df.head(args.limit)

    if leads_df.empty:
        logger.warning("No unsynced leads found")
        return 0

    leads = leads_df.to_dict("records")

    if args.dry_run:
        logger.info(f"DRY RUN: Would sync {len(leads)} leads to HubSpot...")
        payloads = [p for p in (contact_payload_from_lead(lead) for lead in leads) if p]
        logger.info(f"  Would upsert: {len(payloads)} Contacts ({len(leads) - len(payloads)} without email)")
        logger.info("  Top 3 payload examples:")
        for idx, payload in enumerate(payloads[:3]):
            logger.info(f"    Example {idx+1}: {payload}")
        return 0

    try:
        client = HubSpotClient()
    except ValueError as e:
        logger.error(str(e))
        return 1

    synced_count = 0
    for lead in leads:
        if push_lead_to_crm(lead, client, db_path):
            synced_count += 1

    logger.info(f"Sync complete: {synced_count} of {len(leads)} leads synced to HubSpot")
    return 0


if __name__ == "__main__":
    sys.exit(main())

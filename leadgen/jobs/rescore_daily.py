"""Daily rescoring job."""
import argparse
import logging
import sys
from datetime import datetime

from leadgen.config import settings
from leadgen.score.scorer import score_companies
from leadgen.store import load_companies
from leadgen.utils.io import write_scores_csv
from leadgen.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Main entry point for daily rescoring."""
    parser = argparse.ArgumentParser(description="Rescore every company and export a dated CSV")
    parser.add_argument("--db", default=None, help="DuckDB path (defaults to settings)")
    parser.add_argument("--no-export", action="store_true", default=False, help="Skip the CSV export")
    args = parser.parse_args(argv)

    setup_job_logging("rescore_daily")
    db_path = args.db or settings.duckdb_path

    start_time = datetime.now()
    logger.info("Starting daily rescore job...")

    companies_df = load_companies(db_path)
    if companies_df.empty:
        logger.warning("No companies found to score")
        return 0

    score_start = datetime.now()
    scores_df = score_companies(
        companies_df,
        db_path=db_path,
        default_rank_metric=settings.list_default_rank_metric,
        default_industry=settings.list_default_industry,
    )
    score_duration = (datetime.now() - score_start).total_seconds()
    logger.info(f"Scoring completed in {score_duration:.2f} seconds", extra={"duration": score_duration})

    counts = scores_df["status"].value_counts().to_dict()
    logger.info(f"Status counts: {counts}")

    if not args.no_export:
        result_df = companies_df.merge(scores_df, left_on="id", right_on="company_id", how="left")
        write_scores_csv(result_df, settings.out_dir, prefix="daily_scores")

    total_duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Rescore complete: {len(scores_df)} companies scored in {total_duration:.2f} seconds",
        extra={"duration": total_duration}
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Import a company export (CSV/XLSX) into the company directory."""
import argparse
import logging
import sys
from datetime import datetime

from leadgen.config import settings
from leadgen.store import upsert_companies
from leadgen.utils.fuzzy import rename_company_columns
from leadgen.utils.io import read_data_file
from leadgen.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def import_companies(file_path: str, db_path: str) -> int:
    """
    Load a company file, map its headers and upsert the rows.

    Returns:
        Number of companies written
    """
    df = read_data_file(file_path)
    companies_df = rename_company_columns(df)
    return upsert_companies(companies_df, db_path)


def main(argv=None) -> int:
    """Main entry point for company import."""
    parser = argparse.ArgumentParser(description="Import companies from a CSV or Excel export")
    parser.add_argument("--file", required=True, help="Path to a .csv, .xlsx or .xls file")
    parser.add_argument("--db", default=None, help="DuckDB path (defaults to settings)")
    args = parser.parse_args(argv)

    setup_job_logging("import_companies")
    start_time = datetime.now()
    logger.info(f"Importing companies from {args.file}...")

    try:
        count = import_companies(args.file, args.db or settings.duckdb_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Import complete: {count} companies in {duration:.2f} seconds", extra={"duration": duration})
    return 0


if __name__ == "__main__":
    sys.exit(main())

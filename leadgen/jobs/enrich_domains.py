"""Enrich company domains from JigsawStack and Crunchbase."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from leadgen.config import settings
from leadgen.enrich.company import enrich_company_data, extract_domain_from_url
from leadgen.utils.logs import setup_job_logging
from leadgen.utils.web import ApiError, crunchbase_client, default_rate_limiter, jigsawstack_client

logger = logging.getLogger(__name__)


def collect_domains(domains_csv: Optional[str], file_path: Optional[str]) -> List[str]:
    """
    Domains from a comma-separated argument and/or a file with one per line.

    URLs are reduced to their domain; duplicates are dropped, order kept.
    """
    raw: List[str] = []
    if domains_csv:
        raw.extend(domains_csv.split(","))
    if file_path:
        raw.extend(Path(file_path).read_text(encoding="utf-8").splitlines())

    domains = []
    for value in raw:
        value = value.strip()
        if not value or value.startswith("#"):
            continue
        domain = extract_domain_from_url(value)
        if domain and domain not in domains:
            domains.append(domain)
    return domains


def main(argv=None) -> int:
    """Main entry point for domain enrichment."""
    parser = argparse.ArgumentParser(description="Enrich company domains and cache the results")
    parser.add_argument("--domains", help="Comma-separated domains or URLs")
    parser.add_argument("--file", help="File with one domain or URL per line")
    parser.add_argument("--db", default=None, help="DuckDB path (defaults to settings)")
    args = parser.parse_args(argv)

    if not args.domains and not args.file:
        parser.error("one of --domains or --file is required")

    setup_job_logging("enrich_domains")
    db_path = args.db or settings.duckdb_path

    domains = collect_domains(args.domains, args.file)
    if not domains:
        logger.warning("No domains to enrich")
        return 0

    limiter = default_rate_limiter()
    jigsaw = jigsawstack_client(rate_limiter=limiter)
    crunchbase = crunchbase_client(rate_limiter=limiter)

    enriched, failed = 0, 0
    for domain in tqdm(domains, desc="Enriching domains"):
        try:
            enrich_company_data(domain, jigsaw, crunchbase, db_path=db_path)
            enriched += 1
        except ApiError as e:
            logger.error(f"Enrichment failed for {domain}: {e}")
            failed += 1

    logger.info(f"Enrichment complete: {enriched} enriched, {failed} failed")
    return 1 if failed and not enriched else 0


if __name__ == "__main__":
    sys.exit(main())

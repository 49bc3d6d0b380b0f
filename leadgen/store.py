"""DuckDB record store for companies, enrichment cache, scores and sync state."""
import json
import logging
import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import duckdb
import pandas as pd

from leadgen.utils.parsing import is_missing, parse_number

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = [
    "id",
    "name",
    "industries",
    "founded_date",
    "num_employees",
    "operating_status",
    "cb_rank",
    "contact_email",
    "about",
    "website",
]


def init_schema(db_path: str):
    """Initialize DuckDB schema idempotently."""
    conn = duckdb.connect(db_path)

    # company directory
    conn.execute("""
        CREATE TABLE IF NOT EXISTS company (
            id VARCHAR PRIMARY KEY,
            name VARCHAR,
            industries VARCHAR,
            founded_date VARCHAR,
            num_employees VARCHAR,
            operating_status VARCHAR,
            cb_rank BIGINT,
            contact_email VARCHAR,
            about TEXT,
            website VARCHAR
        )
    """)

    # company_data (enrichment cache keyed by domain)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS company_data (
            domain VARCHAR PRIMARY KEY,
            name VARCHAR,
            industry VARCHAR,
            size VARCHAR,
            revenue DOUBLE,
            description TEXT,
            technologies VARCHAR,
            funding DOUBLE,
            founded VARCHAR,
            linkedin VARCHAR,
            twitter VARCHAR,
            country VARCHAR,
            city VARCHAR,
            status VARCHAR,
            last_updated TIMESTAMP
        )
    """)

    # lead_score (cache alongside the lead)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS lead_score (
            company_id VARCHAR PRIMARY KEY,
            score INTEGER,
            status VARCHAR,
            conversion_probability INTEGER,
            reason_codes VARCHAR,
            reason_text TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # crm_sync
    conn.execute("""
        CREATE TABLE IF NOT EXISTS crm_sync (
            lead_id VARCHAR PRIMARY KEY,
            crm_id VARCHAR,
            crm_type VARCHAR,
            synced_at TIMESTAMP,
            sync_status VARCHAR
        )
    """)

    # scraped_profiles
    conn.execute("""
        CREATE TABLE IF NOT EXISTS scraped_profiles (
            url VARCHAR PRIMARY KEY,
            full_name VARCHAR,
            current_position VARCHAR,
            company VARCHAR,
            location VARCHAR,
            skills VARCHAR,
            raw_data TEXT,
            last_scraped TIMESTAMP,
            next_scan_date TIMESTAMP,
            scan_interval INTEGER,
            status VARCHAR
        )
    """)

    conn.close()
    logger.debug(f"DuckDB schema initialized at {db_path}")


def _company_params(company: Dict) -> Tuple:
    """Normalize one company row into insert parameters (NaN becomes NULL)."""
    params = []
    for column in COMPANY_COLUMNS:
        value = company.get(column)
        if is_missing(value):
            params.append(None)
        elif column == "cb_rank":
            rank = parse_number(value)
            params.append(int(rank) if rank is not None and math.isfinite(rank) else None)
        elif hasattr(value, "isoformat"):
            params.append(value.isoformat()[:10])
        else:
            params.append(str(value))
    return tuple(params)


def upsert_companies(df: pd.DataFrame, db_path: str) -> int:
    """
    Insert or replace company rows.

    Args:
        df: DataFrame with company columns (missing columns are filled with NULL)
        db_path: DuckDB path

    Returns:
        Number of rows written
    """
    init_schema(db_path)
    if df.empty:
        return 0

    rows = [_company_params(company) for company in df.to_dict("records")]
    rows = [row for row in rows if row[0] is not None]
    if not rows:
        logger.warning("No company rows with an id to upsert")
        return 0
    columns = ", ".join(COMPANY_COLUMNS)
    placeholders = ", ".join(["?" for _ in COMPANY_COLUMNS])

    conn = duckdb.connect(db_path)
    conn.executemany(
        f"INSERT OR REPLACE INTO company ({columns}) VALUES ({placeholders})",
        rows
    )
    conn.close()

    logger.info(f"Upserted {len(rows)} companies")
    return len(rows)


def load_companies(db_path: str) -> pd.DataFrame:
    """Load the company directory as a DataFrame."""
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    df = conn.execute("SELECT * FROM company ORDER BY name").df()
    conn.close()
    return df


def save_lead_scores(scores_df: pd.DataFrame, db_path: str):
    """
    Cache scores in lead_score.

    Args:
        scores_df: DataFrame from score_companies
        db_path: DuckDB path
    """
    init_schema(db_path)
    if scores_df.empty:
        return

    conn = duckdb.connect(db_path)
    conn.register("scores_df", scores_df)
    conn.execute("""
        INSERT OR REPLACE INTO lead_score
        SELECT company_id, score, status, conversion_probability, reason_codes, reason_text, CURRENT_TIMESTAMP
        FROM scores_df
    """)
    conn.close()


def load_scored_companies(db_path: str, statuses: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Load companies joined with their cached scores, best first.

    Args:
        db_path: DuckDB path
        statuses: Only return these score statuses (e.g. ["hot"])

    Returns:
        DataFrame of company columns plus score, status,
        conversion_probability, reason_codes, reason_text
    """
    init_schema(db_path)
    query = """
        SELECT
            c.*,
            s.score,
            s.status,
            s.conversion_probability,
            s.reason_codes,
            s.reason_text
        FROM company c
        JOIN lead_score s ON c.id = s.company_id
    """
    params: List = []
    if statuses:
        placeholders = ",".join(["?" for _ in statuses])
        query += f" WHERE s.status IN ({placeholders})"
        params = list(statuses)
    query += " ORDER BY s.score DESC, c.name"

    conn = duckdb.connect(db_path)
    df = conn.execute(query, params).df()
    conn.close()
    return df


def upsert_company_data(domain: str, data: Dict, db_path: str, status: str = "pending_review"):
    """
    Cache enriched company data for a domain.

    Args:
        domain: Company domain (cache key)
        data: CompanyData dict
        db_path: DuckDB path
        status: Review status stored with the record
    """
    init_schema(db_path)
    social = data.get("social") or {}
    location = data.get("location") or {}

    conn = duckdb.connect(db_path)
    conn.execute("""
        INSERT OR REPLACE INTO company_data
        (domain, name, industry, size, revenue, description, technologies, funding,
         founded, linkedin, twitter, country, city, status, last_updated)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, [
        domain,
        data.get("name"),
        data.get("industry"),
        data.get("size"),
        parse_number(data.get("revenue")),
        data.get("description"),
        json.dumps(data.get("technologies") or []),
        parse_number(data.get("funding")),
        data.get("founded"),
        social.get("linkedin"),
        social.get("twitter"),
        location.get("country"),
        location.get("city"),
        status,
        datetime.now(),
    ])
    conn.close()


def get_company_data(domain: str, db_path: str) -> Optional[Dict]:
    """
    Read cached company data for a domain.

    Returns:
        CompanyData dict, or None if the domain is not cached
    """
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    df = conn.execute("SELECT * FROM company_data WHERE domain = ?", [domain]).df()
    conn.close()
    if df.empty:
        return None

    row = df.iloc[0].to_dict()
    row = {k: (None if pd.isna(v) else v) for k, v in row.items()}
    return {
        "name": row["name"],
        "industry": row["industry"],
        "size": row["size"],
        "revenue": row["revenue"],
        "description": row["description"],
        "technologies": json.loads(row["technologies"]) if row["technologies"] else [],
        "funding": row["funding"],
        "founded": row["founded"],
        "social": {"linkedin": row["linkedin"], "twitter": row["twitter"]},
        "location": {"country": row["country"], "city": row["city"]},
        "status": row["status"],
    }


def count_company_data_by_status(db_path: str) -> Dict[str, int]:
    """Count cached company records per review status."""
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    rows = conn.execute(
        "SELECT status, COUNT(*) FROM company_data GROUP BY status"
    ).fetchall()
    conn.close()
    return {status: count for status, count in rows}


def is_synced(lead_id: str, db_path: str) -> bool:
    """
    Check if a lead is already synced to the CRM.

    Args:
        lead_id: Lead ID to check
        db_path: DuckDB path

    Returns:
        True if the lead is synced
    """
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    result = conn.execute(
        "SELECT COUNT(*) FROM crm_sync WHERE lead_id = ? AND sync_status = 'success'",
        [lead_id]
    ).fetchone()
    conn.close()
    return result[0] > 0 if result else False


def record_sync(
    lead_id: str,
    crm_id: str,
    crm_type: str,
    status: str,
    db_path: str
):
    """
    Record sync status in database.

    Args:
        lead_id: Lead ID
        crm_id: CRM record ID
        crm_type: CRM record type (Contact, Company)
        status: Sync status (success, error)
        db_path: DuckDB path
    """
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    conn.execute("""
        INSERT OR REPLACE INTO crm_sync
        (lead_id, crm_id, crm_type, synced_at, sync_status)
        VALUES (?, ?, ?, CURRENT_TIMESTAMP, ?)
    """, [lead_id, crm_id, crm_type, status])
    conn.close()


def save_scraped_profile(profile: Dict, db_path: str, scan_interval_days: int, status: str = "completed"):
    """
    Store a scraped profile and schedule its next scan.

    Args:
        profile: ScrapedProfile dict (url, full_name, ..., raw_data)
        db_path: DuckDB path
        scan_interval_days: Days until the profile is due again
        status: Scrape status
    """
    init_schema(db_path)
    now = datetime.now()
    conn = duckdb.connect(db_path)
    conn.execute("""
        INSERT OR REPLACE INTO scraped_profiles
        (url, full_name, current_position, company, location, skills, raw_data,
         last_scraped, next_scan_date, scan_interval, status)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, [
        profile["url"],
        profile.get("full_name"),
        profile.get("current_position"),
        profile.get("company"),
        profile.get("location"),
        json.dumps(profile.get("skills") or []),
        json.dumps(profile.get("raw_data"), default=str),
        now,
        now + timedelta(days=scan_interval_days),
        scan_interval_days,
        status,
    ])
    conn.close()


def get_scan_interval(url: str, db_path: str) -> Optional[int]:
    """Stored scan interval for a profile, or None if it was never scraped."""
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    row = conn.execute("SELECT scan_interval FROM scraped_profiles WHERE url = ?", [url]).fetchone()
    conn.close()
    if not row or row[0] is None:
        return None
    return int(row[0])


def load_due_profiles(db_path: str, as_of: Optional[datetime] = None) -> pd.DataFrame:
    """Profiles whose next scan date has passed, oldest first."""
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    df = conn.execute(
        "SELECT * FROM scraped_profiles WHERE next_scan_date < ? ORDER BY next_scan_date",
        [as_of or datetime.now()]
    ).df()
    conn.close()
    return df


def update_scan_interval(url: str, scan_interval_days: int, db_path: str) -> bool:
    """
    Change a profile's scan interval and reschedule it from now.

    Returns:
        True if the profile exists
    """
    init_schema(db_path)
    conn = duckdb.connect(db_path)
    exists = conn.execute("SELECT COUNT(*) FROM scraped_profiles WHERE url = ?", [url]).fetchone()[0]
    if exists:
        conn.execute("""
            UPDATE scraped_profiles
            SET scan_interval = ?, next_scan_date = ?
            WHERE url = ?
        """, [scan_interval_days, datetime.now() + timedelta(days=scan_interval_days), url])
    conn.close()
    return bool(exists)

"""Tests for the DuckDB record store."""
from datetime import datetime, timedelta

import pandas as pd
import pytest

from leadgen.score.scorer import score_companies
from leadgen.store import (
    count_company_data_by_status,
    get_company_data,
    get_scan_interval,
    init_schema,
    is_synced,
    load_companies,
    load_due_profiles,
    load_scored_companies,
    record_sync,
    save_scraped_profile,
    update_scan_interval,
    upsert_companies,
    upsert_company_data,
)


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "leadgen.duckdb")
    init_schema(path)
    return path


@pytest.fixture
def companies_df():
    return pd.DataFrame([
        {
            "id": "c1",
            "name": "Acme AI",
            "industries": "Software",
            "founded_date": "2023-01-01",
            "num_employees": "600-1000",
            "operating_status": "active",
            "cb_rank": 500,
            "contact_email": "sales@acme.io",
        },
        {
            "id": "c2",
            "name": "Old Mill",
            "industries": "Manufacturing",
            "founded_date": None,
            "num_employees": "N/A",
            "operating_status": "closed",
            "cb_rank": float("nan"),
            "contact_email": None,
        },
        {
            "id": None,
            "name": "No Id Co",
        },
    ])


class TestCompanies:
    """Test the company directory."""

    def test_upsert_skips_rows_without_id(self, db_path, companies_df):
        """Test rows without an id are not written."""
        assert upsert_companies(companies_df, db_path) == 2

        df = load_companies(db_path)
        assert sorted(df["id"]) == ["c1", "c2"]

    def test_missing_values_become_null(self, db_path, companies_df):
        """Test NaN values are stored as NULL."""
        upsert_companies(companies_df, db_path)
        row = load_companies(db_path).set_index("id").loc["c2"]
        assert pd.isna(row["cb_rank"])
        assert pd.isna(row["founded_date"])
        assert pd.isna(row["website"])

    def test_upsert_replaces(self, db_path, companies_df):
        """Test re-importing a company replaces it."""
        upsert_companies(companies_df, db_path)
        upsert_companies(pd.DataFrame([{"id": "c1", "name": "Acme Renamed"}]), db_path)

        df = load_companies(db_path).set_index("id")
        assert len(df) == 2
        assert df.loc["c1", "name"] == "Acme Renamed"

    def test_empty_frame(self, db_path):
        """Test an empty DataFrame writes nothing."""
        assert upsert_companies(pd.DataFrame(), db_path) == 0


class TestLeadScores:
    """Test the lead score cache."""

    def test_scores_join_companies(self, db_path, companies_df):
        """Test cached scores join back onto companies, best first."""
        upsert_companies(companies_df, db_path)
        score_companies(load_companies(db_path), db_path=db_path)

        df = load_scored_companies(db_path)
        assert list(df["id"]) == ["c1", "c2"]
        assert df.iloc[0]["status"] == "hot"

    def test_status_filter(self, db_path, companies_df):
        """Test loading only some statuses."""
        upsert_companies(companies_df, db_path)
        score_companies(load_companies(db_path), db_path=db_path)

        df = load_scored_companies(db_path, statuses=["cold"])
        assert list(df["id"]) == ["c2"]


class TestCompanyData:
    """Test the enrichment cache."""

    def test_round_trip(self, db_path):
        """Test cached company data reads back as a CompanyData dict."""
        upsert_company_data("acme.io", {
            "name": "Acme",
            "industry": "software",
            "size": "mid-market",
            "revenue": "1,200,000",
            "technologies": ["React", "Nginx"],
            "funding": 5000000,
            "social": {"linkedin": "https://linkedin.com/company/acme"},
            "location": {"country": "US"},
        }, db_path)

        cached = get_company_data("acme.io", db_path)
        assert cached["name"] == "Acme"
        assert cached["revenue"] == 1_200_000
        assert cached["technologies"] == ["React", "Nginx"]
        assert cached["social"]["linkedin"] == "https://linkedin.com/company/acme"
        assert cached["social"]["twitter"] is None
        assert cached["location"]["country"] == "US"
        assert cached["status"] == "pending_review"

    def test_missing_domain(self, db_path):
        """Test an uncached domain returns None."""
        assert get_company_data("nowhere.io", db_path) is None

    def test_count_by_status(self, db_path):
        """Test counts per review status."""
        upsert_company_data("a.io", {"name": "A"}, db_path, status="qualified")
        upsert_company_data("b.io", {"name": "B"}, db_path, status="rejected")
        upsert_company_data("c.io", {"name": "C"}, db_path)
        assert count_company_data_by_status(db_path) == {"qualified": 1, "rejected": 1, "pending_review": 1}


class TestCrmSync:
    """Test CRM sync bookkeeping."""

    def test_only_success_counts_as_synced(self, db_path):
        """Test failed syncs are retried later."""
        assert is_synced("c1", db_path) is False

        record_sync("c1", "", "Contact", "error", db_path)
        assert is_synced("c1", db_path) is False

        record_sync("c1", "901", "Contact", "success", db_path)
        assert is_synced("c1", db_path) is True


class TestScrapedProfiles:
    """Test profile scan scheduling."""

    def test_profile_becomes_due(self, db_path):
        """Test a profile is due once its interval has passed."""
        save_scraped_profile({"url": "https://example.com/in/ann", "full_name": "Ann"}, db_path, scan_interval_days=7)

        assert load_due_profiles(db_path).empty
        due = load_due_profiles(db_path, as_of=datetime.now() + timedelta(days=8))
        assert list(due["url"]) == ["https://example.com/in/ann"]

    def test_update_scan_interval(self, db_path):
        """Test rescheduling an existing and a missing profile."""
        save_scraped_profile({"url": "https://example.com/in/ann"}, db_path, scan_interval_days=7)

        assert update_scan_interval("https://example.com/in/ann", 1, db_path) is True
        assert update_scan_interval("https://example.com/in/bob", 1, db_path) is False

        due = load_due_profiles(db_path, as_of=datetime.now() + timedelta(days=2))
        assert list(due["scan_interval"]) == [1]

    def test_get_scan_interval(self, db_path):
        """Test the stored interval is read back, and None for unknown profiles."""
        save_scraped_profile({"url": "https://example.com/in/ann"}, db_path, scan_interval_days=14)

        assert get_scan_interval("https://example.com/in/ann", db_path) == 14
        assert get_scan_interval("https://example.com/in/bob", db_path) is None

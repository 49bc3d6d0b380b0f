"""Tests for the batch job entry points."""
import logging
from datetime import datetime, timedelta

import duckdb
import pandas as pd
import pytest

from conftest import FakeApi
from leadgen.config import settings
from leadgen.jobs import enrich_domains, import_companies, push_to_hubspot, rescan_profiles, rescore_daily
from leadgen.jobs.enrich_domains import collect_domains
from leadgen.store import (
    get_company_data,
    load_companies,
    load_due_profiles,
    load_scored_companies,
    save_scraped_profile,
)
from leadgen.utils.web import ApiError

CSV = (
    "Organization Name,UUID,Industries,Founded Date,Number of Employees,Operating Status,CB Rank,Contact Email\n"
    "Acme AI,c1,Software,2023-01-01,600-1000,active,500,sales@acme.io\n"
    "Old Mill,c2,Manufacturing,,N/A,closed,,\n"
)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "leadgen.duckdb")


@pytest.fixture
def companies_file(tmp_path):
    path = tmp_path / "companies.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def quiet_job_logging(monkeypatch):
    for job in (import_companies, rescore_daily, push_to_hubspot, rescan_profiles, enrich_domains):
        monkeypatch.setattr(job, "setup_job_logging", lambda name: None)


class TestImportAndRescore:
    """Test importing a company file and rescoring it."""

    def test_import(self, db_path, companies_file):
        """Test headers are mapped and rows stored."""
        assert import_companies.main(["--file", str(companies_file), "--db", db_path]) == 0

        df = load_companies(db_path).set_index("id")
        assert df.loc["c1", "name"] == "Acme AI"
        assert df.loc["c1", "cb_rank"] == 500
        assert df.loc["c2", "num_employees"] == "N/A"

    def test_import_missing_file(self, db_path, tmp_path):
        """Test a missing file fails the job."""
        assert import_companies.main(["--file", str(tmp_path / "nope.csv"), "--db", db_path]) == 1

    def test_rescore(self, db_path, companies_file, tmp_path, monkeypatch):
        """Test rescoring caches scores and writes a dated CSV."""
        monkeypatch.setattr(settings, "out_dir", tmp_path / "out")
        import_companies.main(["--file", str(companies_file), "--db", db_path])

        assert rescore_daily.main(["--db", db_path]) == 0

        scored = load_scored_companies(db_path).set_index("id")
        assert scored.loc["c1", "status"] == "hot"
        assert scored.loc["c2", "status"] == "cold"

        exports = list((tmp_path / "out").glob("daily_scores_*.csv"))
        assert len(exports) == 1
        assert set(pd.read_csv(exports[0])["company_id"]) == {"c1", "c2"}

    def test_rescore_empty(self, db_path):
        """Test an empty directory is not an error."""
        assert rescore_daily.main(["--db", db_path, "--no-export"]) == 0


class TestPushToHubSpot:
    """Test the CRM push job."""

    def test_dry_run(self, db_path, companies_file, monkeypatch):
        """Test a dry run never builds a client."""
        import_companies.main(["--file", str(companies_file), "--db", db_path])
        rescore_daily.main(["--db", db_path, "--no-export"])

        def fail(*args, **kwargs):
            raise AssertionError("HubSpot client built during dry run")

        monkeypatch.setattr(push_to_hubspot, "HubSpotClient", fail)
        assert push_to_hubspot.main(["--dry-run", "--db", db_path, "--statuses", "hot,cold"]) == 0

    def test_missing_token(self, db_path, companies_file, monkeypatch):
        """Test a missing access token fails the job."""
        import_companies.main(["--file", str(companies_file), "--db", db_path])
        rescore_daily.main(["--db", db_path, "--no-export"])
        monkeypatch.setattr(settings, "hubspot_access_token", "")

        assert push_to_hubspot.main(["--db", db_path]) == 1


class TestEnrichDomains:
    """Test domain collection for the enrichment job."""

    def test_collect_domains(self, tmp_path):
        """Test domains from arguments and a file are normalized and deduplicated."""
        path = tmp_path / "domains.txt"
        path.write_text("# targets\nhttps://www.acme.io/about\n\nglobex.com\n", encoding="utf-8")

        assert collect_domains("acme.io, initech.com", str(path)) == ["acme.io", "initech.com", "globex.com"]

    def test_enrich_caches_each_domain(self, db_path, monkeypatch):
        """Test every domain is enriched and cached."""
        jigsaw = FakeApi(sequences={("GET", "enrich/company"): [{"name": "Acme"}, {"name": "Globex"}]})
        monkeypatch.setattr(enrich_domains, "jigsawstack_client", lambda rate_limiter=None: jigsaw)
        monkeypatch.setattr(enrich_domains, "crunchbase_client", lambda rate_limiter=None: FakeApi())

        assert enrich_domains.main(["--domains", "acme.io,https://globex.com/", "--db", db_path]) == 0

        assert [call[2] for call in jigsaw.calls] == [{"domain": "acme.io"}, {"domain": "globex.com"}]
        assert get_company_data("acme.io", db_path)["name"] == "Acme"
        assert get_company_data("globex.com", db_path)["name"] == "Globex"

    def test_partial_failure_succeeds(self, db_path, monkeypatch):
        """Test the job succeeds when at least one domain is enriched."""
        jigsaw = FakeApi(sequences={("GET", "enrich/company"): [ApiError("boom", 500), {"name": "Globex"}]})
        monkeypatch.setattr(enrich_domains, "jigsawstack_client", lambda rate_limiter=None: jigsaw)
        monkeypatch.setattr(enrich_domains, "crunchbase_client", lambda rate_limiter=None: FakeApi())

        assert enrich_domains.main(["--domains", "acme.io,globex.com", "--db", db_path]) == 0
        assert get_company_data("acme.io", db_path) is None
        assert get_company_data("globex.com", db_path)["name"] == "Globex"

    def test_all_failed(self, db_path, monkeypatch):
        """Test the job fails only when every domain fails."""
        jigsaw = FakeApi({("GET", "enrich/company"): ApiError("boom", 500)})
        monkeypatch.setattr(enrich_domains, "jigsawstack_client", lambda rate_limiter=None: jigsaw)
        monkeypatch.setattr(enrich_domains, "crunchbase_client", lambda rate_limiter=None: FakeApi())

        assert enrich_domains.main(["--domains", "acme.io,globex.com", "--db", db_path]) == 1
        assert len(jigsaw.calls) == 2

    def test_no_domains(self, db_path, tmp_path, monkeypatch):
        """Test an input with no domains is not an error and builds no clients."""
        def fail(*args, **kwargs):
            raise AssertionError("client built without domains")

        monkeypatch.setattr(enrich_domains, "jigsawstack_client", fail)
        path = tmp_path / "domains.txt"
        path.write_text("# nothing yet\n", encoding="utf-8")

        assert enrich_domains.main(["--file", str(path), "--db", db_path]) == 0


class TestRescanProfiles:
    """Test the profile rescan job."""

    SCRAPED = {"full name": "Ann Lee", "company": "Acme"}

    @pytest.fixture(autouse=True)
    def no_delay(self, monkeypatch):
        monkeypatch.setattr(settings, "scrape_delay_seconds", 0)

    def make_due(self, db_path, urls):
        """Store profiles and move their next scan into the past, oldest first."""
        for url in urls:
            save_scraped_profile({"url": url}, db_path, scan_interval_days=7)
        conn = duckdb.connect(db_path)
        for days_ago, url in enumerate(reversed(urls), start=1):
            conn.execute(
                "UPDATE scraped_profiles SET next_scan_date = ? WHERE url = ?",
                [datetime.now() - timedelta(days=days_ago), url]
            )
        conn.close()

    def test_nothing_due(self, db_path, monkeypatch):
        """Test an empty schedule exits cleanly without a client."""
        def fail(*args, **kwargs):
            raise AssertionError("client built with nothing due")

        monkeypatch.setattr(rescan_profiles, "jigsawstack_client", fail)
        save_scraped_profile({"url": "https://example.com/in/ann"}, db_path, scan_interval_days=7)

        assert rescan_profiles.main(["--db", db_path]) == 0

    def test_rescan_reschedules(self, db_path, monkeypatch):
        """Test due profiles are scraped and no longer due afterwards."""
        urls = ["https://example.com/in/ann", "https://example.com/in/bob"]
        self.make_due(db_path, urls)
        client = FakeApi({("POST", "ai/scrape"): self.SCRAPED})
        monkeypatch.setattr(rescan_profiles, "jigsawstack_client", lambda: client)

        assert rescan_profiles.main(["--db", db_path]) == 0

        assert [call[2]["url"] for call in client.calls] == urls
        assert load_due_profiles(db_path).empty
        due_later = load_due_profiles(db_path, as_of=datetime.now() + timedelta(days=8))
        assert list(due_later["scan_interval"]) == [7, 7]
        assert list(due_later["full_name"]) == ["Ann Lee", "Ann Lee"]

    def test_limit(self, db_path, monkeypatch):
        """Test --limit rescans only the oldest due profiles."""
        urls = ["https://example.com/in/ann", "https://example.com/in/bob", "https://example.com/in/cy"]
        self.make_due(db_path, urls)
        client = FakeApi({("POST", "ai/scrape"): self.SCRAPED})
        monkeypatch.setattr(rescan_profiles, "jigsawstack_client", lambda: client)

        assert rescan_profiles.main(["--db", db_path, "--limit", "2"]) == 0

        assert [call[2]["url"] for call in client.calls] == urls[:2]
        assert list(load_due_profiles(db_path)["url"]) == urls[2:]

    def test_failures_are_counted(self, db_path, monkeypatch, caplog):
        """Test a failed scrape is reported and stays due."""
        urls = ["https://example.com/in/ann", "https://example.com/in/bob"]
        self.make_due(db_path, urls)
        client = FakeApi(sequences={("POST", "ai/scrape"): [ApiError("timeout", 504), self.SCRAPED]})
        monkeypatch.setattr(rescan_profiles, "jigsawstack_client", lambda: client)
        caplog.set_level(logging.INFO, logger="leadgen")

        assert rescan_profiles.main(["--db", db_path]) == 0

        assert "Rescan complete: 1 succeeded, 1 failed" in caplog.text
        assert list(load_due_profiles(db_path)["url"]) == ["https://example.com/in/ann"]

    def test_custom_interval_survives_rescan(self, db_path, monkeypatch):
        """Test a rescan keeps each profile's own interval."""
        url = "https://example.com/in/ann"
        save_scraped_profile({"url": url}, db_path, scan_interval_days=30)
        conn = duckdb.connect(db_path)
        conn.execute("UPDATE scraped_profiles SET next_scan_date = ?", [datetime.now() - timedelta(days=1)])
        conn.close()
        monkeypatch.setattr(rescan_profiles, "jigsawstack_client", lambda: FakeApi({("POST", "ai/scrape"): self.SCRAPED}))

        assert rescan_profiles.main(["--db", db_path]) == 0

        assert load_due_profiles(db_path, as_of=datetime.now() + timedelta(days=29)).empty
        assert list(load_due_profiles(db_path, as_of=datetime.now() + timedelta(days=31))["scan_interval"]) == [30]

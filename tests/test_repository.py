"""Tests for the AFE queries against an in-memory SQLite database."""

import pytest
from sqlalchemy import create_engine

from afe_api.property_map import SUMMARY_PROPERTIES
from afe_api.queries import build_bulk_detail_query, build_list_query, build_text_search_query
from afe_api.repository import AFERepository
from afe_api.service import AFEService, flatten_property_rows
from afe_api.models import AFEBulkSearchRequest, AFEListParameters
from config import AppConfig
from infrastructure.sqlserver import DataSourceError, SqlServerClient

from conftest import add_property


@pytest.fixture
def repository(seeded_client):
    return AFERepository(client=seeded_client)


class TestQueryBuilders:

    def test_list_query_joins_summary_and_creator_attributes(self):
        sql = str(build_list_query(limit=10))

        assert sql.count("LEFT OUTER JOIN") == len(SUMMARY_PROPERTIES) + 2

    def test_search_text_is_bound(self):
        sql = str(build_text_search_query("Robert'); DROP TABLE tblContent;--", limit=10))

        assert "DROP TABLE" not in sql

    def test_bulk_query_requires_numbers(self):
        with pytest.raises(ValueError):
            build_bulk_detail_query([])


class TestListAFEs:

    def test_newest_first_and_afe_classes_only(self, repository):
        rows = repository.list_afes(limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-002", "AFE-001", "AFE-003"]

    def test_summary_columns(self, repository):
        row = repository.list_afes(limit=50, status="Approved")[0]

        assert row["afe_number"] == "AFE-001"
        assert row["type"] == "Drilling"
        assert row["area"] == "Montney"
        assert row["gross_budget"] == "1250000.50"
        assert row["created_by"] == "Jane Doe"

    def test_status_filter(self, repository):
        rows = repository.list_afes(limit=50, status="Approved")

        assert [r["afe_number"] for r in rows] == ["AFE-001", "AFE-003"]

    def test_unknown_status(self, repository):
        assert repository.list_afes(limit=50, status="Cancelled") == []

    def test_limit_and_offset(self, repository):
        first = repository.list_afes(limit=2, offset=0)
        second = repository.list_afes(limit=2, offset=2)

        assert [r["afe_number"] for r in first] == ["AFE-002", "AFE-001"]
        assert [r["afe_number"] for r in second] == ["AFE-003"]

    def test_offset_past_end(self, repository):
        assert repository.list_afes(limit=10, offset=100) == []

    def test_missing_attributes_are_null(self, repository):
        row = repository.list_afes(limit=1)[0]

        assert row["afe_number"] == "AFE-002"
        assert row["gross_budget"] is None
        assert row["created_by"] == " "


class TestSearchText:

    def test_matches_afe_number(self, repository):
        rows = repository.search_afes_text("AFE-00", limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-002", "AFE-001", "AFE-003"]

    def test_matches_name(self, repository):
        rows = repository.search_afes_text("Facility", limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-002"]

    def test_matches_area(self, repository):
        rows = repository.search_afes_text("Montney", limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-001", "AFE-003"]

    def test_matches_creator_full_name(self, repository):
        rows = repository.search_afes_text("Jane Doe", limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-001"]

    def test_matches_creator_last_name(self, repository):
        rows = repository.search_afes_text("Doe", limit=50)

        assert [r["afe_number"] for r in rows] == ["AFE-001"]

    def test_no_match(self, repository):
        assert repository.search_afes_text("Nowhere", limit=50) == []

    def test_paging(self, repository):
        rows = repository.search_afes_text("AFE-00", limit=1, offset=1)

        assert [r["afe_number"] for r in rows] == ["AFE-001"]


class TestFetchAFEProperties:

    def test_rows_for_requested_afes_only(self, repository):
        rows = repository.fetch_afe_properties(["AFE-002"])

        assert {r["afe_number"] for r in rows} == {"AFE-002"}
        assert len(rows) == 4

    def test_non_afe_content_excluded(self, repository):
        assert repository.fetch_afe_properties(["MEMO-1"]) == []

    def test_unknown_numbers(self, repository):
        assert repository.fetch_afe_properties(["AFE-404"]) == []

    def test_flattened_detail(self, repository):
        records = flatten_property_rows(repository.fetch_afe_properties(["AFE-001", "AFE-003"]))

        by_number = {r["afe_number"]: r for r in records}
        assert set(by_number) == {"AFE-001", "AFE-003"}
        assert by_number["AFE-001"]["gross_budget"] == 1250000.5
        assert by_number["AFE-001"]["afe_type"] == "Drilling"
        assert by_number["AFE-003"]["afe_status_text"] == "Approved"
        assert by_number["AFE-003"]["gross_budget"] is None

    def test_lowercase_attribute_ids(self, seeded_engine, repository):
        add_property(
            seeded_engine,
            "10000000-0000-0000-0000-000000000003",
            "52e32478-cd61-4e71-abea-870badb108d7",
            "CC-1001",
        )

        record = flatten_property_rows(repository.fetch_afe_properties(["AFE-003"]))[0]

        assert record["cost_center"] == "CC-1001"


class TestServiceAgainstDatabase:

    def test_list_envelope(self, repository):
        result = AFEService(repository=repository).list_afes(AFEListParameters(limit=3))

        assert result.pagination.count == 3
        assert result.pagination.has_more is True
        assert result.afes[1].gross_budget == 1250000.5

    def test_bulk_detail(self, repository):
        request = AFEBulkSearchRequest(afe_numbers=["AFE-001", "AFE-001"])

        records = AFEService(repository=repository).get_afe_details(request)

        assert len(records) == 1
        assert records[0]["surface_location"] == "01-02-003-04W5"


class TestSqlServerClient:

    def test_ping(self, sql_client):
        assert sql_client.ping() >= 0

    def test_pool_status_before_engine(self):
        assert SqlServerClient(config=AppConfig()).pool_status() == {}

    def test_pool_status(self, sql_client):
        sql_client.ping()

        assert "description" in sql_client.pool_status()

    def test_query_failure_wrapped(self):
        engine = create_engine("sqlite://")
        client = SqlServerClient(config=AppConfig(), engine=engine)

        with pytest.raises(DataSourceError, match="Database query failed"):
            AFERepository(client=client).list_afes(limit=10)

    def test_engine_requires_server(self):
        client = SqlServerClient(config=AppConfig())

        with pytest.raises(ValueError):
            client.engine

"""Pytest configuration and fixtures."""

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

import afe_api.config as afe_config_module
from afe_api.property_map import AFE_CLASS_GUIDS, CREATOR_PROPERTIES, SUMMARY_PROPERTIES
from afe_api.queries import content_table, metadata, property_strings_table
from config import AppConfig, get_app_config
from infrastructure.sqlserver import SqlServerClient, get_sql_client

ENV_VARS = [
    "SQL_SERVER_HOST", "SQL_SERVER", "SQL_INSTANCE_NAME", "SQL_PORT", "SQL_USER",
    "SQL_PASSWORD", "SQL_DATABASE", "SQL_DOMAIN", "API_KEY", "PORT",
    "AFE_DEFAULT_LIMIT", "AFE_MAX_LIMIT", "AFE_MAX_BULK_NUMBERS",
]

USER_CLASS_GUID = "00000000-0000-0000-0000-0000000000AA"
PUBLISHER_GUID = "00000000-0000-0000-0000-000000000001"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Clear configuration env vars and cached singletons for every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep any developer .env out of the picture
    monkeypatch.chdir(tmp_path)

    get_app_config.cache_clear()
    get_sql_client.cache_clear()
    afe_config_module._afe_config_cache = None
    yield
    get_app_config.cache_clear()
    get_sql_client.cache_clear()
    afe_config_module._afe_config_cache = None


@pytest.fixture
def engine():
    """In-memory SQLite database with the content tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_client(engine):
    return SqlServerClient(config=AppConfig(), engine=engine)


def add_content(engine, content_guid, name, class_guid=AFE_CLASS_GUIDS[0], publisher=None, properties=None):
    """
    Insert one content row plus its attribute rows.

    `properties` maps attribute GUID -> value (None values are stored as NULL).
    """
    with engine.begin() as conn:
        conn.execute(
            insert(content_table).values(
                Content_Guid=content_guid,
                Name=name,
                Class_Guid=class_guid,
                Publisher_User_Guid=publisher,
            )
        )
        for property_guid, value in (properties or {}).items():
            conn.execute(
                insert(property_strings_table).values(
                    Content_Guid=content_guid,
                    Property_Guid=property_guid,
                    Value=value,
                )
            )


def add_property(engine, content_guid, property_guid, value):
    with engine.begin() as conn:
        conn.execute(
            insert(property_strings_table).values(
                Content_Guid=content_guid,
                Property_Guid=property_guid,
                Value=value,
            )
        )


@pytest.fixture
def seeded_engine(engine):
    """
    Three AFEs, one non-AFE content row and the publishing user.

    AFE-001: Approved, created 2024-01-15, published by Jane Doe
    AFE-002: Draft, created 2024-03-01
    AFE-003: Approved, created 2023-11-30, supplement class
    MEMO-1:  not an AFE class
    """
    summary = SUMMARY_PROPERTIES

    add_content(
        engine, PUBLISHER_GUID, "jdoe", class_guid=USER_CLASS_GUID,
        properties={
            CREATOR_PROPERTIES["first_name"]: "Jane",
            CREATOR_PROPERTIES["last_name"]: "Doe",
        },
    )
    add_content(
        engine, "10000000-0000-0000-0000-000000000001", "AFE-001",
        publisher=PUBLISHER_GUID,
        properties={
            summary["status"]: "Approved",
            summary["type"]: "Drilling",
            summary["area"]: "Montney",
            summary["name"]: "Pad A Drill",
            summary["surface_location"]: "01-02-003-04W5",
            summary["gross_budget"]: "1250000.50",
            summary["net_budget"]: "625000.25",
            summary["working_interest_pct"]: "50",
            summary["date_created"]: "2024-01-15",
        },
    )
    add_content(
        engine, "10000000-0000-0000-0000-000000000002", "AFE-002",
        class_guid=AFE_CLASS_GUIDS[1],
        properties={
            summary["status"]: "Draft",
            summary["area"]: "Duvernay",
            summary["name"]: "Facility Upgrade",
            summary["date_created"]: "2024-03-01",
        },
    )
    add_content(
        engine, "10000000-0000-0000-0000-000000000003", "AFE-003",
        class_guid=AFE_CLASS_GUIDS[4],
        properties={
            summary["status"]: "Approved",
            summary["area"]: "Montney",
            summary["date_created"]: "2023-11-30",
        },
    )
    add_content(
        engine, "20000000-0000-0000-0000-000000000001", "MEMO-1",
        class_guid=USER_CLASS_GUID,
        properties={
            summary["status"]: "Approved",
            summary["area"]: "Montney",
        },
    )
    return engine


@pytest.fixture
def seeded_client(seeded_engine):
    return SqlServerClient(config=AppConfig(), engine=seeded_engine)

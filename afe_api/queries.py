# ============================================================================
# MODULE CONTEXT - AFE QUERY BUILDER
# ============================================================================
# STATUS: Standalone Module - SQL composition for the AFE endpoints
# PURPOSE: Build parameterized EAV queries against tblContent / tblProperty_Strings
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: metadata, content_table, property_strings_table,
#          build_list_query, build_text_search_query, build_bulk_detail_query
# DEPENDENCIES: sqlalchemy
# VALIDATION: SQL injection prevention via SQLAlchemy Core bound parameters
# PATTERNS: Query Builder, SQL Composition
# ============================================================================

"""
AFE Query Builder

Every AFE is a `tblContent` row whose attributes live in
`tblProperty_Strings`. The summary queries LEFT JOIN one aliased copy of the
property table per attribute, so each attribute becomes a column:

    SELECT c.Name AS afe_number, ps_status.Value AS status, ...
    FROM tblContent c
    LEFT JOIN tblProperty_Strings ps_status
        ON ps_status.Content_Guid = c.Content_Guid
       AND ps_status.Property_Guid = :guid
    ...
    WHERE c.Class_Guid IN (...)
    ORDER BY ps_date_created.Value DESC, c.Name DESC
    OFFSET :offset ROWS FETCH FIRST :limit ROWS ONLY

Safety:
- Queries are SQLAlchemy Core constructs (no string concatenation)
- Attribute ids, filters and search text are bound parameters
- The dialect renders pagination (OFFSET/FETCH on SQL Server)

Date: 19 OCT 2026
"""

from typing import Dict, Optional, Sequence

from sqlalchemy import Column, MetaData, String, Table, Unicode, and_, func, or_, select
from sqlalchemy.sql import Select
from sqlalchemy.sql.selectable import FromClause

from .property_map import AFE_CLASS_GUIDS, CREATOR_PROPERTIES, SUMMARY_PROPERTIES


metadata = MetaData()

content_table = Table(
    "tblContent",
    metadata,
    Column("Content_Guid", String(36), primary_key=True),
    Column("Name", Unicode(255)),
    Column("Class_Guid", String(36)),
    Column("Publisher_User_Guid", String(36)),
)

property_strings_table = Table(
    "tblProperty_Strings",
    metadata,
    Column("Content_Guid", String(36), index=True),
    Column("Property_Guid", String(36)),
    Column("Value", Unicode),
)


def _join_property(source: FromClause, owner_column, alias_name: str, property_guid: str):
    """LEFT JOIN one attribute of `owner_column`'s content row."""
    ps = property_strings_table.alias(alias_name)
    joined = source.outerjoin(
        ps,
        and_(
            ps.c.Content_Guid == owner_column,
            ps.c.Property_Guid == property_guid,
        ),
    )
    return joined, ps


def _summary_select(with_creator: bool = False):
    """
    Base SELECT projecting the summary attributes of every AFE content row.

    Returns:
        Tuple of (select, content alias, property aliases by label,
        creator name expression or None)
    """
    c = content_table.alias("c")
    source: FromClause = c

    props: Dict[str, FromClause] = {}
    for label, guid in SUMMARY_PROPERTIES.items():
        source, props[label] = _join_property(source, c.c.Content_Guid, f"ps_{label}", guid)

    columns = [
        c.c.Content_Guid.label("content_guid"),
        c.c.Name.label("afe_number"),
    ]
    columns.extend(props[label].c.Value.label(label) for label in SUMMARY_PROPERTIES)

    created_by = None
    if with_creator:
        # Creator names are attributes of the publishing user's content row
        source, first = _join_property(
            source, c.c.Publisher_User_Guid, "creator_first", CREATOR_PROPERTIES["first_name"]
        )
        source, last = _join_property(
            source, c.c.Publisher_User_Guid, "creator_last", CREATOR_PROPERTIES["last_name"]
        )
        # Same NULL handling as CONCAT(first, ' ', last)
        created_by = func.coalesce(first.c.Value, "") + " " + func.coalesce(last.c.Value, "")
        props["creator_first"] = first
        props["creator_last"] = last
        columns.append(created_by.label("created_by"))

    query = (
        select(*columns)
        .select_from(source)
        .where(c.c.Class_Guid.in_(AFE_CLASS_GUIDS))
        .order_by(props["date_created"].c.Value.desc(), c.c.Name.desc())
    )
    return query, c, props, created_by


def build_list_query(limit: int, offset: int = 0, status: Optional[str] = None) -> Select:
    """
    Page of AFE summaries, newest first.

    Args:
        limit: Page size
        offset: Rows to skip
        status: Optional exact match on the AFE status text

    Returns:
        SQLAlchemy Select
    """
    query, _, props, _ = _summary_select(with_creator=True)

    if status:
        query = query.where(props["status"].c.Value == status)

    return query.offset(offset).limit(limit)


def build_text_search_query(search_text: str, limit: int, offset: int = 0) -> Select:
    """
    Page of AFE summaries matching free text.

    Matches `%search_text%` against the AFE number, AFE name, area, the
    creator's first and last name and the "first last" creator name.

    Args:
        search_text: Caller-supplied text (LIKE wildcards are not escaped)
        limit: Page size
        offset: Rows to skip

    Returns:
        SQLAlchemy Select
    """
    query, c, props, created_by = _summary_select(with_creator=True)
    pattern = f"%{search_text}%"

    query = query.where(
        or_(
            c.c.Name.like(pattern),
            props["name"].c.Value.like(pattern),
            props["area"].c.Value.like(pattern),
            props["creator_first"].c.Value.like(pattern),
            props["creator_last"].c.Value.like(pattern),
            created_by.like(pattern),
        )
    )

    return query.offset(offset).limit(limit)


def build_bulk_detail_query(afe_numbers: Sequence[str]) -> Select:
    """
    Every attribute row of the AFEs named in `afe_numbers`.

    One result row per (content row, attribute row); content rows without
    attributes still appear once with NULL property columns.

    Args:
        afe_numbers: AFE numbers (tblContent.Name), at least one

    Returns:
        SQLAlchemy Select
    """
    if not afe_numbers:
        raise ValueError("afe_numbers must not be empty")

    c = content_table.alias("c")
    ps = property_strings_table.alias("ps")

    return (
        select(
            c.c.Content_Guid.label("content_guid"),
            c.c.Name.label("afe_number"),
            c.c.Class_Guid.label("class_guid"),
            ps.c.Property_Guid.label("property_guid"),
            ps.c.Value.label("field_value"),
        )
        .select_from(c.outerjoin(ps, ps.c.Content_Guid == c.c.Content_Guid))
        .where(
            c.c.Class_Guid.in_(AFE_CLASS_GUIDS),
            c.c.Name.in_(list(afe_numbers)),
        )
        .order_by(c.c.Name, c.c.Content_Guid)
    )

# ============================================================================
# MODULE CONTEXT - AFE REPOSITORY
# ============================================================================
# STATUS: Standalone Repository - content database access for AFEs
# PURPOSE: Execute the AFE queries through the pooled SQL Server client
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFERepository
# DEPENDENCIES: infrastructure.sqlserver, afe_api.queries, util_logger
# SOURCE: Content-management database (tblContent / tblProperty_Strings)
# SCOPE: Read-only AFE queries
# PATTERNS: Repository Pattern
# ============================================================================

"""
AFE Repository - Content Database Access

Thin layer over `SqlServerClient`: each method builds one statement, runs it
on a pooled connection and returns plain row dicts. Reshaping rows into API
records is the service layer's job.
"""

from typing import Any, Dict, List, Optional, Sequence

from infrastructure.sqlserver import SqlServerClient, get_sql_client
from util_logger import LoggerFactory, ComponentType, log_exceptions

from .queries import build_bulk_detail_query, build_list_query, build_text_search_query

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "AFERepository")


class AFERepository:
    """
    Repository for AFE content rows.

    Thread Safety:
    - Each call borrows its own pooled connection
    - Safe for concurrent requests in Azure Functions
    """

    def __init__(self, client: Optional[SqlServerClient] = None):
        """
        Initialize repository.

        Args:
            client: SQL Server client (uses the shared pooled client if not provided)
        """
        self.client = client or get_sql_client()

    @log_exceptions(logger=logger)
    def list_afes(self, limit: int, offset: int = 0, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch one page of AFE summary rows.

        Returns:
            Row dicts with keys content_guid, afe_number, the summary
            attribute labels and created_by
        """
        rows = self.client.fetch_all(build_list_query(limit=limit, offset=offset, status=status))
        logger.info(f"AFE list query returned {len(rows)} records")
        return rows

    @log_exceptions(logger=logger)
    def search_afes_text(self, search_text: str, limit: int, offset: int = 0) -> List[Dict[str, Any]]:
        """
        Fetch one page of AFE summary rows matching free text.
        """
        rows = self.client.fetch_all(build_text_search_query(search_text, limit=limit, offset=offset))
        logger.info(f'AFE text search for "{search_text}" returned {len(rows)} records')
        return rows

    @log_exceptions(logger=logger)
    def fetch_afe_properties(self, afe_numbers: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Fetch every attribute row of the named AFEs.

        Returns:
            Row dicts with keys content_guid, afe_number, class_guid,
            property_guid and field_value
        """
        rows = self.client.fetch_all(build_bulk_detail_query(afe_numbers))
        logger.info(f"AFE detail query for {len(afe_numbers)} AFE numbers returned {len(rows)} property rows")
        return rows

"""Turn paginated GetQueryResults output into typed records."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .column import Column, columns_from_metadata
from .query import Query
from .transport import AthenaTransport, ResultPage

logger = logging.getLogger(__name__)


def parse_rows(
    rows: Sequence[Sequence[Optional[str]]],
    columns: Sequence[Column],
    is_first_page: bool = False,
) -> List[Dict[str, Any]]:
    """Map raw rows to records keyed by column name.

    Cells pair with columns by position. Missing values become None.
    Duplicate column names overwrite each other, last one wins.

    Args:
        rows: Cell values per row
        columns: Bound columns for the query
        is_first_page: Skip row 0, which repeats the column names

    Returns:
        One dict per decoded row
    """
    start = 1 if is_first_page else 0
    results = []

    for row in rows[start:]:
        record: Dict[str, Any] = {}
        for column, value in zip(columns, row):
            record[column.name] = column.parse(value) if value is not None else None
        results.append(record)

    return results


class ResultPageDecoder:
    """Fetches result pages one at a time and accumulates typed records."""

    def __init__(self, transport: AthenaTransport, page_size: Optional[int] = None):
        self.transport = transport
        self.page_size = page_size

    def decode_page(self, query: Query, page: ResultPage, next_token: Optional[str]) -> List[Dict[str, Any]]:
        """Decode one page and append its records to ``query.results``.

        Args:
            query: Query the page belongs to
            page: Page returned by the transport
            next_token: Cursor this page was fetched with, None for the first fetch
        """
        if not query.has_columns():
            query.bind_columns(columns_from_metadata(page.column_info))

        # Header row only appears on an initial fetch before anything accumulated
        is_first_page = not query.has_results() and next_token is None
        records = parse_rows(page.rows, query.columns, is_first_page=is_first_page)
        query.add_results(records)
        return records

    def drain(self, query: Query) -> List[Dict[str, Any]]:
        """Fetch every page of a finished query, in order.

        Returns:
            All records accumulated on the query
        """
        next_token: Optional[str] = None
        pages = 0

        while True:
            page = self.transport.fetch_result_page(
                query.execution_id,
                next_token=next_token,
                max_results=self.page_size,
            )
            pages += 1
            records = self.decode_page(query, page, next_token)
            logger.debug(
                f"Query {query.execution_id}: page {pages} decoded {len(records)} rows"
            )

            if not page.next_token:
                break
            next_token = page.next_token

        return query.results

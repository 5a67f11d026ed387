"""Registry of in-flight queries, keyed by caller-supplied ID."""

import logging
import threading
from typing import List

from .exceptions import QueryNotFoundError
from .query import Query

logger = logging.getLogger(__name__)


class QueryQueue:
    """Insertion-ordered set of queries owned by one client.

    Queries are held by reference; the lifecycle controller that created a
    query owns it. Safe to share between threads.
    """

    def __init__(self):
        self._queries: List[Query] = []
        self._lock = threading.Lock()

    @property
    def queries(self) -> List[Query]:
        """Snapshot of registered queries in submission order."""
        with self._lock:
            return list(self._queries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._queries)

    def add_query(self, query: Query) -> None:
        # IDs are not checked for uniqueness; lookups return the first match
        with self._lock:
            self._queries.append(query)
        logger.debug(f"Registered query {query.id!r} ({len(self)} in flight)")

    def remove_query(self, query: Query) -> None:
        with self._lock:
            for index, registered in enumerate(self._queries):
                if registered is query:
                    del self._queries[index]
                    break

    def get_query_by_id(self, query_id: str) -> Query:
        """Return the first registered query with the given ID.

        Raises:
            QueryNotFoundError: If no registered query has that ID
        """
        with self._lock:
            for query in self._queries:
                if query.id is not None and query.id == query_id:
                    return query

        raise QueryNotFoundError(query_id)

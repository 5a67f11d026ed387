"""Drive one Athena query from submission to a terminal state."""

import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import AthenaClientConfig
from .decoder import ResultPageDecoder
from .exceptions import (
    AthenaClientError,
    QueryCancelledError,
    QueryFailedError,
    QueryNotStartedError,
    UnsupportedStatusError,
)
from .query import Query, QueryStatus
from .queue import QueryQueue
from .transport import AthenaTransport

logger = logging.getLogger(__name__)

PENDING_STATES = (QueryStatus.QUEUED, QueryStatus.RUNNING)


class LifecyclePhase(Enum):
    """Where the controller is in the submit, poll, drain sequence."""

    CREATED = "CREATED"
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class QueryLifecycle:
    """
    Owns a single query while it runs.

    Flow:
    1. Register the query in the client's queue
    2. Start the execution and record Athena's execution ID
    3. Poll the execution state every ``wait_time`` seconds
    4. On SUCCEEDED, drain result pages into typed records

    FAILED, CANCELLED and unknown states remove the query from the queue
    and raise. Transport errors propagate unchanged and leave the query
    registered. A successful query also stays registered.
    """

    def __init__(
        self,
        query: Query,
        transport: AthenaTransport,
        queue: QueryQueue,
        config: AthenaClientConfig,
        output_location: Optional[str] = None,
        decoder: Optional[ResultPageDecoder] = None,
    ):
        self.query = query
        self.transport = transport
        self.queue = queue
        self.config = config
        self.output_location = output_location or config.bucket_uri
        self.decoder = decoder or ResultPageDecoder(transport, page_size=config.page_size)
        self.phase = LifecyclePhase.CREATED
        self.status_history: List[str] = []

    def execute(self) -> List[Dict[str, Any]]:
        """Run the query to completion and return its typed records."""
        self.run_until_succeeded()
        results = self.decoder.drain(self.query)
        logger.info(
            f"Query {self.query.execution_id} returned {len(results)} rows"
        )
        return results

    def run_until_succeeded(self) -> Query:
        """Submit the query and block until Athena reports SUCCEEDED."""
        self.submit()
        self.wait_until_succeeded()
        return self.query

    def submit(self) -> str:
        self.queue.add_query(self.query)

        execution_id = self.transport.submit(
            self.query.sql,
            self.config.database,
            output_location=self.output_location,
            work_group=self.config.work_group,
        )
        self.query.assign_execution_id(execution_id)
        self.phase = LifecyclePhase.SUBMITTED

        logger.info(f"Started Athena query {execution_id} (id={self.query.id!r})")
        return execution_id

    def wait_until_succeeded(self) -> None:
        """Poll until a terminal state.

        Raises:
            QueryFailedError: Athena reported FAILED
            QueryCancelledError: Athena reported CANCELLED
            UnsupportedStatusError: Athena reported an unknown state
            TransportError: A status call failed; the query stays registered
        """
        if not self.query.execution_id:
            raise QueryNotStartedError("Query must be submitted before polling")

        execution_id = self.query.execution_id
        interval_seconds = self.config.poll_interval_ms / 1000
        self.phase = LifecyclePhase.POLLING

        while True:
            state, reason = self.transport.poll_status(execution_id)
            self.query.status = state
            self.status_history.append(state)
            logger.debug(f"Query {execution_id} is {state}")

            if state == QueryStatus.SUCCEEDED:
                self.phase = LifecyclePhase.SUCCEEDED
                return

            if state in PENDING_STATES:
                time.sleep(interval_seconds)
                continue

            if state == QueryStatus.FAILED:
                self._abort(LifecyclePhase.FAILED, QueryFailedError(execution_id, reason))
            elif state == QueryStatus.CANCELLED:
                self._abort(LifecyclePhase.CANCELLED, QueryCancelledError(execution_id))
            else:
                self._abort(LifecyclePhase.FAILED, UnsupportedStatusError(state, execution_id))

    def _abort(self, phase: LifecyclePhase, error: AthenaClientError) -> None:
        self.phase = phase
        self.queue.remove_query(self.query)
        logger.warning(f"Query {self.query.execution_id} stopped: {error}")
        raise error


def cancel_query(queue: QueryQueue, transport: AthenaTransport, query_id: str) -> None:
    """Ask Athena to stop the in-flight query registered under ``query_id``.

    The query's status is not touched here; its poller observes CANCELLED
    on the next tick.

    Raises:
        QueryNotFoundError: No registered query has that ID
        QueryNotStartedError: The query has no execution ID yet
    """
    query = queue.get_query_by_id(query_id)
    if not query.execution_id:
        raise QueryNotStartedError(f"Query {query_id!r} has not been submitted yet")

    logger.info(f"Cancelling Athena query {query.execution_id} (id={query_id!r})")
    transport.cancel(query.execution_id)

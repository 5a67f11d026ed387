"""
Athena Client

Runs SQL on AWS Athena and returns typed rows, or points at the CSV
export Athena writes to S3.
"""

import csv
import io
import logging
from typing import Any, Dict, List, Optional

from .config import AthenaClientConfig
from .exceptions import ConfigurationError
from .formatting import format_query
from .lifecycle import QueryLifecycle, cancel_query
from .query import Query
from .queue import QueryQueue
from .transport import AthenaTransport
from .type_checker import infer_value

logger = logging.getLogger(__name__)


class AthenaClient:
    """Client for running queries against AWS Athena.

    One client owns one queue of in-flight queries; queries started with a
    caller-supplied ``query_id`` can be cancelled through it from another
    thread while they run.
    """

    def __init__(
        self,
        config: AthenaClientConfig,
        transport: Optional[AthenaTransport] = None,
    ):
        """Initialize client.

        Args:
            config: Athena client configuration
            transport: AWS transport; built from ``config.region`` when omitted
        """
        config.validate()
        self.config = config
        self.transport = transport or AthenaTransport(region=config.region)
        self.queue = QueryQueue()

    def execute_query(
        self,
        sql: str,
        parameters: Any = None,
        query_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Execute a query and return its rows as typed dictionaries.

        Args:
            sql: SQL to execute, optionally with placeholders
            parameters: Values for the placeholders
            query_id: Your own ID, usable with cancel_query

        Returns:
            One dict per result row, keyed by column name

        Raises:
            QueryFailedError: Athena reported FAILED
            QueryCancelledError: The query was cancelled
            UnsupportedStatusError: Athena reported an unknown state
            UnsupportedColumnTypeError: A result column has no parser
            ValidationError: A cell does not match its column type
            TransportError: An AWS call failed
        """
        return self._lifecycle(sql, parameters, query_id).execute()

    def execute_query_and_get_s3_url(
        self,
        sql: str,
        parameters: Any = None,
        query_id: Optional[str] = None,
    ) -> str:
        """Execute a query and return the S3 URI of its CSV export."""
        query = self._lifecycle(sql, parameters, query_id).run_until_succeeded()
        return self._result_uri(query)

    def execute_query_and_get_signed_url(
        self,
        sql: str,
        parameters: Any = None,
        query_id: Optional[str] = None,
        expires_in: int = 3600,
    ) -> str:
        """Execute a query and return a presigned HTTPS URL to its CSV export."""
        uri = self.execute_query_and_get_s3_url(sql, parameters, query_id)
        return self.transport.presign(uri, expires_in=expires_in)

    def execute_query_and_get_raw_rows(
        self,
        sql: str,
        parameters: Any = None,
        query_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Execute a query and read its CSV export back from S3.

        The export has no schema, so each cell is typed from its shape.
        Empty cells become None.
        """
        uri = self.execute_query_and_get_s3_url(sql, parameters, query_id)
        content = self.transport.read_object(uri)

        rows = []
        for row in csv.DictReader(io.StringIO(content)):
            rows.append({
                name: infer_value(value) if value != "" else None
                for name, value in row.items()
            })

        logger.info(f"Read {len(rows)} rows from {uri}")
        return rows

    def cancel_query(self, query_id: str) -> None:
        """Cancel a running query by the ID you supplied when starting it.

        Raises:
            QueryNotFoundError: No in-flight query has that ID
        """
        cancel_query(self.queue, self.transport, query_id)

    def get_work_group_details(self) -> Dict[str, Any]:
        """Return the configured Athena WorkGroup description."""
        if not self.config.work_group:
            raise ConfigurationError("You must define an AWS Athena WorkGroup")
        return self.transport.get_work_group(self.config.work_group)

    def get_output_s3_bucket(self) -> str:
        """Return the S3 URI Athena writes results to.

        Uses ``bucket_uri`` when configured, otherwise the WorkGroup's
        result configuration.
        """
        if self.config.bucket_uri:
            bucket = self.config.bucket_uri
        elif self.config.work_group:
            work_group = self.get_work_group_details()
            bucket = (
                work_group.get('Configuration', {})
                .get('ResultConfiguration', {})
                .get('OutputLocation')
            )
            if not bucket:
                raise ConfigurationError(
                    f"WorkGroup '{self.config.work_group}' has no output location"
                )
        else:
            raise ConfigurationError("You must define a S3 Bucket URI and/or a WorkGroup")

        return bucket if bucket.endswith('/') else bucket + '/'

    def _lifecycle(self, sql: str, parameters: Any, query_id: Optional[str]) -> QueryLifecycle:
        query = Query(
            original_sql=sql,
            sql=format_query(sql, parameters),
            parameters=parameters,
            id=query_id,
        )
        return QueryLifecycle(query, self.transport, self.queue, self.config)

    def _result_uri(self, query: Query) -> str:
        return f"{self.get_output_s3_bucket()}{query.execution_id}.csv"

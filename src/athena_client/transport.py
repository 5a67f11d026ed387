"""boto3-backed access to Athena and to the S3 bucket holding its output."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import TransportError
from .lazy_init import LazyClient

logger = logging.getLogger(__name__)


@dataclass
class ResultPage:
    """One page of ``GetQueryResults`` output.

    Attributes:
        column_info: ``ResultSetMetadata.ColumnInfo`` entries
        rows: Cell values per row; None where Athena sent no VarCharValue
        next_token: Continuation cursor, None on the last page
    """

    column_info: List[Dict[str, Any]] = field(default_factory=list)
    rows: List[List[Optional[str]]] = field(default_factory=list)
    next_token: Optional[str] = None


def split_s3_uri(uri: str) -> Tuple[str, str]:
    """Split ``s3://bucket/key`` into bucket and key."""
    parsed = urlparse(uri)
    if parsed.scheme != "s3" or not parsed.netloc:
        raise ValueError(f"Not an S3 URI: {uri}")
    return parsed.netloc, parsed.path.lstrip("/")


class AthenaTransport:
    """Thin wrapper over the Athena and S3 APIs used by the client.

    Every botocore error is re-raised as TransportError; nothing here retries.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        athena_client: Any = None,
        s3_client: Any = None,
    ):
        """Initialize transport.

        Args:
            region: AWS region; boto3's default resolution applies when None
            athena_client: Pre-built boto3 Athena client
            s3_client: Pre-built boto3 S3 client
        """
        self.region = region
        if athena_client is not None:
            self._athena = LazyClient.of(athena_client, name="athena")
        else:
            self._athena = LazyClient(lambda: boto3.client("athena", region_name=region), name="athena")
        if s3_client is not None:
            self._s3 = LazyClient.of(s3_client, name="s3")
        else:
            self._s3 = LazyClient(lambda: boto3.client("s3", region_name=region), name="s3")

    @property
    def athena(self):
        return self._athena.get()

    @property
    def s3(self):
        return self._s3.get()

    def _call(self, operation: str, func, **kwargs) -> Dict[str, Any]:
        try:
            return func(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"{operation} failed: {str(e)}", operation, e) from e

    def submit(
        self,
        query_text: str,
        database: str,
        output_location: Optional[str] = None,
        work_group: Optional[str] = None,
    ) -> str:
        """Start a query execution and return its QueryExecutionId."""
        params: Dict[str, Any] = {
            "QueryString": query_text,
            "QueryExecutionContext": {"Database": database},
        }
        if output_location:
            params["ResultConfiguration"] = {"OutputLocation": output_location}
        if work_group:
            params["WorkGroup"] = work_group

        response = self._call("StartQueryExecution", self.athena.start_query_execution, **params)
        return response["QueryExecutionId"]

    def poll_status(self, execution_id: str) -> Tuple[str, Optional[str]]:
        """Return the execution state and its StateChangeReason, if any."""
        response = self._call(
            "GetQueryExecution",
            self.athena.get_query_execution,
            QueryExecutionId=execution_id,
        )
        status = response["QueryExecution"]["Status"]
        return status["State"], status.get("StateChangeReason")

    def fetch_result_page(
        self,
        execution_id: str,
        next_token: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ResultPage:
        params: Dict[str, Any] = {"QueryExecutionId": execution_id}
        if next_token:
            params["NextToken"] = next_token
        if max_results:
            params["MaxResults"] = max_results

        response = self._call("GetQueryResults", self.athena.get_query_results, **params)
        result_set = response.get("ResultSet", {})

        rows = [
            [cell.get("VarCharValue") if cell else None for cell in row.get("Data", [])]
            for row in result_set.get("Rows", [])
        ]

        return ResultPage(
            column_info=result_set.get("ResultSetMetadata", {}).get("ColumnInfo", []),
            rows=rows,
            next_token=response.get("NextToken"),
        )

    def cancel(self, execution_id: str) -> None:
        self._call(
            "StopQueryExecution",
            self.athena.stop_query_execution,
            QueryExecutionId=execution_id,
        )

    def get_work_group(self, name: str) -> Dict[str, Any]:
        response = self._call("GetWorkGroup", self.athena.get_work_group, WorkGroup=name)
        return response["WorkGroup"]

    def read_object(self, uri: str) -> str:
        """Download an S3 object and decode it as UTF-8 text."""
        bucket, key = split_s3_uri(uri)
        response = self._call("GetObject", self.s3.get_object, Bucket=bucket, Key=key)
        return response["Body"].read().decode("utf-8")

    def presign(self, uri: str, expires_in: int = 3600) -> str:
        """Return a presigned GET URL for an S3 object."""
        bucket, key = split_s3_uri(uri)
        try:
            return self.s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Presigning {uri} failed: {str(e)}", "GeneratePresignedUrl", e) from e

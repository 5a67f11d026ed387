"""
Athena Client - Unit Test Configuration

Pytest fixtures specific to unit tests.
"""

import pytest
from unittest.mock import MagicMock

from athena_client.config import AthenaClientConfig
from athena_client.transport import AthenaTransport


def build_results_page(columns, rows, next_token=None, include_header=False):
    """Build a GetQueryResults response.

    Args:
        columns: List of (name, type) tuples
        rows: List of rows; None cells are sent without VarCharValue
        next_token: Continuation cursor for the page
        include_header: Prepend the column-name row Athena puts on page one
    """
    raw_rows = []
    if include_header:
        raw_rows.append({'Data': [{'VarCharValue': name} for name, _ in columns]})

    for row in rows:
        raw_rows.append({
            'Data': [{} if value is None else {'VarCharValue': value} for value in row]
        })

    response = {
        'ResultSet': {
            'Rows': raw_rows,
            'ResultSetMetadata': {
                'ColumnInfo': [{'Name': name, 'Type': type_} for name, type_ in columns]
            }
        }
    }
    if next_token:
        response['NextToken'] = next_token
    return response


def build_execution(state, reason=None):
    """Build a GetQueryExecution response."""
    status = {'State': state}
    if reason:
        status['StateChangeReason'] = reason
    return {'QueryExecution': {'QueryExecutionId': 'exec-123', 'Status': status}}


@pytest.fixture
def results_page():
    """Factory for GetQueryResults responses"""
    return build_results_page


@pytest.fixture
def execution_status():
    """Factory for GetQueryExecution responses"""
    return build_execution


@pytest.fixture
def mock_athena():
    """Mock boto3 Athena client"""
    client = MagicMock()
    client.start_query_execution.return_value = {'QueryExecutionId': 'exec-123'}
    client.get_query_execution.return_value = build_execution('SUCCEEDED')
    return client


@pytest.fixture
def transport(mock_athena):
    """Transport backed by the mock Athena client"""
    return AthenaTransport(athena_client=mock_athena, s3_client=MagicMock())


@pytest.fixture
def config():
    """Minimal valid client configuration"""
    return AthenaClientConfig(
        database='analytics',
        bucket_uri='s3://test-athena-results/output/',
        wait_time=1,
    )

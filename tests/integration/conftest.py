"""
Athena Client - Integration Test Configuration

Pytest fixtures for integration tests with mocked AWS services.
"""

import pytest
import boto3
from moto import mock_aws

from athena_client.transport import AthenaTransport


@pytest.fixture(scope='function')
def aws_integration_env(mock_aws_credentials):
    """Set up AWS integration environment with moto"""
    with mock_aws():
        yield {
            's3': boto3.client('s3', region_name='us-east-1'),
            'athena': boto3.client('athena', region_name='us-east-1'),
        }


@pytest.fixture
def output_bucket(aws_integration_env):
    """Create the query output bucket"""
    bucket_name = 'test-query-output'
    aws_integration_env['s3'].create_bucket(Bucket=bucket_name)
    return bucket_name


@pytest.fixture
def moto_transport(aws_integration_env):
    """Transport backed by moto clients"""
    return AthenaTransport(
        athena_client=aws_integration_env['athena'],
        s3_client=aws_integration_env['s3'],
    )

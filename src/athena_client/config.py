"""
Configuration for the Athena client.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

# GetQueryResults accepts at most 1000 rows per page
MAX_PAGE_SIZE = 1000


@dataclass
class AthenaClientConfig:
    """Settings shared by every query a client runs."""

    database: str
    bucket_uri: Optional[str] = None
    work_group: Optional[str] = None
    wait_time: int = 1  # seconds between status polls
    region: Optional[str] = None
    page_size: Optional[int] = None

    @property
    def poll_interval_ms(self) -> int:
        return self.wait_time * 1000

    def validate(self) -> bool:
        """Check that the configuration can run queries.

        Raises:
            ConfigurationError: If a required value is missing or out of range
        """
        if not self.database:
            raise ConfigurationError("An Athena database is required")
        if isinstance(self.wait_time, bool) or not isinstance(self.wait_time, int):
            raise ConfigurationError("wait_time must be a whole number of seconds")
        if self.wait_time < 0:
            raise ConfigurationError("wait_time cannot be negative")
        if self.page_size is not None and not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigurationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if not self.bucket_uri and not self.work_group:
            raise ConfigurationError("You must define a S3 Bucket URI and/or a WorkGroup")
        return True

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]] = None) -> 'AthenaClientConfig':
        """Create config from dictionary."""
        config_dict = config_dict or {}
        page_size = config_dict.get('page_size')

        return cls(
            database=config_dict.get('database', ''),
            bucket_uri=config_dict.get('bucket_uri'),
            work_group=config_dict.get('work_group'),
            wait_time=int(config_dict.get('wait_time', 1)),
            region=config_dict.get('region'),
            page_size=int(page_size) if page_size is not None else None,
        )

    @classmethod
    def from_environment(cls) -> 'AthenaClientConfig':
        """Create config from environment variables."""
        page_size = os.environ.get('ATHENA_PAGE_SIZE')

        return cls(
            database=os.environ.get('ATHENA_DATABASE', ''),
            bucket_uri=os.environ.get('ATHENA_BUCKET_URI') or None,
            work_group=os.environ.get('ATHENA_WORK_GROUP') or None,
            wait_time=int(os.environ.get('ATHENA_WAIT_TIME', '1')),
            region=os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION'),
            page_size=int(page_size) if page_size else None,
        )

    @classmethod
    def from_yaml(cls, yaml_content: str) -> 'AthenaClientConfig':
        """Create config from a YAML document."""
        data = yaml.safe_load(yaml_content)
        if data is not None and not isinstance(data, dict):
            raise ConfigurationError("Athena client YAML config must be a mapping")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'database': self.database,
            'bucket_uri': self.bucket_uri,
            'work_group': self.work_group,
            'wait_time': self.wait_time,
            'region': self.region,
            'page_size': self.page_size,
        }

"""Deferred creation of boto3 clients.

Building a boto3 client resolves credentials and endpoint data, so the
transport only does it on the first AWS call instead of at construction.
"""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class LazyClient(Generic[T]):
    """Create a client on first use and reuse it afterwards.

    Thread-safe: concurrent first calls build exactly one instance.

    Example:
        athena = LazyClient(lambda: boto3.client('athena'), name='athena')
        athena.get().start_query_execution(...)
    """

    def __init__(self, factory: Callable[[], T], name: str = "client"):
        self._factory = factory
        self._name = name
        self._instance: Optional[T] = None
        self._lock = threading.Lock()

    @classmethod
    def of(cls, instance: T, name: str = "client") -> "LazyClient[T]":
        """Wrap an already-built client."""
        lazy = cls(lambda: instance, name=name)
        lazy._instance = instance
        return lazy

    @property
    def initialized(self) -> bool:
        return self._instance is not None

    def get(self) -> T:
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    logger.debug(f"Creating {self._name} client")
                    self._instance = self._factory()
        return self._instance

    def reset(self) -> None:
        """Drop the cached client so the next call builds a fresh one."""
        with self._lock:
            self._instance = None

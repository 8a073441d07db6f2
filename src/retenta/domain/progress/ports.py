"""
Ports (interfaces) for progress persistence.

These define the contract that infrastructure adapters must implement.
The scheduler itself never calls them; application services read before
and write after each scheduling step.
"""

from abc import ABC, abstractmethod

from .models import ProgressRecord


class ProgressRepository(ABC):
    """
    Port for a key-value store of progress records.

    Implementations:
        - InMemoryProgressRepository: Process-local dict, used by tests.
        - JsonFileProgressRepository: A single JSON document on disk (CLI and server).
    """

    @abstractmethod
    async def get(self, item: str) -> ProgressRecord | None:
        """
        Fetch the record stored under an item key.

        Returns:
            The record, or None if the item has never been reviewed.
        """
        pass

    @abstractmethod
    async def set(self, item: str, record: ProgressRecord) -> None:
        """
        Store a record under an item key, replacing any previous value.
        """
        pass

    @abstractmethod
    async def all(self) -> dict[str, ProgressRecord]:
        """
        Return a snapshot of every stored record, in insertion order.
        """
        pass

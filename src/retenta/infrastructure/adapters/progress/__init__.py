# Progress Infrastructure Adapters
from .json_store import JsonFileProgressRepository
from .memory_store import InMemoryProgressRepository

__all__ = ["InMemoryProgressRepository", "JsonFileProgressRepository"]

"""Storage collaborators: the contract, the PostgREST client and an in-memory store."""

from speedform.storage.base import ATHLETES, USERS, WEEKLY_DATA, Row, Storage
from speedform.storage.errors import StorageFailure
from speedform.storage.memory import InMemoryStorage
from speedform.storage.postgrest import PostgrestStorage, get_storage

__all__ = [
    "ATHLETES",
    "USERS",
    "WEEKLY_DATA",
    "InMemoryStorage",
    "PostgrestStorage",
    "Row",
    "Storage",
    "StorageFailure",
    "get_storage",
]

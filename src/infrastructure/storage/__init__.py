"""Storage infrastructure."""

from src.infrastructure.storage.json_store import JsonFileStore

__all__ = ["JsonFileStore"]

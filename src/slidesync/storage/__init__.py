"""Durable storage for theme selections."""

from .backends import JsonFileBackend, KeyValueBackend, MemoryBackend, default_store_path
from .store import MigrationReport, ThemeStore

__all__ = [
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "MigrationReport",
    "ThemeStore",
    "default_store_path",
]

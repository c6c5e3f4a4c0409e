"""
Repository layer for record persistence.

This module contains all storage access, encapsulating SQL and serialization.
"""
from maternal_svc.repositories.base import Database
from maternal_svc.repositories.record_store import RECORD_FORMAT_VERSION, RecordStore

__all__ = [
    "Database",
    "RecordStore",
    "RECORD_FORMAT_VERSION",
]

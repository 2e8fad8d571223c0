"""
Repository layer: the Data Store interface and its SQLAlchemy implementation.
"""

from pos_api.repositories.base import DataStore
from pos_api.repositories.sql_store import SqlDataStore

__all__ = ["DataStore", "SqlDataStore"]

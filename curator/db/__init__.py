"""Database clients for the legacy metadata database."""

from curator.db.legacy_dataset_client import LegacyDatasetClient, DatabaseError

__all__ = ['LegacyDatasetClient', 'DatabaseError']

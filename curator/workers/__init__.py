"""Workers package for background tasks."""

from curator.workers.save_worker import ResourceSaveWorker
from curator.workers.legacy_load_worker import LegacyLoadWorker

__all__ = ['ResourceSaveWorker', 'LegacyLoadWorker']

"""Worker for loading a legacy dataset into the editor."""

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from curator.db.legacy_dataset_client import (
    ConnectionError as DBConnectionError,
    DatabaseError,
    LegacyDatasetClient,
)
from curator.db.legacy_loader import LegacyDatasetLoader, LegacyDatasetNotFoundError
from curator.utils.credential_manager import CredentialStorageError, load_db_credentials


logger = logging.getLogger(__name__)


class LegacyLoadWorker(QObject):
    """Worker loading one legacy dataset as an editor record."""

    # Signals
    progress_update = Signal(str)  # status message
    finished = Signal(dict)  # external record for ResourceFormState.from_initial
    error_occurred = Signal(str)  # error message

    def __init__(
        self,
        resource_id: Optional[int] = None,
        doi: Optional[str] = None,
        client_factory: Callable[..., LegacyDatasetClient] = LegacyDatasetClient
    ):
        """
        Initialize the load worker.

        Args:
            resource_id: Legacy resource id
            doi: DOI to resolve when no resource id is given
            client_factory: Builds the database client from stored credentials
        """
        super().__init__()
        self.resource_id = resource_id
        self.doi = doi
        self.client_factory = client_factory

    def run(self):
        """Load credentials, connect, resolve the dataset and emit the record."""
        self.progress_update.emit("Loading database credentials...")

        try:
            credentials = load_db_credentials()
        except CredentialStorageError as e:
            self.error_occurred.emit(str(e))
            return

        if not credentials:
            self.error_occurred.emit("No database credentials configured.")
            return

        client = self.client_factory(
            host=credentials['host'],
            database=credentials['database'],
            username=credentials['username'],
            password=credentials['password']
        )

        try:
            resource_id = self.resource_id
            if resource_id is None:
                if not self.doi:
                    self.error_occurred.emit("No resource id or DOI given.")
                    return
                self.progress_update.emit(f"Resolving DOI {self.doi}...")
                resource_id = client.get_resource_id_for_doi(self.doi)
                if resource_id is None:
                    self.error_occurred.emit(f"DOI {self.doi} not found in the legacy database.")
                    return

            self.progress_update.emit(f"Loading dataset {resource_id}...")
            record = LegacyDatasetLoader(client).load_for_editor(resource_id)

        except LegacyDatasetNotFoundError as e:
            self.error_occurred.emit(str(e))
            return
        except DBConnectionError as e:
            logger.error(f"Legacy database unreachable: {e}")
            self.error_occurred.emit(f"Database connection failed: {e}")
            return
        except DatabaseError as e:
            logger.error(f"Failed to load legacy dataset: {e}")
            self.error_occurred.emit(f"Failed to load dataset: {e}")
            return

        self.progress_update.emit(
            f"Loaded {len(record['authors'])} authors and {len(record['contributors'])} contributors"
        )
        self.finished.emit(record)

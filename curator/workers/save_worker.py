"""Worker for saving a resource in the background."""

import logging
from typing import Any, Dict, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from curator.api.resource_client import (
    MissingCsrfTokenError,
    NetworkError,
    ResourceClient,
    ResourceSaveError,
    ValidationError,
)


logger = logging.getLogger(__name__)


class ResourceSaveWorker(QObject):
    """Worker posting one save payload to the resource endpoint."""

    # Signals
    finished = Signal(dict)  # response data (always with "message")
    validation_failed = Signal(str, list)  # message, flattened field errors
    error_occurred = Signal(str)  # error message

    def __init__(
        self,
        payload: Dict[str, Any],
        save_url: str,
        html_content: Optional[str] = None,
        cookies: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
        client: Optional[ResourceClient] = None
    ):
        """
        Initialize the save worker.

        Args:
            payload: Save payload from ResourceFormState.build_payload()
            save_url: Resource save endpoint
            html_content: Editor page HTML (csrf-token meta tag)
            cookies: Session cookies (XSRF-TOKEN fallback)
            timeout: Request timeout in seconds
            client: Pre-built client, mainly for tests
        """
        super().__init__()
        self.payload = payload
        self.save_url = save_url
        self.html_content = html_content
        self.cookies = cookies
        self.timeout = timeout
        self.client = client

    def run(self):
        """Send the payload and report the outcome through signals."""
        client = self.client or ResourceClient(
            save_url=self.save_url,
            html_content=self.html_content,
            cookies=self.cookies,
            timeout=self.timeout
        )

        try:
            result = client.save_resource(self.payload)
        except ValidationError as e:
            logger.warning(f"Resource save rejected: {e.message}")
            self.validation_failed.emit(e.message, list(e.errors))
            return
        except (MissingCsrfTokenError, NetworkError) as e:
            logger.error(f"Resource save failed: {e}")
            self.error_occurred.emit(str(e))
            return
        except ResourceSaveError as e:
            logger.error(f"Unexpected save error: {e}")
            self.error_occurred.emit(str(e))
            return

        self.finished.emit(result)

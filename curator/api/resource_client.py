"""Client posting resource payloads to the curation save endpoint."""

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from curator.api.csrf import build_csrf_headers


logger = logging.getLogger(__name__)


class ResourceSaveError(Exception):
    """Base exception for resource save errors."""
    pass


class MissingCsrfTokenError(ResourceSaveError):
    """Raised when no anti-forgery token is available."""

    DEFAULT_MESSAGE = "Missing security token. Please refresh the page and try again."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class ValidationError(ResourceSaveError):
    """Raised when the endpoint rejects the payload."""

    DEFAULT_MESSAGE = "Unable to save resource. Please review the highlighted issues."

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None, status_code: Optional[int] = None):
        self.message = message or self.DEFAULT_MESSAGE
        self.errors = errors or []
        self.status_code = status_code
        super().__init__(self.message)


class NetworkError(ResourceSaveError):
    """Raised when the request could not be completed."""

    DEFAULT_MESSAGE = "A network error prevented saving the resource. Please try again."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


def flatten_validation_errors(errors: Any) -> List[str]:
    """
    Flatten a ``{field: [messages]}`` mapping into a list of messages.

    Single string values count as one message. Field order is kept.
    """
    if not isinstance(errors, dict):
        return []

    messages = []
    for value in errors.values():
        if isinstance(value, (list, tuple)):
            messages.extend(str(message) for message in value)
        elif value is not None:
            messages.append(str(value))
    return messages


class ResourceClient:
    """Client for the resource save endpoint of the curation application."""

    TIMEOUT = 30  # Request timeout in seconds
    SUCCESS_MESSAGE = "Successfully saved resource."

    def __init__(
        self,
        save_url: str,
        html_content: Optional[str] = None,
        cookies: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the save client.

        Args:
            save_url: Absolute URL of the resource save endpoint
            html_content: HTML of the editor page (source of the csrf-token meta tag)
            cookies: Session cookies; XSRF-TOKEN is used when the page has no token
            timeout: Request timeout in seconds
            session: Optional requests session to reuse
        """
        self.save_url = save_url
        self.html_content = html_content
        self.cookies = dict(cookies or {})
        self.timeout = timeout or self.TIMEOUT
        self.session = session or requests.Session()

    def build_headers(self) -> Dict[str, str]:
        """
        Build the request headers.

        Raises:
            MissingCsrfTokenError: If neither the page nor the cookies carry a token
        """
        csrf_headers = build_csrf_headers(self.html_content, self.cookies)
        if not csrf_headers.get('X-CSRF-TOKEN'):
            logger.error("CSRF token unavailable when attempting to save resource")
            raise MissingCsrfTokenError()

        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        headers.update(csrf_headers)
        headers['X-Requested-With'] = 'XMLHttpRequest'
        return headers

    def save_resource(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a save payload.

        Args:
            payload: Dict built by build_save_payload

        Returns:
            Parsed response body (empty dict for empty bodies) with a
            ``message`` key always present

        Raises:
            MissingCsrfTokenError: No token, nothing was sent
            ValidationError: Endpoint answered with a non-2xx status
            NetworkError: Transport failure
        """
        headers = self.build_headers()

        logger.info(f"Saving resource to {self.save_url}")

        try:
            response = self.session.post(
                self.save_url,
                json=payload,
                headers=headers,
                cookies=self.cookies,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to save resource: {e}")
            raise NetworkError() from e

        try:
            data = response.json()
        except ValueError:
            logger.debug(f"Response body is not JSON (HTTP {response.status_code})")
            data = None

        body = data if isinstance(data, dict) else {}

        if not response.ok:
            errors = flatten_validation_errors(body.get('errors'))
            logger.warning(f"Resource save rejected with HTTP {response.status_code}: {len(errors)} error(s)")
            raise ValidationError(body.get('message'), errors, response.status_code)

        result = dict(body)
        result['message'] = body.get('message') or self.SUCCESS_MESSAGE
        logger.info(f"Resource saved: {result['message']}")
        return result

"""Clients for the curation application's HTTP endpoints."""

from curator.api.resource_client import (
    MissingCsrfTokenError,
    NetworkError,
    ResourceClient,
    ResourceSaveError,
    ValidationError,
)

__all__ = ['ResourceClient', 'ResourceSaveError', 'MissingCsrfTokenError', 'ValidationError', 'NetworkError']

"""Persistent editor settings backed by QSettings."""

import logging
from typing import Optional

from PySide6.QtCore import QSettings


logger = logging.getLogger(__name__)


SETTINGS_ORGANIZATION = "GFZ"
SETTINGS_APPLICATION = "Curator"


def get_settings() -> QSettings:
    """Return the application-wide QSettings store."""
    return QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)


class EditorSettings:
    """Typed access to the editor section of the settings store."""

    DEFAULT_SAVE_URL = "http://localhost:8000/curation/resources"
    DEFAULT_MAX_TITLES = 100
    DEFAULT_MAX_LICENSES = 100
    DEFAULT_MAX_DATES = 100
    DEFAULT_REQUEST_TIMEOUT = 30  # seconds

    def __init__(self, settings: Optional[QSettings] = None):
        self.settings = settings if settings is not None else get_settings()

    def _int_value(self, key: str, default: int) -> int:
        value = self.settings.value(key, default, type=int)
        if value <= 0:
            logger.warning(f"Invalid setting {key}={value}, using default {default}")
            return default
        return value

    @property
    def save_url(self) -> str:
        return self.settings.value("editor/save_url", self.DEFAULT_SAVE_URL, type=str)

    @save_url.setter
    def save_url(self, url: str):
        self.settings.setValue("editor/save_url", url.strip())

    @property
    def max_titles(self) -> int:
        return self._int_value("editor/max_titles", self.DEFAULT_MAX_TITLES)

    @property
    def max_licenses(self) -> int:
        return self._int_value("editor/max_licenses", self.DEFAULT_MAX_LICENSES)

    @property
    def max_dates(self) -> int:
        return self._int_value("editor/max_dates", self.DEFAULT_MAX_DATES)

    @property
    def request_timeout(self) -> int:
        return self._int_value("editor/request_timeout", self.DEFAULT_REQUEST_TIMEOUT)

    def set_limits(self, max_titles: int, max_licenses: int, max_dates: int):
        """Store list limits for titles, licenses and dates."""
        self.settings.setValue("editor/max_titles", max_titles)
        self.settings.setValue("editor/max_licenses", max_licenses)
        self.settings.setValue("editor/max_dates", max_dates)

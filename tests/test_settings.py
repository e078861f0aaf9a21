"""Unit tests for EditorSettings."""

import pytest

from PySide6.QtCore import QSettings

from curator.utils.settings import EditorSettings


@pytest.fixture
def ini_settings(tmp_path):
    """QSettings backed by a temporary INI file."""
    return QSettings(str(tmp_path / "curator.ini"), QSettings.Format.IniFormat)


class TestEditorSettings:
    """Tests for EditorSettings."""

    def test_defaults(self, ini_settings):
        """Test default values of an empty store."""
        settings = EditorSettings(ini_settings)

        assert settings.save_url == EditorSettings.DEFAULT_SAVE_URL
        assert settings.max_titles == 100
        assert settings.max_licenses == 100
        assert settings.max_dates == 100
        assert settings.request_timeout == 30

    def test_save_url_is_stored_trimmed(self, ini_settings):
        """Test storing the save URL."""
        settings = EditorSettings(ini_settings)

        settings.save_url = "  https://curation.example.org/curation/resources "

        assert settings.save_url == "https://curation.example.org/curation/resources"
        assert ini_settings.value("editor/save_url") == "https://curation.example.org/curation/resources"

    def test_limits(self, ini_settings):
        """Test storing list limits."""
        settings = EditorSettings(ini_settings)

        settings.set_limits(5, 3, 2)

        assert (settings.max_titles, settings.max_licenses, settings.max_dates) == (5, 3, 2)

    def test_invalid_limit_falls_back(self, ini_settings):
        """Test that non-positive limits use the default."""
        ini_settings.setValue("editor/max_titles", 0)
        ini_settings.setValue("editor/request_timeout", -5)

        settings = EditorSettings(ini_settings)

        assert settings.max_titles == 100
        assert settings.request_timeout == 30

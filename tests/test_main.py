"""Unit tests for the command-line entry point."""

import json

import pytest
import responses
from unittest.mock import MagicMock, patch

from curator.main import build_parser, main


SAVE_URL = "https://curation.example.org/curation/resources"

RECORD = {
    'resourceId': 7,
    'doi': "10.5880/GFZ.1.1.2021.001",
    'year': "2021",
    'resourceType': "1",
    'language': "en",
    'version': "",
    'titles': [{'title': "Main", 'titleType': "main-title"}],
    'licenses': ["CC-BY-4.0"],
    'authors': [{'type': "person", 'firstName': "Jane", 'lastName': "Doe"}],
    'contributors': [],
    'descriptions': [],
    'dates': [],
}


@pytest.fixture(autouse=True)
def no_log_file():
    """Keep setup_logging from writing curator.log."""
    with patch('curator.main.setup_logging'):
        yield


@pytest.fixture
def mock_backend():
    """Patch credentials, database client and loader."""
    with patch('curator.main.load_db_credentials') as mock_credentials, \
            patch('curator.main.LegacyDatasetClient'), \
            patch('curator.main.LegacyDatasetLoader.load_for_editor', return_value=RECORD), \
            patch('curator.main.EditorSettings') as mock_settings:
        mock_credentials.return_value = {'host': "h", 'database': "d", 'username': "u", 'password': "p"}
        mock_settings.return_value = MagicMock(
            save_url=SAVE_URL, request_timeout=5, max_titles=100, max_licenses=100, max_dates=100
        )
        yield mock_credentials


class TestParser:
    """Tests for argument parsing."""

    def test_export_arguments(self):
        """Test parsing of the export command."""
        args = build_parser().parse_args(["export", "7", "--save-url", SAVE_URL, "--cookie", "XSRF-TOKEN=abc"])

        assert args.command == "export"
        assert args.resource_id == 7
        assert args.save_url == SAVE_URL
        assert args.cookie == "XSRF-TOKEN=abc"

    def test_command_required(self):
        """Test that a command is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestExport:
    """Tests for the export command."""

    def test_prints_payload(self, mock_backend, capsys):
        """Test that the payload is printed as JSON."""
        with patch('curator.editor.form_state.EditorSettings') as mock_settings:
            mock_settings.return_value = MagicMock(max_titles=100, max_licenses=100, max_dates=100)
            exit_code = main(["export", "7"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload['resourceId'] == 7
        assert payload['authors'][0]['lastName'] == "Doe"
        assert payload['licenses'] == ["CC-BY-4.0"]

    def test_missing_credentials(self, mock_backend, capsys):
        """Test the exit code without credentials."""
        mock_backend.return_value = None

        assert main(["export", "7"]) == 1
        assert "no database credentials" in capsys.readouterr().err

    @responses.activate
    def test_posts_payload(self, mock_backend, capsys):
        """Test posting the payload with the cookie token."""
        responses.add(responses.POST, SAVE_URL, json={'message': "Saved."}, status=200)

        with patch('curator.editor.form_state.EditorSettings') as mock_settings:
            mock_settings.return_value = MagicMock(max_titles=100, max_licenses=100, max_dates=100)
            exit_code = main(["export", "7", "--save-url", SAVE_URL, "--cookie", "XSRF-TOKEN=abc%3D"])

        assert exit_code == 0
        assert responses.calls[0].request.headers['X-XSRF-TOKEN'] == "abc="
        assert "Saved." in capsys.readouterr().out

    @responses.activate
    def test_validation_errors_printed(self, mock_backend, capsys):
        """Test that validation errors are listed on stderr."""
        responses.add(
            responses.POST,
            SAVE_URL,
            json={'message': "Invalid.", 'errors': {'doi': ["DOI already taken."]}},
            status=422
        )

        with patch('curator.editor.form_state.EditorSettings') as mock_settings:
            mock_settings.return_value = MagicMock(max_titles=100, max_licenses=100, max_dates=100)
            exit_code = main(["export", "7", "--save-url", SAVE_URL, "--cookie", "XSRF-TOKEN=abc"])

        err = capsys.readouterr().err
        assert exit_code == 2
        assert "Invalid." in err
        assert "DOI already taken." in err

    @responses.activate
    def test_save_uses_configured_url(self, mock_backend, capsys):
        """Test that --save posts to the save URL from the settings."""
        responses.add(responses.POST, SAVE_URL, json={'message': "Saved."}, status=200)

        with patch('curator.editor.form_state.EditorSettings') as mock_settings:
            mock_settings.return_value = MagicMock(max_titles=100, max_licenses=100, max_dates=100)
            exit_code = main(["export", "7", "--save", "--cookie", "XSRF-TOKEN=abc"])

        assert exit_code == 0
        assert len(responses.calls) == 1
        assert responses.calls[0].request.url == SAVE_URL

    @responses.activate
    def test_contact_author_without_email_is_not_sent(self, mock_backend, capsys):
        """Test that a contact author without e-mail blocks the save request."""
        responses.add(responses.POST, SAVE_URL, json={'message': "Saved."}, status=200)
        record = dict(RECORD, authors=[
            {'type': "person", 'firstName': "Jane", 'lastName': "Doe", 'isContact': True, 'email': ""}
        ])

        with patch('curator.main.LegacyDatasetLoader.load_for_editor', return_value=record), \
                patch('curator.editor.form_state.EditorSettings') as mock_settings:
            mock_settings.return_value = MagicMock(max_titles=100, max_licenses=100, max_dates=100)
            exit_code = main(["export", "7", "--save-url", SAVE_URL, "--cookie", "XSRF-TOKEN=abc"])

        assert exit_code == 2
        assert len(responses.calls) == 0
        assert "required fields are missing" in capsys.readouterr().err

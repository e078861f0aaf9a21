"""Unit tests for list-growth and submit-readiness gates."""

import pytest

from curator.editor.entries import (
    DateEntry,
    InstitutionAuthorEntry,
    LicenseEntry,
    PersonAuthorEntry,
    TitleEntry,
)
from curator.editor.gates import (
    are_authors_valid,
    are_required_fields_filled,
    can_add_date,
    can_add_license,
    can_add_title,
    is_author_valid,
)


def _ready_kwargs(**overrides):
    values = {
        'titles': [TitleEntry(title="Main", title_type="main-title")],
        'licenses': [LicenseEntry(license="CC-BY-4.0")],
        'authors': [PersonAuthorEntry(last_name="Doe")],
        'year': "2024",
        'resource_type': "1",
        'language': "en",
    }
    values.update(overrides)
    return values


class TestListGrowthGate:
    """Tests for can_add_title/can_add_license/can_add_date."""

    def test_empty_list_refused(self):
        """Test that an empty list cannot grow."""
        assert can_add_title([], 3) is False
        assert can_add_license([], 3) is False
        assert can_add_date([], 3) is False

    def test_filled_last_entry_allowed(self):
        """Test that a filled last entry allows a new one."""
        assert can_add_title([TitleEntry(title="x")], 3) is True
        assert can_add_license([LicenseEntry(license="MIT")], 3) is True

    def test_empty_last_entry_refused(self):
        """Test that an empty last entry blocks growth."""
        assert can_add_title([TitleEntry(title="")], 3) is False
        assert can_add_title([TitleEntry(title="   ")], 3) is False
        assert can_add_title([TitleEntry(title="a"), TitleEntry(title="")], 3) is False

    def test_maximum_reached(self):
        """Test that the list cannot exceed its maximum."""
        titles = [TitleEntry(title=str(i)) for i in range(3)]

        assert can_add_title(titles, 3) is False
        assert can_add_title(titles, 4) is True

    @pytest.mark.parametrize("start, end, expected", [
        ("2020-01-01", "", True),
        ("", "2020-12-31", True),
        ("", "", False),
    ])
    def test_date_needs_start_or_end(self, start, end, expected):
        """Test that a date counts as filled with either bound."""
        assert can_add_date([DateEntry(start_date=start, end_date=end)], 5) is expected


class TestAuthorValidity:
    """Tests for author submit rules."""

    def test_contact_needs_email(self):
        """Test that a contact person without email is invalid."""
        author = PersonAuthorEntry(last_name="Doe", is_contact=True, email="")

        assert is_author_valid(author) is False
        assert is_author_valid(PersonAuthorEntry(last_name="Doe", is_contact=True, email="d@x.org")) is True

    def test_person_needs_last_name(self):
        """Test that a person without last name is invalid."""
        assert is_author_valid(PersonAuthorEntry(first_name="Jane")) is False

    def test_institution_needs_name(self):
        """Test that an institution author needs a name."""
        assert is_author_valid(InstitutionAuthorEntry(institution_name="")) is False
        assert is_author_valid(InstitutionAuthorEntry(institution_name="GFZ")) is True

    def test_no_authors_invalid(self):
        """Test that an empty author list is invalid."""
        assert are_authors_valid([]) is False


class TestRequiredFields:
    """Tests for are_required_fields_filled."""

    def test_complete_record_ready(self):
        """Test that a complete record may be saved."""
        assert are_required_fields_filled(**_ready_kwargs()) is True

    def test_contact_without_email_blocks_until_filled(self):
        """Test that a contact without email blocks saving until the email is set."""
        contact = PersonAuthorEntry(last_name="Doe", is_contact=True)

        assert are_required_fields_filled(**_ready_kwargs(authors=[contact])) is False

        with_email = PersonAuthorEntry(id=contact.id, last_name="Doe", is_contact=True, email="doe@gfz.de")
        assert are_required_fields_filled(**_ready_kwargs(authors=[with_email])) is True

    @pytest.mark.parametrize("override", [
        {'titles': [TitleEntry(title="Alt", title_type="alternative-title")]},
        {'titles': [TitleEntry(title=" ", title_type="main-title")]},
        {'licenses': []},
        {'licenses': [LicenseEntry(license="")]},
        {'authors': []},
        {'year': ""},
        {'resource_type': None},
        {'language': "  "},
    ])
    def test_missing_field_blocks(self, override):
        """Test that each required field blocks saving when missing."""
        assert are_required_fields_filled(**_ready_kwargs(**override)) is False

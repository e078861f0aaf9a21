"""Gates deciding when repeatable fields may grow and when a record can be saved.

A new blank title, license or date may only be appended when the list is
below its maximum and the last entry is filled. Only the last entry is
inspected: entries are appended in order and never leave a gap.
"""

import logging
from typing import Any, Optional, Sequence

from curator.editor.entries import (
    INSTITUTION,
    AuthorEntry,
    DateEntry,
    LicenseEntry,
    TitleEntry,
)


logger = logging.getLogger(__name__)


MAIN_TITLE_SLUG = 'main-title'


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def is_title_filled(entry: TitleEntry) -> bool:
    return bool(_text(entry.title))


def is_license_filled(entry: LicenseEntry) -> bool:
    return bool(_text(entry.license))


def is_date_filled(entry: DateEntry) -> bool:
    return bool(_text(entry.start_date) or _text(entry.end_date))


def can_add_title(titles: Sequence[TitleEntry], max_titles: int) -> bool:
    """Check if a new title can be added based on current state."""
    return 0 < len(titles) < max_titles and is_title_filled(titles[-1])


def can_add_license(licenses: Sequence[LicenseEntry], max_licenses: int) -> bool:
    """Check if a new license can be added based on current state."""
    return 0 < len(licenses) < max_licenses and is_license_filled(licenses[-1])


def can_add_date(dates: Sequence[DateEntry], max_dates: int) -> bool:
    """Check if a new date can be added based on current state."""
    return 0 < len(dates) < max_dates and is_date_filled(dates[-1])


def is_author_valid(author: AuthorEntry) -> bool:
    """
    Check a single author for submit readiness.

    - Person: last name required; a contact person also needs an email
    - Institution: institution name required
    """
    if author.type == INSTITUTION:
        return bool(_text(author.institution_name))

    has_last_name = bool(_text(author.last_name))
    contact_valid = not author.is_contact or bool(_text(author.email))
    return has_last_name and contact_valid


def are_authors_valid(authors: Sequence[AuthorEntry]) -> bool:
    return len(authors) > 0 and all(is_author_valid(author) for author in authors)


def are_required_fields_filled(
    titles: Sequence[TitleEntry],
    licenses: Sequence[LicenseEntry],
    authors: Sequence[AuthorEntry],
    year: Optional[str],
    resource_type: Optional[str],
    language: Optional[str]
) -> bool:
    """
    Check whether the record may be submitted.

    Requires a filled main title, year, resource type, language, a first
    license and at least one author, with every author valid.

    Args:
        titles: Title entries (main title identified by its slug)
        licenses: License entries (only the first one is required)
        authors: Author entries
        year: Publication year as typed
        resource_type: Selected resource type id
        language: Selected language code

    Returns:
        True if the save action may be enabled
    """
    main_title = next((entry for entry in titles if entry.title_type == MAIN_TITLE_SLUG), None)
    main_title_filled = main_title is not None and is_title_filled(main_title)
    primary_license_filled = len(licenses) > 0 and is_license_filled(licenses[0])

    missing = []
    if not main_title_filled:
        missing.append('main title')
    if not _text(year):
        missing.append('year')
    if not _text(resource_type):
        missing.append('resource type')
    if not _text(language):
        missing.append('language')
    if not primary_license_filled:
        missing.append('license')
    if not are_authors_valid(authors):
        missing.append('authors')

    if missing:
        logger.debug(f"Record not ready for saving, missing: {', '.join(missing)}")
        return False

    return True

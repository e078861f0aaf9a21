"""Serialize canonical editor entries into the resource save payload."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from curator.editor.entries import (
    INSTITUTION,
    AuthorEntry,
    ContributorEntry,
    DateEntry,
    DescriptionEntry,
    LicenseEntry,
    TitleEntry,
)
from curator.utils.affiliations import serialize_affiliations


logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _to_int(value: Any) -> Optional[int]:
    """Parse a form value into an int, None if empty or not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        logger.warning(f"Ignoring non-numeric form value: {text!r}")
        return None


def _first_ror_id(entry: AuthorEntry) -> Optional[str]:
    for affiliation in entry.affiliations:
        ror_id = _text(affiliation.ror_id)
        if ror_id:
            return ror_id
    return None


def serialize_author(author: AuthorEntry, position: int) -> Dict[str, Any]:
    affiliations = serialize_affiliations(author.affiliations)

    if author.type == INSTITUTION:
        return {
            'type': INSTITUTION,
            'institutionName': _text(author.institution_name),
            'rorId': _first_ror_id(author),
            'affiliations': affiliations,
            'position': position,
        }

    return {
        'type': author.type,
        'orcid': _text(author.orcid) or None,
        'firstName': _text(author.first_name) or None,
        'lastName': _text(author.last_name),
        'email': _text(author.email) or None,
        'website': _text(author.website) or None,
        'isContact': author.is_contact,
        'affiliations': affiliations,
        'position': position,
    }


def serialize_authors(authors: Sequence[AuthorEntry]) -> List[Dict[str, Any]]:
    """
    Serialize authors in list order.

    The position is the index in the current list and is recomputed on each
    call, so removing an author renumbers all following ones. Authors with
    an empty name are still emitted; rejecting them is up to the caller.
    """
    return [serialize_author(author, index) for index, author in enumerate(authors)]


def is_contributor_empty(contributor: ContributorEntry) -> bool:
    """A contributor without a name and without roles carries no data."""
    if contributor.type == INSTITUTION:
        has_name = bool(_text(contributor.institution_name))
    else:
        has_name = bool(_text(contributor.last_name))
    return not has_name and not contributor.roles


def serialize_contributor(contributor: ContributorEntry, position: int) -> Dict[str, Any]:
    affiliations = serialize_affiliations(contributor.affiliations)
    roles = [role.value for role in contributor.roles]

    if contributor.type == INSTITUTION:
        return {
            'type': INSTITUTION,
            'institutionName': _text(contributor.institution_name),
            'roles': roles,
            'affiliations': affiliations,
            'position': position,
        }

    return {
        'type': contributor.type,
        'orcid': _text(contributor.orcid) or None,
        'firstName': _text(contributor.first_name) or None,
        'lastName': _text(contributor.last_name),
        'roles': roles,
        'affiliations': affiliations,
        'position': position,
    }


def serialize_contributors(contributors: Sequence[ContributorEntry]) -> List[Dict[str, Any]]:
    """Serialize contributors, dropping fully empty ones before numbering."""
    kept = [contributor for contributor in contributors if not is_contributor_empty(contributor)]
    dropped = len(contributors) - len(kept)
    if dropped:
        logger.debug(f"Dropped {dropped} empty contributor(s) from payload")
    return [serialize_contributor(contributor, index) for index, contributor in enumerate(kept)]


def serialize_titles(titles: Sequence[TitleEntry]) -> List[Dict[str, str]]:
    return [
        {'title': _text(entry.title), 'titleType': _text(entry.title_type)}
        for entry in titles
        if _text(entry.title)
    ]


def serialize_licenses(licenses: Sequence[LicenseEntry]) -> List[str]:
    return [_text(entry.license) for entry in licenses if _text(entry.license)]


def serialize_descriptions(descriptions: Sequence[DescriptionEntry]) -> List[Dict[str, str]]:
    return [
        {'descriptionType': _text(entry.description_type), 'description': _text(entry.description)}
        for entry in descriptions
        if _text(entry.description)
    ]


def serialize_dates(dates: Sequence[DateEntry]) -> List[Dict[str, Optional[str]]]:
    return [
        {
            'dateType': _text(entry.date_type),
            'startDate': _text(entry.start_date) or None,
            'endDate': _text(entry.end_date) or None,
        }
        for entry in dates
        if _text(entry.start_date) or _text(entry.end_date)
    ]


def build_save_payload(
    titles: Sequence[TitleEntry],
    licenses: Sequence[LicenseEntry],
    authors: Sequence[AuthorEntry],
    contributors: Sequence[ContributorEntry],
    descriptions: Sequence[DescriptionEntry] = (),
    dates: Sequence[DateEntry] = (),
    doi: Optional[str] = None,
    year: Any = None,
    resource_type: Any = None,
    version: Optional[str] = None,
    language: Optional[str] = None,
    resource_id: Any = None
) -> Dict[str, Any]:
    """
    Build the JSON payload handed to the resource save endpoint.

    Args:
        titles, licenses, authors, contributors, descriptions, dates:
            Canonical entries from the form state
        doi: DOI as typed (empty -> null)
        year: Publication year (string or int)
        resource_type: Resource type id (string or int)
        version: Version string (empty -> null)
        language: Language code
        resource_id: Id of the resource being edited; omitted if not numeric

    Returns:
        Payload dict; ``resourceId`` is present only for existing resources
    """
    payload = {
        'doi': _text(doi) or None,
        'year': _to_int(year),
        'resourceType': _to_int(resource_type),
        'version': _text(version) or None,
        'language': _text(language),
        'titles': serialize_titles(titles),
        'licenses': serialize_licenses(licenses),
        'descriptions': serialize_descriptions(descriptions),
        'dates': serialize_dates(dates),
        'authors': serialize_authors(authors),
        'contributors': serialize_contributors(contributors),
    }

    parsed_resource_id = _to_int(resource_id)
    if parsed_resource_id is not None:
        payload['resourceId'] = parsed_resource_id

    logger.info(
        f"Built save payload with {len(payload['authors'])} authors and "
        f"{len(payload['contributors'])} contributors"
    )

    return payload

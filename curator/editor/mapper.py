"""Map stored author/contributor records onto canonical editor entries.

Stored records come from the current editor, from legacy databases and from
XML uploads, so every field is optional and may have the wrong type. The
mapper reads each field through an explicit extractor with a default and
never raises on malformed input.
"""

import logging
from typing import Any, Dict, List, Optional

from curator.editor.entries import (
    INSTITUTION,
    AuthorEntry,
    ContributorEntry,
    DateEntry,
    DescriptionEntry,
    InstitutionAuthorEntry,
    InstitutionContributorEntry,
    LicenseEntry,
    PersonAuthorEntry,
    PersonContributorEntry,
    TitleEntry,
    create_empty_date,
    create_empty_description,
    create_empty_license,
    create_empty_title,
)
from curator.editor.gates import MAIN_TITLE_SLUG
from curator.utils.affiliations import affiliations_input_for, normalise_initial_affiliations
from curator.utils.identifiers import normalize_orcid, normalize_title_type_slug, normalize_website_url
from curator.utils.roles import (
    infer_contributor_type_from_roles,
    normalise_initial_contributor_roles,
    roles_input_for,
)


logger = logging.getLogger(__name__)


def _as_record(raw: Any) -> Dict[str, Any]:
    """Non-dict records carry no recognizable fields."""
    if isinstance(raw, dict):
        return raw
    logger.debug(f"Record of type {type(raw).__name__} has no recognizable fields")
    return {}


def _string_field(record: Dict[str, Any], key: str) -> str:
    value = record.get(key)
    return value.strip() if isinstance(value, str) else ""


def _raw_string_field(record: Dict[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


def _bool_field(record: Dict[str, Any], key: str) -> bool:
    """Accept True or the literal string "true"; everything else is False."""
    value = record.get(key)
    return value is True or value == 'true'


def map_initial_author_to_entry(raw: Any) -> Optional[AuthorEntry]:
    """
    Map a stored author record to an editor entry.

    Args:
        raw: Author record, e.g. {"type": "person", "orcid": "...",
             "firstName": "...", "lastName": "...", "affiliations": [...]}

    Returns:
        PersonAuthorEntry or InstitutionAuthorEntry with a fresh id,
        or None if raw is None
    """
    if raw is None:
        return None

    record = _as_record(raw)
    affiliations = normalise_initial_affiliations(record.get('affiliations'))
    affiliations_input = affiliations_input_for(affiliations)

    if record.get('type') == INSTITUTION:
        return InstitutionAuthorEntry(
            institution_name=_string_field(record, 'institutionName'),
            affiliations=affiliations,
            affiliations_input=affiliations_input,
        )

    return PersonAuthorEntry(
        orcid=normalize_orcid(record.get('orcid')),
        first_name=_string_field(record, 'firstName'),
        last_name=_string_field(record, 'lastName'),
        email=_raw_string_field(record, 'email'),
        website=normalize_website_url(record.get('website')),
        is_contact=_bool_field(record, 'isContact'),
        affiliations=affiliations,
        affiliations_input=affiliations_input,
    )


def map_initial_contributor_to_entry(raw: Any) -> Optional[ContributorEntry]:
    """
    Map a stored contributor record to an editor entry.

    The type is inferred from the roles: an organization-only role
    (e.g. HostingInstitution) makes the entry an institution even if the
    record has person fields.
    """
    if raw is None:
        return None

    record = _as_record(raw)
    affiliations = normalise_initial_affiliations(record.get('affiliations'))
    affiliations_input = affiliations_input_for(affiliations)
    roles = normalise_initial_contributor_roles(record.get('roles'))
    roles_input = roles_input_for(roles)

    resolved_type = infer_contributor_type_from_roles(
        record.get('type'),
        [role.value for role in roles]
    )

    if resolved_type == INSTITUTION:
        return InstitutionContributorEntry(
            institution_name=_string_field(record, 'institutionName'),
            affiliations=affiliations,
            affiliations_input=affiliations_input,
            roles=roles,
            roles_input=roles_input,
        )

    return PersonContributorEntry(
        orcid=normalize_orcid(record.get('orcid')),
        first_name=_string_field(record, 'firstName'),
        last_name=_string_field(record, 'lastName'),
        affiliations=affiliations,
        affiliations_input=affiliations_input,
        roles=roles,
        roles_input=roles_input,
    )


def map_initial_authors(raw_authors: Any) -> List[AuthorEntry]:
    """Map a list of stored authors, skipping None entries."""
    if not isinstance(raw_authors, list):
        return []
    mapped = (map_initial_author_to_entry(raw) for raw in raw_authors)
    return [entry for entry in mapped if entry is not None]


def map_initial_contributors(raw_contributors: Any) -> List[ContributorEntry]:
    """Map a list of stored contributors, skipping None entries."""
    if not isinstance(raw_contributors, list):
        return []
    mapped = (map_initial_contributor_to_entry(raw) for raw in raw_contributors)
    return [entry for entry in mapped if entry is not None]


# Repeatable fields
# An empty stored list still yields one blank entry, so the form always
# has a first row to type into.

def map_initial_titles(raw_titles: Any) -> List[TitleEntry]:
    titles = []
    if isinstance(raw_titles, list):
        for raw in raw_titles:
            if not isinstance(raw, dict):
                continue
            titles.append(TitleEntry(
                title=_string_field(raw, 'title'),
                title_type=normalize_title_type_slug(raw.get('titleType')),
            ))

    return titles or [create_empty_title(MAIN_TITLE_SLUG)]


def map_initial_licenses(raw_licenses: Any) -> List[LicenseEntry]:
    licenses = []
    if isinstance(raw_licenses, list):
        for raw in raw_licenses:
            if isinstance(raw, str):
                identifier = raw.strip()
            elif isinstance(raw, dict):
                identifier = _string_field(raw, 'identifier') or _string_field(raw, 'license')
            else:
                continue
            if identifier:
                licenses.append(LicenseEntry(license=identifier))

    return licenses or [create_empty_license()]


def map_initial_dates(raw_dates: Any) -> List[DateEntry]:
    dates = []
    if isinstance(raw_dates, list):
        for raw in raw_dates:
            if not isinstance(raw, dict):
                continue
            dates.append(DateEntry(
                date_type=_string_field(raw, 'dateType'),
                start_date=_string_field(raw, 'startDate'),
                end_date=_string_field(raw, 'endDate'),
            ))

    return dates or [create_empty_date()]


def map_initial_descriptions(raw_descriptions: Any) -> List[DescriptionEntry]:
    descriptions = []
    if isinstance(raw_descriptions, list):
        for raw in raw_descriptions:
            if not isinstance(raw, dict):
                continue
            # Legacy loaders use "type", the editor uses "descriptionType"
            description_type = _string_field(raw, 'descriptionType') or _string_field(raw, 'type')
            descriptions.append(DescriptionEntry(
                description_type=description_type,
                description=_raw_string_field(raw, 'description'),
            ))

    return descriptions or [create_empty_description()]

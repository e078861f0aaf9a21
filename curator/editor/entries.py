"""Canonical editor entries for authors, contributors and repeatable fields.

Authors and contributors come in two variants, discriminated by ``type``:

- ``"person"``: ORCID, given/family name and (authors only) contact details
- ``"institution"``: organization name only

Every entry carries an opaque ``id`` (UUID4) so that lists can be reordered
or shortened without confusing one entry for another. Entries are frozen;
edits produce new instances via ``dataclasses.replace``.
"""

import uuid
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union


PERSON = "person"
INSTITUTION = "institution"

EntryType = Literal["person", "institution"]


def new_entry_id() -> str:
    """Generate a fresh identity token for an editor entry."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class AffiliationTag:
    """Organization an author or contributor is affiliated with."""

    value: str
    ror_id: Optional[str] = None


@dataclass(frozen=True)
class RoleTag:
    """Human-readable contributor role label (e.g. "Data Collector")."""

    value: str


@dataclass(frozen=True)
class PersonAuthorEntry:
    id: str = field(default_factory=new_entry_id)
    type: Literal["person"] = field(default=PERSON, init=False)
    orcid: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    website: str = ""
    is_contact: bool = False
    affiliations: List[AffiliationTag] = field(default_factory=list)
    affiliations_input: str = ""


@dataclass(frozen=True)
class InstitutionAuthorEntry:
    id: str = field(default_factory=new_entry_id)
    type: Literal["institution"] = field(default=INSTITUTION, init=False)
    institution_name: str = ""
    affiliations: List[AffiliationTag] = field(default_factory=list)
    affiliations_input: str = ""


@dataclass(frozen=True)
class PersonContributorEntry:
    id: str = field(default_factory=new_entry_id)
    type: Literal["person"] = field(default=PERSON, init=False)
    orcid: str = ""
    first_name: str = ""
    last_name: str = ""
    affiliations: List[AffiliationTag] = field(default_factory=list)
    affiliations_input: str = ""
    roles: List[RoleTag] = field(default_factory=list)
    roles_input: str = ""


@dataclass(frozen=True)
class InstitutionContributorEntry:
    id: str = field(default_factory=new_entry_id)
    type: Literal["institution"] = field(default=INSTITUTION, init=False)
    institution_name: str = ""
    affiliations: List[AffiliationTag] = field(default_factory=list)
    affiliations_input: str = ""
    roles: List[RoleTag] = field(default_factory=list)
    roles_input: str = ""


AuthorEntry = Union[PersonAuthorEntry, InstitutionAuthorEntry]
ContributorEntry = Union[PersonContributorEntry, InstitutionContributorEntry]


@dataclass(frozen=True)
class TitleEntry:
    id: str = field(default_factory=new_entry_id)
    title: str = ""
    title_type: str = ""


@dataclass(frozen=True)
class LicenseEntry:
    id: str = field(default_factory=new_entry_id)
    license: str = ""


@dataclass(frozen=True)
class DateEntry:
    id: str = field(default_factory=new_entry_id)
    date_type: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass(frozen=True)
class DescriptionEntry:
    id: str = field(default_factory=new_entry_id)
    description_type: str = ""
    description: str = ""


# Empty entry factories

def create_empty_person_author() -> PersonAuthorEntry:
    return PersonAuthorEntry()


def create_empty_institution_author() -> InstitutionAuthorEntry:
    return InstitutionAuthorEntry()


def create_empty_person_contributor() -> PersonContributorEntry:
    return PersonContributorEntry()


def create_empty_institution_contributor() -> InstitutionContributorEntry:
    return InstitutionContributorEntry()


def create_empty_author(entry_type: str = PERSON) -> AuthorEntry:
    """Create an empty author of the given type ("person" or "institution")."""
    if entry_type == INSTITUTION:
        return create_empty_institution_author()
    return create_empty_person_author()


def create_empty_contributor(entry_type: str = PERSON) -> ContributorEntry:
    """Create an empty contributor of the given type ("person" or "institution")."""
    if entry_type == INSTITUTION:
        return create_empty_institution_contributor()
    return create_empty_person_contributor()


def create_empty_title(title_type: str = "") -> TitleEntry:
    return TitleEntry(title_type=title_type)


def create_empty_license() -> LicenseEntry:
    return LicenseEntry()


def create_empty_date(date_type: str = "") -> DateEntry:
    return DateEntry(date_type=date_type)


def create_empty_description(description_type: str = "") -> DescriptionEntry:
    return DescriptionEntry(description_type=description_type)

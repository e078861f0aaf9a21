"""Editable resource state backing the curation form."""

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from curator.editor import gates
from curator.editor.entries import (
    PERSON,
    AuthorEntry,
    ContributorEntry,
    DateEntry,
    DescriptionEntry,
    LicenseEntry,
    TitleEntry,
    create_empty_author,
    create_empty_contributor,
    create_empty_date,
    create_empty_description,
    create_empty_license,
    create_empty_title,
)
from curator.editor.mapper import (
    map_initial_authors,
    map_initial_contributors,
    map_initial_dates,
    map_initial_descriptions,
    map_initial_licenses,
    map_initial_titles,
)
from curator.editor.serializer import build_save_payload
from curator.utils.affiliations import (
    AffiliationSuggestion,
    affiliations_input_for,
    parse_affiliations_input,
)
from curator.utils.roles import normalise_initial_contributor_roles, roles_input_for
from curator.utils.settings import EditorSettings


logger = logging.getLogger(__name__)


def _scalar_text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else ""


class ResourceFormState(QObject):
    """
    Owner of the canonical entry lists of one resource.

    Lists are never mutated in place: every edit builds a new list and emits
    the matching ``*_changed`` signal with it. Adds refused by the list-growth
    gate return False and leave the state untouched.
    """

    titles_changed = Signal(list)
    licenses_changed = Signal(list)
    dates_changed = Signal(list)
    descriptions_changed = Signal(list)
    authors_changed = Signal(list)
    contributors_changed = Signal(list)

    def __init__(
        self,
        max_titles: Optional[int] = None,
        max_licenses: Optional[int] = None,
        max_dates: Optional[int] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)

        if None in (max_titles, max_licenses, max_dates):
            settings = EditorSettings()
            max_titles = max_titles if max_titles is not None else settings.max_titles
            max_licenses = max_licenses if max_licenses is not None else settings.max_licenses
            max_dates = max_dates if max_dates is not None else settings.max_dates

        self.max_titles = max_titles
        self.max_licenses = max_licenses
        self.max_dates = max_dates

        self.titles: List[TitleEntry] = [create_empty_title(gates.MAIN_TITLE_SLUG)]
        self.licenses: List[LicenseEntry] = [create_empty_license()]
        self.dates: List[DateEntry] = [create_empty_date()]
        self.descriptions: List[DescriptionEntry] = [create_empty_description()]
        self.authors: List[AuthorEntry] = [create_empty_author(PERSON)]
        self.contributors: List[ContributorEntry] = []

        self.resource_id: Optional[int] = None
        self.doi = ""
        self.year = ""
        self.resource_type = ""
        self.version = ""
        self.language = ""

    @classmethod
    def from_initial(cls, data: Optional[Dict[str, Any]], **kwargs) -> 'ResourceFormState':
        """
        Build form state from a loaded resource dict.

        Args:
            data: External record as produced by the legacy loader or the
                  resource endpoint (authors, contributors, titles, ...)
            **kwargs: Passed to the constructor (list limits, parent)

        Returns:
            New ResourceFormState holding the mapped entries
        """
        state = cls(**kwargs)
        data = data if isinstance(data, dict) else {}

        state.titles = map_initial_titles(data.get('titles'))
        state.licenses = map_initial_licenses(data.get('licenses'))
        state.dates = map_initial_dates(data.get('dates'))
        state.descriptions = map_initial_descriptions(data.get('descriptions'))
        state.authors = map_initial_authors(data.get('authors')) or [create_empty_author(PERSON)]
        state.contributors = map_initial_contributors(data.get('contributors'))

        resource_id = data.get('resourceId')
        state.resource_id = resource_id if isinstance(resource_id, int) else None
        state.doi = _scalar_text(data, 'doi')
        state.year = _scalar_text(data, 'year')
        state.resource_type = _scalar_text(data, 'resourceType')
        state.version = _scalar_text(data, 'version')
        state.language = _scalar_text(data, 'language')

        logger.info(
            f"Loaded form state with {len(state.authors)} authors, "
            f"{len(state.contributors)} contributors and {len(state.titles)} titles"
        )
        return state

    # Generic list helpers

    @staticmethod
    def _index_of(entries: Iterable[Any], entry_id: str) -> int:
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                return index
        raise KeyError(f"No entry with id {entry_id}")

    def _replace_entry(self, attribute: str, entry_id: str, new_entry: Any) -> Any:
        entries = list(getattr(self, attribute))
        entries[self._index_of(entries, entry_id)] = new_entry
        setattr(self, attribute, entries)
        getattr(self, f"{attribute}_changed").emit(entries)
        return new_entry

    def _update_entry(self, attribute: str, entry_id: str, **changes) -> Any:
        entries = getattr(self, attribute)
        current = entries[self._index_of(entries, entry_id)]
        return self._replace_entry(attribute, entry_id, dataclasses.replace(current, **changes))

    def _remove_entry(self, attribute: str, entry_id: str, keep_one: bool) -> bool:
        entries = getattr(self, attribute)
        if keep_one and len(entries) <= 1:
            logger.debug(f"Refusing to remove the last {attribute} entry")
            return False

        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False

        setattr(self, attribute, remaining)
        getattr(self, f"{attribute}_changed").emit(remaining)
        return True

    def _append_entry(self, attribute: str, entry: Any) -> Any:
        entries = getattr(self, attribute) + [entry]
        setattr(self, attribute, entries)
        getattr(self, f"{attribute}_changed").emit(entries)
        return entry

    # Titles, licenses, dates, descriptions

    def can_add_title(self) -> bool:
        return gates.can_add_title(self.titles, self.max_titles)

    def can_add_license(self) -> bool:
        return gates.can_add_license(self.licenses, self.max_licenses)

    def can_add_date(self) -> bool:
        return gates.can_add_date(self.dates, self.max_dates)

    def add_title(self, title_type: str = "") -> bool:
        if not self.can_add_title():
            return False
        self._append_entry('titles', create_empty_title(title_type))
        return True

    def update_title(self, entry_id: str, **changes) -> TitleEntry:
        return self._update_entry('titles', entry_id, **changes)

    def remove_title(self, entry_id: str) -> bool:
        return self._remove_entry('titles', entry_id, keep_one=True)

    def add_license(self) -> bool:
        if not self.can_add_license():
            return False
        self._append_entry('licenses', create_empty_license())
        return True

    def update_license(self, entry_id: str, **changes) -> LicenseEntry:
        return self._update_entry('licenses', entry_id, **changes)

    def remove_license(self, entry_id: str) -> bool:
        return self._remove_entry('licenses', entry_id, keep_one=True)

    def add_date(self, date_type: str = "") -> bool:
        if not self.can_add_date():
            return False
        self._append_entry('dates', create_empty_date(date_type))
        return True

    def update_date(self, entry_id: str, **changes) -> DateEntry:
        return self._update_entry('dates', entry_id, **changes)

    def remove_date(self, entry_id: str) -> bool:
        return self._remove_entry('dates', entry_id, keep_one=True)

    def add_description(self, description_type: str = "") -> bool:
        self._append_entry('descriptions', create_empty_description(description_type))
        return True

    def update_description(self, entry_id: str, **changes) -> DescriptionEntry:
        return self._update_entry('descriptions', entry_id, **changes)

    def remove_description(self, entry_id: str) -> bool:
        return self._remove_entry('descriptions', entry_id, keep_one=True)

    # Authors

    def add_author(self, entry_type: str = PERSON) -> AuthorEntry:
        return self._append_entry('authors', create_empty_author(entry_type))

    def update_author(self, entry_id: str, **changes) -> AuthorEntry:
        return self._update_entry('authors', entry_id, **changes)

    def remove_author(self, entry_id: str) -> bool:
        return self._remove_entry('authors', entry_id, keep_one=True)

    def set_author_type(self, entry_id: str, entry_type: str) -> AuthorEntry:
        """
        Switch an author between person and institution.

        The entry keeps its id and affiliations; type-specific fields reset.
        """
        current = self.authors[self._index_of(self.authors, entry_id)]
        if current.type == entry_type:
            return current

        switched = dataclasses.replace(
            create_empty_author(entry_type),
            id=current.id,
            affiliations=list(current.affiliations),
            affiliations_input=current.affiliations_input,
        )
        return self._replace_entry('authors', entry_id, switched)

    def set_author_affiliations_input(
        self,
        entry_id: str,
        raw: str,
        suggestions: Optional[Iterable[AffiliationSuggestion]] = None
    ) -> AuthorEntry:
        current = self.authors[self._index_of(self.authors, entry_id)]
        tags = parse_affiliations_input(raw, suggestions, current.affiliations)
        return self.update_author(entry_id, affiliations=tags, affiliations_input=affiliations_input_for(tags))

    # Contributors

    def add_contributor(self, entry_type: str = PERSON) -> ContributorEntry:
        return self._append_entry('contributors', create_empty_contributor(entry_type))

    def update_contributor(self, entry_id: str, **changes) -> ContributorEntry:
        return self._update_entry('contributors', entry_id, **changes)

    def remove_contributor(self, entry_id: str) -> bool:
        return self._remove_entry('contributors', entry_id, keep_one=False)

    def set_contributor_type(self, entry_id: str, entry_type: str) -> ContributorEntry:
        current = self.contributors[self._index_of(self.contributors, entry_id)]
        if current.type == entry_type:
            return current

        switched = dataclasses.replace(
            create_empty_contributor(entry_type),
            id=current.id,
            affiliations=list(current.affiliations),
            affiliations_input=current.affiliations_input,
            roles=list(current.roles),
            roles_input=current.roles_input,
        )
        return self._replace_entry('contributors', entry_id, switched)

    def set_contributor_affiliations_input(
        self,
        entry_id: str,
        raw: str,
        suggestions: Optional[Iterable[AffiliationSuggestion]] = None
    ) -> ContributorEntry:
        current = self.contributors[self._index_of(self.contributors, entry_id)]
        tags = parse_affiliations_input(raw, suggestions, current.affiliations)
        return self.update_contributor(entry_id, affiliations=tags, affiliations_input=affiliations_input_for(tags))

    def set_contributor_roles_input(self, entry_id: str, raw: str) -> ContributorEntry:
        """Parse comma-separated role text into role tags."""
        roles = normalise_initial_contributor_roles((raw or "").split(','))
        return self.update_contributor(entry_id, roles=roles, roles_input=roles_input_for(roles))

    # Submission

    def is_submit_ready(self) -> bool:
        return gates.are_required_fields_filled(
            self.titles,
            self.licenses,
            self.authors,
            self.year,
            self.resource_type,
            self.language,
        )

    def build_payload(self) -> Dict[str, Any]:
        return build_save_payload(
            titles=self.titles,
            licenses=self.licenses,
            authors=self.authors,
            contributors=self.contributors,
            descriptions=self.descriptions,
            dates=self.dates,
            doi=self.doi,
            year=self.year,
            resource_type=self.resource_type,
            version=self.version,
            language=self.language,
            resource_id=self.resource_id,
        )

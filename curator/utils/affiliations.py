"""Normalization of affiliation data between external records and editor tags."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from curator.editor.entries import AffiliationTag


logger = logging.getLogger(__name__)


# Key aliases seen in stored records, in order of preference
AFFILIATION_VALUE_KEYS = ('value', 'name')
AFFILIATION_ROR_KEYS = ('rorId', 'rorid', 'identifier')

# Key aliases used by the ROR suggestion service
SUGGESTION_NAME_KEYS = ('prefLabel', 'name', 'value')
SUGGESTION_ROR_KEYS = ('id', 'rorId', 'identifier')


@dataclass(frozen=True)
class AffiliationSuggestion:
    """Organization candidate from the ROR suggestion service."""

    name: str
    ror_id: Optional[str] = None


def _first_string(record: Dict[str, Any], keys: Iterable[str]) -> str:
    """Return the first value among ``keys`` that is a string, trimmed."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, str):
            return value.strip()
    return ""


def normalise_initial_affiliations(affiliations: Any) -> List[AffiliationTag]:
    """
    Normalize affiliations of a stored author/contributor into editor tags.

    Stored records use different key names depending on their origin:
    - {"value": "GFZ", "rorId": "https://ror.org/04z8jg394"} (current editor)
    - {"name": "GFZ", "rorid": "..."} (legacy database export)
    - {"name": "GFZ", "identifier": "..."} (XML upload)

    Rules:
    - None or non-list input yields []
    - Non-dict elements are dropped
    - If the name is empty but a ROR ID exists, the ROR ID becomes the name
    - Entries without name and ROR ID are dropped

    Args:
        affiliations: Raw affiliation list from the external record

    Returns:
        List of AffiliationTag in input order
    """
    if not affiliations or not isinstance(affiliations, list):
        return []

    tags = []
    for affiliation in affiliations:
        if not isinstance(affiliation, dict):
            logger.debug(f"Dropping malformed affiliation: {affiliation!r}")
            continue

        value = _first_string(affiliation, AFFILIATION_VALUE_KEYS)
        ror_id = _first_string(affiliation, AFFILIATION_ROR_KEYS)

        if not value and not ror_id:
            continue

        tags.append(AffiliationTag(value=value or ror_id, ror_id=ror_id or None))

    return tags


def serialize_affiliations(affiliations: Iterable[AffiliationTag]) -> List[Dict[str, Optional[str]]]:
    """
    Serialize editor affiliation tags for the save payload.

    Trims both fields, drops empty tags and removes duplicates
    (same name and same ROR ID), keeping the first occurrence.

    Args:
        affiliations: Tags of one author or contributor

    Returns:
        List of {"value": str, "rorId": str | None} dicts
    """
    seen = set()
    serialized = []

    for affiliation in affiliations:
        raw_value = affiliation.value.strip() if isinstance(affiliation.value, str) else ""
        raw_ror_id = affiliation.ror_id.strip() if isinstance(affiliation.ror_id, str) else ""

        if not raw_value and not raw_ror_id:
            continue

        value = raw_value or raw_ror_id
        ror_id = raw_ror_id or None
        key = (value, ror_id)

        if key in seen:
            continue

        seen.add(key)
        serialized.append({'value': value, 'rorId': ror_id})

    return serialized


def affiliations_input_for(affiliations: Iterable[AffiliationTag]) -> str:
    """Build the raw-text cache shown in the affiliation input."""
    return ','.join(tag.value for tag in affiliations)


def suggestions_from_payload(items: Any) -> List[AffiliationSuggestion]:
    """
    Convert the suggestion service response into AffiliationSuggestion values.

    Items without a usable name are skipped.
    """
    if not items or not isinstance(items, list):
        return []

    suggestions = []
    for item in items:
        if isinstance(item, str):
            name = item.strip()
            ror_id = ""
        elif isinstance(item, dict):
            name = _first_string(item, SUGGESTION_NAME_KEYS)
            ror_id = _first_string(item, SUGGESTION_ROR_KEYS)
        else:
            continue

        if name:
            suggestions.append(AffiliationSuggestion(name=name, ror_id=ror_id or None))

    return suggestions


def parse_affiliations_input(
    raw: Any,
    suggestions: Optional[Iterable[AffiliationSuggestion]] = None,
    existing: Optional[Iterable[AffiliationTag]] = None
) -> List[AffiliationTag]:
    """
    Turn the comma-separated affiliation text into tags.

    A token that matches a suggestion name (case-insensitive) takes the
    suggestion's canonical spelling and ROR ID. Otherwise a token keeps the
    ROR ID of an existing tag with the same name, so retyping the text does
    not lose identifiers. Duplicate tokens are collapsed.

    Args:
        raw: Text typed into the affiliation input
        suggestions: Pre-fetched ROR suggestions
        existing: Tags currently held by the entry

    Returns:
        List of AffiliationTag in typed order
    """
    if not raw or not isinstance(raw, str):
        return []

    by_name = {}
    for suggestion in suggestions or []:
        by_name.setdefault(suggestion.name.casefold(), suggestion)

    known_ror_ids = {}
    for tag in existing or []:
        if tag.ror_id:
            known_ror_ids.setdefault(tag.value.casefold(), tag.ror_id)

    tags = []
    seen = set()
    for token in raw.split(','):
        name = token.strip()
        if not name:
            continue

        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)

        suggestion = by_name.get(key)
        if suggestion is not None:
            tags.append(AffiliationTag(value=suggestion.name, ror_id=suggestion.ror_id))
        else:
            tags.append(AffiliationTag(value=name, ror_id=known_ror_ids.get(key)))

    return tags

"""Contributor role normalization and organization-only role inference."""

import logging
import re
from typing import Any, Iterable, List, Optional

from curator.editor.entries import INSTITUTION, PERSON, RoleTag


logger = logging.getLogger(__name__)


# DataCite contributor types, keyed by lowercase alphanumerics only so that
# "DataCollector", "data-collector" and "Data Collector" resolve alike
CONTRIBUTOR_ROLE_LABELS = {
    'contactperson': 'Contact Person',
    'datacollector': 'Data Collector',
    'datacurator': 'Data Curator',
    'datamanager': 'Data Manager',
    'distributor': 'Distributor',
    'editor': 'Editor',
    'hostinginstitution': 'Hosting Institution',
    'producer': 'Producer',
    'projectleader': 'Project Leader',
    'projectmanager': 'Project Manager',
    'projectmember': 'Project Member',
    'registrationagency': 'Registration Agency',
    'registrationauthority': 'Registration Authority',
    'relatedperson': 'Related Person',
    'researcher': 'Researcher',
    'researchgroup': 'Research Group',
    'rightsholder': 'Rights Holder',
    'sponsor': 'Sponsor',
    'supervisor': 'Supervisor',
    'translator': 'Translator',
    'workpackageleader': 'Work Package Leader',
    'other': 'Other',
    'pointofcontact': 'Contact Person',  # GFZ-internal legacy type
}

# Roles only an organization can hold
INSTITUTION_ONLY_ROLE_LABELS = frozenset({
    'Distributor',
    'Hosting Institution',
    'Registration Agency',
    'Registration Authority',
    'Research Group',
    'Sponsor',
})


def _role_key(role: str) -> str:
    return re.sub(r'[^a-z0-9]', '', role.lower())


def normalise_contributor_role_label(role: Any) -> str:
    """
    Convert a role identifier or slug into its human-readable label.

    Examples:
        DataCollector -> Data Collector
        hosting-institution -> Hosting Institution
        Data Collector -> Data Collector
    """
    if not isinstance(role, str):
        return ""

    trimmed = role.strip()
    if not trimmed:
        return ""

    known = CONTRIBUTOR_ROLE_LABELS.get(_role_key(trimmed))
    if known:
        return known

    if ' ' in trimmed:
        return trimmed

    if '-' in trimmed or '_' in trimmed:
        words = [word for word in re.split(r'[-_]+', trimmed) if word]
        return ' '.join(word[:1].upper() + word[1:] for word in words)

    return re.sub(r'(?<=[a-z0-9])(?=[A-Z])', ' ', trimmed)


def normalise_initial_contributor_roles(roles: Any) -> List[RoleTag]:
    """
    Normalize stored contributor roles into deduplicated RoleTags.

    Accepted shapes:
    - None / empty -> []
    - "DataCollector" -> single role
    - ["Editor", "DataCollector"] -> one role per element
    - {"0": "Editor", "1": "DataCollector"} -> the dict's values

    Empty and non-string tokens are skipped. Duplicates (after label
    normalization) are removed keeping the first occurrence.
    """
    if not roles:
        return []

    if isinstance(roles, str):
        raw_roles = [roles]
    elif isinstance(roles, (list, tuple)):
        raw_roles = list(roles)
    elif isinstance(roles, dict):
        raw_roles = list(roles.values())
    else:
        logger.debug(f"Ignoring roles of unexpected type: {type(roles)}")
        return []

    tags = []
    seen = set()
    for raw_role in raw_roles:
        label = normalise_contributor_role_label(raw_role)
        if not label or label in seen:
            continue
        seen.add(label)
        tags.append(RoleTag(value=label))

    return tags


def roles_input_for(roles: Iterable[RoleTag]) -> str:
    """Build the raw-text cache shown in the role input."""
    return ', '.join(role.value for role in roles)


def has_institution_only_role(labels: Iterable[str]) -> bool:
    return any(label in INSTITUTION_ONLY_ROLE_LABELS for label in labels)


def infer_contributor_type_from_roles(explicit_type: Optional[str], labels: Iterable[str]) -> str:
    """
    Resolve the contributor type from the stored type and the role labels.

    An organization-only role forces "institution", even when the record
    also carries person fields.

    Args:
        explicit_type: "person", "institution" or anything else/None
        labels: Normalized role labels

    Returns:
        "person" or "institution"
    """
    if has_institution_only_role(labels):
        return INSTITUTION

    if explicit_type in (PERSON, INSTITUTION):
        return explicit_type

    return PERSON

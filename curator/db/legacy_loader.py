"""Load legacy datasets into the editor's external record shape."""

import logging
import re
from collections import defaultdict
from typing import Any, Dict, List, Optional, Set

from curator.db.legacy_dataset_client import DatabaseError, LegacyDatasetClient
from curator.editor.form_state import ResourceFormState
from curator.editor.gates import MAIN_TITLE_SLUG
from curator.utils.name_parser import is_person, parse_person_name


logger = logging.getLogger(__name__)


CREATOR_ROLE = 'Creator'
POINT_OF_CONTACT_ROLE = 'pointOfContact'

DEFAULT_LANGUAGE = 'en'
DEFAULT_RESOURCE_TYPE = '1'  # Dataset

RESOURCE_TYPE_IDS = {
    'Dataset': '1',
    'Collection': '2',
    'Model': '3',
    'Software': '4',
    'Image': '5',
    'PhysicalObject': '6',
}

TITLE_TYPE_SLUGS = {
    'AlternativeTitle': 'alternative-title',
    'Subtitle': 'subtitle',
    'TranslatedTitle': 'translated-title',
    'Other': 'other',
}

ROLE_SLUGS = {
    'pointOfContact': 'contact-person',
    'ContactPerson': 'contact-person',
    'DataCollector': 'data-collector',
    'DataCurator': 'data-curator',
    'DataManager': 'data-manager',
    'Editor': 'editor',
    'Producer': 'producer',
    'ProjectLeader': 'project-leader',
    'ProjectManager': 'project-manager',
    'ProjectMember': 'project-member',
    'RelatedPerson': 'related-person',
    'Researcher': 'researcher',
    'RightsHolder': 'rights-holder',
    'Supervisor': 'supervisor',
    'Translator': 'translator',
    'WorkPackageLeader': 'work-package-leader',
    'Distributor': 'distributor',
    'HostingInstitution': 'hosting-institution',
    'RegistrationAgency': 'registration-agency',
    'RegistrationAuthority': 'registration-authority',
    'ResearchGroup': 'research-group',
    'Sponsor': 'sponsor',
}

LICENSE_IDENTIFIERS = {
    'CC BY 4.0': 'CC-BY-4.0',
    'CC BY-NC 4.0': 'CC-BY-NC-4.0',
    'CC BY-SA 4.0': 'CC-BY-SA-4.0',
    'CC BY 3.0': 'CC-BY-3.0',
    'CC BY-NC-SA 4.0': 'CC-BY-NC-SA-4.0',
    'CC0 1.0': 'CC0-1.0',
    'CC0': 'CC0-1.0',
    'CC0 Universal 1.0': 'CC0-1.0',
    'Creative Commons Attribution 4.0 International': 'CC-BY-4.0',
    'Apache License 2.0': 'Apache-2.0',
    'Apache License Version 2.0': 'Apache-2.0',
    'MIT License': 'MIT',
    'MIT Licence': 'MIT',
    'GNU General Public License, version 3': 'GPL-3.0-only',
    'GNU Lesser General Public License v2.1': 'LGPL-2.1-only',
    'BSD 2-clause "Simplified" License': 'BSD-2-Clause',
    'BSD 3-Clause License': 'BSD-3-Clause',
    'EUPL v1.2': 'EUPL-1.2',
    'EUPL-1.2': 'EUPL-1.2',
    'Open Data Commons Open Database License (ODbL)': 'ODbL-1.0',
}

CC_LICENSE_PATTERN = re.compile(r'CC\s+BY(?:-NC)?(?:-SA)?(?:-ND)?\s*(\d+\.\d+)?', re.IGNORECASE)


class LegacyDatasetNotFoundError(DatabaseError):
    """Raised when the requested dataset does not exist."""
    pass


def _name_key(name: Optional[str]) -> str:
    return name.strip().lower() if isinstance(name, str) else ""


def _split_roles(roles: Optional[str]) -> List[str]:
    if not roles:
        return []
    return [role.strip() for role in roles.split(',') if role.strip()]


def map_language(language: Optional[str]) -> str:
    return language.strip().lower() if language and language.strip() else DEFAULT_LANGUAGE


def map_resource_type(resource_type: Optional[str]) -> str:
    return RESOURCE_TYPE_IDS.get(resource_type or '', DEFAULT_RESOURCE_TYPE)


def map_role_to_slug(role: str) -> str:
    """Map a legacy role name to a role slug (pointOfContact -> contact-person)."""
    return ROLE_SLUGS.get(role, role.lower())


def map_license_name(name: str) -> Optional[str]:
    """
    Map a free-text legacy license name to an SPDX-style identifier.

    Returns:
        Identifier or None if the name is not recognized
    """
    name = name.strip()
    if name in LICENSE_IDENTIFIERS:
        return LICENSE_IDENTIFIERS[name]

    match = CC_LICENSE_PATTERN.search(name)
    if match:
        version = match.group(1) or '4.0'
        suffix = ''
        if re.search(r'\b(NC|Non-?Commercial)\b', name, re.IGNORECASE):
            suffix += '-NC'
        if re.search(r'\b(SA|Share-?Alike)\b', name, re.IGNORECASE):
            suffix += '-SA'
        if re.search(r'\b(ND|No-?Derivatives?|NoDerivs?)\b', name, re.IGNORECASE):
            suffix += '-ND'
        return f"CC-BY{suffix}-{version}"

    return None


class LegacyDatasetLoader:
    """
    Build editor records from the legacy metadata database.

    Authors are the Creator agents. An author is a contact person if its
    own agent entry or a same-named agent carries the pointOfContact role;
    email and website then come from that agent's contact info.
    Contributors are all other agents, except those sharing an author's
    name (the separate pointOfContact entry of an author).
    """

    def __init__(self, client: LegacyDatasetClient):
        self.client = client

    def load_for_editor(self, resource_id: int) -> Dict[str, Any]:
        """
        Load a complete dataset for the editor.

        Args:
            resource_id: Legacy resource id

        Returns:
            Dict with doi, year, version, language, resourceType, titles,
            licenses, authors, contributors, descriptions, dates, resourceId

        Raises:
            LegacyDatasetNotFoundError: If the dataset does not exist
            DatabaseError: If a query fails
        """
        resource = self.client.fetch_resource(resource_id)
        if not resource:
            raise LegacyDatasetNotFoundError(f"Legacy dataset with ID {resource_id} not found")

        logger.info(f"Loading legacy dataset {resource_id} for editor")

        creators = self.client.fetch_creators_for_resource(resource_id)
        agents = self.client.fetch_contributors_for_resource(resource_id)
        affiliations = self._group_affiliations(self.client.fetch_affiliations_for_resource(resource_id))
        contact_info = self.client.fetch_contactinfo_for_resource(resource_id)

        year = resource.get('publicationyear')

        return {
            'resourceId': resource_id,
            'doi': resource.get('identifier') or '',
            'year': str(year) if year is not None else '',
            'version': resource.get('version') or '',
            'language': map_language(resource.get('language')),
            'resourceType': map_resource_type(resource.get('resourcetypegeneral')),
            'titles': self._load_titles(resource),
            'licenses': self._load_licenses(resource_id),
            'authors': self._build_authors(creators, agents, affiliations, contact_info),
            'contributors': self._build_contributors(creators, agents, affiliations),
            'descriptions': self._load_descriptions(resource_id),
            'dates': self._load_dates(resource_id),
        }

    @staticmethod
    def _group_affiliations(rows: List[Dict[str, Any]]) -> Dict[int, List[Dict[str, Optional[str]]]]:
        grouped = defaultdict(list)
        for row in rows:
            ror_id = row.get('identifier') if row.get('identifiertype') == 'ROR' else None
            grouped[row.get('order')].append({'value': row.get('name'), 'rorId': ror_id or None})
        return grouped

    @staticmethod
    def _orcid_for(agent: Dict[str, Any]) -> Optional[str]:
        if agent.get('identifier') and agent.get('identifiertype') == 'ORCID':
            return agent['identifier']
        return None

    def _build_authors(
        self,
        creators: List[Dict[str, Any]],
        agents: List[Dict[str, Any]],
        affiliations: Dict[int, List[Dict[str, Optional[str]]]],
        contact_info: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        contact_agents = [agent for agent in agents if POINT_OF_CONTACT_ROLE in _split_roles(agent.get('roles'))]
        contact_orders: Set[int] = {agent.get('order') for agent in contact_agents}
        contact_names: Dict[str, int] = {}
        for agent in contact_agents:
            contact_names.setdefault(_name_key(agent.get('name')), agent.get('order'))

        info_by_order = {row.get('order'): row for row in contact_info}

        authors = []
        for position, creator in enumerate(creators):
            parsed = parse_person_name(creator.get('name'), creator.get('firstname'), creator.get('lastname'))
            author: Dict[str, Any] = {
                'type': 'person',
                'position': position,
                'firstName': parsed['firstName'],
                'lastName': parsed['lastName'],
                'orcid': self._orcid_for(creator),
            }

            order = creator.get('order')
            name_key = _name_key(creator.get('name'))
            is_contact = order in contact_orders or name_key in contact_names
            author['isContact'] = is_contact

            if is_contact:
                info = info_by_order.get(order) or {}
                if not (info.get('email') and info.get('website')) and order not in contact_orders:
                    info = info_by_order.get(contact_names.get(name_key)) or info
                if info.get('email'):
                    author['email'] = info['email']
                if info.get('website'):
                    author['website'] = info['website']

            author['affiliations'] = affiliations.get(order, [])
            authors.append(author)

        return authors

    def _build_contributors(
        self,
        creators: List[Dict[str, Any]],
        agents: List[Dict[str, Any]],
        affiliations: Dict[int, List[Dict[str, Optional[str]]]]
    ) -> List[Dict[str, Any]]:
        author_names = {_name_key(creator.get('name')) for creator in creators}

        contributors = []
        for agent in agents:
            if _name_key(agent.get('name')) in author_names:
                continue

            parsed = parse_person_name(agent.get('name'), agent.get('firstname'), agent.get('lastname'))
            contributor: Dict[str, Any] = {'position': len(contributors)}

            if is_person(parsed):
                contributor.update({
                    'type': 'person',
                    'firstName': parsed['firstName'],
                    'lastName': parsed['lastName'],
                    'orcid': self._orcid_for(agent),
                })
            else:
                contributor.update({
                    'type': 'institution',
                    'institutionName': (agent.get('name') or '').strip(),
                })

            contributor['roles'] = [map_role_to_slug(role) for role in _split_roles(agent.get('roles'))]
            contributor['affiliations'] = affiliations.get(agent.get('order'), [])
            contributors.append(contributor)

        return contributors

    def _load_titles(self, resource: Dict[str, Any]) -> List[Dict[str, str]]:
        titles = []
        has_main_title = False
        for row in self.client.fetch_titles_for_resource(resource['id']):
            title_type = row.get('titletype')
            if not title_type:
                titles.append({'title': row['title'], 'titleType': MAIN_TITLE_SLUG})
                has_main_title = True
            else:
                titles.append({'title': row['title'], 'titleType': TITLE_TYPE_SLUGS.get(title_type, '')})

        if not has_main_title and resource.get('title'):
            titles.insert(0, {'title': resource['title'], 'titleType': MAIN_TITLE_SLUG})

        return titles

    def _load_licenses(self, resource_id: int) -> List[str]:
        identifiers = []
        for name in self.client.fetch_licenses_for_resource(resource_id):
            identifier = map_license_name(name)
            if identifier is None:
                logger.warning(f"Could not map license '{name}' of dataset {resource_id}")
            elif identifier not in identifiers:
                identifiers.append(identifier)
        return identifiers

    def _load_descriptions(self, resource_id: int) -> List[Dict[str, str]]:
        return [
            {'type': row.get('descriptiontype') or '', 'description': row.get('description') or ''}
            for row in self.client.fetch_descriptions_for_resource(resource_id)
        ]

    def _load_dates(self, resource_id: int) -> List[Dict[str, str]]:
        dates = []
        for row in self.client.fetch_dates_for_resource(resource_id):
            value = str(row.get('date') or '').strip()
            start, _, end = value.partition('/')
            dates.append({'dateType': row.get('datetype') or '', 'startDate': start.strip(), 'endDate': end.strip()})
        return dates

    def load_editor_state(self, resource_id: int, **kwargs) -> ResourceFormState:
        """Load a dataset and map it into a ResourceFormState."""
        return ResourceFormState.from_initial(self.load_for_editor(resource_id), **kwargs)

"""
Legacy metadata database client (PyMySQL).

Read-only access to the legacy dataset tables used to prefill the editor:

- resource: DOI (identifier), publication year, version, language, type
- resourceagent: agent names and ORCID (identifier/identifiertype)
- role: maps a resourceagent (resource_id + order) to a role
  (Creator, pointOfContact, DataCollector, ...)
- affiliation: agent affiliations with optional ROR identifier
- contactinfo: email/website of contact persons
- title, description, date, license: repeatable resource fields
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

import pymysql
from pymysql.cursors import DictCursor


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when a query against the legacy database fails."""
    pass


class ConnectionError(DatabaseError):
    """Raised when no connection to the legacy database can be opened."""
    pass


class LegacyDatasetClient:
    """Client for reading datasets from the legacy metadata database."""

    CONNECT_TIMEOUT = 10  # seconds

    def __init__(self, host: str, database: str, username: str, password: str):
        """
        Args:
            host: MySQL host of the legacy metadata database
            database: Schema name (e.g., "metaworks")
            username: Read-only account
            password: Password from the keyring
        """
        self.host = host
        self.database = database
        self.username = username
        self.password = password

        logger.info(f"LegacyDatasetClient initialized for {self.host}/{self.database}")

    @contextmanager
    def get_connection(self):
        """
        Open a connection for one unit of work.

        A new connection is opened per call and closed on exit.

        Yields:
            connection: PyMySQL connection returning rows as dicts

        Raises:
            ConnectionError: If the server refuses or times out
        """
        connection = None
        try:
            connection = pymysql.connect(
                host=self.host,
                database=self.database,
                user=self.username,
                password=self.password,
                connect_timeout=self.CONNECT_TIMEOUT,
                charset='utf8mb4',
                cursorclass=DictCursor
            )
        except pymysql.Error as e:
            logger.error(f"Cannot open connection to {self.host}/{self.database}: {e}")
            raise ConnectionError(f"Cannot reach {self.host}/{self.database}: {e}") from e

        try:
            yield connection
        finally:
            if connection:
                connection.close()

    def _fetch_all(self, query: str, params: Tuple[Any, ...], what: str) -> List[Dict[str, Any]]:
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)
                    rows = list(cursor.fetchall())
                    logger.debug(f"Fetched {len(rows)} {what} rows")
                    return rows
        except pymysql.Error as e:
            logger.error(f"Database error fetching {what}: {e}")
            raise DatabaseError(f"Failed to fetch {what}: {e}") from e

    def _fetch_one(self, query: str, params: Tuple[Any, ...], what: str) -> Optional[Dict[str, Any]]:
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params)
                    return cursor.fetchone()
        except pymysql.Error as e:
            logger.error(f"Database error fetching {what}: {e}")
            raise DatabaseError(f"Failed to fetch {what}: {e}") from e

    def test_connection(self) -> Tuple[bool, str]:
        """
        Check that the legacy database answers.

        Returns:
            (True, server version message) or (False, error message)
        """
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("SELECT VERSION()")
                    result = cursor.fetchone()
                    message = f"Connected to MySQL {result['VERSION()']}"
                    logger.info(message)
                    return True, message
        except (pymysql.Error, DatabaseError) as e:
            message = f"Connection failed: {str(e)}"
            logger.error(message)
            return False, message

    def get_resource_id_for_doi(self, doi: str) -> Optional[int]:
        """
        Get the resource id for a DOI.

        Args:
            doi: DOI string (e.g., "10.5880/GFZ.1.1.2021.001")

        Returns:
            Resource ID or None if not found

        Raises:
            DatabaseError: If query fails
        """
        query = """
            SELECT id
            FROM resource
            WHERE identifier = %s
            LIMIT 1
        """
        result = self._fetch_one(query, (doi,), "resource id")
        if result:
            logger.debug(f"Found resource_id {result['id']} for DOI {doi}")
            return result['id']

        logger.warning(f"No resource found for DOI {doi}")
        return None

    def fetch_resource(self, resource_id: int) -> Optional[Dict[str, Any]]:
        """
        Fetch the resource row.

        Returns:
            Dict with keys id, identifier, title, publicationyear, version,
            language, resourcetypegeneral; None if not found
        """
        query = """
            SELECT
                id,
                identifier,
                title,
                publicationyear,
                version,
                language,
                resourcetypegeneral
            FROM resource
            WHERE id = %s
            LIMIT 1
        """
        return self._fetch_one(query, (resource_id,), "resource")

    def fetch_creators_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """
        Fetch all Creators for a resource, ordered by agent order.

        Returns:
            List of dicts with keys order, name, firstname, lastname,
            identifier, identifiertype
        """
        query = """
            SELECT
                ra.order AS `order`,
                ra.name,
                ra.firstname,
                ra.lastname,
                ra.identifier,
                ra.identifiertype
            FROM resourceagent ra
            INNER JOIN role r
                ON r.resourceagent_resource_id = ra.resource_id
                AND r.resourceagent_order = ra.order
            WHERE ra.resource_id = %s
                AND r.role = 'Creator'
            ORDER BY ra.order ASC
        """
        creators = self._fetch_all(query, (resource_id,), "creators")
        logger.info(f"Fetched {len(creators)} creators for resource_id {resource_id}")
        return creators

    def fetch_contributors_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """
        Fetch all agents with a non-Creator role.

        An agent with several roles appears once; ``roles`` holds the role
        names comma-separated. Creators that also carry pointOfContact are
        included here with that role.

        Returns:
            List of dicts with keys order, name, firstname, lastname,
            identifier, identifiertype, roles
        """
        query = """
            SELECT
                ra.order AS `order`,
                ra.name,
                ra.firstname,
                ra.lastname,
                ra.identifier,
                ra.identifiertype,
                GROUP_CONCAT(r.role ORDER BY r.role SEPARATOR ',') AS roles
            FROM resourceagent ra
            INNER JOIN role r
                ON r.resourceagent_resource_id = ra.resource_id
                AND r.resourceagent_order = ra.order
            WHERE ra.resource_id = %s
                AND r.role != 'Creator'
            GROUP BY ra.resource_id, ra.order
            ORDER BY ra.order ASC
        """
        contributors = self._fetch_all(query, (resource_id,), "contributors")
        logger.info(f"Fetched {len(contributors)} contributors for resource_id {resource_id}")
        return contributors

    def fetch_affiliations_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """
        Fetch all non-empty affiliations of all agents of a resource.

        Returns:
            List of dicts with keys order (agent order), name, identifier,
            identifiertype
        """
        query = """
            SELECT
                a.resourceagent_order AS `order`,
                a.name,
                a.identifier,
                a.identifiertype
            FROM affiliation a
            WHERE a.resourceagent_resource_id = %s
                AND a.name IS NOT NULL
                AND a.name != ''
            ORDER BY a.resourceagent_order ASC, a.id ASC
        """
        return self._fetch_all(query, (resource_id,), "affiliations")

    def fetch_contactinfo_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """
        Fetch email/website of all agents that have contact info.

        Returns:
            List of dicts with keys order, name, email, website
        """
        query = """
            SELECT
                ra.order AS `order`,
                ra.name,
                ci.email,
                ci.website
            FROM resourceagent ra
            INNER JOIN contactinfo ci
                ON ci.resourceagent_resource_id = ra.resource_id
                AND ci.resourceagent_order = ra.order
            WHERE ra.resource_id = %s
                AND (ci.email IS NOT NULL OR ci.website IS NOT NULL)
            ORDER BY ra.order ASC
        """
        return self._fetch_all(query, (resource_id,), "contactinfo")

    def fetch_titles_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """Fetch non-empty titles (keys: title, titletype)."""
        query = """
            SELECT title, titletype
            FROM title
            WHERE resource_id = %s
                AND title IS NOT NULL
                AND title != ''
            ORDER BY id ASC
        """
        return self._fetch_all(query, (resource_id,), "titles")

    def fetch_descriptions_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """Fetch non-empty descriptions (keys: descriptiontype, description)."""
        query = """
            SELECT descriptiontype, description
            FROM description
            WHERE resource_id = %s
                AND description IS NOT NULL
                AND description != ''
            ORDER BY id ASC
        """
        return self._fetch_all(query, (resource_id,), "descriptions")

    def fetch_dates_for_resource(self, resource_id: int) -> List[Dict[str, Any]]:
        """Fetch resource dates (keys: datetype, date); ranges are stored as "start/end"."""
        query = """
            SELECT datetype, `date`
            FROM `date`
            WHERE resource_id = %s
            ORDER BY id ASC
        """
        return self._fetch_all(query, (resource_id,), "dates")

    def fetch_licenses_for_resource(self, resource_id: int) -> List[str]:
        """Fetch distinct license names in stored order."""
        query = """
            SELECT name
            FROM license
            WHERE resource_id = %s
            ORDER BY id ASC
        """
        rows = self._fetch_all(query, (resource_id,), "licenses")

        names = []
        for row in rows:
            name = row.get('name')
            if name and name not in names:
                names.append(name)
        return names

"""Split legacy agent names into given and family name."""

from typing import Dict, Optional


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_person_name(
    name: Optional[str],
    firstname: Optional[str] = None,
    lastname: Optional[str] = None
) -> Dict[str, str]:
    """
    Parse a legacy agent name.

    The legacy database stores names either in separate firstname/lastname
    columns or combined as "Lastname, Firstname" in the name column.

    Args:
        name: Combined name column
        firstname: Separate given-name column
        lastname: Separate family-name column

    Returns:
        Dict with 'firstName' and 'lastName' (either may be empty)

    Examples:
        >>> parse_person_name("Doe, Jane")
        {'firstName': 'Jane', 'lastName': 'Doe'}
        >>> parse_person_name("GFZ Data Services")
        {'firstName': '', 'lastName': 'GFZ Data Services'}
    """
    first = _clean(firstname)
    last = _clean(lastname)

    if first or last:
        return {'firstName': first, 'lastName': last}

    full = _clean(name)
    if ',' in full:
        last_part, _, first_part = full.partition(',')
        return {'firstName': first_part.strip(), 'lastName': last_part.strip()}

    return {'firstName': '', 'lastName': full}


def is_person(parsed: Dict[str, str]) -> bool:
    """A parsed name is a person if it has a given name."""
    return bool(_clean(parsed.get('firstName')))

"""Normalizers for ORCID identifiers, website URLs and title type slugs."""

import logging
import re
from typing import Any


logger = logging.getLogger(__name__)


# Optional scheme, optional "www.", then "orcid.org/" followed by the bare ID
ORCID_PREFIX_PATTERN = re.compile(r'^(?:https?://)?(?:www\.)?orcid\.org/(.+)$', re.IGNORECASE)

URL_SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def normalize_orcid(orcid: Any) -> str:
    """
    Normalize an ORCID identifier to its bare form.

    Accepted inputs:
    - Bare ID: 0000-0002-1825-0097
    - Full URL: https://orcid.org/0000-0002-1825-0097
    - Variants: http://, www., or no scheme at all (orcid.org/...)

    Args:
        orcid: Raw ORCID value (anything that is not a string yields "")

    Returns:
        The bare ORCID (e.g. "0000-0002-1825-0097"), or the trimmed input if
        no orcid.org prefix is present
    """
    if not orcid or not isinstance(orcid, str):
        return ""

    trimmed = orcid.strip()

    match = ORCID_PREFIX_PATTERN.match(trimmed)
    if match and match.group(1):
        return match.group(1)

    return trimmed


def normalize_website_url(url: Any) -> str:
    """
    Ensure a website URL carries a protocol prefix.

    URLs that already start with http:// or https:// (any casing) are
    returned trimmed but otherwise untouched.

    Args:
        url: Raw website value

    Returns:
        Normalized URL, or "" for empty/non-string input
    """
    if not url or not isinstance(url, str):
        return ""

    trimmed = url.strip()

    if trimmed and not URL_SCHEME_PATTERN.match(trimmed):
        return f"https://{trimmed}"

    return trimmed


def normalize_title_type_slug(value: Any) -> str:
    """
    Normalize a title type to kebab-case.

    Legacy records store title types as "MainTitle", "main_title",
    "Alternative Title" etc. All of them collapse to the same slug.

    Examples:
        MainTitle -> main-title
        AlternativeTitle -> alternative-title
        main.title! -> main-title
    """
    if value is None or not isinstance(value, str):
        return ""

    trimmed = value.strip()
    if not trimmed:
        return ""

    slug = trimmed.replace('_', '-')
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'([a-z0-9])([A-Z])', r'\1-\2', slug)
    slug = re.sub(r'[^a-zA-Z0-9-]', '-', slug)
    slug = re.sub(r'-+', '-', slug)

    return slug.strip('-').lower()

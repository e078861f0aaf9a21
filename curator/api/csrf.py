"""Locate the anti-forgery token for save requests."""

import logging
from typing import Dict, Mapping, Optional
from urllib.parse import unquote

from lxml import etree


logger = logging.getLogger(__name__)


CSRF_META_NAME = "csrf-token"
XSRF_COOKIE_NAME = "XSRF-TOKEN"


def find_meta_csrf_token(html_content: Optional[str]) -> Optional[str]:
    """
    Read the token from the ``<meta name="csrf-token">`` tag of a page.

    Args:
        html_content: HTML of the editor page

    Returns:
        Token content, or None if the tag is missing or empty
    """
    if not html_content or not html_content.strip():
        return None

    root = etree.HTML(html_content, parser=etree.HTMLParser(recover=True))
    if root is None:
        return None

    for content in root.xpath(f'//meta[@name="{CSRF_META_NAME}"]/@content'):
        token = content.strip()
        if token:
            return token

    return None


def find_cookie_xsrf_token(cookies: Optional[Mapping[str, str]]) -> Optional[str]:
    """Read and URL-decode the XSRF-TOKEN cookie."""
    if not cookies:
        return None

    raw = cookies.get(XSRF_COOKIE_NAME)
    if not raw:
        return None

    token = unquote(raw).strip()
    return token or None


def build_csrf_headers(
    html_content: Optional[str] = None,
    cookies: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """
    Build the anti-forgery headers for a state-changing request.

    The meta tag wins. Without it the decoded XSRF-TOKEN cookie is sent as
    both X-CSRF-TOKEN and X-XSRF-TOKEN.

    Returns:
        Header dict, empty if no token was found
    """
    meta_token = find_meta_csrf_token(html_content)
    if meta_token:
        return {'X-CSRF-TOKEN': meta_token}

    cookie_token = find_cookie_xsrf_token(cookies)
    if cookie_token:
        logger.debug("No csrf-token meta tag, using XSRF-TOKEN cookie")
        return {'X-CSRF-TOKEN': cookie_token, 'X-XSRF-TOKEN': cookie_token}

    logger.warning("No CSRF token found in page or cookies")
    return {}


def parse_cookie_header(cookie_header: Optional[str]) -> Dict[str, str]:
    """Parse a ``name=value; name2=value2`` cookie string into a dict."""
    cookies = {}
    if not cookie_header:
        return cookies

    for part in cookie_header.split(';'):
        name, separator, value = part.strip().partition('=')
        if separator and name:
            cookies[name] = value

    return cookies

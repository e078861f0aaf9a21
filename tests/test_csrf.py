"""Unit tests for CSRF token resolution."""

from curator.api.csrf import (
    build_csrf_headers,
    find_cookie_xsrf_token,
    find_meta_csrf_token,
    parse_cookie_header,
)


PAGE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="csrf-token" content="meta-token-123">
    <title>Editor</title>
</head>
<body><div id="app"></div></body>
</html>
"""


class TestMetaToken:
    """Tests for find_meta_csrf_token."""

    def test_token_found(self):
        """Test reading the token from the meta tag."""
        assert find_meta_csrf_token(PAGE) == "meta-token-123"

    def test_missing_tag(self):
        """Test pages without the tag."""
        assert find_meta_csrf_token("<html><head></head></html>") is None

    def test_empty_content(self):
        """Test that an empty content attribute counts as missing."""
        assert find_meta_csrf_token('<meta name="csrf-token" content="  ">') is None

    def test_empty_input(self):
        """Test None and blank input."""
        assert find_meta_csrf_token(None) is None
        assert find_meta_csrf_token("   ") is None


class TestCookieToken:
    """Tests for the XSRF-TOKEN cookie fallback."""

    def test_cookie_is_url_decoded(self):
        """Test that the cookie value is URL-decoded."""
        assert find_cookie_xsrf_token({"XSRF-TOKEN": "abc%3D%3D"}) == "abc=="

    def test_missing_cookie(self):
        """Test missing cookies."""
        assert find_cookie_xsrf_token({}) is None
        assert find_cookie_xsrf_token(None) is None

    def test_parse_cookie_header(self):
        """Test parsing of a Cookie header string."""
        cookies = parse_cookie_header("XSRF-TOKEN=abc%3D; laravel_session=xyz; broken")

        assert cookies == {"XSRF-TOKEN": "abc%3D", "laravel_session": "xyz"}
        assert parse_cookie_header(None) == {}


class TestBuildCsrfHeaders:
    """Tests for build_csrf_headers."""

    def test_meta_tag_wins(self):
        """Test that the meta tag takes precedence over the cookie."""
        headers = build_csrf_headers(PAGE, {"XSRF-TOKEN": "cookie"})

        assert headers == {"X-CSRF-TOKEN": "meta-token-123"}

    def test_cookie_fallback_sets_both_headers(self):
        """Test that the cookie token is sent under both header names."""
        headers = build_csrf_headers("<html></html>", {"XSRF-TOKEN": "abc%3D"})

        assert headers == {"X-CSRF-TOKEN": "abc=", "X-XSRF-TOKEN": "abc="}

    def test_no_token(self):
        """Test that no token yields no headers."""
        assert build_csrf_headers(None, None) == {}

"""Unit tests for log sanitization."""

import logging

from aad_group_action.utils.security import (
    SanitizingFormatter,
    sanitize_headers,
    sanitize_string,
)


def test_bearer_token_redacted():
    text = sanitize_string("sending Authorization: Bearer abc.def-123 to graph")
    assert "abc.def-123" not in text
    assert text.startswith("sending Authorization: <bearer_token:REDACTED>")


def test_basic_credentials_redacted():
    assert "dXNlcjpwdw==" not in sanitize_string("Basic dXNlcjpwdw==")


def test_plain_text_untouched():
    assert sanitize_string("Adding user a@b.com to group g") == (
        "Adding user a@b.com to group g"
    )


def test_authorization_header_redacted():
    headers = {"Authorization": "Bearer secret", "Accept": "application/json"}
    sanitized = sanitize_headers(headers)
    assert sanitized["Authorization"] == "<REDACTED:length=13>"
    assert sanitized["Accept"] == "application/json"
    assert headers["Authorization"] == "Bearer secret"


def test_formatter_sanitizes_arguments():
    formatter = SanitizingFormatter("%(message)s")
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "header %s", ("Bearer abc123",), None
    )
    assert formatter.format(record) == "header <bearer_token:REDACTED>"

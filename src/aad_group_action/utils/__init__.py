"""Shared helpers: HTTP client construction, log sanitization, templates."""

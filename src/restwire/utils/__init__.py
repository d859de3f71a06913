"""Utility helpers for restwire."""

from restwire.utils.sanitization import sanitize_headers, sanitize_url

__all__ = ["sanitize_headers", "sanitize_url"]

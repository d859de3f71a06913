"""Constants for restwire.

This module defines wire-level constants shared by the request and
response content strategies.
"""

# Media types
JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

DEFAULT_CHARSET = "utf-8"
"""Charset used when a text body declares none."""

# Header names
CONTENT_TYPE_HEADER = "Content-Type"

CONTENT_HEADER_NAMES = frozenset(
    {
        "allow",
        "content-disposition",
        "content-encoding",
        "content-language",
        "content-length",
        "content-location",
        "content-md5",
        "content-range",
        "content-type",
        "expires",
        "last-modified",
    }
)
"""Lower-cased names of headers that describe the body rather than the message.

Response headers with these names are split off into the body's own
header collection.
"""

NO_BODY_STATUS_CODES = frozenset({204, 304})
"""Status codes that never carry a message body (1xx is handled separately)."""

"""JSON schemas for the contact and newsletter request bodies.

Schemas run against trimmed values; sanitization happens afterwards.
"""

from __future__ import annotations

# Single quotes delimit string literals in the list API's filter syntax.
_NO_QUOTES_OR_BACKSLASH = r"^[^'\"\\]*$"

INTEREST_VALUES = ["consultation", "training", "implementation", "development", "other", ""]

CONTACT_SCHEMA: dict[str, object] = {
    "type": "object",
    "required": ["firstName", "lastName", "email", "message", "turnstileToken"],
    "properties": {
        "firstName": {"type": "string", "minLength": 1, "maxLength": 100},
        "lastName": {"type": "string", "minLength": 1, "maxLength": 100},
        "email": {
            "type": "string",
            "format": "email",
            "maxLength": 254,
            "pattern": _NO_QUOTES_OR_BACKSLASH,
        },
        "company": {"type": "string", "maxLength": 200},
        "phone": {"type": "string", "maxLength": 30},
        "interest": {"type": "string", "enum": INTEREST_VALUES},
        "message": {"type": "string", "minLength": 10, "maxLength": 5000},
        "turnstileToken": {"type": "string", "minLength": 1, "maxLength": 4096},
    },
}


SUBSCRIPTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "required": ["email", "turnstileToken"],
    "properties": {
        "email": {
            "type": "string",
            "format": "email",
            "minLength": 5,
            "maxLength": 254,
            "pattern": _NO_QUOTES_OR_BACKSLASH,
        },
        "turnstileToken": {"type": "string", "minLength": 1, "maxLength": 4096},
        "source": {"type": "string", "maxLength": 50},
    },
}

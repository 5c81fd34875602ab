"""Security configuration constants for the bakery dashboard facade.

This module centralizes:
- Sensitive keys that should be sanitized from logs
- Fields allowed in error responses per environment
"""

# Keys redacted from structured log entries. Matching is a case-insensitive
# substring test, so "x-api-key" also covers "api_key".
SENSITIVE_KEYS: set[str] = {
    # Authentication & Authorization
    "password",
    "secret",
    "token",
    "authorization",
    "api_key",
    "apikey",
    "jwt",
    "session_id",
    "bearer",
    "cookie",
    "x-api-key",
    "x-auth-token",
    # Personal data commonly carried as ingredients
    "email",
    "phone",
    "iban",
    "card_number",
    "cardnumber",
    "cvv",
}

# In production, error responses only contain these fields
PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
}

DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment."""
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """Check if a key should be considered sensitive and redacted."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)

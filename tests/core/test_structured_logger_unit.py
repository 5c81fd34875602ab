import logging

import pytest

from core.error_handler import StructuredLogger, set_correlation_id


def test_structured_logger_redacts_sensitive_keys():
    logger = StructuredLogger("tests")

    # benign placeholder values; allowlist: test fixture, not a real secret
    data = {
        "api_key": "placeholder_key",  # pragma: allowlist secret
        "customerEmail": "me@example.com",
        "operation": "fire_event",
    }
    sanitized = logger._sanitize_data(data)

    assert sanitized["api_key"] == "[REDACTED]"
    assert sanitized["customerEmail"] == "[REDACTED]"
    assert sanitized["operation"] == "fire_event"


def test_structured_logger_redacts_sensitive_ingredient_pairs():
    logger = StructuredLogger("tests")

    ingredient = {"name": "cardNumber", "value": "4111 placeholder"}
    redacted = logger._redact_header_like(ingredient)

    assert redacted is not None
    assert redacted["value"] == "[REDACTED]"
    assert redacted["name"] == "cardNumber"


def test_structured_logger_leaves_plain_ingredients_alone():
    logger = StructuredLogger("tests")

    ingredient = {"name": "orderId", "value": "o-1"}

    assert logger._redact_header_like(ingredient) is None
    assert logger._sanitize_data({"ingredients": [ingredient]}) == {
        "ingredients": [{"name": "orderId", "value": "o-1"}]
    }


def test_structured_logger_prefixes_correlation_id(caplog: pytest.LogCaptureFixture):
    logger = StructuredLogger("tests.correlation")
    set_correlation_id("cid-123")

    try:
        with caplog.at_level(logging.INFO, logger="tests.correlation"):
            logger.info("Bakery call finished", duration_ms=120)
    finally:
        set_correlation_id(None)

    record = caplog.records[-1]
    assert record.getMessage() == "[cid-123] Bakery call finished"
    assert record.structured_data["duration_ms"] == 120
    assert record.structured_data["correlation_id"] == "cid-123"

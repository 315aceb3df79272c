import json
import logging

import structlog

from app.core.logging import (
    LoggingConfig,
    add_request_context,
    redact_secrets,
    request_id,
    user_id,
)


def test_request_context_is_attached():
    req_token = request_id.set("req-1")
    user_token = user_id.set("u-admin")
    try:
        event = add_request_context(None, "info", {"event": "hello"})
    finally:
        request_id.reset(req_token)
        user_id.reset(user_token)

    assert event["request_id"] == "req-1"
    assert event["user_id"] == "u-admin"
    assert event["service"] == "sunday-school-announcements"


def test_secrets_are_redacted_recursively():
    event = redact_secrets(None, "info", {
        "event": "login",
        "access_token": "abc",
        "headers": {"Authorization": "Bearer abc", "accept": "json"},
    })

    assert event["access_token"] == "[REDACTED]"
    assert event["headers"] == {"Authorization": "[REDACTED]", "accept": "json"}


def test_structured_json_formatter_renders_stdlib_records(monkeypatch):
    monkeypatch.setattr("app.core.logging.settings.ENABLE_STRUCTURED_LOGGING", True)
    monkeypatch.setattr("app.core.logging.settings.LOG_FORMAT", "json")
    formatter = LoggingConfig.build_formatter()
    assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)

    record = logging.LogRecord(
        "announcements.test", logging.INFO, __file__, 1, "Announcement created", None, None
    )
    record.entity_ref = "a-1"
    record.password = "hunter2"

    rendered = json.loads(formatter.format(record))

    assert rendered["event"] == "Announcement created"
    assert rendered["level"] == "info"
    assert rendered["entity_ref"] == "a-1"
    assert rendered["password"] == "[REDACTED]"

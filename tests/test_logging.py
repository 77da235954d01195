"""Tests for logging setup and redaction."""

import json
import logging
import sys

import jwt
import pytest

from gophkeeper.core.logging import (
    REDACTED,
    JSONFormatter,
    RedactingFilter,
    redact,
    setup_logging,
)


def _record(msg, *args, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("gophkeeper.test", logging.INFO, __file__, 1, msg, args, exc_info)


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way the test runner left it."""
    handlers = logging.root.handlers[:]
    level = logging.root.level
    sql_level = logging.getLogger("sqlalchemy.engine").level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)


class TestRedact:
    """Test message redaction."""

    def test_bearer_header(self):
        assert redact("Authorization: Bearer abc.def-123") == f"Authorization: {REDACTED}"

    def test_bare_bearer(self):
        assert redact("got bearer s3cr3t+token==") == f"got Bearer {REDACTED}"

    def test_jwt_anywhere(self):
        token = jwt.encode({"id": 1}, "k" * 32, algorithm="HS256")
        redacted = redact(f"verifying {token} now")
        assert token not in redacted
        assert redacted == f"verifying {REDACTED} now"

    @pytest.mark.parametrize(
        "message,secret",
        [
            ("password=hunter2", "hunter2"),
            ("{'password': 'hunter 2'}", "hunter 2"),
            ('{"access_token": "abc", "id": 1}', "abc"),
            ("refresh_token: 00000000-0000-0000-0000-000000000000", "00000000"),
            ("CRYPTO_KEY=passphrase", "passphrase"),
        ],
    )
    def test_sensitive_keys(self, message, secret):
        redacted = redact(message)
        assert secret not in redacted
        assert REDACTED in redacted

    @pytest.mark.parametrize(
        "message",
        [
            "failed to login user: invalid password",
            "Logging configured: level=INFO, format=dev",
            "session 3 refresh_token_expired_at=1900000000",
            "Expired token for: GET /v1/notes",
        ],
    )
    def test_ordinary_messages_untouched(self, message):
        assert redact(message) == message


class TestRedactingFilter:
    """Test the handler filter."""

    def test_rewrites_formatted_message(self):
        record = _record("login with %s", "password=hunter2")
        assert RedactingFilter().filter(record) is True
        assert record.getMessage() == f"login with password={REDACTED}"
        assert record.args is None

    def test_leaves_clean_record_alone(self):
        record = _record("user %d logged in", 7)
        RedactingFilter().filter(record)
        assert record.args == (7,)

    def test_bad_format_args_still_emitted(self):
        record = _record("%d items", "many")
        assert RedactingFilter().filter(record) is True

    def test_exception_text_redacted(self):
        try:
            raise ValueError("Authorization: Bearer abc123")
        except ValueError:
            record = _record("request failed", exc_info=sys.exc_info())
        entry = json.loads(JSONFormatter().format(record))
        assert "abc123" not in entry["exception"]


@pytest.mark.usefixtures("restore_root_logging")
class TestSetupLogging:
    """Test root logger configuration."""

    @pytest.mark.parametrize("format_type", ["dev", "structured"])
    def test_handlers_redact(self, format_type):
        setup_logging(level="info", format_type=format_type)
        assert logging.root.level == logging.INFO
        for handler in logging.root.handlers:
            assert any(isinstance(f, RedactingFilter) for f in handler.filters)

    def test_structured_output(self, capsys):
        setup_logging(level="INFO", format_type="structured")
        logging.getLogger("gophkeeper.test").info("token is Bearer abc123")

        lines = capsys.readouterr().out.strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["logger"] == "gophkeeper.test"
        assert entry["message"] == f"token is Bearer {REDACTED}"

    def test_sqlalchemy_quiet_unless_debug(self):
        setup_logging(level="INFO")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        setup_logging(level="DEBUG")
        assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="unknown log level"):
            setup_logging(level="chatty")

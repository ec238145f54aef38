import json
import logging

import pytest
from django.core.exceptions import ImproperlyConfigured

from orderflow.env_validation import validate_env
from orderflow.logging_filters import CorrelationIDFilter, correlation_scope, get_current_correlation_id
from orders.structured_logging import StructuredLogger
from orders.validation import (
    CurrencyMismatchError,
    ErrorCode,
    Money,
    Rejected,
    ValidationError,
    format_validation_errors,
)


class TestFormatValidationErrors:
    @pytest.mark.parametrize("field,message,code", [
        ("slug", "cannot be blank", "FIELD_REQUIRED"),
        ("user_id", "is invalid", "FIELD_INVALID"),
        ("email", "has invalid format", "FIELD_INVALID_FORMAT"),
        ("password", "should be at least 8 character(s)", "FIELD_TOO_SHORT"),
        ("quantity", "must be greater than 0", "FIELD_OUT_OF_RANGE"),
        ("password_confirmation", "does not match confirmation", "CONFIRMATION_MISMATCH"),
        ("user_id", "does not exist", "FOREIGN_KEY_VIOLATION"),
        ("duplicate_variants", "line_items must have unique variant_ids", "DUPLICATE_CHILD_KEY"),
    ])
    def test_codes(self, field, message, code):
        [error] = format_validation_errors({field: [message]})
        assert error.to_dict() == {"field": field, "code": code, "message": message}

    def test_nested_errors_are_prefixed(self):
        errors = format_validation_errors({"line_items": {"0": {"total": ["cannot be blank"]}}})
        assert [e.field for e in errors] == ["line_items.0.total"]

    def test_every_message_is_kept(self):
        errors = format_validation_errors({"password": ["a", "b"]})
        assert [e.message for e in errors] == ["a", "b"]


class TestExceptions:
    def test_rejected_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Rejected({"slug": ["cannot be blank"]}).raise_for_errors()

        body = exc_info.value.to_dict()
        assert body["code"] == ErrorCode.VALIDATION_ERROR.value
        assert body["fields"] == [{"field": "slug", "code": "FIELD_REQUIRED", "message": "cannot be blank"}]

    def test_currency_mismatch(self):
        with pytest.raises(CurrencyMismatchError) as exc_info:
            Money("1", "USD") + Money("1", "EUR")
        assert exc_info.value.code == "CURRENCY_MISMATCH"
        assert exc_info.value.message == "Cannot add EUR to USD"


class TestCorrelation:
    def test_default_id(self):
        assert get_current_correlation_id() == "no-id"

    def test_scope_sets_and_restores(self):
        with correlation_scope("outer"):
            with correlation_scope() as inner:
                assert get_current_correlation_id() == inner
                assert inner != "outer"
            assert get_current_correlation_id() == "outer"
        assert get_current_correlation_id() == "no-id"

    def test_filter_tags_records(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
        with correlation_scope("abc-123"):
            assert CorrelationIDFilter().filter(record)
        assert record.correlation_id == "abc-123"


class TestStructuredLogger:
    def test_audit_entry(self, caplog):
        caplog.set_level(logging.INFO, logger="tests.audit")
        with correlation_scope("req-1"):
            StructuredLogger("tests.audit").audit("order.create", "order", errors={"slug": ["cannot be blank"]})

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["message"] == "order.create"
        assert entry["status"] == "rejected"
        assert entry["error_fields"] == ["slug"]
        assert entry["correlation_id"] == "req-1"


class TestValidateEnv:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("PRODUCTION", "ORDERS_DEFAULT_CURRENCY", "ORDERS_PASSWORD_MIN_LENGTH"):
            monkeypatch.delenv(name, raising=False)

    def test_development_without_secret_key_passes(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        validate_env()

    def test_production_requires_database_url(self, monkeypatch):
        monkeypatch.setenv("PRODUCTION", "true")
        monkeypatch.setenv("SECRET_KEY", "x" * 60)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ImproperlyConfigured, match="DATABASE_URL"):
            validate_env()

    def test_production_rejects_insecure_key(self, monkeypatch):
        monkeypatch.setenv("PRODUCTION", "true")
        monkeypatch.setenv("SECRET_KEY", "django-insecure-short")
        monkeypatch.setenv("DATABASE_URL", "postgres://localhost/orders")
        with pytest.raises(ImproperlyConfigured, match="SECRET_KEY"):
            validate_env()

    @pytest.mark.parametrize("currency", ["US", "usd1", "12$"])
    def test_currency_code_is_checked(self, monkeypatch, currency):
        monkeypatch.setenv("ORDERS_DEFAULT_CURRENCY", currency)
        with pytest.raises(ImproperlyConfigured, match="ORDERS_DEFAULT_CURRENCY"):
            validate_env()

    def test_password_min_length_is_checked(self, monkeypatch):
        monkeypatch.setenv("ORDERS_PASSWORD_MIN_LENGTH", "0")
        with pytest.raises(ImproperlyConfigured, match="ORDERS_PASSWORD_MIN_LENGTH"):
            validate_env()

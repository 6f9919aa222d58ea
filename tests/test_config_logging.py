"""Tests for settings, logging setup and the error hierarchy."""

import json
import sys
import logging

import pytest

from app.core.config import Settings, _db_port
from app.core.errors import FinanceTrackerError, InvalidInputError, InvalidPaymentError
from app.core.logging import JsonFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestSettings:
    """Tests for Settings."""

    def test_default_values(self) -> None:
        s = Settings()

        assert s.db_host == "127.0.0.1"
        assert s.db_port == "5432"
        assert s.port == 5000
        assert s.cors_origins == ["http://localhost:3000"]
        assert s.log_level == "INFO"

    def test_database_url_composed(self) -> None:
        s = Settings(db_user="u", db_password="p", db_host="db", db_port="6543", db_name="ft")

        assert s.database_url == "postgresql+psycopg2://u:p@db:6543/ft"

    def test_database_url_override(self) -> None:
        s = Settings(database_url_override="sqlite://")
        assert s.database_url == "sqlite://"

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("DB_HOST", "pg.internal")
        monkeypatch.setenv("DB_PORT", "None")
        monkeypatch.setenv("DB_NAME", "money")
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "json")

        s = Settings.from_env()

        assert s.db_host == "pg.internal"
        assert s.db_port == "5432"
        assert s.database_url.endswith("@pg.internal:5432/money")
        assert s.cors_origins == ["http://a.test", "http://b.test"]
        assert s.port == 8080
        assert s.log_level == "DEBUG"
        assert s.log_format == "json"

    @pytest.mark.parametrize("raw, expected", [(None, "5432"), ("", "5432"), ("none", "5432"), ("5433", "5433")])
    def test_db_port(self, raw, expected) -> None:
        assert _db_port(raw) == expected


class TestLogging:
    """Tests for setup_logging and JsonFormatter."""

    def test_setup_standard(self, restore_root_logger) -> None:
        setup_logging("DEBUG")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert "%(levelname)-8s" in root.handlers[0].formatter._fmt
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_setup_json(self, restore_root_logger) -> None:
        setup_logging("warning", format_type="json")

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger) -> None:
        setup_logging("chatty")
        assert restore_root_logger.level == logging.INFO

    def test_json_formatter_output(self) -> None:
        record = logging.LogRecord(
            name="app.routers.loans_router",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Recorded payment %s",
            args=(7,),
            exc_info=None,
        )

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "app.routers.loans_router"
        assert data["message"] == "Recorded payment 7"
        assert "timestamp" in data

    def test_json_formatter_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "app", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestErrors:
    """Test exception inheritance chain."""

    def test_invalid_input_is_finance_tracker_error(self) -> None:
        err = InvalidInputError("term_months must be a whole number >= 1")
        assert isinstance(err, FinanceTrackerError)
        assert isinstance(err, ValueError)
        assert str(err) == "term_months must be a whole number >= 1"

    def test_invalid_payment_is_finance_tracker_error(self) -> None:
        err = InvalidPaymentError("Valid payment amount required")
        assert isinstance(err, FinanceTrackerError)
        assert isinstance(err, ValueError)

    def test_errors_are_distinct(self) -> None:
        assert not issubclass(InvalidInputError, InvalidPaymentError)
        assert not issubclass(InvalidPaymentError, InvalidInputError)


class TestStructuredLogging:
    """Tests for extra fields carried into JSON log lines."""

    def test_extra_fields_merged(self) -> None:
        record = logging.LogRecord(
            "app.routers.loans_router", logging.INFO, __file__, 1, "Recorded payment", None, None
        )
        record.extra = {"loan_id": 3, "payment_id": 11}

        data = json.loads(JsonFormatter().format(record))

        assert data["loan_id"] == 3
        assert data["payment_id"] == 11

    def test_payment_log_carries_ids(self, client, caplog) -> None:
        loan = client.post(
            "/api/loans", json={"name": "Car loan", "amount": 200, "due_date": "2026-11-01"}
        ).json()

        with caplog.at_level(logging.INFO, logger="app.routers.loans_router"):
            client.post(f"/api/loans/{loan['loan_id']}/payments", json={"amount": 75})

        records = [r for r in caplog.records if r.getMessage().startswith("Recorded payment")]
        assert len(records) == 1
        assert records[0].extra == {
            "loan_id": loan["loan_id"],
            "payment_id": 1,
            "amount": "75.00",
            "balance_after": "125.00",
        }

        data = json.loads(JsonFormatter().format(records[0]))
        assert data["balance_after"] == "125.00"

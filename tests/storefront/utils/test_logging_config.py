"""Tests for storefront logging configuration."""

import logging
from decimal import Decimal

import pytest
import structlog
from storefront.utils.logging import (
    configure_logging,
    get_log_level,
    get_logger,
    stringify_amounts,
)


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    config = structlog.get_config()
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.configure(**config)
    structlog.contextvars.clear_contextvars()


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL", "LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLogLevel:
    def test_development_is_debug(self, clean_env):
        assert get_log_level() == "DEBUG"

    def test_test_environment_is_warning(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "WARNING"

    def test_production_is_info(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "production")
        assert get_log_level() == "INFO"

    def test_environment_argument(self, clean_env):
        assert get_log_level("staging") == "INFO"

    def test_explicit_level_wins(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        clean_env.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"


class TestConfigureLogging:
    def test_domain_import_configures_logging(self):
        import storefront.domain  # noqa: F401

        assert stringify_amounts in structlog.get_config()["processors"]

    def test_console_only_without_log_dir(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        configure_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("protean").level == logging.WARNING

    def test_explicit_level(self, clean_env):
        configure_logging(level="error")
        assert logging.getLogger().level == logging.ERROR

    def test_production_renders_json(self, clean_env):
        configure_logging(environment="production")
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_log_dir_and_prefix_arguments(self, clean_env, tmp_path):
        configure_logging(log_dir=tmp_path, log_file_prefix="checkout")
        assert (tmp_path / "checkout.log").exists()
        assert (tmp_path / "checkout_error.log").exists()

    def test_log_files_written_to_log_dir(self, clean_env, tmp_path):
        clean_env.setenv("LOG_DIR", str(tmp_path / "logs"))
        configure_logging()
        structlog.contextvars.bind_contextvars(session_id="sess-042")
        get_logger("storefront.tests").error("Cart ledger failure", cart_id="cart-001", subtotal=Decimal("42.97"))
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert (tmp_path / "logs" / "storefront.log").exists()
        error_log = (tmp_path / "logs" / "storefront_error.log").read_text()
        assert "Cart ledger failure" in error_log
        assert "sess-042" in error_log
        assert "42.97" in error_log
        assert "Decimal(" not in error_log


class TestStringifyAmounts:
    def test_decimals_become_strings(self):
        event = stringify_amounts(None, "info", {"event": "Pricing rules loaded", "base_delivery_fee": Decimal("3.99")})
        assert event["base_delivery_fee"] == "3.99"

    def test_other_values_untouched(self):
        event = stringify_amounts(None, "info", {"event": "Cart cleared", "lines_removed": 2})
        assert event["lines_removed"] == 2

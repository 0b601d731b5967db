import logging

from costmodel.config import get_settings
from costmodel.logging_setup import configure_logging


def test_settings_defaults(monkeypatch):
    for key in ("DESIGNFIN_PAGE_TITLE", "DESIGNFIN_CURRENCY_SYMBOL", "DESIGNFIN_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    s = get_settings()
    assert (s.page_title, s.currency_symbol, s.log_level) == ("DesignFin", "$", "INFO")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DESIGNFIN_CURRENCY_SYMBOL", "€")
    monkeypatch.setenv("DESIGNFIN_LOG_LEVEL", "debug")
    s = get_settings()
    assert s.currency_symbol == "€"
    assert s.log_level == "DEBUG"


def test_configure_logging_is_idempotent():
    logger = configure_logging("DEBUG")
    configure_logging("DEBUG")
    assert logger.name == "costmodel"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

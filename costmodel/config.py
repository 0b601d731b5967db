from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    page_title: str
    currency_symbol: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        page_title=os.getenv("DESIGNFIN_PAGE_TITLE", "DesignFin"),
        currency_symbol=os.getenv("DESIGNFIN_CURRENCY_SYMBOL", "$"),
        log_level=os.getenv("DESIGNFIN_LOG_LEVEL", "INFO").upper(),
    )

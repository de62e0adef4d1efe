"""Supported currencies (ISO 4217 code, display symbol, locale)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CurrencyConfig:
    code: str
    symbol: str
    locale: str


SUPPORTED_CURRENCIES: tuple[CurrencyConfig, ...] = (
    CurrencyConfig("BRL", "R$", "pt-BR"),
    CurrencyConfig("USD", "$", "en-US"),
    CurrencyConfig("EUR", "€", "pt-PT"),
    CurrencyConfig("MZN", "MT", "pt-MZ"),
    CurrencyConfig("AOA", "Kz", "pt-AO"),
    CurrencyConfig("CVE", "Esc", "pt-CV"),
    CurrencyConfig("XOF", "CFA", "pt-GW"),
    CurrencyConfig("STN", "Db", "pt-ST"),
    CurrencyConfig("XAF", "FCFA", "pt-GQ"),
)

DEFAULT_CURRENCY_CODE = "MZN"


def get_currency_config(code: Optional[str]) -> Optional[CurrencyConfig]:
    if not code:
        return None
    wanted = code.strip().upper()
    for currency in SUPPORTED_CURRENCIES:
        if currency.code == wanted:
            return currency
    return None


def currency_symbol(code: str) -> str:
    """Symbol for code, or the code itself when unknown."""
    config = get_currency_config(code)
    return config.symbol if config else code

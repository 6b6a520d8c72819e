"""Ticker targets and their compatibility with amount specs."""

from __future__ import annotations

from typing import Annotated, ClassVar, Union

from loguru import logger
from pydantic import Discriminator, Tag, field_validator

from position_intent.amounts import AmountSpec, Dollars, Percent, Shares, Zero
from position_intent.errors import InvalidCombination
from position_intent.tagged import PayloadVariant, UnitVariant, variant_tag


class Ticker(PayloadVariant):
    """A single concrete ticker symbol."""

    tag: ClassVar[str] = "ticker"
    payload_field: ClassVar[str] = "symbol"

    symbol: str

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Ensure symbol is non-empty."""
        v = v.strip()
        if not v:
            raise ValueError("Symbol cannot be empty")
        return v


class All(UnitVariant):
    """Every ticker currently held by the strategy."""

    tag: ClassVar[str] = "all"


TICKER_VARIANTS: tuple[type[Ticker | All], ...] = (Ticker, All)

TickerSpec = Annotated[
    Union[
        Annotated[Ticker, Tag(Ticker.tag)],
        Annotated[All, Tag(All.tag)],
    ],
    Discriminator(variant_tag),
]

# Every (ticker, amount) pairing must be listed; absolute deltas are undefined across all tickers.
TICKER_AMOUNT_COMPATIBILITY: dict[tuple[str, str], bool] = {
    (Ticker.tag, Dollars.tag): True,
    (Ticker.tag, Shares.tag): True,
    (Ticker.tag, Percent.tag): True,
    (Ticker.tag, Zero.tag): True,
    (All.tag, Dollars.tag): False,
    (All.tag, Shares.tag): False,
    (All.tag, Percent.tag): True,
    (All.tag, Zero.tag): True,
}


def ticker_spec(value: str | TickerSpec) -> TickerSpec:
    """Coerce a plain symbol into a :class:`Ticker`; pass ticker specs through."""
    if isinstance(value, TICKER_VARIANTS):
        return value
    if isinstance(value, str):
        return Ticker(value)
    raise TypeError(f"Expected a ticker symbol or TickerSpec, got {type(value).__name__}")


def check_ticker_amount(ticker: TickerSpec, amount: AmountSpec) -> None:
    """Validate a ticker target against an amount spec.

    Raises:
        InvalidCombination: If the pairing is marked incompatible
        LookupError: If the pairing has not been classified
    """
    key = (ticker.tag, amount.tag)
    try:
        allowed = TICKER_AMOUNT_COMPATIBILITY[key]
    except KeyError:
        raise LookupError(f"Ticker/amount pairing {key} is not classified") from None
    if not allowed:
        logger.debug("Rejected ticker {!r} with amount {!r}", ticker, amount)
        raise InvalidCombination(ticker, amount)

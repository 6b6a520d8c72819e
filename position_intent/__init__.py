"""Position Intent - validated, immutable position change requests for order managers."""

__version__ = "0.1.0"

from position_intent.amounts import (
    AMOUNT_VARIANTS,
    AmountSpec,
    Dollars,
    NumericAmount,
    Percent,
    Shares,
    Zero,
    merge_amounts,
)
from position_intent.codec import (
    decode_amount,
    decode_error,
    decode_intent,
    decode_ticker,
    decode_update_policy,
    encode_amount,
    encode_error,
    encode_intent,
    encode_ticker,
    encode_update_policy,
)
from position_intent.config import IntentSettings, get_settings, load_settings
from position_intent.errors import (
    IncompatibleAmountError,
    InvalidBeforeAfter,
    InvalidCombination,
    PositionIntentError,
)
from position_intent.intents import PositionIntent, PositionIntentBuilder
from position_intent.policies import UpdatePolicy
from position_intent.tickers import (
    TICKER_AMOUNT_COMPATIBILITY,
    TICKER_VARIANTS,
    All,
    Ticker,
    TickerSpec,
    check_ticker_amount,
    ticker_spec,
)

__all__ = [
    "AMOUNT_VARIANTS",
    "AmountSpec",
    "Dollars",
    "NumericAmount",
    "Percent",
    "Shares",
    "Zero",
    "merge_amounts",
    "TICKER_AMOUNT_COMPATIBILITY",
    "TICKER_VARIANTS",
    "All",
    "Ticker",
    "TickerSpec",
    "check_ticker_amount",
    "ticker_spec",
    "UpdatePolicy",
    "PositionIntent",
    "PositionIntentBuilder",
    "PositionIntentError",
    "IncompatibleAmountError",
    "InvalidBeforeAfter",
    "InvalidCombination",
    "IntentSettings",
    "get_settings",
    "load_settings",
    "encode_intent",
    "decode_intent",
    "encode_amount",
    "decode_amount",
    "encode_ticker",
    "decode_ticker",
    "encode_update_policy",
    "decode_update_policy",
    "encode_error",
    "decode_error",
]

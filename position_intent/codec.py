"""JSON encoding of position intents and their value types.

The encoded forms are the contract shared with the order manager:

- AmountSpec: ``{"dollars": "1.5"}``, ``{"shares": "10"}``, ``{"percent": "25"}``, ``"zero"``
- TickerSpec: ``{"ticker": "AAPL"}``, ``"all"``
- UpdatePolicy: ``"retain"``, ``"retain_long"``, ``"retain_short"``, ``"update"``
- PositionIntent: snake_case object; unset optional fields are omitted
- Errors: ``{"<error_tag>": {<payload fields>}}``
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, TypeAdapter

from position_intent.amounts import AmountSpec
from position_intent.errors import (
    IncompatibleAmountError,
    InvalidBeforeAfter,
    InvalidCombination,
    PositionIntentError,
)
from position_intent.intents import PositionIntent, UtcDatetime
from position_intent.policies import UpdatePolicy
from position_intent.tickers import TickerSpec

_AMOUNT_ADAPTER: TypeAdapter[AmountSpec] = TypeAdapter(AmountSpec)
_TICKER_ADAPTER: TypeAdapter[TickerSpec] = TypeAdapter(TickerSpec)
_POLICY_ADAPTER: TypeAdapter[UpdatePolicy] = TypeAdapter(UpdatePolicy)


def encode_intent(intent: PositionIntent) -> str:
    return intent.model_dump_json()


def decode_intent(payload: str | bytes) -> PositionIntent:
    """Decode an intent, re-checking the invariants enforced at build time.

    Raises:
        pydantic.ValidationError: If the payload is malformed
        InvalidBeforeAfter: If the encoded window closes before it opens
        InvalidCombination: If ticker ``all`` carries an absolute amount
    """
    return PositionIntent.model_validate_json(payload)


def encode_amount(amount: AmountSpec) -> str:
    return _AMOUNT_ADAPTER.dump_json(amount).decode()


def decode_amount(payload: str | bytes) -> AmountSpec:
    return _AMOUNT_ADAPTER.validate_json(payload)


def encode_ticker(ticker: TickerSpec) -> str:
    return _TICKER_ADAPTER.dump_json(ticker).decode()


def decode_ticker(payload: str | bytes) -> TickerSpec:
    return _TICKER_ADAPTER.validate_json(payload)


def encode_update_policy(policy: UpdatePolicy) -> str:
    return _POLICY_ADAPTER.dump_json(policy).decode()


def decode_update_policy(payload: str | bytes) -> UpdatePolicy:
    return _POLICY_ADAPTER.validate_json(payload)


class _ErrorBody(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class _IncompatibleAmountBody(_ErrorBody):
    left: AmountSpec
    right: AmountSpec


class _InvalidBeforeAfterBody(_ErrorBody):
    before: UtcDatetime
    after: UtcDatetime


class _InvalidCombinationBody(_ErrorBody):
    ticker: TickerSpec
    amount: AmountSpec


_ERROR_BODIES: dict[type[PositionIntentError], tuple[str, type[_ErrorBody]]] = {
    IncompatibleAmountError: ("incompatible_amount_error", _IncompatibleAmountBody),
    InvalidBeforeAfter: ("invalid_before_after", _InvalidBeforeAfterBody),
    InvalidCombination: ("invalid_combination", _InvalidCombinationBody),
}
_ERRORS_BY_TAG = {tag: (error_type, body) for error_type, (tag, body) in _ERROR_BODIES.items()}


def encode_error(error: PositionIntentError) -> str:
    """Encode an error with its diagnostic payload."""
    try:
        tag, body_type = _ERROR_BODIES[type(error)]
    except KeyError:
        raise TypeError(f"Cannot encode error of type {type(error).__name__}") from None
    body = body_type.model_validate(error.payload())
    return json.dumps({tag: body.model_dump(mode="json")})


def decode_error(payload: str | bytes) -> PositionIntentError:
    """Decode an error produced by :func:`encode_error`.

    Raises:
        ValueError: If the payload is not a single known error tag
        pydantic.ValidationError: If the error body is malformed
    """
    document = json.loads(payload)
    if not isinstance(document, dict) or len(document) != 1:
        raise ValueError("Encoded error must be an object with exactly one error tag")
    ((tag, raw_body),) = document.items()
    try:
        error_type, body_type = _ERRORS_BY_TAG[tag]
    except KeyError:
        raise ValueError(f"Unknown error tag '{tag}'") from None
    body = body_type.model_validate(raw_body)
    return error_type(*(getattr(body, name) for name in error_type.fields))

"""Tests for the JSON wire format shared with the order manager."""

import json
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from position_intent.amounts import Dollars, Percent, Shares, Zero
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
from position_intent.errors import (
    IncompatibleAmountError,
    InvalidBeforeAfter,
    InvalidCombination,
    PositionIntentError,
)
from position_intent.intents import PositionIntent
from position_intent.policies import UpdatePolicy
from position_intent.tickers import All, Ticker

NOW = datetime(2026, 10, 18, 14, 30, 15, 123000, tzinfo=UTC)


@pytest.fixture
def full_intent() -> PositionIntent:
    now = datetime.now(UTC)
    return (
        PositionIntent.builder("A", "AAPL", Shares(Decimal("1")))
        .sub_strategy("B")
        .decision_price(Decimal("2"))
        .limit_price(Decimal("3.50"))
        .stop_price(Decimal("3"))
        .update_policy(UpdatePolicy.RETAIN)
        .before(now + timedelta(hours=1))
        .after(now)
        .build()
    )


@pytest.mark.parametrize(
    ("amount", "encoded"),
    [
        (Dollars(Decimal("1.5")), '{"dollars":"1.5"}'),
        (Shares(10), '{"shares":"10"}'),
        (Percent(Decimal("-25")), '{"percent":"-25"}'),
        (Zero(), '"zero"'),
    ],
)
def test_amount_wire_format(amount: object, encoded: str) -> None:
    assert encode_amount(amount) == encoded
    assert decode_amount(encoded) == amount


@pytest.mark.parametrize(
    ("ticker", "encoded"),
    [
        (Ticker("AAPL"), '{"ticker":"AAPL"}'),
        (All(), '"all"'),
    ],
)
def test_ticker_wire_format(ticker: object, encoded: str) -> None:
    assert encode_ticker(ticker) == encoded
    assert decode_ticker(encoded) == ticker


@pytest.mark.parametrize(
    ("policy", "encoded"),
    [
        (UpdatePolicy.RETAIN, '"retain"'),
        (UpdatePolicy.RETAIN_LONG, '"retain_long"'),
        (UpdatePolicy.RETAIN_SHORT, '"retain_short"'),
        (UpdatePolicy.UPDATE, '"update"'),
    ],
)
def test_update_policy_wire_format(policy: UpdatePolicy, encoded: str) -> None:
    assert encode_update_policy(policy) == encoded
    assert decode_update_policy(encoded) is policy


@pytest.mark.parametrize(
    "payload",
    ['{"dollars":"1","shares":"2"}', '"dollar"', '{"amount":"1"}', '{"dollars":1.5}', "42"],
)
def test_decode_amount_rejects_malformed(payload: str) -> None:
    with pytest.raises(ValidationError):
        decode_amount(payload)


def test_intent_round_trip(full_intent: PositionIntent) -> None:
    """Test encode/decode round trips and the encoding is stable."""
    encoded = encode_intent(full_intent)
    decoded = decode_intent(encoded)

    assert decoded == full_intent
    assert encode_intent(decoded) == encoded


def test_intent_field_names_and_tags(full_intent: PositionIntent) -> None:
    document = json.loads(encode_intent(full_intent))

    assert list(document) == [
        "id",
        "strategy",
        "sub_strategy",
        "timestamp",
        "ticker",
        "amount",
        "update_policy",
        "decision_price",
        "limit_price",
        "stop_price",
        "before",
        "after",
    ]
    assert document["id"] == str(full_intent.id)
    assert document["ticker"] == {"ticker": "AAPL"}
    assert document["amount"] == {"shares": "1"}
    assert document["update_policy"] == "retain"
    assert document["limit_price"] == "3.50"


def test_unset_optional_fields_are_omitted() -> None:
    """Test that unset optionals are absent rather than null."""
    intent = PositionIntent.builder("A", All(), Zero()).build()
    encoded = encode_intent(intent)
    document = json.loads(encoded)

    assert set(document) == {"id", "strategy", "timestamp", "ticker", "amount", "update_policy"}
    assert "null" not in encoded
    assert document["ticker"] == "all"
    assert document["amount"] == "zero"
    assert decode_intent(encoded) == intent
    assert intent.model_dump().keys() == document.keys()


def test_decode_intent_rejects_invalid_combination(full_intent: PositionIntent) -> None:
    document = json.loads(encode_intent(full_intent))
    document["ticker"] = "all"

    with pytest.raises(InvalidCombination):
        decode_intent(json.dumps(document))


def test_decode_intent_rejects_inverted_window(full_intent: PositionIntent) -> None:
    document = json.loads(encode_intent(full_intent))
    document["before"], document["after"] = document["after"], document["before"]

    with pytest.raises(InvalidBeforeAfter):
        decode_intent(json.dumps(document))


def test_decode_intent_rejects_unknown_fields(full_intent: PositionIntent) -> None:
    document = json.loads(encode_intent(full_intent))
    document["quantity"] = 5

    with pytest.raises(ValidationError):
        decode_intent(json.dumps(document))


@pytest.mark.parametrize(
    ("error", "tag"),
    [
        (IncompatibleAmountError(Dollars(1), Percent(Decimal("2.5"))), "incompatible_amount_error"),
        (InvalidBeforeAfter(NOW, NOW + timedelta(hours=1)), "invalid_before_after"),
        (InvalidCombination(All(), Shares(3)), "invalid_combination"),
    ],
)
def test_error_round_trip(error: PositionIntentError, tag: str) -> None:
    encoded = encode_error(error)

    assert list(json.loads(encoded)) == [tag]
    assert decode_error(encoded) == error
    assert encode_error(decode_error(encoded)) == encoded


def test_incompatible_amount_error_payload_shape() -> None:
    encoded = encode_error(IncompatibleAmountError(Dollars(1), Zero()))

    assert json.loads(encoded) == {
        "incompatible_amount_error": {"left": {"dollars": "1"}, "right": "zero"}
    }


def test_decode_error_rejects_unknown_tag() -> None:
    with pytest.raises(ValueError, match="Unknown error tag"):
        decode_error('{"boom": {}}')

    with pytest.raises(ValueError, match="exactly one error tag"):
        decode_error('{"a": {}, "b": {}}')


def test_payload_variants_validate_from_tagged_dicts() -> None:
    """Test that payload variants accept the tagged form, keywords and positionals."""
    assert Dollars.model_validate({"dollars": "1.5"}) == Dollars(Decimal("1.5"))
    assert Shares.model_validate({"amount": "2"}) == Shares(2)
    assert Percent(amount=Decimal("10")) == Percent(10)
    assert Ticker.model_validate({"ticker": "AAPL"}) == Ticker("AAPL")
    assert Ticker(symbol="MSFT") == Ticker("MSFT")


def test_decode_intent_with_concrete_ticker_and_amount() -> None:
    intent = PositionIntent.builder("A", "AAPL", Dollars(Decimal("1.5"))).build()

    decoded = decode_intent(encode_intent(intent))

    assert decoded.ticker == Ticker("AAPL")
    assert decoded.amount == Dollars(Decimal("1.5"))

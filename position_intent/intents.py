"""Position intents and the builder that validates them."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from loguru import logger
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)

from position_intent.amounts import AMOUNT_VARIANTS, AmountSpec, ExactDecimal
from position_intent.config import IntentSettings, get_settings
from position_intent.errors import InvalidBeforeAfter, PositionIntentError
from position_intent.policies import UpdatePolicy
from position_intent.stamps import ensure_utc, new_intent_id, utc_now
from position_intent.tickers import TickerSpec, check_ticker_amount, ticker_spec

UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

OPTIONAL_FIELDS: tuple[str, ...] = (
    "sub_strategy",
    "decision_price",
    "limit_price",
    "stop_price",
    "before",
    "after",
)


def check_window(before: datetime | None, after: datetime | None) -> None:
    """Validate the temporal window of an intent.

    Bounds are compared as UTC instants; the error carries them as given.

    Raises:
        InvalidBeforeAfter: If both bounds are set and ``before < after``
    """
    if before is not None and after is not None and ensure_utc(before) < ensure_utc(after):
        raise InvalidBeforeAfter(before, after)


class PositionIntent(BaseModel):
    """Immutable request from a strategy to change a held position.

    Instances come from :meth:`PositionIntentBuilder.build` or from decoding a
    previously encoded intent; both paths enforce the same invariants.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID = Field(..., description="Unique identifier generated at construction")
    strategy: str = Field(
        ...,
        description="Strategy requesting the position; dollar limits are pooled per strategy",
    )
    sub_strategy: str | None = Field(
        default=None,
        description=(
            "Leg of the strategy; shares the strategy's dollar limits but holdings are "
            "tracked at this level"
        ),
    )
    timestamp: UtcDatetime = Field(..., description="Creation time (UTC)")
    ticker: TickerSpec
    amount: AmountSpec
    update_policy: UpdatePolicy
    decision_price: ExactDecimal | None = Field(
        default=None,
        description=(
            "Price at which the decision was made; used for execution analysis and "
            "dollar/share translation"
        ),
    )
    limit_price: ExactDecimal | None = Field(default=None, description="Limit price")
    stop_price: ExactDecimal | None = Field(default=None, description="Stop price")
    before: UtcDatetime | None = Field(
        default=None, description="Intent is no longer actionable after this time"
    )
    after: UtcDatetime | None = Field(
        default=None, description="Intent is not actionable before this time"
    )

    @model_validator(mode="after")
    def _validate_invariants(self) -> PositionIntent:
        check_window(self.before, self.after)
        check_ticker_amount(self.ticker, self.amount)
        return self

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}

    @staticmethod
    def builder(
        strategy: str,
        ticker: str | TickerSpec,
        amount: AmountSpec,
        *,
        settings: IntentSettings | None = None,
    ) -> PositionIntentBuilder:
        """Start building an intent from its required fields."""
        return PositionIntentBuilder(strategy, ticker, amount, settings=settings)

    def to_builder(self, *, settings: IntentSettings | None = None) -> PositionIntentBuilder:
        """Return a builder pre-populated with this intent's fields.

        Building it produces a new intent with a new id and timestamp.
        """
        builder = PositionIntentBuilder(
            self.strategy, self.ticker, self.amount, settings=settings
        ).update_policy(self.update_policy)
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                builder._optional[name] = value
        return builder


class PositionIntentBuilder:
    """Accumulates optional fields for a :class:`PositionIntent`.

    Setters never validate; :meth:`build` is the single validation gate and
    consumes the builder whether it succeeds or not.
    """

    def __init__(
        self,
        strategy: str,
        ticker: str | TickerSpec,
        amount: AmountSpec,
        *,
        settings: IntentSettings | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            strategy: Strategy key used to pool dollar limits
            ticker: Ticker symbol or TickerSpec to target
            amount: Requested position change
            settings: Optional settings override (defaults to the cached process settings)
        """
        if not isinstance(amount, AMOUNT_VARIANTS):
            raise TypeError(f"Expected an AmountSpec, got {type(amount).__name__}")
        self._strategy = strategy
        self._ticker = ticker_spec(ticker)
        self._amount = amount
        self._update_policy = (settings or get_settings()).default_update_policy
        self._optional: dict[str, object] = {}
        self._finalized = False

    @property
    def strategy(self) -> str:
        return self._strategy

    @property
    def ticker(self) -> TickerSpec:
        return self._ticker

    @property
    def amount(self) -> AmountSpec:
        return self._amount

    @property
    def finalized(self) -> bool:
        """Check if :meth:`build` has consumed this builder."""
        return self._finalized

    def sub_strategy(self, sub_strategy: str) -> PositionIntentBuilder:
        return self._set("sub_strategy", sub_strategy)

    def decision_price(self, decision_price: Decimal | int | str) -> PositionIntentBuilder:
        return self._set("decision_price", decision_price)

    def limit_price(self, limit_price: Decimal | int | str) -> PositionIntentBuilder:
        return self._set("limit_price", limit_price)

    def stop_price(self, stop_price: Decimal | int | str) -> PositionIntentBuilder:
        return self._set("stop_price", stop_price)

    def before(self, before: datetime) -> PositionIntentBuilder:
        return self._set("before", before)

    def after(self, after: datetime) -> PositionIntentBuilder:
        return self._set("after", after)

    def update_policy(self, policy: UpdatePolicy) -> PositionIntentBuilder:
        self._ensure_building()
        self._update_policy = policy
        return self

    def build(self) -> PositionIntent:
        """Validate the accumulated fields and create the intent.

        Returns:
            A new immutable PositionIntent with a fresh id and timestamp

        Raises:
            InvalidBeforeAfter: If ``before`` is earlier than ``after``
            InvalidCombination: If ticker ``All`` is paired with Dollars or Shares
            RuntimeError: If the builder was already finalized
        """
        self._ensure_building()
        self._finalized = True

        fields = dict(self._optional)
        try:
            check_window(fields.get("before"), fields.get("after"))  # type: ignore[arg-type]
            check_ticker_amount(self._ticker, self._amount)
        except PositionIntentError as exc:
            logger.debug("Rejected position intent for strategy {}: {}", self._strategy, exc)
            raise

        intent = PositionIntent(
            id=new_intent_id(),
            strategy=self._strategy,
            timestamp=utc_now(),
            ticker=self._ticker,
            amount=self._amount,
            update_policy=self._update_policy,
            **fields,
        )
        logger.debug(
            "Built position intent {} for strategy {} on {!r}",
            intent.id,
            intent.strategy,
            intent.ticker,
        )
        return intent

    def _set(self, name: str, value: object) -> PositionIntentBuilder:
        self._ensure_building()
        self._optional[name] = value
        return self

    def _ensure_building(self) -> None:
        if self._finalized:
            raise RuntimeError("PositionIntentBuilder already finalized; create a new builder")

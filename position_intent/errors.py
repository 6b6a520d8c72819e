"""Errors raised while merging amounts or finalizing position intents."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from position_intent.amounts import AmountSpec
    from position_intent.tickers import TickerSpec


class PositionIntentError(Exception):
    """Base error for position intent validation failures.

    Subclasses keep their payload in ``args`` (in ``fields`` order) so errors
    compare by value and survive copying and pickling.
    """

    fields: ClassVar[tuple[str, ...]] = ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.args == other.args  # type: ignore[union-attr]

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        params = ", ".join(f"{name}={value!r}" for name, value in self.payload().items())
        return f"{type(self).__name__}({params})"

    def payload(self) -> dict[str, Any]:
        """Return the structured diagnostic context keyed by field name."""
        return dict(zip(self.fields, self.args, strict=True))


class IncompatibleAmountError(PositionIntentError):
    """Raised when two non-Zero amount specs of different kinds are merged."""

    fields = ("left", "right")

    def __init__(self, left: AmountSpec, right: AmountSpec) -> None:
        super().__init__(left, right)
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return (
            "Non-Zero amount specs of different kinds cannot be merged: "
            f"left={self.left!r}, right={self.right!r}"
        )


class InvalidBeforeAfter(PositionIntentError):
    """Raised when an intent's validity window closes before it opens."""

    fields = ("before", "after")

    def __init__(self, before: datetime, after: datetime) -> None:
        super().__init__(before, after)
        self.before = before
        self.after = after

    def __str__(self) -> str:
        return (
            "Cannot create PositionIntent with before < after: "
            f"before={self.before.isoformat()}, after={self.after.isoformat()}"
        )


class InvalidCombination(PositionIntentError):
    """Raised when ticker ``All`` is paired with an absolute amount."""

    fields = ("ticker", "amount")

    def __init__(self, ticker: TickerSpec, amount: AmountSpec) -> None:
        super().__init__(ticker, amount)
        self.ticker = ticker
        self.amount = amount

    def __str__(self) -> str:
        return (
            f"Ticker {self.ticker!r} cannot be combined with absolute amount {self.amount!r}; "
            "use a concrete ticker or a Percent/Zero amount"
        )

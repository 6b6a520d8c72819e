"""Amount specifications and their merge algebra."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, ClassVar, Union

from loguru import logger
from pydantic import BeforeValidator, Discriminator, Tag

from position_intent.config import IntentSettings, get_settings
from position_intent.errors import IncompatibleAmountError
from position_intent.tagged import PayloadVariant, UnitVariant, variant_tag


def _reject_binary_float(value: Any) -> Any:
    if isinstance(value, float):
        raise ValueError(
            f"Binary floating point value {value!r} is not accepted; use Decimal, int or str"
        )
    return value


ExactDecimal = Annotated[Decimal, BeforeValidator(_reject_binary_float)]


class _MergeableAmount:
    __slots__ = ()

    def merge(self, other: AmountSpec, *, settings: IntentSettings | None = None) -> AmountSpec:
        """Combine with another amount spec, see :func:`merge_amounts`."""
        return merge_amounts(self, other, settings=settings)  # type: ignore[arg-type]


class NumericAmount(_MergeableAmount, PayloadVariant):
    """Amount variant carrying an exact decimal payload."""

    payload_field: ClassVar[str] = "amount"

    amount: ExactDecimal


class Dollars(NumericAmount):
    """Absolute currency value to add (positive) or remove (negative)."""

    tag: ClassVar[str] = "dollars"


class Shares(NumericAmount):
    """Absolute share count to add or remove."""

    tag: ClassVar[str] = "shares"


class Percent(NumericAmount):
    """Percentage of an externally defined reference, e.g. strategy allocation."""

    tag: ClassVar[str] = "percent"


class Zero(_MergeableAmount, UnitVariant):
    """Explicit no-change amount; identity element of the merge."""

    tag: ClassVar[str] = "zero"


AMOUNT_VARIANTS: tuple[type[Dollars | Shares | Percent | Zero], ...] = (
    Dollars,
    Shares,
    Percent,
    Zero,
)

AmountSpec = Annotated[
    Union[
        Annotated[Dollars, Tag(Dollars.tag)],
        Annotated[Shares, Tag(Shares.tag)],
        Annotated[Percent, Tag(Percent.tag)],
        Annotated[Zero, Tag(Zero.tag)],
    ],
    Discriminator(variant_tag),
]


def merge_amounts(
    left: AmountSpec,
    right: AmountSpec,
    *,
    settings: IntentSettings | None = None,
) -> AmountSpec:
    """Merge two amount specs coming from compounding intents.

    Rules, in order:
    - ``Zero`` is the identity: the other operand is returned unchanged.
    - Two numeric amounts of the same kind add their payloads exactly.
    - Anything else raises :class:`IncompatibleAmountError`.

    Args:
        left: First operand
        right: Second operand
        settings: Optional settings override for the decimal precision

    Raises:
        IncompatibleAmountError: If the operands are of different non-Zero kinds
        decimal.Inexact: If the exact sum exceeds the configured precision
        TypeError: If an operand is not an amount spec
    """
    for operand in (left, right):
        if not isinstance(operand, AMOUNT_VARIANTS):
            raise TypeError(f"Expected an AmountSpec, got {type(operand).__name__}")

    if isinstance(left, Zero):
        return right
    if isinstance(right, Zero):
        return left

    if type(left) is type(right) and isinstance(left, NumericAmount):
        context = (settings or get_settings()).decimal_context()
        return type(left)(context.add(left.amount, right.amount))

    logger.debug("Rejected merge of incompatible amounts {!r} and {!r}", left, right)
    raise IncompatibleAmountError(left, right)

"""Update policies telling the order manager how to reconcile an intent."""

from __future__ import annotations

from enum import Enum


class UpdatePolicy(str, Enum):
    """Reconciliation policy against an existing open position."""

    RETAIN = "retain"
    RETAIN_LONG = "retain_long"
    RETAIN_SHORT = "retain_short"
    UPDATE = "update"

    @property
    def is_retain(self) -> bool:
        """Check if the policy keeps (part of) an existing position as-is."""
        return self is not UpdatePolicy.UPDATE

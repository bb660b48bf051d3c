"""
Cart Engine — Notification Signals
====================================
Turns command outcomes into user-facing notifications.

Notifications are a side channel: the cart state is already committed
(or already left untouched) when they are built, and a failing sink
never affects it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from core.commands.outcomes import CommandOutcome, CommandStatus
from engines.cart.commands import (
    CART_CLEAR_REQUEST,
    CART_DISCOUNT_SET_REQUEST,
    CART_ITEM_ADD_REQUEST,
    CART_ITEM_UPDATE_QUANTITY_REQUEST,
)


# ══════════════════════════════════════════════════════════════
# SEVERITY
# ══════════════════════════════════════════════════════════════

SEVERITY_SUCCESS = "success"
SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"

VALID_SEVERITIES = frozenset({
    SEVERITY_SUCCESS, SEVERITY_INFO, SEVERITY_WARNING, SEVERITY_ERROR,
})


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: str = SEVERITY_INFO

    def __post_init__(self):
        if self.severity not in VALID_SEVERITIES:
            raise ValueError(f"Invalid severity: {self.severity}")

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "severity": self.severity,
        }


NotificationSink = Callable[[Notification], None]


# ══════════════════════════════════════════════════════════════
# BUILDERS
# ══════════════════════════════════════════════════════════════

def build_item_added(outcome: CommandOutcome, subject: str) -> Notification:
    return Notification(
        title="Product added",
        description=f"{subject} added to cart.",
        severity=SEVERITY_SUCCESS,
    )


def build_add_rejected(outcome: CommandOutcome, subject: str) -> Notification:
    return Notification(
        title="Could not add product",
        description=outcome.reason.message,
        severity=SEVERITY_ERROR,
    )


def build_update_rejected(outcome: CommandOutcome, subject: str) -> Notification:
    return Notification(
        title="Quantity not updated",
        description=outcome.reason.message,
        severity=SEVERITY_ERROR,
    )


def build_cart_cleared(outcome: CommandOutcome, subject: str) -> Notification:
    return Notification(
        title="Cart cleared",
        description="All products were removed from the cart.",
        severity=SEVERITY_INFO,
    )


def build_discount_rejected(outcome: CommandOutcome, subject: str) -> Notification:
    return Notification(
        title="Invalid discount",
        description=outcome.reason.message,
        severity=SEVERITY_WARNING,
    )


NOTIFICATION_BUILDERS = {
    (CART_ITEM_ADD_REQUEST, CommandStatus.ACCEPTED): build_item_added,
    (CART_ITEM_ADD_REQUEST, CommandStatus.REJECTED): build_add_rejected,
    (CART_ITEM_UPDATE_QUANTITY_REQUEST, CommandStatus.REJECTED): build_update_rejected,
    (CART_CLEAR_REQUEST, CommandStatus.ACCEPTED): build_cart_cleared,
    (CART_DISCOUNT_SET_REQUEST, CommandStatus.REJECTED): build_discount_rejected,
}


def build_notification(
    outcome: CommandOutcome,
    subject: str = "",
) -> Optional[Notification]:
    """Notification for an outcome, or None when the outcome is silent."""
    builder = NOTIFICATION_BUILDERS.get((outcome.command_type, outcome.status))
    if builder is None:
        return None
    return builder(outcome, subject)

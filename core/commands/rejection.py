"""
Cart Command Layer — Rejection Model
======================================
Structured rejection reasons for refused cart mutations.

A rejection is NOT an exception. It is an explanation structure
returned inside a CommandOutcome and turned into a notification
by the service layer.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for command rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INSUFFICIENT_STOCK').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Stock ─────────────────────────────────────────────────
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

    # ── Input ─────────────────────────────────────────────────
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_DISCOUNT = "INVALID_DISCOUNT"

    # ── Command structure ─────────────────────────────────────
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"

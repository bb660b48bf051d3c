"""
Cart Command Layer — Command Outcome Contract
===============================================
Every cart command produces exactly one Outcome. No exceptions.

ACCEPTED → the command was applied (or was a legitimate no-op).
REJECTED → the command was refused, state is unchanged, reason is mandatory.

Rules:
- Exactly one outcome per command
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# COMMAND STATUS
# ══════════════════════════════════════════════════════════════

class CommandStatus(Enum):
    """Binary command decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# COMMAND OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CommandOutcome:
    """
    Deterministic result of applying a cart command.

    Fields:
        command_type: The command this outcome belongs to.
        status:       ACCEPTED or REJECTED.
        reason:       RejectionReason (mandatory if REJECTED, None if ACCEPTED).

    Invariants:
        - REJECTED + reason is None → ValueError
        - ACCEPTED + reason is not None → ValueError
    """

    command_type: str
    status: CommandStatus
    reason: Optional[RejectionReason] = None

    def __post_init__(self):
        if not self.command_type or not isinstance(self.command_type, str):
            raise ValueError("command_type must be a non-empty string.")

        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )

        if self.status == CommandStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == CommandStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

    @classmethod
    def accepted(cls, command_type: str) -> CommandOutcome:
        return cls(command_type=command_type, status=CommandStatus.ACCEPTED)

    @classmethod
    def rejected(cls, command_type: str, reason: RejectionReason) -> CommandOutcome:
        return cls(
            command_type=command_type,
            status=CommandStatus.REJECTED,
            reason=reason,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED

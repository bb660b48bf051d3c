"""
Cart Command Layer
====================
Every cart mutation produces exactly one Outcome.
REJECTED commands are first-class results, never exceptions.
"""

from core.commands.outcomes import (
    CommandOutcome,
    CommandStatus,
)
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "CommandOutcome",
    "CommandStatus",
    "ReasonCode",
    "RejectionReason",
]

"""
Cart Core Config — Admin-Configurable Rules
=============================================
Doctrine: No hardcoded tax rates or stock thresholds in engine logic.
Stock policy and tax rate come from admin-configurable data,
not from source code. The engine only consumes their values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from core.primitives.money import round2


# ══════════════════════════════════════════════════════════════
# STOCK POLICY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StockPolicy:
    """
    Stock availability rules for the cart.

    allow_negative_stock lets a cart line exceed on-hand stock
    (overselling). The thresholds drive stock level warnings only;
    they never block a mutation.
    """

    allow_negative_stock: bool = False
    warning_threshold: int = 10
    critical_threshold: int = 5

    def __post_init__(self) -> None:
        if self.warning_threshold < 0 or self.critical_threshold < 0:
            raise ValueError("Stock thresholds must be >= 0.")
        if self.critical_threshold > self.warning_threshold:
            raise ValueError(
                f"critical_threshold ({self.critical_threshold}) cannot exceed "
                f"warning_threshold ({self.warning_threshold})."
            )

    def to_dict(self) -> dict:
        return {
            "allow_negative_stock": self.allow_negative_stock,
            "warning_threshold": self.warning_threshold,
            "critical_threshold": self.critical_threshold,
        }


# ══════════════════════════════════════════════════════════════
# TAX RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TaxRule:
    """
    Uniform tax applied to the cart's taxable base (VAT, IVA, GST...).
    """

    rate: float = 0.0  # 0.16 means 16%
    tax_type: str = "VAT"

    def __post_init__(self) -> None:
        if not 0 <= self.rate <= 1:
            raise ValueError(f"Tax rate must be between 0 and 1, got {self.rate}.")

    def compute_tax(self, amount: float) -> float:
        """Compute tax amount for a given base amount."""
        return round2(amount * self.rate)


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for admin-configured rule storage.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_stock_policy(self) -> StockPolicy:
        ...  # pragma: no cover

    def get_tax_rule(self) -> TaxRule:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemoryConfigStore:
    """Simple in-memory config store for testing and bootstrap."""

    def __init__(
        self,
        stock_policy: Optional[StockPolicy] = None,
        tax_rule: Optional[TaxRule] = None,
    ) -> None:
        self._stock_policy = stock_policy or StockPolicy()
        self._tax_rule = tax_rule or TaxRule()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InMemoryConfigStore:
        """
        Build from an admin settings mapping, e.g.

            {"tax_rate": 0.16, "tax_type": "IVA",
             "allow_negative_stock": False,
             "warning_threshold": 10, "critical_threshold": 5}

        Missing keys fall back to the rule defaults.
        """
        defaults = StockPolicy()
        policy = StockPolicy(
            allow_negative_stock=bool(
                data.get("allow_negative_stock", defaults.allow_negative_stock)
            ),
            warning_threshold=int(
                data.get("warning_threshold", defaults.warning_threshold)
            ),
            critical_threshold=int(
                data.get("critical_threshold", defaults.critical_threshold)
            ),
        )
        tax = TaxRule(
            rate=float(data.get("tax_rate", 0.0)),
            tax_type=str(data.get("tax_type", "VAT")),
        )
        return cls(stock_policy=policy, tax_rule=tax)

    def set_stock_policy(self, policy: StockPolicy) -> None:
        self._stock_policy = policy

    def set_tax_rule(self, rule: TaxRule) -> None:
        self._tax_rule = rule

    def get_stock_policy(self) -> StockPolicy:
        return self._stock_policy

    def get_tax_rule(self) -> TaxRule:
        return self._tax_rule

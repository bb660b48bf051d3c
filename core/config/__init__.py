"""
Cart Core Config — Public API
===============================
Admin-configurable rules (stock policy, tax).
Doctrine: No hardcoded rates or thresholds in engine logic.
"""

from core.config.rules import (
    ConfigStore,
    InMemoryConfigStore,
    StockPolicy,
    TaxRule,
)

__all__ = [
    "StockPolicy",
    "TaxRule",
    "ConfigStore",
    "InMemoryConfigStore",
]

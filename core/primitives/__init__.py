"""
Cart Core Primitives — Shared Building Blocks
===============================================
Pure Python, immutable, deterministic.

Primitives:
    money  — two-decimal half-up rounding helpers
    item   — catalog product snapshot
    party  — customer snapshot
"""

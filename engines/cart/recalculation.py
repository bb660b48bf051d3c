"""
Cart Recalculation Engine — Context-Change Repricing
======================================================
Whenever the pricing context changes (selected customer, wholesale
mode, catalog snapshot), every existing line is re-priced at its
unchanged quantity.

RULES (NON-NEGOTIABLE):
- Never drops, reorders, or changes the quantity of a line
- Only price, discount and total may change
- A line is replaced only if one of those actually differs
- If no line differs, the input snapshot object is returned as-is
- A line whose product is missing from the catalog is left untouched
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from engines.cart.store import CartSnapshot, PricingContext, reprice_line

logger = logging.getLogger("cart.recalc")


@dataclass(frozen=True)
class RecalculationResult:
    """
    snapshot: the re-priced snapshot (identical object if nothing changed)
    repriced: product_ids whose derived fields changed
    missing:  product_ids not found in the catalog (left untouched)
    """

    snapshot: CartSnapshot
    repriced: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.repriced)


def recalculate(snapshot: CartSnapshot, context: PricingContext) -> RecalculationResult:
    lines = []
    repriced = []
    missing = []

    for line in snapshot:
        product = context.find_product(line.product_id)
        if product is None:
            missing.append(line.product_id)
            lines.append(line)
            continue
        updated = reprice_line(line, product, context)
        if updated is not line:
            repriced.append(line.product_id)
        lines.append(updated)

    if missing:
        logger.warning(
            f"Recalculation kept {len(missing)} line(s) priced as before: "
            f"products not in catalog: {', '.join(missing)}"
        )

    if not repriced:
        logger.debug("Recalculation pass: no line changed")
        return RecalculationResult(snapshot=snapshot, missing=tuple(missing))

    logger.info(f"Recalculation pass repriced {len(repriced)} line(s)")
    return RecalculationResult(
        snapshot=CartSnapshot(items=tuple(lines)),
        repriced=tuple(repriced),
        missing=tuple(missing),
    )

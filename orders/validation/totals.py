"""Order totals derived from validated line items."""

from __future__ import annotations

from typing import Optional

from orders import conf

from .changeset import Changeset
from .money import Money, sum_money


class TotalsComputer:
    # TODO: add adjustment_total and promo_total once adjustments and promotions are modelled
    SUMMED_BUCKETS = ("item_total",)

    def __init__(self, field: str = "line_items", currency: Optional[str] = None):
        self.field = field
        self.currency = currency

    def compute(self, changeset: Changeset) -> Changeset:
        """Put ``item_total`` and ``total`` on a valid changeset.

        An invalid changeset is returned as is; no totals are guessed for it.
        Raises CurrencyMismatchError when line totals use different currencies.
        """
        if not changeset.valid:
            return changeset

        currency = self.currency or conf.default_currency()
        children = changeset.get_field(self.field, ()) or ()
        item_total = sum_money((child["total"] for child in children), currency)

        buckets = {"item_total": item_total}
        total = sum_money(buckets[name] for name in self.SUMMED_BUCKETS)

        return changeset.put_change("item_total", item_total).put_change("total", total)

    @staticmethod
    def line_total(unit_price: Money, quantity: int) -> Money:
        return unit_price * quantity

from collections.abc import Sequence
from decimal import Decimal

from ledgerdesk.core.modules.totals.models import ComputedTotals, DocumentTotals, LineItem, PricedLineItem
from ledgerdesk.errors import InvalidItemsError


def validate_items(items: Sequence[LineItem]) -> None:
    """Reject empty lists and items with non-positive quantity or negative price."""
    if not items:
        raise InvalidItemsError("At least one item is required")
    for index, item in enumerate(items):
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
            raise InvalidItemsError(f"Item {index + 1}: quantity must be a positive integer, got {item.quantity!r}")
        if item.unit_price < 0:
            raise InvalidItemsError(f"Item {index + 1}: unit price must not be negative, got {item.unit_price}")


def price_item(item: LineItem) -> PricedLineItem:
    return PricedLineItem(
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        line_total=item.unit_price * item.quantity,
    )


def compute_totals(
    items: Sequence[LineItem],
    subtotal: Decimal | None = None,
    tax: Decimal | None = None,
    discount: Decimal | None = None,
) -> ComputedTotals:
    """Price every item and derive document totals.

    Overrides win whenever they are given (including an explicit zero);
    absent tax and discount count as zero.
    """
    validate_items(items)
    priced = [price_item(item) for item in items]
    computed_subtotal = sum((item.line_total for item in priced), Decimal(0))

    final_subtotal = subtotal if subtotal is not None else computed_subtotal
    final_tax = tax if tax is not None else Decimal(0)
    final_discount = discount if discount is not None else Decimal(0)

    return ComputedTotals(
        items=priced,
        totals=DocumentTotals(
            subtotal=final_subtotal,
            tax=final_tax,
            discount=final_discount,
            total=final_subtotal + final_tax - final_discount,
        ),
    )

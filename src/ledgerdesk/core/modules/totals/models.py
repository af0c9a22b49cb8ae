"""Line items and monetary totals shared by invoices and orders."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from ledgerdesk.core.db import Money


class LineItem(BaseModel):
    """Item as supplied by the caller, before pricing."""

    description: str = ""
    quantity: int
    unit_price: Money


class PricedLineItem(LineItem):
    """Item stored with its line total baked in; never recomputed on read."""

    line_total: Money


class DocumentTotals(BaseModel):
    """Document-level amounts. total = subtotal + tax - discount (may be negative)."""

    subtotal: Money = Decimal(0)
    tax: Money = Decimal(0)
    discount: Money = Decimal(0)
    total: Money = Decimal(0)


class ComputedTotals(BaseModel):
    items: list[PricedLineItem] = Field(..., min_length=1)
    totals: DocumentTotals

    def to_fields(self) -> dict[str, Any]:
        """Flat field mapping stored on the document (items plus the four amounts)."""
        return {"items": [item.model_dump() for item in self.items], **self.totals.model_dump()}

"""Product expiration tracking.

Each product carries one expiration date. Its status is derived from the
days left until that date: already past is expired, up to
``EXPIRATION_ATTENTION_DAYS`` needs attention, anything later is ok.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ledgerbook.config import EXPIRATION_ATTENTION_DAYS
from ledgerbook.domain.entities import (
    ExpirationProduct,
    ExpirationStatus,
    InventorySummary,
    Snapshot,
)
from ledgerbook.domain.errors import NotFoundError, ValidationError
from ledgerbook.domain.ledger import new_id
from ledgerbook.utils.date_parser import days_until, format_date, today_utc

logger = logging.getLogger(__name__)


def expiration_status(days_left: int) -> ExpirationStatus:
    if days_left < 0:
        return ExpirationStatus.EXPIRED
    if days_left <= EXPIRATION_ATTENTION_DAYS:
        return ExpirationStatus.ATTENTION
    return ExpirationStatus.OK


class InventoryService:
    """Service for products tracked by expiration date."""

    def __init__(self, snapshot: Snapshot, today: Optional[date] = None):
        self.snapshot = snapshot
        self.today = today if today is not None else today_utc()

    def days_left(self, product: ExpirationProduct) -> int:
        return days_until(format_date(product.expiration_date), today=self.today)

    def status(self, product: ExpirationProduct) -> ExpirationStatus:
        return expiration_status(self.days_left(product))

    def add_product(
        self, barcode: str, description: str, quantity: int, expiration_date: date
    ) -> tuple[Snapshot, ExpirationProduct]:
        """Start tracking a product.

        Returns:
            Tuple of (new snapshot, created product)

        Raises:
            ValidationError: If a field is invalid or the date is in the past
        """
        product = ExpirationProduct(
            id=new_id("exp"),
            barcode=barcode.strip(),
            description=description.strip(),
            quantity=quantity,
            expiration_date=expiration_date,
        )
        self._validate(product)
        logger.info("Tracking %s until %s", product.description, product.expiration_date)
        return (
            replace(
                self.snapshot,
                expiration_products=self.snapshot.expiration_products + (product,),
            ),
            product,
        )

    def get_product(self, product_id: str) -> Optional[ExpirationProduct]:
        for product in self.snapshot.expiration_products:
            if product.id == product_id:
                return product
        return None

    def require_product(self, product_id: str) -> ExpirationProduct:
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def update_product(self, product: ExpirationProduct) -> Snapshot:
        """Replace a product with an edited version carrying the same ID.

        Raises:
            NotFoundError: If the product does not exist
            ValidationError: If a field is invalid or the date is in the past
        """
        self.require_product(product.id)
        product = replace(
            product, barcode=product.barcode.strip(), description=product.description.strip()
        )
        self._validate(product)
        return replace(
            self.snapshot,
            expiration_products=tuple(
                product if p.id == product.id else p
                for p in self.snapshot.expiration_products
            ),
        )

    def delete_product(self, product_id: str) -> Snapshot:
        self.require_product(product_id)
        return replace(
            self.snapshot,
            expiration_products=tuple(
                p for p in self.snapshot.expiration_products if p.id != product_id
            ),
        )

    def list_products(
        self, search: str = "", status: Optional[ExpirationStatus] = None
    ) -> list[ExpirationProduct]:
        """Products matching the search and status, soonest expiration first.

        Args:
            search: Matched against the description (ignoring case) and the
                barcode
            status: Only products with this status
        """
        term = search.strip().lower()
        matches = [
            p
            for p in self.snapshot.expiration_products
            if (not term or term in p.description.lower() or term in p.barcode)
            and (status is None or self.status(p) is status)
        ]
        return sorted(matches, key=self.days_left)

    def summary(self) -> InventorySummary:
        counts = {s: 0 for s in ExpirationStatus}
        upcoming = []
        for product in self.snapshot.expiration_products:
            counts[self.status(product)] += 1
            if self.days_left(product) >= 0:
                upcoming.append(product.expiration_date)
        return InventorySummary(
            expired=counts[ExpirationStatus.EXPIRED],
            attention=counts[ExpirationStatus.ATTENTION],
            ok=counts[ExpirationStatus.OK],
            total_items=sum(p.quantity for p in self.snapshot.expiration_products),
            next_expiration=min(upcoming, default=None),
        )

    def _validate(self, product: ExpirationProduct) -> None:
        if not (product.barcode.isascii() and product.barcode.isdigit()):
            raise ValidationError("Barcode must contain digits only")
        if not product.description:
            raise ValidationError("Product description cannot be empty")
        if product.quantity <= 0:
            raise ValidationError(f"Quantity must be greater than zero, got {product.quantity}")
        if product.expiration_date < self.today:
            raise ValidationError(
                f"Expiration date {format_date(product.expiration_date)} is in the past"
            )

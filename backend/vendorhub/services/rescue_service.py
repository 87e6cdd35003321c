"""Rescue Claim Engine - surplus food listings with exactly-once claims"""
import logging
from decimal import Decimal
from typing import List

from vendorhub.core.amounts import to_amount
from vendorhub.core.errors import ConflictError, NotFoundError, ValidationError
from vendorhub.core.store import EntityStore
from vendorhub.models.rescue_item import RESCUE_ITEM_TYPES, RescueItem
from vendorhub.services.trust_service import POSTED_RESCUE_ITEM, TrustService

logger = logging.getLogger(__name__)


class RescueService:
    """
    Lists rescue items and hands each one to at most one buyer.

    A claim is a compare-and-set on the item row: status moves from
    "available" to "claimed" together with claimed_by, or nothing changes.
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self.trust = TrustService(store)

    async def create_rescue_item(
        self,
        vendor_id: str,
        title: str,
        description: str,
        type: str,
        quantity: str,
        original_price: Decimal,
        rescue_price: Decimal,
        city: str,
        is_hot: bool = False,
    ) -> RescueItem:
        if type not in RESCUE_ITEM_TYPES:
            raise ValidationError(f"Rescue item type must be one of {', '.join(RESCUE_ITEM_TYPES)}")
        original_price = to_amount(original_price, "Original price")
        rescue_price = to_amount(rescue_price, "Rescue price")
        if rescue_price <= 0:
            raise ValidationError("Rescue price must be greater than zero")
        if rescue_price > original_price:
            raise ValidationError("Rescue price cannot exceed the original price")
        if not title.strip():
            raise ValidationError("Title is required")
        if not city.strip():
            raise ValidationError("City is required")

        item = await self.store.create(
            RescueItem,
            vendor_id=vendor_id,
            title=title.strip(),
            description=description,
            type=type,
            quantity=quantity,
            original_price=original_price,
            rescue_price=rescue_price,
            city=city.strip(),
            is_hot=is_hot,
            status="available",
            claimed_by=None,
        )
        await self.trust.mark(vendor_id, POSTED_RESCUE_ITEM)
        await self.store.commit()

        logger.info("Rescue item %s listed by %s in %s", item.id, vendor_id, item.city)
        return item

    async def list_rescue_items(self, city: str) -> List[RescueItem]:
        """Available rescue items in a city, newest first."""
        return await self.store.scan(
            RescueItem,
            order_by=RescueItem.created_at.desc(),
            city=city,
            status="available",
        )

    async def get_rescue_item(self, item_id: str) -> RescueItem:
        item = await self.store.get(RescueItem, item_id)
        if item is None:
            raise NotFoundError(f"Rescue item {item_id} not found")
        return item

    async def claim_rescue_item(self, item_id: str, buyer_id: str) -> RescueItem:
        """
        Claim an available item for `buyer_id`.

        Exactly one concurrent caller wins. Everyone else, and every later
        caller, gets ConflictError and the item is left as the winner set it.
        """
        claimed = await self.store.compare_and_set(
            RescueItem,
            item_id,
            expected={"status": "available"},
            changes={"status": "claimed", "claimed_by": buyer_id},
        )

        if claimed is None:
            await self.store.rollback()
            if await self.store.get(RescueItem, item_id) is None:
                raise NotFoundError(f"Rescue item {item_id} not found")
            raise ConflictError("Item not available")

        await self.store.commit()
        logger.info("Rescue item %s claimed by %s", item_id, buyer_id)
        return claimed

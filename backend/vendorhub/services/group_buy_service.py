"""Group-Buy Aggregator - pooled purchase lifecycle and join accumulation"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from vendorhub.core.amounts import to_amount
from vendorhub.core.clock import as_naive_utc, utcnow
from vendorhub.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from vendorhub.core.store import EntityStore
from vendorhub.models.group_buy import GROUP_BUY_STATUSES, GroupBuy, GroupBuyParticipant
from vendorhub.services.trust_service import PARTICIPATED_GROUP_BUY, TrustService

logger = logging.getLogger(__name__)

# Terminal states reachable from "active" through an explicit close
CLOSED_STATUSES = tuple(s for s in GROUP_BUY_STATUSES if s != "active")


class GroupBuyService:
    """
    Owns the lifecycle of a group buy.

    Invariants:
    - current_quantity equals the sum of the participant ledger
    - participant_count is 1 (organizer) plus the number of ledger rows
    - status only leaves "active", never returns to it
    - joins on the same group buy never lose an increment

    Reaching target_quantity does NOT complete a group buy. Completion is an
    explicit operational step (close()).
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self.trust = TrustService(store)

    async def create_group_buy(
        self,
        organizer_id: str,
        ingredient: str,
        target_quantity: Decimal,
        price_per_kg: Decimal,
        original_price: Decimal,
        city: str,
        deadline: datetime,
    ) -> GroupBuy:
        """Open a new active group buy with the organizer as first participant."""
        deadline = as_naive_utc(deadline)
        target_quantity = to_amount(target_quantity, "Target quantity")
        price_per_kg = to_amount(price_per_kg, "Price per kg")
        original_price = to_amount(original_price, "Original price")

        if target_quantity <= 0:
            raise ValidationError("Target quantity must be greater than zero")
        if price_per_kg <= 0:
            raise ValidationError("Price per kg must be greater than zero")
        if original_price <= 0:
            raise ValidationError("Original price must be greater than zero")
        if deadline <= utcnow():
            raise ValidationError("Deadline must be in the future")
        if not ingredient.strip():
            raise ValidationError("Ingredient is required")
        if not city.strip():
            raise ValidationError("City is required")

        group_buy = await self.store.create(
            GroupBuy,
            organizer_id=organizer_id,
            ingredient=ingredient.strip(),
            target_quantity=target_quantity,
            current_quantity=Decimal("0"),
            price_per_kg=price_per_kg,
            original_price=original_price,
            city=city.strip(),
            deadline=deadline,
            status="active",
            participant_count=1,
        )
        await self.trust.mark(organizer_id, PARTICIPATED_GROUP_BUY)
        await self.store.commit()

        logger.info(
            "Group buy %s opened by %s: %s kg of %s in %s",
            group_buy.id, organizer_id, target_quantity, group_buy.ingredient, group_buy.city,
        )
        return group_buy

    async def list_group_buys(self, city: str) -> List[GroupBuy]:
        """Active group buys in a city, newest first."""
        return await self.store.scan(
            GroupBuy,
            order_by=GroupBuy.created_at.desc(),
            city=city,
            status="active",
        )

    async def get_group_buy(self, group_buy_id: str) -> GroupBuy:
        group_buy = await self.store.get(GroupBuy, group_buy_id)
        if group_buy is None:
            raise NotFoundError(f"Group buy {group_buy_id} not found")
        return group_buy

    async def get_participants(self, group_buy_id: str) -> List[GroupBuyParticipant]:
        """The participant ledger, oldest join first."""
        await self.get_group_buy(group_buy_id)
        return await self.store.scan(
            GroupBuyParticipant,
            order_by=GroupBuyParticipant.joined_at.asc(),
            group_buy_id=group_buy_id,
        )

    async def join_group_buy(self, group_buy_id: str, vendor_id: str, quantity: Decimal) -> GroupBuy:
        """
        Contribute `quantity` kg to an active group buy.

        The totals are bumped with one conditional UPDATE (status still active,
        deadline not passed), so concurrent joins serialize on the row and none
        is lost. The ledger row is written in the same unit of work.
        """
        quantity = to_amount(quantity, "Quantity")
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")

        now = utcnow()
        group_buy = await self.store.increment(
            GroupBuy,
            group_buy_id,
            deltas={"current_quantity": quantity, "participant_count": 1},
            when=[GroupBuy.status == "active", GroupBuy.deadline > now],
        )

        if group_buy is None:
            await self.store.rollback()
            await self._raise_not_joinable(group_buy_id, now)

        await self.store.create(
            GroupBuyParticipant,
            group_buy_id=group_buy_id,
            vendor_id=vendor_id,
            quantity=quantity,
            joined_at=now,
        )
        await self.trust.mark(vendor_id, PARTICIPATED_GROUP_BUY)
        await self.store.commit()

        logger.info(
            "Vendor %s joined group buy %s with %s kg (now %s/%s kg, %d participants)",
            vendor_id, group_buy_id, quantity,
            group_buy.current_quantity, group_buy.target_quantity, group_buy.participant_count,
        )
        return group_buy

    async def close_group_buy(self, group_buy_id: str, closed_by: str, status: str) -> GroupBuy:
        """Move an active group buy to completed or cancelled (organizer only)."""
        if status not in CLOSED_STATUSES:
            raise ValidationError(f"Cannot close a group buy as '{status}'")

        group_buy = await self.get_group_buy(group_buy_id)
        if group_buy.organizer_id != closed_by:
            raise PermissionDeniedError("Only the organizer can close this group buy")

        closed = await self.store.compare_and_set(
            GroupBuy,
            group_buy_id,
            expected={"status": "active"},
            changes={"status": status},
        )
        if closed is None:
            await self.store.rollback()
            current = await self.get_group_buy(group_buy_id)
            raise ConflictError(f"Group buy is already {current.status}")

        await self.store.commit()
        logger.info("Group buy %s closed as %s", group_buy_id, status)
        return closed

    async def _raise_not_joinable(self, group_buy_id: str, now: datetime):
        group_buy = await self.store.get(GroupBuy, group_buy_id)
        if group_buy is None:
            raise NotFoundError(f"Group buy {group_buy_id} not found")
        if group_buy.status != "active":
            raise ConflictError(f"Group buy is {group_buy.status} and no longer accepts participants")
        raise ConflictError("Group buy deadline has passed")

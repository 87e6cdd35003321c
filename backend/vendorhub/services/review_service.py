"""Review ingestion and the public vendor profile view"""
import logging
from typing import List, Optional

from sqlalchemy import Float, Numeric, case, cast

from vendorhub.core.errors import NotFoundError, ValidationError
from vendorhub.core.store import EntityStore
from vendorhub.models.rescue_item import RescueItem
from vendorhub.models.review import Review
from vendorhub.models.user import User
from vendorhub.services.trust_service import TrustService

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Appends buyer reviews and keeps the vendor's rating aggregate in step.

    Reviews are never edited or deleted. The aggregate is folded in with one
    UPDATE (rating = (rating * count + new) / (count + 1)), so concurrent
    reviews for the same vendor cannot overwrite each other.
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self.trust = TrustService(store)

    async def create_review(
        self,
        buyer_id: str,
        vendor_id: str,
        rating: int,
        comment: Optional[str] = None,
        rescue_item_id: Optional[str] = None,
    ) -> Review:
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        if buyer_id == vendor_id:
            raise ValidationError("Vendors cannot review themselves")

        vendor = await self.store.get(User, vendor_id)
        if vendor is None or vendor.role != "vendor":
            raise NotFoundError("Vendor not found")

        if rescue_item_id:
            item = await self.store.get(RescueItem, rescue_item_id)
            if item is None or item.vendor_id != vendor_id:
                raise NotFoundError(f"Rescue item {rescue_item_id} not found for this vendor")

        review = await self.store.create(
            Review,
            vendor_id=vendor_id,
            buyer_id=buyer_id,
            rating=rating,
            comment=comment or None,
            rescue_item_id=rescue_item_id,
        )

        new_average = cast(
            (cast(User.rating, Float) * User.review_count + rating) / (User.review_count + 1),
            Numeric(2, 1),
        )
        await self.store.increment(
            User,
            vendor_id,
            deltas={"review_count": 1},
            rating=case((User.review_count == 0, rating), else_=new_average),
        )
        await self.store.commit()

        logger.info("Review %s (%d stars) recorded for vendor %s", review.id, rating, vendor_id)
        return review

    async def list_reviews(self, vendor_id: str) -> List[Review]:
        """Reviews for a vendor, newest first."""
        return await self.store.scan(
            Review,
            order_by=Review.created_at.desc(),
            vendor_id=vendor_id,
        )

    async def get_vendor_profile(self, vendor_id: str) -> dict:
        """The vendor's identity, trust profile and reviews."""
        user = await self.store.get(User, vendor_id)
        profile = await self.trust.get_profile(vendor_id)
        if user is None or profile is None:
            raise NotFoundError("Vendor not found")

        return {
            "user": user,
            "profile": profile,
            "reviews": await self.list_reviews(vendor_id),
        }

"""Trust Tracker - derives a vendor's trust badge and score from activity flags"""
import logging
from typing import Dict, Optional, Tuple

from vendorhub.core.clock import utcnow
from vendorhub.core.config import settings
from vendorhub.core.errors import ValidationError
from vendorhub.core.store import EntityStore
from vendorhub.models.vendor_profile import VendorProfile

logger = logging.getLogger(__name__)

USED_AI_PREDICTION = "used_ai_prediction"
PARTICIPATED_GROUP_BUY = "participated_group_buy"
POSTED_RESCUE_ITEM = "posted_rescue_item"

ACTIVITY_FLAGS = (USED_AI_PREDICTION, PARTICIPATED_GROUP_BUY, POSTED_RESCUE_ITEM)


def flag_values(profile: VendorProfile) -> Dict[str, bool]:
    return {flag: bool(getattr(profile, flag)) for flag in ACTIVITY_FLAGS}


def derive_trust(flags: Dict[str, bool]) -> Tuple[bool, int]:
    """
    Return (has_trust_badge, trust_score) for a set of activity flags.

    The badge needs all three activity flags. The score is a presentation
    value: a fixed weight per flag plus a bonus once the badge is earned.
    Flags never revert, so the score never decreases.
    """
    earned = sum(1 for flag in ACTIVITY_FLAGS if flags.get(flag))
    has_badge = earned == len(ACTIVITY_FLAGS)
    score = earned * settings.TRUST_FLAG_WEIGHT
    if has_badge:
        score += settings.TRUST_BADGE_BONUS
    return has_badge, score


class TrustService:
    """Owns the activity flags and derived trust fields on VendorProfile."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def get_profile(self, vendor_id: str) -> Optional[VendorProfile]:
        """Load a vendor's profile with badge and score evaluated against its flags."""
        profiles = await self.store.scan(VendorProfile, user_id=vendor_id, limit=1)
        if not profiles:
            return None
        return self.evaluate(profiles[0])

    def evaluate(self, profile: VendorProfile) -> VendorProfile:
        has_badge, score = derive_trust(flag_values(profile))
        profile.has_trust_badge = has_badge
        profile.trust_score = max(profile.trust_score or 0, score)
        return profile

    async def mark(self, vendor_id: str, flag: str) -> Optional[VendorProfile]:
        """
        Set an activity flag to true and recompute the derived fields.

        Idempotent: marking a flag that is already set leaves it set. Callers
        without a vendor profile (buyers, suppliers) are ignored. Flushes only,
        the calling service commits.
        """
        if flag not in ACTIVITY_FLAGS:
            raise ValidationError(f"Unknown activity flag: {flag}")

        profile = await self.get_profile(vendor_id)
        if profile is None:
            return None

        had_badge = bool(profile.has_trust_badge)
        flags = flag_values(profile)
        flags[flag] = True
        has_badge, score = derive_trust(flags)

        profile = await self.store.update(
            VendorProfile,
            profile.id,
            **{flag: True},
            has_trust_badge=has_badge,
            trust_score=max(profile.trust_score or 0, score),
            last_activity_date=utcnow(),
        )

        if has_badge and not had_badge:
            logger.info("Vendor %s earned the trust badge", vendor_id)

        return profile

    async def update_details(
        self,
        vendor_id: str,
        business_name: Optional[str] = None,
        sourcing_method: Optional[str] = None,
    ) -> Optional[VendorProfile]:
        """Edit the owner-editable profile fields. Derived fields are not settable."""
        profile = await self.get_profile(vendor_id)
        if profile is None:
            return None

        changes = {}
        if business_name is not None:
            if not business_name.strip():
                raise ValidationError("Business name cannot be empty")
            changes["business_name"] = business_name.strip()
        if sourcing_method is not None:
            changes["sourcing_method"] = sourcing_method

        if changes:
            changes["last_activity_date"] = utcnow()
            profile = await self.store.update(VendorProfile, profile.id, **changes)
            await self.store.commit()

        return self.evaluate(profile)

from vendorhub.models.user import User
from vendorhub.models.vendor_profile import VendorProfile
from vendorhub.models.group_buy import GroupBuy, GroupBuyParticipant
from vendorhub.models.rescue_item import RescueItem
from vendorhub.models.review import Review
from vendorhub.models.prediction import Prediction

__all__ = [
    "User",
    "VendorProfile",
    "GroupBuy",
    "GroupBuyParticipant",
    "RescueItem",
    "Review",
    "Prediction",
]

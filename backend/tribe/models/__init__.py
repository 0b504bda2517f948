from tribe.models.availability_window import AvailabilityWindow
from tribe.models.claim import Claim
from tribe.models.hang_request import HangRequest
from tribe.models.plan import Plan
from tribe.models.response import Response

__all__ = [
    "AvailabilityWindow",
    "Claim",
    "HangRequest",
    "Plan",
    "Response",
]

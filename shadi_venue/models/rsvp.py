"""
RSVP Pydantic models
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional


class RsvpStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


# RSVP Response from a guest
class RsvpResponse(BaseModel):
    """A single guest's RSVP response.

    The fixed fields are typed; whatever the microsite's RSVP form asked
    for (name, contact, guest count, message, ...) is kept as extra fields.
    """
    model_config = ConfigDict(extra="allow")
    id: str
    userId: str  # the invite id, not an account
    status: RsvpStatus = RsvpStatus.PENDING
    createdAt: str
    updatedAt: str


class RsvpStatusChange(BaseModel):
    """Body of PATCH /invite/{userId}/responses"""
    rsvpId: Optional[str] = None
    status: Optional[str] = None


# RSVP Stats
class RsvpStats(BaseModel):
    """RSVP statistics for an invite"""
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    declined: int = 0

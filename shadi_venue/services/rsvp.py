"""
RSVP service - owns the `rsvp` collection
"""
import logging
import uuid
from typing import List, Optional

from pymongo import ReturnDocument

from shadi_venue.core.config import RSVP_COLLECTION, RSVP_PENDING, RSVP_STATUSES
from shadi_venue.core.errors import InvalidArgumentError, NotFoundError
from shadi_venue.models.rsvp import RsvpResponse, RsvpStats
from shadi_venue.utils.helpers import utc_now_iso, check_field_names

logger = logging.getLogger(__name__)

# Fields owned by the service; guests cannot set them
RESERVED_FIELDS = ("_id", "id", "userId", "status", "createdAt", "updatedAt")


class RsvpService:
    """
    Guest RSVP entries for a wedding microsite.

    Guest fields are schema-agnostic: each microsite decides what its RSVP
    form asks for, and whatever it sends is stored beside the fixed fields.
    Status changes are unrestricted between pending, confirmed and declined.
    """

    def __init__(self, db, clock=None):
        self.collection = db[RSVP_COLLECTION]
        self._now = clock or utc_now_iso

    async def get(self, rsvp_id: str) -> Optional[dict]:
        return await self.collection.find_one({"id": rsvp_id}, {"_id": 0})

    async def list_by_wedding(self, wedding_id: str) -> List[dict]:
        """All RSVPs for a wedding, newest first"""
        return await self.collection.find(
            {"userId": wedding_id},
            {"_id": 0}
        ).sort("createdAt", -1).to_list(None)

    async def create(self, wedding_id: str, guest_data: dict) -> dict:
        """Store a new RSVP; it always starts out pending"""
        if not isinstance(guest_data, dict):
            raise InvalidArgumentError("RSVP data must be an object")

        guest_fields = {k: v for k, v in guest_data.items() if k not in RESERVED_FIELDS}
        check_field_names(guest_fields)

        rsvp_id = str(uuid.uuid4())
        timestamp = self._now()
        rsvp_doc = RsvpResponse(
            **guest_fields,
            id=rsvp_id,
            userId=wedding_id,
            status=RSVP_PENDING,
            createdAt=timestamp,
            updatedAt=timestamp,
        ).model_dump(mode="json")

        await self.collection.insert_one(rsvp_doc)
        logger.info(f"RSVP {rsvp_id} submitted for wedding {wedding_id}")
        return await self.get(rsvp_id)

    async def update_status(self, rsvp_id: str, new_status: str, wedding_id: Optional[str] = None) -> dict:
        """
        Move an RSVP to new_status.

        The status is checked before anything is written, so a rejected
        value leaves the entry as it was. With wedding_id set, an RSVP that
        belongs to another wedding is reported as not found.
        """
        if new_status not in RSVP_STATUSES:
            raise InvalidArgumentError(
                f"Invalid status '{new_status}'. Must be one of: {', '.join(RSVP_STATUSES)}",
                status=new_status
            )

        query = {"id": rsvp_id}
        if wedding_id is not None:
            query["userId"] = wedding_id

        updated = await self.collection.find_one_and_update(
            query,
            {"$set": {"status": new_status, "updatedAt": self._now()}},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER
        )
        if updated is None:
            raise NotFoundError("RSVP not found", rsvp_id=rsvp_id)

        logger.info(f"RSVP {rsvp_id} status changed to {new_status}")
        return updated

    async def stats(self, wedding_id: str) -> RsvpStats:
        """Count RSVPs per status for a wedding"""
        rsvps = await self.list_by_wedding(wedding_id)

        counts = {status: 0 for status in RSVP_STATUSES}
        for rsvp in rsvps:
            status = rsvp.get("status")
            if status in counts:
                counts[status] += 1

        return RsvpStats(total=len(rsvps), **counts)

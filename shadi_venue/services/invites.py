"""
Wedding invite microsite service - owns the `wedding` collection
"""
import logging
from typing import Optional

from shadi_venue.core.config import WEDDING_COLLECTION, DEFAULT_INVITE_ID, MAX_WEDDING_DAY_IMAGES
from shadi_venue.core.errors import InvalidArgumentError, NotFoundError
from shadi_venue.utils.helpers import utc_now_iso, check_field_names, flatten_update

from .cache import InMemoryCache

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("_id", "id")


def _check_wedding_day(data: dict) -> None:
    if "weddingDay" not in data:
        return
    wedding_day = data["weddingDay"]
    if not isinstance(wedding_day, dict):
        raise InvalidArgumentError("weddingDay must be an object")
    images = wedding_day.get("images")
    if images is not None and (not isinstance(images, list) or len(images) > MAX_WEDDING_DAY_IMAGES):
        raise InvalidArgumentError(f"weddingDay.images must be a list of at most {MAX_WEDDING_DAY_IMAGES} URLs")


def _events_update(doc: dict, events: list) -> dict:
    if isinstance(doc.get("planning"), dict):
        return {"planning.events": events}
    # planning stored as null or a scalar has no fields to set into
    return {"planning": {"events": events}}


class InviteService:
    """
    CRUD for wedding microsite documents with a read-through cache.

    Writes always read the document back with force_refresh so the cache
    holds what the store holds. A failed write leaves the cache untouched.
    """

    def __init__(self, db, cache=None, clock=None):
        self.collection = db[WEDDING_COLLECTION]
        self.cache = cache if cache is not None else InMemoryCache()
        self._now = clock or utc_now_iso

    async def get_by_id(self, invite_id: str, force_refresh: bool = False) -> Optional[dict]:
        """Get invite content, None when the document does not exist"""
        if not force_refresh:
            cached = self.cache.get(invite_id)
            if cached is not None:
                logger.debug(f"Returning cached wedding data for id: {invite_id}")
                return cached

        doc = await self.collection.find_one({"id": invite_id}, {"_id": 0})
        if doc is None:
            self.cache.invalidate(invite_id)
            return None

        self.cache.set(invite_id, doc)
        logger.info(f"Wedding data fetched from MongoDB for id: {invite_id}")
        return doc

    async def create_by_id(self, invite_id: str, data: dict) -> dict:
        """Create or overwrite the invite document"""
        if not isinstance(data, dict):
            raise InvalidArgumentError("Invite data must be an object")

        doc = {k: v for k, v in data.items() if k not in RESERVED_FIELDS}
        check_field_names(doc)
        _check_wedding_day(doc)

        timestamp = self._now()
        doc["id"] = invite_id
        doc["weddingDay"] = {
            **(doc.get("weddingDay") or {}),
            "createdOn": timestamp,
            "updatedOn": timestamp,
        }

        await self.collection.replace_one({"id": invite_id}, doc, upsert=True)
        logger.info(f"Wedding data created for id: {invite_id}")
        return await self.get_by_id(invite_id, force_refresh=True)

    async def update_by_id(self, invite_id: str, partial: dict) -> dict:
        """Merge partial into the stored document, fields not in partial are kept"""
        if not isinstance(partial, dict):
            raise InvalidArgumentError("Invite update must be an object")

        partial = {k: v for k, v in partial.items() if k not in RESERVED_FIELDS}
        check_field_names(partial)
        _check_wedding_day(partial)

        wedding_day = {k: v for k, v in (partial.get("weddingDay") or {}).items() if k != "createdOn"}
        partial["weddingDay"] = {**wedding_day, "updatedOn": self._now()}

        stored = await self.collection.find_one({"id": invite_id}, {"_id": 0})
        update = flatten_update(partial, current=stored)

        await self.collection.update_one({"id": invite_id}, {"$set": update}, upsert=True)
        logger.info(f"Wedding data updated for id: {invite_id}")
        return await self.get_by_id(invite_id, force_refresh=True)

    async def delete_by_id(self, invite_id: str) -> dict:
        """Delete the invite; deleting a missing invite is not an error"""
        await self.collection.delete_one({"id": invite_id})
        self.cache.invalidate(invite_id)
        logger.info(f"Wedding data deleted for id: {invite_id}")
        return {"id": invite_id}

    # ============ Single-tenant shortcuts ============

    async def get_main(self, force_refresh: bool = False) -> Optional[dict]:
        return await self.get_by_id(DEFAULT_INVITE_ID, force_refresh)

    async def create_main(self, data: dict) -> dict:
        return await self.create_by_id(DEFAULT_INVITE_ID, data)

    async def update_main(self, partial: dict) -> dict:
        return await self.update_by_id(DEFAULT_INVITE_ID, partial)

    async def delete_main(self) -> dict:
        return await self.delete_by_id(DEFAULT_INVITE_ID)

    # ============ Section updates ============

    async def _require(self, invite_id: str) -> dict:
        doc = await self.get_by_id(invite_id, force_refresh=True)
        if doc is None:
            raise NotFoundError("Invite not found", invite_id=invite_id)
        return doc

    async def _replace_fields(self, invite_id: str, fields: dict) -> dict:
        """Replace whole fields (no merge) on an existing invite"""
        update = {**fields, "weddingDay.updatedOn": self._now()}
        result = await self.collection.update_one({"id": invite_id}, {"$set": update})
        if result.matched_count == 0:
            self.cache.invalidate(invite_id)
            raise NotFoundError("Invite not found", invite_id=invite_id)
        return await self.get_by_id(invite_id, force_refresh=True)

    async def set_enabled(self, invite_id: str, is_enabled: bool) -> dict:
        """Show or hide the public microsite"""
        doc = await self._replace_fields(invite_id, {"isEnabled": bool(is_enabled)})
        logger.info(f"Invite {invite_id} {'enabled' if is_enabled else 'disabled'}")
        return doc

    async def update_theme(self, invite_id: str, theme: dict) -> dict:
        return await self._replace_fields(invite_id, {"theme": theme})

    async def upsert_event(self, invite_id: str, event: dict, index: Optional[int] = None) -> dict:
        """Replace the planning event at index, append when index is not a valid position"""
        doc = await self._require(invite_id)
        events = list((doc.get("planning") or {}).get("events") or [])

        if index is not None and 0 <= index < len(events):
            events[index] = event
        else:
            events.append(event)

        return await self._replace_fields(invite_id, _events_update(doc, events))

    async def delete_event(self, invite_id: str, index: int) -> dict:
        doc = await self._require(invite_id)
        events = list((doc.get("planning") or {}).get("events") or [])

        if not 0 <= index < len(events):
            raise NotFoundError("Event not found", invite_id=invite_id, index=index)
        events.pop(index)

        return await self._replace_fields(invite_id, _events_update(doc, events))

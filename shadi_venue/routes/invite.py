"""
Wedding invite microsite API Routes
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from shadi_venue.core.config import DEFAULT_INVITE_ID
from shadi_venue.core.dependencies import (
    get_optional_auth, get_current_auth, invite_manager, can_manage_invite, ensure_invite_access
)
from shadi_venue.core.errors import InvalidArgumentError
from shadi_venue.models.invite import (
    WeddingInvite, Theme, InviteSection, Person, AboutSection, WeddingDay,
    LoveStorySection, PlanningSection, RsvpSection, FooterSection,
    InviteStatusUpdate, InviteThemeUpdate, InviteEventUpdate
)
from shadi_venue.utils.helpers import parse_json_field

from .responses import success_response

logger = logging.getLogger(__name__)

# Multipart image fields, in the order they are uploaded
WEDDING_DAY_IMAGE_FIELDS = [
    "weddingDay.images.0",
    "weddingDay.images.1",
    "weddingDay.images.2",
]
IMAGE_FIELDS = [
    "invite.leftImage",
    "invite.rightImage",
    "about.groom.image",
    "about.bride.image",
    "about.coupleImage",
    *WEDDING_DAY_IMAGE_FIELDS,
    "rsvp.backgroundImage",
    "footer.backgroundImage",
]


def _form_str(form, key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


def _form_bool(form, key: str, default: bool) -> bool:
    value = _form_str(form, key).strip().lower()
    if not value:
        return default
    return value in ("1", "true", "yes", "on")


def _socials(form, key: str) -> dict:
    # Older clients send "[]" when no links are filled in
    return parse_json_field(_form_str(form, key), {}, key) or {}


def build_invite_from_form(form, image_urls: Dict[str, str]) -> WeddingInvite:
    """Assemble the invite document from multipart fields and uploaded image URLs"""
    def image(key: str) -> str:
        return image_urls.get(key, "")

    try:
        return WeddingInvite(
            theme=Theme.single_color(_form_str(form, "theme.color")),
            invite=InviteSection(
                leftImage=image("invite.leftImage"),
                rightImage=image("invite.rightImage"),
                title=_form_str(form, "invite.title"),
                names=_form_str(form, "invite.names"),
                linkHref=_form_str(form, "invite.linkHref"),
                linkText=_form_str(form, "invite.linkText"),
            ),
            about=AboutSection(
                subtitle=_form_str(form, "about.subtitle"),
                title=_form_str(form, "about.title"),
                groom=Person(
                    name=_form_str(form, "about.groom.name"),
                    description=_form_str(form, "about.groom.description"),
                    image=image("about.groom.image"),
                    socials=_socials(form, "about.groom.socials"),
                ),
                bride=Person(
                    name=_form_str(form, "about.bride.name"),
                    description=_form_str(form, "about.bride.description"),
                    image=image("about.bride.image"),
                    socials=_socials(form, "about.bride.socials"),
                ),
                coupleImage=image("about.coupleImage"),
            ),
            weddingDay=WeddingDay(
                backgroundColor=_form_str(form, "weddingDay.backgroundColor"),
                headingTop=_form_str(form, "weddingDay.headingTop"),
                headingMain=_form_str(form, "weddingDay.headingMain"),
                date=_form_str(form, "weddingDay.date"),
                images=[image(key) for key in WEDDING_DAY_IMAGE_FIELDS],
            ),
            loveStory=LoveStorySection(
                sectionTitle=_form_str(form, "loveStory.sectionTitle"),
                sectionSubtitle=_form_str(form, "loveStory.sectionSubtitle"),
                stories=parse_json_field(_form_str(form, "loveStory.stories"), [], "loveStory.stories"),
            ),
            planning=PlanningSection(
                **parse_json_field(_form_str(form, "planning"), {}, "planning")
            ),
            rsvp=RsvpSection(backgroundImage=image("rsvp.backgroundImage")),
            footer=FooterSection(
                backgroundImage=image("footer.backgroundImage"),
                coupleNames=_form_str(form, "footer.coupleNames"),
                subtitle=_form_str(form, "footer.subtitle"),
                socials=_socials(form, "footer.socials"),
            ),
            isEnabled=_form_bool(form, "isEnabled", True),
        )
    except (ValidationError, TypeError) as e:
        raise InvalidArgumentError(f"Invalid invite data: {e}")


def setup_invite_routes(app, invite_service, storage):
    """Setup invite routes with the invite service and storage backend"""

    invite_router = APIRouter()

    @invite_router.get("")
    async def get_main_invite():
        """Get the single-tenant 'main' invite"""
        data = await invite_service.get_main()
        if not data:
            raise HTTPException(status_code=404, detail="Data not found")
        return success_response(data)

    @invite_router.post("", status_code=201)
    async def create_invite(request: Request, auth: dict = Depends(get_current_auth)):
        """Create (or overwrite) an invite from a multipart form with images"""
        form = await request.form()
        invite_id = _form_str(form, "id").strip() or DEFAULT_INVITE_ID
        ensure_invite_access(auth, invite_id)

        # Reject bad text fields before anything reaches the object store
        build_invite_from_form(form, {})

        uploads = []
        for key in IMAGE_FIELDS:
            file = form.get(key)
            if isinstance(file, UploadFile) and file.filename:
                uploads.append((key, file.filename, await file.read(), file.content_type))

        urls = await storage.upload_images([(name, content, ctype) for _, name, content, ctype in uploads])
        image_urls = {key: url for (key, *_), url in zip(uploads, urls)}
        logger.info(f"Uploaded {len(urls)} images for invite {invite_id}")

        invite = build_invite_from_form(form, image_urls)
        saved = await invite_service.create_by_id(invite_id, invite.model_dump(exclude={"id"}))
        return success_response(saved, status_code=201, message="Invite created successfully")

    @invite_router.get("/{invite_id}")
    async def get_invite(invite_id: str, auth: Optional[dict] = Depends(get_optional_auth)):
        """Get invite content; disabled microsites are only visible to their managers"""
        data = await invite_service.get_by_id(invite_id)
        if not data:
            raise HTTPException(status_code=404, detail="Data not found")
        if data.get("isEnabled") is False and not can_manage_invite(auth, invite_id):
            raise HTTPException(status_code=404, detail="Data not found")
        return success_response(data)

    @invite_router.put("/{invite_id}")
    async def update_invite(
        invite_id: str,
        update: Dict[str, Any] = Body(...),
        auth: dict = Depends(invite_manager("invite_id"))
    ):
        """Merge-update invite content"""
        updated = await invite_service.update_by_id(invite_id, update)
        return success_response(updated, message="Invite updated successfully")

    @invite_router.delete("/{invite_id}")
    async def delete_invite(invite_id: str, auth: dict = Depends(invite_manager("invite_id"))):
        result = await invite_service.delete_by_id(invite_id)
        return success_response(result, message="Invite deleted successfully")

    @invite_router.patch("/{invite_id}/status")
    async def update_invite_status(
        invite_id: str,
        data: InviteStatusUpdate,
        auth: dict = Depends(invite_manager("invite_id"))
    ):
        """Show or hide the public microsite"""
        updated = await invite_service.set_enabled(invite_id, data.isEnabled)
        return success_response(updated, message="Invite status updated successfully")

    @invite_router.patch("/{invite_id}/theme")
    async def update_invite_theme(
        invite_id: str,
        data: InviteThemeUpdate,
        auth: dict = Depends(invite_manager("invite_id"))
    ):
        updated = await invite_service.update_theme(invite_id, data.theme.model_dump())
        return success_response(updated, message="Invite theme updated successfully")

    @invite_router.patch("/{invite_id}/events")
    async def upsert_invite_event(
        invite_id: str,
        data: InviteEventUpdate,
        auth: dict = Depends(invite_manager("invite_id"))
    ):
        """Replace the planning event at eventIndex, or append a new one"""
        updated = await invite_service.upsert_event(invite_id, data.eventData.model_dump(), data.eventIndex)
        return success_response(updated, message="Wedding event saved successfully")

    @invite_router.delete("/{invite_id}/events/{index}")
    async def delete_invite_event(
        invite_id: str,
        index: int,
        auth: dict = Depends(invite_manager("invite_id"))
    ):
        updated = await invite_service.delete_event(invite_id, index)
        return success_response(updated, message="Wedding event deleted successfully")

    # Include router in app
    app.include_router(invite_router, prefix="/api/invite", tags=["Invite"])

    return invite_router

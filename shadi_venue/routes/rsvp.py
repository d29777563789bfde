"""
RSVP API Routes
"""
import csv
import io
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import StreamingResponse

from shadi_venue.core.dependencies import invite_manager
from shadi_venue.core.errors import InvalidArgumentError
from shadi_venue.models.rsvp import RsvpStatusChange

from .responses import success_response

logger = logging.getLogger(__name__)

EXPORT_LEADING_FIELDS = ["id", "status", "createdAt", "updatedAt"]


def rsvps_to_csv(rsvps) -> str:
    """CSV with the fixed fields first, then every guest field any RSVP used"""
    guest_fields = sorted({
        key for rsvp in rsvps for key in rsvp
        if key not in EXPORT_LEADING_FIELDS and key != "userId"
    })
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_LEADING_FIELDS + guest_fields, extrasaction='ignore')
    writer.writeheader()
    for rsvp in rsvps:
        writer.writerow(rsvp)
    return output.getvalue()


def setup_rsvp_routes(app, rsvp_service):
    """Setup RSVP routes with the RSVP service"""

    rsvp_router = APIRouter()

    # ============================================
    # PUBLIC ENDPOINTS (for guests)
    # ============================================

    @rsvp_router.get("/{user_id}/responses")
    async def get_rsvp_responses(user_id: str):
        """Get all RSVPs for a wedding, newest first"""
        responses = await rsvp_service.list_by_wedding(user_id)
        return success_response(responses)

    @rsvp_router.post("/{user_id}/rsvp")
    async def submit_rsvp(user_id: str, rsvp_data: Dict[str, Any] = Body(...)):
        """Submit an RSVP; the status always starts as pending"""
        rsvp = await rsvp_service.create(user_id, rsvp_data)
        return success_response(rsvp, message="RSVP submitted successfully")

    # ============================================
    # HOST ENDPOINTS
    # ============================================

    @rsvp_router.patch("/{user_id}/responses")
    async def update_rsvp_status(
        user_id: str,
        data: RsvpStatusChange,
        auth: dict = Depends(invite_manager("user_id"))
    ):
        """Change an RSVP status, the RSVP id comes in the body"""
        if not data.rsvpId or data.status is None:
            raise InvalidArgumentError("rsvpId and status are required")

        updated = await rsvp_service.update_status(data.rsvpId, data.status, wedding_id=user_id)
        return success_response(updated, message="RSVP status updated successfully")

    @rsvp_router.get("/{user_id}/responses/stats")
    async def get_rsvp_stats(user_id: str, auth: dict = Depends(invite_manager("user_id"))):
        stats = await rsvp_service.stats(user_id)
        return success_response(stats)

    @rsvp_router.get("/{user_id}/responses/export")
    async def export_rsvp_responses(
        user_id: str,
        format: str = "csv",
        auth: dict = Depends(invite_manager("user_id"))
    ):
        """Export RSVPs (CSV or JSON format)"""
        rsvps = await rsvp_service.list_by_wedding(user_id)

        if format == "json":
            return success_response({"rsvps": rsvps, "total": len(rsvps)})
        if format != "csv":
            raise InvalidArgumentError("format must be 'csv' or 'json'")

        return StreamingResponse(
            iter([rsvps_to_csv(rsvps)]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=rsvps_{user_id}.csv"}
        )

    @rsvp_router.patch("/{user_id}/responses/{rsvp_id}")
    async def update_rsvp_status_by_path(
        user_id: str,
        rsvp_id: str,
        data: RsvpStatusChange,
        auth: dict = Depends(invite_manager("user_id"))
    ):
        """Change an RSVP status, the RSVP id comes in the path"""
        if data.status is None:
            raise InvalidArgumentError("status is required")

        updated = await rsvp_service.update_status(rsvp_id, data.status, wedding_id=user_id)
        return success_response(updated, message="RSVP status updated successfully")

    # Include router in app
    app.include_router(rsvp_router, prefix="/api/invite", tags=["RSVP"])

    return rsvp_router

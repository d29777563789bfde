"""
Serves images stored by the local filesystem fallback
"""
import mimetypes

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response


def setup_upload_routes(app, storage):
    upload_router = APIRouter()

    @upload_router.get("/uploads/{key:path}")
    async def serve_upload(key: str):
        content = await storage.get_file(key)
        if content is None:
            raise HTTPException(status_code=404, detail="File not found")

        media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        return Response(
            content=content,
            media_type=media_type,
            headers={"Cache-Control": "public, max-age=31536000"}
        )

    app.include_router(upload_router, prefix="/api", tags=["Uploads"])

    return upload_router

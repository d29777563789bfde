from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pymongo.errors import PyMongoError
import logging

from shadi_venue.core.config import CORS_ORIGINS, INVITE_CACHE_ENABLED
from shadi_venue.core.database import db, client, create_database_indexes
from shadi_venue.core.errors import ServiceError, UpstreamError
from shadi_venue.routes import health_router, setup_invite_routes, setup_rsvp_routes, setup_upload_routes
from shadi_venue.routes.responses import error_response
from shadi_venue.services import InviteService, RsvpService, build_invite_cache, storage_service

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def register_exception_handlers(app: FastAPI):
    """Map service errors, store failures and HTTP errors onto the JSON envelope"""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if isinstance(exc, UpstreamError):
            logger.error(f"{request.method} {request.url.path} failed upstream: {exc.reason} {exc.details}")
        else:
            logger.warning(f"{request.method} {request.url.path}: {exc.reason}")
        return error_response(exc.status_code, exc.error_code, exc.reason)

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error(f"{request.method} {request.url.path} database error: {exc}")
        return error_response(UpstreamError.status_code, UpstreamError.error_code, "Internal Server Error")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        return error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'Invalid request')}" if location else first.get("msg", "Invalid request")
        return error_response(400, "INVALID_ARGUMENT", message)


def build_app(database=None, storage=None, invite_cache=None, manage_indexes: bool = True) -> FastAPI:
    """Wire services, routes and handlers around a database and a storage backend"""
    database = database if database is not None else db
    storage = storage if storage is not None else storage_service
    if invite_cache is None:
        invite_cache = build_invite_cache(INVITE_CACHE_ENABLED)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown"""
        if manage_indexes:
            await create_database_indexes(database)
        yield
        if database is db:
            client.close()

    app = FastAPI(title="Shadi Venue Invite API", lifespan=lifespan)

    invite_service = InviteService(database, cache=invite_cache)
    rsvp_service = RsvpService(database)
    app.state.invite_service = invite_service
    app.state.rsvp_service = rsvp_service
    app.state.storage = storage

    app.include_router(health_router, prefix="/api")
    setup_rsvp_routes(app, rsvp_service)
    setup_invite_routes(app, invite_service, storage)
    setup_upload_routes(app, storage)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = build_app()

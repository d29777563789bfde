"""
Routes package for the invite API

Routes are organized by domain:
- health: Health check endpoints
- invite: Wedding microsite content
- rsvp: Guest RSVP responses
- uploads: Local-fallback image serving
"""

from .health import router as health_router
from .invite import setup_invite_routes
from .rsvp import setup_rsvp_routes
from .uploads import setup_upload_routes

__all__ = ['health_router', 'setup_invite_routes', 'setup_rsvp_routes', 'setup_upload_routes']

# Services module exports
from .cache import InMemoryCache, NullCache, build_invite_cache
from .invites import InviteService
from .rsvp import RsvpService
from .storage import StorageService, storage_service

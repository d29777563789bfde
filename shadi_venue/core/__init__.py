# Core module exports
from .config import *
from .database import db, client, create_database_indexes
from .dependencies import get_optional_auth, get_current_auth, verify_token, invite_manager, security
from .errors import ServiceError, NotFoundError, InvalidArgumentError, UpstreamError

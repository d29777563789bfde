"""
Application configuration and constants
"""
import os
from pathlib import Path
from dotenv import load_dotenv
import logging
import asyncio

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Configure logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# MongoDB
MONGO_URL = os.environ['MONGO_URL']
DB_NAME = os.environ['DB_NAME']

# Collections
WEDDING_COLLECTION = 'wedding'
RSVP_COLLECTION = 'rsvp'

# JWT verification - tokens are issued by the external auth provider,
# this service only verifies them
SECRET_KEY = os.environ['JWT_SECRET_KEY']
ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE') or None
JWT_ISSUER = os.environ.get('JWT_ISSUER') or None
AUTH_COOKIE_NAME = os.environ.get('AUTH_COOKIE_NAME', 'auth')

# Roles
ROLE_SUPER_ADMIN = "super-admin"
ROLE_ADMIN = "admin"
ROLE_USER = "user"
ADMIN_ROLES = [ROLE_SUPER_ADMIN, ROLE_ADMIN]

# Invites
DEFAULT_INVITE_ID = os.environ.get('DEFAULT_INVITE_ID', 'main')
INVITE_CACHE_ENABLED = _env_flag('INVITE_CACHE_ENABLED', True)
MAX_WEDDING_DAY_IMAGES = 3

# RSVP statuses
RSVP_PENDING = "pending"
RSVP_CONFIRMED = "confirmed"
RSVP_DECLINED = "declined"
RSVP_STATUSES = [RSVP_PENDING, RSVP_CONFIRMED, RSVP_DECLINED]

# Upload directory (local fallback when R2 is not configured)
UPLOAD_DIR = Path(os.environ.get('UPLOAD_DIR', str(ROOT_DIR / 'uploads')))

# Concurrency control for uploads
MAX_CONCURRENT_UPLOADS = int(os.environ.get('MAX_CONCURRENT_UPLOADS', '10'))
upload_semaphore = asyncio.Semaphore(MAX_CONCURRENT_UPLOADS)
MAX_UPLOAD_SIZE_MB = int(os.environ.get('MAX_UPLOAD_SIZE_MB', '10'))
MAX_UPLOAD_SIZE = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# CORS
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

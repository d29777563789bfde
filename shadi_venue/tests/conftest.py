"""
Shared fixtures for the invite API tests

Tests run offline: MongoDB is replaced by mongomock-motor and images are
stored in a temporary directory through the local storage fallback.
"""
import asyncio
import os
import uuid
from datetime import datetime, timedelta, timezone
from io import BytesIO

# Settings are read at import time
os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "shadi_venue_test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.pop("JWT_AUDIENCE", None)
os.environ.pop("JWT_ISSUER", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from mongomock_motor import AsyncMongoMockClient
from PIL import Image

from shadi_venue.core.config import SECRET_KEY, ALGORITHM
from shadi_venue.server import build_app
from shadi_venue.services import InMemoryCache, InviteService, RsvpService, StorageService

BASE_TIME = datetime(2026, 2, 14, 10, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns a strictly increasing ISO timestamp on every call"""

    def __init__(self):
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        return (BASE_TIME + timedelta(seconds=self.ticks)).isoformat()


@pytest.fixture
def run():
    """Run a coroutine to completion"""
    return asyncio.run


@pytest.fixture
def mock_db():
    """Fresh in-memory database per test"""
    client = AsyncMongoMockClient()
    return client[f"shadi_venue_test_{uuid.uuid4().hex[:8]}"]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def invite_service(mock_db, clock):
    return InviteService(mock_db, cache=InMemoryCache(), clock=clock)


@pytest.fixture
def rsvp_service(mock_db, clock):
    return RsvpService(mock_db, clock=clock)


@pytest.fixture
def storage(tmp_path):
    """Local filesystem storage rooted in a temp directory"""
    return StorageService(upload_dir=tmp_path / "uploads", r2_enabled=False)


@pytest.fixture
def app(mock_db, storage):
    return build_app(database=mock_db, storage=storage, invite_cache=InMemoryCache(), manage_indexes=False)


@pytest.fixture
def client(app):
    """Test client without running the lifespan"""
    return TestClient(app)


@pytest.fixture
def make_token():
    """Mint a signed token the way the auth provider does"""
    def _make(role="admin", role_id=None, secret=SECRET_KEY, expires_in=3600, **claims):
        payload = {
            "sub": f"test-{role}",
            "role": role,
            "exp": int((datetime.now(timezone.utc) + timedelta(seconds=expires_in)).timestamp()),
            **claims,
        }
        if role_id is not None:
            payload["roleId"] = role_id
        return jwt.encode(payload, secret, algorithm=ALGORITHM)
    return _make


@pytest.fixture
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token('admin')}"}


@pytest.fixture
def owner_headers(make_token):
    """Headers for the user who owns the 'main' invite"""
    return {"Authorization": f"Bearer {make_token('user', role_id='main')}"}


@pytest.fixture
def stranger_headers(make_token):
    """Headers for a user who owns some other invite"""
    return {"Authorization": f"Bearer {make_token('user', role_id='someone-else')}"}


@pytest.fixture
def test_image():
    """Create a test image file"""
    def _make(color="red", fmt="PNG"):
        img = Image.new('RGB', (40, 40), color=color)
        buffer = BytesIO()
        img.save(buffer, format=fmt)
        return buffer.getvalue()
    return _make


@pytest.fixture
def sample_invite():
    """Invite content as the dashboard sends it"""
    return {
        "theme": {
            "titleColor": "#b76e79",
            "nameColor": "#b76e79",
            "buttonColor": "#b76e79",
            "buttonHoverColor": "#b76e79",
        },
        "invite": {
            "title": "We're getting married",
            "names": "Aarav & Meera",
            "leftImage": "",
            "rightImage": "",
            "linkHref": "#rsvp",
            "linkText": "RSVP now",
        },
        "about": {
            "subtitle": "Our story",
            "title": "The couple",
            "groom": {"name": "Aarav", "description": "Engineer", "image": "", "socials": {"instagram": "https://instagram.com/aarav"}},
            "bride": {"name": "Meera", "description": "Architect", "image": "", "socials": {}},
            "coupleImage": "",
        },
        "weddingDay": {
            "backgroundColor": "#fff8f0",
            "headingTop": "Save the date",
            "headingMain": "Our wedding day",
            "date": "2026-12-12",
            "images": ["", "", ""],
        },
        "loveStory": {"sectionTitle": "Love story", "sectionSubtitle": "How it began", "stories": []},
        "planning": {
            "mapIframeUrl": "",
            "title": "Wedding events",
            "subtitle": "Join us",
            "events": [
                {"id": 1, "type": "Haldi", "date": "2026-12-10", "venue": "Courtyard", "time": "10:00"},
                {"id": 2, "type": "Sangeet", "date": "2026-12-11", "venue": "Lawn", "time": "19:00"},
            ],
        },
        "rsvp": {"backgroundImage": ""},
        "footer": {"backgroundImage": "", "coupleNames": "Aarav & Meera", "subtitle": "See you there", "socials": {}},
        "isEnabled": True,
    }

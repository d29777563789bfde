"""
Utility helper functions for the invite backend
"""
import json
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shadi_venue.core.errors import InvalidArgumentError


# ============ Time Utilities ============

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string"""
    return datetime.now(timezone.utc).isoformat()


# ============ Document Utilities ============

def check_field_names(data: Dict[str, Any], path: str = "") -> None:
    """Reject keys MongoDB would interpret as operators or paths"""
    for key, value in data.items():
        full_key = f"{path}.{key}" if path else str(key)
        if not isinstance(key, str) or not key or key.startswith('$') or '.' in key:
            raise InvalidArgumentError(f"Invalid field name: {full_key!r}")
        if isinstance(value, dict):
            check_field_names(value, full_key)


def flatten_update(data: Dict[str, Any], prefix: str = "", current: Optional[dict] = None) -> Dict[str, Any]:
    """
    Turn a nested partial document into dotted $set paths.

    Nested objects are merged key by key; lists and scalars replace the
    stored value. Empty objects leave the stored value untouched. When
    current (the stored document) holds a non-object where the partial
    has an object, that object is set whole, since MongoDB cannot create
    fields inside null or scalar values.
    """
    flat = {}
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else key
        stored = current.get(key) if current is not None else None
        mergeable = current is None or key not in current or isinstance(stored, dict)
        if isinstance(value, dict) and mergeable:
            flat.update(flatten_update(value, path, stored if isinstance(stored, dict) else None))
        else:
            flat[path] = value
    return flat


# ============ Form Utilities ============

def parse_json_field(raw: Optional[str], default: Any, field_name: str) -> Any:
    """Parse a JSON-encoded multipart form field, empty means default"""
    if raw is None or not raw.strip():
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidArgumentError(f"Field '{field_name}' must be valid JSON")


# ============ Storage Utilities ============

def build_upload_key(filename: Optional[str], folder: str = "invites") -> str:
    """Unique object key keeping a sanitized version of the original filename"""
    name = (filename or "image").rsplit('/', 1)[-1]
    name = re.sub(r'[^A-Za-z0-9._-]', '_', name) or "image"
    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    return f"{folder}/{stamp}_{uuid.uuid4().hex[:8]}_{name}"

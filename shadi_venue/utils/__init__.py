"""
Utils package for the invite backend
"""
from .helpers import (
    utc_now_iso,
    check_field_names,
    flatten_update,
    parse_json_field,
    build_upload_key,
)

__all__ = [
    'utc_now_iso',
    'check_field_names',
    'flatten_update',
    'parse_json_field',
    'build_upload_key',
]

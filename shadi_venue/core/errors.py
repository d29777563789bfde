"""
Service error types shared by the services and the route layer.

Services raise one of the three tags below; the route layer maps the tag
to an HTTP status, so callers never compare error message text.
"""


class ServiceError(Exception):
    """Base class for errors raised by the invite and RSVP services"""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, reason: str, **details):
        super().__init__(reason)
        self.reason = reason
        self.details = details


class NotFoundError(ServiceError):
    """Referenced identifier is absent"""

    status_code = 404
    error_code = "NOT_FOUND"


class InvalidArgumentError(ServiceError):
    """Missing required field or a value outside its allowed set"""

    status_code = 400
    error_code = "INVALID_ARGUMENT"


class UpstreamError(ServiceError):
    """Database or object store call was rejected"""

    status_code = 500
    error_code = "UPSTREAM_FAILURE"

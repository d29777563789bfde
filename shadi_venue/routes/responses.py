"""
JSON envelopes shared by every route
"""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(data: Any = None, status_code: int = 200, message: Optional[str] = None) -> JSONResponse:
    body = {"statusCode": status_code, "success": True}
    if message:
        body["message"] = message
    body["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=body)


def error_response(status_code: int, error_code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "success": False,
            "errorCode": error_code,
            "errorMessage": message,
        }
    )

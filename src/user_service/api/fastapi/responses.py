from __future__ import annotations

from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

_ENCODERS = {ObjectId: str}


def success_response(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    content = {"success": True, "message": message, "data": data}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content, custom_encoder=_ENCODERS))


def error_response(status_code: int | None, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or 500,
        content={"success": False, "message": message},
    )

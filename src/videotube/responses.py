from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Envelope shared by every endpoint, successful or not."""

    statusCode: int
    data: Any = None
    message: str = "Success"
    success: bool = True


def api_response(status_code: int, data: Any = None, message: str = "Success") -> JSONResponse:
    if data is None and status_code < 400:
        data = {}
    body = ApiResponse(
        statusCode=status_code,
        data=jsonable_encoder(data),
        message=message,
        success=status_code < 400,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())

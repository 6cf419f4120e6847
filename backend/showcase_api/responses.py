from typing import Any

from fastapi import Response
from fastapi.responses import JSONResponse

from .errors import UpstreamError


def json_response(payload: Any, **kwargs) -> JSONResponse:
    return JSONResponse(payload, status_code=200, **kwargs)


def error_response(error: UpstreamError) -> Response:
    return Response(
        content=error.render(),
        status_code=error.code or 500,
        media_type=error.content_type or "text/plain",
    )


def raw_json_response(text: str) -> Response:
    """Serve an upstream JSON body exactly as GitHub sent it."""
    return Response(content=text, status_code=200, media_type="application/json")

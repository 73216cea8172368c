from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from nonap.core.errors import InvalidConfig, NoNapError, NotFound
from nonap.core.time import utc_now_rfc3339
from nonap.services.pinger.scheduler import PingScheduler


_STATUS_CODES: dict[type[NoNapError], int] = {
    InvalidConfig: 400,
    NotFound: 404,
}


def ok(**data: object) -> dict[str, object]:
    return {"status": "ok", **data}


def err(code: str, message: str) -> dict[str, object]:
    return {
        "status": "error",
        "error": {
            "code": code,
            "message": message,
        },
    }


def error_response(error: NoNapError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_CODES.get(type(error), 500),
        content=err(error.code, str(error)),
    )


def get_scheduler(request: Request) -> PingScheduler:
    return request.app.state.scheduler


__all__ = ["ok", "err", "error_response", "get_scheduler", "utc_now_rfc3339"]

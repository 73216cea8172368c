from __future__ import annotations

from fastapi import APIRouter, Request

from nonap.api.utils import ok, utc_now_rfc3339


router = APIRouter()


@router.get("/")
def root(request: Request):
    return ok(name=request.app.title, version=request.app.version)


@router.get("/health")
def health():
    return ok(server_time=utc_now_rfc3339())

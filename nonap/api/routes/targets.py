from __future__ import annotations

from fastapi import APIRouter, Depends

from nonap.api.utils import error_response, get_scheduler, ok, utc_now_rfc3339
from nonap.core.errors import NoNapError
from nonap.dto.targets import AddTargetRequest
from nonap.services.pinger.scheduler import PingScheduler


router = APIRouter()


@router.get("/api/v1/targets")
async def list_targets(scheduler: PingScheduler = Depends(get_scheduler)):
    targets = [target.to_dict() for target in scheduler.list_targets()]
    return ok(total=len(targets), targets=targets, server_time=utc_now_rfc3339())


@router.post("/api/v1/targets")
async def add_target(req: AddTargetRequest, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        target = scheduler.add_target(
            req.url,
            req.min_interval_ms,
            req.max_interval_ms,
            req.timeout_ms,
            req.method,
        )
        if req.auto_start:
            target = await scheduler.start(target.id)
    except NoNapError as error:
        return error_response(error)
    return ok(id=target.id, target=target.to_dict(), server_time=utc_now_rfc3339())


@router.get("/api/v1/targets/{target_id}")
async def get_target(target_id: str, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        target = scheduler.get_target(target_id)
    except NoNapError as error:
        return error_response(error)
    return ok(target=target.to_dict(), server_time=utc_now_rfc3339())


@router.delete("/api/v1/targets/{target_id}")
async def remove_target(target_id: str, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        removed = await scheduler.remove_target(target_id)
    except NoNapError as error:
        return error_response(error)
    return ok(removed=removed.id, server_time=utc_now_rfc3339())


@router.post("/api/v1/targets/{target_id}/start")
async def start_target(target_id: str, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        target = await scheduler.start(target_id)
    except NoNapError as error:
        return error_response(error)
    return ok(target=target.to_dict(), server_time=utc_now_rfc3339())


@router.post("/api/v1/targets/{target_id}/stop")
async def stop_target(target_id: str, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        target = await scheduler.stop(target_id)
    except NoNapError as error:
        return error_response(error)
    return ok(target=target.to_dict(), server_time=utc_now_rfc3339())


@router.get("/api/v1/targets/{target_id}/status")
async def target_status(target_id: str, scheduler: PingScheduler = Depends(get_scheduler)):
    try:
        status = scheduler.status(target_id)
    except NoNapError as error:
        return error_response(error)
    return ok(**status.to_dict(), server_time=utc_now_rfc3339())

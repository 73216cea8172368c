from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from nonap.api.utils import get_scheduler, ok, utc_now_rfc3339
from nonap.services.pinger.scheduler import PingScheduler


router = APIRouter()


@router.get("/api/v1/status")
async def status_all(scheduler: PingScheduler = Depends(get_scheduler)):
    statuses = scheduler.status_all()
    return ok(
        running=scheduler.running_count(),
        total=len(statuses),
        targets=[status.to_dict() for status in statuses],
        server_time=utc_now_rfc3339(),
    )


@router.post("/api/v1/start")
async def start_all(scheduler: PingScheduler = Depends(get_scheduler)):
    started = await scheduler.start_all()
    return ok(started=[target.id for target in started], server_time=utc_now_rfc3339())


@router.post("/api/v1/stop")
async def stop_all(scheduler: PingScheduler = Depends(get_scheduler)):
    stopped = await scheduler.stop_all()
    return ok(stopped=[target.id for target in stopped], server_time=utc_now_rfc3339())


@router.get("/api/v1/logs")
async def recent_logs(
    tail: int = Query(20, ge=1, le=10000),
    scheduler: PingScheduler = Depends(get_scheduler),
):
    outcomes = scheduler.recent_outcomes(tail)
    return ok(
        total=len(outcomes),
        logs=[outcome.to_dict() for outcome in outcomes],
        server_time=utc_now_rfc3339(),
    )

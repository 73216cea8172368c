from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from nonap.api.router import api_router
from nonap.core.config import Settings, settings as default_settings
from nonap.core.logging import configure_logging
from nonap.services.pinger.models import SuccessPolicy
from nonap.services.pinger.probe import HttpProbe
from nonap.services.pinger.scheduler import PingScheduler
from nonap.services.pinger.seed import load_target_definitions, seed_scheduler
from nonap.services.pinger.status_store import StatusStore


_LOGGER = logging.getLogger(__name__)


def build_scheduler(settings: Settings, client: httpx.AsyncClient) -> PingScheduler:
    return PingScheduler(
        HttpProbe(client),
        store=StatusStore(settings.history_capacity),
        policy=SuccessPolicy(settings.success_policy),
    )


def create_app(settings: Settings | None = None, scheduler: PingScheduler | None = None) -> FastAPI:
    """Build the control API.

    Without an injected scheduler the lifespan owns the whole core: it opens
    the shared HTTP client, seeds targets from ``settings.targets_file`` and
    stops every worker on shutdown. An injected scheduler is used as-is and
    left to its owner.
    """
    cfg = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None:
            yield
            return

        async with httpx.AsyncClient(follow_redirects=True) as client:
            owned = build_scheduler(cfg, client)
            app.state.scheduler = owned
            definitions = load_target_definitions(cfg.targets_file)
            await seed_scheduler(owned, definitions, default_timeout_ms=cfg.default_timeout_ms)
            _LOGGER.info("NoNap control API ready (%d targets)", len(owned.list_targets()))
            try:
                yield
            finally:
                await owned.shutdown()
                _LOGGER.info("all ping workers stopped")

    app = FastAPI(title=cfg.app_name, version=cfg.app_version, lifespan=lifespan)
    if scheduler is not None:
        app.state.scheduler = scheduler
    app.include_router(api_router)
    return app


configure_logging(default_settings.log_level)

app = create_app()

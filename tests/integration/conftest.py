"""
集成测试共享fixtures
通过 ASGITransport 直接调用控制 API（调度器使用 FakeProbe）
"""
from __future__ import annotations

import random

import pytest
from httpx import ASGITransport, AsyncClient

from nonap.services.pinger.scheduler import PingScheduler
from nonap.services.pinger.status_store import StatusStore


@pytest.fixture(scope="function")
async def api_scheduler(fake_probe):
    scheduler = PingScheduler(fake_probe, store=StatusStore(capacity=50), rng=random.Random(7))
    yield scheduler
    await scheduler.shutdown()


@pytest.fixture(scope="function")
async def async_client(api_scheduler):
    """FastAPI异步测试客户端"""
    from nonap.main import create_app

    app = create_app(scheduler=api_scheduler)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

"""
单元测试共享fixtures
调度器/worker 使用 FakeProbe，不发起真实网络请求
"""
from __future__ import annotations

import random

import pytest

from nonap.services.pinger.registry import TargetRegistry
from nonap.services.pinger.scheduler import PingScheduler
from nonap.services.pinger.status_store import StatusStore


@pytest.fixture
def registry() -> TargetRegistry:
    return TargetRegistry()


@pytest.fixture
def store() -> StatusStore:
    return StatusStore(capacity=100)


@pytest.fixture
async def scheduler(fake_probe, registry, store):
    sched = PingScheduler(fake_probe, registry=registry, store=store, rng=random.Random(1234))
    yield sched
    await sched.shutdown()

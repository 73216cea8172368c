from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import Awaitable, Callable

import pytest


# ========== tests/conftest.py -> project root ==========
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    # Ensure `import nonap...` and `import tests.fixtures...` work when running the
    # `pytest` entrypoint script, where sys.path[0] may point to the venv bin dir.
    sys.path.insert(0, str(PROJECT_ROOT))

from tests.fixtures.probes import FakeProbe  # noqa: E402


def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试（无外部依赖）")
    config.addinivalue_line("markers", "integration: 集成测试（通过 ASGI 调用控制 API）")
    config.addinivalue_line("markers", "slow: 运行时间较长的测试（秒级真实计时）")


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def wait_until() -> Callable[..., Awaitable[bool]]:
    """Poll ``predicate`` on the running loop until it holds or ``timeout`` elapses."""

    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.005) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            await asyncio.sleep(interval)
        return predicate()

    return _wait

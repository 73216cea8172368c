from __future__ import annotations

import asyncio
import logging
import random

from nonap.core.time import utc_now
from nonap.services.pinger.models import (
    ErrorKind,
    PingOutcome,
    ProbeResult,
    SuccessPolicy,
    Target,
)
from nonap.services.pinger.probe import Probe
from nonap.services.pinger.status_store import StatusStore


_LOGGER = logging.getLogger(__name__)


def build_outcome(target_id: str, result: ProbeResult, policy: SuccessPolicy) -> PingOutcome:
    if not result.responded:
        return PingOutcome(
            target_id=target_id,
            timestamp=utc_now(),
            success=False,
            latency_ms=result.latency_ms,
            status_code=result.status_code,
            error_kind=result.error_kind or ErrorKind.TRANSPORT,
            error_message=result.error_message or "request did not complete",
        )

    if policy is SuccessPolicy.HEALTH and result.status_code is not None and result.status_code >= 400:
        return PingOutcome(
            target_id=target_id,
            timestamp=utc_now(),
            success=False,
            latency_ms=result.latency_ms,
            status_code=result.status_code,
            error_kind=ErrorKind.HTTP_STATUS,
            error_message=f"responded with status {result.status_code}",
        )

    return PingOutcome(
        target_id=target_id,
        timestamp=utc_now(),
        success=True,
        latency_ms=result.latency_ms,
        status_code=result.status_code,
    )


class PingWorker:
    """单个目标的随机间隔 ping 循环。

    worker 持有启动时的目标快照。每轮重新抽取延迟，等待期间若收到停止信号
    则立即退出；否则发出一次请求并记录结果。已发出的请求会被允许完成
    （受目标超时约束），因此之后才观察到的停止仍会记录这次结果。
    """

    def __init__(
        self,
        target: Target,
        probe: Probe,
        store: StatusStore,
        *,
        policy: SuccessPolicy = SuccessPolicy.KEEPALIVE,
        rng: random.Random | None = None,
    ) -> None:
        self.target = target
        self._probe = probe
        self._store = store
        self._policy = policy
        self._rng = rng or random.Random()

    def next_delay_ms(self) -> int:
        return self._rng.randint(self.target.min_interval_ms, self.target.max_interval_ms)

    async def _wait_or_stop(self, stop_event: asyncio.Event, delay_ms: int) -> bool:
        # True 表示收到停止信号（停止优先于计时器）
        if stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=delay_ms / 1000.0)
        except asyncio.TimeoutError:
            return stop_event.is_set()
        return True

    async def _ping_once(self) -> PingOutcome:
        result = await self._probe.request(self.target.url, self.target.method, self.target.timeout_ms)
        outcome = build_outcome(self.target.id, result, self._policy)
        self._store.append(outcome)
        if outcome.success:
            _LOGGER.info(
                "pinged %s (%s) status=%s latency=%.1f ms",
                self.target.url,
                self.target.id,
                outcome.status_code,
                outcome.latency_ms,
            )
        else:
            _LOGGER.warning(
                "ping %s (%s) failed: %s %s",
                self.target.url,
                self.target.id,
                outcome.error_kind.value if outcome.error_kind else "?",
                outcome.error_message,
            )
        return outcome

    async def run(self, stop_event: asyncio.Event) -> None:
        try:
            while not stop_event.is_set():
                delay_ms = self.next_delay_ms()
                _LOGGER.debug("sleeping %d ms before pinging %s", delay_ms, self.target.url)
                if await self._wait_or_stop(stop_event, delay_ms):
                    break
                await self._ping_once()
        except Exception as exc:
            self._store.append(
                PingOutcome(
                    target_id=self.target.id,
                    timestamp=utc_now(),
                    success=False,
                    latency_ms=0.0,
                    error_kind=ErrorKind.INTERNAL,
                    error_message=f"{exc.__class__.__name__}: {exc}",
                )
            )
            raise

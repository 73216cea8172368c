from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from functools import partial

from nonap.core.errors import NotFound
from nonap.services.pinger.models import (
    PingOutcome,
    SuccessPolicy,
    Target,
    TargetState,
    TargetStatus,
)
from nonap.services.pinger.probe import Probe
from nonap.services.pinger.registry import TargetRegistry
from nonap.services.pinger.status_store import StatusStore
from nonap.services.pinger.worker import PingWorker


_LOGGER = logging.getLogger(__name__)


@dataclass
class WorkerHandle:
    task: asyncio.Task[None]
    stop_event: asyncio.Event

    @property
    def alive(self) -> bool:
        return not self.task.done()


class PingScheduler:
    """Owns the target registry and the live worker of every running target.

    Control operations on the same target id are serialized by a per-id
    ``asyncio.Lock``; the registry state and the handle map are only changed
    while that lock is held, so ``running`` always means a live worker task
    exists. Queries never take the per-id locks and read copy-on-read
    snapshots from the registry and the status store.

    A worker that dies on its own (internal fault) is reaped by its task done
    callback: the handle is dropped and the target goes back to ``stopped`` so
    a later ``start`` succeeds.
    """

    def __init__(
        self,
        probe: Probe,
        *,
        registry: TargetRegistry | None = None,
        store: StatusStore | None = None,
        policy: SuccessPolicy = SuccessPolicy.KEEPALIVE,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry or TargetRegistry()
        self.store = store or StatusStore()
        self._probe = probe
        self._policy = policy
        self._rng = rng
        self._handles: dict[str, WorkerHandle] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, target_id: str) -> asyncio.Lock:
        lock = self._locks.get(target_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[target_id] = lock
        return lock

    # -------- target management --------

    def add_target(
        self,
        url: str,
        min_interval_ms: int,
        max_interval_ms: int,
        timeout_ms: int,
        method: str = "GET",
    ) -> Target:
        target = self.registry.add(url, min_interval_ms, max_interval_ms, timeout_ms, method)
        _LOGGER.info("added target %s (%s)", target.id, target.url)
        return target

    async def remove_target(self, target_id: str) -> Target:
        self.registry.get(target_id)
        async with self._lock_for(target_id):
            self.registry.get(target_id)
            await self._stop_locked(target_id)
            removed = self.registry.remove(target_id)
            self.store.drop(target_id)
            self._locks.pop(target_id, None)
        _LOGGER.info("removed target %s (%s)", removed.id, removed.url)
        return removed

    def get_target(self, target_id: str) -> Target:
        return self.registry.get(target_id)

    def list_targets(self) -> list[Target]:
        return self.registry.list()

    # -------- start / stop --------

    async def start(self, target_id: str) -> Target:
        self.registry.get(target_id)
        async with self._lock_for(target_id):
            target = self.registry.get(target_id)
            handle = self._handles.get(target_id)
            if handle is not None and handle.alive:
                return target
            if handle is not None:
                self._handles.pop(target_id, None)

            worker = PingWorker(
                target,
                self._probe,
                self.store,
                policy=self._policy,
                rng=self._worker_rng(),
            )
            stop_event = asyncio.Event()
            task = asyncio.create_task(worker.run(stop_event), name=f"ping-worker:{target_id}")
            handle = WorkerHandle(task=task, stop_event=stop_event)
            self._handles[target_id] = handle
            task.add_done_callback(partial(self._on_worker_done, target_id, handle))
            target = self.registry.set_state(target_id, TargetState.RUNNING)
        _LOGGER.info("started pinging %s (%s)", target.url, target_id)
        return target

    async def stop(self, target_id: str) -> Target:
        self.registry.get(target_id)
        async with self._lock_for(target_id):
            self.registry.get(target_id)
            return await self._stop_locked(target_id)

    async def _stop_locked(self, target_id: str) -> Target:
        handle = self._handles.get(target_id)
        if handle is not None:
            handle.stop_event.set()
            try:
                # shield: 调用方被取消时不能打断正在进行的请求
                await asyncio.shield(handle.task)
            except asyncio.CancelledError:
                if not handle.task.cancelled():
                    raise
            except Exception as exc:
                # worker 已把异常记录为一条结果
                _LOGGER.debug("worker for %s ended with %r", target_id, exc)
            if self._handles.get(target_id) is handle:
                del self._handles[target_id]
            _LOGGER.info("stopped pinging %s", target_id)
        target = self.registry.get(target_id)
        if target.state is not TargetState.STOPPED:
            target = self.registry.set_state(target_id, TargetState.STOPPED)
        return target

    async def start_all(self) -> list[Target]:
        started: list[Target] = []
        for target in self.registry.list():
            try:
                started.append(await self.start(target.id))
            except NotFound:
                # 遍历期间已被删除
                continue
        return started

    async def stop_all(self) -> list[Target]:
        running = [target.id for target in self.registry.list() if target.id in self._handles]
        results = await asyncio.gather(
            *(self.stop(target_id) for target_id in running),
            return_exceptions=True,
        )
        stopped: list[Target] = []
        for result in results:
            if isinstance(result, Target):
                stopped.append(result)
            elif not isinstance(result, NotFound):
                raise result
        return stopped

    async def shutdown(self) -> None:
        try:
            await self.stop_all()
        finally:
            for target_id, handle in list(self._handles.items()):
                handle.stop_event.set()
                handle.task.cancel()
                self._handles.pop(target_id, None)
                if target_id in self.registry:
                    self.registry.set_state(target_id, TargetState.STOPPED)

    def is_worker_alive(self, target_id: str) -> bool:
        handle = self._handles.get(target_id)
        return handle is not None and handle.alive

    def running_count(self) -> int:
        return sum(1 for handle in self._handles.values() if handle.alive)

    # -------- queries --------

    def status(self, target_id: str) -> TargetStatus:
        target = self.registry.get(target_id)
        history = self.store.history(target_id)
        return TargetStatus(
            target=target,
            latest=history[-1] if history else None,
            history=history,
        )

    def status_all(self) -> list[TargetStatus]:
        statuses: list[TargetStatus] = []
        for target in self.registry.list():
            history = self.store.history(target.id)
            statuses.append(
                TargetStatus(
                    target=target,
                    latest=history[-1] if history else None,
                    history=history,
                )
            )
        return statuses

    def recent_outcomes(self, tail: int = 20) -> list[PingOutcome]:
        return self.store.recent(tail)

    # -------- internals --------

    def _worker_rng(self) -> random.Random:
        if self._rng is None:
            return random.Random()
        return random.Random(self._rng.getrandbits(64))

    def _on_worker_done(self, target_id: str, handle: WorkerHandle, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _LOGGER.error(
                "ping worker for %s crashed",
                target_id,
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        if self._handles.get(target_id) is not handle:
            return
        # stop() 的调用方可能已被取消，此处兜底回收
        del self._handles[target_id]
        if target_id in self.registry:
            self.registry.set_state(target_id, TargetState.STOPPED)
        if not handle.stop_event.is_set():
            _LOGGER.warning("reclaimed dead worker slot for %s", target_id)

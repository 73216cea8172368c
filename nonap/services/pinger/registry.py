from __future__ import annotations

import uuid
from dataclasses import replace
from threading import RLock

import httpx

from nonap.core.errors import InvalidConfig, NotFound
from nonap.services.pinger.models import Target, TargetState


HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_target_config(
    url: str,
    min_interval_ms: int,
    max_interval_ms: int,
    timeout_ms: int,
    method: str,
) -> None:
    if not isinstance(url, str) or not url.strip():
        raise InvalidConfig("url must be a non-empty string")
    url = url.strip()
    if not (url.startswith("http://") or url.startswith("https://")):
        raise InvalidConfig("url must start with http:// or https://")
    try:
        host = httpx.URL(url).host
    except httpx.InvalidURL as exc:
        raise InvalidConfig(f"invalid url {url!r}: {exc}") from None
    if not host:
        raise InvalidConfig(f"url has no host: {url!r}")
    if not _is_positive_int(min_interval_ms) or not _is_positive_int(max_interval_ms):
        raise InvalidConfig("min_interval_ms and max_interval_ms must be positive integers")
    if min_interval_ms > max_interval_ms:
        raise InvalidConfig(
            f"min_interval_ms ({min_interval_ms}) must be <= max_interval_ms ({max_interval_ms})"
        )
    if not _is_positive_int(timeout_ms):
        raise InvalidConfig("timeout_ms must be a positive integer")
    if not isinstance(method, str) or method.upper() not in HTTP_METHODS:
        raise InvalidConfig(f"unsupported HTTP method: {method!r}")


class TargetRegistry:
    """In-memory target table keyed by id.

    Targets are frozen dataclasses; every read hands out the stored instance,
    every state change swaps in a new one, so callers always see a consistent
    snapshot. ``set_state`` is reserved for the scheduler.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._targets: dict[str, Target] = {}

    def add(
        self,
        url: str,
        min_interval_ms: int,
        max_interval_ms: int,
        timeout_ms: int,
        method: str = "GET",
    ) -> Target:
        validate_target_config(url, min_interval_ms, max_interval_ms, timeout_ms, method)
        target = Target(
            id=uuid.uuid4().hex,
            url=url.strip(),
            min_interval_ms=min_interval_ms,
            max_interval_ms=max_interval_ms,
            timeout_ms=timeout_ms,
            method=method.upper(),
        )
        with self._lock:
            self._targets[target.id] = target
        return target

    def remove(self, target_id: str) -> Target:
        with self._lock:
            try:
                return self._targets.pop(target_id)
            except KeyError:
                raise NotFound(target_id) from None

    def get(self, target_id: str) -> Target:
        with self._lock:
            target = self._targets.get(target_id)
        if target is None:
            raise NotFound(target_id)
        return target

    def list(self) -> list[Target]:
        with self._lock:
            return list(self._targets.values())

    def set_state(self, target_id: str, state: TargetState) -> Target:
        with self._lock:
            current = self._targets.get(target_id)
            if current is None:
                raise NotFound(target_id)
            updated = replace(current, state=state)
            self._targets[target_id] = updated
            return updated

    def __contains__(self, target_id: object) -> bool:
        with self._lock:
            return target_id in self._targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)

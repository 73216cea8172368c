from __future__ import annotations

import asyncio
import logging
import socket
import time
from typing import Protocol

import httpx

from nonap.services.pinger.models import ErrorKind, ProbeResult


_LOGGER = logging.getLogger(__name__)


class Probe(Protocol):
    async def request(self, url: str, method: str, timeout_ms: int) -> ProbeResult: ...


def _is_dns_failure(exc: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def _classify(exc: httpx.HTTPError) -> ErrorKind:
    if isinstance(exc, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorKind.DNS if _is_dns_failure(exc) else ErrorKind.CONNECTION
    return ErrorKind.TRANSPORT


class HttpProbe:
    """Performs one keep-alive request per call on a shared ``httpx.AsyncClient``.

    Transport problems come back as data on the ``ProbeResult``; only
    programming errors propagate.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def request(self, url: str, method: str, timeout_ms: int) -> ProbeResult:
        timeout_s = timeout_ms / 1000.0
        started = time.perf_counter()
        try:
            # httpx 的超时按阶段计算，这里再加一个整体截止时间
            response = await asyncio.wait_for(
                self._client.request(
                    method,
                    url,
                    timeout=httpx.Timeout(timeout_s, connect=timeout_s),
                ),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError:
            latency_ms = (time.perf_counter() - started) * 1000.0
            message = f"no complete response within {timeout_ms} ms"
            _LOGGER.debug("probe %s %s failed (timeout): %s", method, url, message)
            return ProbeResult(latency_ms=latency_ms, error_kind=ErrorKind.TIMEOUT, error_message=message)
        except httpx.HTTPError as exc:
            latency_ms = (time.perf_counter() - started) * 1000.0
            kind = _classify(exc)
            message = str(exc) or exc.__class__.__name__
            _LOGGER.debug("probe %s %s failed (%s): %s", method, url, kind.value, message)
            return ProbeResult(latency_ms=latency_ms, error_kind=kind, error_message=message)

        latency_ms = (time.perf_counter() - started) * 1000.0
        return ProbeResult(latency_ms=latency_ms, status_code=response.status_code)

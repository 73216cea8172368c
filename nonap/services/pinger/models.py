from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from nonap.core.time import format_rfc3339, utc_now


class TargetState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    DNS = "dns"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    INTERNAL = "internal"


class SuccessPolicy(str, Enum):
    # 收到任何响应即成功，只有传输层失败才算失败
    KEEPALIVE = "keepalive"
    # 状态码 >= 400 的响应记为失败
    HEALTH = "health"


@dataclass(frozen=True)
class Target:
    id: str
    url: str
    min_interval_ms: int
    max_interval_ms: int
    timeout_ms: int
    method: str = "GET"
    state: TargetState = TargetState.STOPPED
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "min_interval_ms": self.min_interval_ms,
            "max_interval_ms": self.max_interval_ms,
            "timeout_ms": self.timeout_ms,
            "method": self.method,
            "state": self.state.value,
            "created_at": format_rfc3339(self.created_at),
        }


@dataclass(frozen=True)
class ProbeResult:
    """Raw result of one request attempt, before the success policy is applied."""

    latency_ms: float
    status_code: int | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def responded(self) -> bool:
        return self.status_code is not None and self.error_kind is None


@dataclass(frozen=True)
class PingOutcome:
    target_id: str
    timestamp: datetime
    success: bool
    latency_ms: float
    status_code: int | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_id": self.target_id,
            "timestamp": format_rfc3339(self.timestamp),
            "success": self.success,
            "status_code": self.status_code,
            "latency_ms": round(self.latency_ms, 3),
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_message": self.error_message,
        }


@dataclass(frozen=True)
class TargetStatus:
    target: Target
    latest: PingOutcome | None
    history: tuple[PingOutcome, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target.to_dict(),
            "latest": self.latest.to_dict() if self.latest else None,
            "history": [outcome.to_dict() for outcome in self.history],
        }

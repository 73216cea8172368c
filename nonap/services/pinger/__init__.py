from nonap.services.pinger.models import (
    ErrorKind,
    PingOutcome,
    SuccessPolicy,
    Target,
    TargetState,
    TargetStatus,
)
from nonap.services.pinger.probe import HttpProbe
from nonap.services.pinger.registry import TargetRegistry
from nonap.services.pinger.scheduler import PingScheduler
from nonap.services.pinger.status_store import StatusStore

__all__ = [
    "ErrorKind",
    "HttpProbe",
    "PingOutcome",
    "PingScheduler",
    "StatusStore",
    "SuccessPolicy",
    "Target",
    "TargetRegistry",
    "TargetState",
    "TargetStatus",
]

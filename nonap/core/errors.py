from __future__ import annotations


class NoNapError(Exception):
    """Base class for control errors returned to API callers."""

    code = "ERROR"


class InvalidConfig(NoNapError):
    code = "INVALID_CONFIG"


class NotFound(NoNapError):
    code = "NOT_FOUND"

    def __init__(self, target_id: str) -> None:
        super().__init__(f"target not found: {target_id}")
        self.target_id = target_id

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from nonap.core.errors import InvalidConfig
from nonap.dto.targets import TargetDefinition
from nonap.services.pinger.models import Target
from nonap.services.pinger.scheduler import PingScheduler


_LOGGER = logging.getLogger(__name__)


def load_target_definitions(path: str | Path) -> list[TargetDefinition]:
    target_path = Path(path)
    if not target_path.exists():
        _LOGGER.info("targets file not found: %s, starting with no targets", target_path)
        return []

    try:
        with open(target_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _LOGGER.warning("cannot read targets file %s: %s, starting with no targets", target_path, exc)
        return []
    if not isinstance(data, list):
        _LOGGER.warning(
            "targets file %s is not a JSON array of target definitions, starting with no targets",
            target_path,
        )
        return []

    definitions: list[TargetDefinition] = []
    for index, entry in enumerate(data):
        try:
            definitions.append(TargetDefinition.model_validate(entry))
        except ValidationError as exc:
            _LOGGER.warning("skipping target #%d in %s: %s", index, target_path, exc)
    return definitions


async def seed_scheduler(
    scheduler: PingScheduler,
    definitions: list[TargetDefinition],
    *,
    default_timeout_ms: int = 5000,
) -> list[Target]:
    seeded: list[Target] = []
    for definition in definitions:
        try:
            target = scheduler.add_target(
                definition.url,
                definition.min_interval_ms,
                definition.max_interval_ms,
                definition.timeout_ms or default_timeout_ms,
                definition.method,
            )
        except InvalidConfig as exc:
            _LOGGER.warning("skipping target %s: %s", definition.url, exc)
            continue
        if definition.auto_start:
            target = await scheduler.start(target.id)
        seeded.append(target)
    _LOGGER.info("seeded %d target(s)", len(seeded))
    return seeded

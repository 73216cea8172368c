from __future__ import annotations

import pytest

from nonap.core.errors import InvalidConfig, NotFound
from nonap.services.pinger.models import TargetState
from nonap.services.pinger.registry import TargetRegistry


pytestmark = [pytest.mark.unit]


def test_add_then_get_returns_stopped_target_with_given_parameters(registry: TargetRegistry) -> None:
    target = registry.add("http://example.test/keepalive", 1000, 2000, 500)

    fetched = registry.get(target.id)
    assert fetched.state is TargetState.STOPPED
    assert fetched.url == "http://example.test/keepalive"
    assert fetched.min_interval_ms == 1000
    assert fetched.max_interval_ms == 2000
    assert fetched.timeout_ms == 500
    assert fetched.method == "GET"


def test_add_accepts_equal_bounds_and_normalizes_method(registry: TargetRegistry) -> None:
    target = registry.add("https://example.test/", 750, 750, 100, method="head")
    assert target.min_interval_ms == target.max_interval_ms == 750
    assert target.method == "HEAD"


def test_ids_are_unique(registry: TargetRegistry) -> None:
    ids = {registry.add("http://example.test/a", 10, 20, 5).id for _ in range(50)}
    assert len(ids) == 50
    assert len(registry) == 50


@pytest.mark.parametrize(
    ("url", "min_ms", "max_ms", "timeout_ms", "method"),
    [
        ("http://example.test/", 2000, 1000, 500, "GET"),
        ("http://example.test/", 0, 1000, 500, "GET"),
        ("http://example.test/", -5, 1000, 500, "GET"),
        ("http://example.test/", 100, 0, 500, "GET"),
        ("http://example.test/", 100, 200, 0, "GET"),
        ("http://example.test/", True, 200, 500, "GET"),
        ("http://example.test/", 1.5, 200, 500, "GET"),
        ("", 100, 200, 500, "GET"),
        ("   ", 100, 200, 500, "GET"),
        ("example.test/keepalive", 100, 200, 500, "GET"),
        ("http://", 100, 200, 500, "GET"),
        ("https:///keepalive", 100, 200, 500, "GET"),
        ("http://example.test/", 100, 200, 500, "FETCH"),
    ],
)
def test_add_rejects_invalid_config_and_stores_nothing(
    registry: TargetRegistry, url, min_ms, max_ms, timeout_ms, method
) -> None:
    registry.add("http://example.test/existing", 10, 20, 5)

    with pytest.raises(InvalidConfig):
        registry.add(url, min_ms, max_ms, timeout_ms, method)

    assert len(registry) == 1


def test_get_unknown_raises_not_found(registry: TargetRegistry) -> None:
    with pytest.raises(NotFound) as exc_info:
        registry.get("xyz")
    assert exc_info.value.target_id == "xyz"


def test_remove_deletes_target(registry: TargetRegistry) -> None:
    target = registry.add("http://example.test/", 10, 20, 5)

    removed = registry.remove(target.id)

    assert removed.id == target.id
    assert target.id not in registry
    with pytest.raises(NotFound):
        registry.get(target.id)
    with pytest.raises(NotFound):
        registry.remove(target.id)


def test_set_state_swaps_snapshot_without_touching_old_reads(registry: TargetRegistry) -> None:
    target = registry.add("http://example.test/", 10, 20, 5)
    listed = registry.list()

    updated = registry.set_state(target.id, TargetState.RUNNING)

    assert updated.state is TargetState.RUNNING
    assert registry.get(target.id).state is TargetState.RUNNING
    # earlier snapshots are immutable copies
    assert listed[0].state is TargetState.STOPPED
    assert updated.id == target.id
    assert updated.created_at == target.created_at


def test_set_state_unknown_raises_not_found(registry: TargetRegistry) -> None:
    with pytest.raises(NotFound):
        registry.set_state("missing", TargetState.RUNNING)


def test_to_dict_serializes_state_and_timestamp(registry: TargetRegistry) -> None:
    target = registry.add("http://example.test/", 10, 20, 5)
    doc = target.to_dict()
    assert doc["state"] == "stopped"
    assert doc["created_at"].endswith("Z")
    assert doc["id"] == target.id

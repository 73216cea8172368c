# -*- coding: utf-8 -*-
"""
全局控制 API 测试：全部启动/停止、总体状态、日志
"""
import pytest

pytestmark = pytest.mark.integration


async def _add(client, url):
    response = await client.post(
        "/api/v1/targets",
        json={"url": url, "min_interval_ms": 5, "max_interval_ms": 10, "timeout_ms": 200},
    )
    return response.json()["id"]


class TestControlAPI:
    @pytest.mark.asyncio
    async def test_start_all_then_stop_all(self, async_client, api_scheduler):
        ids = [await _add(async_client, f"http://host{i}.example.test/") for i in range(3)]

        response = await async_client.post("/api/v1/start")
        assert response.status_code == 200
        assert sorted(response.json()["started"]) == sorted(ids)

        status = (await async_client.get("/api/v1/status")).json()
        assert status["running"] == 3
        assert status["total"] == 3
        assert {t["target"]["state"] for t in status["targets"]} == {"running"}

        response = await async_client.post("/api/v1/stop")
        assert sorted(response.json()["stopped"]) == sorted(ids)
        status = (await async_client.get("/api/v1/status")).json()
        assert status["running"] == 0
        assert api_scheduler.running_count() == 0

    @pytest.mark.asyncio
    async def test_status_on_empty_service(self, async_client):
        status = (await async_client.get("/api/v1/status")).json()
        assert status["status"] == "ok"
        assert status["targets"] == []
        assert status["running"] == 0


class TestLogsAPI:
    @pytest.mark.asyncio
    async def test_logs_tail(self, async_client, api_scheduler, wait_until):
        target_id = await _add(async_client, "http://example.test/keepalive")
        await async_client.post(f"/api/v1/targets/{target_id}/start")
        assert await wait_until(lambda: api_scheduler.store.count(target_id) >= 4)
        await async_client.post(f"/api/v1/targets/{target_id}/stop")

        response = await async_client.get("/api/v1/logs", params={"tail": 3})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        timestamps = [entry["timestamp"] for entry in body["logs"]]
        assert timestamps == sorted(timestamps)
        assert all(entry["target_id"] == target_id for entry in body["logs"])

    @pytest.mark.asyncio
    async def test_logs_default_and_validation(self, async_client):
        response = await async_client.get("/api/v1/logs")
        assert response.status_code == 200
        assert response.json()["logs"] == []

        response = await async_client.get("/api/v1/logs", params={"tail": 0})
        assert response.status_code == 422

"""Health Probe — verifies the liveness endpoint."""


async def test_health_returns_200(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"

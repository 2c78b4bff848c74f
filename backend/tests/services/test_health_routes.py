"""Health & Routing — probes and envelope for unknown routes.

Tests cover:
    - liveness always 200
    - readiness 200 with a reachable database
    - unknown route -> 404 envelope
"""


async def test_liveness(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == 200


async def test_readiness_with_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["data"]["checks"]["database"] == "healthy"


async def test_unknown_route_is_404_envelope(client):
    res = await client.get("/api/nowhere")
    assert res.status_code == 404
    body = res.json()
    assert body["status"] == 404
    assert body["error"]["message"] == "Route doesn't exist"

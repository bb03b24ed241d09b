"""Health checks, service info and cross-cutting HTTP behavior."""

from conftest import FakeClassifier, make_registry
from plantid.modules.plant_identification.presentation.dependencies import get_classifier_registry
from plantid.shared.core.exceptions import ExternalAPIError


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "plant-identification-api"


async def test_detailed_health_reports_components(client):
    response = await client.get("/api/health/detailed")

    assert response.status_code == 200
    components = response.json()["components"]
    assert components["database"]["status"] == "healthy"
    assert components["providers"]["status"] == "healthy"
    assert components["providers"]["providers"] == ["plant_id"]
    assert components["providers"]["recent_errors"] == {"plant_id": []}
    assert "system" in components


async def test_detailed_health_without_providers(app, client):
    app.state.classifier_registry = make_registry()

    response = await client.get("/api/health/detailed")

    body = response.json()
    assert body["components"]["providers"]["status"] == "no_providers"
    assert body["status"] != "healthy"


async def test_detailed_health_reports_open_circuits(app, client, image_base64):
    registry = make_registry(FakeClassifier("plant_id", error=ExternalAPIError("down", api_name="plant_id")))
    app.dependency_overrides[get_classifier_registry] = lambda: registry
    app.state.classifier_registry = registry
    for _ in range(5):
        response = await client.post("/api/identify-plant", json={"imageBase64": image_base64, "userId": "user-1"})
        assert response.status_code == 502

    providers = (await client.get("/api/health/detailed")).json()["components"]["providers"]

    assert providers["status"] == "unhealthy"
    assert providers["open_circuits"] == ["plant_id"]


async def test_root_lists_endpoints(client):
    response = await client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["api_base"] == "/api"
    assert body["endpoints"]["identify_plant"] == "POST /identify-plant"
    assert body["quotas"]["free_daily_limit"] == 3


async def test_request_id_is_generated(client):
    response = await client.get("/api/health")

    assert response.headers["X-Request-ID"]
    assert response.headers["X-API-Version"] == "v1"


async def test_request_id_is_echoed(client):
    response = await client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "HTTP_404"
    assert error["request_id"]

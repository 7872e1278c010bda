"""Tests for the proxy relay server"""

from typing import Any, Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from masjid_finder.features.proxy.services.relay import MasjidiRelay
from masjid_finder.server import app, get_relay
from masjid_finder.shared.exceptions.errors import HTTPError


def upstream_response(status_code: int, body: Any = None, invalid_json: bool = False) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def http_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(http_client: MagicMock) -> Iterator[TestClient]:
    relay = MasjidiRelay("http://api.masjidi.test", "secret-key", http_client=http_client)
    app.dependency_overrides[get_relay] = lambda: relay
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    """Health check reports the proxy as running"""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Proxy server is running"}


@pytest.mark.parametrize("query", ["", "?lat=40.7", "?long=-74.0", "?lat=&long=-74.0"])
def test_missing_coordinates(client: TestClient, http_client: MagicMock, query: str) -> None:
    """lat and long are both required; upstream is not called"""
    response = client.get(f"/api/masjids{query}")

    assert response.status_code == 400
    assert response.json() == {"error": "lat and long parameters are required"}
    http_client.get.assert_not_called()


def test_forwards_with_defaults_and_key(client: TestClient, http_client: MagicMock) -> None:
    """Upstream gets the coordinates, default dist/limit and the API key"""
    http_client.get.return_value = upstream_response(200, [{"name": "Masjid"}])

    response = client.get("/api/masjids?lat=40.7&long=-74.0")

    assert response.status_code == 200
    assert response.json() == [{"name": "Masjid"}]

    args, kwargs = http_client.get.call_args
    assert args[0] == "http://api.masjidi.test/v2/masjids"
    assert kwargs["params"] == {"lat": "40.7", "long": "-74.0", "dist": "50", "limit": "100"}
    assert kwargs["headers"] == {"x-api-key": "secret-key"}
    assert kwargs["raise_for_status"] is False


def test_forwards_explicit_dist_and_limit(client: TestClient, http_client: MagicMock) -> None:
    """Caller-supplied dist and limit are passed through"""
    http_client.get.return_value = upstream_response(200, {"masjids": []})

    response = client.get("/api/masjids?lat=1&long=2&dist=10&limit=5")

    assert response.json() == {"masjids": []}
    params = http_client.get.call_args.kwargs["params"]
    assert params["dist"] == "10"
    assert params["limit"] == "5"


@pytest.mark.parametrize("status_code", [401, 404, 503])
def test_upstream_error_status_is_relayed(
    client: TestClient, http_client: MagicMock, status_code: int
) -> None:
    """A non-2xx upstream status comes back with an error envelope"""
    http_client.get.return_value = upstream_response(status_code, {"detail": "nope"})

    response = client.get("/api/masjids?lat=1&long=2")

    assert response.status_code == status_code
    assert response.json() == {"error": "MasjidiAPI request failed", "status": status_code}


def test_transport_failure(client: TestClient, http_client: MagicMock) -> None:
    """An unreachable upstream is a 500 with the error message"""
    http_client.get.side_effect = HTTPError("Connection refused")

    response = client.get("/api/masjids?lat=1&long=2")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "message": "Connection refused"}


def test_undecodable_upstream_body(client: TestClient, http_client: MagicMock) -> None:
    """A 2xx body that is not JSON is a 500"""
    http_client.get.return_value = upstream_response(200, invalid_json=True)

    response = client.get("/api/masjids?lat=1&long=2")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal server error"


def test_cors_allows_any_origin(client: TestClient) -> None:
    """Browsers on any origin may call the proxy"""
    response = client.get("/health", headers={"Origin": "http://localhost:5173"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_unhandled_error_uses_envelope() -> None:
    """Unexpected exceptions still answer with the error envelope"""
    relay = MagicMock(spec=MasjidiRelay)
    relay.search.side_effect = RuntimeError("boom")
    app.dependency_overrides[get_relay] = lambda: relay
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/masjids?lat=1&long=2")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "message": "boom"}

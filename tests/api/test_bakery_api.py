"""Endpoint tests for the dashboard routes, backed by a mocked baker API."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import BASE_URL
from core.middleware import CORRELATION_HEADER
from dependencies.bakery import get_bakery_service
from main import app
from services.bakery import BakeryService


BackendHandler = Callable[[httpx.Request], httpx.Response]
ClientFactory = Callable[..., TestClient]


@pytest.fixture
def api_client() -> Iterator[ClientFactory]:
    """TestClient whose BakeryService talks to the given backend handler."""

    def _make(handler: BackendHandler, **kwargs: Any) -> TestClient:
        backend = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        service = BakeryService(backend, BASE_URL, **kwargs)
        app.dependency_overrides[get_bakery_service] = lambda: service
        return TestClient(app)

    yield _make

    app.dependency_overrides.clear()


def _success(body: Any) -> httpx.Response:
    return httpx.Response(200, json={"result": "success", "body": body})


class TestInteractionsApi:
    def test_execute_returns_information_envelope(
        self, api_client: ClientFactory
    ) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return _success(
                {
                    "outcome": {
                        "Right": {
                            "value": {
                                "result": {
                                    "name": "OrderShipped",
                                    "providedIngredients": {
                                        "trackingId": {
                                            "typ": 3,
                                            "styp": "String",
                                            "val": "T1",
                                        }
                                    },
                                }
                            }
                        }
                    }
                }
            )

        client = api_client(handler)
        response = client.post(
            "/api/v1/interactions/execute",
            json={"id": "ShipOrder", "ingredients": [{"name": "orderId", "value": "o-1"}]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Interaction executed"
        data = body["data"]
        assert data["kind"] == "information"
        assert data["durationInMilliseconds"] >= 0
        assert "requestSentAt" in data
        assert data["failureReason"] is None
        assert data["successEvent"] == {
            "name": "OrderShipped",
            "providedIngredients": {"trackingId": "T1"},
        }
        assert data["outcome"]["kind"] == "success"
        assert captured[0].url.path == "/api/bakery/app/interactions/execute"

    def test_execute_transport_failure_is_error_envelope(
        self, api_client: ClientFactory
    ) -> None:
        client = api_client(lambda request: httpx.Response(500, json={}))

        response = client.post(
            "/api/v1/interactions/execute", json={"id": "ShipOrder"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Interaction request failed"
        assert body["data"]["kind"] == "error"
        assert body["data"]["errorKind"] == "transport_error"
        assert body["data"]["statusCode"] == 500
        assert "error" not in body["data"]

    def test_execute_requires_interaction_id(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: _success({}))

        response = client.post("/api/v1/interactions/execute", json={})

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"

    def test_list_interactions(self, api_client: ClientFactory) -> None:
        client = api_client(
            lambda request: _success({"i1": {"id": "i1", "name": "ShipOrder"}})
        )

        response = client.get("/api/v1/interactions")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "1 interactions"
        assert body["data"] == [{"id": "i1", "name": "ShipOrder"}]


class TestRecipesApi:
    def test_list_recipes(self, api_client: ClientFactory) -> None:
        record = {
            "compiledRecipe": {"name": "Webshop", "recipeId": "r1", "errors": []},
            "recipeCreatedTime": 1_700_000_000_000,
            "validate": False,
        }
        client = api_client(lambda request: _success({"r1": record}))

        response = client.get("/api/v1/recipes")

        assert response.status_code == 200
        assert response.json()["data"] == [
            {
                "errors": [],
                "name": "Webshop",
                "recipeCreatedTime": "2023-11-14T22:13:20.000Z",
                "recipeId": "r1",
                "validate": False,
            }
        ]

    def test_list_recipes_degrades_when_backend_is_down(
        self, api_client: ClientFactory
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        client = api_client(handler)

        response = client.get("/api/v1/recipes")

        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_missing_recipe_is_404(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: httpx.Response(404, json={}))

        response = client.get("/api/v1/recipes/unknown")

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "not_found"

    def test_recipe_visual(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: _success("digraph {}"))

        response = client.get("/api/v1/recipes/r1/visual")

        assert response.status_code == 200
        assert response.json()["data"] == "digraph {}"

    def test_unconfirmed_deactivation_is_502(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: httpx.Response(503, text="unavailable"))

        response = client.delete("/api/v1/recipes/r1")

        assert response.status_code == 502

    def test_raise_policy_maps_to_upstream_error(
        self, api_client: ClientFactory
    ) -> None:
        client = api_client(
            lambda request: httpx.Response(503, json={}), retrieval_policy="raise"
        )

        response = client.get("/api/v1/recipes")

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "upstream_error"


class TestInstancesApi:
    def test_bake(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: _success("digraph { a }"))

        response = client.post("/api/v1/instances/inst-1/bake/r1")

        assert response.status_code == 201
        assert response.json()["data"] == "digraph { a }"

    def test_get_instance(self, api_client: ClientFactory) -> None:
        client = api_client(
            lambda request: _success({"ingredients": {}, "events": []})
        )

        response = client.get("/api/v1/instances/inst-1")

        assert response.status_code == 200
        assert response.json()["data"] == {"ingredients": {}, "events": []}

    def test_unknown_instance_is_404(self, api_client: ClientFactory) -> None:
        client = api_client(
            lambda request: httpx.Response(
                200, json={"result": "error", "body": {"message": "not found"}}
            )
        )

        response = client.get("/api/v1/instances/nope")

        assert response.status_code == 404

    def test_delete_instance(self, api_client: ClientFactory) -> None:
        client = api_client(lambda request: httpx.Response(200, text="Deleted"))

        response = client.delete("/api/v1/instances/inst-1")

        assert response.status_code == 200
        assert response.json()["data"] == "Deleted"

    def test_fire_event_received_is_failure_information(
        self, api_client: ClientFactory
    ) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return _success(
                {"sensoryEventStatus": "Received", "eventNames": [], "ingredients": {}}
            )

        client = api_client(handler)
        response = client.post(
            "/api/v1/instances/inst-1/fire-event",
            json={"name": "OrderPlaced", "providedIngredients": {"orderId": "o-1"}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Event fired"
        assert body["data"]["failureReason"] == {
            "reason": "Status: Received ",
            "interactionErrorMessage": "Received",
        }
        assert body["data"]["successEvent"] is None
        assert captured[0].url.path == (
            "/api/bakery/instances/inst-1/fire-and-resolve-when-completed"
        )


def test_correlation_id_is_echoed(api_client: ClientFactory) -> None:
    client = api_client(lambda request: _success({}))

    response = client.get(
        "/api/v1/interactions", headers={CORRELATION_HEADER: "dashboard-7"}
    )

    assert response.headers[CORRELATION_HEADER] == "dashboard-7"

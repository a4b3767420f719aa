import json

import httpx
import pytest
from fastapi.testclient import TestClient

from cafe.core.config import Settings
from cafe.main import app
from cafe.services.sheets import AppsScriptGateway, get_sheets_gateway

SCRIPT_URL = "https://script.example.com/macros/s/abc/exec"

ORDER_BODY = {
    "orderId": "order_1718000000000_k3j9x0a",
    "timestamp": "2024-06-10T09:30:00.000Z",
    "userId": "Mika_Cat",
    "nickname": "Mika",
    "animal": "🐱 Cat",
    "item": "Cafe Latte",
    "price": 450,
}


@pytest.fixture()
def client(fake_gateway):
    app.dependency_overrides[get_sheets_gateway] = lambda: fake_gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def script_gateway(handler, **overrides):
    values = {
        "env_mode": "production",
        "google_script_url": SCRIPT_URL,
        "menu_sheet_id": "menu-sheet",
        "order_sheet_id": "order-sheet",
    }
    values.update(overrides)
    settings = Settings(_env_file=None, **values)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
    return AppsScriptGateway(settings=settings, client=http)


@pytest.fixture()
def use_gateway():
    def _use(gateway):
        app.dependency_overrides[get_sheets_gateway] = lambda: gateway
        return TestClient(app)

    yield _use
    app.dependency_overrides.clear()


def test_root_and_health(client):
    assert client.get("/").json()["health"] == "/health"

    health = client.get("/health").json()
    assert health["sheets_gateway"] == "fake"
    assert health["upstream"] == "healthy"


def test_menu_rows_are_forwarded(client, fake_gateway):
    fake_gateway.menu_envelope = {
        "success": True,
        "data": [["Cafe Latte", 450, True, "Soft Drinks", "Mika"], "junk"],
    }

    response = client.get("/api/menu")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": [["Cafe Latte", 450, True, "Soft Drinks", "Mika"]],
    }


def test_upstream_failure_is_passed_through(client, fake_gateway):
    fake_gateway.menu_envelope = {"success": False, "error": "X"}

    body = client.get("/api/menu").json()

    assert body == {"success": False, "error": "X"}


def test_empty_orders_sheet(client):
    assert client.get("/api/orders").json() == {"success": True, "data": []}


def test_create_order_forwards_wire_payload(client, fake_gateway):
    response = client.post("/api/orders", json=ORDER_BODY)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert fake_gateway.added == [{**ORDER_BODY, "completed": False}]


def test_create_order_rejects_incomplete_body(client, fake_gateway):
    body = {key: value for key, value in ORDER_BODY.items() if key != "item"}

    response = client.post("/api/orders", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "item" in response.json()["error"]
    assert fake_gateway.added == []


def test_update_requires_order_id(client, fake_gateway):
    response = client.post("/api/orders/update", json={"completed": True})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "orderId is required"}
    assert fake_gateway.updates == []


def test_update_forwards_completion(client, fake_gateway):
    response = client.post("/api/orders/update", json={"orderId": "order_1", "completed": True})

    assert response.json()["success"] is True
    assert fake_gateway.updates == [("order_1", True)]


def test_missing_configuration_fails_closed(use_gateway):
    def handler(request):
        raise AssertionError("upstream must not be called")

    gateway = script_gateway(handler, google_script_url=None, menu_sheet_id=None)

    with use_gateway(gateway) as client:
        response = client.get("/api/menu")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "GOOGLE_SCRIPT_URL" in body["error"]
    assert "MENU_SHEET_ID" in body["error"]


def test_script_receives_read_and_write_actions(use_gateway):
    seen = []

    def handler(request):
        if request.method == "GET":
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={"success": True, "data": []})
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "message": "ok"})

    with use_gateway(script_gateway(handler)) as client:
        client.get("/api/orders")
        client.post("/api/orders", json=ORDER_BODY)
        client.post("/api/orders/update", json={"orderId": "order_1", "completed": True})

    assert seen[0] == {"action": "getOrders", "sheetId": "order-sheet"}
    assert seen[1]["action"] == "addOrder"
    assert seen[1]["sheetId"] == "order-sheet"
    assert seen[1]["data"]["orderId"] == ORDER_BODY["orderId"]
    assert seen[2] == {
        "action": "updateOrderStatus",
        "sheetId": "order-sheet",
        "orderId": "order_1",
        "completed": True,
    }


def test_html_success_page_on_update_is_success(use_gateway):
    def handler(request):
        return httpx.Response(200, text="<html><body>The script completed</body></html>")

    with use_gateway(script_gateway(handler)) as client:
        response = client.post("/api/orders/update", json={"orderId": "order_1", "completed": True})

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_html_page_on_read_is_an_error(use_gateway):
    def handler(request):
        return httpx.Response(200, text="<html>login</html>")

    with use_gateway(script_gateway(handler)) as client:
        response = client.get("/api/orders")

    assert response.status_code == 502
    assert response.json()["success"] is False


def test_upstream_http_error_is_reported(use_gateway):
    def handler(request):
        return httpx.Response(500, text="boom")

    with use_gateway(script_gateway(handler)) as client:
        response = client.post("/api/orders", json=ORDER_BODY)

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "HTTP error! status: 500"}

"""Unit tests for FastAPI front-of-house endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from restaurant_order_service.adapters.receipt_sink import ReceiptSink
from restaurant_order_service.handlers.api_handler import create_app
from restaurant_order_service.services.order_workflow import OrderWorkflow

API_KEY = "test-api-key"
HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture
def client(workflow: OrderWorkflow) -> TestClient:
    """Create a test client around an in-memory workflow."""
    return TestClient(create_app(workflow=workflow, api_keys=[API_KEY]))


def place(client: TestClient, table_id: int, selections: list[int]) -> None:
    response = client.post(
        f"/tables/{table_id}/orders",
        json={"guest_count": len(selections), "selections": selections},
        headers=HEADERS,
    )
    assert response.status_code == 201


@pytest.mark.unit
class TestOpenEndpoints:
    """Test suite for endpoints that need no API key."""

    def test_health_check(self, client: TestClient) -> None:
        """Test health check endpoint returns 200."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_menu(self, client: TestClient) -> None:
        """Test that the menu lists items with their selection numbers."""
        response = client.get("/menu")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 5
        assert data[0] == {"selection": 1, "name": "Raw Fish", "price": 35}
        assert data[1] == {"selection": 2, "name": "Eggs", "price": 45}


@pytest.mark.unit
class TestAuthentication:
    """Test suite for staff API key enforcement."""

    def test_missing_api_key(self, client: TestClient) -> None:
        """Test that staff endpoints require an API key."""
        response = client.get("/tables")

        assert response.status_code == 401
        assert response.json()["detail"] == "Missing API key"

    def test_invalid_api_key(self, client: TestClient) -> None:
        """Test that an unknown API key is rejected."""
        response = client.get("/tables", headers={"X-API-Key": "invalid-key"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_rejected_request_changes_nothing(
        self, client: TestClient, workflow: OrderWorkflow
    ) -> None:
        """Test that an unauthenticated order does not seat anyone."""
        response = client.post("/tables/1/orders", json={"guest_count": 1, "selections": [1]})

        assert response.status_code == 401
        assert workflow.available_seats(1) == 4


@pytest.mark.unit
class TestTableEndpoints:
    """Test suite for table endpoints."""

    def test_list_tables(self, client: TestClient) -> None:
        """Test listing tables with occupancy and order status."""
        place(client, 2, [1, 2, 3])

        response = client.get("/tables", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert [table["id"] for table in data] == [1, 2, 3, 4]
        assert data[0]["order_status"] is None
        assert data[1] == {
            "id": 2,
            "capacity": 4,
            "seated_guests": 3,
            "available_seats": 1,
            "order_status": "awaiting_completion",
        }

    def test_available_seats(self, client: TestClient) -> None:
        """Test reading the free seats of a table."""
        place(client, 1, [1])

        response = client.get("/tables/1/seats", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"table_id": 1, "available_seats": 3}

    def test_available_seats_unknown_table(self, client: TestClient) -> None:
        """Test that an unknown table returns 404."""
        response = client.get("/tables/9/seats", headers=HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "unknown_table"


@pytest.mark.unit
class TestOrderEndpoints:
    """Test suite for order endpoints."""

    def test_place_order(self, client: TestClient) -> None:
        """Test placing an order returns the table's order."""
        response = client.post(
            "/tables/1/orders",
            json={"guest_count": 2, "selections": [1, 2]},
            headers=HEADERS,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["table_id"] == 1
        assert data["status"] == "awaiting_completion"
        assert data["items"] == [
            {"name": "Raw Fish", "price": 35},
            {"name": "Eggs", "price": 45},
        ]
        assert data["completed"] is False
        assert data["paid"] is False

    def test_place_order_capacity_exceeded(
        self, client: TestClient, workflow: OrderWorkflow
    ) -> None:
        """Test that too many guests returns 409 and seats nobody."""
        response = client.post(
            "/tables/1/orders",
            json={"guest_count": 5, "selections": [1, 1, 1, 1, 1]},
            headers=HEADERS,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "capacity_exceeded"
        assert workflow.available_seats(1) == 4

    def test_place_order_without_guests(self, client: TestClient) -> None:
        """Test that an order seating nobody is refused as exceeding capacity."""
        response = client.post(
            "/tables/1/orders",
            json={"guest_count": 0, "selections": []},
            headers=HEADERS,
        )

        assert response.status_code == 409
        assert response.json()["error"] == "capacity_exceeded"

    def test_place_order_invalid_selection(self, client: TestClient) -> None:
        """Test that a selection outside the menu returns 422."""
        response = client.post(
            "/tables/1/orders",
            json={"guest_count": 1, "selections": [9]},
            headers=HEADERS,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_selection"

    def test_place_order_malformed_body(self, client: TestClient) -> None:
        """Test that a body without selections fails request validation."""
        response = client.post("/tables/1/orders", json={"guest_count": 1}, headers=HEADERS)

        assert response.status_code == 422

    def test_get_order_without_order(self, client: TestClient) -> None:
        """Test that reading a missing order returns 404."""
        response = client.get("/tables/1/order", headers=HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "no_such_order"

    def test_get_order_unknown_table(self, client: TestClient) -> None:
        """Test that reading the order of an unknown table returns 404."""
        response = client.get("/tables/12/order", headers=HEADERS)

        assert response.status_code == 404
        assert response.json()["error"] == "unknown_table"

    def test_complete_order(self, client: TestClient) -> None:
        """Test completing an order."""
        place(client, 1, [3])

        response = client.post("/tables/1/order/complete", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["status"] == "awaiting_payment"
        assert response.json()["completed"] is True

    def test_complete_order_twice(self, client: TestClient) -> None:
        """Test that completing twice returns 409."""
        place(client, 1, [3])
        client.post("/tables/1/order/complete", headers=HEADERS)

        response = client.post("/tables/1/order/complete", headers=HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "already_completed"

    def test_status_report(self, client: TestClient) -> None:
        """Test the order status report lists tables holding orders."""
        place(client, 3, [1])
        place(client, 1, [2])
        client.post("/tables/1/order/complete", headers=HEADERS)

        response = client.get("/orders/status", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == [
            {"table_id": 1, "status": "awaiting_payment"},
            {"table_id": 3, "status": "awaiting_completion"},
        ]


@pytest.mark.unit
class TestBillingEndpoints:
    """Test suite for bill and payment endpoints."""

    def test_bill(self, client: TestClient) -> None:
        """Test computing the bill of a completed order."""
        place(client, 1, [1, 2])
        client.post("/tables/1/order/complete", headers=HEADERS)

        response = client.get("/tables/1/order/bill", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["subtotal"] == 80
        assert data["tax"] == pytest.approx(8.0)
        assert data["tip"] == pytest.approx(16.0)
        assert data["total"] == pytest.approx(104.0)

    def test_bill_not_completed(self, client: TestClient) -> None:
        """Test that billing an incomplete order returns 409."""
        place(client, 1, [1])

        response = client.get("/tables/1/order/bill", headers=HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "not_completed"

    def test_payment(self, client: TestClient, workflow: OrderWorkflow) -> None:
        """Test confirming payment returns the payment record and frees the table."""
        place(client, 1, [1, 2])
        client.post("/tables/1/order/complete", headers=HEADERS)
        client.get("/tables/1/order/bill", headers=HEADERS)

        response = client.post("/tables/1/order/payment", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["table_id"] == 1
        assert data["transaction_id"] == "1000"
        assert data["total"] == pytest.approx(104.0)
        assert data["receipt_path"] is None
        assert workflow.available_seats(1) == 4

    def test_payment_before_completion(self, client: TestClient) -> None:
        """Test that paying an incomplete order returns 409."""
        place(client, 1, [1])

        response = client.post("/tables/1/order/payment", headers=HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "not_completed"

    def test_payment_without_bill(self, client: TestClient) -> None:
        """Test that paying before the bill was computed returns 409."""
        place(client, 1, [1])
        client.post("/tables/1/order/complete", headers=HEADERS)

        response = client.post("/tables/1/order/payment", headers=HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "bill_not_computed"

    def test_payment_reports_receipt_path(self, workflow: OrderWorkflow) -> None:
        """Test that the receipt location from the sink is returned."""
        sink = MagicMock(spec=ReceiptSink)
        sink.write_receipt.return_value = "receipts/Transaction#1000.txt"
        workflow.receipt_sink = sink
        client = TestClient(create_app(workflow=workflow, api_keys=[API_KEY]))
        place(client, 1, [1])
        client.post("/tables/1/order/complete", headers=HEADERS)
        client.get("/tables/1/order/bill", headers=HEADERS)

        response = client.post("/tables/1/order/payment", headers=HEADERS)

        assert response.json()["receipt_path"] == "receipts/Transaction#1000.txt"


@pytest.mark.unit
class TestRestaurantEndpoints:
    """Test suite for restaurant status and closing."""

    def test_status_without_orders(self, client: TestClient) -> None:
        """Test that a fresh restaurant has no open orders and cannot close."""
        response = client.get("/restaurant", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"open_orders": False, "can_close": False, "closed": False}

    def test_close_without_orders(self, client: TestClient) -> None:
        """Test that closing before any order returns 409."""
        response = client.post("/restaurant/close", headers=HEADERS)

        assert response.status_code == 409
        assert response.json()["error"] == "not_closable"

    def test_close_after_settling(self, client: TestClient) -> None:
        """Test closing once every order is settled, after which orders are refused."""
        place(client, 1, [1])
        client.post("/tables/1/order/complete", headers=HEADERS)
        client.get("/tables/1/order/bill", headers=HEADERS)
        client.post("/tables/1/order/payment", headers=HEADERS)

        response = client.post("/restaurant/close", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {"open_orders": False, "can_close": True, "closed": True}

        refused = client.post(
            "/tables/2/orders", json={"guest_count": 1, "selections": [1]}, headers=HEADERS
        )
        assert refused.status_code == 409
        assert refused.json()["error"] == "restaurant_closed"

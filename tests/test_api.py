"""
API tests through the FastAPI test client
"""

import pytest
import uuid
from fastapi import status
from structlog.testing import capture_logs

from tableside.core.exceptions import (
    ConflictError, InvalidTransitionError, InvariantViolationError, NotFoundError,
    PositionError, ValidationError
)
import tableside.core.database
import tableside.main
from tableside.main import status_code_for
from tableside.services.order_lifecycle import OccupancyLabel
from tableside.services.table_views import occupancy_board

ADMIN = {"X-User-Role": "admin"}
STAFF = {"X-User-Role": "staff"}
CUSTOMER = {"X-User-Role": "customer"}


@pytest.fixture
def seeded(client):
    """A table on a 20x20 floor plan and two menu items"""
    table = client.post(
        "/api/v1/tables/",
        json={"restaurant_id": 1, "table_number": 1, "floor_number": 1},
        headers=ADMIN,
    ).json()
    floor_plan = client.post(
        "/api/v1/floor-plans/",
        json={"restaurant_id": 1, "floor_number": 1, "name": "Main Floor", "width": 20, "height": 20},
        headers=ADMIN,
    ).json()
    burger = client.post(
        "/api/v1/menu-items/",
        json={"restaurant_id": 1, "name": "Burger", "price": 1250},
        headers=ADMIN,
    ).json()
    cola = client.post(
        "/api/v1/menu-items/",
        json={"restaurant_id": 1, "name": "Cola", "price": 300, "category": "beverages"},
        headers=ADMIN,
    ).json()
    return {"table": table, "floor_plan": floor_plan, "burger": burger, "cola": cola}


def place_order(client, seeded, headers=CUSTOMER):
    return client.post(
        "/api/v1/orders/",
        json={
            "restaurant_id": 1,
            "table_id": seeded["table"]["id"],
            "lines": [
                {"menu_item_id": seeded["burger"]["id"], "quantity": 2},
                {"menu_item_id": seeded["cola"]["id"], "quantity": 1},
            ],
        },
        headers=headers,
    )


@pytest.mark.parametrize("error,status_code", [
    (ValidationError("bad"), status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PositionError(["too_close_to_edge"]), status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError("missing"), status.HTTP_404_NOT_FOUND),
    (ConflictError("busy"), status.HTTP_409_CONFLICT),
    (InvalidTransitionError("placed", "paid"), status.HTTP_409_CONFLICT),
    (InvariantViolationError("broken"), status.HTTP_500_INTERNAL_SERVER_ERROR),
])
def test_error_status_table(error, status_code):
    """Test every core error type maps to its HTTP status"""
    assert status_code_for(error) == status_code


def test_health(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestOrdersApi:
    """Test order endpoints"""

    def test_create_order(self, client, seeded):
        """Test a customer can order and gets the bill breakdown"""
        response = place_order(client, seeded)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "placed"
        assert data["total_amount"] == 2800
        assert len(data["items"]) == 2
        assert data["bill"] == {"subtotal": 2800, "tax": 280, "service_charge": 140, "total": 3220}

    def test_second_order_is_conflict(self, client, seeded):
        """Test an occupied table rejects another order with 409"""
        first = place_order(client, seeded).json()

        response = place_order(client, seeded)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"
        assert response.json()["order_id"] == first["id"]

    def test_empty_order_is_validation_error(self, client, seeded):
        """Test an order without lines is rejected with 422"""
        response = client.post(
            "/api/v1/orders/",
            json={"restaurant_id": 1, "table_id": seeded["table"]["id"], "lines": []},
            headers=CUSTOMER,
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_missing_role_is_unauthorized(self, client, seeded):
        """Test requests without a role header are rejected"""
        assert place_order(client, seeded, headers={}).status_code == 401

    def test_status_flow_with_permissions(self, client, seeded):
        """Test staff advance the kitchen steps and customers settle"""
        order = place_order(client, seeded).json()
        url = f"/api/v1/orders/{order['id']}/status"

        # Customers cannot drive the kitchen
        response = client.patch(url, json={"status": "under_process"}, headers=CUSTOMER)
        assert response.status_code == 403

        for status in ["under_process", "served", "completed"]:
            response = client.patch(url, json={"status": status}, headers=STAFF)
            assert response.status_code == 200
            assert response.json()["status"] == status

        response = client.patch(url, json={"status": "paid"}, headers=CUSTOMER)
        assert response.status_code == 200
        assert response.json()["paid_at"] is not None

    def test_status_change_is_logged(self, client, seeded):
        """Test an accepted status update is logged with the caller role"""
        order = place_order(client, seeded).json()

        with capture_logs() as logs:
            client.patch(
                f"/api/v1/orders/{order['id']}/status", json={"status": "under_process"}, headers=STAFF
            )

        events = [entry["event"] for entry in logs]
        assert f"Order {order['id']} moved to under_process by staff" in events

    def test_invalid_transition(self, client, seeded):
        """Test skipping a status is a 409 with both statuses"""
        order = place_order(client, seeded).json()

        response = client.patch(
            f"/api/v1/orders/{order['id']}/status", json={"status": "served"}, headers=STAFF
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "INVALID_TRANSITION"
        assert body["current_status"] == "placed"
        assert body["requested_status"] == "served"

    def test_stale_version(self, client, seeded):
        """Test a status update carrying an old version is a conflict"""
        order = place_order(client, seeded).json()
        url = f"/api/v1/orders/{order['id']}/status"

        client.patch(url, json={"status": "under_process", "version": 1}, headers=STAFF)
        response = client.patch(url, json={"status": "served", "version": 1}, headers=STAFF)

        assert response.status_code == 409

    def test_list_orders_with_poll_hint(self, client, seeded):
        """Test the order queue advertises its refresh interval"""
        place_order(client, seeded)

        response = client.get("/api/v1/orders/?restaurant_id=1&status=placed", headers=STAFF)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["poll_interval_seconds"] == 10

    def test_get_missing_order(self, client):
        """Test an unknown order is a 404"""
        response = client.get(
            "/api/v1/orders/00000000-0000-0000-0000-000000000000", headers=STAFF
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestTablesApi:
    """Test table endpoints"""

    def test_tables_with_orders(self, client, seeded):
        """Test the joined view reports occupancy"""
        place_order(client, seeded)

        response = client.get("/api/v1/tables/with-orders?restaurant_id=1", headers=STAFF)

        assert response.status_code == 200
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["occupancy"] == "new_order"
        assert items[0]["order"]["total_amount"] == 2800

    def test_active_order(self, client, seeded):
        """Test a free table has no active order"""
        url = f"/api/v1/tables/{seeded['table']['id']}/active-order"
        assert client.get(url, headers=STAFF).json() is None

        order = place_order(client, seeded).json()
        assert client.get(url, headers=STAFF).json()["id"] == order["id"]

    def test_staff_cannot_create_tables(self, client):
        """Test table editing needs the tables permission"""
        response = client.post(
            "/api/v1/tables/",
            json={"restaurant_id": 1, "table_number": 9, "floor_number": 1},
            headers=STAFF,
        )
        assert response.status_code == 403


class TestFloorPlansApi:
    """Test floor plan endpoints"""

    def test_place_move_and_reject(self, client, seeded):
        """Test placing a table, nudging it and hitting the margin"""
        base = f"/api/v1/floor-plans/{seeded['floor_plan']['id']}/tables"
        table_id = seeded["table"]["id"]

        response = client.post(
            base,
            json={"table_id": table_id, "x_position": 2, "y_position": 2, "width": 4, "height": 4},
            headers=ADMIN,
        )
        assert response.status_code == 201

        response = client.post(f"{base}/{table_id}/move", json={"direction": "down", "step": 2}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["y_position"] == 4

        response = client.post(f"{base}/{table_id}/move", json={"direction": "left"}, headers=ADMIN)
        assert response.status_code == 422
        assert response.json()["error_code"] == "POSITION_ERROR"
        assert response.json()["violations"] == ["too_close_to_edge"]

        floor_plan = client.get(f"/api/v1/floor-plans/{seeded['floor_plan']['id']}", headers=ADMIN).json()
        assert floor_plan["placements"][0]["x_position"] == 2

    def test_update_and_audit(self, client, seeded):
        """Test repositioning and auditing a floor plan"""
        floor_plan_id = seeded["floor_plan"]["id"]
        table_id = seeded["table"]["id"]
        client.post(
            f"/api/v1/floor-plans/{floor_plan_id}/tables",
            json={"table_id": table_id, "x_position": 2, "y_position": 2},
            headers=ADMIN,
        )

        response = client.put(
            f"/api/v1/floor-plans/{floor_plan_id}/tables/{table_id}",
            json={"x_position": 10, "y_position": 10},
            headers=ADMIN,
        )
        assert response.status_code == 200

        audit = client.get(f"/api/v1/floor-plans/{floor_plan_id}/audit", headers=ADMIN)
        assert audit.json() == {}

        response = client.patch(f"/api/v1/floor-plans/{floor_plan_id}", json={"width": 12}, headers=ADMIN)
        assert response.status_code == 422

    def test_remove_table(self, client, seeded):
        """Test a placed table can be taken off the floor"""
        floor_plan_id = seeded["floor_plan"]["id"]
        table_id = seeded["table"]["id"]
        client.post(
            f"/api/v1/floor-plans/{floor_plan_id}/tables",
            json={"table_id": table_id, "x_position": 2, "y_position": 2},
            headers=ADMIN,
        )

        response = client.delete(f"/api/v1/floor-plans/{floor_plan_id}/tables/{table_id}", headers=ADMIN)

        assert response.status_code == 204
        floor_plan = client.get(f"/api/v1/floor-plans/{floor_plan_id}", headers=ADMIN).json()
        assert floor_plan["placements"] == []


class TestAdminApi:
    """Test dashboard endpoints"""

    def test_stats(self, client, seeded):
        """Test stats reflect an open order"""
        place_order(client, seeded)

        response = client.get("/api/v1/admin/stats?restaurant_id=1", headers=STAFF)

        assert response.status_code == 200
        assert response.json() == {
            "active_orders": 1,
            "completed_orders": 0,
            "occupied_tables": 1,
            "total_tables": 1,
            "todays_revenue": 0,
        }

    def test_customers_cannot_view_stats(self, client):
        """Test reports need the reports permission"""
        response = client.get("/api/v1/admin/stats?restaurant_id=1", headers=CUSTOMER)
        assert response.status_code == 403


class TestOccupancyApi:
    """Test the live occupancy board behind the API"""

    def test_board_is_seeded_and_follows_orders(self, client, db, seeded, monkeypatch):
        """Test startup seeds the board from stored orders and order updates reach it"""
        # Startup must read the test database
        monkeypatch.setattr(tableside.main, "engine", db.get_bind())
        monkeypatch.setattr(tableside.core.database, "engine", db.get_bind())
        url = "/api/v1/tables/occupancy?restaurant_id=1"
        table_id = seeded["table"]["id"]
        order = place_order(client, seeded).json()

        with client:
            response = client.get(url, headers=STAFF)
            assert response.status_code == 200
            assert response.json()["items"] == {table_id: "new_order"}
            assert response.json()["poll_interval_seconds"] == 10

            client.patch(
                f"/api/v1/orders/{order['id']}/status", json={"status": "under_process"}, headers=STAFF
            )
            assert client.get(url, headers=STAFF).json()["items"] == {table_id: "preparing"}

        # Shutdown detaches the board from the event bus
        client.patch(f"/api/v1/orders/{order['id']}/status", json={"status": "served"}, headers=STAFF)
        assert occupancy_board.occupancy_for(uuid.UUID(order["table_id"])) == OccupancyLabel.PREPARING

    def test_unknown_tables_read_vacant(self, client, seeded):
        """Test tables the board never heard of are vacant"""
        occupancy_board.seed_orders([])

        response = client.get("/api/v1/tables/occupancy?restaurant_id=1", headers=STAFF)

        assert response.json()["items"] == {seeded["table"]["id"]: "vacant"}

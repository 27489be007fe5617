"""
Test suite for the tracking, shop and health endpoints.

System role: Verification of the public and shop HTTP API
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from motoshop.api.deps.dependencies import (
    get_current_caller,
    get_gateway,
    get_job_service,
    get_shop_service,
)
from motoshop.api.main import create_app
from motoshop.core.access import Role
from motoshop.core.exceptions import (
    JobNotFoundError,
    NotFound,
    PermissionDenied,
    RemoteFailure,
    ValidationError,
)
from motoshop.core.job_lifecycle import JobStatus


@pytest.fixture
def mock_job_service():
    return AsyncMock()


@pytest.fixture
def mock_shop_service():
    return AsyncMock()


@pytest.fixture
def mock_gateway():
    return AsyncMock()


@pytest.fixture
def client(mock_job_service, mock_shop_service, mock_gateway, shop_admin):
    app = create_app()
    app.dependency_overrides[get_job_service] = lambda: mock_job_service
    app.dependency_overrides[get_shop_service] = lambda: mock_shop_service
    app.dependency_overrides[get_gateway] = lambda: mock_gateway
    app.dependency_overrides[get_current_caller] = lambda: shop_admin
    return TestClient(app)


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Server Healthy"}

    def test_health_check_db(self, client, mock_gateway):
        mock_gateway.select.return_value = []
        response = client.get("/api/v1/health/db")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Database connection OK"}

    def test_health_check_db_down(self, client, mock_gateway):
        mock_gateway.select.side_effect = RemoteFailure("Could not list shops record")
        response = client.get("/api/v1/health/db")
        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"


class TestTracking:
    def test_tracking_view_should_hide_contact_details(self, client, mock_job_service, make_job) -> None:
        # Arrange
        mock_job_service.track_job.return_value = make_job(
            start=3, completion=3, status=JobStatus.COMPLETED
        )

        # Act
        response = client.get("/api/v1/track/abcd1234")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "JOB-TEST0001"
        assert data["status"] == "completed"
        assert data["customer_name"] == "Min-jun Park"
        assert "customer" not in data
        assert "rider@example.com" not in response.text
        assert len(data["photos"]["completion"]) == 3
        mock_job_service.track_job.assert_awaited_once_with("abcd1234")

    def test_unknown_code_should_be_404(self, client, mock_job_service) -> None:
        mock_job_service.track_job.side_effect = JobNotFoundError("NOPE")

        response = client.get("/api/v1/track/NOPE")

        assert response.status_code == 404

    def test_tracking_should_not_need_identity(self, mock_job_service, make_job) -> None:
        # Arrange
        mock_job_service.track_job.return_value = make_job()
        app = create_app()
        app.dependency_overrides[get_job_service] = lambda: mock_job_service
        client = TestClient(app)

        # Act
        response = client.get("/api/v1/track/JOB-TEST0001")

        # Assert
        assert response.status_code == 200


class TestShops:
    def test_register_shop(self, client, mock_shop_service, shop_admin) -> None:
        # Arrange
        mock_shop_service.register_shop.return_value = {
            "id": "SHOP-NEW00001",
            "name": "Incheon Riders",
            "owner_id": shop_admin.id,
            "email": None,
            "phone": "010-1234-5678",
            "address": None,
            "created_at": datetime(2026, 1, 15, tzinfo=timezone.utc),
            "updated_at": datetime(2026, 1, 15, tzinfo=timezone.utc),
        }

        # Act
        response = client.post("/api/v1/shops", json={"name": "Incheon Riders", "phone": "010-1234-5678"})

        # Assert
        assert response.status_code == 201
        assert response.json()["id"] == "SHOP-NEW00001"
        assert mock_shop_service.register_shop.call_args.kwargs["name"] == "Incheon Riders"

    def test_blank_shop_name_should_be_rejected(self, client, mock_shop_service) -> None:
        mock_shop_service.register_shop.side_effect = ValidationError("Shop name is required", field="name")

        response = client.post("/api/v1/shops", json={"name": " "})

        assert response.status_code == 400

    def test_invite_member(self, client, mock_shop_service) -> None:
        # Arrange
        mock_shop_service.invite_member.return_value = {
            "id": "8c1f6c7e-8f43-4a4e-9a51-0d8a3c0f9e11",
            "user_id": "user-new",
            "shop_id": "SHOP-TEST0001",
            "role": Role.MECHANIC,
            "approved": False,
        }

        # Act
        response = client.post("/api/v1/shops/SHOP-TEST0001/members", json={"user_id": "user-new"})

        # Assert
        assert response.status_code == 201
        assert response.json()["approved"] is False
        assert mock_shop_service.invite_member.call_args.args[1:] == ("SHOP-TEST0001", "user-new", Role.MECHANIC)

    def test_invite_by_non_admin_should_be_403(self, client, mock_shop_service) -> None:
        mock_shop_service.invite_member.side_effect = PermissionDenied("Not allowed to manage shop SHOP-X")

        response = client.post("/api/v1/shops/SHOP-X/members", json={"user_id": "user-new", "role": "admin"})

        assert response.status_code == 403

    def test_approve_member(self, client, mock_shop_service) -> None:
        mock_shop_service.approve_member.return_value = {
            "id": "8c1f6c7e-8f43-4a4e-9a51-0d8a3c0f9e11",
            "user_id": "user-new",
            "shop_id": "SHOP-TEST0001",
            "role": "mechanic",
            "approved": True,
        }

        response = client.post("/api/v1/shops/SHOP-TEST0001/members/user-new/approve")

        assert response.status_code == 200
        assert response.json()["approved"] is True

    def test_approve_non_member_should_be_404(self, client, mock_shop_service) -> None:
        mock_shop_service.approve_member.side_effect = NotFound("shop_memberships", "user-ghost")

        response = client.post("/api/v1/shops/SHOP-TEST0001/members/user-ghost/approve")

        assert response.status_code == 404

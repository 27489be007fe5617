"""
Test suite for SqlDataGateway.

Runs every gateway call against in-memory SQLite and checks the change
events published for committed writes.

System role: Verification of the data access gateway
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from motoshop.boundary.gateway import ChangeKind
from motoshop.core.exceptions import NotFound, RemoteFailure


@pytest.fixture
def events(gateway) -> list:
    received = []
    gateway.subscribe_to_changes("jobs", None, received.append)
    return received


class TestGatewayWrites:
    async def test_insert_should_return_stored_record(self, gateway, make_job, events) -> None:
        # Act
        stored = await gateway.insert("jobs", make_job().to_row())

        # Assert
        assert stored["id"] == "JOB-TEST0001"
        assert stored["status"] == "pending"
        assert stored["tracking_id"] == "ABCD1234"
        assert [(e.kind, e.record_id) for e in events] == [(ChangeKind.INSERT, "JOB-TEST0001")]

    async def test_update_should_write_only_given_fields(self, gateway, make_job, events) -> None:
        # Arrange
        await gateway.insert("jobs", make_job(description="Oil and filter").to_row())

        # Act
        await gateway.update("jobs", "JOB-TEST0001", {"final_cost": "55.00"})

        # Assert
        row = await gateway.get("jobs", "JOB-TEST0001")
        assert row["final_cost"] == "55.00"
        assert row["description"] == "Oil and filter"
        assert events[-1].kind is ChangeKind.UPDATE
        assert events[-1].record["final_cost"] == "55.00"

    async def test_empty_update_should_not_publish(self, gateway, make_job, events) -> None:
        await gateway.insert("jobs", make_job().to_row())

        await gateway.update("jobs", "JOB-TEST0001", {})

        assert len(events) == 1

    async def test_update_missing_record_should_raise_not_found(self, gateway) -> None:
        with pytest.raises(NotFound):
            await gateway.update("jobs", "JOB-NOPE", {"description": "x"})

    async def test_delete_should_publish_event_without_record(self, gateway, make_job, events) -> None:
        # Arrange
        await gateway.insert("jobs", make_job().to_row())

        # Act
        await gateway.delete("jobs", "JOB-TEST0001")

        # Assert
        assert await gateway.get("jobs", "JOB-TEST0001") is None
        assert events[-1].kind is ChangeKind.DELETE
        assert events[-1].record is None

    async def test_delete_missing_record_should_raise_not_found(self, gateway) -> None:
        with pytest.raises(NotFound):
            await gateway.delete("jobs", "JOB-NOPE")

    async def test_duplicate_insert_should_raise_remote_failure(self, gateway, make_job) -> None:
        # Arrange
        await gateway.insert("jobs", make_job().to_row())

        # Act / Assert
        with pytest.raises(RemoteFailure) as exc_info:
            await gateway.insert("jobs", make_job().to_row())

        assert exc_info.value.details["collection"] == "jobs"


class TestGatewayReads:
    async def test_select_should_filter_order_and_limit(self, gateway, make_job) -> None:
        # Arrange
        for job_id, shop_id in [("JOB-A", "SHOP-1"), ("JOB-B", "SHOP-1"), ("JOB-C", "SHOP-2")]:
            await gateway.insert("jobs", make_job(id=job_id, shop_id=shop_id).to_row())

        # Act
        shop_rows = await gateway.select("jobs", filters={"shop_id": "SHOP-1"}, order_by="id", descending=True)
        limited = await gateway.select("jobs", order_by="id", limit=1)

        # Assert
        assert [r["id"] for r in shop_rows] == ["JOB-B", "JOB-A"]
        assert [r["id"] for r in limited] == ["JOB-A"]

    async def test_membership_ids_should_be_strings(self, gateway) -> None:
        stored = await gateway.insert(
            "shop_memberships",
            {"user_id": "user-1", "shop_id": "SHOP-1", "role": "mechanic"},
        )

        fetched = await gateway.get("shop_memberships", stored["id"])

        assert isinstance(stored["id"], str)
        assert fetched["user_id"] == "user-1"

    async def test_quick_note_round_trip_and_malformed_id(self, gateway) -> None:
        # Arrange
        stored = await gateway.insert(
            "quick_notes",
            {"user_id": "user-1", "note_text": "Test ride done", "category": "Quality Check", "is_default": True},
        )

        # Act
        defaults = await gateway.select("quick_notes", filters={"is_default": True})

        # Assert
        assert [row["id"] for row in defaults] == [stored["id"]]
        assert defaults[0]["shop_id"] is None
        assert await gateway.get("quick_notes", "not-a-uuid") is None
        with pytest.raises(NotFound):
            await gateway.delete("quick_notes", "not-a-uuid")

        # Act
        await gateway.delete("quick_notes", stored["id"])

        # Assert
        assert await gateway.get("quick_notes", stored["id"]) is None

    async def test_unknown_collection_should_raise_value_error(self, gateway) -> None:
        with pytest.raises(ValueError):
            await gateway.get("invoices", "1")

    async def test_database_error_should_become_remote_failure(self, gateway, monkeypatch) -> None:
        # Arrange
        crud = gateway._crud("jobs")
        monkeypatch.setattr(
            crud,
            "get_by_id",
            AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("database is locked"))),
        )

        # Act / Assert
        with pytest.raises(RemoteFailure) as exc_info:
            await gateway.get("jobs", "JOB-TEST0001")

        assert exc_info.value.details["operation"] == "fetch"


class TestSubscriptions:
    async def test_filtered_subscription_should_only_see_matching_records(self, gateway, make_job) -> None:
        # Arrange
        seen = []
        subscription = gateway.subscribe_to_changes("jobs", {"shop_id": "SHOP-1"}, seen.append)

        # Act
        await gateway.insert("jobs", make_job(id="JOB-A", shop_id="SHOP-1").to_row())
        await gateway.insert("jobs", make_job(id="JOB-B", shop_id="SHOP-2").to_row())
        subscription.unsubscribe()
        await gateway.insert("jobs", make_job(id="JOB-C", shop_id="SHOP-1").to_row())

        # Assert
        assert [e.record_id for e in seen] == ["JOB-A"]

    async def test_unknown_collection_subscription_should_raise(self, gateway) -> None:
        with pytest.raises(ValueError):
            gateway.subscribe_to_changes("invoices", None, lambda event: None)

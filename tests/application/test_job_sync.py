"""
Test suite for JobSynchronizer.

Runs the synchronizer against the SQL gateway on in-memory SQLite and
injects gateway failures with monkeypatch.

System role: Verification of optimistic job persistence
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from motoshop.application.services import JobSynchronizer, SyncState
from motoshop.core.exceptions import (
    DeletionNotConfirmed,
    FinalCostRequired,
    JobNotFoundError,
    NotFound,
    PhotoRemovalNotAllowed,
    PhotoRequirementNotMet,
    RemoteFailure,
    TransitionInFlight,
    ValidationError,
)
from motoshop.core.job_lifecycle import JobStatus, PhotoKind
from motoshop.core.job_lifecycle.transition_policy import NOTE_COMPLETED, NOTE_STARTED


def _failing(message: str = "connection reset") -> AsyncMock:
    return AsyncMock(side_effect=RemoteFailure(message, operation="update"))


async def _upload(synchronizer, job_id, kind, count):
    kind = PhotoKind(kind)
    result = None
    for i in range(count):
        result = await synchronizer.add_photo(job_id, kind, f"https://cdn.example.com/{kind.value}/{i}.jpg")
    return result


class TestJobLifecycle:
    async def test_full_lifecycle_with_deferred_completion(self, synchronizer, stored_job, now) -> None:
        # Arrange
        job_id = stored_job.id

        # Act: start photos
        first = await synchronizer.add_photo(job_id, PhotoKind.START, "https://cdn.example.com/s0.jpg")
        second = await synchronizer.add_photo(job_id, PhotoKind.START, "https://cdn.example.com/s1.jpg")
        third = await synchronizer.add_photo(job_id, PhotoKind.START, "https://cdn.example.com/s2.jpg")

        # Assert: third start photo starts the job
        assert (first.count, first.status_changed) == (1, False)
        assert (second.count, second.status_changed) == (2, False)
        assert (third.count, third.status_changed) == (3, True)
        assert third.job.status is JobStatus.IN_PROGRESS
        assert third.job.notes[-1].text == NOTE_STARTED

        # Act: completion photos without a final cost
        await _upload(synchronizer, job_id, PhotoKind.COMPLETION, 3)
        with pytest.raises(FinalCostRequired):
            await synchronizer.request_transition(job_id, JobStatus.COMPLETED)

        assert synchronizer.is_completion_deferred(job_id)
        assert synchronizer.peek(job_id).status is JobStatus.IN_PROGRESS

        # Act: supplying the cost completes the job without new photos
        result = await synchronizer.set_costs(job_id, final_cost="150.00")

        # Assert
        assert result.status_changed is True
        assert result.deferred_error is None
        assert result.job.status is JobStatus.COMPLETED
        assert result.job.date_completed == now
        assert result.job.final_cost == "150.00"
        assert [n.text for n in result.job.notes] == [NOTE_STARTED, NOTE_COMPLETED]
        assert not synchronizer.is_completion_deferred(job_id)

        fresh = JobSynchronizer(synchronizer._gateway)
        remote = await fresh.load(job_id)
        assert remote.status is JobStatus.COMPLETED
        assert remote.date_completed == now
        assert remote.photos.count(PhotoKind.COMPLETION) == 3

    async def test_start_photo_below_minimum_should_not_change_status(self, synchronizer, stored_job) -> None:
        result = await _upload(synchronizer, stored_job.id, PhotoKind.START, 2)

        assert result.status_changed is False
        assert result.job.status is JobStatus.PENDING

    async def test_manual_start_with_two_photos_should_fail(self, synchronizer, stored_job) -> None:
        await _upload(synchronizer, stored_job.id, PhotoKind.START, 2)

        with pytest.raises(PhotoRequirementNotMet):
            await synchronizer.request_transition(stored_job.id, JobStatus.IN_PROGRESS)

    async def test_removing_start_photo_of_completed_job_should_fail(self, synchronizer, stored_job) -> None:
        # Arrange
        job_id = stored_job.id
        await _upload(synchronizer, job_id, PhotoKind.START, 3)
        await _upload(synchronizer, job_id, PhotoKind.COMPLETION, 3)
        await synchronizer.set_costs(job_id, final_cost="150")
        await synchronizer.request_transition(job_id, JobStatus.COMPLETED)
        before = synchronizer.peek(job_id).photos

        # Act / Assert
        with pytest.raises(PhotoRemovalNotAllowed):
            await synchronizer.remove_photo(job_id, PhotoKind.START, 0)

        assert synchronizer.peek(job_id).photos == before

    async def test_remove_photo_should_return_reference(self, synchronizer, stored_job) -> None:
        await _upload(synchronizer, stored_job.id, PhotoKind.COMPLETION, 2)

        job, removed = await synchronizer.remove_photo(stored_job.id, "completion", 0)

        assert removed == "https://cdn.example.com/completion/0.jpg"
        assert job.photos.completion == ("https://cdn.example.com/completion/1.jpg",)

    async def test_requesting_current_status_should_not_write(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        update = AsyncMock()
        monkeypatch.setattr(synchronizer._gateway, "update", update)

        # Act
        result = await synchronizer.request_transition(stored_job.id, "pending")

        # Assert
        assert result.changed is False
        assert result.job.notes == ()
        update.assert_not_awaited()

    async def test_deferred_completion_should_report_remaining_problem(self, synchronizer, stored_job) -> None:
        # Arrange
        job_id = stored_job.id
        await _upload(synchronizer, job_id, PhotoKind.COMPLETION, 3)
        with pytest.raises(FinalCostRequired):
            await synchronizer.request_transition(job_id, JobStatus.COMPLETED)
        await synchronizer.remove_photo(job_id, PhotoKind.COMPLETION, 0)

        # Act
        result = await synchronizer.set_costs(job_id, final_cost="90")

        # Assert
        assert result.status_changed is False
        assert isinstance(result.deferred_error, PhotoRequirementNotMet)
        assert result.job.status is JobStatus.PENDING
        assert result.job.final_cost == "90.00"

    async def test_invalid_cost_should_not_reach_gateway(self, synchronizer, stored_job, monkeypatch) -> None:
        update = AsyncMock()
        monkeypatch.setattr(synchronizer._gateway, "update", update)

        with pytest.raises(ValidationError):
            await synchronizer.set_costs(stored_job.id, final_cost="lots")

        update.assert_not_awaited()


class TestRemoteFailure:
    async def test_failed_write_should_keep_local_change_and_retry(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        monkeypatch.setattr(synchronizer._gateway, "update", _failing())

        # Act
        with pytest.raises(RemoteFailure):
            await synchronizer.add_note(stored_job.id, "Rear tyre worn", author="mechanic@example.com")

        # Assert: optimistic copy kept and flagged
        assert synchronizer.sync_state(stored_job.id) is SyncState.FAILED
        assert synchronizer.peek(stored_job.id).notes[-1].text == "Rear tyre worn"

        # Act: gateway recovers
        monkeypatch.undo()
        report = await synchronizer.retry_pending()

        # Assert
        assert report.confirmed == [stored_job.id]
        assert report.failed == {}
        assert synchronizer.sync_state(stored_job.id) is SyncState.CONFIRMED
        row = await synchronizer._gateway.get("jobs", stored_job.id)
        assert row["notes"][-1]["text"] == "Rear tyre worn"

    async def test_rollback_mode_should_restore_confirmed_copy(self, gateway, stored_job, monkeypatch, now) -> None:
        # Arrange
        synchronizer = JobSynchronizer(gateway, rollback_on_failure=True, clock=lambda: now)
        await synchronizer.load(stored_job.id)
        monkeypatch.setattr(gateway, "update", _failing())

        # Act
        with pytest.raises(RemoteFailure):
            await synchronizer.add_note(stored_job.id, "Lost", author="mechanic@example.com")

        # Assert
        assert synchronizer.peek(stored_job.id).notes == ()
        assert synchronizer.sync_state(stored_job.id) is SyncState.CONFIRMED

    async def test_next_write_should_include_unconfirmed_fields(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        monkeypatch.setattr(synchronizer._gateway, "update", _failing())
        with pytest.raises(RemoteFailure):
            await synchronizer.set_costs(stored_job.id, initial_cost="40")
        monkeypatch.undo()

        # Act
        await synchronizer.add_note(stored_job.id, "Quoted by phone", author="mechanic@example.com")

        # Assert
        row = await synchronizer._gateway.get("jobs", stored_job.id)
        assert row["initial_cost"] == "40.00"
        assert len(row["notes"]) == 1

    async def test_reload_should_keep_failed_change_for_retry(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        monkeypatch.setattr(synchronizer._gateway, "update", _failing())
        with pytest.raises(RemoteFailure):
            await synchronizer.set_costs(stored_job.id, final_cost="150")
        monkeypatch.undo()

        # Act
        job = await synchronizer.load(stored_job.id)

        # Assert: still unsent, still visible locally
        assert job.final_cost == "150.00"
        assert synchronizer.sync_state(stored_job.id) is SyncState.FAILED

        # Act
        report = await synchronizer.retry_pending()

        # Assert
        assert report.confirmed == [stored_job.id]
        row = await synchronizer._gateway.get("jobs", stored_job.id)
        assert row["final_cost"] == "150.00"

    async def test_change_feed_should_not_erase_failed_change(self, gateway, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        synchronizer.attach_change_feed()
        monkeypatch.setattr(gateway, "update", _failing())
        with pytest.raises(RemoteFailure):
            await synchronizer.set_costs(stored_job.id, final_cost="150")
        monkeypatch.undo()

        # Act: another client edits the same job
        await gateway.update("jobs", stored_job.id, {"description": "Edited elsewhere"})

        # Assert
        job = synchronizer.peek(stored_job.id)
        assert job.description == "Edited elsewhere"
        assert job.final_cost == "150.00"
        assert synchronizer.sync_state(stored_job.id) is SyncState.FAILED
        synchronizer.detach_change_feed()

    async def test_retry_rejected_again_should_stay_failed(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        monkeypatch.setattr(synchronizer._gateway, "update", _failing())
        with pytest.raises(RemoteFailure):
            await synchronizer.add_note(stored_job.id, "Chain slack", author="mechanic@example.com")

        # Act
        with pytest.raises(RemoteFailure):
            await synchronizer.retry_job(stored_job.id)
        report = await synchronizer.retry_pending()

        # Assert
        assert synchronizer.sync_state(stored_job.id) is SyncState.FAILED
        assert report.failed == {stored_job.id: "connection reset"}
        assert synchronizer.peek(stored_job.id).notes[-1].text == "Chain slack"

    async def test_retry_job_without_failed_write_should_not_write(self, synchronizer, stored_job, monkeypatch) -> None:
        update = AsyncMock()
        monkeypatch.setattr(synchronizer._gateway, "update", update)

        job = await synchronizer.retry_job(stored_job.id)

        assert job == stored_job
        update.assert_not_awaited()

    async def test_load_should_fall_back_to_cache_when_gateway_fails(self, synchronizer, stored_job, monkeypatch) -> None:
        monkeypatch.setattr(synchronizer._gateway, "get", AsyncMock(side_effect=RemoteFailure("down")))

        job = await synchronizer.load(stored_job.id)

        assert job == stored_job


class TestConcurrency:
    async def test_second_transition_while_first_in_flight_should_be_rejected(
        self, synchronizer, stored_job, monkeypatch
    ) -> None:
        # Arrange
        gateway = synchronizer._gateway
        release = asyncio.Event()
        original_update = gateway.update

        async def slow_update(*args, **kwargs):
            await release.wait()
            return await original_update(*args, **kwargs)

        monkeypatch.setattr(gateway, "update", slow_update)
        first = asyncio.create_task(synchronizer.request_transition(stored_job.id, JobStatus.ON_HOLD))
        for _ in range(5):
            await asyncio.sleep(0)

        # Act / Assert
        with pytest.raises(TransitionInFlight):
            await synchronizer.request_transition(stored_job.id, JobStatus.ON_HOLD)

        release.set()
        result = await first
        assert result.job.status is JobStatus.ON_HOLD


class TestReadsAndChangeFeed:
    async def test_remote_copy_should_win_on_load(self, synchronizer, stored_job) -> None:
        # Arrange
        await synchronizer._gateway.update("jobs", stored_job.id, {"description": "Edited elsewhere"})

        # Act
        job = await synchronizer.load(stored_job.id)

        # Assert
        assert job.description == "Edited elsewhere"
        assert synchronizer.peek(stored_job.id).description == "Edited elsewhere"

    async def test_missing_job_should_raise_not_found(self, synchronizer) -> None:
        with pytest.raises(JobNotFoundError):
            await synchronizer.load("JOB-MISSING")

    async def test_change_feed_should_merge_other_clients_writes(self, gateway, synchronizer, stored_job, now) -> None:
        # Arrange
        synchronizer.attach_change_feed()
        other_client = JobSynchronizer(gateway, clock=lambda: now)

        # Act
        await other_client.add_note(stored_job.id, "Parts ordered", author="other@example.com")

        # Assert
        assert synchronizer.peek(stored_job.id).notes[-1].text == "Parts ordered"

        synchronizer.detach_change_feed()
        assert gateway.change_feed.listener_count == 0

    async def test_change_feed_delete_should_evict(self, gateway, synchronizer, stored_job) -> None:
        synchronizer.attach_change_feed()

        await gateway.delete("jobs", stored_job.id)

        assert synchronizer.peek(stored_job.id) is None

    async def test_list_jobs_should_apply_filters(self, synchronizer, stored_job, make_job) -> None:
        # Arrange
        await synchronizer.create_job(make_job(id="JOB-OTHERSHOP", shop_id=None))

        # Act
        jobs = await synchronizer.list_jobs(filters={"shop_id": stored_job.shop_id})

        # Assert
        assert [job.id for job in jobs] == [stored_job.id]


class TestDeletion:
    async def test_delete_should_require_two_confirmations(self, synchronizer, stored_job) -> None:
        # Arrange
        ticket = await synchronizer.begin_deletion(stored_job.id)

        # Act
        first = await synchronizer.confirm_deletion(stored_job.id, ticket.id)

        # Assert: still there after one confirmation
        assert first.deleted is False
        assert await synchronizer._gateway.get("jobs", stored_job.id) is not None
        with pytest.raises(DeletionNotConfirmed):
            await synchronizer.delete_job(stored_job.id, ticket.id)

        # Act
        second = await synchronizer.confirm_deletion(stored_job.id, ticket.id)

        # Assert
        assert second.deleted is True
        assert await synchronizer._gateway.get("jobs", stored_job.id) is None
        assert synchronizer.peek(stored_job.id) is None

    async def test_cancel_should_leave_job_intact(self, synchronizer, stored_job) -> None:
        # Arrange
        ticket = await synchronizer.begin_deletion(stored_job.id)
        await synchronizer.confirm_deletion(stored_job.id, ticket.id)

        # Act
        synchronizer.cancel_deletion(stored_job.id, ticket.id)

        # Assert
        with pytest.raises(NotFound):
            await synchronizer.confirm_deletion(stored_job.id, ticket.id)
        assert await synchronizer._gateway.get("jobs", stored_job.id) is not None

    async def test_failed_remote_delete_should_keep_job(self, synchronizer, stored_job, monkeypatch) -> None:
        # Arrange
        ticket = await synchronizer.begin_deletion(stored_job.id)
        await synchronizer.confirm_deletion(stored_job.id, ticket.id)
        monkeypatch.setattr(
            synchronizer._gateway,
            "delete",
            AsyncMock(side_effect=RemoteFailure("delete refused", operation="delete")),
        )

        # Act / Assert
        with pytest.raises(RemoteFailure):
            await synchronizer.confirm_deletion(stored_job.id, ticket.id)

        monkeypatch.undo()
        assert synchronizer.peek(stored_job.id) is not None
        assert await synchronizer._gateway.get("jobs", stored_job.id) is not None
        with pytest.raises(NotFound):
            await synchronizer.confirm_deletion(stored_job.id, ticket.id)

"""Unit tests for ptp_service module."""

import pytest

from src.core.state import ViewMode
from src.services import ptp_service
from tests.unit.mocks import make_ptp


@pytest.fixture
def stored_ptp(signed_in_ctx, remote_store):
    ptp = make_ptp("p1", author="Joe", created_at="2024-05-06T07:00:00.000Z")
    signed_in_ctx.state.ptps.append(ptp)
    remote_store.ptps.append(ptp.model_copy(deep=True))
    return ptp


@pytest.mark.unit
class TestCreatePTP:
    async def test_stamps_author_and_created_at(self, signed_in_ctx, remote_store, scheduler):
        stored = await ptp_service.create_ptp(signed_in_ctx, make_ptp("p1", author="Someone Else"))

        assert stored.author == "Joe"
        assert stored.created_at
        assert signed_in_ctx.state.ptps == [stored]
        assert remote_store.writes() == ["insert_ptp", "insert_audit_log"]
        assert signed_in_ctx.state.audit_logs[0].action == "Create PTP"
        assert signed_in_ctx.state.audit_logs[0].details == "Location: CVN-74 Deck 2, ID: p1"
        assert len(scheduler.jobs) == 1
        assert signed_in_ctx.state.view == ViewMode.PTP_LIST

    async def test_unauthenticated_create_is_a_no_op(self, ctx, remote_store):
        assert await ptp_service.create_ptp(ctx, make_ptp("p1")) is None

        assert ctx.state.ptps == []
        assert remote_store.calls == []


@pytest.mark.unit
class TestUpdatePTP:
    async def test_stamps_updated_at_and_audits(self, signed_in_ctx, stored_ptp, remote_store):
        revised = stored_ptp.model_copy(update={"location": "CVN-74 Deck 3"})

        stored = await ptp_service.update_ptp(signed_in_ctx, revised)

        assert stored.updated_at
        assert signed_in_ctx.state.ptps == [stored]
        assert remote_store.writes() == ["update_ptp", "insert_audit_log"]
        assert signed_in_ctx.state.audit_logs[0].details == "Location: CVN-74 Deck 3, ID: p1"

    async def test_unknown_ptp(self, signed_in_ctx, remote_store):
        assert await ptp_service.update_ptp(signed_in_ctx, make_ptp("nope")) is None

        assert signed_in_ctx.state.toast == "Error: PTP nope not found"
        assert remote_store.calls == []


@pytest.mark.unit
class TestArchiveAndRestorePTP:
    async def test_archive_then_restore(self, signed_in_ctx, stored_ptp):
        assert await ptp_service.archive_ptp(signed_in_ctx, "p1") is True
        state = signed_in_ctx.state
        assert state.ptps == []
        assert state.deleted_ptps == [stored_ptp]
        assert list(state.toasts) == ["Moving to trash...", "Safety Plan moved to trash"]

        assert await ptp_service.restore_ptp(signed_in_ctx, "p1") is True
        assert state.ptps == [stored_ptp]
        assert state.deleted_ptps == []
        assert state.toast == "Safety Plan restored"
        assert [e.action for e in state.audit_logs] == ["Restore PTP", "Delete PTP"]

    async def test_archive_failure_recovers_by_resync(self, signed_in_ctx, stored_ptp, remote_store):
        remote_store.fail("delete_ptp")

        assert await ptp_service.archive_ptp(signed_in_ctx, "p1") is False

        assert signed_in_ctx.state.toast == "Delete failed: delete_ptp failed"
        assert [p.id for p in signed_in_ctx.state.ptps] == ["p1"]
        assert signed_in_ctx.state.deleted_ptps == []

    async def test_unconfirmed_archive_recovers_by_resync(self, signed_in_ctx, stored_ptp, remote_store, scheduler):
        remote_store.refuse("delete_ptp")

        assert await ptp_service.archive_ptp(signed_in_ctx, "p1") is False

        assert signed_in_ctx.state.toast == "Delete failed: Sheet did not confirm the move"
        assert "fetch_ptps" in remote_store.call_names()
        assert [p.id for p in signed_in_ctx.state.ptps] == ["p1"]
        assert signed_in_ctx.state.audit_logs == []
        assert scheduler.jobs == []

    async def test_unconfirmed_restore_recovers_by_resync(self, signed_in_ctx, remote_store, scheduler):
        trashed = make_ptp("p2")
        signed_in_ctx.state.deleted_ptps.append(trashed)
        remote_store.deleted_ptps.append(trashed.model_copy(deep=True))
        remote_store.refuse("restore_ptp")

        assert await ptp_service.restore_ptp(signed_in_ctx, "p2") is False

        assert signed_in_ctx.state.toast == "Restore failed: Sheet did not confirm the move"
        assert [p.id for p in signed_in_ctx.state.deleted_ptps] == ["p2"]
        assert signed_in_ctx.state.ptps == []
        assert scheduler.jobs == []

    async def test_restore_unknown_ptp(self, signed_in_ctx, remote_store):
        assert await ptp_service.restore_ptp(signed_in_ctx, "p9") is False

        assert signed_in_ctx.state.toast == "Error: PTP p9 not found"
        assert remote_store.calls == []

    async def test_unauthenticated_archive_is_a_no_op(self, ctx, remote_store):
        ctx.state.ptps.append(make_ptp("p1"))

        assert await ptp_service.archive_ptp(ctx, "p1") is False

        assert len(ctx.state.ptps) == 1
        assert remote_store.calls == []


@pytest.mark.unit
class TestBulkPrint:
    async def test_selects_ids_and_audits_count(self, signed_in_ctx):
        selected = await ptp_service.record_bulk_print(signed_in_ctx, ["p1", 2.0, "p3"])

        assert selected == ["p1", "2", "p3"]
        assert signed_in_ctx.state.selected_bulk_ids == selected
        assert signed_in_ctx.state.view == ViewMode.PTP_BULK_PRINT
        assert signed_in_ctx.state.audit_logs[0].action == "Bulk Print PTP"
        assert signed_in_ctx.state.audit_logs[0].details == "Count: 3"

    async def test_requires_sign_in(self, ctx):
        assert await ptp_service.record_bulk_print(ctx, ["p1"]) == []

        assert ctx.state.audit_logs == []
        assert ctx.state.view == ViewMode.DASHBOARD

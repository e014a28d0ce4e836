"""Unit tests for RemoteNotificationStore against a mocked Realtime Database."""

import asyncio
import threading
import pytest
from unittest.mock import AsyncMock, MagicMock

from campverse.services.notifications.errors import StoreError
from campverse.services.notifications.stores import (
    REMOTE,
    RemoteNotificationStore,
    RemoteSubscription,
    decode_snapshot,
)


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


def _entry(created_at, audience="all", is_read=False):
    return {
        "title": "Notice",
        "message": "Body",
        "urgency": "normal",
        "targetAudience": {"type": audience},
        "postedBy": {"name": "Dr. Lakshmi Rao", "role": "faculty", "collegeId": "FAC0042"},
        "createdAt": created_at,
        "isRead": is_read,
    }


@pytest.fixture
def mock_ref():
    ref = MagicMock()
    query = ref.order_by_child.return_value.limit_to_last.return_value
    query.get.return_value = {
        "-Nold": _entry(1000),
        "-Nnew": _entry(2000, audience="students"),
    }
    ref.push.return_value = MagicMock(key="-Npushed")
    ref.listen.return_value = MagicMock()
    return ref


@pytest.fixture
def mock_database(mock_ref):
    database = MagicMock()
    database.reference.return_value = mock_ref
    return database


@pytest.fixture
def store(mock_database):
    return RemoteNotificationStore(mock_database, path="notifications", limit=100)


# ─────────────────────────────────────────────────────────────────
# Decoding
# ─────────────────────────────────────────────────────────────────


class TestDecodeSnapshot:
    def test_keys_become_ids(self):
        notifications = decode_snapshot({"-Na": _entry(1000)})

        assert notifications[0].id == "-Na"

    def test_empty_snapshot(self):
        assert decode_snapshot(None) == []
        assert decode_snapshot({}) == []

    def test_skips_malformed_entries(self):
        notifications = decode_snapshot({
            "-Ngood": _entry(1000),
            "-Nbad": {"message": "missing fields"},
            "-Njunk": "text",
        })

        assert [n.id for n in notifications] == ["-Ngood"]

    def test_unexpected_snapshot_type(self):
        assert decode_snapshot(["a", "b"]) == []


# ─────────────────────────────────────────────────────────────────
# Reading and writing
# ─────────────────────────────────────────────────────────────────


class TestRemoteOperations:
    @pytest.mark.asyncio
    async def test_list_reads_most_recent_by_created_at(self, store, mock_database, mock_ref):
        notifications = await store.list()

        mock_database.reference.assert_called_with("notifications")
        mock_ref.order_by_child.assert_called_once_with("createdAt")
        mock_ref.order_by_child.return_value.limit_to_last.assert_called_once_with(100)
        assert {n.id for n in notifications} == {"-Nold", "-Nnew"}

    @pytest.mark.asyncio
    async def test_list_wraps_sdk_errors(self, store, mock_ref):
        mock_ref.order_by_child.return_value.limit_to_last.return_value.get.side_effect = RuntimeError("offline")

        with pytest.raises(StoreError) as exc_info:
            await store.list()

        assert exc_info.value.store == REMOTE

    @pytest.mark.asyncio
    async def test_append_pushes_without_id_and_uses_push_key(self, store, mock_ref, make_notification):
        stored = await store.append(make_notification(id="notif_local"))

        pushed = mock_ref.push.call_args[0][0]
        assert "id" not in pushed
        assert pushed["createdAt"] == 1_700_000_000_000
        assert stored.id == "-Npushed"

    @pytest.mark.asyncio
    async def test_append_failure_raises_store_error(self, store, mock_ref, make_notification):
        mock_ref.push.side_effect = RuntimeError("permission denied")

        with pytest.raises(StoreError) as exc_info:
            await store.append(make_notification())

        assert exc_info.value.operation == "push"

    @pytest.mark.asyncio
    async def test_set_read_writes_is_read_field(self, store, mock_ref):
        await store.set_read("-Nold")

        mock_ref.child.assert_called_with("-Nold")
        mock_ref.child.return_value.child.assert_called_with("isRead")
        mock_ref.child.return_value.child.return_value.set.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_set_all_read_is_not_rolled_back(self, store, mock_ref):
        setter = mock_ref.child.return_value.child.return_value.set
        setter.side_effect = [None, RuntimeError("offline"), None]

        with pytest.raises(StoreError):
            await store.set_all_read(["a", "b", "c"])

        # First write applied, third never attempted
        assert setter.call_count == 2

    @pytest.mark.asyncio
    async def test_set_all_read_without_ids_marks_listed(self, store, mock_ref):
        await store.set_all_read()

        setter = mock_ref.child.return_value.child.return_value.set
        assert setter.call_count == 2

    @pytest.mark.asyncio
    async def test_remove_deletes_child(self, store, mock_ref):
        await store.remove("-Nold")

        mock_ref.child.assert_called_with("-Nold")
        mock_ref.child.return_value.delete.assert_called_once()


# ─────────────────────────────────────────────────────────────────
# subscribe
# ─────────────────────────────────────────────────────────────────


class TestRemoteSubscribe:
    @pytest.mark.asyncio
    async def test_delivers_initial_snapshot_and_listens(self, store, mock_ref):
        on_snapshot = AsyncMock()

        subscription = await store.subscribe(on_snapshot, AsyncMock())

        on_snapshot.assert_awaited_once()
        assert len(on_snapshot.call_args[0][0]) == 2
        mock_ref.listen.assert_called_once()
        assert not subscription.closed

    @pytest.mark.asyncio
    async def test_close_closes_listener(self, store, mock_ref):
        subscription = await store.subscribe(AsyncMock(), AsyncMock())

        subscription.close()
        subscription.close()
        await subscription.closing

        mock_ref.listen.return_value.close.assert_called_once()
        assert subscription.closed

    @pytest.mark.asyncio
    async def test_close_runs_off_the_event_loop(self, store, mock_ref):
        loop_thread = threading.get_ident()
        closed_on = []
        mock_ref.listen.return_value.close.side_effect = lambda: closed_on.append(threading.get_ident())
        subscription = await store.subscribe(AsyncMock(), AsyncMock())

        subscription.close()
        await subscription.closing

        assert len(closed_on) == 1
        assert closed_on[0] != loop_thread

    def test_close_without_event_loop_is_immediate(self):
        registration = MagicMock()
        subscription = RemoteSubscription()
        subscription.attach(registration)

        subscription.close()

        registration.close.assert_called_once()
        assert subscription.closing is None

    @pytest.mark.asyncio
    async def test_listener_events_deliver_fresh_snapshots(self, store, mock_ref):
        on_snapshot = AsyncMock()
        await store.subscribe(on_snapshot, AsyncMock())
        callback = mock_ref.listen.call_args[0][0]

        await asyncio.to_thread(callback, MagicMock())
        await asyncio.sleep(0.05)

        assert on_snapshot.await_count == 2

    @pytest.mark.asyncio
    async def test_listener_read_failure_reports_error(self, store, mock_ref):
        on_error = AsyncMock()
        await store.subscribe(AsyncMock(), on_error)
        callback = mock_ref.listen.call_args[0][0]
        mock_ref.order_by_child.return_value.limit_to_last.return_value.get.side_effect = RuntimeError("offline")

        await asyncio.to_thread(callback, MagicMock())
        await asyncio.sleep(0.05)

        on_error.assert_awaited_once()
        assert isinstance(on_error.call_args[0][0], StoreError)

    @pytest.mark.asyncio
    async def test_closed_subscription_ignores_events(self, store, mock_ref):
        on_snapshot = AsyncMock()
        subscription = await store.subscribe(on_snapshot, AsyncMock())
        callback = mock_ref.listen.call_args[0][0]

        subscription.close()
        await asyncio.to_thread(callback, MagicMock())
        await asyncio.sleep(0.05)

        assert on_snapshot.await_count == 1

    @pytest.mark.asyncio
    async def test_initial_read_failure_raises(self, store, mock_ref):
        mock_ref.order_by_child.return_value.limit_to_last.return_value.get.side_effect = RuntimeError("offline")

        with pytest.raises(StoreError):
            await store.subscribe(AsyncMock(), AsyncMock())

        mock_ref.listen.assert_not_called()

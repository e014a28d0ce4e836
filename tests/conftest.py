"""Shared test fixtures for CampVerse backend tests."""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from common.database import LocalStorage
from campverse.schemas.notifications import Notification, PostedBy, TargetAudience
from campverse.services.notifications.stores import (
    LocalNotificationStore,
    NotificationStore,
    Subscription,
)
from campverse.types import Viewer


# 2025-09-01: a "22..." college ID is in year 4
TODAY = date(2025, 9, 1)


@pytest.fixture
def today():
    return lambda: TODAY


# ─────────────────────────────────────────────────────────────────
# Viewers
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def cse_student():
    """CSE (A05), admitted 2022, section C."""
    return Viewer(uid="stu-cse", role="student", college_id="22B81A05C3", name="Ravi Kumar")


@pytest.fixture
def ece_student():
    """ECE (A04), admitted 2024, section B."""
    return Viewer(uid="stu-ece", role="student", college_id="24B81A04B7", name="Sneha Reddy")


@pytest.fixture
def faculty_viewer():
    return Viewer(uid="fac-1", role="faculty", college_id="FAC0042", name="Dr. Lakshmi Rao")


@pytest.fixture
def admin_viewer():
    return Viewer(uid="adm-1", role="admin", college_id="ADM0001", name="Principal Office")


# ─────────────────────────────────────────────────────────────────
# Notifications
# ─────────────────────────────────────────────────────────────────


def build_notification(
    id: str = "n1",
    created_at: int = 1_700_000_000_000,
    audience: dict = None,
    is_read: bool = False,
    title: str = "Notice",
    message: str = "Please read this notice.",
    **extra,
) -> Notification:
    return Notification(
        id=id,
        title=title,
        message=message,
        targetAudience=TargetAudience(**(audience or {"type": "all"})),
        postedBy=PostedBy(name="Dr. Lakshmi Rao", role="faculty", collegeId="FAC0042"),
        createdAt=created_at,
        isRead=is_read,
        **extra,
    )


@pytest.fixture
def make_notification():
    return build_notification


# ─────────────────────────────────────────────────────────────────
# Stores
# ─────────────────────────────────────────────────────────────────


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(tmp_path / "storage")


@pytest.fixture
def local_store(local_storage):
    return LocalNotificationStore(local_storage)


@pytest.fixture
def remote_snapshot():
    """Mutable list the mock remote store serves on subscribe."""
    return []


@pytest.fixture
def remote_store(remote_snapshot):
    """
    Remote store double: subscribe delivers remote_snapshot once and
    returns a mock subscription; append echoes back a push key.
    """
    store = AsyncMock(spec=NotificationStore)

    async def subscribe(on_snapshot, on_error):
        await on_snapshot(list(remote_snapshot))
        return MagicMock(spec=Subscription)

    async def append(notification):
        return notification.model_copy(update={"id": "-Npush0001"})

    store.subscribe.side_effect = subscribe
    store.append.side_effect = append
    store.list.side_effect = lambda: list(remote_snapshot)
    return store

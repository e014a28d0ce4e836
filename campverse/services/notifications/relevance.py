"""
Audience matching and list preparation.

The predicate depends only on the notification's target audience and the
viewer's role, college ID and explicit section.
"""

from datetime import date
from typing import Iterable, List, Optional

from campverse.schemas.notifications import Notification
from campverse.services.notifications.identifiers import (
    derive_branch,
    derive_section,
    derive_year,
)
from campverse.types import Viewer


def is_relevant(
    notification: Notification,
    viewer: Optional[Viewer],
    today: Optional[date] = None,
) -> bool:
    """
    Decide whether a viewer should see a notification.

    Rules, in order:
    - no viewer: never
    - audience "all": always
    - audience "students"/"faculty": when the role matches
    - admins: always, whatever the audience
    - audience "custom": when any populated filter matches the viewer
    """
    if viewer is None:
        return False

    target = notification.targetAudience

    if target.type == "all":
        return True

    if target.type == "students" and viewer.role == "student":
        return True

    if target.type == "faculty" and viewer.role == "faculty":
        return True

    if viewer.role == "admin":
        return True

    if target.type == "custom":
        if target.specificRoles and viewer.role in target.specificRoles:
            return True

        if target.branches and derive_branch(viewer.college_id) in target.branches:
            return True

        if target.years and derive_year(viewer.college_id, today) in target.years:
            return True

        if target.sections:
            section = viewer.section or derive_section(viewer.college_id)
            if section in target.sections:
                return True

    return False


def sort_newest_first(notifications: Iterable[Notification]) -> List[Notification]:
    """Stable sort by createdAt, newest first."""
    return sorted(notifications, key=lambda n: n.createdAt, reverse=True)


def filter_relevant(
    notifications: Iterable[Notification],
    viewer: Optional[Viewer],
    today: Optional[date] = None,
) -> List[Notification]:
    """Keep the notifications the viewer should see, preserving order."""
    if viewer is None:
        return []
    return [n for n in notifications if is_relevant(n, viewer, today)]


def is_expired(notification: Notification, now_ms: int) -> bool:
    """True when expiresAt is set and already in the past."""
    return notification.expiresAt is not None and notification.expiresAt < now_ms


def count_unread(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.isRead)

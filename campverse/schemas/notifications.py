"""
Pydantic models for notifications.

Field names are camelCase because they are stored as-is in the Realtime
Database and in the local JSON store, and served as-is to the portal.
"""

from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field


Urgency = Literal["normal", "important", "critical"]
Category = Literal["general", "academic", "placement", "event", "emergency"]
AudienceType = Literal["all", "students", "faculty", "custom"]


# =============================================================================
# Stored Models
# =============================================================================

class TargetAudience(BaseModel):
    """
    Who a notification is for.

    Only `custom` audiences use the filter lists; any populated list that
    matches the viewer makes the notification relevant.
    """
    model_config = ConfigDict(extra="ignore")

    type: AudienceType
    branches: Optional[List[str]] = None
    sections: Optional[List[str]] = None
    years: Optional[List[str]] = None
    groups: Optional[List[str]] = None  # Carried for older entries, never matched
    specificRoles: Optional[List[str]] = None


class PostedBy(BaseModel):
    """Sender snapshot taken at send time."""
    name: str
    role: str
    collegeId: str


class NotificationContent(BaseModel):
    """Fields supplied by the sender."""
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    message: str
    urgency: Urgency = "normal"
    category: Optional[Category] = None
    targetAudience: TargetAudience
    expiresAt: Optional[int] = None


class Notification(NotificationContent):
    """A stored notification."""
    id: str
    postedBy: PostedBy
    createdAt: int
    isRead: bool = False


# =============================================================================
# Request Schemas
# =============================================================================

class NotificationCreateRequest(NotificationContent):
    """POST /api/notifications request."""
    message: str = Field(..., min_length=1, max_length=2000)
    title: str = Field(default="", max_length=200)


# =============================================================================
# Response Schemas
# =============================================================================

class AlertItem(BaseModel):
    """One pending in-app alert (e.g. the login unread summary)."""
    title: str
    description: str


class NotificationsResponse(BaseModel):
    """GET /api/notifications response."""
    notifications: List[Notification]
    unreadCount: int
    storage: Literal["remote", "local"]
    alerts: List[AlertItem] = Field(default_factory=list)
    error: Optional[str] = None


class UnreadCountResponse(BaseModel):
    """GET /api/notifications/count response."""
    unread: int

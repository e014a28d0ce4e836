"""
Type definitions shared by the notification and assistant services.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any


@dataclass
class Viewer:
    """The authenticated person whose notifications are being computed."""
    uid: str
    role: str  # "student" | "faculty" | "admin"
    college_id: str = ""
    name: str = ""
    section: Optional[str] = None  # Explicit section overrides the one in college_id

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Viewer":
        """
        Build a viewer from verified token claims.

        Raises:
            ValueError: If the claims carry no role
        """
        role = claims.get("role")
        if not role:
            raise ValueError("Token has no role claim")

        return cls(
            uid=claims.get("uid") or claims.get("sub") or "",
            role=role,
            college_id=claims.get("collegeId") or "",
            name=claims.get("name") or "",
            section=claims.get("section") or None,
        )


@dataclass
class Suggestion:
    """A quick-reply suggestion offered by the assistant."""
    id: str
    text: str
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "text": self.text}
        if self.category:
            data["category"] = self.category
        return data


@dataclass
class ChatMessage:
    """A single message in an assistant conversation."""
    id: str
    content: str
    is_bot: bool
    timestamp: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "isBot": self.is_bot,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass
class AssistantReply:
    """What the assistant answered, from the endpoint or the offline responder."""
    content: str
    suggestions: List[Suggestion] = field(default_factory=list)
    navigation_target: Optional[Dict[str, str]] = None  # {"path", "description"}
    metadata: Dict[str, Any] = field(default_factory=dict)

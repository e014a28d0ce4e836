"""
Per-login state for a notification router.
"""

from dataclasses import dataclass


@dataclass
class LoginSession:
    """
    Tracks what a viewer has already been told during one login.

    The owner of the router calls reset_login_state() whenever the viewer
    signs in again.
    """
    has_shown_login_alert: bool = False
    previous_unread_count: int = 0

    def reset_login_state(self) -> None:
        self.has_shown_login_alert = False
        self.previous_unread_count = 0

    def claim_login_alert(self, unread_count: int) -> bool:
        """
        Record the latest unread count and decide whether to alert.

        Returns:
            True exactly once per login, the first time unread_count > 0
        """
        self.previous_unread_count = unread_count
        if self.has_shown_login_alert or unread_count <= 0:
            return False
        self.has_shown_login_alert = True
        return True

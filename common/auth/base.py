"""
Authentication provider contract.

Route dependencies only need one thing from an identity service: turn a
bearer token into verified claims. CampVerse reads `uid`, `role`,
`collegeId`, `section` and `name` from those claims.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class AuthProvider(ABC):
    """Verifies bearer tokens presented by the portal front-end."""

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Returns:
            Decoded claims, including `uid` and `sub`

        Raises:
            ValueError: If the token is invalid, expired, or revoked
        """
        pass

"""
Firebase Admin SDK authentication provider.

Verifies Firebase ID tokens issued to the portal front-end. Role and
college identity travel as custom claims set on the Firebase user
(`role`, `collegeId`, `section`, `name`).

Example:
    auth = FirebaseAuth(credentials_path="path/to/serviceAccount.json")

    # Verify ID token from client
    claims = await auth.verify_token(id_token)
    print(claims["uid"], claims.get("role"))
"""

import asyncio
from typing import Dict, Any, Optional

from firebase_admin import auth

from common.auth.base import AuthProvider
from common.firebase_app import get_firebase_app


class FirebaseAuth(AuthProvider):
    """
    Firebase Admin SDK authentication provider.

    Verifies ID tokens, rejecting revoked ones, and exposes the custom role
    claims set on each Firebase user.
    """

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        credentials_dict: Optional[Dict[str, Any]] = None,
        project_id: Optional[str] = None,
        database_url: Optional[str] = None,
    ):
        """
        Initialize Firebase auth provider.

        Args:
            credentials_path: Path to service account JSON file
            credentials_dict: Service account credentials as dict (alternative to path)
            project_id: Firebase project ID (optional, can be inferred from credentials)
            database_url: Realtime Database URL, forwarded to app initialization
        """
        self._app = get_firebase_app(
            credentials_path=credentials_path,
            credentials_dict=credentials_dict,
            project_id=project_id,
            database_url=database_url,
        )
        self._auth = auth

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Verify a Firebase ID token."""
        try:
            decoded = await asyncio.to_thread(
                self._auth.verify_id_token, token, self._app, check_revoked=True
            )
            # Add 'sub' field for compatibility with other providers
            decoded["sub"] = decoded.get("uid")
            return decoded
        except self._auth.RevokedIdTokenError:
            raise ValueError("Token has been revoked")
        except self._auth.ExpiredIdTokenError:
            raise ValueError("Token has expired")
        except self._auth.InvalidIdTokenError as e:
            raise ValueError(f"Invalid token: {e}")
        except Exception as e:
            raise ValueError(f"Token verification failed: {e}")


"""
Authentication module - Pluggable auth providers (Firebase).
"""

from common.auth.base import AuthProvider
from common.auth.firebase_auth import FirebaseAuth
from common.auth.dependencies import create_auth_dependency

__all__ = ["AuthProvider", "FirebaseAuth", "create_auth_dependency"]

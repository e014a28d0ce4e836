"""
Common library for reusable infrastructure components.

- database: Firebase Realtime Database connection, durable local key-value storage
- auth: Pluggable authentication (Firebase ID tokens)
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import RealtimeDatabase, LocalStorage
from common.auth import AuthProvider, FirebaseAuth, create_auth_dependency
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    ForbiddenException,
    ValidationException,
    ServiceUnavailableException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "RealtimeDatabase",
    "LocalStorage",
    # Auth
    "AuthProvider",
    "FirebaseAuth",
    "create_auth_dependency",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "ForbiddenException",
    "ValidationException",
    "ServiceUnavailableException",
    # Config
    "BaseAppSettings",
]

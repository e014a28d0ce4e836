"""
FastAPI authentication dependencies.

Provides factory functions to create auth dependencies that can be
injected into route handlers. Works with any AuthProvider implementation.

Example:
    from common.auth import FirebaseAuth, create_auth_dependency

    auth = FirebaseAuth()
    get_current_claims = create_auth_dependency(lambda: auth)

    @app.get("/profile")
    async def get_profile(claims: dict = Depends(get_current_claims)):
        return {"user_id": claims["uid"]}
"""

from typing import Any, Callable, Dict, Optional
from fastapi import Header

from common.auth.base import AuthProvider
from common.utils.exceptions import UnauthorizedException


def _extract_token(authorization: Optional[str], scheme: str) -> str:
    """Pull the bearer token out of an Authorization header value."""
    if not authorization:
        raise UnauthorizedException(
            message="Authentication required",
            code="AUTH_REQUIRED",
        )

    prefix = f"{scheme} "
    if not authorization.startswith(prefix):
        raise UnauthorizedException(
            message=f"Invalid authorization scheme. Expected: {scheme}",
            code="INVALID_AUTH_SCHEME",
        )

    token = authorization[len(prefix):]
    if not token:
        raise UnauthorizedException(message="Token is empty", code="EMPTY_TOKEN")

    return token


def create_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: Callable that returns the AuthProvider instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency function that returns the verified token claims
    """

    async def get_current_claims(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Dict[str, Any]:
        """
        Extract and verify token claims from the authorization header.

        Raises:
            UnauthorizedException: If token is missing, invalid, or expired
        """
        token = _extract_token(authorization, scheme)

        auth = get_auth_provider()
        try:
            payload = await auth.verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")

        if not (payload.get("sub") or payload.get("uid")):
            raise UnauthorizedException(
                message="Token missing user ID",
                code="INVALID_TOKEN",
            )

        return payload

    return get_current_claims


def create_optional_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create optional auth dependency.

    Unlike create_auth_dependency, this returns None instead of raising
    an exception when no valid token is provided. Used by the assistant
    endpoints, which also serve guests.

    Returns:
        A FastAPI dependency that returns token claims or None
    """

    async def get_optional_claims(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> Optional[Dict[str, Any]]:
        if not authorization:
            return None

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            return None

        token = authorization[len(prefix):]
        if not token:
            return None

        auth = get_auth_provider()
        try:
            return await auth.verify_token(token)
        except ValueError:
            return None

    return get_optional_claims

"""
Weekly Planner API - Bearer Token Forwarding.

Token validation belongs to the identity service. This dependency only
extracts the caller's bearer token so it can be forwarded on outbound
calls to the profile, recommendation and catalog services.
"""

from typing import Optional

from fastapi import Request, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials


class ForwardedBearer(HTTPBearer):
    """
    Optional bearer token extraction.

    Attributes:
        auto_error: Whether a missing token is an error.
    """

    def __init__(self, auto_error: bool = False):
        """
        Initialize ForwardedBearer.

        Args:
            auto_error: Whether to raise HTTPException when no token is sent.
        """
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> Optional[str]:
        """
        Read the bearer token from the Authorization header.

        Args:
            request: FastAPI request object.

        Returns:
            Optional[str]: Raw token, or None when absent.

        Raises:
            HTTPException: 403 if the scheme is not Bearer.
        """
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)

        if not credentials:
            return None

        if credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid authentication scheme"
            )

        return credentials.credentials


# Global instance for dependency injection
forwarded_bearer = ForwardedBearer()

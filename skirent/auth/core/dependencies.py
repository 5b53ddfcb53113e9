from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from skirent.auth.core.jwt_auth import jwt_manager, ADMIN_ROLE
from skirent.core.exceptions import AuthenticationError, AuthorizationError

# Security scheme for JWT tokens
jwt_security = HTTPBearer(
    scheme_name="JWT Token", description="Enter your JWT token", auto_error=False
)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(jwt_security),
) -> Dict[str, Any]:
    """Decoded token payload of the caller"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    return jwt_manager.decode_token(credentials.credentials)


async def require_admin(
    user: Dict[str, Any] = Depends(get_current_admin),
) -> Dict[str, Any]:
    if user.get("role") != ADMIN_ROLE:
        raise AuthorizationError(
            "Admin access required", {"role": user.get("role")}
        )
    return user

import logging

from fastapi import APIRouter, Depends, Request

from skirent.auth.core.dependencies import get_current_admin
from skirent.auth.core.jwt_auth import jwt_manager, ADMIN_ROLE
from skirent.auth.schemas.auth import AdminLogin, TokenResponse, TokenVerifyResponse
from skirent.core.exceptions import AuthenticationError
from skirent.core.limits import limiter
from skirent.core.logging_utils import log_business_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Admin Auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit("10/minute")
async def login(request: Request, credentials: AdminLogin):
    """
    Exchange admin credentials for a bearer token.

    - **username**: admin username
    - **password**: admin password
    """
    if not jwt_manager.verify_admin_credentials(
        credentials.username, credentials.password
    ):
        logger.warning(f"Failed admin login attempt for '{credentials.username}'")
        raise AuthenticationError("Invalid admin credentials")

    access_token = jwt_manager.create_access_token(credentials.username, ADMIN_ROLE)
    log_business_event("admin_logged_in", "admin", credentials.username)

    return TokenResponse(
        access_token=access_token,
        expires_in=jwt_manager.access_token_expire_minutes * 60,
        username=credentials.username,
        role=ADMIN_ROLE,
    )


@router.post("/verify", response_model=TokenVerifyResponse)
@limiter.limit("30/minute")
async def verify_token(request: Request, payload: dict = Depends(get_current_admin)):
    """Check the bearer token from the Authorization header"""
    return TokenVerifyResponse(
        valid=True,
        username=payload["sub"],
        role=payload["role"],
        expires_at=payload["exp"],
    )

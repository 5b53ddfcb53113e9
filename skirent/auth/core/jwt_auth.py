import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from skirent.core import config
from skirent.core.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
TOKEN_TYPE = "access_token"


class JWTManager:
    def __init__(self):
        self.secret_key = config.JWT_SECRET_KEY
        self.algorithm = config.JWT_ALGORITHM
        self.access_token_expire_minutes = config.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

        # Admin credentials from environment
        self.admin_username = config.ADMIN_USERNAME
        self.admin_password = config.ADMIN_PASSWORD

    def _require_secret(self) -> str:
        if not self.secret_key:
            raise ConfigurationError("JWT_SECRET_KEY", "JWT secret key is not configured")
        return self.secret_key

    def verify_admin_credentials(self, username: str, password: str) -> bool:
        """Constant-time check against the configured admin account"""
        if not self.admin_username or not self.admin_password:
            return False
        username_ok = hmac.compare_digest(
            username.encode("utf-8"), self.admin_username.encode("utf-8")
        )
        password_ok = hmac.compare_digest(
            password.encode("utf-8"), self.admin_password.encode("utf-8")
        )
        return username_ok and password_ok

    def create_access_token(
        self, subject: str, role: str = ADMIN_ROLE, extra_data: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Create JWT access token

        Args:
            subject: Admin username (stored as ``sub``)
            role: Token role, only ``admin`` is used by the back office
            extra_data: Additional claims

        Returns:
            JWT token string
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "role": role,
            "iat": now,
            "exp": now + timedelta(minutes=self.access_token_expire_minutes),
            "type": TOKEN_TYPE,
        }
        if extra_data:
            payload.update(extra_data)

        token = jwt.encode(payload, self._require_secret(), algorithm=self.algorithm)
        logger.info(f"JWT token created for {subject}, role: {role}")
        return token

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify JWT token

        Raises:
            AuthenticationError: token is invalid, expired or of the wrong type
        """
        try:
            payload = jwt.decode(
                token, self._require_secret(), algorithms=[self.algorithm]
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            logger.warning("Invalid JWT token provided")
            raise AuthenticationError("Invalid token")

        if payload.get("type") != TOKEN_TYPE:
            raise AuthenticationError("Invalid token type")

        return payload


jwt_manager = JWTManager()

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from src.config import Settings
from src.services.exceptions import TokenInvalidError


class AuthService:
    """베어러 토큰(JWT) 발급과 검증을 담당합니다."""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expires_in = timedelta(minutes=settings.access_token_expire_minutes)

    def issue_token(self, user_id: str, email: str) -> str:
        """
        사용자 식별자(sub)와 이메일 클레임을 담은 토큰을 발급합니다.

        Args:
            user_id: 토큰 주체가 될 사용자의 ID.
            email: 사용자의 이메일.

        Returns:
            서명된 JWT 문자열.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        토큰의 서명과 만료 시간을 검증하고, 유효하면 클레임을 반환합니다.

        Raises:
            TokenInvalidError: 토큰이 위조되었거나, 만료되었거나, 필요한 클레임이 없을 때.
        """
        try:
            claims = jwt.decode(
                token, self.secret, algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenInvalidError("Token has expired.")
        except jwt.PyJWTError:
            raise TokenInvalidError("Token not found or invalid.")
        return {"_id": claims["sub"], "email": claims.get("email")}

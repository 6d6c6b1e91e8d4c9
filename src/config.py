# src/config.py
import os
from dataclasses import dataclass


@dataclass
class Settings:
    """환경 변수에서 읽어오는 애플리케이션 설정."""

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///ticket_tracker.db")

    # JWT 서명 설정. 운영 환경에서는 반드시 JWT_SECRET을 지정해야 합니다.
    jwt_secret: str = os.getenv("JWT_SECRET", "change_me")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # 클라이언트 주소별 슬라이딩 윈도우 제한 (기본: 초당 100회)
    rate_limit: int = int(os.getenv("RATE_LIMIT", "100"))
    rate_limit_window_seconds: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "1.0"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    api_prefix: str = os.getenv("API_PREFIX", "")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")


# 모듈 import 시점에 한 번만 생성합니다. 환경 변수는 import 전에 설정되어 있어야 합니다.
settings = Settings()

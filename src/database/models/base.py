import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """저장소가 부여하는 불투명 식별자 (32자리 소문자 16진수)."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

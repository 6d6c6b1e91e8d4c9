# tests/factories.py
import uuid
from datetime import datetime, timedelta, timezone

from src.database import models

T0 = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


def make_project(minutes: int = 0, **fields) -> models.Project:
    """테스트용 프로젝트 모델. minutes는 T0 기준 생성 시각 오프셋입니다."""
    created = T0 + timedelta(minutes=minutes)
    values = dict(id=new_id(), title="Project", description="A project", created_at=created, updated_at=created)
    values.update(fields)
    return models.Project(**values)


def make_ticket(project_id: str, user_id: str = None, minutes: int = 0, **fields) -> models.Ticket:
    created = T0 + timedelta(minutes=minutes)
    values = dict(
        id=new_id(), title="Ticket", description="A ticket", priority="medium", status="open",
        project_id=project_id, user_id=user_id, created_at=created, updated_at=created,
    )
    values.update(fields)
    return models.Ticket(**values)


def make_user(minutes: int = 0, **fields) -> models.User:
    created = T0 + timedelta(minutes=minutes)
    values = dict(
        id=new_id(), name="Alice", email=f"{uuid.uuid4().hex[:8]}@example.com",
        password_hash="pbkdf2_sha256$1$salt$deadbeef", created_at=created, updated_at=created,
    )
    values.update(fields)
    return models.User(**values)

from sqlalchemy import Column, String, DateTime
from ..database import Base
from .base import generate_id, utcnow

class User(Base):
    """
    로그인하여 티켓을 담당할 수 있는 사용자를 나타냅니다.
    password_hash는 어떤 응답에도 포함되지 않습니다.
    """
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

from sqlalchemy import Column, String, DateTime, Index
from ..database import Base
from .base import generate_id, utcnow

PRIORITIES = ("low", "medium", "high", "critical")
STATUSES = ("open", "in-progress", "resolved", "closed")

class Ticket(Base):
    """
    프로젝트에 속한 작업 단위를 나타냅니다.
    project_id는 반드시 존재하는 프로젝트를 참조하고 (프로젝트 삭제 시 함께 삭제),
    user_id는 담당자에 대한 약한 참조입니다. (사용자 삭제 시 NULL로 해제)
    """
    __tablename__ = "tickets"
    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    priority = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="open", index=True)
    project_id = Column(String(32), nullable=False, index=True)
    user_id = Column(String(32), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_tickets_project_id_status", "project_id", "status"),
    )

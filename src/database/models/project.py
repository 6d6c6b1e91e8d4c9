from sqlalchemy import Column, String, DateTime
from ..database import Base
from .base import generate_id, utcnow

class Project(Base):
    """
    티켓을 묶는 작업 공간을 나타냅니다.
    티켓은 projectId로 프로젝트를 참조하며, 프로젝트 자체는 티켓을 내장하지 않습니다.
    """
    __tablename__ = "projects"
    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

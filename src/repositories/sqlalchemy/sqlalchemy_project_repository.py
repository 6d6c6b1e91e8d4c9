from typing import Any, Dict, Iterable, List, Optional
from src.database import models
from src.repositories.interfaces import IProjectRepository
from src.repositories.sqlalchemy.base import SqlalchemyRepository

class SqlalchemyProjectRepository(SqlalchemyRepository, IProjectRepository):
    def create(self, project_model: models.Project) -> models.Project:
        self.db.add(project_model)
        self._commit()
        self.db.refresh(project_model)
        return project_model

    def find_by_id(self, project_id: str) -> Optional[models.Project]:
        return self.db.query(models.Project).filter(models.Project.id == project_id).first()

    def list_all(self) -> List[models.Project]:
        return self.db.query(models.Project).order_by(models.Project.created_at.asc(), models.Project.id.asc()).all()

    def list_by_ids(self, project_ids: Iterable[str]) -> List[models.Project]:
        project_ids = list(project_ids)
        if not project_ids:
            return []
        return self.db.query(models.Project).filter(models.Project.id.in_(project_ids)).all()

    def update(self, project_id: str, fields: Dict[str, Any]) -> Optional[models.Project]:
        project = self.find_by_id(project_id)
        if not project:
            return None
        for key, value in fields.items():
            setattr(project, key, value)
        self._commit()
        self.db.refresh(project)
        return project

    def delete_with_tickets(self, project_id: str) -> Optional[int]:
        project = self.find_by_id(project_id)
        if not project:
            return None
        # 자식 티켓을 먼저 지우고 프로젝트를 지웁니다. commit은 한 번만 수행합니다.
        deleted_tickets = self.db.query(models.Ticket).filter(
            models.Ticket.project_id == project_id
        ).delete(synchronize_session=False)
        self.db.delete(project)
        self._commit()
        return deleted_tickets

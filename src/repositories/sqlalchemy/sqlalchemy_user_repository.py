from typing import Any, Dict, Iterable, List, Optional
from src.database import models
from src.repositories.interfaces import IUserRepository
from src.repositories.sqlalchemy.base import SqlalchemyRepository

class SqlalchemyUserRepository(SqlalchemyRepository, IUserRepository):
    def create(self, user_model: models.User) -> models.User:
        self.db.add(user_model)
        self._commit()
        self.db.refresh(user_model)
        return user_model

    def find_by_id(self, user_id: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def list_all(self) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.created_at.asc(), models.User.id.asc()).all()

    def list_by_ids(self, user_ids: Iterable[str]) -> List[models.User]:
        user_ids = list(user_ids)
        if not user_ids:
            return []
        return self.db.query(models.User).filter(models.User.id.in_(user_ids)).all()

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[models.User]:
        user = self.find_by_id(user_id)
        if not user:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        self._commit()
        self.db.refresh(user)
        return user

    def delete_and_unassign(self, user_id: str) -> Optional[int]:
        user = self.find_by_id(user_id)
        if not user:
            return None
        self.db.delete(user)
        unassigned = self.db.query(models.Ticket).filter(
            models.Ticket.user_id == user_id
        ).update({models.Ticket.user_id: None}, synchronize_session=False)
        self._commit()
        return unassigned

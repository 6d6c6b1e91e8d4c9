from typing import Any, Dict, Iterable, List, Optional
from src.database import models
from src.repositories.interfaces import ITicketRepository
from src.repositories.sqlalchemy.base import SqlalchemyRepository

class SqlalchemyTicketRepository(SqlalchemyRepository, ITicketRepository):
    def _ordered(self, query):
        return query.order_by(models.Ticket.created_at.asc(), models.Ticket.id.asc())

    def create(self, ticket_model: models.Ticket) -> models.Ticket:
        self.db.add(ticket_model)
        self._commit()
        self.db.refresh(ticket_model)
        return ticket_model

    def find_by_id(self, ticket_id: str) -> Optional[models.Ticket]:
        return self.db.query(models.Ticket).filter(models.Ticket.id == ticket_id).first()

    def list_all(self) -> List[models.Ticket]:
        return self._ordered(self.db.query(models.Ticket)).all()

    def list_by_project_id(self, project_id: str) -> List[models.Ticket]:
        return self._ordered(
            self.db.query(models.Ticket).filter(models.Ticket.project_id == project_id)
        ).all()

    def list_by_user_ids(self, user_ids: Iterable[str]) -> List[models.Ticket]:
        user_ids = list(user_ids)
        if not user_ids:
            return []
        return self._ordered(
            self.db.query(models.Ticket).filter(models.Ticket.user_id.in_(user_ids))
        ).all()

    def update(self, ticket_id: str, fields: Dict[str, Any], unassign: bool = False) -> Optional[models.Ticket]:
        ticket = self.find_by_id(ticket_id)
        if not ticket:
            return None
        for key, value in fields.items():
            setattr(ticket, key, value)
        if unassign:
            ticket.user_id = None
        self._commit()
        self.db.refresh(ticket)
        return ticket

    def delete(self, ticket_id: str) -> bool:
        deleted = self.db.query(models.Ticket).filter(
            models.Ticket.id == ticket_id
        ).delete(synchronize_session=False)
        self._commit()
        return deleted > 0

from .sqlalchemy_project_repository import SqlalchemyProjectRepository
from .sqlalchemy_ticket_repository import SqlalchemyTicketRepository
from .sqlalchemy_user_repository import SqlalchemyUserRepository

__all__ = ["SqlalchemyProjectRepository", "SqlalchemyTicketRepository", "SqlalchemyUserRepository"]

from .project import IProjectRepository
from .ticket import ITicketRepository
from .user import IUserRepository

__all__ = ["IProjectRepository", "ITicketRepository", "IUserRepository"]

from .project import ProjectCreate, ProjectUpdate
from .ticket import TicketCreate, TicketUpdate
from .user import UserCreate, UserUpdate, LoginRequest

__all__ = [
    "ProjectCreate", "ProjectUpdate",
    "TicketCreate", "TicketUpdate",
    "UserCreate", "UserUpdate", "LoginRequest",
]

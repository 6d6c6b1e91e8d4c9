from .project import Project
from .ticket import Ticket, PRIORITIES, STATUSES
from .user import User

__all__ = ["Project", "Ticket", "User", "PRIORITIES", "STATUSES"]

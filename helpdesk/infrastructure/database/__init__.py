# Database
from helpdesk.infrastructure.database.base import Base, Database
from helpdesk.infrastructure.database.models import UserModel, TicketModel, CommentModel

__all__ = ["Base", "Database", "UserModel", "TicketModel", "CommentModel"]

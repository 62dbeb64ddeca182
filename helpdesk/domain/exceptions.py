"""Domain errors

Use cases raise these; the API layer maps each one to its HTTP status.
They subclass ValueError so callers that only care about "bad request"
can keep catching ValueError.
"""
from typing import Dict, List, Optional


class HelpdeskError(ValueError):
    """Base class for helpdesk domain errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HelpdeskError):
    """Malformed, missing or out-of-range input"""

    def __init__(self, message: str, issues: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.issues = issues or {}


class NotFoundError(HelpdeskError):
    """Unknown identifier"""


class UnauthorizedError(HelpdeskError):
    """No verified caller"""


class ForbiddenError(HelpdeskError):
    """Caller lacks the role or ownership required"""


class ConflictError(HelpdeskError):
    """Uniqueness violation, e.g. duplicate email"""


class TicketReadOnlyError(HelpdeskError):
    """Edit attempted on an archived ticket"""

    def __init__(self, message: str = "Ticket is archived and read-only"):
        super().__init__(message)

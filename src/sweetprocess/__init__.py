"""SweetProcess API client module."""

from .client import SweetProcessAPIError, SweetProcessClient
from .models import Invitation, NewUser, ProcedureFilter, TaskInstanceFilter, UserFilter

__all__ = [
    "SweetProcessClient",
    "SweetProcessAPIError",
    "ProcedureFilter",
    "TaskInstanceFilter",
    "UserFilter",
    "NewUser",
    "Invitation",
]

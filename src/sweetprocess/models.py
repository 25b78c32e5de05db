"""
SweetProcess request models.

Filters map Python field names onto the query parameter names the API
expects. Payload models build JSON request bodies. Response bodies are
owned by the remote service and are returned as decoded JSON, unmodelled.
"""

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Optional, Sequence, Union

DateLike = Union[str, date, datetime]
IdList = Union[int, str, Sequence[Union[int, str]]]


def _format_value(value) -> str:
    """Render a filter value the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(_format_value(v) for v in value)
    # Sets have no order; sort so the query string is stable
    if isinstance(value, (set, frozenset)):
        return ",".join(sorted(_format_value(v) for v in value))
    return str(value)


class _QueryFilter:
    """
    Mixin for filter dataclasses.

    Subclasses may set PARAM_NAMES to rename a field on the wire;
    fields not listed are sent under their own name.
    """

    PARAM_NAMES: dict[str, str] = {}

    def to_params(self) -> dict[str, str]:
        """Build query parameters, omitting every unset field."""
        params = {}
        for f in fields(self):
            value = getattr(self, f.name)
            # Unset filters are omitted, never sent as "None"
            if value is None:
                continue
            params[self.PARAM_NAMES.get(f.name, f.name)] = _format_value(value)
        return params


@dataclass(frozen=True)
class ProcedureFilter(_QueryFilter):
    """
    Filters for listing procedures.

    Attributes:
        team_id: Only procedures within this team
        search: Free-text search
        tag: Tag, or several tags (comma-joined on the wire)
        policy_id: Only procedures with this policy attached
        visible_to_user: Only procedures both you and this user can see
        ordering: Field to order by
    """
    team_id: Optional[int] = None
    search: Optional[str] = None
    tag: Optional[Union[str, Sequence[str]]] = None
    policy_id: Optional[int] = None
    visible_to_user: Optional[int] = None
    ordering: Optional[str] = None


@dataclass(frozen=True)
class TaskInstanceFilter(_QueryFilter):
    """
    Filters for listing task instances.

    Attributes:
        template_id: Only instances of this task template
        user: Assignee, referenced by the user's API URL
        content_type: Type of the linked document
        object_id: ID of the linked document
        completed: Completion flag
        due_lte: Due on or before this date (ISO-8601)
        due_gte: Due on or after this date (ISO-8601)
    """
    PARAM_NAMES = {"due_lte": "due__lte", "due_gte": "due__gte"}

    template_id: Optional[int] = None
    user: Optional[str] = None
    content_type: Optional[str] = None
    object_id: Optional[int] = None
    completed: Optional[bool] = None
    due_lte: Optional[DateLike] = None
    due_gte: Optional[DateLike] = None


@dataclass(frozen=True)
class UserFilter(_QueryFilter):
    """
    Filters for listing users.

    Attributes:
        team_id: Only members of this team
        exclude_team_id: Exclude members of this team
        id: Only users with this ID (or IDs)
        exclude_id: Exclude users with this ID (or IDs)
        status: One or more statuses to match
    """
    team_id: Optional[int] = None
    exclude_team_id: Optional[int] = None
    id: Optional[IdList] = None
    exclude_id: Optional[IdList] = None
    status: Optional[Union[str, Sequence[str]]] = None


@dataclass(frozen=True)
class NewUser:
    """A user to invite into the SweetProcess account."""
    name: str
    email: str
    is_super_manager: bool = False

    def to_api_payload(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "is_super_manager": bool(self.is_super_manager),
        }


@dataclass(frozen=True)
class Invitation:
    """
    A grant of permission over an object to a user.

    Attributes:
        send_mail: Whether the user is notified by email
        content_type: Type of the target object (e.g. "team")
        permission: Permission level (e.g. "view")
        object_id: ID of the target object
        to_user_id: API URL of the invited user
    """
    send_mail: bool
    content_type: str
    permission: str
    object_id: int
    to_user_id: str

    def to_api_payload(self) -> dict:
        """Create the JSON object for a single invitation."""
        return {
            "send_mail": bool(self.send_mail),
            "content_type": self.content_type,
            "permission": self.permission,
            "object_id": self.object_id,
            "to_user_id": self.to_user_id,
        }

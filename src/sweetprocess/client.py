"""
SweetProcess API client.

Wraps the SweetProcess REST API: procedures, task instances, users,
invitations and team memberships. Each method issues exactly one request.
The API token is passed via configuration and never logged.
"""

import logging
from typing import Any, Optional, Union

import requests

from config.settings import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, SweetProcessConfig

from .models import (
    Invitation,
    NewUser,
    ProcedureFilter,
    TaskInstanceFilter,
    UserFilter,
)

logger = logging.getLogger(__name__)

JSON = Union[dict, list, None]


def _is_success(status_code: int) -> bool:
    """Check for a 2xx status."""
    return 200 <= status_code < 300


class SweetProcessAPIError(Exception):
    """Raised when a SweetProcess request fails or returns a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SweetProcessClient:
    """
    Client for the SweetProcess API.

    The token and headers are fixed at construction and reused for every
    call. There is no retry, pagination or caching: list methods return
    whatever JSON document the API sends back.

    Usage:
        with SweetProcessClient(api_token="...") as client:
            procedures = client.get_procedures(team_id=1, search="onboarding")
            status = client.delete_team_user(3)
    """

    PROCEDURES_ENDPOINT = "/procedures/"
    TASK_INSTANCES_ENDPOINT = "/taskinstances/"
    USERS_ENDPOINT = "/users/"
    USER_ENDPOINT = "/users/{user_id}/"
    INVITATIONS_ENDPOINT = "/invitations/"
    TEAM_USER_ENDPOINT = "/teamusers/{team_user_id}/"

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize SweetProcess client.

        Args:
            api_token: SweetProcess API token (never logged)
            base_url: Versioned API root
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If the token is missing
        """
        # Validates the token; private, never logged
        self._config = SweetProcessConfig(
            api_token=api_token,
            base_url=base_url,
            timeout=timeout,
        )

        # Set default headers once for every request
        self._session = requests.Session()
        self._session.headers.update(self._config.headers)

        logger.info(f"SweetProcess client initialized for {self._config.base_url}")

    @classmethod
    def from_config(cls, config: SweetProcessConfig) -> "SweetProcessClient":
        """Create a client from loaded settings."""
        return cls(
            api_token=config.api_token,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def config(self) -> SweetProcessConfig:
        return self._config

    def __repr__(self) -> str:
        """Never expose token in repr."""
        return f"SweetProcessClient(base_url='{self._config.base_url}')"

    def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        data: Any = None,
    ) -> requests.Response:
        """
        Send one request and return the raw response.

        Raises:
            SweetProcessAPIError: If the request could not be performed
        """
        url = f"{self._config.base_url}{endpoint}"
        logger.debug(f"{method} {endpoint} params={params}")

        try:
            return self._session.request(
                method=method,
                url=url,
                params=params,
                json=data,
                timeout=self._config.timeout,
            )
        except requests.exceptions.RequestException as e:
            error_msg = f"SweetProcess request failed: {e}"
            logger.error(error_msg)
            raise SweetProcessAPIError(error_msg) from e

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        data: Any = None,
    ) -> JSON:
        """
        Make a request whose response body is the result.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            params: Query parameters
            data: JSON request body

        Returns:
            Decoded JSON response, or None for an empty body

        Raises:
            SweetProcessAPIError: On transport failure or non-success status
        """
        response = self._send(method, endpoint, params=params, data=data)

        # Only 2xx is success; raise_for_status lets 1xx/3xx through
        if not _is_success(response.status_code):
            error_msg = f"SweetProcess API error: status {response.status_code}"
            logger.error(f"{error_msg} ({method} {endpoint})")
            raise SweetProcessAPIError(error_msg, status_code=response.status_code)

        # Handle 204 No Content
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            error_msg = f"SweetProcess API returned invalid JSON: {e}"
            logger.error(error_msg)
            raise SweetProcessAPIError(error_msg, status_code=response.status_code) from e

    def _make_status_request(self, method: str, endpoint: str) -> int:
        """Make a request and return its status code without raising on it."""
        response = self._send(method, endpoint)

        # The caller interprets the status; log failures only
        if not _is_success(response.status_code):
            logger.warning(f"{method} {endpoint} returned status {response.status_code}")
        return response.status_code

    @staticmethod
    def _resolve_filter(filter_cls, filters, kwargs):
        if filters is not None and kwargs:
            raise TypeError("Pass either a filter object or keyword filters, not both")
        if filters is None:
            filters = filter_cls(**kwargs)
        return filters.to_params()

    # ============================================================
    # Procedures and tasks
    # ============================================================

    def get_procedures(
        self,
        filters: Optional[ProcedureFilter] = None,
        **kwargs: Any,
    ) -> JSON:
        """
        List procedures.

        Args:
            filters: ProcedureFilter, or pass its fields as keyword arguments

        Returns:
            Decoded JSON response
        """
        params = self._resolve_filter(ProcedureFilter, filters, kwargs)
        return self._make_request("GET", self.PROCEDURES_ENDPOINT, params=params)

    def get_task_instances(
        self,
        filters: Optional[TaskInstanceFilter] = None,
        **kwargs: Any,
    ) -> JSON:
        """
        List task instances.

        Args:
            filters: TaskInstanceFilter, or pass its fields as keyword arguments

        Returns:
            Decoded JSON response
        """
        params = self._resolve_filter(TaskInstanceFilter, filters, kwargs)
        return self._make_request("GET", self.TASK_INSTANCES_ENDPOINT, params=params)

    # ============================================================
    # Users
    # ============================================================

    def get_users(
        self,
        filters: Optional[UserFilter] = None,
        **kwargs: Any,
    ) -> JSON:
        """
        List users.

        Args:
            filters: UserFilter, or pass its fields as keyword arguments

        Returns:
            Decoded JSON response
        """
        params = self._resolve_filter(UserFilter, filters, kwargs)
        return self._make_request("GET", self.USERS_ENDPOINT, params=params)

    def invite_user(self, name: str, email: str, is_super_manager: bool = False) -> JSON:
        """
        Invite a new user to the account.

        Args:
            name: Display name
            email: Email address
            is_super_manager: Grant super manager privileges

        Returns:
            The invited user as returned by the API
        """
        logger.info("Inviting user")
        user = NewUser(name=name, email=email, is_super_manager=is_super_manager)
        return self._make_request("POST", self.USERS_ENDPOINT, data=user.to_api_payload())

    def update_user(self, user_id: int, data: dict) -> JSON:
        """
        Partially update a user.

        Args:
            user_id: ID of the user
            data: Fields to change

        Returns:
            The updated user as returned by the API
        """
        logger.info(f"Updating user {user_id}: {list(data.keys())}")
        endpoint = self.USER_ENDPOINT.format(user_id=user_id)
        return self._make_request("PATCH", endpoint, data=data)

    def delete_user(self, user_id: int) -> int:
        """
        Delete a user.

        Returns:
            HTTP status code (204 on success); never raises on status
        """
        logger.info(f"Deleting user {user_id}")
        endpoint = self.USER_ENDPOINT.format(user_id=user_id)
        return self._make_status_request("DELETE", endpoint)

    # ============================================================
    # Invitations and team membership
    # ============================================================

    def create_invitation(
        self,
        send_mail: bool,
        content_type: str,
        permission: str,
        object_id: int,
        to_user_id: str,
    ) -> JSON:
        """
        Create an invitation granting a user permission over an object.

        The API takes a list of invitations; one is sent per call.

        Args:
            send_mail: Notify the user by email
            content_type: Target type (e.g. "team")
            permission: Permission level (e.g. "view")
            object_id: Target object ID
            to_user_id: API URL of the invited user

        Returns:
            The created invitation(s) as returned by the API
        """
        invitation = Invitation(
            send_mail=send_mail,
            content_type=content_type,
            permission=permission,
            object_id=object_id,
            to_user_id=to_user_id,
        )
        logger.info(f"Creating {permission} invitation for {content_type} {object_id}")
        return self._make_request(
            "POST",
            self.INVITATIONS_ENDPOINT,
            data=[invitation.to_api_payload()],
        )

    def delete_team_user(self, team_user_id: int) -> int:
        """
        Remove a user from a team.

        Returns:
            HTTP status code (204 on success); never raises on status
        """
        logger.info(f"Deleting team user {team_user_id}")
        endpoint = self.TEAM_USER_ENDPOINT.format(team_user_id=team_user_id)
        return self._make_status_request("DELETE", endpoint)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
        logger.debug("SweetProcess client session closed")

    def __enter__(self) -> "SweetProcessClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

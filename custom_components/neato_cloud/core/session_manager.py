from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from .config import NeatoCloudConfig
from .credentials import CredentialProvider
from .crypto import generate_bootstrap_token
from .models import Map, MapsResult, Robot, Session, SessionGrant, User

_LOGGER = logging.getLogger(__name__)

_ROBOT_LIST = TypeAdapter(list[Robot])
_MAP_LIST = TypeAdapter(list[Map])


class BeehiveSessionManager:
    """Creates and refreshes sessions with the Neato Beehive API."""

    def __init__(
        self,
        credentials: CredentialProvider,
        config: NeatoCloudConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            credentials: Backend queried for the username and password on
            every acquire and refresh.
            config: Hosts and media types. Defaults to the production API.
            transport: Optional transport for the HTTP clients this manager
            creates, used to stub the network in tests.
        """
        self._credentials = credentials
        self._config = config or NeatoCloudConfig()
        self._transport = transport

    @property
    def config(self) -> NeatoCloudConfig:
        """Get the API configuration."""
        return self._config

    def _new_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._config.beehive_url,
            timeout=self._config.timeout,
            transport=self._transport,
        )

    def _session_params(self) -> dict[str, str]:
        """Build the query of a session-creation call.

        A fresh bootstrap token is generated for every call. The server binds
        the access token it issues to it.
        """
        token = generate_bootstrap_token(self._config.token_length)
        credentials = self._credentials.lookup()
        return {
            "platform": self._config.platform,
            "token": token,
            "email": credentials.username,
            "password": credentials.password.get_secret_value(),
        }

    def _request_grant(self, client: httpx.Client) -> SessionGrant:
        params = self._session_params()
        _LOGGER.debug("Requesting Beehive session for %s", params["email"])
        resp = client.post(
            "sessions",
            params=params,
            headers={"Accept": self._config.beehive_accept},
        )
        resp.raise_for_status()
        return SessionGrant.model_validate(resp.json())

    def acquire(self) -> Session:
        """Create a new session bound to a new HTTP client.

        Returns:
            The authenticated session.
        """
        client = self._new_client()
        try:
            grant = self._request_grant(client)
        except Exception:
            client.close()
            raise
        _LOGGER.info("Beehive session created at %s", grant.current_time)
        return Session(
            access_token=grant.access_token,
            current_time=grant.current_time,
            client=client,
        )

    def refresh(self, session: Session) -> None:
        """Replace a session's access token, reusing its HTTP client.

        Args:
            session: The session to update in place.
        """
        grant = self._request_grant(session.client)
        session.apply_grant(grant)
        _LOGGER.info("Beehive session refreshed at %s", grant.current_time)

    # --- AUTHENTICATED CALLS ---

    def _get(self, session: Session, path: str) -> Any:
        """GET a Beehive resource with the session's bearer credentials."""
        _LOGGER.debug("GET %s", path)
        resp = session.client.get(
            path,
            headers={
                "Accept": self._config.beehive_accept,
                "Authorization": session.bearer(),
            },
        )
        resp.raise_for_status()
        return resp.json()

    def get_user(self, session: Session) -> User:
        """Get the user that owns the session."""
        return User.model_validate(self._get(session, "users/me"))

    def list_robots(self, session: Session) -> list[Robot]:
        """List the robots linked to the account."""
        return _ROBOT_LIST.validate_python(self._get(session, "users/me/robots"))

    def list_robot_maps(self, session: Session, serial: str) -> MapsResult:
        """List the cleaning maps of a robot."""
        return MapsResult.model_validate(
            self._get(session, f"users/me/robots/{serial}/maps")
        )

    def get_robot_map(self, session: Session, serial: str, map_id: str) -> Map:
        """Get a single cleaning map of a robot."""
        return Map.model_validate(
            self._get(session, f"users/me/robots/{serial}/maps/{map_id}")
        )

    def list_robot_persistent_maps(self, session: Session, serial: str) -> list[Map]:
        """List the persistent (floor plan) maps of a robot."""
        return _MAP_LIST.validate_python(
            self._get(session, f"users/me/robots/{serial}/persistent_maps")
        )

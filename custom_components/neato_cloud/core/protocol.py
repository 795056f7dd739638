from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from datetime import datetime, timezone
from email.utils import format_datetime

import httpx

from .config import NeatoCloudConfig
from .crypto import compute_hmac_sha256, generate_request_id
from .exceptions import RequestIdMismatchError
from .models import CommandEnvelope, CommandResponse, Params, Robot

_LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a time as an RFC 1123 date, e.g. ``Mon, 02 Jan 2006 15:04:05 GMT``."""
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


class NucleoSigner:
    """Signs Nucleo requests with a robot's secret key."""

    def __init__(
        self,
        config: NeatoCloudConfig | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the signer.

        Args:
            config: Supplies the Nucleo media type.
            clock: Returns the current time; replaced in tests.
        """
        self._config = config or NeatoCloudConfig()
        self._clock = clock

    @staticmethod
    def build_signing_string(
        robot: Robot, envelope: CommandEnvelope, timestamp: str
    ) -> str:
        """Build the string covered by the signature.

        The serial is lowercased here even though request paths use it as
        listed by Beehive; the relay verifies against the lowercase form.
        """
        body = envelope.serialize().decode("utf-8")
        return f"{robot.serial.lower()}\n{timestamp}\n{body}"

    def sign(self, robot: Robot, envelope: CommandEnvelope, timestamp: str) -> bytes:
        """Compute the raw HMAC-SHA256 signature of a command."""
        signing_string = self.build_signing_string(robot, envelope, timestamp)
        return compute_hmac_sha256(
            robot.secret_key.get_secret_value().encode("utf-8"),
            signing_string.encode("utf-8"),
        )

    def attach_auth_headers(
        self,
        headers: MutableMapping[str, str],
        robot: Robot,
        envelope: CommandEnvelope,
    ) -> None:
        """Set ``Accept``, ``Date`` and ``Authorization`` on a request.

        The ``Date`` header and the signature use the same timestamp.
        """
        timestamp = format_timestamp(self._clock())
        headers["Accept"] = self._config.nucleo_accept
        headers["Date"] = timestamp
        headers["Authorization"] = (
            f"NEATOAPP {self.sign(robot, envelope, timestamp).hex()}"
        )


class NucleoProtocol:
    """Builds, signs and dispatches commands to robots through Nucleo."""

    def __init__(
        self,
        config: NeatoCloudConfig | None = None,
        client: httpx.Client | None = None,
        signer: NucleoSigner | None = None,
    ) -> None:
        """Initialize the protocol handler.

        Args:
            config: Hosts, vendor and request id length.
            client: HTTP client to send commands with. A new one is created
            when omitted.
            signer: Request signer. Defaults to one using the wall clock.
        """
        self._config = config or NeatoCloudConfig()
        self._client = client or httpx.Client(
            base_url=self._config.nucleo_url, timeout=self._config.timeout
        )
        self._signer = signer or NucleoSigner(self._config)

    @property
    def signer(self) -> NucleoSigner:
        """Get the request signer."""
        return self._signer

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def new_command(self, cmd: str, params: Params | None = None) -> CommandEnvelope:
        """Create a command envelope with a fresh request id."""
        return CommandEnvelope(
            req_id=generate_request_id(self._config.request_id_length),
            cmd=cmd,
            params=params,
        )

    def dispatch(self, robot: Robot, envelope: CommandEnvelope) -> CommandResponse:
        """Send a command and return the robot's response.

        Args:
            robot: The addressed robot.
            envelope: The command to send.

        Returns:
            The decoded response.

        Raises:
            RequestIdMismatchError: If the response answers a different request.
        """
        body = envelope.serialize()
        headers: dict[str, str] = {"Content-Type": "application/json"}
        self._signer.attach_auth_headers(headers, robot, envelope)

        path = f"vendors/{self._config.vendor}/robots/{robot.serial}/messages"
        _LOGGER.debug("Sending %s to %s (reqId %s)", envelope.cmd, path, envelope.req_id)
        resp = self._client.post(path, content=body, headers=headers)
        resp.raise_for_status()
        response = CommandResponse.model_validate(resp.json())

        if response.req_id != envelope.req_id:
            raise RequestIdMismatchError(envelope.req_id, response.req_id)
        return response

    def _send(
        self, robot: Robot, cmd: str, params: Params | None = None
    ) -> CommandResponse:
        return self.dispatch(robot, self.new_command(cmd, params))

    # --- ROBOT COMMANDS ---

    def find_me(self, robot: Robot, params: Params | None = None) -> CommandResponse:
        """Make the robot emit an audible alert."""
        return self._send(robot, "findMe", params)

    def get_robot_state(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get the robot's state, charge and available commands."""
        return self._send(robot, "getRobotState", params)

    def get_general_info(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get model, firmware and battery information."""
        return self._send(robot, "getGeneralInfo", params)

    def get_robot_info(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get hardware information about the robot."""
        return self._send(robot, "getRobotInfo", params)

    def get_local_stats(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get cleaning statistics stored on the robot."""
        return self._send(robot, "getLocalStats", params)

    def get_robot_manual_cleaning_info(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get the connection details for manual cleaning."""
        return self._send(robot, "getRobotManualCleaningInfo", params)

    def start_cleaning(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Start a cleaning run with the given category, mode and modifier."""
        return self._send(robot, "startCleaning", params)

    def stop_cleaning(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Stop the current cleaning run."""
        return self._send(robot, "stopCleaning", params)

    def pause_cleaning(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Pause the current cleaning run."""
        return self._send(robot, "pauseCleaning", params)

    def resume_cleaning(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Resume a paused cleaning run."""
        return self._send(robot, "resumeCleaning", params)

    def send_to_base(self, robot: Robot, params: Params | None = None) -> CommandResponse:
        """Send the robot back to its charging base."""
        return self._send(robot, "sendToBase", params)

    def get_map_boundaries(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get the boundaries of a persistent map."""
        return self._send(robot, "getMapBoundaries", params)

    def set_map_boundaries(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Set the boundaries of a persistent map."""
        return self._send(robot, "setMapBoundaries", params)

    def start_persistent_map_exploration(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Send the robot on an exploration run to build a new map."""
        return self._send(robot, "startPersistentMapExploration", params)

    def get_preferences(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Get the robot's preferences."""
        return self._send(robot, "getPreferences", params)

    def set_preferences(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Set the robot's preferences."""
        return self._send(robot, "setPreferences", params)

    def get_schedule(self, robot: Robot, params: Params | None = None) -> CommandResponse:
        """Get the robot's cleaning schedule."""
        return self._send(robot, "getSchedule", params)

    def set_schedule(self, robot: Robot, params: Params | None = None) -> CommandResponse:
        """Replace the robot's cleaning schedule."""
        return self._send(robot, "setSchedule", params)

    def enable_schedule(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Enable the robot's cleaning schedule."""
        return self._send(robot, "enableSchedule", params)

    def disable_schedule(
        self, robot: Robot, params: Params | None = None
    ) -> CommandResponse:
        """Disable the robot's cleaning schedule."""
        return self._send(robot, "disableSchedule", params)

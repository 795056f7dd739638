"""DataUpdateCoordinator for Neato Cloud integration."""

from __future__ import annotations

import logging

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .const import SCAN_INTERVAL
from .core.exceptions import NeatoCloudError
from .core.models import CommandResponse, Params, Robot
from .core.protocol import NucleoProtocol

_LOGGER = logging.getLogger(__name__)

# Transport, integrity and decode failures (JSONDecodeError, ValidationError)
COMMAND_ERRORS = (httpx.HTTPError, NeatoCloudError, ValueError)


def robot_label(robot: Robot) -> str:
    """Name used for a robot in logs and error messages."""
    return robot.name or robot.serial


def fetch_robot_states(
    protocol: NucleoProtocol, robots: list[Robot]
) -> dict[str, CommandResponse]:
    """Get the state of each robot, skipping robots that fail.

    Blocking; run it in the executor.
    """
    states: dict[str, CommandResponse] = {}
    for robot in robots:
        try:
            states[robot.serial] = protocol.get_robot_state(robot)
        except COMMAND_ERRORS as err:
            _LOGGER.warning("Error polling robot %s: %s", robot_label(robot), err)
    return states


class NeatoCloudDataUpdateCoordinator(DataUpdateCoordinator[dict[str, CommandResponse]]):
    """Polls the state of every robot on the account through Nucleo."""

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        protocol: NucleoProtocol,
        robots: list[Robot],
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name="Neato Cloud robots",
            update_interval=SCAN_INTERVAL,
        )
        self.protocol = protocol
        self.robots = robots

    async def _async_update_data(self) -> dict[str, CommandResponse]:
        """Fetch data from the robots."""
        states = await self.hass.async_add_executor_job(
            fetch_robot_states, self.protocol, self.robots
        )
        if self.robots and not states:
            raise UpdateFailed("Failed to get the state of any Neato robot")
        return states

    async def async_send_command(
        self, robot: Robot, command: str, params: Params | None = None
    ) -> CommandResponse:
        """Send a command to a robot.

        Args:
            robot: The addressed robot.
            command: Name of a ``NucleoProtocol`` command method.
            params: Optional command parameters.
        """
        method = getattr(self.protocol, command)
        _LOGGER.debug("Sending %s to %s", command, robot_label(robot))
        try:
            return await self.hass.async_add_executor_job(method, robot, params)
        except COMMAND_ERRORS as err:
            raise HomeAssistantError(
                f"Failed to send {command} to {robot_label(robot)}: {err}"
            ) from err

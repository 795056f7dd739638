"""Switch platform for Neato Cloud integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.switch import (
    SwitchDeviceClass,
    SwitchEntity,
    SwitchEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import NeatoCloudDataUpdateCoordinator
from .entity import NeatoRobotEntity

SWITCH_TYPES: tuple[SwitchEntityDescription, ...] = (
    SwitchEntityDescription(
        key="schedule",
        name="Schedule",
        device_class=SwitchDeviceClass.SWITCH,
        icon="mdi:calendar-clock",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Neato switches from a config entry."""
    coordinator: NeatoCloudDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]

    async_add_entities(
        NeatoSwitch(coordinator, robot, description)
        for robot in coordinator.robots
        for description in SWITCH_TYPES
    )


class NeatoSwitch(NeatoRobotEntity, SwitchEntity):
    """Implementation of a Neato robot switch."""

    entity_description: SwitchEntityDescription

    @property
    def is_on(self) -> bool | None:
        """Return true if the switch is on."""
        state = self.robot_state
        if self.entity_description.key == "schedule":
            if state is None or state.details is None:
                return None
            return state.details.is_schedule_enabled

        return None

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the switch on."""
        if self.entity_description.key == "schedule":
            await self.coordinator.async_send_command(self.robot, "enable_schedule")

        await self.coordinator.async_request_refresh()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the switch off."""
        if self.entity_description.key == "schedule":
            await self.coordinator.async_send_command(self.robot, "disable_schedule")

        await self.coordinator.async_request_refresh()

"""Binary sensor platform for Neato Cloud integration."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
    BinarySensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import NeatoCloudDataUpdateCoordinator
from .entity import NeatoRobotEntity

BINARY_SENSOR_TYPES: tuple[BinarySensorEntityDescription, ...] = (
    BinarySensorEntityDescription(
        key="is_charging",
        name="Charging",
        device_class=BinarySensorDeviceClass.BATTERY_CHARGING,
    ),
    BinarySensorEntityDescription(
        key="is_docked",
        name="Docked",
        device_class=BinarySensorDeviceClass.PLUG,
    ),
    BinarySensorEntityDescription(
        key="dock_has_been_seen",
        name="Dock Seen",
        icon="mdi:home-search",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Neato binary sensors from a config entry."""
    coordinator: NeatoCloudDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]

    async_add_entities(
        NeatoBinarySensor(coordinator, robot, description)
        for robot in coordinator.robots
        for description in BINARY_SENSOR_TYPES
    )


class NeatoBinarySensor(NeatoRobotEntity, BinarySensorEntity):
    """Implementation of a Neato robot binary sensor."""

    entity_description: BinarySensorEntityDescription

    @property
    def is_on(self) -> bool | None:
        """Return true if the binary sensor is on."""
        state = self.robot_state
        if state is None or state.details is None:
            return None
        # Keys match the attribute names of Details
        return getattr(state.details, self.entity_description.key)

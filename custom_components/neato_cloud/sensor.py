"""Sensor platform for Neato Cloud integration."""

from __future__ import annotations

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, STATE_BUSY, STATE_ERROR, STATE_IDLE, STATE_PAUSED
from .coordinator import NeatoCloudDataUpdateCoordinator
from .entity import NeatoRobotEntity

ROBOT_STATES: dict[int, str] = {
    STATE_IDLE: "idle",
    STATE_BUSY: "busy",
    STATE_PAUSED: "paused",
    STATE_ERROR: "error",
}

SENSOR_TYPES: tuple[SensorEntityDescription, ...] = (
    SensorEntityDescription(
        key="battery_level",
        name="Battery Level",
        native_unit_of_measurement=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorEntityDescription(
        key="status",
        name="Status",
        device_class=SensorDeviceClass.ENUM,
        options=list(ROBOT_STATES.values()),
        icon="mdi:robot-vacuum",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Neato sensors from a config entry."""
    coordinator: NeatoCloudDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]

    async_add_entities(
        NeatoSensor(coordinator, robot, description)
        for robot in coordinator.robots
        for description in SENSOR_TYPES
    )


class NeatoSensor(NeatoRobotEntity, SensorEntity):
    """Implementation of a Neato robot sensor."""

    entity_description: SensorEntityDescription

    @property
    def native_value(self) -> int | str | None:
        """Return the state of the sensor."""
        state = self.robot_state
        if state is None:
            return None

        if self.entity_description.key == "battery_level":
            return state.details.charge if state.details else None

        if self.entity_description.key == "status":
            return ROBOT_STATES.get(state.state) if state.state is not None else None

        return None

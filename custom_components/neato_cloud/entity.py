"""Base entity classes for Neato Cloud integration."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import EntityDescription
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import NeatoCloudDataUpdateCoordinator
from .core.models import CommandResponse, Robot


class NeatoRobotEntity(CoordinatorEntity[NeatoCloudDataUpdateCoordinator]):
    """Base class for entities of one robot, backed by the Nucleo coordinator."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: NeatoCloudDataUpdateCoordinator,
        robot: Robot,
        description: EntityDescription,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self.robot = robot
        self.entity_description = description
        self._attr_unique_id = f"{robot.serial}_{description.key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, robot.serial)},
            manufacturer=MANUFACTURER,
            model=robot.model,
            name=robot.name or robot.serial,
            serial_number=robot.serial,
        )

    @property
    def robot_state(self) -> CommandResponse | None:
        """Last state reported by the robot."""
        return self.coordinator.data.get(self.robot.serial)

    @property
    def available(self) -> bool:
        """Return if entity is available."""
        return super().available and self.robot_state is not None

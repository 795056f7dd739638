"""Button platform for Neato Cloud integration."""

from __future__ import annotations

from homeassistant.components.button import (
    ButtonEntity,
    ButtonEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    CLEANING_CATEGORY_HOUSE,
    CLEANING_MODE_TURBO,
    CLEANING_MODIFIER_NORMAL,
    DOMAIN,
)
from .coordinator import NeatoCloudDataUpdateCoordinator
from .core.models import Params
from .entity import NeatoRobotEntity

# Keys are NucleoProtocol command methods
BUTTON_TYPES: tuple[ButtonEntityDescription, ...] = (
    ButtonEntityDescription(
        key="find_me",
        name="Find Me",
        icon="mdi:map-marker-radius",
    ),
    ButtonEntityDescription(
        key="start_cleaning",
        name="Start Cleaning",
        icon="mdi:play",
    ),
    ButtonEntityDescription(
        key="stop_cleaning",
        name="Stop Cleaning",
        icon="mdi:stop",
    ),
    ButtonEntityDescription(
        key="pause_cleaning",
        name="Pause Cleaning",
        icon="mdi:pause",
    ),
    ButtonEntityDescription(
        key="resume_cleaning",
        name="Resume Cleaning",
        icon="mdi:play-pause",
    ),
    ButtonEntityDescription(
        key="send_to_base",
        name="Return to Base",
        icon="mdi:home-import-outline",
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Neato buttons from a config entry."""
    coordinator: NeatoCloudDataUpdateCoordinator = hass.data[DOMAIN][
        config_entry.entry_id
    ]

    async_add_entities(
        NeatoButton(coordinator, robot, description)
        for robot in coordinator.robots
        for description in BUTTON_TYPES
    )


class NeatoButton(NeatoRobotEntity, ButtonEntity):
    """Implementation of a Neato robot button."""

    entity_description: ButtonEntityDescription

    async def async_press(self) -> None:
        """Handle the button press."""
        params = None
        if self.entity_description.key == "start_cleaning":
            params = Params(
                category=CLEANING_CATEGORY_HOUSE,
                mode=CLEANING_MODE_TURBO,
                modifier=CLEANING_MODIFIER_NORMAL,
            )

        await self.coordinator.async_send_command(
            self.robot, self.entity_description.key, params
        )
        await self.coordinator.async_request_refresh()

"""The Neato Cloud integration."""

from __future__ import annotations

import logging
from http import HTTPStatus

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from pydantic import SecretStr

from .const import DOMAIN
from .coordinator import NeatoCloudDataUpdateCoordinator
from .core.credentials import CredentialProvider
from .core.exceptions import CredentialsError
from .core.models import Credentials, Robot
from .core.protocol import NucleoProtocol
from .core.session_manager import BeehiveSessionManager

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.BINARY_SENSOR,
    Platform.BUTTON,
    Platform.SENSOR,
    Platform.SWITCH,
]


class ConfigEntryCredentialProvider(CredentialProvider):
    """Credentials stored in a config entry."""

    def __init__(self, entry: ConfigEntry) -> None:
        self._entry = entry

    def lookup(self) -> Credentials:
        email = self._entry.data.get(CONF_EMAIL)
        password = self._entry.data.get(CONF_PASSWORD)
        if not email or not password:
            raise CredentialsError("Config entry has no email or password")
        return Credentials(username=email, password=SecretStr(password))


def _load_robots(session_manager: BeehiveSessionManager) -> list[Robot]:
    """Log in and list the account's robots. Runs in the executor."""
    session = session_manager.acquire()
    try:
        return session_manager.list_robots(session)
    finally:
        session.client.close()


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Neato Cloud from a config entry."""
    session_manager = BeehiveSessionManager(ConfigEntryCredentialProvider(entry))

    try:
        robots = await hass.async_add_executor_job(_load_robots, session_manager)
    except CredentialsError as err:
        raise ConfigEntryAuthFailed(str(err)) from err
    except httpx.HTTPStatusError as err:
        if err.response.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            raise ConfigEntryAuthFailed("Invalid Neato credentials") from err
        raise ConfigEntryNotReady(f"Beehive returned {err.response.status_code}") from err
    except httpx.HTTPError as err:
        raise ConfigEntryNotReady(f"Failed to reach Beehive: {err}") from err
    except ValueError as err:
        raise ConfigEntryNotReady(f"Unexpected Beehive response: {err}") from err

    _LOGGER.debug("Found %d Neato robots", len(robots))

    # httpx loads the CA bundle when the client is built
    protocol = await hass.async_add_executor_job(NucleoProtocol)

    coordinator = NeatoCloudDataUpdateCoordinator(hass, entry, protocol, robots)

    # Fetch initial data
    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        await hass.async_add_executor_job(protocol.close)
        raise

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator

    # Set up platforms
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: NeatoCloudDataUpdateCoordinator = hass.data[DOMAIN].pop(
            entry.entry_id
        )
        await hass.async_add_executor_job(coordinator.protocol.close)

    return unload_ok

"""Config flow for Neato Cloud integration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

import httpx
import voluptuous as schemas
from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD

from .const import DOMAIN
from .core.credentials import StaticCredentialProvider
from .core.exceptions import NeatoCloudError
from .core.session_manager import BeehiveSessionManager

_LOGGER = logging.getLogger(__name__)

USER_SCHEMA = schemas.Schema(
    {
        schemas.Required(CONF_EMAIL): str,
        schemas.Required(CONF_PASSWORD): str,
    }
)

REAUTH_SCHEMA = schemas.Schema({schemas.Required(CONF_PASSWORD): str})


def _check_login(email: str, password: str) -> None:
    """Open and close a Beehive session. Runs in the executor."""
    session_manager = BeehiveSessionManager(StaticCredentialProvider(email, password))
    session = session_manager.acquire()
    session.client.close()


class NeatoCloudConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Neato Cloud."""

    VERSION = 1

    async def _async_validate(self, email: str, password: str) -> dict[str, str]:
        """Try to log in and map failures to form errors."""
        errors: dict[str, str] = {}
        try:
            await self.hass.async_add_executor_job(_check_login, email, password)
        except httpx.HTTPStatusError as err:
            if err.response.status_code in (
                HTTPStatus.UNAUTHORIZED,
                HTTPStatus.FORBIDDEN,
            ):
                errors["base"] = "invalid_auth"
            else:
                errors["base"] = "cannot_connect"
        except (httpx.HTTPError, ValueError):
            errors["base"] = "cannot_connect"
        except NeatoCloudError:
            errors["base"] = "invalid_auth"
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Unexpected error logging in to Neato")
            errors["base"] = "unknown"
        return errors

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            email = user_input[CONF_EMAIL].strip()
            await self.async_set_unique_id(email.lower())
            self._abort_if_unique_id_configured()

            errors = await self._async_validate(email, user_input[CONF_PASSWORD])
            if not errors:
                return self.async_create_entry(
                    title=email,
                    data={CONF_EMAIL: email, CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=USER_SCHEMA,
            errors=errors,
        )

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> ConfigFlowResult:
        """Start reauthentication after the stored password was rejected."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for a new password."""
        errors: dict[str, str] = {}
        entry = self._get_reauth_entry()
        if user_input is not None:
            email = entry.data[CONF_EMAIL]
            errors = await self._async_validate(email, user_input[CONF_PASSWORD])
            if not errors:
                return self.async_update_reload_and_abort(
                    entry,
                    data_updates={CONF_PASSWORD: user_input[CONF_PASSWORD]},
                )

        return self.async_show_form(
            step_id="reauth_confirm",
            data_schema=REAUTH_SCHEMA,
            description_placeholders={"email": entry.data[CONF_EMAIL]},
            errors=errors,
        )

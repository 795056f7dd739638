"""Connection settings for the Neato Beehive and Nucleo APIs."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict

SCHEME: Final = "https"

BEEHIVE_HOST: Final = "beehive.neatocloud.com"
BEEHIVE_ACCEPT_HEADER: Final = "application/vnd.neato.beehive.v1+json"

NUCLEO_HOST: Final = "nucleo.neatocloud.com:4443"
NUCLEO_ACCEPT_HEADER: Final = "application/vnd.neato.nucleo.v1"

PLATFORM: Final = "ios"
VENDOR: Final = "neato"

TOKEN_LENGTH: Final = 32  # raw bytes, 64 hex chars
REQUEST_ID_LENGTH: Final = 16  # raw bytes, 32 hex chars


class NeatoCloudConfig(BaseModel):
    """Endpoints, media types and fixed lengths used by the API clients.

    Every component takes one of these at construction. Tests build their own
    to point the clients at stub hosts.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str = SCHEME
    beehive_host: str = BEEHIVE_HOST
    beehive_accept: str = BEEHIVE_ACCEPT_HEADER
    nucleo_host: str = NUCLEO_HOST
    nucleo_accept: str = NUCLEO_ACCEPT_HEADER
    platform: str = PLATFORM
    vendor: str = VENDOR
    token_length: int = TOKEN_LENGTH
    request_id_length: int = REQUEST_ID_LENGTH
    timeout: float = 15.0

    @property
    def beehive_url(self) -> str:
        """Base URL of the account tier."""
        return f"{self.scheme}://{self.beehive_host}"

    @property
    def nucleo_url(self) -> str:
        """Base URL of the command relay tier."""
        return f"{self.scheme}://{self.nucleo_host}"

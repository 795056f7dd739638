"""Errors raised by the Neato cloud clients.

Transport and decode failures are not wrapped: callers see the ``httpx`` or
``pydantic`` exception that caused them.
"""


class NeatoCloudError(Exception):
    """Base class for errors raised by this package."""


class CredentialsError(NeatoCloudError):
    """Raised when a credential backend cannot supply a username/password."""


class RequestIdMismatchError(NeatoCloudError):
    """Raised when a Nucleo response does not echo the request's identifier."""

    def __init__(self, expected: str, received: str | None) -> None:
        super().__init__(
            f"Conflicting reqId value: sent {expected}, received {received}"
        )
        self.expected = expected
        self.received = received

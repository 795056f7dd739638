"""Credential backends for the Beehive session manager."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Final

import keyring
from keyring.errors import KeyringError
from pydantic import SecretStr

from .exceptions import CredentialsError
from .models import Credentials

_LOGGER = logging.getLogger(__name__)

DEFAULT_PASS_PATTERN: Final = ".*neatorobotics.*/.*"
DEFAULT_KEYRING_SERVICE: Final = "neatorobotics.com"


class CredentialProvider(ABC):
    """Abstract source of the account's username and password."""

    @abstractmethod
    def lookup(self) -> Credentials:
        """Return the credentials for the Neato account.

        Raises:
            CredentialsError: If no single set of credentials can be found.
        """


class StaticCredentialProvider(CredentialProvider):
    """Credentials held in memory, e.g. taken from a config entry."""

    def __init__(self, username: str, password: str) -> None:
        self._credentials = Credentials(username=username, password=SecretStr(password))

    def lookup(self) -> Credentials:
        return self._credentials


class EnvironmentCredentialProvider(CredentialProvider):
    """Credentials read from environment variables on every lookup."""

    def __init__(
        self,
        username_var: str = "NEATO_USERNAME",
        password_var: str = "NEATO_PASSWORD",
    ) -> None:
        self._username_var = username_var
        self._password_var = password_var

    def lookup(self) -> Credentials:
        username = os.environ.get(self._username_var)
        password = os.environ.get(self._password_var)
        if not username or not password:
            raise CredentialsError(
                f"Environment variables {self._username_var} and "
                f"{self._password_var} must both be set"
            )
        return Credentials(username=username, password=SecretStr(password))


class KeyringCredentialProvider(CredentialProvider):
    """Password stored in the system keyring under a known username."""

    def __init__(self, username: str, service: str = DEFAULT_KEYRING_SERVICE) -> None:
        self._username = username
        self._service = service

    def lookup(self) -> Credentials:
        try:
            password = keyring.get_password(self._service, self._username)
        except KeyringError as exc:
            raise CredentialsError("Failed to read password from keyring") from exc
        if not password:
            raise CredentialsError(
                f"No keyring entry for {self._username} in {self._service}"
            )
        return Credentials(username=self._username, password=SecretStr(password))


class PassStoreCredentialProvider(CredentialProvider):
    """Credentials from a ``pass`` password store.

    Entries are named ``<site>/<username>``; the first line of the decrypted
    entry is the password. Exactly one entry may match ``pattern``.
    """

    def __init__(
        self,
        pattern: str = DEFAULT_PASS_PATTERN,
        store_dir: Path | None = None,
        pass_command: str = "pass",
    ) -> None:
        self._pattern = re.compile(pattern)
        self._store_dir = store_dir or Path(
            os.environ.get("PASSWORD_STORE_DIR", Path.home() / ".password-store")
        )
        self._pass_command = pass_command

    def entries(self) -> list[str]:
        """Names of all entries in the store, relative to its root."""
        if not self._store_dir.is_dir():
            raise CredentialsError(f"Password store not found: {self._store_dir}")
        return sorted(
            path.relative_to(self._store_dir).with_suffix("").as_posix()
            for path in self._store_dir.rglob("*.gpg")
        )

    def find_entry(self) -> str:
        """Return the single entry matching the pattern."""
        matches = [name for name in self.entries() if self._pattern.fullmatch(name)]
        if not matches:
            raise CredentialsError(
                f"No password store entry matches {self._pattern.pattern}"
            )
        if len(matches) > 1:
            raise CredentialsError(
                f"{len(matches)} password store entries match {self._pattern.pattern}"
            )
        return matches[0]

    def lookup(self) -> Credentials:
        entry = self.find_entry()
        _LOGGER.debug("Reading credentials from password store entry %s", entry)
        try:
            result = subprocess.run(
                [self._pass_command, "show", entry],
                capture_output=True,
                check=True,
                text=True,
                env={**os.environ, "PASSWORD_STORE_DIR": str(self._store_dir)},
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            raise CredentialsError(f"Failed to decrypt {entry}") from exc

        lines = result.stdout.splitlines()
        if not lines or not lines[0]:
            raise CredentialsError(f"Password store entry {entry} is empty")
        return Credentials(
            username=entry.rsplit("/", 1)[-1], password=SecretStr(lines[0])
        )

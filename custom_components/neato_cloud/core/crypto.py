from __future__ import annotations

import secrets
from typing import Final

from cryptography.hazmat.primitives import hashes, hmac

from .config import REQUEST_ID_LENGTH, TOKEN_LENGTH

SIGNATURE_SIZE: Final = 32  # SHA-256 digest


def random_hex(length: int) -> str:
    """Generate a random lowercase hex string.

    Args:
        length: Number of random bytes to draw from the OS source.

    Returns:
        The hex encoding, ``2 * length`` characters long.
    """
    if length <= 0:
        raise ValueError(f"Invalid random length: {length}")
    return secrets.token_hex(length)


def generate_bootstrap_token(length: int = TOKEN_LENGTH) -> str:
    """Generate the one-time token sent when creating a Beehive session."""
    return random_hex(length)


def generate_request_id(length: int = REQUEST_ID_LENGTH) -> str:
    """Generate the identifier that correlates a Nucleo command and response."""
    return random_hex(length)


def compute_hmac_sha256(key: bytes, data: bytes) -> bytes:
    """Compute HMAC-SHA256 signature.

    Args:
        key: The HMAC key.
        data: The data to sign.

    Returns:
        The 32-byte HMAC signature.
    """
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(data)
    return h.finalize()

"""Unit tests for the Neato Cloud crypto module."""

import hashlib
import hmac
import string

import pytest

from custom_components.neato_cloud.core import crypto


def test_bootstrap_token_length():
    """Test bootstrap tokens are 32 random bytes as lowercase hex."""
    token = crypto.generate_bootstrap_token()

    assert len(token) == 64
    assert set(token) <= set(string.hexdigits.lower())


def test_request_id_length():
    """Test request ids are 16 random bytes as lowercase hex."""
    req_id = crypto.generate_request_id()

    assert len(req_id) == 32
    assert set(req_id) <= set(string.hexdigits.lower())


def test_random_hex_no_collisions():
    """Test repeated generation does not repeat values."""
    tokens = {crypto.generate_bootstrap_token() for _ in range(1000)}
    req_ids = {crypto.generate_request_id() for _ in range(1000)}

    assert len(tokens) == 1000
    assert len(req_ids) == 1000


def test_random_hex_rejects_empty_length():
    """Test a non-positive length is refused."""
    with pytest.raises(ValueError):
        crypto.random_hex(0)


def test_entropy_failure_propagates(monkeypatch):
    """Test a failing random source is not replaced by a weaker one."""

    def broken_source(_length):
        raise NotImplementedError("no entropy source")

    monkeypatch.setattr(crypto.secrets, "token_hex", broken_source)

    with pytest.raises(NotImplementedError):
        crypto.generate_request_id()


def test_hmac_sha256():
    """Test HMAC signing against the standard library implementation."""
    key = b"secret_key"
    data = b"message"

    signature = crypto.compute_hmac_sha256(key, data)

    assert len(signature) == crypto.SIGNATURE_SIZE
    assert signature == hmac.new(key, data, hashlib.sha256).digest()
    assert signature != crypto.compute_hmac_sha256(b"wrong_key", data)
    assert signature != crypto.compute_hmac_sha256(key, data + b"corrupt")

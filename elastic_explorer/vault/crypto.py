"""
AES-256-GCM encryption for endpoint passwords.

Each payload gets a unique 12-byte nonce prepended to the ciphertext + tag,
and the whole thing is base64 encoded so it fits a TEXT column.
Every failure mode on the decrypt side raises the same CryptoError.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from elastic_explorer.errors import CryptoError

NONCE_SIZE = 12
KEY_SIZE = 32

_INVALID = "invalid encrypted payload"


def encrypt(plaintext: bytes | str, key: bytes) -> str:
    """Encrypt with AES-256-GCM. Returns base64(nonce + ciphertext + tag)."""
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    nonce = secrets.token_bytes(NONCE_SIZE)
    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + ciphertext).decode("ascii")


def decrypt(payload: str, key: bytes) -> bytes:
    """Decrypt base64(nonce + ciphertext + tag) back to plaintext bytes."""
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise CryptoError(_INVALID) from None

    if len(data) < NONCE_SIZE:
        raise CryptoError(_INVALID)

    nonce = data[:NONCE_SIZE]
    ciphertext = data[NONCE_SIZE:]
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError):
        raise CryptoError(_INVALID) from None


def decrypt_text(payload: str, key: bytes) -> str:
    """Decrypt and decode as UTF-8."""
    plaintext = decrypt(payload, key)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise CryptoError(_INVALID) from None

#!/usr/bin/env python3
"""
KL130 Local Protocol Cipher
Frames JSON commands in the XOR autokey stream used by TP-Link smart bulbs.
"""

import json

from .constants import CIPHER_SEED
from .errors import MalformedPayloadError

# --- XOR autokey stream for local UDP control ---
# Note: this is what the bulb firmware speaks on port 9999.
# It is NOT cryptographically secure - the seed is fixed and public,
# so it only obscures payloads and provides no confidentiality or integrity.


def _xor_encrypt(data: bytes) -> bytes:
    """Each output byte is the running XOR of the seed and all plaintext so far."""
    key = CIPHER_SEED
    out = bytearray()
    for byte in data:
        key ^= byte
        out.append(key)
    return bytes(out)


def _xor_decrypt(data: bytes) -> bytes:
    """Inverse of _xor_encrypt: the previous ciphertext byte is the next key."""
    key = CIPHER_SEED
    out = bytearray()
    for byte in data:
        out.append(key ^ byte)
        key = byte
    return bytes(out)


def serialize(command) -> str:
    """Compact JSON, byte-for-byte what the bulb's own app sends."""
    return json.dumps(command, separators=(",", ":"))


def encrypt(command) -> bytes:
    """Serialize a command to JSON and encrypt it for the wire."""
    return _xor_encrypt(serialize(command).encode("ascii"))


def decrypt(data: bytes):
    """Decrypt a datagram and parse it as JSON.

    Raises MalformedPayloadError when the plaintext is not valid JSON.
    """
    plaintext = _xor_decrypt(data)
    try:
        return json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError(
            f"Could not parse {len(data)}-byte payload as JSON: {e}"
        ) from e


__all__ = [
    'encrypt',
    'decrypt',
    'serialize',
]

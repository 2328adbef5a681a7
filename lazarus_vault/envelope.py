"""Envelope encryption of a single payload.

Every payload is encrypted under a freshly generated key and nonce using
AES-256-GCM. The ciphertext carries the 16-byte GCM tag appended, and the key
material is returned to the caller only. Nothing derived from the ciphertext
can be used to recover the key.
"""

import binascii
import secrets
import typing

import cryptography.exceptions
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

import lazarus_vault.common
import lazarus_vault.exceptions
import lazarus_vault.types

RandomSource = typing.Callable[[int], bytes]


def _validate_material(key: typing.Any, nonce: typing.Any) -> bool:
    """Check that key and nonce have the sizes the cipher expects."""
    return (
        isinstance(key, bytes)
        and isinstance(nonce, bytes)
        and len(key) == lazarus_vault.types.KEY_SIZE
        and len(nonce) == lazarus_vault.types.NONCE_SIZE
    )


def encrypt(
    plaintext: bytes,
    random_source: RandomSource = secrets.token_bytes,
) -> tuple[bytes, bytes, bytes]:
    """Encrypt the plaintext with a new key.

    Returns a tuple of (ciphertext, key, nonce).
    """
    # A new key for every payload, the nonce is never repeated under one key
    key = random_source(lazarus_vault.types.KEY_SIZE)
    nonce = random_source(lazarus_vault.types.NONCE_SIZE)
    if not _validate_material(key, nonce):
        raise lazarus_vault.exceptions.CipherInitError(
            "Random source returned key material of the wrong size."
        )

    try:
        cipher = AESGCM(key)
    except (TypeError, ValueError) as e:
        raise lazarus_vault.exceptions.CipherInitError(str(e)) from e

    try:
        ciphertext = cipher.encrypt(nonce, plaintext, None)
    except (TypeError, ValueError, OverflowError) as e:
        raise lazarus_vault.exceptions.EncryptionError(str(e)) from e

    return ciphertext, key, nonce


def decrypt(ciphertext: bytes, key: bytes, nonce: bytes) -> bytes:
    """Decrypt and authenticate the ciphertext.

    Any failure is reported as DecryptionError, and no plaintext is returned
    unless the tag verified.
    """
    if not _validate_material(key, nonce):
        raise lazarus_vault.exceptions.DecryptionError(
            "Key material has the wrong size."
        )
    if len(ciphertext) < lazarus_vault.types.TAG_SIZE:
        raise lazarus_vault.exceptions.DecryptionError(
            "Ciphertext is too short to contain an authentication tag."
        )

    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except (cryptography.exceptions.InvalidTag, TypeError, ValueError) as e:
        raise lazarus_vault.exceptions.DecryptionError(
            "Ciphertext could not be authenticated with the provided key."
        ) from e


def encode_key_material(key: bytes, nonce: bytes) -> str:
    """Encode key and nonce as a single hex string (key || nonce)."""
    if not _validate_material(key, nonce):
        raise lazarus_vault.exceptions.KeyFormatError(
            f"Key must be {lazarus_vault.types.KEY_SIZE} bytes and nonce "
            f"{lazarus_vault.types.NONCE_SIZE} bytes."
        )
    return binascii.hexlify(key + nonce).decode("ascii")


def decode_key_material(encoded: str) -> tuple[bytes, bytes]:
    """Decode a hex key material string into a (key, nonce) tuple."""
    try:
        raw = lazarus_vault.common.decode_hex(encoded, "decryption key")
    except lazarus_vault.exceptions.HexFormatError as e:
        raise lazarus_vault.exceptions.KeyFormatError(str(e)) from e

    if len(raw) != lazarus_vault.types.KEY_MATERIAL_SIZE:
        raise lazarus_vault.exceptions.KeyFormatError(
            f"Decryption key must be {lazarus_vault.types.KEY_MATERIAL_SIZE} bytes "
            f"({lazarus_vault.types.KEY_MATERIAL_SIZE * 2} hex characters), "
            f"got {len(raw)} bytes."
        )

    return (
        raw[: lazarus_vault.types.KEY_SIZE],
        raw[lazarus_vault.types.KEY_SIZE :],
    )

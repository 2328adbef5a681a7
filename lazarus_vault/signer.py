"""Ed25519 signatures over audit record hashes."""

import binascii

import nacl.exceptions
import nacl.signing

import lazarus_vault.common
import lazarus_vault.exceptions

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def _decode_sized(value: str, size: int, what: str) -> bytes:
    """Decode a hex value that must be exactly size bytes."""
    try:
        raw = lazarus_vault.common.decode_hex(value, what)
    except lazarus_vault.exceptions.HexFormatError as e:
        raise lazarus_vault.exceptions.KeyFormatError(str(e)) from e
    if len(raw) != size:
        raise lazarus_vault.exceptions.KeyFormatError(
            f"{what} must be {size} bytes ({size * 2} hex characters)"
        )
    return raw


def _decode_hash(hash_hex: str) -> bytes:
    """Decode a hex record hash with an optional 0x prefix."""
    try:
        return lazarus_vault.common.decode_hex(hash_hex, "record hash")
    except lazarus_vault.exceptions.HexFormatError as e:
        raise lazarus_vault.exceptions.KeyFormatError(str(e)) from e


def _signing_key(private_key_seed_hex: str) -> nacl.signing.SigningKey:
    """Derive the signing key from a hex encoded 32-byte seed."""
    return nacl.signing.SigningKey(
        _decode_sized(private_key_seed_hex, SEED_SIZE, "private key")
    )


def derive_public_key(private_key_seed_hex: str) -> str:
    """Get the hex encoded public key matching the seed."""
    return binascii.hexlify(
        _signing_key(private_key_seed_hex).verify_key.encode()
    ).decode("ascii")


def sign(hash_hex: str, private_key_seed_hex: str) -> tuple[str, str]:
    """Sign the raw bytes of a record hash.

    The hex text is decoded before signing, the signature covers the hash
    bytes and not their textual form. Returns hex encoded (signature,
    public key).
    """
    hash_bytes = _decode_hash(hash_hex)
    signing_key = _signing_key(private_key_seed_hex)
    signed = signing_key.sign(hash_bytes)

    return (
        binascii.hexlify(signed.signature).decode("ascii"),
        binascii.hexlify(signing_key.verify_key.encode()).decode("ascii"),
    )


def verify(public_key_hex: str, hash_hex: str, signature_hex: str) -> bool:
    """Check a signature over the raw bytes of a record hash."""
    hash_bytes = _decode_hash(hash_hex)
    verify_key = nacl.signing.VerifyKey(
        _decode_sized(public_key_hex, PUBLIC_KEY_SIZE, "public key")
    )
    signature = _decode_sized(signature_hex, SIGNATURE_SIZE, "signature")

    try:
        verify_key.verify(hash_bytes, signature)
    except nacl.exceptions.BadSignatureError:
        return False
    return True

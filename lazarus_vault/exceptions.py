"""Lazarus Vault exceptions."""


class VaultError(Exception):
    """Base class for all errors raised by the vault utility."""


class InputError(VaultError):
    """Caller provided input that can't be used."""


class NoPublisher(InputError):
    """No publisher address was provided for the blob storage."""


class NoFile(InputError):
    """The provided file could not be accessed."""


class EmptyFile(InputError):
    """The provided file has no content to encrypt."""


class HexFormatError(InputError):
    """Provided value was not a valid hexadecimal string."""


class KeyFormatError(HexFormatError):
    """Provided key material was malformed or had the wrong length."""


class ScoreRangeError(InputError):
    """Audit score doesn't fit an unsigned 8-bit integer."""


class CipherError(VaultError):
    """Cryptographic operation failed."""


class CipherInitError(CipherError):
    """Key material for the cipher could not be validated."""


class EncryptionError(CipherError):
    """The AEAD encryption operation failed."""


class DecryptionError(CipherError):
    """Ciphertext failed authentication with the provided key material."""


class ChecksumMismatch(CipherError):
    """Decrypted content didn't match the expected checksum."""


class TransportError(VaultError):
    """Blob storage could not be reached with any of the known endpoints."""


class TextEncodingError(InputError):
    """Provided text could not be encoded as UTF-8."""


class OutputWriteError(InputError):
    """Decrypted output could not be written to the provided path."""

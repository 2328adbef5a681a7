"""Plaintext checksum for operator side integrity verification."""

import hashlib


def checksum(data: bytes) -> str:
    """Compute a SHA-256 hex digest of the data."""
    return hashlib.sha256(data).hexdigest()

"""Common types for the vault utility."""

import os
import pathlib
import typing

import aiohttp

# Lazarus vault constants

# Number of Walrus epochs the blob is stored for when not given explicitly.
DEFAULT_STORAGE_EPOCHS: int = int(os.environ.get("LAZARUS_VAULT_EPOCHS", 1))

# Total request timeout in seconds for a single blob storage request.
HTTP_TIMEOUT: int = int(os.environ.get("LAZARUS_VAULT_HTTP_TIMEOUT", 300))

KEY_SIZE: int = 32
NONCE_SIZE: int = 12
TAG_SIZE: int = 16
KEY_MATERIAL_SIZE: int = KEY_SIZE + NONCE_SIZE


class VaultSession(typing.TypedDict):
    """Type definition for session variables."""

    client: aiohttp.client.ClientSession | None
    publisher: str
    timeout: int
    no_check_certificate: bool


class BlobRequest(typing.TypedDict):
    """Type definition for a single candidate request to blob storage."""

    method: str
    url: str
    params: dict[str, str] | None


class VaultCommandBaseOptions(typing.TypedDict):
    """Type definitions for command options."""

    debug: bool
    verbose: bool


class VaultTransportOptions(VaultCommandBaseOptions):
    """Additional type definitions for commands using blob storage."""

    publisher: str
    timeout: int
    no_check_certificate: bool


class VaultStoreOptions(VaultTransportOptions):
    """Additional type definitions for encrypt-and-store command options."""

    file: pathlib.Path
    epochs: int


class VaultRetrieveOptions(VaultTransportOptions):
    """Additional type definitions for decrypt command options."""

    blob_id: str
    decryption_key: str
    output: pathlib.Path
    checksum: str


class VaultHashAuditOptions(VaultCommandBaseOptions):
    """Additional type definitions for hash-audit command options."""

    action: str
    prompt: str
    score: int
    tags: str
    decision: str
    reason: str
    timestamp: str


class VaultSignAuditOptions(VaultCommandBaseOptions):
    """Additional type definitions for sign-audit command options."""

    record_hash: str
    private_key: str


class VaultVerifyAuditOptions(VaultCommandBaseOptions):
    """Additional type definitions for verify-audit command options."""

    record_hash: str
    signature: str
    public_key: str


class EnvelopeResult(typing.TypedDict):
    """Type definitions for the encrypt-and-store output."""

    blob_id: str
    decryption_key: str
    checksum: str
    original_size: int
    encrypted_size: int


class CanonicalAuditRecord(typing.TypedDict):
    """Type definitions for an audit record in canonical form.

    Field order is part of the hash format, don't reorder.
    """

    action: str
    prompt: str
    score: int
    tags: list[str]
    decision: str
    reason: str
    timestamp: str


class WalrusBlobObject(typing.TypedDict, total=False):
    """Type definitions for the blob object in a Walrus store response."""

    id: str
    blobId: str
    size: int


class WalrusBlob(typing.TypedDict, total=False):
    """Type definitions for a Walrus store response entry."""

    blobObject: WalrusBlobObject
    blobId: str


class WalrusStoreResponse(typing.TypedDict, total=False):
    """Type definitions for the Walrus publisher store response."""

    newlyCreated: WalrusBlob
    alreadyCertified: WalrusBlob

"""CLI for storing encrypted files on Walrus and hashing audit records."""

import asyncio
import os
import pathlib
import sys

import click

import lazarus_vault.evidence
import lazarus_vault.retrieve
import lazarus_vault.store
import lazarus_vault.types


@click.command()
@click.option("--file", "file_", required=True, help="Path to the file to encrypt.")
@click.option(
    "--publisher",
    default="",
    help="Walrus publisher URL, e.g. https://publisher.walrus-testnet.walrus.space",
)
@click.option(
    "--epochs",
    default=lazarus_vault.types.DEFAULT_STORAGE_EPOCHS,
    type=click.IntRange(min=1),
    help="Number of epochs to store the blob for.",
)
@click.option(
    "--timeout", default=0, type=click.IntRange(min=0), help="Request timeout in seconds."
)
@click.option(
    "--no-check-certificate",
    is_flag=True,
    help="Don't check TLS certificate for authenticity. (development use only)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Print more information.",
)
@click.option("--debug", is_flag=True, help="Print debug information.")
def encrypt_and_store(
    file_: str,
    publisher: str,
    epochs: int,
    timeout: int,
    no_check_certificate: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Encrypt a file and store it on Walrus."""
    plpath = pathlib.Path(file_)
    if not plpath.is_file():
        click.echo("Could not access the provided file.", err=True)
        sys.exit(3)

    opts: lazarus_vault.types.VaultStoreOptions = {
        "file": plpath,
        "publisher": publisher,
        "epochs": epochs,
        "timeout": timeout,
        "no_check_certificate": no_check_certificate,
        "debug": debug,
        "verbose": verbose,
    }

    ret = 0
    try:
        ret = asyncio.run(lazarus_vault.store.wrap_store_exceptions(opts))
    except KeyboardInterrupt:
        ret = 130
    sys.exit(ret)


@click.command()
@click.option("--blob-id", required=True, help="Walrus blob ID.")
@click.option(
    "--decryption-key",
    required=True,
    help="Hex encoded decryption key (key || nonce).",
)
@click.option("--publisher", default="", help="Walrus publisher or aggregator URL.")
@click.option(
    "--output", required=True, help="Output file path for the decrypted plaintext."
)
@click.option(
    "--checksum",
    default="",
    help="Expected SHA-256 checksum of the plaintext, checked before writing.",
)
@click.option(
    "--timeout", default=0, type=click.IntRange(min=0), help="Request timeout in seconds."
)
@click.option(
    "--no-check-certificate",
    is_flag=True,
    help="Don't check TLS certificate for authenticity. (development use only)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Print more information.",
)
@click.option("--debug", is_flag=True, help="Print debug information.")
def decrypt(
    blob_id: str,
    decryption_key: str,
    publisher: str,
    output: str,
    checksum: str,
    timeout: int,
    no_check_certificate: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Download and decrypt a blob from Walrus."""
    opts: lazarus_vault.types.VaultRetrieveOptions = {
        "blob_id": blob_id,
        "decryption_key": decryption_key,
        "publisher": publisher,
        "output": pathlib.Path(output),
        "checksum": checksum,
        "timeout": timeout,
        "no_check_certificate": no_check_certificate,
        "debug": debug,
        "verbose": verbose,
    }

    ret = 0
    try:
        ret = asyncio.run(lazarus_vault.retrieve.wrap_retrieve_exceptions(opts))
    except KeyboardInterrupt:
        ret = 130
    sys.exit(ret)


@click.command()
@click.option("--action", required=True, help="Action the record describes.")
@click.option("--prompt", required=True, help="Prompt that triggered the action.")
@click.option(
    "--score", required=True, type=click.IntRange(0, 255), help="Risk score (0-255)."
)
@click.option("--tags", required=True, help="Comma separated list of tags.")
@click.option("--decision", required=True, help="Decision taken on the action.")
@click.option("--reason", required=True, help="Reason for the decision.")
@click.option("--timestamp", required=True, help="Timestamp of the record.")
@click.option(
    "--verbose",
    is_flag=True,
    help="Print more information.",
)
@click.option("--debug", is_flag=True, help="Print debug information.")
def hash_audit(
    action: str,
    prompt: str,
    score: int,
    tags: str,
    decision: str,
    reason: str,
    timestamp: str,
    verbose: bool,
    debug: bool,
) -> None:
    """Compute the deterministic hash of an audit record."""
    opts: lazarus_vault.types.VaultHashAuditOptions = {
        "action": action,
        "prompt": prompt,
        "score": score,
        "tags": tags,
        "decision": decision,
        "reason": reason,
        "timestamp": timestamp,
        "debug": debug,
        "verbose": verbose,
    }

    sys.exit(lazarus_vault.evidence.hash_audit(opts))


@click.command()
@click.option("--record-hash", required=True, help="Hex encoded record hash.")
@click.option(
    "--private-key",
    default="",
    help="Hex encoded 32-byte ed25519 seed. Defaults to $LAZARUS_SIGNING_KEY.",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Print more information.",
)
@click.option("--debug", is_flag=True, help="Print debug information.")
def sign_audit(
    record_hash: str,
    private_key: str,
    verbose: bool,
    debug: bool,
) -> None:
    """Sign an audit record hash with an ed25519 key."""
    opts: lazarus_vault.types.VaultSignAuditOptions = {
        "record_hash": record_hash,
        "private_key": (
            private_key
            if private_key
            else os.environ.get(
                "LAZARUS_SIGNING_KEY",
                "",
            )
        ),
        "debug": debug,
        "verbose": verbose,
    }

    sys.exit(lazarus_vault.evidence.sign_audit(opts))


@click.command()
@click.option("--record-hash", required=True, help="Hex encoded record hash.")
@click.option("--signature", required=True, help="Hex encoded ed25519 signature.")
@click.option("--public-key", required=True, help="Hex encoded ed25519 public key.")
@click.option(
    "--verbose",
    is_flag=True,
    help="Print more information.",
)
@click.option("--debug", is_flag=True, help="Print debug information.")
def verify_audit(
    record_hash: str,
    signature: str,
    public_key: str,
    verbose: bool,
    debug: bool,
) -> None:
    """Verify an audit record hash signature."""
    opts: lazarus_vault.types.VaultVerifyAuditOptions = {
        "record_hash": record_hash,
        "signature": signature,
        "public_key": public_key,
        "debug": debug,
        "verbose": verbose,
    }

    sys.exit(lazarus_vault.evidence.verify_audit(opts))


@click.group()
def wrap():
    """Lazarus Vault, zero-knowledge encryption for Sentinel Protocol."""
    pass


wrap.add_command(encrypt_and_store)
wrap.add_command(decrypt)
wrap.add_command(hash_audit)
wrap.add_command(sign_audit)
wrap.add_command(verify_audit)


if __name__ == "__main__":
    wrap()

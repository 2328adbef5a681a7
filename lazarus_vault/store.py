"""File encrypt and store operation."""

import asyncio
import secrets
import typing

import aiofiles
import aiohttp
import click

import lazarus_vault.checksum
import lazarus_vault.client
import lazarus_vault.common
import lazarus_vault.envelope
import lazarus_vault.exceptions
import lazarus_vault.types


async def read_plaintext(opts: lazarus_vault.types.VaultStoreOptions) -> bytes:
    """Read the file to be encrypted."""
    if not opts["file"].is_file():
        raise lazarus_vault.exceptions.NoFile(
            f"Could not access the provided file {opts['file']}"
        )

    async with aiofiles.open(opts["file"], "rb") as f:
        plaintext: bytes = await f.read()

    if not plaintext:
        raise lazarus_vault.exceptions.EmptyFile(f"File {opts['file']} is empty")

    return plaintext


async def store(
    opts: lazarus_vault.types.VaultStoreOptions,
    session: lazarus_vault.types.VaultSession,
    random_source: lazarus_vault.envelope.RandomSource = secrets.token_bytes,
) -> lazarus_vault.types.EnvelopeResult:
    """Encrypt a file and store the ciphertext as a blob."""
    lazarus_vault.common.echo_progress(f"[1/5] Reading file: {opts['file']}")
    plaintext = await read_plaintext(opts)
    lazarus_vault.common.echo_progress(f"       File size: {len(plaintext)} bytes")

    lazarus_vault.common.echo_progress("[2/5] Computing SHA-256 checksum...")
    checksum = lazarus_vault.checksum.checksum(plaintext)
    lazarus_vault.common.echo_progress(f"       Checksum: {checksum}")

    lazarus_vault.common.echo_progress("[3/5] Encrypting file with AES-256-GCM...")
    ciphertext, key, nonce = lazarus_vault.envelope.encrypt(plaintext, random_source)
    lazarus_vault.common.echo_progress(f"       Encrypted size: {len(ciphertext)} bytes")

    lazarus_vault.common.echo_progress("[4/5] Uploading to Walrus...")
    lazarus_vault.common.conditional_echo_verbose(
        opts, f"       Publisher: {session['publisher']}"
    )
    lazarus_vault.common.conditional_echo_debug(
        opts, f"Storing the blob for {opts['epochs']} epochs"
    )
    blob_id = await lazarus_vault.client.put_blob(session, ciphertext, opts["epochs"])
    lazarus_vault.common.echo_progress(f"       Blob ID: {blob_id}")

    lazarus_vault.common.echo_progress("[5/5] Generating output...")
    return {
        "blob_id": blob_id,
        "decryption_key": lazarus_vault.envelope.encode_key_material(key, nonce),
        "checksum": checksum,
        "original_size": len(plaintext),
        "encrypted_size": len(ciphertext),
    }


async def wrap_store_exceptions(opts: lazarus_vault.types.VaultStoreOptions) -> int:
    """Wrap the store operation with required exception handling."""
    try:
        session = await lazarus_vault.client.open_session(
            publisher=opts["publisher"],
            timeout=opts["timeout"],
            no_check_certificate=opts["no_check_certificate"],
        )
    except lazarus_vault.exceptions.NoPublisher:
        click.echo("No Walrus publisher address was provided.", err=True)
        return 3

    exc: typing.Any = None
    try:
        async with aiohttp.ClientSession() as cs:
            session["client"] = cs
            result = await store(opts, session)
    except asyncio.CancelledError:
        click.echo("Received a keyboard interrupt, aborting...", err=True)
        click.echo("A blob that was already uploaded will not be removed.", err=True)
        return 130
    except lazarus_vault.exceptions.VaultError as e:
        return lazarus_vault.common.report_vault_error(e)
    except Exception as e:
        exc = e
    finally:
        # Log unhandled exceptions, and let them bubble
        if exc is not None:
            lazarus_vault.common.echo_unhandled_exception()
            raise exc

    lazarus_vault.common.echo_json(result)
    click.echo("", err=True)
    click.echo("Success! File encrypted and stored on Walrus.", err=True)
    click.echo(
        "CRITICAL: Save the 'decryption_key' securely. It cannot be recovered!",
        err=True,
    )
    return 0

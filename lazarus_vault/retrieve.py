"""Blob download and decrypt operation."""

import asyncio
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


async def retrieve(
    opts: lazarus_vault.types.VaultRetrieveOptions,
    session: lazarus_vault.types.VaultSession,
) -> int:
    """Download a blob and decrypt it into the output file.

    The output file is only written once the ciphertext has been
    authenticated, so a failed decryption never leaves partial plaintext.
    """
    # Validate the key before spending time on the download
    key, nonce = lazarus_vault.envelope.decode_key_material(opts["decryption_key"])

    lazarus_vault.common.echo_progress(f"[1/4] Downloading encrypted blob: {opts['blob_id']}")
    ciphertext = await lazarus_vault.client.get_blob(session, opts["blob_id"])
    lazarus_vault.common.echo_progress(f"       Ciphertext size: {len(ciphertext)} bytes")

    lazarus_vault.common.echo_progress("[2/4] Decoding decryption key...")
    lazarus_vault.common.conditional_echo_debug(
        opts, f"Decoded {len(key)} byte key and {len(nonce)} byte nonce"
    )

    lazarus_vault.common.echo_progress("[3/4] Decrypting blob...")
    plaintext = lazarus_vault.envelope.decrypt(ciphertext, key, nonce)

    if opts["checksum"]:
        checksum = lazarus_vault.checksum.checksum(plaintext)
        if checksum != opts["checksum"].strip().lower():
            raise lazarus_vault.exceptions.ChecksumMismatch(
                f"Expected checksum {opts['checksum']}, got {checksum}"
            )
        lazarus_vault.common.conditional_echo_verbose(
            opts, f"       Checksum verified: {checksum}"
        )

    lazarus_vault.common.echo_progress(f"[4/4] Writing decrypted file: {opts['output']}")
    try:
        async with aiofiles.open(opts["output"], "wb") as out_f:
            await out_f.write(plaintext)
    except OSError as e:
        raise lazarus_vault.exceptions.OutputWriteError(
            f"Failed to write decrypted output: {opts['output']} ({e.strerror})"
        ) from e

    return 0


async def wrap_retrieve_exceptions(
    opts: lazarus_vault.types.VaultRetrieveOptions,
) -> int:
    """Wrap the retrieve operation with required exception handling."""
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
    ret = 0
    try:
        async with aiohttp.ClientSession() as cs:
            session["client"] = cs
            ret = await retrieve(opts, session)
    except asyncio.CancelledError:
        click.echo("Received a keyboard interrupt, aborting...", err=True)
        return 130
    except lazarus_vault.exceptions.VaultError as e:
        return lazarus_vault.common.report_vault_error(e)
    except Exception as e:
        exc = e
    finally:
        if exc is not None:
            lazarus_vault.common.echo_unhandled_exception()
            raise exc

    click.echo("", err=True)
    click.echo(f"Success! Blob decrypted to {opts['output']}", err=True)
    return ret

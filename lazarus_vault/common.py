"""Common miscellaneous functions for lazarus-vault."""

import binascii
import json
import typing

import click

import lazarus_vault.exceptions
import lazarus_vault.types


def conditional_echo_verbose(
    opts: lazarus_vault.types.VaultCommandBaseOptions, message: str
) -> None:
    """Echo verbose messages if verbose level is configured."""
    if opts["verbose"]:
        click.echo(message, err=True)


def conditional_echo_debug(
    opts: lazarus_vault.types.VaultCommandBaseOptions, message: str
) -> None:
    """Echo debug messages if debug level is configured."""
    if opts["debug"]:
        click.echo(message, err=True)


def echo_progress(message: str) -> None:
    """Echo progress information, kept out of stdout reserved for results."""
    click.echo(message, err=True)


def echo_json(result: typing.Mapping[str, typing.Any]) -> None:
    """Print a command result as JSON on stdout."""
    click.echo(json.dumps(result, indent=2))


def strip_hex_prefix(value: str) -> str:
    """Remove an optional 0x prefix from a hex string."""
    if value[:2] in {"0x", "0X"}:
        return value[2:]
    return value


def decode_hex(value: str, what: str = "value") -> bytes:
    """Decode a hex string with an optional 0x prefix."""
    try:
        return binascii.unhexlify(strip_hex_prefix(value.strip()))
    except (binascii.Error, ValueError) as e:
        raise lazarus_vault.exceptions.HexFormatError(
            f"{what} must be a hex string"
        ) from e


def echo_unhandled_exception() -> None:
    """Print the banner preceding an unhandled exception traceback."""
    click.echo("Program encountered an unhandled exception.", err=True)
    click.echo(
        "If you think there's a mistake, copy this message and lines after it, and include it in your bug report for diagnostic purposes.",
        err=True,
    )
    click.echo(
        "If possible, include instructions on how to replicate the issue (what you did in order to make this happen)",
        err=True,
    )
    click.echo("Exception details:", err=True)
    click.echo(
        "-------------------------- BEGIN EXCEPTION TRACEBACK --------------------------",
        err=True,
    )


def report_vault_error(e: lazarus_vault.exceptions.VaultError) -> int:
    """Print a known vault error and return the matching exit code."""
    if isinstance(e, lazarus_vault.exceptions.InputError):
        click.echo(f"Invalid input: {e}", err=True)
        return 3
    if isinstance(e, lazarus_vault.exceptions.CipherError):
        click.echo(f"Cryptographic operation failed: {e}", err=True)
        return 4
    if isinstance(e, lazarus_vault.exceptions.TransportError):
        click.echo(f"Blob storage request failed: {e}", err=True)
        return 5
    click.echo(f"Operation failed: {e}", err=True)
    return 1

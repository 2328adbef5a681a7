"""Audit evidence operations."""

import click

import lazarus_vault.audit
import lazarus_vault.common
import lazarus_vault.exceptions
import lazarus_vault.signer
import lazarus_vault.types


def hash_audit(opts: lazarus_vault.types.VaultHashAuditOptions) -> int:
    """Compute and display the record hash of an audit record."""
    try:
        record = lazarus_vault.audit.build_record(
            opts["action"],
            opts["prompt"],
            opts["score"],
            opts["tags"],
            opts["decision"],
            opts["reason"],
            opts["timestamp"],
        )
        canonical = lazarus_vault.audit.canonical_bytes(record)
        record_hash = lazarus_vault.audit.hash_record(record)
    except lazarus_vault.exceptions.VaultError as e:
        return lazarus_vault.common.report_vault_error(e)

    lazarus_vault.common.conditional_echo_debug(
        opts, "Canonical record: " + canonical.decode("utf-8")
    )
    lazarus_vault.common.echo_json({"record_hash": record_hash})
    return 0


def sign_audit(opts: lazarus_vault.types.VaultSignAuditOptions) -> int:
    """Sign a record hash and display the signature with the public key."""
    if not opts["private_key"]:
        click.echo("No signing key was provided.", err=True)
        return 3

    try:
        signature, public_key = lazarus_vault.signer.sign(
            opts["record_hash"], opts["private_key"]
        )
    except lazarus_vault.exceptions.VaultError as e:
        return lazarus_vault.common.report_vault_error(e)

    lazarus_vault.common.conditional_echo_verbose(
        opts, f"Signed record hash with public key {public_key}"
    )
    lazarus_vault.common.echo_json(
        {
            "record_hash": opts["record_hash"],
            "signature": signature,
            "public_key": public_key,
        }
    )
    return 0


def verify_audit(opts: lazarus_vault.types.VaultVerifyAuditOptions) -> int:
    """Verify a record hash signature."""
    try:
        valid = lazarus_vault.signer.verify(
            opts["public_key"], opts["record_hash"], opts["signature"]
        )
    except lazarus_vault.exceptions.VaultError as e:
        return lazarus_vault.common.report_vault_error(e)

    lazarus_vault.common.echo_json({"record_hash": opts["record_hash"], "valid": valid})
    if not valid:
        click.echo("Signature does not match the record hash.", err=True)
        return 1
    return 0

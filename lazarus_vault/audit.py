"""Deterministic canonical form and hash of audit records.

The canonical form is a compact JSON object with a fixed field order. The
field names and their order are a compatibility contract with auditors that
re-derive record hashes later, so they must never change.
"""

import hashlib
import json

import lazarus_vault.exceptions
import lazarus_vault.types

HASH_PREFIX = "0x"


def validate_score(score: int) -> int:
    """Check that the score fits an unsigned 8-bit integer."""
    if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 255:
        raise lazarus_vault.exceptions.ScoreRangeError(
            f"Score must be an integer between 0 and 255, got {score!r}."
        )
    return score


def _check_text(field: str, value: str) -> None:
    """Check that a field value can be encoded as UTF-8."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise lazarus_vault.exceptions.TextEncodingError(
            f"Field {field} is not valid UTF-8 text"
        ) from e


def parse_tags(tags_csv: str) -> list[str]:
    """Parse a comma separated tag list into its canonical form.

    Whitespace around tags is removed, and blank and duplicate tags are
    dropped. Tags are ordered by their UTF-8 bytes, so the tag order in the
    input doesn't affect the record hash.
    """
    tags = {tag.strip() for tag in tags_csv.split(",")}
    tags.discard("")
    return sorted(tags, key=lambda tag: tag.encode("utf-8"))


def build_record(
    action: str,
    prompt: str,
    score: int,
    tags_csv: str,
    decision: str,
    reason: str,
    timestamp: str,
) -> lazarus_vault.types.CanonicalAuditRecord:
    """Build a canonical audit record from the raw field values."""
    for field, value in (
        ("action", action),
        ("prompt", prompt),
        ("tags", tags_csv),
        ("decision", decision),
        ("reason", reason),
        ("timestamp", timestamp),
    ):
        _check_text(field, value)

    return {
        "action": action,
        "prompt": prompt,
        "score": validate_score(score),
        "tags": parse_tags(tags_csv),
        "decision": decision,
        "reason": reason,
        "timestamp": timestamp,
    }


def canonical_bytes(record: lazarus_vault.types.CanonicalAuditRecord) -> bytes:
    """Serialize a canonical record into bytes."""
    ordered = {
        "action": record["action"],
        "prompt": record["prompt"],
        "score": record["score"],
        "tags": record["tags"],
        "decision": record["decision"],
        "reason": record["reason"],
        "timestamp": record["timestamp"],
    }
    try:
        return json.dumps(
            ordered,
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
    except UnicodeEncodeError as e:
        raise lazarus_vault.exceptions.TextEncodingError(
            "Audit record fields must be valid UTF-8 text"
        ) from e


def hash_record(record: lazarus_vault.types.CanonicalAuditRecord) -> str:
    """Hash a canonical record."""
    return HASH_PREFIX + hashlib.sha256(canonical_bytes(record)).hexdigest()


def canonicalize(
    action: str,
    prompt: str,
    score: int,
    tags_csv: str,
    decision: str,
    reason: str,
    timestamp: str,
) -> str:
    """Compute the record hash for an audit record."""
    return hash_record(
        build_record(action, prompt, score, tags_csv, decision, reason, timestamp)
    )

"""Walrus blob storage API client.

Walrus publishers and aggregators expose the same operations under more than
one path convention, depending on the deployed version. Each operation has an
ordered list of candidate request builders, and the candidates are tried in
order until one of them succeeds.
"""

import asyncio
import json
import os
import typing

import aiohttp

import lazarus_vault.exceptions
import lazarus_vault.types

StoreRequestBuilder = typing.Callable[[str, int], lazarus_vault.types.BlobRequest]
ReadRequestBuilder = typing.Callable[[str, str], lazarus_vault.types.BlobRequest]


def _store_request_legacy(
    publisher: str, epochs: int
) -> lazarus_vault.types.BlobRequest:
    """Build a store request for the v1/store path."""
    return {
        "method": "PUT",
        "url": f"{publisher}/v1/store",
        "params": {"epochs": str(epochs)},
    }


def _store_request_blobs(
    publisher: str, epochs: int
) -> lazarus_vault.types.BlobRequest:
    """Build a store request for the v1/blobs path."""
    return {
        "method": "PUT",
        "url": f"{publisher}/v1/blobs",
        "params": {"epochs": str(epochs)},
    }


def _read_request_legacy(
    publisher: str, blob_id: str
) -> lazarus_vault.types.BlobRequest:
    """Build a read request for the v1/<id> path."""
    return {
        "method": "GET",
        "url": f"{publisher}/v1/{blob_id}",
        "params": None,
    }


def _read_request_blobs(
    publisher: str, blob_id: str
) -> lazarus_vault.types.BlobRequest:
    """Build a read request for the v1/blobs/<id> path."""
    return {
        "method": "GET",
        "url": f"{publisher}/v1/blobs/{blob_id}",
        "params": None,
    }


STORE_REQUEST_BUILDERS: list[StoreRequestBuilder] = [
    _store_request_legacy,
    _store_request_blobs,
]

READ_REQUEST_BUILDERS: list[ReadRequestBuilder] = [
    _read_request_legacy,
    _read_request_blobs,
]


async def open_session(
    publisher: str = "",
    timeout: int = 0,
    no_check_certificate: bool = False,
) -> lazarus_vault.types.VaultSession:
    """Open a new session for accessing blob storage."""
    ret: lazarus_vault.types.VaultSession = {
        "client": None,
        "publisher": (
            publisher
            if publisher
            else os.environ.get(
                "WALRUS_PUBLISHER_URL",
                "",
            )
        ).rstrip("/"),
        "timeout": timeout if timeout else lazarus_vault.types.HTTP_TIMEOUT,
        "no_check_certificate": no_check_certificate,
    }

    if not ret["publisher"]:
        raise lazarus_vault.exceptions.NoPublisher

    return ret


def parse_blob_id(body: str) -> str:
    """Extract the blob id from a Walrus store response body."""
    try:
        parsed: lazarus_vault.types.WalrusStoreResponse = json.loads(body)
    except ValueError as e:
        raise lazarus_vault.exceptions.TransportError(
            "Could not parse store response as JSON"
        ) from e

    if not isinstance(parsed, dict):
        raise lazarus_vault.exceptions.TransportError(
            "Store response was not a JSON object"
        )

    for key in ("newlyCreated", "alreadyCertified"):
        entry = parsed.get(key)
        if not isinstance(entry, dict):
            continue
        blob_object = entry.get("blobObject")
        if isinstance(blob_object, dict) and blob_object.get("blobId"):
            return str(blob_object["blobId"])
        if entry.get("blobId"):
            return str(entry["blobId"])

    raise lazarus_vault.exceptions.TransportError("Store response is missing a blob id")


async def _fetch(
    session: lazarus_vault.types.VaultSession,
    request: lazarus_vault.types.BlobRequest,
    data: bytes | None = None,
) -> bytes:
    """Run a single candidate request and return the response body."""
    async with session["client"].request(  # type: ignore
        method=request["method"],
        url=request["url"],
        params=request["params"],
        data=data,
        headers=(
            {"Content-Type": "application/octet-stream"} if data is not None else None
        ),
        timeout=aiohttp.client.ClientTimeout(total=session["timeout"]),
        ssl=False if session["no_check_certificate"] else None,
    ) as resp:
        if resp.status < 200 or resp.status >= 300:
            detail = await resp.text()
            raise lazarus_vault.exceptions.TransportError(
                f"{request['url']} -> status {resp.status}: {detail}"
            )
        return await resp.read()


async def put_blob(
    session: lazarus_vault.types.VaultSession,
    data: bytes,
    epochs: int = lazarus_vault.types.DEFAULT_STORAGE_EPOCHS,
) -> str:
    """Store a blob and return the blob id assigned by the publisher."""
    last_err = ""
    for builder in STORE_REQUEST_BUILDERS:
        request = builder(session["publisher"], epochs)
        try:
            body = await _fetch(session, request, data)
        except lazarus_vault.exceptions.TransportError as e:
            last_err = str(e)
            continue
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_err = f"{request['url']} -> {e!r}"
            continue

        try:
            return parse_blob_id(body.decode("utf-8", errors="replace"))
        except lazarus_vault.exceptions.TransportError as e:
            last_err = f"{request['url']} -> {e}"

    raise lazarus_vault.exceptions.TransportError(
        f"Failed to upload blob to Walrus: {last_err}"
    )


async def get_blob(session: lazarus_vault.types.VaultSession, blob_id: str) -> bytes:
    """Fetch the contents of a blob."""
    last_err = ""
    for builder in READ_REQUEST_BUILDERS:
        request = builder(session["publisher"], blob_id)
        try:
            return await _fetch(session, request)
        except lazarus_vault.exceptions.TransportError as e:
            last_err = str(e)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_err = f"{request['url']} -> {e!r}"

    raise lazarus_vault.exceptions.TransportError(
        f"Failed to download blob {blob_id} from Walrus: {last_err}"
    )

"""Request fingerprints used as cache file names.

A fingerprint is a SHA-256 hex digest of a canonical JSON document built
from the request's path, query string, method, string-valued headers, body
and the first eight hex characters of the API key's own SHA-256 digest.

The URL is resolved against a dummy origin first and only its path and query
take part, so the same request against two hosts hashes identically.
Keys are sorted before hashing, so header order never matters.  The key
digest keeps entries of different accounts apart without the key itself
appearing in the cache.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

import httpx

from wanikani.models import RequestOptions

_DUMMY_ORIGIN = "https://base/"
_CREDENTIAL_DIGEST_LENGTH = 8


def fingerprint(url: str | httpx.URL, options: RequestOptions, credential: str) -> str:
    """Return the cache fingerprint for a request.

    Args:
        url: Absolute URL or path (with optional query string) of the request.
        options: Method, headers and body of the request as supplied by the
            caller, before authentication headers are added.
        credential: The API key the request is sent with.

    Returns:
        A 64-character lowercase hex digest.
    """
    target = httpx.URL(_DUMMY_ORIGIN).join(str(url))
    document = {
        "endpoint": target.path,
        "params": target.query.decode("ascii"),
        "options": {
            "method": (options.method or "GET").upper(),
            "headers": string_headers(options.headers),
            "body": options.body,
        },
        "credential": credential_digest(credential),
    }
    raw = json.dumps(document, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def credential_digest(credential: str) -> str:
    """Truncated SHA-256 digest of *credential*."""
    return hashlib.sha256(credential.encode("utf-8")).hexdigest()[:_CREDENTIAL_DIGEST_LENGTH]


def string_headers(headers: dict[str, Any] | None) -> dict[str, str]:
    """Keep only the headers whose value is a string."""
    return {key: value for key, value in (headers or {}).items() if isinstance(value, str)}

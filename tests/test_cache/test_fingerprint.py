"""Tests for request fingerprints."""

from __future__ import annotations

import hashlib
import json

import httpx

from wanikani.cache import fingerprint
from wanikani.cache.fingerprint import credential_digest, string_headers
from wanikani.models import RequestOptions

URL = "https://api.wanikani.com/v2/subjects?types=kanji"


class TestFingerprint:
    def test_is_sha256_hex(self) -> None:
        fp = fingerprint(URL, RequestOptions(), "key")
        assert len(fp) == 64
        int(fp, 16)

    def test_deterministic(self) -> None:
        assert fingerprint(URL, RequestOptions(), "key") == fingerprint(URL, RequestOptions(), "key")

    def test_canonical_document(self) -> None:
        """The digest covers path, query, method, string headers, body and key digest."""
        options = RequestOptions(method="get", headers={"X-A": "1"}, body=None)
        document = {
            "credential": hashlib.sha256(b"key").hexdigest()[:8],
            "endpoint": "/v2/subjects",
            "options": {"body": None, "headers": {"X-A": "1"}, "method": "GET"},
            "params": "types=kanji",
        }
        raw = json.dumps(document, sort_keys=True, separators=(",", ":"))
        assert fingerprint(URL, options, "key") == hashlib.sha256(raw.encode()).hexdigest()

    def test_accepts_httpx_url(self) -> None:
        assert fingerprint(httpx.URL(URL), RequestOptions(), "k") == fingerprint(URL, RequestOptions(), "k")

    def test_host_does_not_matter(self) -> None:
        other = "https://staging.example.com/v2/subjects?types=kanji"
        assert fingerprint(URL, RequestOptions(), "k") == fingerprint(other, RequestOptions(), "k")

    def test_path_matters(self) -> None:
        assert fingerprint(URL, RequestOptions(), "k") != fingerprint(
            "https://api.wanikani.com/v2/assignments?types=kanji", RequestOptions(), "k"
        )

    def test_query_matters(self) -> None:
        assert fingerprint(URL, RequestOptions(), "k") != fingerprint(
            "https://api.wanikani.com/v2/subjects?types=radical", RequestOptions(), "k"
        )

    def test_method_matters(self) -> None:
        assert fingerprint(URL, RequestOptions(method="GET"), "k") != fingerprint(
            URL, RequestOptions(method="POST"), "k"
        )

    def test_method_is_case_insensitive(self) -> None:
        assert fingerprint(URL, RequestOptions(method="put"), "k") == fingerprint(
            URL, RequestOptions(method="PUT"), "k"
        )

    def test_body_matters(self) -> None:
        assert fingerprint(URL, RequestOptions(body='{"a":1}'), "k") != fingerprint(
            URL, RequestOptions(body='{"a":2}'), "k"
        )

    def test_credential_matters(self) -> None:
        assert fingerprint(URL, RequestOptions(), "alice") != fingerprint(URL, RequestOptions(), "bob")

    def test_header_order_does_not_matter(self) -> None:
        a = RequestOptions(headers={"X-A": "1", "X-B": "2"})
        b = RequestOptions(headers={"X-B": "2", "X-A": "1"})
        assert fingerprint(URL, a, "k") == fingerprint(URL, b, "k")

    def test_non_string_headers_are_ignored(self) -> None:
        with_extra = RequestOptions(headers={"X-A": "1", "X-Count": 5, "X-None": None})
        plain = RequestOptions(headers={"X-A": "1"})
        assert fingerprint(URL, with_extra, "k") == fingerprint(URL, plain, "k")

    def test_credential_not_in_document(self) -> None:
        """Only a truncated digest of the key is hashed."""
        assert credential_digest("secret-key") == hashlib.sha256(b"secret-key").hexdigest()[:8]


class TestStringHeaders:
    def test_filters_non_strings(self) -> None:
        assert string_headers({"a": "x", "b": 1, "c": ["y"]}) == {"a": "x"}

    def test_none(self) -> None:
        assert string_headers(None) == {}

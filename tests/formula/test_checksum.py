"""Tests for checksum helpers."""

import hashlib
from pathlib import Path

import httpx
import pytest

from s3hero.formula.checksum import (
    is_placeholder_sha256,
    is_valid_sha256,
    sha256_file,
    sha256_url,
)


class TestChecksumValidation:
    """Tests for checksum shape checks."""

    def test_valid_sha256(self):
        assert is_valid_sha256(hashlib.sha256(b"s3hero").hexdigest()) is True

    @pytest.mark.parametrize("value", ["", "abc", "G" * 64, "A" * 64])
    def test_invalid_sha256(self, value: str):
        assert is_valid_sha256(value) is False

    @pytest.mark.parametrize(
        "value",
        ["0" * 64, "f" * 64, "PLACEHOLDER_SHA256", "placeholder", "TODO", ""],
    )
    def test_placeholders(self, value: str):
        """Obviously uncomputed values are placeholders."""
        assert is_placeholder_sha256(value) is True

    def test_real_checksum_is_not_placeholder(self):
        assert is_placeholder_sha256(hashlib.sha256(b"x").hexdigest()) is False


class TestSha256File:
    """Tests for sha256_file."""

    def test_hashes_contents(self, tmp_path: Path):
        path = tmp_path / "archive.tar.gz"
        path.write_bytes(b"release bytes")

        assert sha256_file(path) == hashlib.sha256(b"release bytes").hexdigest()

    def test_directory_raises(self, tmp_path: Path):
        with pytest.raises(RuntimeError, match="not a regular file"):
            sha256_file(tmp_path)


class TestSha256Url:
    """Tests for sha256_url with a mocked transport."""

    def test_streams_body(self):
        """The digest covers the whole response body."""
        body = b"x" * (3 * 1024 * 1024 + 17)
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body))

        with httpx.Client(transport=transport) as client:
            digest = sha256_url(client, "https://example.com/archive.tar.gz")

        assert digest == hashlib.sha256(body).hexdigest()

    def test_error_status_raises(self):
        """Non-2xx responses raise HTTPStatusError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))

        with httpx.Client(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                sha256_url(client, "https://example.com/missing.tar.gz")

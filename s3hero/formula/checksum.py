import hashlib
import pathlib
import re

import httpx

import s3hero.logging

SHA256_RE = re.compile(r"^[0-9a-f]{64}$")
CHUNK_SIZE = 1024 * 1024

# Values seen in scaffolded formulae that were never filled in
KNOWN_PLACEHOLDERS = {
    "placeholder",
    "placeholder_sha256",
    "todo",
    "replace_me",
    "xxx",
}


def is_valid_sha256(value: str) -> bool:
    return SHA256_RE.match(value) is not None


def is_placeholder_sha256(value: str) -> bool:
    """
    Returns True for checksums that were obviously never computed: a single
    repeated character ("000...0", "aaa...a") or a known placeholder word.
    """
    normalized = value.strip().lower()
    if not normalized:
        return True
    if normalized in KNOWN_PLACEHOLDERS or "placeholder" in normalized:
        return True
    return len(normalized) == 64 and len(set(normalized)) == 1


def sha256_file(path: pathlib.Path) -> str:
    """
    Returns the hex digest of the SHA256 hash of the given file.
    """
    if not path.is_file():
        raise RuntimeError(f"{path} is not a regular file.")

    with path.open("rb") as f:
        return hashlib.file_digest(f, "sha256").hexdigest()


def sha256_url(client: httpx.Client, url: str) -> str:
    """
    Streams the body at url and returns the hex digest of its SHA256 hash.

    Raises httpx.HTTPStatusError for non-2xx responses so callers can decide
    whether to retry.
    """
    digest = hashlib.sha256()
    with client.stream("GET", url, follow_redirects=True) as response:
        response.raise_for_status()
        for chunk in response.iter_bytes(CHUNK_SIZE):
            digest.update(chunk)

    s3hero.logging.debug("sha256(%s) = %s", url, digest.hexdigest())
    return digest.hexdigest()

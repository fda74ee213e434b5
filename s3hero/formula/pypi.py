"""Resolve pinned Python requirements into formula resources.

Each requirement must be pinned (``name==version``). The PyPI JSON API is
queried for that release and the source distribution is selected; its
published SHA-256 digest becomes the resource checksum, so nothing has to be
downloaded.
"""

import re
from typing import Any, Optional

import httpx

import s3hero.logging
from s3hero.formula.models import Resource
from s3hero.retry import RetryExhausted, retry_with_backoff

PYPI_JSON_URL = "https://pypi.org/pypi/{name}/{version}/json"
DEFAULT_TIMEOUT = 30.0

REQUIREMENT_RE = re.compile(r"^\s*(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)\s*==\s*(?P<version>[^\s;,]+)\s*$")


class ResourceResolutionError(Exception):
    """Raised when a requirement cannot be turned into a resource."""

    pass


def parse_requirement(requirement: str) -> tuple[str, str]:
    """Split ``name==version`` into its parts.

    Raises:
        ResourceResolutionError: If the requirement is not pinned.
    """
    match = REQUIREMENT_RE.match(requirement)
    if match is None:
        raise ResourceResolutionError(
            f"Requirement '{requirement}' must be pinned as name==version"
        )
    return match.group("name"), match.group("version")


def normalize_name(name: str) -> str:
    """Normalize a project name the way PyPI does (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


def _fetch_json(client: httpx.Client, url: str) -> dict[str, Any]:
    response = client.get(url, follow_redirects=True)
    response.raise_for_status()
    return response.json()


def select_sdist(release: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Pick the source distribution from a PyPI release payload."""
    for file_info in release.get("urls", []):
        if not isinstance(file_info, dict) or not file_info.get("url"):
            continue
        if file_info.get("packagetype") == "sdist" and not file_info.get("yanked", False):
            return file_info
    return None


def resolve_resource(requirement: str, client: httpx.Client) -> Resource:
    """Resolve one pinned requirement into a Resource.

    Args:
        requirement: ``name==version``
        client: httpx client used for the PyPI request

    Returns:
        Resource named after the normalized project name, pointing at the
        release's sdist.

    Raises:
        ResourceResolutionError: If the requirement is unpinned, the
                                 release does not exist, PyPI cannot be
                                 reached or there is no sdist.
    """
    name, version = parse_requirement(requirement)
    url = PYPI_JSON_URL.format(name=name, version=version)

    try:
        release = retry_with_backoff(_fetch_json, args=(client, url))
    except httpx.HTTPStatusError as e:
        raise ResourceResolutionError(
            f"{name}=={version}: PyPI returned HTTP {e.response.status_code}"
        ) from e
    except RetryExhausted as e:
        raise ResourceResolutionError(
            f"{name}=={version}: PyPI unavailable after {e.attempts} attempts"
        ) from e
    except httpx.HTTPError as e:
        raise ResourceResolutionError(f"{name}=={version}: {e}") from e
    except ValueError as e:
        raise ResourceResolutionError(
            f"{name}=={version}: PyPI returned a response that is not JSON"
        ) from e

    if not isinstance(release, dict) or not isinstance(release.get("urls"), list):
        raise ResourceResolutionError(f"{name}=={version}: unexpected PyPI response")

    sdist = select_sdist(release)
    if sdist is None:
        raise ResourceResolutionError(f"{name}=={version} has no source distribution")

    sha256 = (sdist.get("digests") or {}).get("sha256")
    if not sha256:
        raise ResourceResolutionError(f"{name}=={version}: sdist has no sha256 digest")

    s3hero.logging.debug("Resolved %s==%s -> %s", name, version, sdist["url"])
    return Resource(name=normalize_name(name), url=sdist["url"], sha256=sha256)


def resolve_resources(
    requirements: list[str],
    client: Optional[httpx.Client] = None,
) -> list[Resource]:
    """Resolve several requirements, returning resources sorted by name."""
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=DEFAULT_TIMEOUT)

    try:
        resources = [resolve_resource(req, client) for req in requirements]
    finally:
        if owns_client:
            client.close()

    return sorted(resources, key=lambda r: r.name)

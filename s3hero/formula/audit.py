"""Consistency checks for package descriptors.

A descriptor is only installable when every declared checksum matches the
bytes behind its URL. Most mistakes that break this are visible without any
network access (placeholder checksums, copy-pasted digests, pins taken from
another fork), so the offline checks run by default and the download check
is opt-in.

Check IDs:
    checksum-format       sha256 is not 64 lowercase hex characters
    checksum-placeholder  sha256 was never computed
    checksum-duplicate    two artifacts declare the same sha256
    checksum-mismatch     (online) downloaded bytes hash differently
    url-scheme            artifact URL is not https
    homepage-owner        archive/head URL points at another repository
    resource-duplicate    resource declared twice
    resource-order        resources are not sorted by name
    resource-version      resource URL does not name a version
    test-name             smoke test does not expect the package name
    license               license is missing
    fetch                 (online) artifact could not be downloaded
"""

import time
from typing import Callable, Optional

import httpx

import s3hero.logging
from s3hero.formula.checksum import (
    is_placeholder_sha256,
    is_valid_sha256,
    sha256_url,
)
from s3hero.formula.models import (
    AuditResult,
    Finding,
    PackageDescriptor,
    github_repo,
)
from s3hero.retry import RetryExhausted, retry_with_backoff

ERROR = "error"
WARNING = "warning"

Fetcher = Callable[[str], str]


def _artifacts(descriptor: PackageDescriptor) -> list[tuple[str, str, str]]:
    """(subject, url, sha256) for the source archive and every resource."""
    artifacts = [(descriptor.name, descriptor.url, descriptor.sha256)]
    for resource in descriptor.resources:
        artifacts.append((resource.name, resource.url, resource.sha256))
    return artifacts


def check_checksums(descriptor: PackageDescriptor) -> list[Finding]:
    findings: list[Finding] = []
    seen: dict[str, str] = {}

    for subject, _url, sha256 in _artifacts(descriptor):
        if is_placeholder_sha256(sha256):
            findings.append(
                Finding(
                    "checksum-placeholder",
                    ERROR,
                    f"sha256 '{sha256}' is a placeholder",
                    subject,
                )
            )
            continue

        if not is_valid_sha256(sha256):
            findings.append(
                Finding(
                    "checksum-format",
                    ERROR,
                    f"sha256 '{sha256}' is not 64 lowercase hex characters",
                    subject,
                )
            )
            continue

        if sha256 in seen:
            findings.append(
                Finding(
                    "checksum-duplicate",
                    ERROR,
                    f"sha256 is also declared for '{seen[sha256]}'",
                    subject,
                )
            )
        else:
            seen[sha256] = subject

    return findings


def check_urls(descriptor: PackageDescriptor) -> list[Finding]:
    findings: list[Finding] = []

    for subject, url, _sha256 in _artifacts(descriptor):
        if not url.startswith("https://"):
            findings.append(
                Finding("url-scheme", ERROR, f"URL '{url}' is not https", subject)
            )

    homepage_repo = github_repo(descriptor.homepage)
    if homepage_repo is None:
        return findings

    others = [("url", descriptor.url)]
    if descriptor.head is not None:
        others.append(("head", descriptor.head.url))

    for label, url in others:
        repo = github_repo(url)
        if repo is not None and repo != homepage_repo:
            findings.append(
                Finding(
                    "homepage-owner",
                    WARNING,
                    f"{label} points at {repo[0]}/{repo[1]} but homepage is "
                    f"{homepage_repo[0]}/{homepage_repo[1]}",
                    descriptor.name,
                )
            )

    return findings


def check_resources(descriptor: PackageDescriptor) -> list[Finding]:
    findings: list[Finding] = []
    names = [resource.name for resource in descriptor.resources]

    seen: set[str] = set()
    for name in names:
        if name in seen:
            findings.append(
                Finding("resource-duplicate", ERROR, "resource declared twice", name)
            )
        seen.add(name)

    if names != sorted(names, key=str.lower):
        findings.append(
            Finding(
                "resource-order",
                WARNING,
                "resources are not sorted by name",
                descriptor.name,
            )
        )

    for resource in descriptor.resources:
        if resource.version is None:
            findings.append(
                Finding(
                    "resource-version",
                    WARNING,
                    f"cannot read a version from '{resource.url}'",
                    resource.name,
                )
            )

    return findings


def check_metadata(descriptor: PackageDescriptor) -> list[Finding]:
    findings: list[Finding] = []

    expect = descriptor.smoke_test.expect
    if expect != descriptor.name:
        findings.append(
            Finding(
                "test-name",
                ERROR,
                f"smoke test expects '{expect}' instead of '{descriptor.name}'",
                descriptor.name,
            )
        )

    if not descriptor.license:
        findings.append(
            Finding("license", WARNING, "no license declared", descriptor.name)
        )

    return findings


def check_downloads(descriptor: PackageDescriptor, fetcher: Fetcher) -> list[Finding]:
    """Download every artifact and compare against its declared checksum.

    Artifacts with a placeholder checksum are skipped; they already fail.
    """
    findings: list[Finding] = []

    for subject, url, sha256 in _artifacts(descriptor):
        if is_placeholder_sha256(sha256):
            continue

        try:
            actual = fetcher(url)
        except RetryExhausted as e:
            findings.append(
                Finding("fetch", ERROR, f"gave up after {e.attempts} attempts: {url}", subject)
            )
            continue
        except httpx.HTTPError as e:
            findings.append(Finding("fetch", ERROR, f"could not fetch {url}: {e}", subject))
            continue

        if actual != sha256:
            findings.append(
                Finding(
                    "checksum-mismatch",
                    ERROR,
                    f"declared {sha256} but downloaded bytes hash to {actual}",
                    subject,
                )
            )

    return findings


def make_fetcher(client: httpx.Client) -> Fetcher:
    """Build a fetcher that hashes URLs through client with retries."""

    def fetch(url: str) -> str:
        return retry_with_backoff(sha256_url, args=(client, url))

    return fetch


def audit_descriptor(
    descriptor: PackageDescriptor,
    source: str = "",
    online: bool = False,
    fetcher: Optional[Fetcher] = None,
) -> AuditResult:
    """Run all checks against a descriptor.

    Args:
        descriptor: The descriptor to audit
        source: Where the descriptor came from (file path), for reporting
        online: Also download every artifact and verify its checksum
        fetcher: Callable returning the sha256 of a URL (defaults to an
                 httpx-based fetcher with retries)

    Returns:
        AuditResult with all findings
    """
    start = time.monotonic()

    findings: list[Finding] = []
    findings.extend(check_checksums(descriptor))
    findings.extend(check_urls(descriptor))
    findings.extend(check_resources(descriptor))
    findings.extend(check_metadata(descriptor))

    if online:
        if fetcher is None:
            with httpx.Client(timeout=60.0) as client:
                findings.extend(check_downloads(descriptor, make_fetcher(client)))
        else:
            findings.extend(check_downloads(descriptor, fetcher))

    result = AuditResult(
        name=descriptor.name,
        source=source or descriptor.name,
        findings=findings,
        duration_seconds=time.monotonic() - start,
    )
    s3hero.logging.debug(
        "Audited %s: %d finding(s), status %s",
        result.source,
        len(findings),
        result.status.value,
    )
    return result


def compare_descriptors(
    left: PackageDescriptor,
    right: PackageDescriptor,
) -> list[str]:
    """List the inconsistencies between two records of the same package.

    Neither side is treated as authoritative; every difference is reported
    symmetrically.

    Returns:
        Human-readable difference lines; empty when the records agree and
        neither carries placeholder checksums.
    """
    differences: list[str] = []

    if left.name != right.name:
        differences.append(f"name: {left.name} != {right.name}")

    for label in ("homepage", "url", "sha256", "license", "desc"):
        left_value = getattr(left, label)
        right_value = getattr(right, label)
        if left_value != right_value:
            differences.append(f"{label}: {left_value} != {right_value}")

    left_head = (left.head.url, left.head.branch) if left.head else None
    right_head = (right.head.url, right.head.branch) if right.head else None
    if left_head != right_head:
        differences.append(f"head: {left_head} != {right_head}")

    if sorted(left.depends_on) != sorted(right.depends_on):
        differences.append(
            f"depends_on: {', '.join(left.depends_on)} != {', '.join(right.depends_on)}"
        )

    left_resources = {r.name: r for r in left.resources}
    right_resources = {r.name: r for r in right.resources}

    for name in sorted(left_resources.keys() - right_resources.keys()):
        differences.append(f"resource {name}: only in first")
    for name in sorted(right_resources.keys() - left_resources.keys()):
        differences.append(f"resource {name}: only in second")

    for name in sorted(left_resources.keys() & right_resources.keys()):
        a = left_resources[name]
        b = right_resources[name]
        if a.version != b.version:
            differences.append(f"resource {name}: {a.version} != {b.version}")
        elif a.sha256 != b.sha256:
            differences.append(f"resource {name}: sha256 differs for {a.version}")

    for label, descriptor in (("first", left), ("second", right)):
        placeholders = [
            subject
            for subject, _url, sha256 in _artifacts(descriptor)
            if is_placeholder_sha256(sha256)
        ]
        if placeholders:
            differences.append(
                f"{label} record has placeholder checksums: {', '.join(placeholders)}"
            )

    return differences

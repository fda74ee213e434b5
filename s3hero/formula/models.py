"""Data models for package descriptors and their audits."""

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from s3hero.models import ResultStatus

INSTALL_WITH_RESOURCES = "virtualenv_install_with_resources"

_GITHUB_RE = re.compile(r"^https://github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?(?:/|$)")
_TAG_RE = re.compile(r"/v?(?P<version>\d+(?:\.\d+)*(?:[-.]?\w+)?)\.tar\.gz$")
_SDIST_RE = re.compile(r"/(?P<name>[^/]+?)-(?P<version>\d[^/]*?)\.(?:tar\.gz|zip|tar\.bz2)$")


def github_repo(url: str) -> Optional[tuple[str, str]]:
    """Extract ``(owner, repo)`` from a GitHub URL, if it is one."""
    match = _GITHUB_RE.match(url)
    if match is None:
        return None
    return match.group("owner"), match.group("repo")


def sdist_version(url: str) -> Optional[str]:
    """Extract the version from a source distribution URL.

    >>> sdist_version("https://files.pythonhosted.org/packages/x/y/boto3-1.42.39.tar.gz")
    '1.42.39'
    """
    match = _SDIST_RE.search(url)
    if match is None:
        return None
    return match.group("version")


@dataclass
class Resource:
    """A pinned library the package vendors into its isolated environment."""

    name: str
    url: str
    sha256: str

    @property
    def version(self) -> Optional[str]:
        return sdist_version(self.url)


@dataclass
class HeadRef:
    """Development reference used for unreleased builds."""

    url: str
    branch: str = "main"


@dataclass
class SmokeTest:
    """Asserts that ``<executable> --version`` output contains ``expect``."""

    executable: str
    expect: str
    args: list[str] = field(default_factory=lambda: ["--version"])


@dataclass
class PackageDescriptor:
    """How to fetch, install and smoke-test a package on a packaging host."""

    name: str
    desc: str
    homepage: str
    url: str
    sha256: str
    license: str = ""
    head: Optional[HeadRef] = None
    depends_on: list[str] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    install: str = INSTALL_WITH_RESOURCES
    test: Optional[SmokeTest] = None

    def __post_init__(self):
        # A package without a declared test gets the default --version check
        if self.test is None:
            self.test = SmokeTest(executable=self.name, expect=self.name)

    @property
    def class_name(self) -> str:
        """Ruby class name for the formula (``s3hero`` -> ``S3hero``)."""
        parts = re.split(r"[-_@.]", self.name)
        return "".join(part[:1].upper() + part[1:] for part in parts if part)

    @property
    def version(self) -> Optional[str]:
        """Release version taken from the source archive URL."""
        match = _TAG_RE.search(self.url)
        if match is None:
            return None
        return match.group("version")

    @property
    def smoke_test(self) -> SmokeTest:
        """The declared smoke test, or the default one for this package."""
        if self.test is None:
            return SmokeTest(executable=self.name, expect=self.name)
        return self.test

    def get_resource(self, name: str) -> Optional[Resource]:
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "desc": self.desc,
            "homepage": self.homepage,
            "url": self.url,
            "sha256": self.sha256,
            "license": self.license,
            "version": self.version,
            "head": (
                {"url": self.head.url, "branch": self.head.branch}
                if self.head
                else None
            ),
            "depends_on": list(self.depends_on),
            "resources": [
                {"name": r.name, "url": r.url, "sha256": r.sha256}
                for r in self.resources
            ],
            "install": self.install,
            "test": {
                "executable": self.smoke_test.executable,
                "args": list(self.smoke_test.args),
                "expect": self.smoke_test.expect,
            },
        }


@dataclass
class Finding:
    """A single rule violation found while auditing a descriptor."""

    check_id: str
    severity: str  # "error" or "warning"
    message: str
    subject: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass
class AuditResult:
    """All findings for one descriptor."""

    name: str
    source: str
    findings: list[Finding] = field(default_factory=list)
    duration_seconds: float = 0.0
    error_message: Optional[str] = None

    @property
    def status(self) -> ResultStatus:
        if self.error_message:
            return ResultStatus.ERROR
        if any(f.is_error for f in self.findings):
            return ResultStatus.FAIL
        if self.findings:
            return ResultStatus.WARN
        return ResultStatus.PASS


@dataclass
class SmokeResult:
    """Outcome of running a descriptor's smoke test."""

    command: list[str]
    expect: str
    status: ResultStatus
    output: str = ""
    error_message: Optional[str] = None

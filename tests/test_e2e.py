"""End-to-end tests that run the CLI as a separate process.

The version and offline formula tests always run. Tests that talk to PyPI,
GitHub or an S3 service are marked e2e and need network access; the S3
check also needs a configured profile named by S3HERO_E2E_PROFILE.

Run with: pytest tests/test_e2e.py -v
Skip with: pytest -m "not e2e"
"""

import json
import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from s3hero import __version__

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


def run_cli(*args, timeout=300, env=None) -> subprocess.CompletedProcess:
    """Run the CLI with given arguments and return the result."""
    cmd = [sys.executable, "-m", "s3hero", *args]
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        timeout=timeout,
        env=env,
    )


class TestVersion:
    """The --version output used by the formula's smoke test."""

    def test_version_contains_name(self):
        """--version prints the package name."""
        result = run_cli("--version", timeout=30)

        assert result.returncode == 0
        assert "s3hero" in result.stdout

    def test_version_contains_number(self):
        result = run_cli("--version", timeout=30)

        assert __version__ in result.stdout

    def test_installed_executable_passes_smoke(self):
        """The installed console script satisfies the formula's test block."""
        executable = shutil.which("s3hero")
        if executable is None:
            pytest.skip("s3hero is not installed on PATH")

        result = run_cli("formula", "smoke", "--executable", executable, timeout=60)

        assert result.returncode == 0, result.stderr
        assert "PASS: output contains 's3hero'" in result.stdout


class TestOfflineFormula:
    """Formula commands that need no network access."""

    def test_render_agrees_with_shipped_formula(self, tmp_path: Path):
        """render produces a formula consistent with Formula/s3hero.rb."""
        target = tmp_path / "s3hero.rb"

        rendered = run_cli("formula", "render", "-o", str(target), timeout=60)
        compared = run_cli(
            "formula", "compare", str(target), "Formula/s3hero.rb", timeout=60
        )

        assert rendered.returncode == 0, rendered.stderr
        assert compared.returncode == 0, compared.stdout

    def test_audit_writes_json(self, tmp_path: Path):
        """audit of the shipped formula passes and writes a report."""
        report = tmp_path / "audit.json"

        result = run_cli(
            "formula", "audit", "Formula/s3hero.rb", "-q", "-j", str(report), timeout=60
        )

        assert result.returncode == 0, result.stderr
        data = json.loads(report.read_text())
        assert data["summary"]["all_passed"] is True

    def test_profile_round_trip(self, tmp_path: Path):
        """Profiles persist between invocations."""
        env = dict(os.environ, S3HERO_CONFIG_DIR=str(tmp_path / "config"))
        env.pop("S3HERO_PROFILE", None)

        added = run_cli(
            "profile", "add", "r2",
            "--provider", "cloudflare",
            "--account-id", "abc123",
            "--access-key-id", "key",
            "--secret-access-key", "secret-value",
            timeout=60,
            env=env,
        )
        listed = run_cli("profile", "list", timeout=60, env=env)

        assert added.returncode == 0, added.stderr
        assert "* r2 (cloudflare)" in listed.stdout


@pytest.mark.e2e
class TestOnline:
    """Tests against real services."""

    def test_online_audit(self):
        """Every artifact in the shipped formula matches its checksum."""
        result = run_cli("formula", "audit", "Formula/s3hero.rb", "--online")

        assert result.returncode == 0, result.stdout

    def test_resolve_pinned_resource(self):
        """A pinned requirement resolves to the checksum in the formula."""
        result = run_cli("formula", "resources", "six==1.17.0", timeout=120)

        assert result.returncode == 0, result.stderr
        assert (
            'sha256 "ff70335d468e7eb6ec65b95b99d3a2836546063f63acc5171de367e834932a81"'
            in result.stdout
        )

    def test_profile_connection(self):
        """A configured profile can list buckets."""
        profile = os.environ.get("S3HERO_E2E_PROFILE")
        if not profile:
            pytest.skip("S3HERO_E2E_PROFILE not set")

        result = run_cli("profile", "test", profile, timeout=120)

        assert result.returncode == 0, result.stderr
        assert "OK" in result.stdout

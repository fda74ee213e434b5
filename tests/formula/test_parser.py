"""Tests for the formula parser."""

from pathlib import Path

import pytest

from s3hero.formula.models import INSTALL_WITH_RESOURCES, SmokeTest
from s3hero.formula.parser import FormulaParseError, load_formula, parse_formula

MINIMAL = '''
class Demo < Formula
  desc "Demo tool"
  homepage "https://example.com/demo"
  url "https://example.com/demo-1.0.tar.gz"
  sha256 "aaaabbbbccccddddeeeeffff0000111122223333444455556666777788889999"
end
'''


class TestParseCanonicalFormula:
    """Parsing the fully checksummed s3hero formula."""

    def test_identity_fields(self, canonical_formula_path: Path):
        """Top-level stanzas are read."""
        descriptor = load_formula(canonical_formula_path)

        assert descriptor.name == "s3hero"
        assert descriptor.class_name == "S3hero"
        assert descriptor.desc.startswith("CLI tool to manage S3 buckets")
        assert descriptor.homepage == "https://github.com/kamaravichow/s3hero"
        assert descriptor.license == "MIT"
        assert descriptor.version == "1.0.0"
        assert descriptor.sha256 == (
            "e3a109ab7b106e8fb56cbb6a88a3e708768c775f8faf75be9c1ebcf2be547c95"
        )

    def test_head_reference(self, canonical_formula_path: Path):
        """The head URL and branch are read."""
        descriptor = load_formula(canonical_formula_path)

        assert descriptor.head is not None
        assert descriptor.head.url == "https://github.com/kamaravichow/s3hero.git"
        assert descriptor.head.branch == "main"

    def test_depends_on(self, canonical_formula_path: Path):
        """Runtime prerequisites are read in order."""
        descriptor = load_formula(canonical_formula_path)

        assert descriptor.depends_on == ["libyaml", "python@3.12"]

    def test_resources(self, canonical_formula_path: Path):
        """Resource blocks are read without touching the top-level url."""
        descriptor = load_formula(canonical_formula_path)

        assert len(descriptor.resources) == 15
        boto3 = descriptor.get_resource("boto3")
        assert boto3 is not None
        assert boto3.version == "1.42.39"
        assert boto3.sha256 == (
            "d03f82363314759eff7f84a27b9e6428125f89d8119e4588e8c2c1d79892c956"
        )
        assert descriptor.get_resource("python-dateutil").version == "2.9.0.post0"
        assert descriptor.get_resource("markdown-it-py").version == "3.0.0"

    def test_install_and_test(self, canonical_formula_path: Path):
        """The install method and the smoke test are read."""
        descriptor = load_formula(canonical_formula_path)

        assert descriptor.install == INSTALL_WITH_RESOURCES
        assert descriptor.test is not None
        assert descriptor.test.executable == "s3hero"
        assert descriptor.test.args == ["--version"]
        assert descriptor.test.expect == "s3hero"


class TestParseScaffoldFormula:
    """Parsing the scaffolded formula with placeholders."""

    def test_placeholder_values_are_kept(self, scaffold_formula_path: Path):
        """Placeholders are data for the audit, not parse errors."""
        descriptor = load_formula(scaffold_formula_path)

        assert descriptor.sha256 == "0" * 64
        assert all(r.sha256 == "PLACEHOLDER_SHA256" for r in descriptor.resources)

    def test_test_expects_capitalized_name(self, scaffold_formula_path: Path):
        """The capitalized expectation is preserved."""
        descriptor = load_formula(scaffold_formula_path)

        assert descriptor.test.expect == "S3Hero"


class TestParseFormulaEdgeCases:
    """Edge cases for parse_formula."""

    def test_minimal_formula(self):
        """Optional stanzas default sensibly."""
        descriptor = parse_formula(MINIMAL)

        assert descriptor.name == "demo"
        assert descriptor.license == ""
        assert descriptor.head is None
        assert descriptor.resources == []
        assert descriptor.test == SmokeTest(executable="demo", expect="demo")
        assert descriptor.smoke_test.expect == "demo"

    def test_head_without_branch_defaults_to_main(self):
        """A bare head URL uses the main branch."""
        text = MINIMAL.replace(
            "end\n", '  head "https://example.com/demo.git"\nend\n'
        )

        descriptor = parse_formula(text)

        assert descriptor.head.branch == "main"

    def test_camel_case_class_name(self):
        """Multi-word class names map to dashed names."""
        descriptor = parse_formula(MINIMAL.replace("class Demo", "class AwsTool"))

        assert descriptor.name == "aws-tool"

    def test_trailing_comments_ignored(self):
        """Comments after stanzas are stripped."""
        text = MINIMAL.replace(
            'desc "Demo tool"', 'desc "Demo tool" # short description'
        )

        assert parse_formula(text).desc == "Demo tool"

    def test_unrelated_blocks_are_skipped(self):
        """Nested blocks do not confuse the block tracking."""
        text = MINIMAL.replace(
            "end\n",
            "  on_macos do\n"
            '    depends_on "gettext"\n'
            "  end\n"
            '  depends_on "python@3.12"\n'
            "end\n",
        )

        descriptor = parse_formula(text)

        assert descriptor.depends_on == ["python@3.12"]

    def test_missing_class_raises(self):
        """Text without a formula class is rejected."""
        with pytest.raises(FormulaParseError, match="no formula class"):
            parse_formula('desc "nothing"\n')

    def test_missing_sha256_raises(self):
        """The source checksum is required."""
        text = "\n".join(
            line for line in MINIMAL.splitlines() if "sha256" not in line
        )

        with pytest.raises(FormulaParseError, match="missing 'sha256'"):
            parse_formula(text)

    def test_resource_without_checksum_raises(self):
        """Resources need both url and sha256."""
        text = MINIMAL.replace(
            "end\n",
            '  resource "six" do\n'
            '    url "https://example.com/six-1.17.0.tar.gz"\n'
            "  end\n"
            "end\n",
        )

        with pytest.raises(FormulaParseError, match="resource 'six'"):
            parse_formula(text)

    def test_unbalanced_end_raises(self):
        """A stray end is reported."""
        with pytest.raises(FormulaParseError, match="unexpected 'end'"):
            parse_formula(MINIMAL + "end\n")

    def test_load_missing_file_raises(self, tmp_path: Path):
        """Missing files are reported."""
        with pytest.raises(FormulaParseError, match="not found"):
            load_formula(tmp_path / "missing.rb")

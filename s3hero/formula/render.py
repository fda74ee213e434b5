"""Render package descriptors as Homebrew formula source."""

from pathlib import Path

from s3hero.formula.models import PackageDescriptor

HEADER_TEMPLATE = """\
# {title} Homebrew Formula
#
# To install locally (for testing):
#   brew install --build-from-source ./{name}.rb
#
# To add to a tap:
#   1. Create a tap repository: github.com/<username>/homebrew-{name}
#   2. Copy this file to the tap repository as Formula/{name}.rb
#   3. Install with: brew install <username>/{name}/{name}
#
"""


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")
    return '"' + escaped + '"'


def render_formula(descriptor: PackageDescriptor, header: bool = True) -> str:
    """Render a descriptor as formula source.

    Resources are emitted in declaration order. The install step delegates
    to the host's isolated-environment routine and the test block asserts on
    the ``--version`` output.
    """
    lines: list[str] = []

    if header:
        lines.append(
            HEADER_TEMPLATE.format(title=descriptor.class_name, name=descriptor.name)
        )

    lines.append(f"class {descriptor.class_name} < Formula")
    lines.append("  include Language::Python::Virtualenv")
    lines.append("")
    lines.append(f"  desc {_quote(descriptor.desc)}")
    lines.append(f"  homepage {_quote(descriptor.homepage)}")
    lines.append(f"  url {_quote(descriptor.url)}")
    lines.append(f"  sha256 {_quote(descriptor.sha256)}")
    if descriptor.license:
        lines.append(f"  license {_quote(descriptor.license)}")
    if descriptor.head is not None:
        lines.append(
            f"  head {_quote(descriptor.head.url)}, branch: {_quote(descriptor.head.branch)}"
        )

    if descriptor.depends_on:
        lines.append("")
        for dependency in descriptor.depends_on:
            lines.append(f"  depends_on {_quote(dependency)}")

    for resource in descriptor.resources:
        lines.append("")
        lines.append(f"  resource {_quote(resource.name)} do")
        lines.append(f"    url {_quote(resource.url)}")
        lines.append(f"    sha256 {_quote(resource.sha256)}")
        lines.append("  end")

    smoke = descriptor.smoke_test
    command = " ".join([smoke.executable, *smoke.args])

    lines.append("")
    lines.append("  def install")
    lines.append(f"    {descriptor.install}")
    lines.append("  end")
    lines.append("")
    lines.append("  test do")
    lines.append(f'    assert_match {_quote(smoke.expect)}, shell_output("#{{bin}}/{command}")')
    lines.append("  end")
    lines.append("end")

    return "\n".join(lines) + "\n"


def write_formula(descriptor: PackageDescriptor, path: Path) -> None:
    """Render a descriptor to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_formula(descriptor), encoding="utf-8")

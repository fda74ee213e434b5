"""Parse Homebrew-style Python formulae into package descriptors.

Only the declarative subset that Python application formulae use is
understood: metadata stanzas, ``head``, ``depends_on``, ``resource`` blocks,
the install method and an ``assert_match`` smoke test. Anything else is
ignored.
"""

import re
from pathlib import Path
from typing import Optional

import s3hero.logging
from s3hero.formula.models import (
    HeadRef,
    PackageDescriptor,
    Resource,
    SmokeTest,
)

_STRING = r'"((?:[^"\\]|\\.)*)"'

CLASS_RE = re.compile(r"^class\s+(\w+)\s*<\s*Formula\b")
STANZA_RE = re.compile(rf"^(desc|homepage|url|sha256|license)\s+{_STRING}")
HEAD_RE = re.compile(rf"^head\s+{_STRING}(?:\s*,\s*branch:\s*{_STRING})?")
DEPENDS_RE = re.compile(rf"^depends_on\s+{_STRING}")
RESOURCE_RE = re.compile(rf"^resource\s+{_STRING}\s+do\b")
DEF_RE = re.compile(r"^def\s+(\w+)")
TEST_BLOCK_RE = re.compile(r"^test\s+do\b")
BLOCK_OPEN_RE = re.compile(r"(\bdo\b(\s*\|[^|]*\|)?\s*$)|^(if|unless|case|begin)\b")
ASSERT_RE = re.compile(
    rf"""^assert_match\s+{_STRING}\s*,\s*shell_output\(\s*"#\{{bin\}}/([^\s"]+)((?:\s+[^"]*)?)"\s*\)"""
)
ESCAPE_RE = re.compile(r"\\(.)")

REQUIRED_STANZAS = ("desc", "homepage", "url", "sha256")


class FormulaParseError(Exception):
    """Raised when formula text cannot be turned into a descriptor."""

    pass


def _strip_comment(line: str) -> str:
    """Drop a trailing ``#`` comment that is not inside a string."""
    in_string: Optional[str] = None
    escaped = False
    for index, char in enumerate(line):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == in_string:
                in_string = None
        elif char in "\"'":
            in_string = char
        elif char == "#":
            return line[:index].rstrip()
    return line.rstrip()


def _unquote(value: str) -> str:
    """Undo backslash escapes inside a double-quoted string."""
    return ESCAPE_RE.sub(r"\1", value)


def _name_from_class(class_name: str) -> str:
    """``S3hero`` -> ``s3hero``; ``AwsCli`` -> ``aws-cli``."""
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", class_name).lower()


def parse_formula(text: str) -> PackageDescriptor:
    """Parse formula source into a PackageDescriptor.

    Args:
        text: Ruby formula source.

    Returns:
        The parsed descriptor.

    Raises:
        FormulaParseError: If there is no formula class or a required
                           stanza (desc, homepage, url, sha256) is missing.
    """
    class_name: Optional[str] = None
    stanzas: dict[str, str] = {}
    head: Optional[HeadRef] = None
    depends_on: list[str] = []
    resources: list[Resource] = []
    install = ""
    test: Optional[SmokeTest] = None

    # Stack of open Ruby blocks: "class", "resource", "def:<name>", "test" or "other"
    blocks: list[str] = []
    current: Optional[dict[str, str]] = None

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw_line).strip()
        if not line:
            continue

        top = blocks[-1] if blocks else None

        if line == "end":
            if not blocks:
                raise FormulaParseError(f"line {lineno}: unexpected 'end'")
            closed = blocks.pop()
            if closed == "resource" and current is not None:
                if "url" not in current or "sha256" not in current:
                    raise FormulaParseError(
                        f"line {lineno}: resource '{current['name']}' needs url and sha256"
                    )
                resources.append(
                    Resource(name=current["name"], url=current["url"], sha256=current["sha256"])
                )
                current = None
            continue

        match = CLASS_RE.match(line)
        if match and not blocks:
            class_name = match.group(1)
            blocks.append("class")
            continue

        if top == "class":
            match = STANZA_RE.match(line)
            if match:
                stanzas[match.group(1)] = _unquote(match.group(2))
                continue

            match = HEAD_RE.match(line)
            if match:
                head = HeadRef(
                    url=_unquote(match.group(1)),
                    branch=_unquote(match.group(2) or "main"),
                )
                continue

            match = DEPENDS_RE.match(line)
            if match:
                depends_on.append(_unquote(match.group(1)))
                continue

            match = RESOURCE_RE.match(line)
            if match:
                current = {"name": _unquote(match.group(1))}
                blocks.append("resource")
                continue

            match = DEF_RE.match(line)
            if match:
                blocks.append(f"def:{match.group(1)}")
                continue

            if TEST_BLOCK_RE.match(line):
                blocks.append("test")
                continue

        elif top == "resource" and current is not None:
            match = STANZA_RE.match(line)
            if match and match.group(1) in ("url", "sha256"):
                current[match.group(1)] = _unquote(match.group(2))
                continue

        elif top == "def:install":
            match = re.match(r"^\w+", line)
            if match and not install:
                install = match.group(0)

        elif top == "test":
            match = ASSERT_RE.match(line)
            if match:
                args = match.group(3).split()
                test = SmokeTest(
                    executable=match.group(2),
                    expect=_unquote(match.group(1)),
                    args=args,
                )
                continue

        if BLOCK_OPEN_RE.search(line):
            blocks.append("other")

    if class_name is None:
        raise FormulaParseError("no formula class found")

    for stanza in REQUIRED_STANZAS:
        if stanza not in stanzas:
            raise FormulaParseError(f"formula {class_name} is missing '{stanza}'")

    descriptor = PackageDescriptor(
        name=_name_from_class(class_name),
        desc=stanzas["desc"],
        homepage=stanzas["homepage"],
        url=stanzas["url"],
        sha256=stanzas["sha256"],
        license=stanzas.get("license", ""),
        head=head,
        depends_on=depends_on,
        resources=resources,
        test=test,
    )
    if install:
        descriptor.install = install

    s3hero.logging.debug(
        "Parsed formula %s with %d resource(s)", descriptor.name, len(resources)
    )
    return descriptor


def load_formula(path: Path) -> PackageDescriptor:
    """Read and parse a formula file.

    Raises:
        FormulaParseError: If the file is missing or cannot be parsed.
    """
    if not path.is_file():
        raise FormulaParseError(f"Formula file not found: {path}")

    try:
        return parse_formula(path.read_text(encoding="utf-8"))
    except FormulaParseError as e:
        raise FormulaParseError(f"{path}: {e}") from e

"""Command-line interface for S3Hero.

Provides argument parsing and the main entry point. Two command groups are
available:

    s3hero profile ...   manage S3 connection profiles
    s3hero formula ...   render, audit and smoke-test the packaging formula

Exit codes: 0 for success, 1 for failed checks, 2 for errors.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from s3hero import __version__
import s3hero.logging
from s3hero.config import ConfigError, ConfigManager
from s3hero.formula import audit as formula_audit
from s3hero.formula.descriptor import S3HERO
from s3hero.formula.models import AuditResult, Finding, PackageDescriptor
from s3hero.formula.parser import FormulaParseError, load_formula
from s3hero.formula.pypi import ResourceResolutionError, resolve_resources
from s3hero.formula.render import render_formula
from s3hero.formula.smoke import run_smoke_test
from s3hero.models import Profile, ProviderType, ResultStatus
from s3hero.reporters import ConsoleReporter, JsonReporter, Reporter
from s3hero.s3_client import ConnectionCheckError, build_s3_client, check_connection

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_descriptor_start(self, source: str) -> None:
        for reporter in self._reporters:
            reporter.on_descriptor_start(source)

    def on_finding(self, source: str, finding: Finding) -> None:
        for reporter in self._reporters:
            reporter.on_finding(source, finding)

    def on_descriptor_complete(self, result: AuditResult) -> None:
        for reporter in self._reporters:
            reporter.on_descriptor_complete(result)

    def on_run_complete(self, results: dict[str, AuditResult]) -> None:
        for reporter in self._reporters:
            reporter.on_run_complete(results)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="s3hero",
        description="Manage S3 buckets across AWS, Cloudflare R2, and more",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--config-dir",
        metavar="DIR",
        help="Configuration directory (default: $S3HERO_CONFIG_DIR or ~/.s3hero)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    # profile
    profile = commands.add_parser("profile", help="Manage connection profiles")
    profile_commands = profile.add_subparsers(dest="profile_command", metavar="ACTION")

    add = profile_commands.add_parser("add", help="Add or update a profile")
    add.add_argument("name")
    add.add_argument(
        "--provider",
        choices=[p.value for p in ProviderType],
        default=ProviderType.AWS.value,
        help="Service type (default: aws)",
    )
    add.add_argument("--access-key-id", required=True)
    add.add_argument("--secret-access-key", required=True)
    add.add_argument("--region", default="")
    add.add_argument("--endpoint", help="Custom endpoint URL")
    add.add_argument("--account-id", help="Cloudflare account id (R2)")
    add.add_argument(
        "--default",
        action="store_true",
        help="Make this the default profile",
    )

    profile_commands.add_parser("list", help="List profiles")

    show = profile_commands.add_parser("show", help="Show a profile")
    show.add_argument("name", nargs="?")

    delete = profile_commands.add_parser("delete", help="Delete a profile")
    delete.add_argument("name")

    default = profile_commands.add_parser("default", help="Set the default profile")
    default.add_argument("name")

    test = profile_commands.add_parser("test", help="Check that a profile can connect")
    test.add_argument("name", nargs="?")

    # formula
    formula = commands.add_parser("formula", help="Packaging formula tooling")
    formula_commands = formula.add_subparsers(dest="formula_command", metavar="ACTION")

    render = formula_commands.add_parser("render", help="Print the formula source")
    render.add_argument("file", nargs="?", help="Formula to re-render (default: built-in)")
    render.add_argument("-o", "--output", metavar="PATH", help="Write to file")

    audit = formula_commands.add_parser("audit", help="Audit formulae for integrity problems")
    audit.add_argument("files", nargs="*", help="Formula files (default: built-in)")
    audit.add_argument(
        "--online",
        action="store_true",
        help="Download every artifact and verify its checksum",
    )
    audit.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-finding output, show only summary",
    )
    audit.add_argument("-j", "--json-output", metavar="PATH", help="Write JSON results to file")

    compare = formula_commands.add_parser("compare", help="Compare two records of a formula")
    compare.add_argument("first")
    compare.add_argument("second")

    resources = formula_commands.add_parser(
        "resources", help="Resolve pinned requirements into resource stanzas"
    )
    resources.add_argument("requirements", nargs="+", metavar="NAME==VERSION")
    resources.add_argument(
        "--formula",
        metavar="FILE",
        help="Replace the resources of this formula and print it",
    )
    resources.add_argument("-o", "--output", metavar="PATH", help="Write to file")

    smoke = formula_commands.add_parser("smoke", help="Run the formula's --version smoke test")
    smoke.add_argument("file", nargs="?", help="Formula file (default: built-in)")
    smoke.add_argument("--executable", metavar="PATH", help="Executable to test")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    return build_parser().parse_args(argv)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create audit reporters based on command-line arguments."""
    reporters: list[Reporter] = [ConsoleReporter(quiet=args.quiet)]

    if args.json_output:
        reporters.append(JsonReporter(output_path=args.json_output))

    return reporters


def mask_secret(secret: str) -> str:
    """Hide all but the last four characters of a secret."""
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]


def _write_or_print(text: str, output: Optional[str]) -> None:
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        print(f"Written to: {output}")
    else:
        sys.stdout.write(text)


def _load_descriptor(file: Optional[str]) -> PackageDescriptor:
    if file is None:
        return S3HERO
    return load_formula(Path(file))


def run_profile(args: argparse.Namespace) -> int:
    manager = ConfigManager(Path(args.config_dir) if args.config_dir else None)

    if args.profile_command == "add":
        manager.add_profile(
            Profile(
                name=args.name,
                provider=ProviderType(args.provider),
                access_key_id=args.access_key_id,
                secret_access_key=args.secret_access_key,
                region=args.region,
                endpoint=args.endpoint,
                account_id=args.account_id,
            )
        )
        if args.default:
            manager.set_default(args.name)
        print(f"Profile '{args.name}' saved")
        return EXIT_OK

    if args.profile_command == "list":
        names = manager.list_profiles()
        if not names:
            print("No profiles configured. Add one with: s3hero profile add NAME ...")
            return EXIT_OK
        default_name = manager.get_default()
        for name in names:
            profile = manager.get_profile(name)
            marker = "*" if name == default_name else " "
            print(f"{marker} {name} ({profile.provider.value})")
        return EXIT_OK

    if args.profile_command == "show":
        profile = manager.get_profile(args.name)
        print(f"name:              {profile.name}")
        print(f"provider:          {profile.provider.value}")
        print(f"access_key_id:     {profile.access_key_id}")
        print(f"secret_access_key: {mask_secret(profile.secret_access_key)}")
        print(f"region:            {profile.region or '-'}")
        print(f"endpoint:          {profile.endpoint or '-'}")
        if profile.account_id:
            print(f"account_id:        {profile.account_id}")
        return EXIT_OK

    if args.profile_command == "delete":
        manager.delete_profile(args.name)
        print(f"Profile '{args.name}' deleted")
        return EXIT_OK

    if args.profile_command == "default":
        manager.set_default(args.name)
        print(f"Default profile set to '{args.name}'")
        return EXIT_OK

    if args.profile_command == "test":
        profile = manager.get_profile(args.name)
        try:
            count = check_connection(build_s3_client(profile))
        except ConnectionCheckError as e:
            print(f"Profile '{profile.name}': {e}", file=sys.stderr)
            return EXIT_FAILED
        print(f"Profile '{profile.name}': OK ({count} bucket(s) visible)")
        return EXIT_OK

    print("Missing profile action (add, list, show, delete, default, test)", file=sys.stderr)
    return EXIT_ERROR


def run_audit(args: argparse.Namespace) -> int:
    reporters = create_reporters(args)
    reporter = reporters[0] if len(reporters) == 1 else CompositeReporter(reporters)

    # Each file is audited once; results are keyed by source
    sources = list(dict.fromkeys(args.files)) or [None]
    results: dict[str, AuditResult] = {}

    for file in sources:
        source = file or "built-in"
        reporter.on_descriptor_start(source)
        try:
            descriptor = _load_descriptor(file)
        except FormulaParseError as e:
            result = AuditResult(name=Path(source).stem, source=source, error_message=str(e))
        else:
            result = formula_audit.audit_descriptor(descriptor, source=source, online=args.online)

        for finding in result.findings:
            reporter.on_finding(source, finding)
        reporter.on_descriptor_complete(result)
        results[source] = result

    reporter.on_run_complete(results)

    if any(r.status in (ResultStatus.FAIL, ResultStatus.ERROR) for r in results.values()):
        return EXIT_FAILED
    return EXIT_OK


def run_formula(args: argparse.Namespace) -> int:
    if args.formula_command == "render":
        _write_or_print(render_formula(_load_descriptor(args.file)), args.output)
        return EXIT_OK

    if args.formula_command == "audit":
        return run_audit(args)

    if args.formula_command == "compare":
        first = load_formula(Path(args.first))
        second = load_formula(Path(args.second))
        differences = formula_audit.compare_descriptors(first, second)
        if not differences:
            print("Formulae are consistent")
            return EXIT_OK
        print(f"{len(differences)} inconsistenc{'y' if len(differences) == 1 else 'ies'}:")
        for line in differences:
            print(f"  - {line}")
        return EXIT_FAILED

    if args.formula_command == "resources":
        resolved = resolve_resources(args.requirements)
        if args.formula:
            descriptor = load_formula(Path(args.formula))
            descriptor.resources = resolved
            _write_or_print(render_formula(descriptor), args.output)
        else:
            stanzas = []
            for resource in resolved:
                stanzas.append(
                    f'  resource "{resource.name}" do\n'
                    f'    url "{resource.url}"\n'
                    f'    sha256 "{resource.sha256}"\n'
                    f"  end\n"
                )
            _write_or_print("\n".join(stanzas), args.output)
        return EXIT_OK

    if args.formula_command == "smoke":
        descriptor = _load_descriptor(args.file)
        result = run_smoke_test(descriptor, executable=args.executable)
        print(f"$ {' '.join(result.command)}")
        if result.output:
            print(result.output.rstrip())
        if result.status == ResultStatus.PASS:
            print(f"PASS: output contains '{result.expect}'")
            return EXIT_OK
        print(f"FAIL: {result.error_message}", file=sys.stderr)
        return EXIT_FAILED

    print("Missing formula action (render, audit, compare, resources, smoke)", file=sys.stderr)
    return EXIT_ERROR


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for failed checks, 2 for errors
    """
    args = parse_args(argv)

    if args.verbose:
        s3hero.logging.set_verbose(True)

    try:
        if args.command == "profile":
            return run_profile(args)
        if args.command == "formula":
            return run_formula(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except FormulaParseError as e:
        print(f"Formula error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ResourceResolutionError as e:
        print(f"Resource error: {e}", file=sys.stderr)
        return EXIT_ERROR

    build_parser().print_help(sys.stderr)
    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

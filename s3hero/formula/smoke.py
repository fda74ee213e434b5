"""Run a descriptor's smoke test against an installed executable.

The test passes when ``<executable> --version`` exits successfully and its
output contains the expected name. Matching is case-sensitive, as on the
packaging host.
"""

import shutil
import subprocess
from typing import Optional

import s3hero.logging
from s3hero.formula.models import PackageDescriptor, SmokeResult
from s3hero.models import ResultStatus

DEFAULT_TIMEOUT = 60.0


def run_smoke_test(
    descriptor: PackageDescriptor,
    executable: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> SmokeResult:
    """Invoke the installed executable and check its version output.

    Args:
        descriptor: Descriptor whose smoke test to run
        executable: Path to the executable (defaults to the test's
                    executable name looked up on PATH)
        timeout: Seconds to wait for the command

    Returns:
        SmokeResult; FAIL when the executable is missing, exits non-zero,
        times out or does not print the expected name.
    """
    smoke = descriptor.smoke_test
    program = executable or shutil.which(smoke.executable)
    command = [program or smoke.executable, *smoke.args]

    if program is None:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            error_message=f"executable '{smoke.executable}' not found on PATH",
        )

    s3hero.logging.debug("Running smoke test: %s", " ".join(command))

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            error_message=f"executable '{program}' not found",
        )
    except OSError as e:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            error_message=f"could not run '{program}': {e.strerror or e}",
        )
    except subprocess.TimeoutExpired:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            error_message=f"timed out after {timeout:.0f}s",
        )

    output = (completed.stdout or "") + (completed.stderr or "")

    if completed.returncode != 0:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            output=output,
            error_message=f"exited with status {completed.returncode}",
        )

    if smoke.expect not in output:
        return SmokeResult(
            command=command,
            expect=smoke.expect,
            status=ResultStatus.FAIL,
            output=output,
            error_message=f"output does not contain '{smoke.expect}'",
        )

    return SmokeResult(
        command=command,
        expect=smoke.expect,
        status=ResultStatus.PASS,
        output=output,
    )

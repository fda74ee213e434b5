"""JSON reporter for structured audit output.

Generates JSON data suitable for CI pipelines that gate tap updates on the
audit result.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from s3hero.formula.models import AuditResult, Finding
from s3hero.models import ResultStatus
from s3hero.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

    def on_descriptor_start(self, source: str) -> None:
        """No-op for JSON reporter."""
        pass

    def on_finding(self, source: str, finding: Finding) -> None:
        """No-op - findings come from the result."""
        pass

    def on_descriptor_complete(self, result: AuditResult) -> None:
        """No-op - results are collected by the caller."""
        pass

    def on_run_complete(self, results: dict[str, AuditResult]) -> dict[str, Any]:
        """Generates the JSON data and writes it if an output path is set.

        Returns:
            The generated JSON data as a dictionary
        """
        output = self._generate_output(results)

        if self.output_path:
            self._write_to_file(output)

        return output

    def _generate_output(self, results: dict[str, AuditResult]) -> dict[str, Any]:
        timestamp = datetime.now(timezone.utc).isoformat()

        formulas = {}
        counts = {status: 0 for status in ResultStatus}

        for source, result in results.items():
            counts[result.status] += 1

            entry: dict[str, Any] = {
                "name": result.name,
                "status": result.status.value,
                "findings": [
                    {
                        "check": finding.check_id,
                        "severity": finding.severity,
                        "subject": finding.subject,
                        "message": finding.message,
                    }
                    for finding in result.findings
                ],
                "duration_seconds": result.duration_seconds,
            }
            if result.error_message:
                entry["error"] = result.error_message
            formulas[source] = entry

        total = len(results)
        failed = counts[ResultStatus.FAIL] + counts[ResultStatus.ERROR]

        return {
            "timestamp": timestamp,
            "formulas": formulas,
            "summary": {
                "total_formulas": total,
                "passed": counts[ResultStatus.PASS],
                "warnings": counts[ResultStatus.WARN],
                "failed": failed,
                "all_passed": failed == 0 and total > 0,
            },
        }

    def _write_to_file(self, output: dict[str, Any]) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)

"""
Reporter for building and managing run reports.

This module provides the Reporter class which helps construct run
reports from suite runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

from .models import CheckRecord, CheckStatus, RunReport, compute_suite_hash

if TYPE_CHECKING:
    from ..suite import Suite


class Reporter:
    """
    Builds and manages run reports.

    Example:
        suite, _ = load_suite("suite.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()

        reporter.start_check("name-is-string")
        reporter.complete_check_success("name-is-string", assertion_ids=["any-to-be-a-string"])

        reporter.start_check("five-between")
        reporter.complete_check_failure("five-between", failure_message="Expected 5 to be between 6 and 10")

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport):
        """
        Initialize with a RunReport.

        Use Reporter.from_suite() for the typical case.
        """
        self.report = report

    @classmethod
    def from_suite(cls, suite: Suite, run_id: str | None = None) -> Reporter:
        """
        Create a Reporter with a pending record for every check in the suite.

        Args:
            suite: The parsed suite to create a report for
            run_id: Optional custom run ID (auto-generated if not provided)
        """
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(_suite_to_dict(suite)),
        )
        if run_id:
            report.run_id = run_id

        for check in suite.checks:
            report.add_check(CheckRecord(
                check_id=check.id,
                phrase=check.phrase,
                subject_path=check.path,
                arguments=list(check.expect),
            ))

        return cls(report)

    def start_run(self) -> None:
        self.report.start()

    def finish_run(self) -> RunReport:
        """Mark the run as completed and return the final report."""
        self.report.complete()
        return self.report

    def start_check(self, check_id: str) -> CheckRecord | None:
        check = self.report.get_check(check_id)
        if check:
            check.start()
        return check

    def complete_check_success(
        self,
        check_id: str,
        assertion_ids: Sequence[str] = (),
        actual_value: Any = None,
    ) -> CheckRecord | None:
        """
        Mark a check as passed.

        Args:
            check_id: The ID of the check
            assertion_ids: Ids of the assertions the call resolved to
            actual_value: The subject the check ran against
        """
        check = self.report.get_check(check_id)
        if check:
            check.assertion_ids = list(assertion_ids)
            check.actual_value = actual_value
            check.complete(CheckStatus.PASSED)
        return check

    def complete_check_failure(
        self,
        check_id: str,
        failure_message: str,
        assertion_ids: Sequence[str] = (),
        expected_value: Any = None,
        actual_value: Any = None,
    ) -> CheckRecord | None:
        """
        Mark a check as failed: the subject did not satisfy the call.

        Args:
            check_id: The ID of the check
            failure_message: Human-readable failure description
            assertion_ids: Ids of the assertions the call resolved to
            expected_value: What was expected
            actual_value: What was actually found
        """
        check = self.report.get_check(check_id)
        if check:
            check.assertion_ids = list(assertion_ids)
            check.expected_value = expected_value
            check.actual_value = actual_value
            check.failure_message = failure_message
            check.complete(CheckStatus.FAILED)
        return check

    def complete_check_error(
        self,
        check_id: str,
        error_message: str,
        error_code: str | None = None,
        assertion_ids: Sequence[str] = (),
    ) -> CheckRecord | None:
        """
        Mark a check as errored (not a failure of the subject, but a
        problem with the call or the assertion itself).

        Args:
            check_id: The ID of the check
            error_message: Error description
            error_code: Stable error code, e.g. ERR_PHRASEBOOK_UNKNOWN_ASSERTION
            assertion_ids: Ids of the assertions the call resolved to, if any
        """
        check = self.report.get_check(check_id)
        if check:
            check.assertion_ids = list(assertion_ids)
            check.error_message = error_message
            check.error_code = error_code
            check.complete(CheckStatus.ERROR)
        return check

    def skip_check(self, check_id: str, reason: str | None = None) -> CheckRecord | None:
        check = self.report.get_check(check_id)
        if check:
            if reason:
                check.failure_message = f"Skipped: {reason}"
            check.complete(CheckStatus.SKIPPED)
        return check

    def save_json(self, path: str | Path) -> None:
        """Save the report to a JSON file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json())

    def get_summary(self) -> str:
        return self.report.summary()


def _suite_to_dict(suite: Suite) -> dict[str, Any]:
    """Convert a Suite to a dict for hashing."""
    return {
        "version": suite.version,
        "name": suite.name,
        "env": suite.env,
        "data": suite.data,
        "defaults": {"stop_on_failure": suite.defaults.stop_on_failure},
        "checks": [
            {
                "id": check.id,
                "source": check.source.value,
                "subject": check.subject,
                "from": check.path,
                "expect": check.expect,
            }
            for check in suite.checks
        ],
    }

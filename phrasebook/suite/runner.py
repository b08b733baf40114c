"""
Suite runner.

Runs every check of a Suite through a dispatcher and records the
outcome of each one with a Reporter:

    PASSED   the call was satisfied
    FAILED   an assertion failed (including negated and explicit failures)
    ERROR    no assertion matched, an assertion is broken, or the
             subject path selected nothing
    SKIPPED  an earlier check failed and defaults.stop_on_failure is set
"""

from __future__ import annotations

import logging
from typing import Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..assertions import Dispatcher
from ..errors import AssertionFailedError, PhrasebookError, SubjectNotFoundError
from ..reporting import Reporter
from .models import Check, Suite, SubjectSource

logger = logging.getLogger(__name__)


def resolve_subject(check: Check, data: Any) -> Any:
    """
    Return the subject a check runs against.

    A path selecting one value yields that value; a path selecting
    several yields the list of them.

    Raises:
        SubjectNotFoundError: If the path is invalid or selects nothing
    """
    if check.source == SubjectSource.LITERAL:
        return check.subject

    try:
        expression = parse_jsonpath(check.path)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise SubjectNotFoundError(f"Invalid JSONPath expression {check.path!r}: {e}", check.path) from e

    matches = expression.find(data)
    if not matches:
        raise SubjectNotFoundError(f"Path {check.path} does not exist in suite data", check.path)
    if len(matches) == 1:
        return matches[0].value
    return [match.value for match in matches]


def run_suite(suite: Suite, dispatcher: Dispatcher | None = None) -> Reporter:
    """
    Run every check in a suite.

    Args:
        suite: The parsed suite
        dispatcher: Synchronous dispatcher to use (the default expect if None)

    Returns:
        The Reporter holding the finished run report
    """
    if dispatcher is None:
        from .. import expect as dispatcher

    reporter = Reporter.from_suite(suite)
    reporter.start_run()
    stopped_by: str | None = None

    for check in suite.checks:
        if stopped_by is not None:
            reporter.skip_check(check.id, reason=f"stop_on_failure after '{stopped_by}'")
            continue

        reporter.start_check(check.id)
        if not _run_check(check, suite, dispatcher, reporter) and suite.defaults.stop_on_failure:
            stopped_by = check.id

    report = reporter.finish_run()
    logger.debug(
        f"Suite '{suite.name}' finished: {report.passed_checks} passed, "
        f"{report.failed_checks} failed, {report.error_checks} errors, "
        f"{report.skipped_checks} skipped"
    )
    return reporter


def _run_check(check: Check, suite: Suite, dispatcher: Dispatcher, reporter: Reporter) -> bool:
    """Run one check; return True if it passed."""
    assertion_ids: list[str] = []
    try:
        subject = resolve_subject(check, suite.data)
        args = (subject, *check.expect)
        resolutions = dispatcher.resolve(args)
        assertion_ids = [r.definition.id for r in resolutions]
        dispatcher.run(resolutions)
    except AssertionFailedError as e:
        logger.debug(f"Check {check.id} failed: {e.message}")
        reporter.complete_check_failure(
            check.id,
            failure_message=str(e),
            assertion_ids=assertion_ids or [e.assertion_id],
            expected_value=e.expected,
            actual_value=e.actual,
        )
        return False
    except PhrasebookError as e:
        logger.debug(f"Check {check.id} errored: {e}")
        reporter.complete_check_error(
            check.id,
            error_message=str(e),
            error_code=e.code,
            assertion_ids=assertion_ids,
        )
        return False

    reporter.complete_check_success(check.id, assertion_ids=assertion_ids, actual_value=subject)
    return True

"""
Assertion outcome models.

This module defines the typed result channel between a validation
routine and the executor: a routine's return value (or raised failure)
is normalized into an AssertionOutcome before negation is applied.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from ..constants import CONJUNCTION, NEGATION_PREFIX


class AssertionStatus(str, Enum):
    """Status of an evaluated assertion."""
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class AssertionFailure:
    """
    Structured failure a validation routine may return.

    Attributes:
        message: Short reason, appended to the generated "Expected <call>"
        actual: The offending value (defaults to the subject)
        expected: What was expected
        diff: Optional pre-rendered difference
    """
    message: str | None = None
    actual: Any = None
    expected: Any = None
    diff: str | None = None


@dataclass
class AssertionOutcome:
    """
    Result of evaluating one matched assertion, before negation.

    Attributes:
        status: Whether the subject satisfied the check
        message: Human-readable description of the result
        actual: What was actually found
        expected: What was expected
        diff: Optional difference hint
    """
    status: AssertionStatus
    message: str
    actual: Any = None
    expected: Any = None
    diff: str | None = None
    error: Exception | None = field(default=None, repr=False)  # failure raised by the routine

    @property
    def passed(self) -> bool:
        return self.status == AssertionStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == AssertionStatus.FAILED

    def __str__(self) -> str:
        """Format as a human-readable string."""
        if self.passed:
            return f"✅ PASS: {self.message}"

        lines = [f"❌ FAIL: {self.message}"]
        if self.expected is not None:
            lines.append(f"   Expected: {format_value(self.expected)}")
        if self.actual is not None:
            lines.append(f"   Actual:   {format_value(self.actual)}")
        if self.diff:
            lines.append(f"   Diff:\n{self.diff}")
        return "\n".join(lines)

    @classmethod
    def passed_result(cls, message: str, actual: Any = None) -> AssertionOutcome:
        """Create a passing outcome."""
        return cls(status=AssertionStatus.PASSED, message=message, actual=actual)

    @classmethod
    def failed_result(
        cls,
        message: str,
        expected: Any = None,
        actual: Any = None,
        diff: str | None = None,
        error: Exception | None = None,
    ) -> AssertionOutcome:
        """Create a failing outcome."""
        return cls(
            status=AssertionStatus.FAILED,
            message=message,
            expected=expected,
            actual=actual,
            diff=diff,
            error=error,
        )


def format_value(value: Any, max_length: int = 100) -> str:
    """Format a value for display, truncating if too long."""
    if isinstance(value, (list, dict)):
        try:
            formatted = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            formatted = repr(value)
    else:
        formatted = repr(value)

    if len(formatted) > max_length:
        return formatted[: max_length - 3] + "..."

    return formatted


def describe_call(args: Sequence[Any]) -> str:
    """
    Render a call the way it reads: "5 to be greater than 3".

    The subject and parameters are formatted values; string arguments in
    phrase positions are left bare.
    """
    if not args:
        return ""
    parts = [format_value(args[0])]
    for index, arg in enumerate(args[1:], start=1):
        if isinstance(arg, str) and (index == 1 or _looks_like_phrase(arg)):
            parts.append(arg)
        else:
            parts.append(format_value(arg))
    return " ".join(parts)


def _looks_like_phrase(value: str) -> bool:
    return value == CONJUNCTION or value.startswith("to ") or value.startswith(NEGATION_PREFIX)

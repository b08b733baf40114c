"""
Exception taxonomy.

Two disjoint families:

    AssertionFailedError (a builtin AssertionError)
        The subject did not satisfy the check. NegatedAssertionError and
        FailAssertionError are the negated and explicit variants.

    PhrasebookError
        Everything that is not "expectation not met": no assertion matched
        the call, or an assertion implementation is broken.
"""

from __future__ import annotations

from typing import Any

from .constants import FAIL


class AssertionFailedError(AssertionError):
    """
    The subject failed the matched assertion.

    Attributes:
        assertion_id: Id of the definition that was selected
        actual: The value that was checked
        expected: What the assertion expected, if known
        diff: Optional pre-rendered difference between actual and expected
        call_args: The argument list the assertion was dispatched with
    """

    def __init__(
        self,
        message: str,
        *,
        assertion_id: str,
        actual: Any = None,
        expected: Any = None,
        diff: str | None = None,
        call_args: tuple[Any, ...] = (),
    ):
        super().__init__(message)
        self.message = message
        self.assertion_id = assertion_id
        self.actual = actual
        self.expected = expected
        self.diff = diff
        self.call_args = tuple(call_args)

    def __str__(self) -> str:
        if self.diff:
            return f"{self.message}\n{self.diff}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": type(self).__name__,
            "assertion_id": self.assertion_id,
            "message": self.message,
            "actual": self.actual,
            "expected": self.expected,
            "diff": self.diff,
        }


class NegatedAssertionError(AssertionFailedError):
    """A negated assertion's subject did satisfy the check."""


class FailAssertionError(AssertionFailedError):
    """Unconditional failure requested by calling code."""

    def __init__(self, message: str | None = None, **kwargs: Any):
        super().__init__(
            message or "Explicit failure",
            assertion_id=FAIL,
            **kwargs,
        )


class PhrasebookError(Exception):
    """Base class for errors that are not assertion failures."""

    code = "ERR_PHRASEBOOK"


class UnknownAssertionError(PhrasebookError):
    """No registered pattern matched the call."""

    code = "ERR_PHRASEBOOK_UNKNOWN_ASSERTION"

    def __init__(self, message: str, arguments: tuple[Any, ...]):
        super().__init__(message)
        self.arguments = tuple(arguments)


class AssertionImplementationError(PhrasebookError):
    """
    An assertion implementation is broken.

    Raised when a validation routine throws something other than an
    assertion failure, or returns a value the executor cannot interpret.
    The original exception, if any, is chained as __cause__.
    """

    code = "ERR_PHRASEBOOK_ASSERTION_IMPL"

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result


class InvalidPatternError(AssertionImplementationError):
    """An assertion was declared with malformed parts."""

    code = "ERR_PHRASEBOOK_INVALID_PATTERN"


class UnexpectedAsyncError(AssertionImplementationError):
    """A synchronous dispatcher matched a routine that returned an awaitable."""

    code = "ERR_PHRASEBOOK_UNEXPECTED_ASYNC"


class SubjectNotFoundError(PhrasebookError):
    """A suite check's JSONPath selected nothing in the suite data."""

    code = "ERR_PHRASEBOOK_SUBJECT_NOT_FOUND"

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path

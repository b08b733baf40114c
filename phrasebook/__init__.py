"""
Phrasebook - Natural-Language Assertions

This package dispatches assertion calls written as phrases to registered
assertion implementations.

Subpackages:
    - assertions: Pattern model, phrase index, dispatchers and builtin library
    - suite: Load, validate and run YAML suites of checks
    - reporting: Run reports and result tracking

Usage:
    from phrasebook import expect, expect_async, create_assertion, STRING

    expect(5, "to be greater than", 3)
    expect("hi", "to be a string", "and", "to be non-empty")
    expect(date(2024, 6, 1), "to be between", date(2024, 1, 1), "and", date(2024, 12, 31))
    expect([], "not to be non-empty")

    await expect_async(fetch(), "to resolve")

    # Add your own phrases
    palindrome = create_assertion(
        [STRING, "to be a palindrome"],
        lambda subject: subject == subject[::-1],
    )
    my_expect = expect.extend([palindrome])
    my_expect("level", "to be a palindrome")
"""

__version__ = "0.1.0"
__author__ = "Ahaan Chaudhuri"

# Errors
from .errors import (
    AssertionFailedError,
    AssertionImplementationError,
    FailAssertionError,
    InvalidPatternError,
    NegatedAssertionError,
    PhrasebookError,
    SubjectNotFoundError,
    UnexpectedAsyncError,
    UnknownAssertionError,
)

# Re-export assertions for convenience
from .assertions import (
    # Schemas
    Schema,
    ANY,
    AWAITABLE,
    BOOLEAN,
    CALLABLE,
    DATE,
    EXCEPTION_CLASS,
    INTEGER,
    NON_NEGATIVE_INTEGER,
    NUMBER,
    SIZED,
    STRING,
    # Definitions
    AssertionDefinition,
    AssertionFailure,
    create_assertion,
    # Engine
    AsyncDispatcher,
    Dispatcher,
    # Library
    ASYNC_ASSERTIONS,
    BUILTIN_ASSERTIONS,
)

# Default dispatchers
expect = Dispatcher(BUILTIN_ASSERTIONS)
expect_async = AsyncDispatcher(ASYNC_ASSERTIONS + BUILTIN_ASSERTIONS)
fail = Dispatcher.fail

# Re-export suites for convenience
from .suite import (
    Suite,
    Check,
    load_suite,
    validate_suite_yaml,
    run_suite,
    ValidationResult,
)

# Re-export reporting for convenience
from .reporting import (
    CheckRecord,
    CheckStatus,
    RunReport,
    RunStatus,
    Reporter,
)

__all__ = [
    # Package info
    "__version__",
    "__author__",
    # Default dispatchers
    "expect",
    "expect_async",
    "fail",
    # Errors
    "AssertionFailedError",
    "AssertionImplementationError",
    "FailAssertionError",
    "InvalidPatternError",
    "NegatedAssertionError",
    "PhrasebookError",
    "SubjectNotFoundError",
    "UnexpectedAsyncError",
    "UnknownAssertionError",
    # Assertions - Schemas
    "Schema",
    "ANY",
    "AWAITABLE",
    "BOOLEAN",
    "CALLABLE",
    "DATE",
    "EXCEPTION_CLASS",
    "INTEGER",
    "NON_NEGATIVE_INTEGER",
    "NUMBER",
    "SIZED",
    "STRING",
    # Assertions - Definitions
    "AssertionDefinition",
    "AssertionFailure",
    "create_assertion",
    # Assertions - Engine
    "AsyncDispatcher",
    "Dispatcher",
    # Assertions - Library
    "ASYNC_ASSERTIONS",
    "BUILTIN_ASSERTIONS",
    # Suites
    "Suite",
    "Check",
    "load_suite",
    "validate_suite_yaml",
    "run_suite",
    "ValidationResult",
    # Reporting
    "CheckRecord",
    "CheckStatus",
    "RunReport",
    "RunStatus",
    "Reporter",
]

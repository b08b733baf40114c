"""
Assertion Suites

This package provides tools for loading, validating and running YAML
suites of assertion checks.

Usage:
    from phrasebook.suite import load_suite, run_suite

    # Load from file
    suite, result = load_suite("suites/payload.yaml")
    if not result.is_valid:
        print(result)

    # Run every check with the default dispatcher
    reporter = run_suite(suite)
    print(reporter.finish_run().summary())
"""

# Public API
from .loader import load_suite, validate_suite_yaml
from .runner import resolve_subject, run_suite, SubjectNotFoundError

# Models (for type hints and isinstance checks)
from .models import Check, Defaults, Suite, SubjectSource

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Runner
    "run_suite",
    "resolve_subject",
    "SubjectNotFoundError",
    # Models
    "Suite",
    "Check",
    "Defaults",
    "SubjectSource",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]

"""
Reporting for Suite Runs

This package provides reporting capabilities for capturing complete
records of suite runs.

Features:
    - Run metadata (ID, timestamp, suite name and hash)
    - Per-check records with timing and resolved assertion ids
    - Failure and error messages with stable error codes
    - JSON serialization
    - Human-readable summaries

Usage:
    from phrasebook.suite import load_suite, run_suite

    suite, _ = load_suite("suite.yaml")
    reporter = run_suite(suite)

    report = reporter.report
    print(report.summary())

    # Save to file
    reporter.save_json("reports/run-2024-01-15.json")
"""

# Models
from .models import (
    CheckRecord,
    CheckStatus,
    RunReport,
    RunStatus,
    compute_suite_hash,
)

# Reporter
from .reporter import Reporter

__all__ = [
    # Models
    "CheckRecord",
    "CheckStatus",
    "RunReport",
    "RunStatus",
    "compute_suite_hash",
    # Reporter
    "Reporter",
]

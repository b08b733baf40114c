"""
Report data models for suite runs.

This module defines the data structures for capturing complete run
records including metadata, per-check results, and timing.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class CheckStatus(str, Enum):
    """Status of an individual check."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class CheckRecord:
    """
    Record of a single check.

    Captures the call that was dispatched, which assertions it resolved
    to, how long it took, and the failure or error it ended with.
    """
    check_id: str
    phrase: str
    status: CheckStatus = CheckStatus.PENDING

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Call
    subject_path: str | None = None
    arguments: list[Any] = field(default_factory=list)
    assertion_ids: list[str] = field(default_factory=list)

    # Outcome
    expected_value: Any = None
    actual_value: Any = None
    failure_message: str | None = None
    error_message: str | None = None
    error_code: str | None = None

    def start(self) -> None:
        """Mark the check as started."""
        self.status = CheckStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: CheckStatus) -> None:
        """Mark the check as completed with given status."""
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "check_id": self.check_id,
            "phrase": self.phrase,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "subject_path": self.subject_path,
            "arguments": _safe_serialize(self.arguments),
            "assertion_ids": list(self.assertion_ids),
            "expected_value": _safe_serialize(self.expected_value),
            "actual_value": _safe_serialize(self.actual_value),
            "failure_message": self.failure_message,
            "error_message": self.error_message,
            "error_code": self.error_code,
        }


@dataclass
class RunReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite being checked, and a
    record for each check.
    """
    # Run identification
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""

    # Overall status
    status: RunStatus = RunStatus.PENDING

    checks: list[CheckRecord] = field(default_factory=list)

    # Summary stats
    total_checks: int = 0
    passed_checks: int = 0
    failed_checks: int = 0
    error_checks: int = 0
    skipped_checks: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        self.total_checks = len(self.checks)
        self.passed_checks = self._count(CheckStatus.PASSED)
        self.failed_checks = self._count(CheckStatus.FAILED)
        self.error_checks = self._count(CheckStatus.ERROR)
        self.skipped_checks = self._count(CheckStatus.SKIPPED)

        if self.error_checks > 0:
            self.status = RunStatus.ERROR
        elif self.failed_checks > 0:
            self.status = RunStatus.FAILED
        else:
            self.status = RunStatus.PASSED

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for c in self.checks if c.status == status)

    def add_check(self, check: CheckRecord) -> None:
        self.checks.append(check)

    def get_check(self, check_id: str) -> CheckRecord | None:
        """Get a check record by ID."""
        for check in self.checks:
            if check.check_id == check_id:
                return check
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "status": self.status.value,
            "summary": {
                "total": self.total_checks,
                "passed": self.passed_checks,
                "failed": self.failed_checks,
                "errors": self.error_checks,
                "skipped": self.skipped_checks,
            },
            "checks": [check.to_dict() for check in self.checks],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        rule = "═" * 59
        thin = "─" * 59
        lines = [
            rule,
            f"  Run Report: {self.suite_name}",
            rule,
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Duration:   {self.duration_ms:.0f}ms" if self.duration_ms else "  Duration:   N/A",
            f"  Started:    {self.started_at.strftime('%Y-%m-%d %H:%M:%S UTC') if self.started_at else 'N/A'}",
            thin,
            f"  Checks: {self.passed_checks} passed, {self.failed_checks} failed, "
            f"{self.error_checks} errors, {self.skipped_checks} skipped",
            thin,
        ]

        for check in self.checks:
            icon = _status_icon(check.status)
            duration = f"{check.duration_ms:.0f}ms" if check.duration_ms else "N/A"
            lines.append(f"  {icon} [{check.check_id}] {check.phrase} - {duration}")

            if check.failure_message:
                lines.append(f"      └─ {check.failure_message}")
            elif check.error_message:
                lines.append(f"      └─ Error: {check.error_message}")

        lines.append(rule)
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Args:
        suite_dict: The suite data as a dict

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()[:12]


def _safe_serialize(value: Any) -> Any:
    """Safely serialize a value, handling non-JSON types."""
    if value is None:
        return None
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return repr(value)


# Shared by run and check statuses, keyed by value
STATUS_ICONS = {
    "pending": "⏳",
    "running": "🔄",
    "passed": "✅",
    "failed": "❌",
    "error": "⚠️",
    "skipped": "⏭️",
}


def _status_icon(status: RunStatus | CheckStatus) -> str:
    return STATUS_ICONS.get(status.value, "❓")

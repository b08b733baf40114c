"""
Typed data structures for assertion suites.

This module contains the dataclasses that represent the internal typed
structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SubjectSource(str, Enum):
    """Where a check takes its subject from."""
    LITERAL = "subject"
    PATH = "from"  # JSONPath into the suite's data


@dataclass
class Defaults:
    """Default settings for check execution."""
    stop_on_failure: bool = False


@dataclass
class Check:
    """
    One assertion call to run against a subject.

    Attributes:
        id: Unique check identifier
        expect: Arguments after the subject, e.g. ["to be between", 1, "and", 10]
        source: Whether the subject is a literal or a JSONPath into data
        subject: Literal subject (source == LITERAL)
        path: JSONPath expression (source == PATH)
    """
    id: str
    expect: list[Any]
    source: SubjectSource = SubjectSource.LITERAL
    subject: Any = None
    path: str | None = None

    @property
    def phrase(self) -> str:
        """The leading phrase of the call."""
        return self.expect[0]


@dataclass
class Suite:
    """Fully parsed and validated suite."""
    version: int
    name: str
    env: dict[str, Any] = field(default_factory=dict)
    data: Any = None
    defaults: Defaults = field(default_factory=Defaults)
    checks: list[Check] = field(default_factory=list)

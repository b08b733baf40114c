"""
Schema validation for assertion suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports every error with helpful messages.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from typing import Any, Collection

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..constants import CONJUNCTION, NEGATION_PREFIX


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "checks[0].expect"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

class SchemaValidator:
    """
    Validates raw parsed YAML against the suite schema.

    Args:
        data: The raw YAML mapping
        phrases: Known phrases; when given, each check's leading phrase
            must be one of them (after removing a "not " prefix)
    """

    REQUIRED_TOP_LEVEL = {"version", "name", "checks"}
    OPTIONAL_TOP_LEVEL = {"env", "data", "defaults"}
    VALID_DEFAULTS = {"stop_on_failure"}
    SUBJECT_KEYS = ("subject", "from")

    def __init__(self, data: dict[str, Any], phrases: Collection[str] | None = None):
        self.data = data
        self.phrases = phrases
        self.result = ValidationResult()
        self.check_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_env()
        self._validate_defaults()
        self._validate_checks()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown):
            self.result.add_error(
                key,
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_env(self) -> None:
        env = self.data.get("env")
        if env is None:
            return
        if not isinstance(env, dict):
            self.result.add_error(
                "env",
                "Must be an object (key-value pairs)",
                value=env
            )

    def _validate_defaults(self) -> None:
        defaults = self.data.get("defaults")
        if defaults is None:
            return
        if not isinstance(defaults, dict):
            self.result.add_error(
                "defaults",
                "Must be an object",
                value=defaults
            )
            return

        for key in sorted(set(defaults) - self.VALID_DEFAULTS):
            self.result.add_error(
                f"defaults.{key}",
                "Unknown default setting",
                suggestion=f"Valid settings: {', '.join(sorted(self.VALID_DEFAULTS))}"
            )

        stop = defaults.get("stop_on_failure")
        if stop is not None and not isinstance(stop, bool):
            self.result.add_error(
                "defaults.stop_on_failure",
                "Must be a boolean",
                value=stop
            )

    def _validate_checks(self) -> None:
        checks = self.data.get("checks")
        if not isinstance(checks, list):
            self.result.add_error(
                "checks",
                "Must be a list",
                value=checks
            )
            return

        if len(checks) == 0:
            self.result.add_error(
                "checks",
                "Must contain at least one check",
                suggestion="Add a check with 'id', 'subject' or 'from', and 'expect'"
            )
            return

        for i, check in enumerate(checks):
            self._validate_check(i, check)

    def _validate_check(self, index: int, check: Any) -> None:
        path = f"checks[{index}]"

        if not isinstance(check, dict):
            self.result.add_error(
                path,
                "Check must be an object",
                value=check
            )
            return

        check_id = check.get("id")
        if not check_id:
            self.result.add_error(
                f"{path}.id",
                "Check must have an 'id' field",
                suggestion="Add a unique identifier like 'id: name-is-string'"
            )
        elif not isinstance(check_id, str):
            self.result.add_error(
                f"{path}.id",
                "Check id must be a string",
                value=check_id
            )
        elif check_id in self.check_ids:
            self.result.add_error(
                f"{path}.id",
                "Duplicate check id",
                value=check_id,
                suggestion="Each check must have a unique id"
            )
        else:
            self.check_ids.add(check_id)

        unknown = set(check) - {"id", "expect", *self.SUBJECT_KEYS}
        for key in sorted(unknown):
            self.result.add_error(
                f"{path}.{key}",
                "Unknown check field",
                suggestion="Valid fields: expect, from, id, subject"
            )

        self._validate_subject(path, check)
        self._validate_expect(path, check.get("expect"))

    def _validate_subject(self, path: str, check: dict) -> None:
        present = [key for key in self.SUBJECT_KEYS if key in check]
        if len(present) != 1:
            self.result.add_error(
                path,
                "Check must have exactly one of 'subject' or 'from'",
                value=present or None,
                suggestion="Use 'subject:' for a literal value or 'from:' for a JSONPath into data"
            )
            return

        if present[0] == "from":
            self._validate_jsonpath(f"{path}.from", check["from"])

    def _validate_jsonpath(self, path: str, expression: Any) -> None:
        if not isinstance(expression, str) or not expression:
            self.result.add_error(
                path,
                "Must be a JSONPath expression string",
                value=expression
            )
            return
        if "{{" in expression:
            # Placeholders are expanded at parse time
            return
        try:
            parse_jsonpath(expression)
        except (JsonPathLexerError, JsonPathParserError) as e:
            self.result.add_error(
                path,
                f"Invalid JSONPath expression: {e}",
                value=expression,
                suggestion="Paths look like '$.user.name' or '$.items[0]'"
            )

    def _validate_expect(self, path: str, expect: Any) -> None:
        if not isinstance(expect, list) or len(expect) == 0:
            self.result.add_error(
                f"{path}.expect",
                "Must be a non-empty list",
                value=expect,
                suggestion="e.g. expect: [\"to be between\", 1, \"and\", 10]"
            )
            return

        phrase = expect[0]
        if not isinstance(phrase, str) or not phrase.strip():
            self.result.add_error(
                f"{path}.expect[0]",
                "Must be a phrase string",
                value=phrase
            )
            return

        if phrase == CONJUNCTION:
            self.result.add_error(
                f"{path}.expect[0]",
                f"Cannot start with '{CONJUNCTION}'",
                value=phrase
            )
            return

        if self.phrases is None:
            return
        bare = phrase[len(NEGATION_PREFIX):] if phrase.startswith(NEGATION_PREFIX) else phrase
        if bare not in self.phrases:
            close = difflib.get_close_matches(bare, sorted(self.phrases), n=3)
            self.result.add_error(
                f"{path}.expect[0]",
                "Unknown phrase",
                value=phrase,
                suggestion=f"Did you mean: {', '.join(close)}" if close else "Run 'phrasebook phrases' to list known phrases"
            )

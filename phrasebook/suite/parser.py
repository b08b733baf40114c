"""
Schema parser for assertion suites.

This module converts validated YAML data into a typed Suite, expanding
{{env.KEY}} placeholders along the way.
"""

from __future__ import annotations

import re
from typing import Any

from .models import Check, Defaults, Suite, SubjectSource


class SchemaParser:
    """Parses and converts validated YAML to a typed Suite structure."""

    # Regex for template interpolation: {{env.KEY}}
    TEMPLATE_PATTERN = re.compile(r"\{\{\s*env\.([A-Za-z0-9_]+)\s*\}\}")

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.env: dict[str, Any] = data.get("env") or {}

    def parse(self) -> Suite:
        """Convert validated data to a typed Suite."""
        return Suite(
            version=self.data["version"],
            name=self.interpolate(self.data["name"]),
            env=self.env,
            data=self.interpolate(self.data.get("data")),
            defaults=self._parse_defaults(),
            checks=self._parse_checks(),
        )

    def interpolate(self, value: Any) -> Any:
        """
        Expand {{env.KEY}} placeholders in strings, recursively.

        A string that is exactly one placeholder takes the env value as-is,
        so numbers stay numbers. Unknown keys are left untouched.
        """
        if isinstance(value, str):
            return self._interpolate_string(value)
        if isinstance(value, list):
            return [self.interpolate(item) for item in value]
        if isinstance(value, dict):
            return {key: self.interpolate(item) for key, item in value.items()}
        return value

    def _interpolate_string(self, value: str) -> Any:
        whole = self.TEMPLATE_PATTERN.fullmatch(value)
        if whole and whole.group(1) in self.env:
            return self.env[whole.group(1)]

        def replace(match: re.Match) -> str:
            key = match.group(1)
            if key not in self.env:
                return match.group(0)
            return str(self.env[key])

        return self.TEMPLATE_PATTERN.sub(replace, value)

    def _parse_defaults(self) -> Defaults:
        defaults = self.data.get("defaults") or {}
        return Defaults(stop_on_failure=defaults.get("stop_on_failure", False))

    def _parse_checks(self) -> list[Check]:
        return [self._parse_check(check) for check in self.data.get("checks", [])]

    def _parse_check(self, check: dict) -> Check:
        expect = self.interpolate(check["expect"])
        if "from" in check:
            return Check(
                id=check["id"],
                expect=expect,
                source=SubjectSource.PATH,
                path=self.interpolate(check["from"]),
            )
        return Check(
            id=check["id"],
            expect=expect,
            source=SubjectSource.LITERAL,
            subject=self.interpolate(check["subject"]),
        )

"""
Assertion definitions.

An AssertionDefinition pairs a Pattern with the validation routine that
runs when a call matches it. Definitions are immutable; dispatchers are
built from a fixed list of them.
"""

from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from .slots import ParsedResult, Pattern, PatternPart, PhraseSlot, match_pattern, slotify

Routine = Callable[..., Any]

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, eq=False)
class AssertionDefinition:
    """
    One registered assertion.

    Attributes:
        parts: The parts the assertion was declared with
        routine: Validation routine; receives the subject and every
            validator-slot value, in order
        id: Stable identifier (derived from the pattern if not given)
        pattern: Slots built from parts
    """
    parts: tuple[PatternPart, ...]
    routine: Routine
    id: str = ""
    pattern: Pattern = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parts", tuple(self.parts))
        object.__setattr__(self, "pattern", slotify(self.parts))
        if not self.id:
            object.__setattr__(self, "id", derive_id(self.pattern))

    @property
    def index_phrases(self) -> tuple[str, ...]:
        return self.pattern.phrases

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.routine)

    def parse(self, args: Sequence[Any]) -> ParsedResult:
        return match_pattern(self.pattern, args)

    def __str__(self) -> str:
        return f'"{self.pattern}"'


def derive_id(pattern: Pattern) -> str:
    """Build an id like "number-to-be-greater-than-number" from a pattern."""
    words = []
    for slot in pattern.slots:
        if isinstance(slot, PhraseSlot):
            words.append(slot.phrases[0])
        else:
            words.append(slot.schema.name)
    return _SLUG_PATTERN.sub("-", " ".join(words).lower()).strip("-")


def create_assertion(
    parts: Sequence[PatternPart],
    routine: Routine | None = None,
    *,
    id: str | None = None,
) -> Any:
    """
    Create an AssertionDefinition, directly or as a decorator.

    Example:
        greater_than = create_assertion(
            [NUMBER, "to be greater than", NUMBER],
            lambda subject, other: subject > other,
        )

        @create_assertion(["to be a palindrome"])
        def palindrome(subject):
            return subject == subject[::-1]
    """
    if routine is not None:
        return AssertionDefinition(tuple(parts), routine, id or "")

    def decorator(fn: Routine) -> AssertionDefinition:
        return AssertionDefinition(tuple(parts), fn, id or "")

    return decorator

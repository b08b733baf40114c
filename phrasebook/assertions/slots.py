"""
Pattern model and slot matcher.

An assertion declares its accepted call shape as a list of parts:

    [NUMBER, "to be greater than", NUMBER]
    ["to be a string"]                          # subject slot is implied
    [DATE, ["to be between", "to be within"], DATE, "and", DATE]

slotify() turns the parts into a Pattern (an ordered tuple of slots) and
match_pattern() checks a runtime argument list against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from ..constants import CONJUNCTION, NEGATION_PREFIX
from ..errors import InvalidPatternError
from .schema import ANY, Schema


# ─────────────────────────────────────────────────────────────────────────────
# Slots
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PhraseSlot:
    """Accepts a string exactly equal to one of its phrases."""
    phrases: tuple[str, ...]

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str) and value in self.phrases

    @property
    def is_conjunction(self) -> bool:
        return self.phrases == (CONJUNCTION,)

    def __str__(self) -> str:
        if len(self.phrases) == 1:
            return repr(self.phrases[0])
        return "[" + " | ".join(repr(p) for p in self.phrases) + "]"


@dataclass(frozen=True)
class ValidatorSlot:
    """Accepts any value its schema accepts."""
    schema: Schema
    implicit: bool = False  # inserted for the subject of a phrase-first pattern

    def __str__(self) -> str:
        return "{" + self.schema.name + "}"


Slot = Union[PhraseSlot, ValidatorSlot]


@dataclass(frozen=True)
class Pattern:
    """Ordered sequence of slots describing one assertion's call shape."""
    slots: tuple[Slot, ...]

    def __len__(self) -> int:
        return len(self.slots)

    def slot_at(self, position: int) -> Slot | None:
        if 0 <= position < len(self.slots):
            return self.slots[position]
        return None

    @property
    def phrases(self) -> tuple[str, ...]:
        """Every literal phrase in the pattern, in order of first appearance."""
        seen: dict[str, None] = {}
        for slot in self.slots:
            if isinstance(slot, PhraseSlot):
                for phrase in slot.phrases:
                    seen.setdefault(phrase, None)
        return tuple(seen)

    @property
    def primary_phrase(self) -> str:
        """First phrase of the first non-conjunction phrase slot."""
        for slot in self.slots:
            if isinstance(slot, PhraseSlot) and not slot.is_conjunction:
                return slot.phrases[0]
        raise InvalidPatternError("Pattern has no phrase slot")

    def __str__(self) -> str:
        return " ".join(str(slot) for slot in self.slots)


@dataclass(frozen=True)
class ParsedResult:
    """
    Result of matching one argument list against one pattern.

    Attributes:
        success: Every slot matched
        exact_match: Additionally, no arguments were left over
        parsed_values: One value per slot (validator values possibly coerced)
        arguments: Validator-slot values only; what the routine receives
        failed_at: Index of the first slot that did not match
    """
    success: bool
    exact_match: bool = False
    parsed_values: tuple[Any, ...] = ()
    arguments: tuple[Any, ...] = ()
    failed_at: int | None = None

    @classmethod
    def failure(cls, failed_at: int | None = None) -> ParsedResult:
        return cls(success=False, failed_at=failed_at)


# ─────────────────────────────────────────────────────────────────────────────
# Pattern construction
# ─────────────────────────────────────────────────────────────────────────────

PatternPart = Union[str, Sequence[str], Schema, type]


def slotify(parts: Sequence[PatternPart]) -> Pattern:
    """
    Convert declared parts into a Pattern.

    Raises:
        InvalidPatternError: If a part is malformed (negated phrase, stray
            "and", unknown part type) or the pattern has no phrase.
    """
    if isinstance(parts, str) or not parts:
        raise InvalidPatternError(f"Assertion parts must be a non-empty list, got {parts!r}")

    slots: list[Slot] = []
    for index, part in enumerate(parts):
        if index == 0 and _is_phrase_part(part):
            slots.append(ValidatorSlot(ANY, implicit=True))

        if isinstance(part, str):
            if part == CONJUNCTION:
                following = parts[index + 1] if index + 1 < len(parts) else None
                if not _is_validator_part(following):
                    described = "nothing" if following is None else f"{following!r}"
                    raise InvalidPatternError(
                        f'"{CONJUNCTION}" at parts[{index}] must be followed by a schema '
                        f"but was followed by {described}"
                    )
            slots.append(PhraseSlot((_check_phrase(part, index),)))
        elif isinstance(part, (list, tuple)):
            slots.append(PhraseSlot(_check_choice(part, index)))
        elif isinstance(part, Schema):
            slots.append(ValidatorSlot(part))
        elif isinstance(part, type):
            slots.append(ValidatorSlot(Schema(part)))
        else:
            raise InvalidPatternError(
                f"Expected schema, phrase, or phrase choice at parts[{index}] "
                f"but received {part!r} ({type(part).__name__})"
            )

    if not any(isinstance(s, PhraseSlot) and not s.is_conjunction for s in slots):
        raise InvalidPatternError(f"Assertion parts must include at least one phrase: {parts!r}")

    return Pattern(tuple(slots))


def _is_phrase_part(part: Any) -> bool:
    return isinstance(part, (str, list, tuple))


def _is_validator_part(part: Any) -> bool:
    return isinstance(part, (Schema, type))


def _check_phrase(phrase: str, index: int) -> str:
    if not phrase:
        raise InvalidPatternError(f"Phrase at parts[{index}] must not be empty")
    if phrase.startswith(NEGATION_PREFIX):
        raise InvalidPatternError(
            f'Phrase at parts[{index}] must not start with "{NEGATION_PREFIX}"; '
            f"declare the positive assertion instead: {phrase!r}"
        )
    return phrase


def _check_choice(choice: Sequence[Any], index: int) -> tuple[str, ...]:
    if not choice or not all(isinstance(p, str) and p for p in choice):
        raise InvalidPatternError(
            f"Phrase choice at parts[{index}] must be a non-empty list of strings: {choice!r}"
        )
    if any(p.startswith(NEGATION_PREFIX) for p in choice):
        raise InvalidPatternError(
            f'Phrase choice at parts[{index}] must not include phrases starting with '
            f'"{NEGATION_PREFIX}": {list(choice)!r}'
        )
    return tuple(dict.fromkeys(choice))


# ─────────────────────────────────────────────────────────────────────────────
# Slot matcher
# ─────────────────────────────────────────────────────────────────────────────

def match_pattern(pattern: Pattern, args: Sequence[Any]) -> ParsedResult:
    """
    Match an argument list against a pattern, left to right.

    Extra trailing arguments do not fail the match but make it partial.
    """
    if len(args) < len(pattern):
        return ParsedResult.failure()

    parsed: list[Any] = []
    arguments: list[Any] = []
    for index, slot in enumerate(pattern.slots):
        value = args[index]
        if isinstance(slot, PhraseSlot):
            if not slot.accepts(value):
                return ParsedResult.failure(index)
            parsed.append(value)
        else:
            result = slot.schema.validate(value)
            if not result.success:
                return ParsedResult.failure(index)
            parsed.append(result.value)
            arguments.append(result.value)

    return ParsedResult(
        success=True,
        exact_match=len(args) == len(pattern),
        parsed_values=tuple(parsed),
        arguments=tuple(arguments),
    )

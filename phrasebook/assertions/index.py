"""
Phrase index for candidate narrowing.

The index maps a phrase string to the definitions that could match a
call presenting that phrase at a conventional position (1 for the usual
subject-first shape, then 0). It is a narrowing optimization only:
scanning the returned bucket must give the same winner as scanning every
definition, so a bucket also holds each definition whose slot at that
position is not a phrase slot (it might accept any string there).
"""

from __future__ import annotations

from typing import Any, Sequence

from ..constants import PHRASE_POSITIONS
from .definition import AssertionDefinition
from .slots import PhraseSlot


class PhraseIndex:
    """
    Precomputed phrase -> candidate definitions map.

    Buckets preserve registration order, which is also match priority.

    Example:
        index = PhraseIndex(definitions)
        candidates = index.candidates([5, "to be greater than", 3])
    """

    def __init__(self, definitions: Sequence[AssertionDefinition]):
        self.definitions: tuple[AssertionDefinition, ...] = tuple(definitions)
        self._buckets: dict[int, dict[str, tuple[AssertionDefinition, ...]]] = {
            position: self._build(position) for position in PHRASE_POSITIONS
        }

    def _build(self, position: int) -> dict[str, tuple[AssertionDefinition, ...]]:
        keys: dict[str, None] = {}
        for definition in self.definitions:
            slot = definition.pattern.slot_at(position)
            if isinstance(slot, PhraseSlot):
                keys.update(dict.fromkeys(slot.phrases))

        buckets: dict[str, list[AssertionDefinition]] = {key: [] for key in keys}
        for definition in self.definitions:
            slot = definition.pattern.slot_at(position)
            if isinstance(slot, PhraseSlot):
                for phrase in slot.phrases:
                    buckets[phrase].append(definition)
            else:
                # Validator slot or no slot at all: cannot rule it out by phrase
                for bucket in buckets.values():
                    bucket.append(definition)

        return {key: tuple(bucket) for key, bucket in buckets.items()}

    @property
    def phrases(self) -> frozenset[str]:
        """Every phrase with its own bucket, at any position."""
        return frozenset(key for buckets in self._buckets.values() for key in buckets)

    def __len__(self) -> int:
        return len(self.phrases)

    def candidates(self, args: Sequence[Any]) -> tuple[AssertionDefinition, ...]:
        """
        Return the definitions worth attempting for an argument list.

        Falls back to every definition when no phrase can be extracted or
        the phrase is not indexed.
        """
        for position in PHRASE_POSITIONS:
            if len(args) > position and isinstance(args[position], str):
                bucket = self._buckets[position].get(args[position])
                if bucket is None:
                    return self.definitions
                return bucket
        return self.definitions


def extract_phrase(args: Sequence[Any]) -> str | None:
    """Return the phrase argument of a call, if there is one."""
    for position in PHRASE_POSITIONS:
        if len(args) > position and isinstance(args[position], str):
            return args[position]
    return None

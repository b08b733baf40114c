"""
Call-level grammar: negation and conjunctions.

    expect(x, "not to be empty")
        -> negated call (x, "to be empty")

    expect(x, "to be a string", "and", "to be non-empty")
        -> segments (x, "to be a string") and (x, "to be non-empty")

Phrases may legitimately contain the conjunction ("to be between", a,
"and", b), so splitting can be undone: rejoin_permutations() proposes
alternative segmentations that glue one adjacent pair back together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from ..constants import CONJUNCTION, NEGATION_PREFIX

Args = tuple[Any, ...]


@dataclass(frozen=True)
class NegationResult:
    """An argument list with any leading negation stripped from its phrase."""
    is_negated: bool
    args: Args


def strip_negation(args: Sequence[Any]) -> NegationResult:
    """
    Strip the negation prefix from the phrase argument (position 1).

    Only the single leading prefix is removed; every other argument is
    left untouched.
    """
    args = tuple(args)
    if len(args) >= 2 and isinstance(args[1], str) and args[1].startswith(NEGATION_PREFIX):
        cleaned = args[1][len(NEGATION_PREFIX):]
        return NegationResult(is_negated=True, args=(args[0], cleaned, *args[2:]))
    return NegationResult(is_negated=False, args=args)


def _is_conjunction(value: Any) -> bool:
    return isinstance(value, str) and value == CONJUNCTION


def split_conjunctions(args: Sequence[Any]) -> list[Args]:
    """
    Split a call on bare conjunction arguments after the subject.

    Every segment after the first re-prepends the subject, so each one is
    a complete call of its own.
    """
    args = tuple(args)
    positions = [i for i, arg in enumerate(args) if i >= 1 and _is_conjunction(arg)]
    if not positions:
        return [args]

    subject = args[0]
    segments: list[Args] = [args[: positions[0]]]
    for start, end in zip(positions, positions[1:]):
        segments.append((subject, *args[start + 1 : end]))
    segments.append((subject, *args[positions[-1] + 1 :]))
    return segments


def rejoin_permutations(segments: Sequence[Args], original: Sequence[Any]) -> list[list[Args]]:
    """
    Propose segmentations that undo one split each.

    For every adjacent pair (i, i + 1) the pair is glued back together
    with the conjunction while the other segments stay independent. The
    unsplit original call comes last. With exactly two segments, gluing
    the only pair already reproduces the original.
    """
    permutations: list[list[Args]] = []
    for i in range(len(segments) - 1):
        joined = (*segments[i], CONJUNCTION, *segments[i + 1][1:])
        permutations.append([*segments[:i], joined, *segments[i + 2 :]])

    if len(segments) > 2:
        permutations.append([tuple(original)])
    return permutations

"""
Natural-language assertion dispatch.

This package matches calls like expect(5, "to be greater than", 3)
against registered assertion patterns and runs the winner.

Modules:
    - schema: Value validators (pydantic-backed) for validator slots
    - slots: Pattern model, pattern construction and the slot matcher
    - definition: AssertionDefinition and create_assertion
    - index: Phrase index for candidate narrowing
    - grammar: Negation stripping, conjunction splitting, rejoins
    - engine: Sync and async dispatchers
    - builtin: The default assertion library

Usage:
    from phrasebook.assertions import Dispatcher, BUILTIN_ASSERTIONS, create_assertion

    expect = Dispatcher(BUILTIN_ASSERTIONS)
    expect("hi", "to be a string", "and", "not to be empty")

    palindrome = create_assertion(
        [STRING, "to be a palindrome"],
        lambda subject: subject == subject[::-1],
    )
    expect = expect.extend([palindrome])
    expect("level", "to be a palindrome")
"""

# Schemas
from .schema import (
    Schema,
    SchemaResult,
    ANY,
    AWAITABLE,
    BOOLEAN,
    CALLABLE,
    DATE,
    EXCEPTION_CLASS,
    INTEGER,
    NON_NEGATIVE_INTEGER,
    NUMBER,
    SIZED,
    STRING,
)

# Patterns
from .slots import ParsedResult, Pattern, PhraseSlot, ValidatorSlot, match_pattern, slotify
from .definition import AssertionDefinition, create_assertion
from .index import PhraseIndex

# Models
from .models import AssertionFailure, AssertionOutcome, AssertionStatus

# Engine
from .engine import AsyncDispatcher, BaseDispatcher, Dispatcher, Resolution

# Library
from .builtin import ASYNC_ASSERTIONS, BUILTIN_ASSERTIONS, JSONPATH, find_path

__all__ = [
    # Schemas
    "Schema",
    "SchemaResult",
    "ANY",
    "AWAITABLE",
    "BOOLEAN",
    "CALLABLE",
    "DATE",
    "EXCEPTION_CLASS",
    "INTEGER",
    "NON_NEGATIVE_INTEGER",
    "NUMBER",
    "SIZED",
    "STRING",
    # Patterns
    "ParsedResult",
    "Pattern",
    "PhraseSlot",
    "ValidatorSlot",
    "match_pattern",
    "slotify",
    "AssertionDefinition",
    "create_assertion",
    "PhraseIndex",
    # Models
    "AssertionFailure",
    "AssertionOutcome",
    "AssertionStatus",
    # Engine
    "AsyncDispatcher",
    "BaseDispatcher",
    "Dispatcher",
    "Resolution",
    # Library
    "ASYNC_ASSERTIONS",
    "BUILTIN_ASSERTIONS",
    "JSONPATH",
    "find_path",
]

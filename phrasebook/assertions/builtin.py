"""
Builtin assertion library.

Leaf assertions registered with the default dispatchers. Each one is a
pattern plus a routine; the engine does the matching, negation and
conjunction handling, so routines only answer "does this hold?".

Supported phrases (negate any of them with a leading "not "):
    - types: "to be a string", "to be a number", "to be an integer", ...
    - emptiness: "to be empty", "to be non-empty"
    - comparisons: "to be greater than", "to be at most", "to be between ... and ..."
    - equality and containment: "to equal", "to contain"
    - length: "to have length", "to have length at least", "to have length at most"
    - JSONPath: "to have path", "to have path ... with value ...",
      "to have path ... satisfying ..."
    - predicates: "to satisfy", "to match", "to raise"
    - awaitables (async dispatcher only): "to resolve", "to reject", "to resolve to"

Usage:
    from phrasebook import expect

    data = {"results": [{"id": 1}, {"id": 2}]}
    expect(data, "to have path", "$.results[0]")
    expect(data, "to have path", "$.results[0].id", "with value", 1)
    expect(data["results"], "to have length at least", 1)
"""

from __future__ import annotations

import inspect
import re
from typing import Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..errors import UnexpectedAsyncError
from .definition import AssertionDefinition, create_assertion
from .models import AssertionFailure, format_value
from .schema import (
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
    Schema,
)


def _is_jsonpath(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_jsonpath(value)
    except (JsonPathLexerError, JsonPathParserError):
        return False
    return True


def _is_regex(value: Any) -> bool:
    if isinstance(value, re.Pattern):
        return True
    if not isinstance(value, str):
        return False
    try:
        re.compile(value)
    except re.error:
        return False
    return True


JSONPATH = Schema.where(_is_jsonpath, "JSONPath expression")
REGEX = Schema.where(_is_regex, "regular expression")
CLASS = Schema.where(lambda value: isinstance(value, type), "class")
CONTAINER = Schema.where(lambda value: hasattr(value, "__contains__"), "container")


# ─────────────────────────────────────────────────────────────────────────────
# Types and identity
# ─────────────────────────────────────────────────────────────────────────────

string_assertion = create_assertion(["to be a string"], lambda _: STRING)
number_assertion = create_assertion(["to be a number"], lambda _: NUMBER)
integer_assertion = create_assertion(["to be an integer"], lambda _: INTEGER)
boolean_assertion = create_assertion(["to be a boolean"], lambda _: BOOLEAN)
list_assertion = create_assertion(["to be a list"], lambda _: Schema.instance_of(list))
dict_assertion = create_assertion(["to be a dict"], lambda _: Schema.instance_of(dict))
callable_assertion = create_assertion([["to be callable", "to be a function"]], lambda _: CALLABLE)
none_assertion = create_assertion(["to be None"], lambda subject: subject is None)
true_assertion = create_assertion(["to be true"], lambda subject: subject is True)
false_assertion = create_assertion(["to be false"], lambda subject: subject is False)
truthy_assertion = create_assertion([["to be truthy", "to be ok"]], lambda subject: bool(subject))

instance_of_assertion = create_assertion(
    [ANY, ["to be an instance of", "to be a", "to be an"], CLASS],
    lambda _, cls: Schema.instance_of(cls),
)


# ─────────────────────────────────────────────────────────────────────────────
# Emptiness, equality, containment
# ─────────────────────────────────────────────────────────────────────────────

empty_assertion = create_assertion([SIZED, "to be empty"], lambda subject: len(subject) == 0)
non_empty_assertion = create_assertion(
    [SIZED, ["to be non-empty", "to be nonempty"]],
    lambda subject: len(subject) > 0,
)


@create_assertion([ANY, ["to equal", "to be equal to", "to be"], ANY])
def equal_assertion(subject: Any, expected: Any) -> AssertionFailure | None:
    if subject == expected:
        return None
    if type(subject) is not type(expected):
        return AssertionFailure(
            message=f"type mismatch: expected {type(expected).__name__}, got {type(subject).__name__}",
            expected=expected,
        )
    return AssertionFailure(expected=expected)


@create_assertion([CONTAINER, ["to contain", "to include"], ANY])
def contain_assertion(subject: Any, expected: Any) -> AssertionFailure | None:
    """
    Containment by subject type:
    - strings: substring (the needle must be a string)
    - mappings: key
    - other containers: element
    """
    if isinstance(subject, str) and not isinstance(expected, str):
        return AssertionFailure(
            message="a string can only contain another string",
            expected=f"string containing {expected!r}",
        )
    if expected in subject:
        return None
    kind = "string" if isinstance(subject, str) else "object" if isinstance(subject, dict) else "container"
    return AssertionFailure(expected=f"{kind} containing {expected!r}")


# ─────────────────────────────────────────────────────────────────────────────
# Comparisons
# ─────────────────────────────────────────────────────────────────────────────

greater_than_assertion = create_assertion(
    [NUMBER, ["to be greater than", "to be above"], NUMBER],
    lambda subject, other: subject > other,
)
less_than_assertion = create_assertion(
    [NUMBER, ["to be less than", "to be below"], NUMBER],
    lambda subject, other: subject < other,
)
at_least_assertion = create_assertion(
    [NUMBER, ["to be at least", "to be greater than or equal to"], NUMBER],
    lambda subject, other: subject >= other,
)
at_most_assertion = create_assertion(
    [NUMBER, ["to be at most", "to be less than or equal to"], NUMBER],
    lambda subject, other: subject <= other,
)


def _between(subject: Any, start: Any, end: Any) -> AssertionFailure | None:
    if start <= subject <= end:
        return None
    return AssertionFailure(expected=f"{start!r} <= value <= {end!r}")


number_between_assertion = create_assertion(
    [NUMBER, ["to be between", "to be within"], NUMBER, "and", NUMBER],
    _between,
)
date_between_assertion = create_assertion(
    [DATE, ["to be between", "to be within"], DATE, "and", DATE],
    _between,
)


# ─────────────────────────────────────────────────────────────────────────────
# Length
# ─────────────────────────────────────────────────────────────────────────────

def _check_length(subject: Any, expected_length: int, op: str) -> AssertionFailure | None:
    """Shared helper for the length assertions."""
    actual_length = len(subject)
    type_name = "string" if isinstance(subject, str) else type(subject).__name__

    if op == "gte":
        if actual_length >= expected_length:
            return None
        return AssertionFailure(
            message=f"{type_name.capitalize()} is too short",
            expected=f"length >= {expected_length}",
            actual=f"length {actual_length}",
        )

    if op == "lte":
        if actual_length <= expected_length:
            return None
        return AssertionFailure(
            message=f"{type_name.capitalize()} is too long",
            expected=f"length <= {expected_length}",
            actual=f"length {actual_length}",
        )

    if actual_length == expected_length:
        return None
    return AssertionFailure(
        message=f"{type_name.capitalize()} length mismatch",
        expected=f"length == {expected_length}",
        actual=f"length {actual_length}",
    )


length_assertion = create_assertion(
    [SIZED, ["to have length", "to have size"], NON_NEGATIVE_INTEGER],
    lambda subject, n: _check_length(subject, n, "eq"),
)
length_at_least_assertion = create_assertion(
    [SIZED, "to have length at least", NON_NEGATIVE_INTEGER],
    lambda subject, n: _check_length(subject, n, "gte"),
)
length_at_most_assertion = create_assertion(
    [SIZED, "to have length at most", NON_NEGATIVE_INTEGER],
    lambda subject, n: _check_length(subject, n, "lte"),
)


# ─────────────────────────────────────────────────────────────────────────────
# JSONPath
# ─────────────────────────────────────────────────────────────────────────────

def find_path(data: Any, path: str) -> list[Any]:
    """Return the values a JSONPath expression selects in data."""
    return [match.value for match in parse_jsonpath(path).find(data)]


@create_assertion([ANY, ["to have path", "to have json path"], JSONPATH])
def path_assertion(data: Any, path: str) -> AssertionFailure | None:
    if find_path(data, path):
        return None
    return AssertionFailure(
        message=f"Path {path} does not exist",
        expected="path to exist",
        actual="no matches found",
    )


@create_assertion([ANY, ["to have path", "to have json path"], JSONPATH, ["with value", "equal to"], ANY])
def path_value_assertion(data: Any, path: str, expected: Any) -> AssertionFailure | None:
    values = find_path(data, path)
    if not values:
        return AssertionFailure(
            message=f"Path {path} does not exist",
            expected=expected,
            actual="<path not found>",
        )

    actual = values[0]
    if actual == expected:
        return None
    return AssertionFailure(
        message=f"Value at {path} does not match",
        expected=expected,
        actual=actual,
    )


@create_assertion([ANY, ["to have path", "to have json path"], JSONPATH, "satisfying", CALLABLE])
def path_satisfying_assertion(data: Any, path: str, predicate: Any) -> AssertionFailure | bool:
    values = find_path(data, path)
    if not values:
        return AssertionFailure(message=f"Path {path} does not exist", actual="<path not found>")
    return _predicate_holds(predicate, values[0])


# ─────────────────────────────────────────────────────────────────────────────
# Predicates
# ─────────────────────────────────────────────────────────────────────────────

def _predicate_holds(predicate: Any, value: Any) -> bool:
    # expect.it(...) callables return None on success and raise on failure
    result = predicate(value)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise UnexpectedAsyncError(
            f"Predicate {predicate!r} returned an awaitable; use the async dispatcher",
            result=result,
        )
    return result is None or bool(result)


@create_assertion([ANY, ["to satisfy", "to pass"], CALLABLE])
def satisfy_assertion(subject: Any, predicate: Any) -> bool:
    return _predicate_holds(predicate, subject)


match_assertion = create_assertion(
    [STRING, "to match", REGEX],
    lambda subject, pattern: re.search(pattern, subject) is not None,
)


@create_assertion([CALLABLE, ["to raise", "to throw"]])
def raise_assertion(fn: Any) -> AssertionFailure | None:
    try:
        fn()
    except Exception:
        return None
    return AssertionFailure(message="it returned normally")


@create_assertion([CALLABLE, ["to raise", "to throw"], EXCEPTION_CLASS])
def raise_type_assertion(fn: Any, expected: type) -> AssertionFailure | None:
    try:
        fn()
    except Exception as e:
        if isinstance(e, expected):
            return None
        return AssertionFailure(
            message=f"it raised {type(e).__name__} instead",
            expected=expected.__name__,
            actual=type(e).__name__,
        )
    return AssertionFailure(
        message="it returned normally",
        expected=expected.__name__,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Awaitables
# ─────────────────────────────────────────────────────────────────────────────

@create_assertion([AWAITABLE, ["to resolve", "to be fulfilled"]])
async def resolve_assertion(awaitable: Any) -> AssertionFailure | None:
    try:
        await awaitable
    except Exception as e:
        return AssertionFailure(
            message=f"it raised {type(e).__name__}: {e}",
            actual=e,
        )
    return None


@create_assertion([AWAITABLE, ["to resolve to", "to be fulfilled with"], ANY])
async def resolve_to_assertion(awaitable: Any, expected: Any) -> AssertionFailure | None:
    try:
        value = await awaitable
    except Exception as e:
        return AssertionFailure(
            message=f"it raised {type(e).__name__}: {e}",
            expected=expected,
            actual=e,
        )
    if value == expected:
        return None
    return AssertionFailure(
        message=f"it resolved to {format_value(value)}",
        expected=expected,
        actual=value,
    )


@create_assertion([AWAITABLE, ["to reject", "to be rejected"]])
async def reject_assertion(awaitable: Any) -> AssertionFailure | None:
    try:
        await awaitable
    except Exception:
        return None
    return AssertionFailure(message="it resolved")


@create_assertion([AWAITABLE, ["to reject", "to be rejected"], ["with", "with error"], EXCEPTION_CLASS])
async def reject_with_assertion(awaitable: Any, expected: type) -> AssertionFailure | None:
    try:
        await awaitable
    except Exception as e:
        if isinstance(e, expected):
            return None
        return AssertionFailure(
            message=f"it raised {type(e).__name__} instead",
            expected=expected.__name__,
            actual=type(e).__name__,
        )
    return AssertionFailure(
        message="it resolved",
        expected=expected.__name__,
    )


async def _awaited_predicate_holds(predicate: Any, value: Any) -> bool:
    result = predicate(value)
    if inspect.isawaitable(result):
        result = await result
    return result is None or bool(result)


# These must come before the sync library in an async dispatcher.
@create_assertion([ANY, ["to satisfy", "to pass"], CALLABLE], id="async-satisfy")
async def async_satisfy_assertion(subject: Any, predicate: Any) -> bool:
    return await _awaited_predicate_holds(predicate, subject)


@create_assertion(
    [ANY, ["to have path", "to have json path"], JSONPATH, "satisfying", CALLABLE],
    id="async-path-satisfying",
)
async def async_path_satisfying_assertion(data: Any, path: str, predicate: Any) -> AssertionFailure | bool:
    values = find_path(data, path)
    if not values:
        return AssertionFailure(message=f"Path {path} does not exist", actual="<path not found>")
    return await _awaited_predicate_holds(predicate, values[0])


BUILTIN_ASSERTIONS: tuple[AssertionDefinition, ...] = (
    string_assertion,
    number_assertion,
    integer_assertion,
    boolean_assertion,
    list_assertion,
    dict_assertion,
    callable_assertion,
    none_assertion,
    true_assertion,
    false_assertion,
    truthy_assertion,
    instance_of_assertion,
    empty_assertion,
    non_empty_assertion,
    equal_assertion,
    contain_assertion,
    greater_than_assertion,
    less_than_assertion,
    at_least_assertion,
    at_most_assertion,
    number_between_assertion,
    date_between_assertion,
    length_assertion,
    length_at_least_assertion,
    length_at_most_assertion,
    path_assertion,
    path_value_assertion,
    path_satisfying_assertion,
    satisfy_assertion,
    match_assertion,
    raise_assertion,
    raise_type_assertion,
)

ASYNC_ASSERTIONS: tuple[AssertionDefinition, ...] = (
    async_satisfy_assertion,
    async_path_satisfying_assertion,
    resolve_assertion,
    resolve_to_assertion,
    reject_assertion,
    reject_with_assertion,
)

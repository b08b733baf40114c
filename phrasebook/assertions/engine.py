"""
Assertion dispatch engine.

This module turns a call like expect(5, "to be greater than", 3) into
the execution of exactly one registered assertion per conjunction
segment:

    split on "and" -> per segment: strip "not " -> phrase index lookup
    -> match candidates (exact beats partial, first registered wins ties)
    -> execute -> apply negation

If some segment cannot be matched, rejoin permutations are tried before
the call is rejected with UnknownAssertionError.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, NoReturn, Sequence

from ..errors import (
    AssertionFailedError,
    AssertionImplementationError,
    FailAssertionError,
    NegatedAssertionError,
    UnexpectedAsyncError,
    UnknownAssertionError,
)
from .definition import AssertionDefinition
from .grammar import Args, rejoin_permutations, split_conjunctions, strip_negation
from .index import PhraseIndex
from .models import AssertionFailure, AssertionOutcome, describe_call
from .schema import Schema
from .slots import ParsedResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    The assertion selected for one segment of a call.

    Attributes:
        definition: The winning definition
        parsed: Its match result against the (negation-stripped) segment
        is_negated: Whether the segment's phrase carried the negation prefix
        args: The segment as written by the caller
    """
    definition: AssertionDefinition
    parsed: ParsedResult
    is_negated: bool
    args: Args


class BaseDispatcher:
    """
    Matching and outcome handling shared by the sync and async dispatchers.

    The definition list and phrase index are fixed at construction time.
    """

    def __init__(
        self,
        definitions: Sequence[AssertionDefinition] = (),
        parent: BaseDispatcher | None = None,
    ):
        inherited = parent.definitions if parent is not None else ()
        self.definitions: tuple[AssertionDefinition, ...] = (*inherited, *definitions)
        self.index = PhraseIndex(self.definitions)
        logger.debug(
            f"Created {type(self).__name__} with {len(definitions)} new and "
            f"{len(inherited)} inherited assertions "
            f"({len(self.definitions)} total, {len(self.index)} indexed phrases)"
        )

    # ─────────────────────────────────────────────────────────────────────
    # Matching
    # ─────────────────────────────────────────────────────────────────────

    def resolve_segment(self, segment: Sequence[Any]) -> Resolution | None:
        """Pick the assertion for one segment, or None if nothing matches."""
        negation = strip_negation(segment)
        first_partial: Resolution | None = None

        for definition in self.index.candidates(negation.args):
            parsed = definition.parse(negation.args)
            if not parsed.success:
                continue
            resolution = Resolution(definition, parsed, negation.is_negated, tuple(segment))
            if parsed.exact_match:
                return resolution
            if first_partial is None:
                first_partial = resolution

        return first_partial

    def resolve(self, args: Sequence[Any]) -> list[Resolution]:
        """
        Resolve a whole call into one Resolution per segment.

        Raises:
            UnknownAssertionError: If no segmentation of the call matches
        """
        args = tuple(args)
        segments = split_conjunctions(args)
        resolutions = self._resolve_all(segments)
        if resolutions is not None:
            return resolutions

        if len(segments) > 1:
            logger.debug(f"Split into {len(segments)} segments did not match; trying rejoins")
            for permutation in rejoin_permutations(segments, args):
                resolutions = self._resolve_all(permutation)
                if resolutions is not None:
                    return resolutions

        message = f"Invalid arguments. No assertion matched: {list(args)!r}"
        logger.debug(message)
        raise UnknownAssertionError(message, args)

    def _resolve_all(self, segments: Sequence[Args]) -> list[Resolution] | None:
        resolutions = []
        for segment in segments:
            resolution = self.resolve_segment(segment)
            if resolution is None:
                return None
            logger.debug(
                f"Matched {resolution.definition.id} "
                f"({'exact' if resolution.parsed.exact_match else 'partial'}"
                f"{', negated' if resolution.is_negated else ''})"
            )
            resolutions.append(resolution)
        return resolutions

    # ─────────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────────

    def _classify_error(
        self, resolution: Resolution, error: Exception
    ) -> AssertionOutcome:
        """Classify an exception raised by a routine."""
        if isinstance(error, AssertionFailedError):
            return AssertionOutcome.failed_result(
                message=error.message,
                expected=error.expected,
                actual=error.actual,
                diff=error.diff,
                error=error,
            )
        if isinstance(error, AssertionImplementationError):
            raise error
        raise AssertionImplementationError(
            f"Assertion {resolution.definition} raised {type(error).__name__}: {error}"
        ) from error

    def _interpret(self, resolution: Resolution, result: Any) -> AssertionOutcome:
        """Turn a routine's return value into an outcome."""
        definition = resolution.definition
        arguments = resolution.parsed.arguments
        subject = arguments[0] if arguments else None
        described = describe_call(resolution.args)

        if result is None or result is True:
            return AssertionOutcome.passed_result(f"Expected {described}", actual=subject)

        if result is False:
            return AssertionOutcome.failed_result(f"Expected {described}", actual=subject)

        if isinstance(result, AssertionFailure):
            return AssertionOutcome.failed_result(
                message=f"Expected {described}: {result.message}" if result.message else f"Expected {described}",
                expected=result.expected,
                actual=subject if result.actual is None else result.actual,
                diff=result.diff,
            )

        if isinstance(result, Schema):
            checked = result.validate(subject)
            if checked.success:
                return AssertionOutcome.passed_result(f"Expected {described}", actual=subject)
            return AssertionOutcome.failed_result(
                message=f"Expected {described}: {checked.error}",
                expected=result.name,
                actual=subject,
            )

        raise AssertionImplementationError(
            f"Assertion {definition} returned an invalid value of type "
            f"{type(result).__name__}; expected None, bool, AssertionFailure or Schema",
            result=result,
        )

    def _settle(self, resolution: Resolution, outcome: AssertionOutcome) -> None:
        """Apply negation to an outcome; raise if the call is not satisfied."""
        definition = resolution.definition

        if outcome.passed:
            if resolution.is_negated:
                raise NegatedAssertionError(
                    f"Expected {describe_call(resolution.args)}, but assertion "
                    f"{definition} passed",
                    assertion_id=definition.id,
                    actual=outcome.actual,
                    call_args=resolution.args,
                )
            return

        if resolution.is_negated:
            return

        if outcome.error is not None:
            raise outcome.error

        raise AssertionFailedError(
            outcome.message,
            assertion_id=definition.id,
            actual=outcome.actual,
            expected=outcome.expected,
            diff=outcome.diff,
            call_args=resolution.args,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Public helpers
    # ─────────────────────────────────────────────────────────────────────

    @property
    def phrases(self) -> frozenset[str]:
        return frozenset(p for d in self.definitions for p in d.index_phrases)

    def extend(self, definitions: Sequence[AssertionDefinition]):
        """Return a new dispatcher with these definitions after the current ones."""
        return type(self)(definitions, parent=self)

    @staticmethod
    def fail(reason: str | None = None) -> NoReturn:
        """Fail unconditionally."""
        raise FailAssertionError(reason)


class Dispatcher(BaseDispatcher):
    """
    Synchronous dispatcher.

    Example:
        expect = Dispatcher(BUILTIN_ASSERTIONS)
        expect(5, "to be greater than", 3)
        expect("hi", "to be a string", "and", "not to be empty")
    """

    def __call__(self, *args: Any) -> None:
        self.dispatch(*args)

    def dispatch(self, *args: Any) -> None:
        """
        Match and run the call; return on success.

        Raises:
            AssertionFailedError: The subject failed a non-negated assertion
            NegatedAssertionError: A negated assertion passed
            UnknownAssertionError: No assertion matched the call
            AssertionImplementationError: A matched routine is broken
        """
        self.run(self.resolve(args))

    def run(self, resolutions: Sequence[Resolution]) -> None:
        """Execute segments already picked by resolve(), left to right."""
        for resolution in resolutions:
            self._settle(resolution, self._evaluate(resolution))

    def _evaluate(self, resolution: Resolution) -> AssertionOutcome:
        definition = resolution.definition
        try:
            result = definition.routine(*resolution.parsed.arguments)
        except Exception as e:
            return self._classify_error(resolution, e)

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise UnexpectedAsyncError(
                f"Assertion {definition} returned an awaitable; use the async dispatcher",
                result=result,
            )
        return self._interpret(resolution, result)

    def it(self, *args: Any) -> Callable[[Any], None]:
        """Defer a call until the subject is known: expect.it("to be a string")(x)."""

        def check(subject: Any) -> None:
            self.dispatch(subject, *args)

        return check


class AsyncDispatcher(BaseDispatcher):
    """
    Dispatcher that awaits validation routines.

    Segments and rejoin attempts run strictly one after another, so side
    effects of routines happen left to right.

    Example:
        expect_async = AsyncDispatcher(ASYNC_ASSERTIONS + BUILTIN_ASSERTIONS)
        await expect_async(fetch(), "to resolve")
    """

    async def __call__(self, *args: Any) -> None:
        await self.dispatch(*args)

    async def dispatch(self, *args: Any) -> None:
        await self.run(self.resolve(args))

    async def run(self, resolutions: Sequence[Resolution]) -> None:
        for resolution in resolutions:
            self._settle(resolution, await self._evaluate(resolution))

    async def _evaluate(self, resolution: Resolution) -> AssertionOutcome:
        try:
            result = resolution.definition.routine(*resolution.parsed.arguments)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            return self._classify_error(resolution, e)
        return self._interpret(resolution, result)

    def it(self, *args: Any) -> Callable[[Any], Awaitable[None]]:
        async def check(subject: Any) -> None:
            await self.dispatch(subject, *args)

        return check


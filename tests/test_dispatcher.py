from datetime import date

import pytest

from phrasebook.assertions import (
    ANY,
    BUILTIN_ASSERTIONS,
    NUMBER,
    STRING,
    AssertionFailure,
    Dispatcher,
    create_assertion,
)
from phrasebook.assertions.models import describe_call
from phrasebook.constants import FAIL
from phrasebook.errors import (
    AssertionFailedError,
    AssertionImplementationError,
    FailAssertionError,
    NegatedAssertionError,
    PhrasebookError,
    UnexpectedAsyncError,
    UnknownAssertionError,
)


class TestMatching:
    def test_exact_match_beats_earlier_partial_match(self, recorder, calls):
        partial = create_assertion([ANY, "to be fine"], recorder("partial"))
        exact = create_assertion([ANY, "to be fine", NUMBER], recorder("exact"))
        expect = Dispatcher([partial, exact])

        expect(1, "to be fine", 2)

        assert calls == [("exact", (1, 2))]

    def test_first_registered_wins_among_exact_matches(self, recorder, calls):
        first = create_assertion([NUMBER, "to be fine"], recorder("first"))
        second = create_assertion([ANY, "to be fine"], recorder("second"))
        expect = Dispatcher([first, second])

        expect(1, "to be fine")
        expect("x", "to be fine")

        assert calls == [("first", (1,)), ("second", ("x",))]

    def test_first_partial_match_is_used_without_exact(self, recorder, calls):
        first = create_assertion([ANY, "to be fine"], recorder("first"))
        second = create_assertion([ANY, "to be fine", ANY], recorder("second"))
        expect = Dispatcher([first, second])

        expect(1, "to be fine", 2, 3)

        assert calls == [("first", (1,))]

    def test_routine_receives_subject_and_validator_values_only(self, recorder, calls):
        between = create_assertion(
            [NUMBER, "to be between", NUMBER, "and", NUMBER], recorder("between")
        )

        Dispatcher([between])(5, "to be between", 1, "and", 10)

        assert calls == [("between", (5, 1, 10))]

    def test_resolve_reports_selected_definitions(self, expect):
        resolutions = expect.resolve(("hi", "to be a string", "and", "not to be empty"))

        assert [r.definition.id for r in resolutions] == ["any-to-be-a-string", "sized-to-be-empty"]
        assert [r.is_negated for r in resolutions] == [False, True]

    def test_unknown_phrase(self, expect):
        with pytest.raises(UnknownAssertionError) as exc_info:
            expect(5, "to be purple")

        assert exc_info.value.arguments == (5, "to be purple")
        assert exc_info.value.code == "ERR_PHRASEBOOK_UNKNOWN_ASSERTION"
        assert "No assertion matched" in str(exc_info.value)

    def test_known_phrase_with_wrong_types_is_unknown(self, expect):
        with pytest.raises(UnknownAssertionError):
            expect("5", "to be greater than", 3)

    def test_unknown_assertion_is_not_an_assertion_error(self, expect):
        with pytest.raises(PhrasebookError):
            expect(5, "to be purple")
        assert not issubclass(UnknownAssertionError, AssertionError)


class TestScenarios:
    def test_greater_than(self, expect):
        expect(5, "to be greater than", 3)

        with pytest.raises(AssertionFailedError) as exc_info:
            expect(2, "to be greater than", 3)

        assert exc_info.value.assertion_id == "number-to-be-greater-than-number"
        assert exc_info.value.actual == 2

    def test_negated_greater_than(self, expect):
        with pytest.raises(NegatedAssertionError) as exc_info:
            expect(5, "not to be greater than", 3)

        assert exc_info.value.assertion_id == "number-to-be-greater-than-number"
        assert exc_info.value.call_args == (5, "not to be greater than", 3)

    def test_impossible_phrase_lists_arguments(self, expect):
        with pytest.raises(UnknownAssertionError) as exc_info:
            expect(1, "to do something impossible")

        assert "[1, 'to do something impossible']" in str(exc_info.value)

    def test_repeated_calls_are_idempotent(self, expect):
        for _ in range(3):
            expect(5, "to be between", 1, "and", 10)
            with pytest.raises(AssertionFailedError):
                expect(5, "to be between", 6, "and", 10)

    def test_negation(self, expect):
        expect([], "not to be non-empty")

        with pytest.raises(NegatedAssertionError) as exc_info:
            expect([1], "not to be non-empty")

        message = str(exc_info.value)
        assert "[1] not to be non-empty" in message
        assert "passed" in message

    def test_conjunction(self, expect):
        expect("hi", "to be a string", "and", "to be non-empty")

        with pytest.raises(AssertionFailedError) as exc_info:
            expect("", "to be a string", "and", "to be non-empty")

        assert exc_info.value.assertion_id == "sized-to-be-non-empty"

    def test_conjunction_fails_at_first_failing_segment(self, recorder, calls):
        ok = create_assertion(["to be ok"], recorder("ok", True))
        bad = create_assertion(["to be bad"], recorder("bad", False))
        expect = Dispatcher([ok, bad])

        with pytest.raises(AssertionFailedError):
            expect(1, "to be ok", "and", "to be bad", "and", "to be ok")

        assert [name for name, _ in calls] == ["ok", "bad"]

    def test_unknown_segment_runs_nothing(self, recorder, calls):
        ok = create_assertion(["to be ok"], recorder("ok"))
        expect = Dispatcher([ok])

        with pytest.raises(UnknownAssertionError):
            expect(1, "to be purple", "and", "to be ok")

        assert calls == []

    def test_rejoin_for_phrase_containing_conjunction(self, expect, june):
        expect(june, "to be between", date(2024, 1, 1), "and", date(2024, 12, 31))

        with pytest.raises(AssertionFailedError):
            expect(june, "to be between", date(2024, 7, 1), "and", date(2024, 12, 31))

    def test_rejoin_with_another_segment(self, expect):
        expect(5, "to be between", 1, "and", 10, "and", "to be an integer")

        with pytest.raises(AssertionFailedError) as exc_info:
            expect(5.5, "to be between", 1, "and", 10, "and", "to be an integer")

        assert exc_info.value.assertion_id == "any-to-be-an-integer"

    def test_negated_rejoined_call(self, expect):
        expect(50, "not to be between", 1, "and", 10)


class TestOutcomes:
    @pytest.mark.parametrize("result", [None, True])
    def test_passing_results(self, result):
        check = create_assertion(["to check"], lambda _: result)

        Dispatcher([check])(1, "to check")

    def test_false_fails_with_generated_message(self):
        check = create_assertion([NUMBER, "to be odd"], lambda n: n % 2 == 1)

        with pytest.raises(AssertionFailedError) as exc_info:
            Dispatcher([check])(4, "to be odd")

        assert str(exc_info.value) == "Expected 4 to be odd"
        assert exc_info.value.call_args == (4, "to be odd")

    def test_assertion_failure_details(self):
        check = create_assertion(
            [ANY, "to be answer"],
            lambda _: AssertionFailure(message="wrong answer", expected=42, diff="-42\n+41"),
        )

        with pytest.raises(AssertionFailedError) as exc_info:
            Dispatcher([check])(41, "to be answer")

        error = exc_info.value
        assert error.message == "Expected 41 to be answer: wrong answer"
        assert error.expected == 42
        assert error.actual == 41
        assert str(error) == "Expected 41 to be answer: wrong answer\n-42\n+41"

    def test_schema_result_validates_subject(self):
        check = create_assertion(["to be text"], lambda _: STRING)
        expect = Dispatcher([check])

        expect("x", "to be text")
        with pytest.raises(AssertionFailedError) as exc_info:
            expect(1, "to be text")

        assert exc_info.value.expected == "string"

    def test_raised_assertion_failure_propagates_as_is(self):
        inner = AssertionFailedError("inner failure", assertion_id="custom")

        def routine(_):
            raise inner

        check = create_assertion(["to be custom"], routine)

        with pytest.raises(AssertionFailedError) as exc_info:
            Dispatcher([check])(1, "to be custom")

        assert exc_info.value is inner

    def test_raised_assertion_failure_is_negatable(self):
        def routine(_):
            raise AssertionFailedError("nope", assertion_id="custom")

        check = create_assertion(["to be custom"], routine)

        Dispatcher([check])(1, "not to be custom")

    def test_other_exceptions_are_implementation_errors(self):
        def routine(_):
            raise ValueError("broken")

        check = create_assertion(["to be broken"], routine)

        with pytest.raises(AssertionImplementationError) as exc_info:
            Dispatcher([check])(1, "to be broken")

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.code == "ERR_PHRASEBOOK_ASSERTION_IMPL"

    def test_implementation_errors_are_not_negated(self):
        def routine(_):
            raise KeyError("broken")

        check = create_assertion(["to be broken"], routine)

        with pytest.raises(AssertionImplementationError):
            Dispatcher([check])(1, "not to be broken")

    def test_plain_assert_statement_is_an_implementation_error(self):
        def routine(subject):
            assert subject == 2

        check = create_assertion(["to be two"], routine)

        with pytest.raises(AssertionImplementationError):
            Dispatcher([check])(1, "to be two")

    def test_invalid_return_value(self):
        check = create_assertion(["to be weird"], lambda _: 42)

        with pytest.raises(AssertionImplementationError) as exc_info:
            Dispatcher([check])(1, "to be weird")

        assert exc_info.value.result == 42

    def test_async_routine_on_sync_dispatcher(self):
        async def routine(_):
            return None

        check = create_assertion(["to be later"], routine)

        with pytest.raises(UnexpectedAsyncError) as exc_info:
            Dispatcher([check])(1, "to be later")

        assert exc_info.value.code == "ERR_PHRASEBOOK_UNEXPECTED_ASYNC"
        assert isinstance(exc_info.value, AssertionImplementationError)

    def test_coroutine_predicate_is_rejected(self, expect):
        async def is_string(subject):
            return isinstance(subject, str)

        with pytest.raises(UnexpectedAsyncError):
            expect(1, "to satisfy", is_string)

        with pytest.raises(UnexpectedAsyncError):
            expect({"a": 1}, "to have path", "$.a", "satisfying", is_string)

        with pytest.raises(UnexpectedAsyncError):
            expect("x", "not to satisfy", is_string)


class TestHelpers:
    def test_fail(self, expect):
        with pytest.raises(FailAssertionError) as exc_info:
            expect.fail("boom")

        assert exc_info.value.assertion_id == FAIL
        assert str(exc_info.value) == "boom"

    def test_fail_default_message(self):
        with pytest.raises(AssertionFailedError, match="Explicit failure"):
            Dispatcher.fail()

    def test_extend_appends_definitions(self, expect):
        palindrome = create_assertion(
            [STRING, "to be a palindrome"],
            lambda s: s == s[::-1],
        )

        extended = expect.extend([palindrome])

        assert isinstance(extended, Dispatcher)
        assert extended.definitions == (*BUILTIN_ASSERTIONS, palindrome)
        extended("level", "to be a palindrome")
        extended("level", "to be a string", "and", "to be a palindrome")
        with pytest.raises(UnknownAssertionError):
            expect("level", "to be a palindrome")

    def test_extend_keeps_parent_priority(self, recorder, calls):
        base = Dispatcher([create_assertion(["to be fine"], recorder("base"))])

        extended = base.extend([create_assertion(["to be fine"], recorder("child"))])
        extended(1, "to be fine")

        assert calls == [("base", (1,))]

    def test_it_defers_subject(self, expect):
        is_short_list = expect.it("to have length at most", 2)

        is_short_list([1])
        with pytest.raises(AssertionFailedError):
            is_short_list([1, 2, 3])

    def test_it_composes_with_to_satisfy(self, expect):
        expect(["a", "b"], "to satisfy", expect.it("to have length", 2))
        expect(["a"], "not to satisfy", expect.it("to have length", 2))

        with pytest.raises(AssertionFailedError):
            expect(["a"], "to satisfy", expect.it("to have length", 2))

    def test_phrases(self, expect):
        assert "to be greater than" in expect.phrases
        assert "and" in expect.phrases

    def test_describe_call_keeps_phrases_bare(self):
        assert describe_call(("hi", "to be a string", "and", "not to be empty")) == (
            "'hi' to be a string and not to be empty"
        )
        assert describe_call((5, "to be between", 1, "and", 10)) == "5 to be between 1 and 10"
        assert describe_call(("a", "to equal", "b")) == "'a' to equal 'b'"


class TestCreateAssertion:
    def test_derived_id(self):
        definition = create_assertion([NUMBER, "to be greater than", NUMBER], lambda a, b: a > b)

        assert definition.id == "number-to-be-greater-than-number"
        assert str(definition) == "\"{number} 'to be greater than' {number}\""

    def test_explicit_id(self):
        definition = create_assertion(["to be fine"], lambda _: True, id="fine")

        assert definition.id == "fine"

    def test_decorator_form(self):
        @create_assertion([STRING, "to be shouting"])
        def shouting(subject):
            return subject.isupper()

        assert shouting.id == "string-to-be-shouting"
        Dispatcher([shouting])("HEY", "to be shouting")

    def test_is_async(self):
        async def routine(_):
            return None

        assert create_assertion(["to be later"], routine).is_async
        assert not create_assertion(["to be now"], lambda _: None).is_async

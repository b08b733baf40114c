import pytest

from phrasebook import expect
from phrasebook.assertions import Dispatcher, create_assertion
from phrasebook.reporting import CheckStatus, RunStatus
from phrasebook.suite import (
    SubjectNotFoundError,
    SubjectSource,
    load_suite,
    resolve_subject,
    run_suite,
    validate_suite_yaml,
)
from phrasebook.suite.models import Check


def errors_by_path(result):
    return {error.path: error for error in result.errors}


class TestLoading:
    def test_load_suite(self, suite_file):
        suite, result = load_suite(suite_file)

        assert result.is_valid, str(result)
        assert suite.name == "payload checks"
        assert [c.id for c in suite.checks] == ["name-is-string", "tags-long-enough", "five-between"]
        assert suite.defaults.stop_on_failure is False

    def test_checks_are_typed(self, suite_yaml):
        suite, _ = validate_suite_yaml(suite_yaml)

        by_path, literal = suite.checks[0], suite.checks[2]
        assert by_path.source == SubjectSource.PATH
        assert by_path.path == "$.user.name"
        assert literal.source == SubjectSource.LITERAL
        assert literal.subject == 5
        assert literal.expect == ["to be between", 1, "and", 10]
        assert literal.phrase == "to be between"

    def test_env_interpolation(self, suite_yaml):
        suite, _ = validate_suite_yaml(suite_yaml)

        assert suite.data["user"]["name"] == "hi"
        # A lone placeholder keeps the env value's type
        assert suite.checks[1].expect == ["to have length at least", 2]

    def test_unknown_env_key_is_left_alone(self):
        suite, result = validate_suite_yaml(
            """
            version: 1
            name: "{{env.MISSING}} suite"
            checks:
              - {id: a, subject: 1, expect: ["to be a number"]}
            """
        )

        assert result.is_valid
        assert suite.name == "{{env.MISSING}} suite"

    def test_missing_file(self, tmp_path):
        suite, result = load_suite(tmp_path / "nope.yaml")

        assert suite is None
        assert result.errors[0].message == "File not found"

    def test_invalid_yaml(self):
        suite, result = validate_suite_yaml("checks: [")

        assert suite is None
        assert "Invalid YAML syntax" in result.errors[0].message

    def test_non_mapping(self):
        suite, result = validate_suite_yaml("- 1\n- 2\n")

        assert suite is None
        assert result.errors[0].value == "list"


class TestValidation:
    def test_missing_and_unknown_top_level_fields(self):
        _, result = validate_suite_yaml("version: 1\nsteps: []\n")

        errors = errors_by_path(result)
        assert set(errors) == {"name", "checks", "steps"}
        assert "Valid fields are" in errors["steps"].suggestion

    def test_reports_every_check_error(self):
        _, result = validate_suite_yaml(
            """
            version: 0
            name: x
            defaults: {stop_on_failure: "yes", retries: 2}
            checks:
              - {id: a, subject: 1, from: "$.a", expect: ["to be a number"]}
              - {id: a, subject: 1, expect: []}
              - {id: c, from: "$$[", expect: ["and", 1]}
              - {subject: 1, expect: [1]}
            """
        )

        errors = errors_by_path(result)
        assert "version" in errors
        assert "defaults.stop_on_failure" in errors
        assert "defaults.retries" in errors
        assert errors["checks[0]"].message == "Check must have exactly one of 'subject' or 'from'"
        assert errors["checks[1].id"].message == "Duplicate check id"
        assert "checks[1].expect" in errors
        assert errors["checks[2].from"].message.startswith("Invalid JSONPath expression")
        assert "checks[2].expect[0]" in errors
        assert "checks[3].id" in errors
        assert errors["checks[3].expect[0]"].message == "Must be a phrase string"

    def test_unknown_phrase_with_suggestion(self):
        _, result = validate_suite_yaml(
            """
            version: 1
            name: x
            checks:
              - {id: a, subject: "x", expect: ["to be a strng"]}
              - {id: b, subject: [], expect: ["not to be empty"]}
            """,
            phrases=expect.phrases,
        )

        errors = errors_by_path(result)
        assert set(errors) == {"checks[0].expect[0]"}
        assert "to be a string" in errors["checks[0].expect[0]"].suggestion

    def test_str_lists_errors(self):
        _, result = validate_suite_yaml("version: 1\nname: x\nchecks: []\n")

        text = str(result)
        assert "1 error(s)" in text
        assert "checks: Must contain at least one check" in text


class TestResolveSubject:
    def test_literal(self):
        check = Check(id="a", expect=["to be a number"], subject=3)

        assert resolve_subject(check, None) == 3

    def test_single_and_multiple_matches(self):
        data = {"items": [{"n": 1}, {"n": 2}]}

        one = Check(id="a", expect=["x"], source=SubjectSource.PATH, path="$.items[0].n")
        many = Check(id="b", expect=["x"], source=SubjectSource.PATH, path="$.items[*].n")

        assert resolve_subject(one, data) == 1
        assert resolve_subject(many, data) == [1, 2]

    def test_missing_path(self):
        check = Check(id="a", expect=["x"], source=SubjectSource.PATH, path="$.nope")

        with pytest.raises(SubjectNotFoundError) as exc_info:
            resolve_subject(check, {})

        assert exc_info.value.code == "ERR_PHRASEBOOK_SUBJECT_NOT_FOUND"


class TestRunSuite:
    def test_all_checks_pass(self, suite_yaml):
        suite, _ = validate_suite_yaml(suite_yaml)

        report = run_suite(suite).report

        assert report.status == RunStatus.PASSED
        assert report.passed_checks == 3
        assert report.get_check("name-is-string").assertion_ids == [
            "any-to-be-a-string",
            "sized-to-be-non-empty",
        ]
        assert report.get_check("five-between").assertion_ids == [
            "number-to-be-between-number-and-number",
        ]
        assert report.get_check("name-is-string").actual_value == "hi"

    def test_failures_and_errors(self):
        suite, _ = validate_suite_yaml(
            """
            version: 1
            name: mixed
            data: {n: 3}
            checks:
              - {id: too-small, from: "$.n", expect: ["to be greater than", 5]}
              - {id: negated, subject: [1], expect: ["not to be empty"]}
              - {id: purple, subject: 1, expect: ["to be purple"]}
              - {id: missing, from: "$.m", expect: ["to be a number"]}
            """
        )

        report = run_suite(suite).report

        statuses = {c.check_id: c.status for c in report.checks}
        assert statuses == {
            "too-small": CheckStatus.FAILED,
            "negated": CheckStatus.PASSED,
            "purple": CheckStatus.ERROR,
            "missing": CheckStatus.ERROR,
        }
        assert report.status == RunStatus.ERROR

        too_small = report.get_check("too-small")
        assert too_small.failure_message == "Expected 3 to be greater than 5"
        assert too_small.actual_value == 3
        assert report.get_check("purple").error_code == "ERR_PHRASEBOOK_UNKNOWN_ASSERTION"
        assert report.get_check("missing").error_code == "ERR_PHRASEBOOK_SUBJECT_NOT_FOUND"

    def test_negated_pass_is_a_failure(self):
        suite, _ = validate_suite_yaml(
            """
            version: 1
            name: negated
            checks:
              - {id: full, subject: [1], expect: ["not to be non-empty"]}
            """
        )

        report = run_suite(suite).report

        assert report.status == RunStatus.FAILED
        assert report.get_check("full").assertion_ids == ["sized-to-be-non-empty"]

    def test_stop_on_failure_skips_remaining(self):
        suite, _ = validate_suite_yaml(
            """
            version: 1
            name: stop
            defaults: {stop_on_failure: true}
            checks:
              - {id: first, subject: 1, expect: ["to be a string"]}
              - {id: second, subject: 1, expect: ["to be a number"]}
            """
        )

        report = run_suite(suite).report

        assert report.get_check("first").status == CheckStatus.FAILED
        second = report.get_check("second")
        assert second.status == CheckStatus.SKIPPED
        assert second.failure_message == "Skipped: stop_on_failure after 'first'"
        assert report.skipped_checks == 1

    def test_custom_dispatcher(self):
        even = create_assertion(["to be even"], lambda n: n % 2 == 0)
        suite, _ = validate_suite_yaml(
            """
            version: 1
            name: custom
            checks:
              - {id: four, subject: 4, expect: ["to be even"]}
            """
        )

        report = run_suite(suite, dispatcher=Dispatcher([even])).report

        assert report.status == RunStatus.PASSED

    def test_each_check_is_resolved_once(self, suite_yaml):
        class CountingDispatcher(Dispatcher):
            resolved = 0

            def resolve(self, args):
                CountingDispatcher.resolved += 1
                return super().resolve(args)

        suite, _ = validate_suite_yaml(suite_yaml)

        report = run_suite(suite, dispatcher=CountingDispatcher(expect.definitions)).report

        assert report.status == RunStatus.PASSED
        assert CountingDispatcher.resolved == len(suite.checks)

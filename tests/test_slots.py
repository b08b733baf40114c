import pytest

from phrasebook.assertions import ANY, INTEGER, NUMBER, STRING, Schema
from phrasebook.assertions.slots import PhraseSlot, ValidatorSlot, match_pattern, slotify
from phrasebook.errors import InvalidPatternError


class TestSlotify:
    def test_phrase_first_pattern_gets_implicit_subject(self):
        pattern = slotify(["to be a string"])

        assert len(pattern) == 2
        subject, phrase = pattern.slots
        assert isinstance(subject, ValidatorSlot)
        assert subject.implicit
        assert subject.schema is ANY
        assert phrase == PhraseSlot(("to be a string",))

    def test_schema_first_pattern_has_no_implicit_slot(self):
        pattern = slotify([NUMBER, "to be greater than", NUMBER])

        assert len(pattern) == 3
        assert not pattern.slots[0].implicit

    def test_choice_becomes_single_slot(self):
        pattern = slotify([STRING, ["to contain", "to include"], STRING])

        assert pattern.slots[1].phrases == ("to contain", "to include")
        assert pattern.phrases == ("to contain", "to include")

    def test_type_part_is_wrapped_in_schema(self):
        pattern = slotify([int, "to be odd"])

        assert isinstance(pattern.slots[0].schema, Schema)
        assert pattern.slots[0].schema.accepts(3)

    def test_conjunction_followed_by_schema_is_allowed(self):
        pattern = slotify([NUMBER, "to be between", NUMBER, "and", NUMBER])

        assert len(pattern) == 5
        assert pattern.slots[3].is_conjunction
        assert pattern.primary_phrase == "to be between"

    @pytest.mark.parametrize(
        "parts",
        [
            [],
            "to be a string",
            ["not to be empty"],
            [ANY, ["to be empty", "not to be full"]],
            [ANY, []],
            [ANY, "to be", "and"],
            [ANY, "to be", "and", "to be"],
            [ANY, ""],
            [ANY, 42],
            [ANY, INTEGER],
        ],
    )
    def test_malformed_parts_are_rejected(self, parts):
        with pytest.raises(InvalidPatternError):
            slotify(parts)

    def test_str_shows_slots(self):
        pattern = slotify([NUMBER, ["to be above", "to be greater than"], NUMBER])

        assert str(pattern) == "{number} ['to be above' | 'to be greater than'] {number}"


class TestMatchPattern:
    def setup_method(self):
        self.pattern = slotify([NUMBER, "to be greater than", NUMBER])

    def test_exact_match(self):
        result = match_pattern(self.pattern, (5, "to be greater than", 3))

        assert result.success
        assert result.exact_match
        assert result.parsed_values == (5, "to be greater than", 3)
        assert result.arguments == (5, 3)

    def test_extra_arguments_make_partial_match(self):
        result = match_pattern(self.pattern, (5, "to be greater than", 3, "extra"))

        assert result.success
        assert not result.exact_match

    def test_too_few_arguments_fail(self):
        assert not match_pattern(self.pattern, (5, "to be greater than")).success

    def test_wrong_phrase_fails_at_its_slot(self):
        result = match_pattern(self.pattern, (5, "to be less than", 3))

        assert not result.success
        assert result.failed_at == 1

    def test_validators_are_strict(self):
        pattern = slotify([INTEGER, "to be odd"])

        assert not match_pattern(pattern, ("3", "to be odd")).success
        assert match_pattern(pattern, (3, "to be odd")).success

    def test_phrase_slot_never_accepts_non_strings(self):
        pattern = slotify(["to be fine"])

        assert not match_pattern(pattern, (1, 2)).success

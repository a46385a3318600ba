"""
Unit tests for the question quality contract
"""
import copy

import pytest

from services.validator import detect_type, is_valid_question


def make(**overrides):
    q = {
        "question": "Marie Curie was born in _____.",
        "options": ["Warsaw", "Paris", "Vienna", "Berlin"],
        "answer": "Warsaw",
    }
    q.update(overrides)
    return q


class TestDetectType:
    @pytest.mark.parametrize("opt,expected", [
        ("1945", "number"),
        ("3.5 million", "number"),
        ("45%", "number"),
        ("12 percent", "number"),
        ("7 Billion", "number"),
        ("Paris", "string"),
        ("paris", "unknown"),
        ("", "invalid"),
        ("   ", "invalid"),
        ("None of the above", "invalid"),
        ("all of the above", "invalid"),
    ])
    def test_classes(self, opt, expected):
        assert detect_type(opt) == expected


class TestIsValidQuestion:
    def test_valid(self):
        assert is_valid_question(make())

    def test_numeric_options_valid(self):
        assert is_valid_question(make(
            question="The war ended in _____.", options=["1943", "1944", "1945", "1946"], answer="1945",
        ))

    @pytest.mark.parametrize("field", ["question", "options", "answer"])
    def test_missing_field(self, field):
        q = make()
        del q[field]
        assert not is_valid_question(q)

    def test_wrong_option_count(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna"]))

    def test_non_string_option(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", 5]))

    def test_empty_option(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", "  "]))

    def test_case_insensitive_duplicates(self):
        assert not is_valid_question(make(options=["Warsaw", "WARSAW", "Vienna", "Berlin"]))

    def test_answer_must_match_verbatim(self):
        assert not is_valid_question(make(answer="warsaw"))

    @pytest.mark.parametrize("filler", ["Share", "SUBSCRIBE", " Updated ", "Comments"])
    def test_blacklisted_filler(self, filler):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", filler]))

    def test_short_option(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", "X"]))

    def test_mixed_types(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", "1945"]))

    def test_none_of_the_above_rejected(self):
        assert not is_valid_question(make(options=["Warsaw", "Paris", "Vienna", "None of the above"]))

    def test_needs_exactly_one_blank(self):
        assert not is_valid_question(make(question="Marie Curie was born in Warsaw."))
        assert not is_valid_question(make(question="_____ was born in _____."))

    def test_not_a_mapping(self):
        assert not is_valid_question(["question", "options"])

    def test_input_untouched(self):
        q = make(options=[" Warsaw", "Paris", "Vienna", "Share"])
        before = copy.deepcopy(q)
        is_valid_question(q)
        assert q == before

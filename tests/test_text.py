"""
Unit tests for noise cleanup, topic extraction and layout classification
"""
import pytest

from services.cleaner import clean_noise, split_into_sentences
from services.layout import detect_layout
from services.topics import extract_topics


class TestCleanNoise:
    def test_strips_ui_debris(self):
        raw = "Member-only story\nListen\nShare\n12\nA\nReal   text here."
        assert clean_noise(raw) == "Real text here."

    def test_story_label_inside_line(self):
        assert clean_noise("Intro member-only STORY about bees") == "Intro about bees"

    def test_inline_words_survive(self):
        text = "Investors watched market share grow as members listen closely."
        assert clean_noise(text) == text

    def test_collapses_whitespace(self):
        assert clean_noise("  a\t\tb\n\n c  ") == "a b c"

    @pytest.mark.parametrize("raw", [
        "Member-only story\nListen\nThe 5 steps\n3\nB\nof   baking.",
        "Already clean text.",
        "Listen 5",
        "5 \nA ",
        "",
    ])
    def test_idempotent(self, raw):
        once = clean_noise(raw)
        assert clean_noise(once) == once

    def test_split_sentences(self):
        assert split_into_sentences("One. Two! Three? Four") == ["One.", "Two!", "Three?", "Four"]


class TestTopics:
    def test_frequency_ranking(self):
        assert extract_topics("The cat sat on the mat. The cat ran.") == ["cat", "sat", "mat", "ran"]

    def test_limit_and_short_tokens(self):
        topics = extract_topics("ox ox ox bee bee ant wasp moth", n=2)
        assert topics == ["bee", "ant"]

    def test_empty(self):
        assert extract_topics("") == []


class TestLayout:
    def test_year_means_timeline(self):
        assert detect_layout("In 2020 the project began.") == "timeline"

    def test_year_beats_steps(self):
        assert detect_layout("First, mix the flour. Then, in 2020, bake it. Finally serve.") == "timeline"

    def test_step_cues(self):
        assert detect_layout("Step 1 is mixing. Then, bake the dough.") == "process"

    def test_decade_means_timeline(self):
        assert detect_layout("Home computers spread through the 1980s and the 1990s.") == "timeline"

    def test_long_digit_run_is_not_a_year(self):
        assert detect_layout("Order 199045 ships soon.") == "process"

    def test_out_of_range_year_ignored(self):
        assert detect_layout("The treaty of 1850 ended it.") == "process"

    def test_default_is_process(self, monkeypatch):
        monkeypatch.delenv("DEFAULT_LAYOUT", raising=False)
        assert detect_layout("Cats are curious animals.") == "process"

    def test_explicit_default(self):
        assert detect_layout("Cats are curious animals.", default="map") == "map"

    def test_env_default(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_LAYOUT", "map")
        assert detect_layout("Cats are curious animals.") == "map"

    def test_deterministic(self):
        text = "Finally, the committee voted."
        assert detect_layout(text) == detect_layout(text)

"""
Shared fixtures: an in-memory AI capability whose sessions replay scripted output
"""
import json
import random

import pytest

from ai_providers.base import AICapability, AISession, Availability

ARTICLE_TEXT = (
    "Marie Curie was born in Warsaw and later moved to Paris to continue her studies in physics. "
    "She shared the Nobel Prize with Pierre Curie and Henri Becquerel for their research on radiation. "
    "Albert Einstein praised her persistence when they met at a scientific conference in Brussels. "
    "Her daughter Irene later won a second prize for the family together with her husband Frederic. "
    "The laboratory she founded in Paris still trains researchers from Poland and France today."
)


class FakeSession(AISession):
    def __init__(self, response="", chunk_size=7, fail_after=None):
        self.response = response
        self.chunk_size = chunk_size
        self.fail_after = fail_after
        self.prompts = []
        self.destroyed = 0

    def prompt_streaming(self, prompt):
        self.prompts.append(prompt)
        return self._chunks()

    def _chunks(self):
        for i in range(0, len(self.response), self.chunk_size):
            if self.fail_after is not None and i >= self.fail_after:
                raise ConnectionError("stream dropped")
            yield self.response[i:i + self.chunk_size]

    def prompt(self, prompt):
        self.prompts.append(prompt)
        if self.fail_after is not None:
            raise ConnectionError("request failed")
        return self.response

    def destroy(self):
        self.destroyed += 1


class FakeCapability(AICapability):
    def __init__(self, status=Availability.AVAILABLE, response="", fail_on=None, fail_after=None):
        self.status = status
        self.response = response
        self.fail_on = fail_on
        self.fail_after = fail_after
        self.availability_calls = 0
        self.sessions = []
        self.configs = []

    def availability(self):
        self.availability_calls += 1
        if self.fail_on == "availability":
            raise RuntimeError("capability probe failed")
        return self.status

    def create_session(self, config):
        if self.fail_on == "create":
            raise RuntimeError("could not create session")
        self.configs.append(config)
        session = FakeSession(self.response, fail_after=self.fail_after)
        self.sessions.append(session)
        return session

    @property
    def name(self):
        return "fake"


def ai_batch(items):
    return "```json\n" + json.dumps(items) + "\n```"


@pytest.fixture
def article_text():
    return ARTICLE_TEXT


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def unavailable():
    return FakeCapability(status=Availability.UNAVAILABLE)


VALID_AI = [
    {"question": "Marie Curie was born in _____.",
     "options": ["Warsaw", "Paris", "Vienna", "Berlin"], "answer": "Warsaw"},
    {"question": "She shared the _____ with Pierre Curie.",
     "options": ["Nobel Prize", "Fields Medal", "Turing Award", "Abel Prize"], "answer": "Nobel Prize"},
    {"question": "Einstein met her at a conference in _____.",
     "options": ["Brussels", "Geneva", "Madrid", "Lisbon"], "answer": "Brussels"},
    {"question": "Her daughter _____ also won a prize.",
     "options": ["Irene", "Eve", "Anna", "Helen"], "answer": "Irene"},
]

INVALID_AI = [
    # answer missing from options
    {"question": "Curie studied _____.", "options": ["Physics", "Biology", "Law", "Art"], "answer": "Chemistry"},
    # page chrome as an option
    {"question": "Readers can _____ the story.", "options": ["Share", "Print", "Save", "Read"], "answer": "Print"},
    # year mixed with places
    {"question": "The lab opened in _____.", "options": ["1914", "Paris", "Warsaw", "Vienna"], "answer": "1914"},
]

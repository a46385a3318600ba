# services/quizzer.py
import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Sequence, Union

from ai_providers.base import AICapability, Availability, SessionConfig, open_session
from models import EntityKind, EntityPool, GradeResult, Question
from services.cleaner import clean_noise, split_into_sentences
from services.distractors import select_options
from services.entities import FUNCTION_WORDS, build_entity_pool, extract_entities
from services.logging import get_logger
from services.repair import MalformedResponse, parse_quiz_response
from services.validator import BLACKLIST, BLANK, detect_type, is_valid_question

logger = get_logger(__name__)

MIN_TEXT_LENGTH = 100
MAX_QUESTIONS = 5
MIN_VALID_AI_QUESTIONS = 3
MAX_CANDIDATE_SENTENCES = 30
PASSAGE_CHARS = 3000

# proper nouns make the best blanks; dates and numbers only when a sentence has none
ANSWER_KINDS = (EntityKind.PROPER_NOUN, EntityKind.DATE, EntityKind.NUMBER)

SYSTEM_QUIZ = (
    "You are a quiz generator for a reading assistant. Use ONLY the passage the user provides; "
    "never add outside knowledge. Output STRICT JSON only, no extra text."
)

QUIZ_PROMPT = """\
Create 5 fill-in-the-blank multiple-choice questions from the passage below.

Rules:
- Each question is one sentence taken from the passage with ONE key fact replaced by {blank}.
- Give exactly 4 distinct options. Exactly one is correct and "answer" repeats it verbatim.
- All 4 options must be the same kind of thing: all years, all amounts, all people, all places or all organisations.
- Options are numbers or start with a capital letter. Never use "None of the above" or "All of the above".
- Never use page chrome as an option (Updated, Posted, Share, Subscribe, Follow, Views, Comments).

Return ONLY a JSON array in exactly this format:
[{{"question": "World War II ended in {blank}.", "options": ["1943", "1944", "1945", "1946"], "answer": "1945"}}]

Passage:
{passage}
"""


def build_quiz_prompt(text: str) -> str:
    return QUIZ_PROMPT.format(blank=BLANK, passage=(text or "")[:PASSAGE_CHARS])


class QuizState(str, Enum):
    AI_ATTEMPT = "ai_attempt"
    AI_VALIDATE = "ai_validate"
    ACCEPT = "accept"
    FALLBACK = "fallback"
    FALLBACK_GENERATE = "fallback_generate"
    EMPTY = "empty"


TERMINAL_STATES = (QuizState.ACCEPT, QuizState.EMPTY)


@dataclass
class QuizOutcome:
    questions: List[Question]
    source: str  # "ai" | "fallback" | "none"
    path: List[QuizState] = field(default_factory=list)
    reason: Optional[str] = None  # why the AI batch was not used


@dataclass
class _Run:
    text: str
    raw: str = ""
    questions: List[Question] = field(default_factory=list)
    source: str = "none"
    reason: Optional[str] = None
    path: List[QuizState] = field(default_factory=list)


#standardizacija kandidata iz modela: trim bez menjanja originala
def _trim_candidate(item) -> Optional[dict]:
    if not isinstance(item, Mapping):
        return None
    question = item.get("question")
    options = item.get("options")
    answer = item.get("answer")
    return {
        "question": question.strip() if isinstance(question, str) else question,
        "options": [o.strip() if isinstance(o, str) else o for o in options]
                   if isinstance(options, list) else options,
        "answer": answer.strip() if isinstance(answer, str) else answer,
    }


# ===== deterministic generator =====

# sentence-initial pronouns look like proper nouns to the extractor
PRONOUNS = frozenset({
    "He", "She", "It", "They", "We", "You", "I",
    "His", "Her", "Its", "Their", "Our", "Your", "My",
    "This", "That", "These", "Those",
})


def _usable(value: str) -> bool:
    v = (value or "").strip()
    return (
        len(v) >= 2
        and v not in FUNCTION_WORDS
        and v not in PRONOUNS
        and v.lower() not in BLACKLIST
        and detect_type(v) != "invalid"
    )


def candidate_sentences(text: str) -> List[str]:
    out = []
    for s in split_into_sentences(clean_noise(text)):
        if 8 <= len(s.split()) <= 40 and 40 <= len(s) <= 300:
            out.append(s)
            if len(out) >= MAX_CANDIDATE_SENTENCES:
                break
    return out


def _blank_out(sentence: str, answer: str) -> str:
    q = re.sub(r"\b" + re.escape(answer) + r"\b", BLANK, sentence, count=1)
    return re.sub(r"[.!?]+$", "", q.rstrip()) + "?"


def question_from_sentence(sentence: str, pool: EntityPool,
                           rng: Optional[random.Random] = None) -> Optional[dict]:
    """
    Blank out the first usable entity of the sentence and pick same-kind,
    same-type distractors from the pool. None when no kind yields 4 options.
    """
    entities = extract_entities(sentence)
    for kind in ANSWER_KINDS:
        answer = next((e.value for e in entities[kind] if _usable(e.value)), None)
        if answer is None:
            continue
        answer_type = detect_type(answer)
        alternatives = [
            v for v in pool.get(kind, [])
            if _usable(v) and detect_type(v) == answer_type and v.lower() != answer.lower()
        ]
        options = select_options(answer, alternatives, rng)
        if len(options) != 4:
            continue
        return {"question": _blank_out(sentence, answer), "options": options, "answer": answer}
    return None


def build_fallback_quiz(text: str, rng: Optional[random.Random] = None,
                        limit: int = MAX_QUESTIONS) -> List[Question]:
    sentences = candidate_sentences(text)
    if not sentences:
        return []
    pool = build_entity_pool(text)
    out: List[Question] = []
    for s in sentences:
        q = question_from_sentence(s, pool, rng)
        if q is not None and is_valid_question(q):
            out.append(Question(**q))
            if len(out) >= limit:
                break
    return out


# ===== orchestrator =====

class QuizOrchestrator:
    """
    Two-tier quiz generation.

    AI_ATTEMPT -> AI_VALIDATE -> (ACCEPT | FALLBACK) -> FALLBACK_GENERATE -> (ACCEPT | EMPTY)

    The AI capability gets exactly one attempt. Unavailability, adapter
    errors, unparseable output and a batch with fewer than
    MIN_VALID_AI_QUESTIONS valid questions all end in the deterministic
    generator; AI and fallback questions are never mixed. Nothing raised by
    the adapter or the parser escapes run().
    """

    def __init__(self, capability: Optional[AICapability] = None,
                 rng: Optional[random.Random] = None,
                 max_questions: int = MAX_QUESTIONS,
                 min_valid_ai: int = MIN_VALID_AI_QUESTIONS,
                 session_config: Optional[SessionConfig] = None):
        self.capability = capability
        self.rng = rng
        self.max_questions = max_questions
        self.min_valid_ai = min_valid_ai
        self.session_config = session_config or SessionConfig(
            temperature=0.2, top_k=3, system_prompt=SYSTEM_QUIZ
        )
        self._handlers = {
            QuizState.AI_ATTEMPT: self._ai_attempt,
            QuizState.AI_VALIDATE: self._ai_validate,
            QuizState.FALLBACK: self._fallback,
            QuizState.FALLBACK_GENERATE: self._fallback_generate,
        }

    def generate(self, text: str) -> List[Question]:
        return self.run(text).questions

    def run(self, text: str) -> QuizOutcome:
        text = text or ""
        if len(text) < MIN_TEXT_LENGTH:
            logger.info("quiz_input_too_short", length=len(text))
            return QuizOutcome(questions=[], source="none", path=[QuizState.EMPTY], reason="empty_input")

        run = _Run(text=text)
        state = QuizState.AI_ATTEMPT
        while state not in TERMINAL_STATES:
            run.path.append(state)
            state = self._handlers[state](run)
        run.path.append(state)

        logger.info("quiz_generated", source=run.source, questions=len(run.questions),
                    reason=run.reason, path=[s.value for s in run.path])
        return QuizOutcome(questions=run.questions, source=run.source, path=run.path, reason=run.reason)

    def _ai_attempt(self, run: _Run) -> QuizState:
        cap = self.capability
        try:
            if cap is None or cap.availability() != Availability.AVAILABLE:
                run.reason = "adapter_unavailable"
                return QuizState.FALLBACK_GENERATE
            with open_session(cap, self.session_config) as session:
                # drain fully before parsing; the stream cannot be replayed
                run.raw = "".join(session.prompt_streaming(build_quiz_prompt(run.text)))
        except Exception as e:
            logger.warning("ai_session_failed", provider=getattr(cap, "name", None), error=str(e))
            run.reason = "adapter_failure"
            return QuizState.FALLBACK_GENERATE
        return QuizState.AI_VALIDATE

    def _ai_validate(self, run: _Run) -> QuizState:
        try:
            parsed = parse_quiz_response(run.raw)
        except MalformedResponse as e:
            logger.warning("ai_response_malformed", error=str(e), preview=run.raw[:120])
            run.reason = "malformed_response"
            return QuizState.FALLBACK

        passing = []
        for item in parsed:
            q = _trim_candidate(item)
            if q is not None and is_valid_question(q):
                passing.append(q)

        if len(passing) < self.min_valid_ai:
            logger.info("ai_quality_insufficient", valid=len(passing), proposed=len(parsed))
            run.reason = "quality_insufficient"
            return QuizState.FALLBACK

        run.questions = [Question(**q) for q in passing[:self.max_questions]]
        run.source = "ai"
        return QuizState.ACCEPT

    def _fallback(self, run: _Run) -> QuizState:
        # the whole AI batch is dropped, valid items included
        run.raw = ""
        return QuizState.FALLBACK_GENERATE

    def _fallback_generate(self, run: _Run) -> QuizState:
        questions = build_fallback_quiz(run.text, self.rng, self.max_questions)
        if not questions:
            return QuizState.EMPTY
        run.questions = questions
        run.source = "fallback"
        return QuizState.ACCEPT


#glavna funkcija za generisanje kviza iz teksta clanka
def generate_quiz(text: str, capability: Optional[AICapability] = None,
                  rng: Optional[random.Random] = None) -> List[Question]:
    return QuizOrchestrator(capability, rng=rng).generate(text)


#ocena odgovora: tacno samo pri potpunom poklapanju sa opcijom
def grade_quiz(questions: Sequence[Question],
               answers: Union[Mapping[int, str], Sequence[Optional[str]]]) -> GradeResult:
    if not isinstance(answers, Mapping):
        answers = dict(enumerate(answers))
    correct = 0
    for idx, q in enumerate(questions):
        if answers.get(idx) == q.answer:
            correct += 1
    total = len(questions)
    percent = int(round(100 * correct / max(1, total)))
    return GradeResult(score=correct, total=total, percent=percent,
                       correct={i: q.answer for i, q in enumerate(questions)})

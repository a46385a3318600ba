from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Layout = Literal["timeline", "process", "map"]


class Article(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    text: str
    image: Optional[str] = None


# ===== ENTITIES =====

class EntityKind(str, Enum):
    DATE = "date"
    PROPER_NOUN = "properNounPhrase"
    NUMBER = "number"


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    kind: EntityKind


# kind -> values in first-seen order, no duplicates
EntityPool = Dict[EntityKind, List[str]]

# ===== QUIZ =====

class Question(BaseModel):
    question: str
    options: List[str] = Field(min_length=4, max_length=4)
    answer: str


class GradeResult(BaseModel):
    score: int
    total: int
    percent: int
    correct: Dict[int, str] = {}

# ===== MINDMAP =====

class StructuredItem(BaseModel):
    label: str
    date: Optional[str] = None


class Mindmap(BaseModel):
    title: str = ""
    layout: Layout
    topics: Optional[List[str]] = None
    items: Optional[List[StructuredItem]] = None

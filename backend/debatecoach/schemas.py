# debatecoach/schemas.py
"""
Request/response models.

The browser client sends loosely-typed JSON, so every option is coerced to a
safe default instead of being rejected: stance defaults to PRO, difficulty to
Medium, feedback mode to short, topic to "Debate topic".
"""
import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Stance = Literal["PRO", "CON"]
Difficulty = Literal["Easy", "Medium", "Hard"]
FeedbackMode = Literal["short", "detailed"]
Role = Literal["user", "assistant"]

DEFAULT_TOPIC = "Debate topic"
MAX_TURNS = 12
MAX_TURN_CHARS = 6000
MAX_HISTORY = 12
MAX_MESSAGE_CHARS = 4000


def safe_str(value: Any, fallback: str = "") -> str:
    return value if isinstance(value, str) else fallback


def sanitize_stance(value: Any) -> Stance:
    return "CON" if safe_str(value, "PRO").upper() == "CON" else "PRO"


def sanitize_difficulty(value: Any) -> Difficulty:
    v = safe_str(value, "Medium")
    return v if v in ("Easy", "Medium", "Hard") else "Medium"


def sanitize_mode(value: Any) -> FeedbackMode:
    return "detailed" if safe_str(value, "short").lower() == "detailed" else "short"


def _finite_ms(value: Any) -> int:
    # bool is an int subclass but never a duration
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Session data ----------
class Turn(CamelModel):
    student_transcript: str = ""
    student_text: str = ""
    recording_ms: int = Field(default=0, ge=0)
    ai_reply: str = ""


class ChatMessage(BaseModel):
    role: Role
    content: str


def clamp_turns(raw: Any) -> List[Turn]:
    """Keep the first 12 object entries; wrong-typed fields fall back to empty/zero."""
    if not isinstance(raw, list):
        return []
    turns = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        turns.append(
            Turn(
                student_text=safe_str(item.get("studentText"))[:MAX_TURN_CHARS],
                student_transcript=safe_str(item.get("studentTranscript"))[:MAX_TURN_CHARS],
                recording_ms=_finite_ms(item.get("recordingMs")),
                ai_reply=safe_str(item.get("aiReply"))[:MAX_TURN_CHARS],
            )
        )
    return turns[:MAX_TURNS]


def clamp_messages(raw: Any) -> List[ChatMessage]:
    if not isinstance(raw, list):
        return []
    messages = [
        ChatMessage(
            role="assistant" if m["role"] == "assistant" else "user",
            content=m["content"][:MAX_MESSAGE_CHARS],
        )
        for m in raw
        if isinstance(m, dict) and isinstance(m.get("content"), str) and isinstance(m.get("role"), str)
    ]
    return messages[-MAX_HISTORY:]


# ---------- Request bodies ----------
class SessionOptions(CamelModel):
    topic: str = DEFAULT_TOPIC
    stance: Stance = "PRO"
    difficulty: Difficulty = "Medium"

    @field_validator("topic", mode="before")
    @classmethod
    def _coerce_topic(cls, v):
        return safe_str(v, DEFAULT_TOPIC)

    @field_validator("stance", mode="before")
    @classmethod
    def _coerce_stance(cls, v):
        return sanitize_stance(v)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _coerce_difficulty(cls, v):
        return sanitize_difficulty(v)


class PrepRequest(SessionOptions):
    messages: Optional[List[ChatMessage]] = None
    user_text: str = ""

    @field_validator("messages", mode="before")
    @classmethod
    def _coerce_messages(cls, v):
        # an empty or missing list means "no history", a non-empty one is always used
        if not isinstance(v, list) or not v:
            return None
        return clamp_messages(v)

    @field_validator("user_text", mode="before")
    @classmethod
    def _coerce_user_text(cls, v):
        return safe_str(v).strip()


class AskRequest(SessionOptions):
    user_text: str = ""

    @field_validator("user_text", mode="before")
    @classmethod
    def _coerce_user_text(cls, v):
        return safe_str(v).strip()


class FeedbackRequest(SessionOptions):
    mode: FeedbackMode = "short"
    turns: List[Turn] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _student_side(cls, data):
        # older clients send the side as studentSide
        if isinstance(data, dict) and data.get("studentSide"):
            data = {**data, "stance": data["studentSide"]}
        return data

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v):
        return sanitize_mode(v)

    @field_validator("turns", mode="before")
    @classmethod
    def _coerce_turns(cls, v):
        return clamp_turns(v)


# ---------- Responses ----------
class ReplyOut(BaseModel):
    reply: str


class TopicsOut(BaseModel):
    topics: List[str]


class TranscriptOut(BaseModel):
    text: str


class FeedbackMeta(BaseModel):
    totalWpm: Optional[int] = None
    totalWords: int
    totalMs: int
    turns: int
    mode: FeedbackMode


class FeedbackOut(BaseModel):
    reply: str
    meta: FeedbackMeta

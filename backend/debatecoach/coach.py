# debatecoach/coach.py
"""Coaching operations behind each HTTP route. Each takes the injected LLM client."""
import json
import logging
import re
from typing import List, Protocol, Sequence, Tuple

from debatecoach import prompts
from debatecoach.errors import RequestValidationFailed
from debatecoach.feedback import SessionSummary, aggregate
from debatecoach.llm import ChatMessage
from debatecoach.schemas import AskRequest, FeedbackRequest, PrepRequest

logger = logging.getLogger(__name__)

MAX_TOPICS = 10
FALLBACK_TOPIC = "Should schools allow AI tools for homework?"
_LIST_MARKER = re.compile(r"^[-*\d.\s]+")


class Completer(Protocol):
    def complete(self, system: str, messages: Sequence[ChatMessage], temperature: float = 0.7) -> str: ...


# ---------- Topics ----------
def parse_topics(text: str) -> List[str]:
    """Read the model's topic list; falls back to one topic per line when it isn't a JSON array."""
    topics: List[str] = []
    try:
        parsed = json.loads(text)
    except ValueError:
        logger.info("[topics] Output was not JSON, parsing line by line")
        topics = [_LIST_MARKER.sub("", line).strip() for line in text.split("\n")]
        topics = [t for t in topics if t]
    else:
        if isinstance(parsed, list):
            topics = [t for t in (str(item) for item in parsed if item is not None) if t]

    topics = topics[:MAX_TOPICS]
    return topics or [FALLBACK_TOPIC]


def generate_topics(llm: Completer) -> List[str]:
    text = llm.complete(
        prompts.TOPICS_SYSTEM,
        [{"role": "user", "content": prompts.TOPICS_USER}],
        temperature=0.6,
    )
    return parse_topics(text)


# ---------- Prep / Ask ----------
def prep_reply(llm: Completer, body: PrepRequest) -> str:
    if body.messages is not None:
        messages = [m.model_dump() for m in body.messages]
    elif body.user_text:
        messages = [{"role": "user", "content": body.user_text[:4000]}]
    else:
        raise RequestValidationFailed("Missing messages or userText")

    system = prompts.prep_system_prompt(body.topic, body.stance, body.difficulty)
    return llm.complete(system, messages, temperature=0.7)


def ask_reply(llm: Completer, body: AskRequest) -> str:
    if not body.user_text:
        raise RequestValidationFailed("Missing userText")

    system = prompts.ask_system_prompt(body.topic, body.stance, body.difficulty)
    messages = [{"role": "user", "content": prompts.ask_user_message(body.user_text)}]
    return llm.complete(system, messages, temperature=0.7)


# ---------- Feedback ----------
def session_feedback(llm: Completer, body: FeedbackRequest) -> Tuple[str, SessionSummary]:
    if not body.turns:
        raise RequestValidationFailed("No turns provided")

    summary = aggregate(body.turns)
    system = prompts.feedback_system_prompt(body.topic, body.stance, body.difficulty, body.mode)
    reply = llm.complete(system, [{"role": "user", "content": summary.text}], temperature=0.4)
    return reply or "", summary

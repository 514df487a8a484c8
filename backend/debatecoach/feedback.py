# debatecoach/feedback.py
"""
Session feedback aggregation.

Turns the recorded turns of one practice session into
- a plain-text session summary that becomes the user message of the feedback prompt
- rough fluency numbers (words, recording time, words per minute) for the response meta

Nothing here talks to OpenAI; the route does that with `SessionSummary.text`.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from debatecoach.schemas import Turn

MAX_SUMMARY_CHARS = 24000
EMPTY = "(empty)"
UNKNOWN = "unknown"


@dataclass
class SessionSummary:
    text: str
    total_words: int
    total_ms: int
    total_wpm: Optional[int]
    turn_count: int


def words_count(text: str) -> int:
    return len(text.split()) if text else 0


def wpm(words: int, ms: int) -> Optional[int]:
    """Words per minute, or None when no time elapsed. Rounds half up."""
    if not ms or ms <= 0:
        return None
    minutes = ms / 60000
    return math.floor(words / minutes + 0.5)


def _fmt_rate(rate: Optional[int]) -> str:
    return UNKNOWN if rate is None else str(rate)


def render_turn(idx: int, turn: Turn) -> str:
    transcript = turn.student_transcript.strip()
    text = turn.student_text.strip()
    rate = wpm(words_count(transcript), turn.recording_ms)
    return "\n".join([
        f"TURN {idx}:",
        f"Student transcript: {transcript or EMPTY}",
        f"Student final text (after edits): {text or EMPTY}",
        f"Recording time ms: {turn.recording_ms}",
        f"Estimated WPM: {_fmt_rate(rate)}",
        f"Computer reply: {turn.ai_reply or EMPTY}",
    ])


def aggregate(turns: Sequence[Turn]) -> SessionSummary:
    """Build the feedback prompt body for an already clamped, non-empty turn list."""
    total_ms = sum(t.recording_ms for t in turns)
    total_words = words_count(" ".join(t.student_transcript for t in turns).strip())
    total_wpm = wpm(total_words, total_ms)

    blocks: List[str] = [render_turn(i, t) for i, t in enumerate(turns, start=1)]
    text = "\n".join([
        "Here is the full session data.",
        f"Overall estimated WPM: {_fmt_rate(total_wpm)} (based on transcript words / recording time)",
        "",
        "\n\n".join(blocks),
    ])

    return SessionSummary(
        text=text[:MAX_SUMMARY_CHARS],
        total_words=total_words,
        total_ms=total_ms,
        total_wpm=total_wpm,
        turn_count=len(turns),
    )

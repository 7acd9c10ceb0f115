"""Parser for the control markers the interviewer model embeds in replies.

The model appends ``SCORE|<n>/10`` after judging an answer and
``INTERVIEW_COMPLETE|<score>/10|<true|false>`` when it wraps up. Replies are
split into a tagged token stream so the caller never pattern-matches raw
text; anything that fails to parse stays plain text.
"""
from __future__ import annotations

import re
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

_MARKER_RE = re.compile(
    r"(?P<score>SCORE\|(?P<score_value>\d{1,2})/10)"
    r"|(?P<completion>INTERVIEW_COMPLETE\|(?P<final>\d+(?:\.\d+)?)/10\|(?P<passed>[A-Za-z]+))"
)


class ScoreToken(BaseModel):
    kind: Literal["score"] = "score"
    value: int  # clamped to 0..10
    raw: str


class CompletionToken(BaseModel):
    kind: Literal["completion"] = "completion"
    score: float
    passed: bool
    raw: str


class PlainText(BaseModel):
    kind: Literal["text"] = "text"
    text: str


Token = Annotated[Union[ScoreToken, CompletionToken, PlainText], Field(discriminator="kind")]


class ParsedReply(BaseModel):
    display_text: str
    score: Optional[ScoreToken] = None
    completion: Optional[CompletionToken] = None


def tokenize(raw: Any) -> List[Token]:
    """Split a model reply into plain-text and marker tokens, in order."""

    if not isinstance(raw, str) or not raw:
        return []
    tokens: List[Token] = []
    cursor = 0
    for match in _MARKER_RE.finditer(raw):
        if match.start() > cursor:
            tokens.append(PlainText(text=raw[cursor:match.start()]))
        if match.group("score"):
            tokens.append(ScoreToken(value=min(10, int(match.group("score_value"))), raw=match.group(0)))
        else:
            tokens.append(
                CompletionToken(
                    score=float(match.group("final")),
                    passed=match.group("passed").lower() == "true",
                    raw=match.group(0),
                )
            )
        cursor = match.end()
    if cursor < len(raw):
        tokens.append(PlainText(text=raw[cursor:]))
    return tokens


def parse_reply(raw: Any) -> ParsedReply:
    """Strip markers from ``raw`` and surface the first score and completion token.

    A reply without a well-formed score marker yields ``score=None``.
    """

    tokens = tokenize(raw)
    score = next((t for t in tokens if isinstance(t, ScoreToken)), None)
    completion = next((t for t in tokens if isinstance(t, CompletionToken)), None)
    text = "".join(t.text for t in tokens if isinstance(t, PlainText))
    return ParsedReply(display_text=text.strip(), score=score, completion=completion)


__all__ = ["ScoreToken", "CompletionToken", "PlainText", "Token", "ParsedReply", "tokenize", "parse_reply"]

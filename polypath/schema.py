import json
import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field, StrictInt, ValidationError, field_validator

from .errors import ReplyValidationError
from .utils import strip_code_fences, truncate_for_log

logger = logging.getLogger(__name__)


class WordPair(BaseModel):
    """One vocabulary item. `target` is shown first, `native` on flip."""

    native: str
    target: str

    @field_validator("native", "target", mode="before")
    @classmethod
    def non_empty_string(cls, v):
        if not isinstance(v, str):
            raise ValueError("must be a string")
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class GenerateWordsRequest(BaseModel):
    l1: Optional[str] = None
    tl: Optional[str] = None
    theme: Optional[str] = None
    count: Optional[StrictInt] = None


class WordsResponse(BaseModel):
    words: List[WordPair]
    theme: str
    count: int


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class _ReplyEnvelope(BaseModel):
    words: List[Any] = Field(..., description="raw pairs as returned by the model")


def parse_words_reply(raw: str, count: int, strict: bool = False) -> List[WordPair]:
    """Validate the model's text reply and return at most `count` word pairs.

    Invalid pairs are dropped. In strict mode fewer than `count` valid pairs is
    an error; otherwise any non-zero number is accepted.
    """
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("[Reply] JSON parse error: %s; reply=%r", e, truncate_for_log(text))
        raise ReplyValidationError("invalid response") from e

    try:
        envelope = _ReplyEnvelope.model_validate(data)
    except ValidationError as e:
        logger.error("[Reply] Invalid response structure: %r", truncate_for_log(text))
        raise ReplyValidationError("invalid response structure") from e

    pairs: List[WordPair] = []
    dropped = 0
    for item in envelope.words:
        try:
            pairs.append(WordPair.model_validate(item))
        except ValidationError:
            dropped += 1
            logger.warning("[Reply] Dropping invalid pair: %r", item)
    if dropped:
        logger.info("[Reply] %d of %d pairs dropped", dropped, len(envelope.words))

    pairs = pairs[:count]
    if not pairs:
        raise ReplyValidationError("no words generated")
    if strict and len(pairs) < count:
        raise ReplyValidationError(f"expected {count} valid word pairs, got {len(pairs)}")
    return pairs

import logging
from typing import Dict, List, Protocol

from .config import Settings
from .errors import RequestValidationFailed
from .prompts import build_messages
from .schema import GenerateWordsRequest, WordsResponse, parse_words_reply
from .utils import resolve_theme, same_language, truncate_for_log

logger = logging.getLogger(__name__)


class Completer(Protocol):
    def complete(self, messages: List[Dict[str, str]]) -> str: ...


def validate_request(req: GenerateWordsRequest, settings: Settings) -> GenerateWordsRequest:
    """Return a normalized copy of the request or raise RequestValidationFailed."""
    l1 = (req.l1 or "").strip()
    tl = (req.tl or "").strip()
    if not l1 or not tl:
        raise RequestValidationFailed("Missing required languages (l1, tl)")
    if same_language(l1, tl):
        raise RequestValidationFailed("Source and target languages must differ")

    count = settings.default_count if req.count is None else req.count
    if count < 1 or count > settings.max_count:
        raise RequestValidationFailed(f"count must be between 1 and {settings.max_count}")

    return GenerateWordsRequest(l1=l1, tl=tl, theme=resolve_theme(req.theme), count=count)


def generate_words(req: GenerateWordsRequest, client: Completer, settings: Settings) -> WordsResponse:
    """Validate -> prompt -> one completion call -> parse -> respond."""
    req = validate_request(req, settings)
    logger.info("[Words] l1=%s tl=%s theme=%r count=%d", req.l1, req.tl, req.theme, req.count)

    messages = build_messages(req.l1, req.tl, req.theme, req.count)
    reply = client.complete(messages)
    logger.debug("[Words] Raw completion: %s", truncate_for_log(reply))

    pairs = parse_words_reply(reply, req.count, strict=settings.strict_count)
    if len(pairs) < req.count:
        logger.warning("[Words] Only %d of %d requested pairs were valid", len(pairs), req.count)
    logger.info("[Words] Generated %d words", len(pairs))
    return WordsResponse(words=pairs, theme=req.theme, count=len(pairs))

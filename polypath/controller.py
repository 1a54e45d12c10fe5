import logging
from typing import Callable, List, Optional

import httpx

from .config import get_api_url
from .errors import WordsFetchError
from .flipcard import FlipCard, TimerFactory, thread_timer
from .schema import WordPair

logger = logging.getLogger(__name__)

WORDS_PER_SET = 6
CLIENT_FALLBACK_THEME = "basic vocabulary"
SAME_LANGUAGE_ERROR = "Please select different languages for source and target."


class FlashcardController:
    """Form state, request lifecycle and flip-cards for the flashcard UI.

    Rendering is left to the caller; it reads `can_generate`, `loading`,
    `error` and `cards`, and forwards user actions to the methods below.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        count: int = WORDS_PER_SET,
        timer_factory: TimerFactory = thread_timer,
        on_card_change: Optional[Callable[[FlipCard], None]] = None,
    ):
        self.api_url = api_url or get_api_url()
        self._http = http_client or httpx.Client(timeout=60.0)
        self.count = count
        self._timer_factory = timer_factory
        self._on_card_change = on_card_change

        self.native_lang = ""
        self.target_lang = ""
        self.theme = ""
        self.can_generate = False
        self.loading = False
        self.error: Optional[str] = None
        self.words: List[WordPair] = []
        self.cards: List[FlipCard] = []

    # -- form ---------------------------------------------------------------

    def set_native_language(self, value: str) -> None:
        self.native_lang = value or ""
        self.validate_form()

    def set_target_language(self, value: str) -> None:
        self.target_lang = value or ""
        self.validate_form()

    def set_theme(self, value: str) -> None:
        self.theme = value or ""
        self.validate_form()

    def swap_languages(self) -> None:
        logger.debug("[Client] Swapping %s <-> %s", self.native_lang, self.target_lang)
        self.native_lang, self.target_lang = self.target_lang, self.native_lang
        self.validate_form()

    def validate_form(self) -> bool:
        both = bool(self.native_lang) and bool(self.target_lang)
        same = both and self.native_lang == self.target_lang
        self.can_generate = both and not same and not self.loading
        if same:
            self.error = SAME_LANGUAGE_ERROR
        else:
            self.error = None
        return self.can_generate

    # -- requests -----------------------------------------------------------

    def request_body(self) -> dict:
        return {
            "l1": self.native_lang,
            "tl": self.target_lang,
            "theme": self.theme.strip() or CLIENT_FALLBACK_THEME,
            "count": self.count,
        }

    def fetch_words(self) -> bool:
        """Request a new word set. Returns True when the cards were replaced."""
        if self.loading or not self.can_generate:
            logger.debug("[Client] Generate action disabled; ignoring")
            return False

        body = self.request_body()
        self._set_loading(True)
        self.error = None
        try:
            logger.info("[Client] POST %s %s", self.api_url, body)
            pairs = self._post_for_words(body)
            if len(pairs) < self.count:
                logger.warning("[Client] Only received %d words instead of %d", len(pairs), self.count)
            self._replace_cards(pairs[: self.count])
            return True
        except WordsFetchError as e:
            logger.error("[Client] Fetch failed: %s", e.message)
            self.error = f"Failed to get words: {e.message}"
            return False
        finally:
            self._set_loading(False)
            # Keep a fetch error visible unless validation has its own message
            error = self.error
            self.validate_form()
            self.error = self.error or error

    def regenerate(self) -> bool:
        return self.fetch_words()

    def _post_for_words(self, body: dict) -> List[WordPair]:
        try:
            r = self._http.post(self.api_url, json=body)
        except httpx.HTTPError as e:
            raise WordsFetchError(f"Network error: {e}") from e

        if r.is_error:
            raise WordsFetchError(f"Server error: {r.status_code} - {r.text}")
        try:
            data = r.json()
        except ValueError as e:
            raise WordsFetchError("Invalid response from the server") from e

        if isinstance(data, dict) and data.get("error"):
            raise WordsFetchError(str(data["error"]))
        words = data.get("words") if isinstance(data, dict) else None
        if not isinstance(words, list) or not words:
            raise WordsFetchError("No words received from the server")

        pairs = []
        for item in words:
            try:
                pairs.append(WordPair.model_validate(item))
            except ValueError:
                logger.warning("[Client] Skipping malformed word pair: %r", item)
        if not pairs:
            raise WordsFetchError("No words received from the server")
        return pairs

    # -- cards --------------------------------------------------------------

    def _replace_cards(self, pairs: List[WordPair]) -> None:
        self.clear_cards()
        self.words = list(pairs)
        self.cards = [
            FlipCard(p, timer_factory=self._timer_factory, on_change=self._on_card_change)
            for p in self.words
        ]

    @property
    def revert_pending(self) -> bool:
        return any(card.revert_pending for card in self.cards)

    def card_labels(self) -> List[str]:
        return [card.label for card in self.cards]

    def needs_repaint(self, rendered_labels: Optional[List[str]]) -> bool:
        """True when a card changed (e.g. a timed revert) since `rendered_labels` were drawn."""
        return self.card_labels() != list(rendered_labels or [])

    def clear_cards(self) -> None:
        for card in self.cards:
            card.dispose()
        self.cards = []
        self.words = []

    def _set_loading(self, loading: bool) -> None:
        self.loading = loading
        if loading:
            self.can_generate = False

    def close(self) -> None:
        self.clear_cards()
        self._http.close()

"""
Flip-card state for one word pair.

A card starts on its front (the target-language word). Clicking or hovering
turns it to the back (the native-language translation) and schedules an
automatic revert; leaving hover early schedules a quicker revert instead.
"""

import threading
from typing import Callable, Optional, Protocol

from .schema import WordPair

AUTO_REVERT_SECONDS = 3.0
HOVER_EXIT_REVERT_SECONDS = 0.3

FRONT = "front"
BACK = "back"

UNKNOWN_WORD = "Unknown word"
UNKNOWN_TRANSLATION = "Translation unavailable"


class TimerHandle(Protocol):
    def start(self) -> None: ...
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def thread_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    t = threading.Timer(delay, callback)
    t.daemon = True
    return t


class FlipCard:
    def __init__(self, pair: WordPair, timer_factory: TimerFactory = thread_timer,
                 on_change: Optional[Callable[["FlipCard"], None]] = None):
        self.pair = pair
        self.state = FRONT
        self._timer_factory = timer_factory
        self._timer: Optional[TimerHandle] = None
        self._on_change = on_change
        self._lock = threading.RLock()

    @property
    def label(self) -> str:
        if self.state == BACK:
            return self.pair.native or UNKNOWN_TRANSLATION
        return self.pair.target or UNKNOWN_WORD

    @property
    def aria_label(self) -> str:
        return f"{self.pair.target} - click to see translation"

    @property
    def flipped(self) -> bool:
        return self.state == BACK

    @property
    def revert_pending(self) -> bool:
        return self._timer is not None

    def toggle(self) -> None:
        with self._lock:
            self._cancel_timer()
            if self.state == FRONT:
                self._set_state(BACK)
                self._schedule(AUTO_REVERT_SECONDS)
            else:
                self._set_state(FRONT)

    def hover_enter(self, touch_device: bool = False) -> None:
        # Touch devices fire synthetic hovers alongside the click
        if touch_device:
            return
        self.toggle()

    def hover_exit(self, touch_device: bool = False) -> None:
        if touch_device:
            return
        with self._lock:
            if self.state == BACK and self._timer is not None:
                self._cancel_timer()
                self._schedule(HOVER_EXIT_REVERT_SECONDS)

    def dispose(self) -> None:
        with self._lock:
            self._cancel_timer()

    def _schedule(self, delay: float) -> None:
        timer = self._timer_factory(delay, lambda: self._revert(timer))
        self._timer = timer
        timer.start()

    def _revert(self, timer: TimerHandle) -> None:
        with self._lock:
            # A cancelled timer may still fire if it was already running
            if timer is not self._timer:
                return
            self._timer = None
            if self.state == BACK:
                self._set_state(FRONT)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: str) -> None:
        self.state = state
        if self._on_change:
            self._on_change(self)

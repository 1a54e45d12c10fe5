import json

import pytest

from polypath.config import Settings


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        t = FakeTimer(delay, callback)
        self.timers.append(t)
        return t

    @property
    def last(self):
        return self.timers[-1]


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def settings():
    return Settings(
        api_key="test_key",
        base_url="https://llm.test/v1",
        model="test-model",
        temperature=0.7,
        max_tokens=800,
        timeout_s=5.0,
        default_count=6,
        max_count=20,
        strict_count=False,
        app_env="production",
    )


def words_reply(n, prefix="w"):
    """A well-formed model reply with n pairs."""
    return json.dumps({
        "words": [{"native": f"{prefix}{i}", "target": f"t{prefix}{i}"} for i in range(n)]
    })


@pytest.fixture
def make_reply():
    return words_reply


class FakeEndpoint:
    """Records requests and answers with a queued response."""

    def __init__(self):
        self.requests = []
        self.responses = []
        self.seen_loading = []
        self.controller = None

    def __call__(self, request):
        self.requests.append(json.loads(request.content))
        if self.controller is not None:
            self.seen_loading.append((self.controller.loading, self.controller.can_generate))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def endpoint():
    return FakeEndpoint()

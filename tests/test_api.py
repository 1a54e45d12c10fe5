from dataclasses import replace
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from polypath.api import LEGACY_WORDS_PATH, WORDS_PATH, app, get_completion_client
from polypath.config import get_settings
from polypath.errors import UpstreamError


@pytest.fixture
def completer():
    fake = Mock()
    fake.complete.return_value = '{"words": []}'
    return fake


@pytest.fixture
def client(completer, settings):
    app.dependency_overrides[get_completion_client] = lambda: completer
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert response.headers["access-control-allow-headers"] == "Content-Type"


@pytest.mark.api
def test_generates_requested_pairs(client, completer, make_reply):
    completer.complete.return_value = make_reply(5)
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "theme": "food", "count": 5})
    assert r.status_code == 200
    data = r.json()
    assert len(data["words"]) == 5
    assert data["words"][0] == {"native": "w0", "target": "tw0"}
    assert data["theme"] == "food"
    assert data["count"] == 5
    _assert_cors(r)
    completer.complete.assert_called_once()
    messages = completer.complete.call_args[0][0]
    assert "Generate exactly 5 common food words." in messages[1]["content"]


@pytest.mark.api
def test_prose_reply_yields_500(client, completer):
    completer.complete.return_value = "Sure! Here are five food words: apple, bread..."
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "theme": "food", "count": 5})
    assert r.status_code == 500
    assert "error" in r.json()
    assert "words" not in r.json()
    _assert_cors(r)


@pytest.mark.api
def test_reply_without_words_array_yields_500(client, completer):
    completer.complete.return_value = '{"vocabulary": []}'
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es"})
    assert r.status_code == 500
    assert r.json()["error"].startswith("Failed to generate words")


@pytest.mark.api
def test_defaults_count_and_theme(client, completer, make_reply):
    completer.complete.return_value = make_reply(10)
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "fr", "theme": "   "})
    assert r.status_code == 200
    data = r.json()
    assert data["count"] == 6
    assert len(data["words"]) == 6
    assert data["theme"] == "basic everyday vocabulary"


@pytest.mark.api
def test_lenient_shortfall_returns_partial(client, completer, make_reply):
    completer.complete.return_value = make_reply(4)
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "count": 6})
    assert r.status_code == 200
    assert len(r.json()["words"]) == 4


@pytest.mark.api
def test_strict_shortfall_fails(client, completer, settings, make_reply):
    app.dependency_overrides[get_settings] = lambda: replace(settings, strict_count=True)
    completer.complete.return_value = make_reply(4)
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "count": 6})
    assert r.status_code == 500
    assert "error" in r.json()


@pytest.mark.api
@pytest.mark.parametrize("body", [
    {"tl": "es"},
    {"l1": "en"},
    {"l1": "", "tl": "es"},
    {"l1": "en", "tl": "   "},
])
def test_missing_languages_yield_400(client, completer, body):
    r = client.post(WORDS_PATH, json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Missing required languages (l1, tl)"}
    completer.complete.assert_not_called()
    _assert_cors(r)


@pytest.mark.api
@pytest.mark.parametrize("l1,tl", [("en", "en"), ("es", "ES"), ("de ", "de")])
def test_same_languages_yield_400(client, completer, l1, tl):
    r = client.post(WORDS_PATH, json={"l1": l1, "tl": tl})
    assert r.status_code == 400
    assert "differ" in r.json()["error"]
    completer.complete.assert_not_called()


@pytest.mark.api
@pytest.mark.parametrize("count", [0, -1, 21])
def test_out_of_range_count_yields_400(client, completer, count):
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "count": count})
    assert r.status_code == 400
    completer.complete.assert_not_called()


@pytest.mark.api
def test_malformed_body_yields_400(client, completer):
    r = client.post(WORDS_PATH, content=b"not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "count": "many"})
    assert r.status_code == 400
    completer.complete.assert_not_called()


@pytest.mark.api
def test_options_preflight_is_empty_200(client, completer):
    r = client.options(WORDS_PATH)
    assert r.status_code == 200
    assert r.content == b""
    _assert_cors(r)
    r = client.options(WORDS_PATH, headers={
        "Origin": "https://example.com",
        "Access-Control-Request-Method": "POST",
    })
    assert r.status_code == 200
    assert r.content == b""
    completer.complete.assert_not_called()


@pytest.mark.api
@pytest.mark.parametrize("method", ["get", "put", "delete"])
def test_other_methods_yield_405(client, method):
    r = getattr(client, method)(WORDS_PATH)
    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed"}
    _assert_cors(r)


@pytest.mark.api
def test_legacy_path_is_served(client, completer, make_reply):
    completer.complete.return_value = make_reply(6)
    r = client.post(LEGACY_WORDS_PATH, json={"l1": "en", "tl": "es"})
    assert r.status_code == 200
    assert len(r.json()["words"]) == 6


@pytest.mark.api
def test_upstream_failure_yields_generic_500(client, completer):
    completer.complete.side_effect = UpstreamError("completion API returned 503")
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to generate words: completion API returned 503"}


@pytest.mark.api
def test_unexpected_exception_still_returns_json(client, completer):
    completer.complete.side_effect = RuntimeError("boom")
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es"})
    assert r.status_code == 500
    assert "error" in r.json()
    _assert_cors(r)


@pytest.mark.api
def test_development_mode_adds_details(client, completer, settings):
    dev = replace(settings, app_env="development")
    app.dependency_overrides[get_settings] = lambda: dev
    completer.complete.return_value = "prose"
    with patch("polypath.api.get_settings", return_value=dev):
        r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es"})
    assert r.status_code == 500
    assert "ReplyValidationError" in r.json()["details"]


@pytest.mark.api
def test_missing_credential_is_500_at_request_time(settings):
    app.dependency_overrides[get_settings] = lambda: replace(settings, api_key=None)
    try:
        with TestClient(app) as c:
            r = c.post(WORDS_PATH, json={"l1": "en", "tl": "es"})
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert "OPENAI_API_KEY" in r.json()["error"]


@pytest.mark.api
@pytest.mark.parametrize("count", [True, 5.5, "5"])
def test_non_integer_count_yields_400(client, completer, count):
    r = client.post(WORDS_PATH, json={"l1": "en", "tl": "es", "count": count})
    assert r.status_code == 400
    assert "error" in r.json()
    completer.complete.assert_not_called()


@pytest.mark.api
def test_error_schema_is_documented(client):
    schema = client.get("/openapi.json").json()
    responses = schema["paths"][WORDS_PATH]["post"]["responses"]
    for status in ("400", "405", "500"):
        ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")

import asyncio
import io
from urllib.error import URLError

import pytest

from sibyl.config.settings import MitigationConfig
from sibyl.mitigation import giphy
from sibyl.mitigation.giphy import GiphyHttpError, GiphyMitigationClient, extract_gif_url, request_random_gif


def _config() -> MitigationConfig:
    return MitigationConfig(
        threshold=100,
        cooldown_messages=10,
        timeout_seconds=2,
        endpoint="https://api.giphy.com/v1/gifs/random",
        response_text="Fuzzy kittens!",
        fallback_text="Take a deep breath.",
    )


def test_missing_api_key_uses_fallback_without_network(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom(**kwargs):
        raise AssertionError("network must not be used")

    monkeypatch.setattr(giphy, "request_random_gif", _boom)
    client = GiphyMitigationClient(_config(), api_key=None)
    assert asyncio.run(client.fetch()) == "Take a deep breath."


def test_successful_lookup_appends_gif_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        giphy,
        "request_random_gif",
        lambda **kwargs: {"data": {"images": {"original": {"url": "https://media.giphy.com/k.gif"}}}},
    )
    client = GiphyMitigationClient(_config(), api_key="key")
    assert asyncio.run(client.fetch()) == "Fuzzy kittens!\nhttps://media.giphy.com/k.gif"


def test_http_failure_is_contained(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(**kwargs):
        raise GiphyHttpError("giphy HTTP 500")

    monkeypatch.setattr(giphy, "request_random_gif", _fail)
    client = GiphyMitigationClient(_config(), api_key="key")
    assert asyncio.run(client.fetch()) == "Take a deep breath."


def test_empty_payload_uses_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(giphy, "request_random_gif", lambda **kwargs: {"data": []})
    client = GiphyMitigationClient(_config(), api_key="key")
    assert asyncio.run(client.fetch()) == "Take a deep breath."


def test_extract_gif_url_falls_back_to_page_url() -> None:
    assert extract_gif_url({"data": {"url": "https://giphy.com/gifs/x"}}) == "https://giphy.com/gifs/x"
    assert extract_gif_url({}) is None


def test_request_wraps_connection_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def _urlopen(req, timeout):
        raise URLError("no route")

    monkeypatch.setattr(giphy, "urlopen", _urlopen)
    with pytest.raises(GiphyHttpError):
        request_random_gif(api_key="k", endpoint="https://api.giphy.com/v1/gifs/random", tag="", timeout_seconds=1)


def test_request_rejects_non_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(giphy, "urlopen", lambda req, timeout: io.BytesIO(b"<html>"))
    with pytest.raises(GiphyHttpError):
        request_random_gif(api_key="k", endpoint="https://api.giphy.com/v1/gifs/random", tag="cat", timeout_seconds=1)

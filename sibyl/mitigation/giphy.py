"""Mitigation flavor lookup against the Giphy random endpoint (no SDK dependency)."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from sibyl.config.settings import MitigationConfig

LOGGER = logging.getLogger(__name__)


class GiphyHttpError(RuntimeError):
    """Raised when the Giphy HTTP call fails."""


class MitigationClient(Protocol):
    async def fetch(self) -> str:
        """Return response text for an elevated channel; never raises."""


def request_random_gif(
    *,
    api_key: str,
    endpoint: str,
    tag: str,
    timeout_seconds: int,
) -> dict[str, Any]:
    query = {"api_key": api_key, "rating": "g"}
    if tag:
        query["tag"] = tag
    req = Request(url=f"{endpoint}?{urlencode(query)}", method="GET")

    try:
        with urlopen(req, timeout=timeout_seconds) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as exc:
        raise GiphyHttpError(f"giphy HTTP {exc.code}") from exc
    except URLError as exc:
        reason = exc.reason if getattr(exc, "reason", None) else str(exc)
        raise GiphyHttpError(f"giphy connection error: {reason}") from exc
    except Exception as exc:
        raise GiphyHttpError("giphy request failed") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise GiphyHttpError("giphy returned non-JSON response") from exc

    if not isinstance(payload, dict):
        raise GiphyHttpError("giphy response must be an object")
    return payload


def extract_gif_url(payload: dict[str, Any]) -> Optional[str]:
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    images = data.get("images")
    if isinstance(images, dict):
        original = images.get("original")
        if isinstance(original, dict):
            url = original.get("url")
            if isinstance(url, str) and url.strip():
                return url.strip()
    url = data.get("url")
    if isinstance(url, str) and url.strip():
        return url.strip()
    return None


class GiphyMitigationClient:
    def __init__(self, config: MitigationConfig, api_key: Optional[str], tag: str = "kitten") -> None:
        self._config = config
        self._api_key = api_key
        self._tag = tag

    async def fetch(self) -> str:
        if not self._api_key:
            return self._config.fallback_text
        try:
            payload = await asyncio.wait_for(
                asyncio.to_thread(
                    request_random_gif,
                    api_key=self._api_key,
                    endpoint=self._config.endpoint,
                    tag=self._tag,
                    timeout_seconds=self._config.timeout_seconds,
                ),
                timeout=self._config.timeout_seconds,
            )
        except (GiphyHttpError, asyncio.TimeoutError) as exc:
            LOGGER.warning("mitigation lookup failed error=%s", str(exc) or type(exc).__name__)
            return self._config.fallback_text

        url = extract_gif_url(payload)
        if not url:
            LOGGER.warning("mitigation lookup returned no gif url")
            return self._config.fallback_text
        return f"{self._config.response_text}\n{url}"

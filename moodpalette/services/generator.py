"""Client for the external text generation service (Gemini REST API)."""
from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from ..core.config import AppSettings
from ..core.errors import ConfigurationError, ErrorKind, GenerationError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str, *, model: str | None = None) -> str: ...


def _mask(secret: str) -> str:
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


class GeminiTextGenerator:
    """Calls ``models/{model}:generateContent`` and classifies failures by ``ErrorKind``."""

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        default_model: str = "gemini-1.5-flash",
        timeout: float = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("Gemini API key not configured")
        self._api_key = api_key
        self._default_model = default_model
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)
        self._owns_client = client is None
        logger.debug("Gemini client ready (key %s, model %s)", _mask(api_key), default_model)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "GeminiTextGenerator":
        return cls(
            settings.gemini_api_key,
            base_url=settings.gemini_api_url,
            default_model=settings.text_model,
            timeout=settings.model_call_timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        model_name = model or self._default_model
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            response = await self._client.post(
                f"/models/{model_name}:generateContent",
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.TimeoutException as exc:
            raise GenerationError(f"model call timed out: {exc}", kind=ErrorKind.TRANSIENT) from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"model call failed: {exc}", kind=ErrorKind.TRANSIENT) from exc

        if response.status_code >= 400:
            raise GenerationError.from_status(
                response.status_code,
                f"model returned HTTP {response.status_code}",
            )

        try:
            text = self._extract_text(response.json())
        except ValueError as exc:
            raise GenerationError(f"unreadable model response: {exc}", kind=ErrorKind.FATAL) from exc
        if not text:
            raise GenerationError("received empty response from model", kind=ErrorKind.FATAL)
        logger.debug("Model %s replied (first 200 chars): %s", model_name, text[:200])
        return text

    @staticmethod
    def _extract_text(data: Any) -> str:
        if not isinstance(data, dict):
            raise ValueError("response body is not an object")
        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(str(part.get("text", "")) for part in parts if isinstance(part, dict)).strip()

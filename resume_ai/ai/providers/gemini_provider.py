from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

import httpx

from resume_ai.ai.config import AIConfig, load_ai_config
from resume_ai.ai.types import GenerationResult

logger = logging.getLogger(__name__)

UNPARSEABLE_MESSAGE = "I couldn't process that response. Please try again."
TRANSPORT_ERROR_MESSAGE = "Sorry, I couldn't reach the AI service right now. Please try again."
NOT_CONFIGURED_MESSAGE = "The AI service is not configured. Set GEMINI_API_KEY and try again."

STATUS_MESSAGES = {
    400: "Invalid request format. Check logs for details.",
    403: "API access denied. Please enable the Generative Language API in Google Cloud Console.",
    404: "Model not found. Try: gemini-2.0-flash-exp, gemini-1.5-flash, or gemini-1.5-pro",
    429: "Too many requests. Please wait a moment.",
}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def build_payload(prompt: str, *, temperature: float, max_output_tokens: int) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_output_tokens,
        },
    }


def extract_answer_text(body: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or None if any step is missing."""
    if not isinstance(body, dict):
        return None
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str):
        return None
    return text


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout_s: float = 30.0,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._model = model
        self._api_key = (api_key or "").strip()
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    def _endpoint(self) -> str:
        return f"{self._base_url}/v1beta/models/{self._model}:generateContent"

    def configured(self) -> bool:
        return bool(self._api_key) and not _looks_like_placeholder(self._api_key)

    async def generate(self, prompt: str) -> GenerationResult:
        if not self.configured():
            logger.warning(json.dumps({"event": "gemini_not_configured", "model": self._model}))
            return GenerationResult(text=NOT_CONFIGURED_MESSAGE, outcome="not_configured")

        payload = build_payload(
            prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )
        started = time.perf_counter()
        logger.info(
            json.dumps(
                {"event": "gemini_request", "model": self._model, "prompt_len": len(prompt)}
            )
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
                # The provider authenticates with a ``key`` query parameter.
                response = await client.post(
                    self._endpoint(),
                    params={"key": self._api_key},
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            return self._status_error(exc.response)
        except Exception as exc:  # noqa: BLE001 - gateway never propagates transport failures
            logger.exception(
                json.dumps(
                    {
                        "event": "gemini_transport_error",
                        "model": self._model,
                        "error_type": type(exc).__name__,
                        "duration_ms": int((time.perf_counter() - started) * 1000),
                    }
                )
            )
            return GenerationResult(text=TRANSPORT_ERROR_MESSAGE, outcome="transport_error")

        text = extract_answer_text(body)
        duration_ms = int((time.perf_counter() - started) * 1000)
        if text is None:
            logger.error(
                json.dumps(
                    {
                        "event": "gemini_unexpected_response",
                        "model": self._model,
                        "body": json.dumps(body)[:800],
                        "duration_ms": duration_ms,
                    }
                )
            )
            return GenerationResult(text=UNPARSEABLE_MESSAGE, outcome="unparseable")

        logger.info(
            json.dumps(
                {
                    "event": "gemini_response",
                    "model": self._model,
                    "answer_len": len(text),
                    "duration_ms": duration_ms,
                }
            )
        )
        return GenerationResult(text=text)

    def _status_error(self, response: httpx.Response) -> GenerationResult:
        status_code = response.status_code
        body = response.text
        logger.error(
            json.dumps(
                {
                    "event": "gemini_http_error",
                    "model": self._model,
                    "status": status_code,
                    "body": body[:800],
                }
            )
        )
        if status_code == 403:
            logger.error(
                "gemini_forbidden: enable the Generative Language API and check that the key is valid"
            )
        elif status_code == 404:
            logger.error("gemini_model_not_found model=%s", self._model)

        message = STATUS_MESSAGES.get(status_code) or f"Error {status_code}: {body}"
        return GenerationResult(text=message, outcome="provider_error", status_code=status_code)


def from_config(cfg: AIConfig | None = None) -> GeminiProvider:
    cfg = cfg or load_ai_config()
    return GeminiProvider(
        model=cfg.model,
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        timeout_s=cfg.timeout_s,
        temperature=cfg.temperature,
        max_output_tokens=cfg.max_output_tokens,
    )

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from comment_digest.core.config import GEMINI_MODEL, Settings

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.3,
    "topK": 40,
    "topP": 0.8,
    "maxOutputTokens": 800,
    "stopSequences": [],
}

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class LLMError(Exception):
    pass


class LLMUpstreamError(LLMError):
    """Transport failure, timeout or non-2xx status from the model provider."""


class LLMInvalidResponseError(LLMError):
    """The provider answered, but without generated text."""


def safety_settings(threshold: str) -> List[Dict[str, str]]:
    return [{"category": c, "threshold": threshold} for c in SAFETY_CATEGORIES]


def build_generation_request(prompt: str, safety_threshold: str = "BLOCK_MEDIUM_AND_ABOVE") -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": safety_settings(safety_threshold),
    }


def extract_text(data: Any) -> Optional[str]:
    """candidates[0].content.parts[0].text, or None when any level is missing or blank."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.GEMINI_API_KEY
        self.model = GEMINI_MODEL
        self.url = f"{settings.GEMINI_API_BASE.rstrip('/')}/models/{self.model}:generateContent"
        self.timeout = settings.LLM_TIMEOUT_SECONDS
        self.safety_threshold = settings.GEMINI_SAFETY_THRESHOLD
        self._transport = transport

    async def generate(self, prompt: str, request_id: str) -> str:
        if not self.api_key:
            raise LLMUpstreamError("GEMINI_API_KEY is not set")

        payload = build_generation_request(prompt, self.safety_threshold)
        headers = {"Content-Type": "application/json", "x-request-id": request_id}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, params={"key": self.api_key}, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise LLMUpstreamError(f"Gemini request failed: {e!r}") from e

        if resp.status_code >= 400:
            raise LLMUpstreamError(f"Gemini API error status={resp.status_code} body={resp.text[:300]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMInvalidResponseError("Gemini returned a non-JSON body") from e

        text = extract_text(data)
        if text is None:
            logger.error(
                f"Invalid Gemini response structure request_id={request_id}: "
                f"{json.dumps(data, ensure_ascii=False)[:1000]}"
            )
            raise LLMInvalidResponseError("Gemini response has no candidate text")

        return text

"""Minimal Gemini API wrapper for single-shot JSON-style text generation."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiError(Exception):
    """Base exception for Gemini client errors."""


class GeminiRequestError(GeminiError):
    """Raised when Gemini API request fails."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class GeminiResponseError(GeminiError):
    """Raised when Gemini response shape cannot be parsed."""


class ModelUnavailableError(Exception):
    """Raised when a model call is needed but no API key is configured."""


class GeminiClient:
    """
    Thin client for Gemini `generateContent`.

    Performs exactly one request per call; callers decide what to do on failure.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int = 25,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def generate_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.4,
        max_output_tokens: int = 300,
    ) -> str:
        """Send one system+user prompt pair and return the model's text reply."""
        body = {
            "system_instruction": {
                "parts": [{"text": system_prompt}],
            },
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": user_prompt}],
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }

        url = f"{GEMINI_BASE_URL}/{self.model}:generateContent"
        params = {"key": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.post(url, params=params, json=body)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.error("Gemini request failed: %s", exc)
            raise GeminiRequestError(503, "Gemini request failed") from exc

        if response.status_code >= 400:
            logger.error("Gemini returned HTTP %s", response.status_code)
            raise GeminiRequestError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeminiResponseError("Invalid JSON from Gemini") from exc

        return self._parse_response(payload)

    def _parse_response(self, payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            raise GeminiResponseError("Gemini response missing candidates")

        candidate = candidates[0] or {}
        parts = ((candidate.get("content") or {}).get("parts")) or []

        text_parts: list[str] = []
        for part in parts:
            text = part.get("text")
            if isinstance(text, str) and text.strip():
                text_parts.append(text.strip())

        text_response = "\n".join(text_parts).strip()
        if not text_response:
            raise GeminiResponseError("No text in Gemini response")
        return text_response

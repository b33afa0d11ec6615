"""Google Gemini provider for batch analysis."""

from __future__ import annotations

from typing import Any

import httpx

from .base import AnalysisProvider


class GeminiProvider(AnalysisProvider):
    """Gemini-backed provider calling ``generateContent`` over httpx."""

    name = "gemini"
    default_model = "gemini-2.5-flash"
    default_base_url = "https://generativelanguage.googleapis.com"
    default_api_key_env = "GOOGLE_API_KEY"

    def complete(self, prompt: str, *, max_output_tokens: int, temperature: float) -> str:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
                "responseMimeType": "application/json",
            },
        }
        data = self._post(payload)
        return _extract_text(data)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""

    if not isinstance(parts, list):
        return ""

    non_thought_chunks: list[str] = []
    all_chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("text")
        if not text:
            continue
        chunk = str(text)
        all_chunks.append(chunk)
        if not bool(part.get("thought")):
            non_thought_chunks.append(chunk)

    if non_thought_chunks:
        return "".join(non_thought_chunks)
    return "".join(all_chunks)

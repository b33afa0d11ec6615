"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import Any

import httpx

from .base import AnalysisProvider


class AnthropicProvider(AnalysisProvider):
    """Claude-backed provider calling the Messages API over httpx."""

    name = "anthropic"
    default_model = "claude-3-5-sonnet-20241022"
    default_base_url = "https://api.anthropic.com"
    default_api_key_env = "ANTHROPIC_API_KEY"

    def complete(self, prompt: str, *, max_output_tokens: int, temperature: float) -> str:
        payload = {
            "model": self.model,
            "max_tokens": max_output_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        data = self._post(payload)
        return _extract_text(data)

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.cfg.anthropic_version,
            "content-type": "application/json",
        }
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(f"{self.base_url}/v1/messages", headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    blocks = data.get("content")
    if not isinstance(blocks, list):
        return ""
    chunks = [
        str(block.get("text") or "")
        for block in blocks
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    return "".join(chunks)

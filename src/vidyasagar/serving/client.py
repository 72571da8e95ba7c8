"""Clients for generative-text endpoints."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Protocol

import requests

from vidyasagar.core.errors import TransportError
from vidyasagar.utils.config import ModelConfig
from vidyasagar.utils.logging import get_logger

LOG = get_logger(__name__)


class ModelClient(Protocol):
    provider: str

    def generate(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        ...


class GeminiHTTPClient:
    """Gemini ``generateContent`` over plain HTTP with structured output."""

    provider = "gemini"

    def __init__(
        self,
        url: str,
        model: str,
        api_key: Optional[str],
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.temperature = temperature

    def _payload(self, prompt: str, response_schema: Dict[str, Any]) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseSchema": response_schema,
        }
        if self.temperature is not None:
            generation_config["temperature"] = self.temperature
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def generate(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        if not self.api_key:
            raise TransportError("No API key configured for the Gemini endpoint")
        endpoint = f"{self.url}/v1beta/models/{self.model}:generateContent"
        try:
            resp = requests.post(
                endpoint,
                params={"key": self.api_key},
                json=self._payload(prompt, response_schema),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise TransportError(f"Gemini request failed: {exc}") from exc

        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "no candidates")
            raise TransportError(f"Gemini returned no candidates ({reason})")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise TransportError("Gemini candidate had no text")
        return text


class EchoClient:
    """Offline client that answers with a reply shaped like the schema."""

    provider = "echo"

    def __init__(self, excerpt_chars: int = 200) -> None:
        self.excerpt_chars = excerpt_chars

    def _fill(self, schema: Dict[str, Any], prompt: str, label: str) -> Any:
        kind = schema.get("type")
        if kind == "OBJECT":
            props = schema.get("properties", {})
            return {name: self._fill(sub, prompt, name) for name, sub in props.items()}
        if kind == "ARRAY":
            return [self._fill(schema.get("items", {"type": "STRING"}), prompt, label)]
        if kind in ("INTEGER", "NUMBER"):
            return 0
        if kind == "BOOLEAN":
            return False
        excerpt = " ".join(prompt.split())[: self.excerpt_chars]
        return f"[{label}] {excerpt}"

    def generate(self, prompt: str, response_schema: Dict[str, Any]) -> str:
        return json.dumps(self._fill(response_schema, prompt, "response"))


PROVIDERS: List[str] = ["gemini", "echo"]


def build_client(cfg: ModelConfig) -> ModelClient:
    provider = cfg.provider.lower()
    if provider == "gemini":
        return GeminiHTTPClient(
            cfg.url,
            cfg.name,
            cfg.api_key(),
            timeout=cfg.timeout,
            temperature=cfg.temperature,
        )
    if provider == "echo":
        return EchoClient()
    raise ValueError(f"Unknown model provider '{cfg.provider}', expected one of {PROVIDERS}")

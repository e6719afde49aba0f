"""Single JSON-only capability over an external text-generation provider.

Both pipelines depend on ``JsonModel.generate_json`` and nothing else. Every
failure (missing provider, timeout, transport error, non-2xx, empty or
non-JSON output) comes back as ``None``; this module never raises to callers.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from .config import ProviderConfig, Settings

logger = logging.getLogger(__name__)


class JsonModel(Protocol):
    def generate_json(self, system_prompt: str, user_prompt: str, temperature: float) -> dict[str, Any] | None:
        ...


def extract_json_object(raw_text: str) -> dict[str, Any] | None:
    """Parse ``raw_text`` as a JSON object, or the first balanced ``{...}`` block inside it."""
    text = (raw_text or "").strip()
    if not text:
        return None
    try:
        payload = json.loads(text)
        if isinstance(payload, dict):
            return payload
    except json.JSONDecodeError:
        pass

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = None
        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    end = idx
                    break
        if end is not None:
            try:
                payload = json.loads(text[start : end + 1])
                if isinstance(payload, dict):
                    return payload
            except json.JSONDecodeError:
                pass
        start = text.find("{", start + 1)
    return None


def _provider_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()[:200]
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()[:200]
    return f"HTTP {response.status_code}"


def _coerce_gemini_text(response_json: Any) -> str:
    if not isinstance(response_json, dict):
        return ""
    candidates = response_json.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    texts = [part.get("text") for part in parts if isinstance(part, dict)]
    return "".join(text for text in texts if isinstance(text, str)).strip()


def _coerce_anthropic_text(response_json: Any) -> str:
    if not isinstance(response_json, dict):
        return ""
    content = response_json.get("content")
    if not isinstance(content, list):
        return ""
    parts: list[str] = []
    for item in content:
        if not isinstance(item, dict) or item.get("type") != "text":
            continue
        text_value = item.get("text")
        if isinstance(text_value, str) and text_value.strip():
            parts.append(text_value.strip())
    return "\n".join(parts).strip()


def _coerce_completion_text(response_json: Any) -> str:
    if not isinstance(response_json, dict):
        return ""
    choices = response_json.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        texts = [item.get("text") for item in content if isinstance(item, dict)]
        return "\n".join(text for text in texts if isinstance(text, str)).strip()
    return ""


class HttpJsonModel:
    """``JsonModel`` backed by one configured provider.

    Exactly one provider is used per instance, so a pipeline call maps to at
    most one outbound request.
    """

    def __init__(
        self,
        provider: ProviderConfig | None,
        *,
        timeout_seconds: float = 25.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def model_name(self) -> str | None:
        return self.provider.model if self.provider else None

    def _build_request(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> tuple[str, dict[str, str], dict[str, str], dict[str, Any]]:
        provider = self.provider
        assert provider is not None
        if provider.provider == "gemini":
            return (
                f"{provider.base_url}/models/{quote(provider.model, safe='')}:generateContent",
                {"Content-Type": "application/json"},
                {"key": provider.api_key},
                {
                    "systemInstruction": {"parts": [{"text": system_prompt}]},
                    "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
                    "generationConfig": {"temperature": temperature, "responseMimeType": "application/json"},
                },
            )
        if provider.provider == "anthropic":
            return (
                f"{provider.base_url}/messages",
                {
                    "x-api-key": provider.api_key,
                    "anthropic-version": provider.api_version or "2023-06-01",
                    "Content-Type": "application/json",
                },
                {},
                {
                    "model": provider.model,
                    "max_tokens": 2048,
                    "temperature": temperature,
                    "system": f"{system_prompt}\nRespond with a single JSON object only.",
                    "messages": [{"role": "user", "content": user_prompt}],
                },
            )
        return (
            f"{provider.base_url}/chat/completions",
            {"Authorization": f"Bearer {provider.api_key}", "Content-Type": "application/json"},
            {},
            {
                "model": provider.model,
                "temperature": temperature,
                "response_format": {"type": "json_object"},
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            },
        )

    def _coerce_text(self, response_json: Any) -> str:
        assert self.provider is not None
        if self.provider.provider == "gemini":
            return _coerce_gemini_text(response_json)
        if self.provider.provider == "anthropic":
            return _coerce_anthropic_text(response_json)
        return _coerce_completion_text(response_json)

    def generate_json(self, system_prompt: str, user_prompt: str, temperature: float) -> dict[str, Any] | None:
        if self.provider is None:
            logger.info("model call skipped: no provider configured")
            return None
        provider_name = self.provider.provider
        url, headers, params, body = self._build_request(system_prompt, user_prompt, temperature)
        try:
            with httpx.Client(
                timeout=httpx.Timeout(self.timeout_seconds, connect=8.0),
                transport=self._transport,
            ) as client:
                response = client.post(url, headers=headers, params=params, json=body)
        except httpx.TimeoutException:
            logger.warning("model call timed out (%s)", provider_name)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("model call failed (%s): %s", provider_name, type(exc).__name__)
            return None

        if not response.is_success:
            logger.warning(
                "model call returned %s (%s): %s",
                response.status_code,
                provider_name,
                _provider_error_message(response),
            )
            return None
        try:
            completion = response.json()
        except ValueError:
            logger.warning("model response body was not JSON (%s)", provider_name)
            return None

        text = self._coerce_text(completion)
        if not text:
            logger.warning("model returned empty output (%s)", provider_name)
            return None
        parsed = extract_json_object(text)
        if parsed is None:
            logger.warning("model output contained no JSON object (%s)", provider_name)
        return parsed


def build_model(settings: Settings, transport: httpx.BaseTransport | None = None) -> HttpJsonModel:
    return HttpJsonModel(
        settings.selected_provider(),
        timeout_seconds=settings.model_timeout_seconds,
        transport=transport,
    )

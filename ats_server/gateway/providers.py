"""Provider Adapters: one ``generate`` contract over every AI backend.

Each provider translates a prompt into its backend's protocol and returns a
GenerateResult, or raises a ProviderError tagged with an ErrorKind so the
gateway can decide whether to retry.

Provider-specific behaviors:
  - OpenAI: chat completions over HTTP; choice contents joined, usage reported
  - Azure: reserved slot in the selection switch, raises immediately
  - Mock: deterministic canned payloads per kind, no network, never fails
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ats_server.gateway.mock_payloads import mock_payload
from ats_server.gateway.normalizer import extract_text, parse_json_content
from ats_server.gateway.types import (
    ConfigurationError,
    ErrorKind,
    GatewayConfig,
    GenerateResult,
    ProviderError,
    ProviderName,
)

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Base class for all providers."""

    name: ProviderName

    def __init__(self, config: GatewayConfig):
        self.config = config

    @abstractmethod
    async def generate(
        self,
        kind: str,
        prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
    ) -> GenerateResult:
        """Produce a result for one prompt. Raises ProviderError on failure."""
        ...


# ---------------------------------------------------------------------------
# OpenAI (primary provider)
# ---------------------------------------------------------------------------


class OpenAIProvider(BaseProvider):
    """OpenAI Chat Completions provider."""

    name = ProviderName.OPENAI

    def __init__(self, config: GatewayConfig):
        super().__init__(config)
        if not config.api_key:
            raise ConfigurationError("AI_API_KEY is required for the openai provider")
        self.api_key = config.api_key
        self.api_url = config.api_url

    async def generate(
        self,
        kind: str,
        prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
    ) -> GenerateResult:
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        start = time.monotonic()

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(
                    self.api_url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.TimeoutException as e:
            raise ProviderError(f"OpenAI timeout after {timeout}s", kind=ErrorKind.TIMEOUT) from e
        except httpx.TransportError as e:
            # No HTTP status: connection refused, DNS, reset...
            raise ProviderError(f"OpenAI network error: {e}", kind=ErrorKind.TRANSIENT) from e

        latency_ms = int((time.monotonic() - start) * 1000)

        if resp.status_code >= 400:
            raise ProviderError.from_status(
                resp.status_code,
                f"OpenAI API {resp.status_code}: {_error_message(resp)}",
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError("OpenAI returned a non-JSON body", status_code=resp.status_code) from e

        choices = _checked_choices(data)
        text = extract_text(choices)
        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        tokens = usage.get("total_tokens")
        if tokens is None and ("prompt_tokens" in usage or "completion_tokens" in usage):
            tokens = usage.get("prompt_tokens", 0) + usage.get("completion_tokens", 0)

        return GenerateResult(
            text=text,
            json=parse_json_content(text),
            raw=data,
            tokens=tokens,
            meta={
                "provider": self.name.value,
                "model": data.get("model", model),
                "status": resp.status_code,
                "kind": kind,
                "latency_ms": latency_ms,
            },
        )


def _checked_choices(data: Any) -> list[dict] | None:
    """The `choices` list of a completion body; any other shape is non-retryable."""
    if not isinstance(data, dict):
        raise ProviderError(
            f"OpenAI returned a {type(data).__name__} body, expected an object", kind=ErrorKind.NON_RETRYABLE, status_code=200
        )
    choices = data.get("choices")
    if choices is None:
        return None
    if not isinstance(choices, list):
        raise ProviderError("OpenAI `choices` is not a list", kind=ErrorKind.NON_RETRYABLE, status_code=200)
    for choice in choices:
        if not isinstance(choice, dict) or not isinstance(choice.get("message") or {}, dict):
            raise ProviderError("OpenAI returned a malformed choice", kind=ErrorKind.NON_RETRYABLE, status_code=200)
    return choices


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return resp.text[:500]


# ---------------------------------------------------------------------------
# Azure (alternate slot)
# ---------------------------------------------------------------------------


class AzureProvider(BaseProvider):
    """Named alternative to the primary provider. Not implemented."""

    name = ProviderName.AZURE

    def __init__(self, config: GatewayConfig):
        raise ConfigurationError("AI_PROVIDER=azure is not implemented")

    async def generate(self, kind, prompt, *, model, temperature, max_tokens, timeout) -> GenerateResult:
        raise ConfigurationError("AI_PROVIDER=azure is not implemented")


# ---------------------------------------------------------------------------
# Mock
# ---------------------------------------------------------------------------


class MockProvider(BaseProvider):
    """Deterministic provider for tests and offline development."""

    name = ProviderName.MOCK

    async def generate(
        self,
        kind: str,
        prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
    ) -> GenerateResult:
        payload = mock_payload(kind)
        return GenerateResult(
            text=payload["text"],
            json=payload["json"],
            raw=None,
            tokens=payload["tokens"],
            meta={"provider": self.name.value, "model": model, "status": 200, "kind": kind},
        )


# ---------------------------------------------------------------------------
# Provider registry
# ---------------------------------------------------------------------------

PROVIDER_REGISTRY: dict[ProviderName, type[BaseProvider]] = {
    ProviderName.OPENAI: OpenAIProvider,
    ProviderName.AZURE: AzureProvider,
    ProviderName.MOCK: MockProvider,
}


def get_provider(config: GatewayConfig) -> BaseProvider:
    """Factory: select the provider for a gateway config.

    ``force_mock`` wins over the configured provider.
    """
    if config.force_mock:
        return MockProvider(config)
    try:
        name = ProviderName(str(getattr(config.provider, "value", config.provider)).lower())
    except ValueError:
        raise ConfigurationError(f"Unsupported AI provider: {config.provider!r}") from None
    return PROVIDER_REGISTRY[name](config)

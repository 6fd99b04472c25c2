"""Core types and DTOs for the AI Invocation Gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProviderName(str, Enum):
    """Backends selectable through AI_PROVIDER."""

    OPENAI = "openai"
    AZURE = "azure"  # extension point, not implemented
    MOCK = "mock"


class GenerationKind(str, Enum):
    """What a generation call (and the artifact it produces) represents."""

    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    SKILLS_OPTIMIZATION = "skills_optimization"
    COMPANY_RESEARCH = "company_research"
    MATCH = "match"


class ErrorKind(str, Enum):
    """Failure classification driving the retry decision."""

    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    NON_RETRYABLE = "non_retryable"
    CONFIGURATION = "configuration"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.TIMEOUT, ErrorKind.TRANSIENT)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GatewayError(Exception):
    """Base error raised by the gateway and its providers."""

    kind: ErrorKind = ErrorKind.NON_RETRYABLE

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        status_code: int | None = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.status_code = status_code
        self.attempts = attempts


class ConfigurationError(GatewayError):
    """Missing credential or unsupported/unimplemented provider selection."""

    kind = ErrorKind.CONFIGURATION


class ProviderError(GatewayError):
    """A provider call failed; ``kind`` tells whether it is worth retrying."""

    @classmethod
    def from_status(cls, status_code: int, message: str) -> ProviderError:
        """Classify an HTTP error status.

        5xx and 429 are transient, 408 is a timeout, every other 4xx is final.
        """
        if status_code == 408:
            kind = ErrorKind.TIMEOUT
        elif status_code == 429 or status_code >= 500:
            kind = ErrorKind.TRANSIENT
        else:
            kind = ErrorKind.NON_RETRYABLE
        return cls(message, kind=kind, status_code=status_code)


# ---------------------------------------------------------------------------
# Request options / result
# ---------------------------------------------------------------------------


@dataclass
class GenerateOptions:
    """Per-call overrides. ``None`` means "use the gateway default"."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    timeout_ms: int | None = None
    max_retries: int | None = None


@dataclass
class GenerateResult:
    """Normalized provider output.

    ``json`` is the parsed structured payload when the provider produced one;
    its shape is defined by the caller's prompt contract, never by the gateway.
    """

    text: str | None = None
    json: Any = None
    raw: Any = None
    tokens: int | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "json": self.json,
            "raw": self.raw,
            "tokens": self.tokens,
            "meta": self.meta,
        }


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    ok: bool
    retry_after_sec: int | None = None


# ---------------------------------------------------------------------------
# Gateway config
# ---------------------------------------------------------------------------


@dataclass
class GatewayConfig:
    """Provider selection, defaults and retry policy for one gateway instance."""

    provider: ProviderName | str = ProviderName.OPENAI
    api_key: str = ""
    api_url: str = "https://api.openai.com/v1/chat/completions"
    force_mock: bool = False

    default_model: str = "gpt-4o-mini"
    default_temperature: float = 0.2
    default_max_tokens: int = 800

    timeout_ms: int = 30_000
    max_retries: int = 2
    backoff_base_ms: int = 500
    backoff_max_ms: int = 10_000
    backoff_jitter_ratio: float = 0.5

    @classmethod
    def from_settings(cls, settings) -> GatewayConfig:
        return cls(
            provider=settings.ai_provider,
            api_key=settings.ai_api_key,
            api_url=settings.ai_api_url,
            force_mock=settings.fake_ai,
            default_model=settings.ai_model,
            default_temperature=settings.ai_temperature,
            default_max_tokens=settings.ai_max_tokens,
            timeout_ms=settings.ai_timeout_ms,
            max_retries=settings.ai_max_retries,
            backoff_base_ms=settings.ai_backoff_base_ms,
            backoff_max_ms=settings.ai_backoff_max_ms,
            backoff_jitter_ratio=settings.ai_backoff_jitter_ratio,
        )

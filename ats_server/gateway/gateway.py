"""AI Invocation Gateway: the single entry point handlers call for generation.

Composes, per call:
  1. Option resolution (per-call overrides over configured defaults)
  2. A timeout around each provider attempt (the in-flight call is cancelled)
  3. Retry with exponential backoff + jitter for TIMEOUT/TRANSIENT failures
  4. Immediate propagation of NON_RETRYABLE/CONFIGURATION failures

Usage:
    gateway = AiGateway(GatewayConfig.from_settings(settings))
    result = await gateway.generate("resume", prompt, GenerateOptions(max_tokens=1200))
"""

from __future__ import annotations

import asyncio
import logging
import time

from ats_server.core.metrics import GATEWAY_ATTEMPTS
from ats_server.gateway.providers import BaseProvider, get_provider
from ats_server.gateway.retry import backoff_for
from ats_server.gateway.types import (
    ErrorKind,
    GatewayConfig,
    GatewayError,
    GenerateOptions,
    GenerateResult,
    ProviderError,
)

logger = logging.getLogger(__name__)


class AiGateway:
    """Timeout + retry + provider selection behind one ``generate`` call.

    The provider is resolved at construction, so a missing credential or an
    unsupported selection raises ConfigurationError before any request runs.
    """

    def __init__(self, config: GatewayConfig, provider: BaseProvider | None = None):
        self.config = config
        self.provider = provider or get_provider(config)
        logger.info("AI gateway ready (provider=%s)", self.provider.name.value)

    @property
    def provider_name(self) -> str:
        return self.provider.name.value

    async def generate(
        self,
        kind: str,
        prompt: str,
        options: GenerateOptions | None = None,
    ) -> GenerateResult:
        """Run one generation. Raises GatewayError once retries are exhausted."""
        options = options or GenerateOptions()
        model = options.model or self.config.default_model
        temperature = options.temperature if options.temperature is not None else self.config.default_temperature
        max_tokens = options.max_tokens or self.config.default_max_tokens
        timeout_ms = options.timeout_ms or self.config.timeout_ms
        max_retries = options.max_retries if options.max_retries is not None else self.config.max_retries
        timeout = timeout_ms / 1000.0

        start = time.monotonic()
        attempt = 0
        while True:
            try:
                result = await asyncio.wait_for(
                    self.provider.generate(
                        kind,
                        prompt,
                        model=model,
                        temperature=temperature,
                        max_tokens=max_tokens,
                        timeout=timeout,
                    ),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                error: GatewayError = ProviderError(
                    f"{self.provider_name} call aborted after {timeout_ms}ms",
                    kind=ErrorKind.TIMEOUT,
                )
            except GatewayError as e:
                error = e
            else:
                GATEWAY_ATTEMPTS.labels(provider=self.provider_name, outcome="success").inc()
                result.meta.setdefault("provider", self.provider_name)
                result.meta.setdefault("model", model)
                result.meta["attempts"] = attempt + 1
                result.meta["total_latency_ms"] = int((time.monotonic() - start) * 1000)
                return result

            error.attempts = attempt + 1
            GATEWAY_ATTEMPTS.labels(provider=self.provider_name, outcome=error.kind.value).inc()

            if not error.kind.retryable or attempt >= max_retries:
                logger.warning(
                    "%s generation for kind=%s failed after %d attempt(s) (%s): %s",
                    self.provider_name,
                    kind,
                    attempt + 1,
                    error.kind.value,
                    error,
                )
                raise error

            delay = backoff_for(self.config, attempt)
            logger.info(
                "Retrying %s generation for kind=%s (attempt %d/%d) in %.2fs: %s",
                self.provider_name,
                kind,
                attempt + 1,
                max_retries,
                delay,
                error,
            )
            await asyncio.sleep(delay)
            attempt += 1

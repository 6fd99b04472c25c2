"""Exponential backoff with jitter for provider retries.

Backoff strategy:
  delay = min(base * 2^attempt + jitter, max_delay)
  jitter = random(0, base * jitter_ratio)
"""

from __future__ import annotations

import random

from ats_server.gateway.types import GatewayConfig


def calculate_backoff(
    attempt: int,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    jitter_ratio: float = 0.5,
) -> float:
    """Delay in seconds before retry number ``attempt`` (0-based)."""
    exponential = base_delay * (2**attempt)
    jitter = random.uniform(0, base_delay * jitter_ratio)
    return min(exponential + jitter, max_delay)


def backoff_for(config: GatewayConfig, attempt: int) -> float:
    return calculate_backoff(
        attempt=attempt,
        base_delay=config.backoff_base_ms / 1000.0,
        max_delay=config.backoff_max_ms / 1000.0,
        jitter_ratio=config.backoff_jitter_ratio,
    )

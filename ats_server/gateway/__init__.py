"""AI Invocation Gateway.

Narrow abstraction every AI-backed handler calls through:
  - Sliding-window Rate Limiter (per-key admission with retry-after)
  - Provider Adapters (OpenAI, unimplemented Azure slot, deterministic mock)
  - Invocation Gateway (timeout + retry with exponential backoff and jitter)
  - Response Normalizer (text/JSON extraction)
"""

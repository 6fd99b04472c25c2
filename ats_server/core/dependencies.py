from collections.abc import Callable
from uuid import UUID

import jwt
from fastapi import Depends, Header, Request

from ats_server.core.config import settings
from ats_server.core.exceptions import RateLimitedError, ServiceUnavailableError, UnauthorizedError
from ats_server.core.security import decode_access_token
from ats_server.gateway.gateway import AiGateway
from ats_server.gateway.rate_limiter import SlidingWindowRateLimiter
from ats_server.gateway.types import ConfigurationError, GatewayConfig


def _parse_user_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise UnauthorizedError("Invalid user id")


async def get_current_user_id(
    request: Request,
    authorization: str | None = Header(None, description="Bearer <token>"),
    x_user_id: str | None = Header(None, description="Development only: act as this user"),
) -> UUID:
    """Authenticated user id from a Supabase JWT (``sub`` claim)."""
    if authorization:
        if not authorization.startswith("Bearer "):
            raise UnauthorizedError("Invalid authorization header")
        try:
            payload = decode_access_token(authorization[7:])
        except jwt.PyJWTError:
            raise UnauthorizedError("Invalid or expired token")
        sub = payload.get("sub")
        if not sub:
            raise UnauthorizedError("Invalid token payload")
        user_id = _parse_user_id(sub)
    elif x_user_id and settings.allow_dev_auth:
        user_id = _parse_user_id(x_user_id)
    else:
        raise UnauthorizedError()

    request.state.user_id = user_id
    return user_id


def get_gateway(request: Request) -> AiGateway:
    """The application gateway, built on first use when startup did not create one."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        try:
            gateway = AiGateway(GatewayConfig.from_settings(settings))
        except ConfigurationError as e:
            raise ServiceUnavailableError(str(e)) from e
        request.app.state.gateway = gateway
    return gateway


def get_rate_limiter(request: Request) -> SlidingWindowRateLimiter:
    return request.app.state.rate_limiter


def rate_limit(endpoint: str) -> Callable:
    """Dependency factory: per-user limit of GENERATE_RATE_LIMIT calls per window for `endpoint`.

    Usage:
        @router.post("/resume", dependencies=[Depends(rate_limit("generate-resume"))])
    """

    async def _check(
        user_id: UUID = Depends(get_current_user_id),
        limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
    ) -> None:
        decision = limiter.check_limit(
            f"{endpoint}:{user_id}",
            settings.generate_rate_limit,
            settings.generate_rate_window_ms,
        )
        if not decision.ok:
            retry_after = decision.retry_after_sec if decision.retry_after_sec is not None else 60
            raise RateLimitedError(retry_after)

    return _check

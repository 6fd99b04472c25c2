"""HTTP-facing error hierarchy.

Every error carries a stable machine-readable ``code`` next to the
human-readable ``detail``; the handler registered in ``main`` renders both.
"""

from fastapi import HTTPException


class AppError(HTTPException):
    status_code: int = 500
    code: str = "internal_error"
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class BadRequestError(AppError):
    status_code = 400
    code = "bad_request"
    default_detail = "Bad request"


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Not authenticated"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"
    default_detail = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class RateLimitedError(AppError):
    status_code = 429
    code = "rate_limited"
    default_detail = "rate limited"

    def __init__(self, retry_after_sec: int, detail: str | None = None):
        self.retry_after_sec = retry_after_sec
        super().__init__(detail=detail, headers={"Retry-After": str(retry_after_sec)})


class UpstreamError(AppError):
    status_code = 502
    code = "ai_error"
    default_detail = "AI generation failed"


class ServiceUnavailableError(AppError):
    status_code = 503
    code = "ai_unavailable"
    default_detail = "AI provider is not configured"

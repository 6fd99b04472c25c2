import jwt

from ats_server.core.config import settings


def decode_access_token(token: str) -> dict:
    """Decode and validate a Supabase access token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token,
        settings.supabase_jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
    )

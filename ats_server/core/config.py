from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # PostgreSQL (Supabase database)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = "changeme"
    postgres_db: str = "ats_tracker"

    @property
    def postgres_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def postgres_url_sync(self) -> str:
        """For Alembic migrations (sync driver)."""
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Auth: tokens are issued by Supabase Auth and only verified here
    supabase_jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    allow_dev_auth: bool = False  # accept X-User-Id header instead of a JWT

    # AI provider
    ai_provider: str = "openai"  # openai | azure | mock
    ai_api_key: str = ""
    ai_api_url: str = "https://api.openai.com/v1/chat/completions"
    fake_ai: bool = False  # force the mock provider regardless of ai_provider
    ai_model: str = "gpt-4o-mini"
    allowed_ai_models: str = ""  # comma-separated allow-list for per-request overrides
    ai_temperature: float = 0.2
    ai_max_tokens: int = 800
    ai_timeout_ms: int = 30_000
    ai_max_retries: int = 2

    # Retry backoff: delay = min(base * 2^attempt + uniform(0, base * jitter_ratio), max)
    ai_backoff_base_ms: int = 500
    ai_backoff_max_ms: int = 10_000
    ai_backoff_jitter_ratio: float = 0.5

    # Per-user generation rate limit
    generate_rate_limit: int = 5
    generate_rate_window_ms: int = 60_000

    # Prompt guardrails
    prompt_max_chars: int = 16_000

    # App
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # CORS
    allowed_origins: str = "*"  # comma-separated

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable

    @property
    def allowed_ai_model_list(self) -> list[str]:
        return [m.strip() for m in self.allowed_ai_models.split(",") if m.strip()]

    @property
    def mock_mode(self) -> bool:
        return self.fake_ai or self.ai_provider.lower() == "mock"


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup in non-test environments."""
    errors: list[str] = []

    if not settings.mock_mode and not settings.ai_api_key:
        errors.append("AI_API_KEY is required unless FAKE_AI=true or AI_PROVIDER=mock")

    if not settings.allow_dev_auth and not settings.supabase_jwt_secret:
        errors.append("SUPABASE_JWT_SECRET must be set (or ALLOW_DEV_AUTH=true for local development)")

    if settings.app_env == "production":
        if settings.allowed_origins == "*":
            errors.append("ALLOWED_ORIGINS must not be '*' in production")
        if settings.app_debug:
            errors.append("APP_DEBUG must be false in production")
        if settings.allow_dev_auth:
            errors.append("ALLOW_DEV_AUTH must be false in production")
        if settings.fake_ai:
            errors.append("FAKE_AI must be false in production")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))

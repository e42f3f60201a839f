"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The session secret comes from the environment (never hardcoded in production)
    - get_settings() is cached (lru_cache): single instance per process
    - Cookie names derive from issuer_name, so two apps on one domain never collide

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Session token
    issuer_name: str = "chopshop"
    session_secret: str = "change-me-placeholder-secret-change-me-placeholder-secret-change-me"
    session_algorithm: str = "HS512"
    session_duration_seconds: int = 86_400

    # Cookies
    cookie_domain: str | None = None
    https_only_cookies: bool = True

    # Errors
    default_error_text: str = "An error has occurred. Please try the app again later."
    see_errors_right: str = "seeErrors"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def token_cookie_name(self) -> str:
        return f"_{self.issuer_name}_token"

    @property
    def xsrf_cookie_name(self) -> str:
        return f"_{self.issuer_name}_xsrf"


@lru_cache
def get_settings() -> Settings:
    return Settings()

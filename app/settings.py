from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.password_policy import PasswordPolicy


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    public_base_url: str = "http://localhost:8080"
    service_name: str = "Identity"
    default_zone_name: str = "uaa"

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"
    smtp_base_url: str = "http://smtp-mock:8025"
    http_timeout_seconds: float = 10.0

    # Action codes
    activation_code_ttl_seconds: int = 3600
    reset_code_ttl_seconds: int = 1800
    code_key_prefix: str = "code:"
    account_events_channel: str = "account-events"

    # Redirects
    default_redirect_url: str = "home"

    # Security / policies
    bcrypt_rounds: int = 12
    password_min_length: int = 8
    password_max_length: int = 255
    password_require_upper_case: int = 0
    password_require_lower_case: int = 0
    password_require_digit: int = 0
    password_require_special_character: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    def password_policy(self) -> PasswordPolicy:
        return PasswordPolicy(
            min_length=self.password_min_length,
            max_length=self.password_max_length,
            require_upper_case=self.password_require_upper_case,
            require_lower_case=self.password_require_lower_case,
            require_digit=self.password_require_digit,
            require_special_character=self.password_require_special_character,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

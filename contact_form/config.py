"""Application configuration"""
from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

PACKAGE_DIR = Path(__file__).resolve().parent

# Bundled contact form definition, used when no override is configured
DEFAULT_FORM_DEFINITION = PACKAGE_DIR / "resources" / "forms" / "contact-form.yaml"

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class Settings(BaseSettings):
    """Application settings"""

    # Webhook receiving the processed submissions
    webhook_url: Optional[str] = None
    webhook_secret_key: Optional[str] = None
    webhook_timeout: float = 10.0

    # Captcha (skipped unless both keys are set)
    captcha_site_key: Optional[str] = None
    captcha_secret_key: Optional[str] = None
    captcha_verify_url: str = RECAPTCHA_VERIFY_URL
    captcha_response_field: str = "g-recaptcha-response"

    # Contact form
    contact_source: Optional[str] = None  # Falls back to the request host
    contact_form_type: str = "contact"
    contact_form_definition: Path = DEFAULT_FORM_DEFINITION

    # Application
    environment: str = "development"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator(
        "webhook_url",
        "webhook_secret_key",
        "captcha_site_key",
        "captcha_secret_key",
        "contact_source",
        mode="before",
    )
    @classmethod
    def blank_as_none(cls, value):
        """Treat empty values from the environment as unset"""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.captcha_site_key and self.captcha_secret_key)

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"

EMAIL_PROVIDER_SMTP = "smtp"
EMAIL_PROVIDER_RESEND = "resend"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Sender / provider selection
    MAIL_FROM: str | None = None
    EMAIL_PROVIDER: str = EMAIL_PROVIDER_SMTP

    # SMTP relay settings
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    SMTP_TIMEOUT: float = 30.0

    # Transactional email API settings
    RESEND_API_KEY: str | None = None
    RESEND_API_URL: str = "https://api.resend.com"

    # Shared secret for the periodic reminder trigger
    CRON_SECRET: str | None = None

    # Interview store (managed document database HTTP API)
    INTERVIEW_STORE_URL: str | None = None
    INTERVIEW_STORE_TOKEN: str | None = None
    INTERVIEW_STORE_TIMEOUT: float = 15.0

    # Identity provider JWT settings (interview data-access routes)
    AUTH_JWKS_URL: str | None = None
    AUTH_ISSUER: str | None = None
    AUTH_AUDIENCE: str | None = None

    # Dates in every email are rendered in this one timezone
    DISPLAY_TIMEZONE: str = "UTC"

    # =================================================================
    # REMINDER SETTINGS
    # =================================================================
    REMINDER_LEAD_MINUTES: int = 60
    REMINDER_WINDOW_MINUTES: int = 5
    REMINDER_DEDUP_MAX_ENTRIES: int = 1000
    REMINDER_DEDUP_MAX_AGE_HOURS: int = 24
    REMINDER_INTERVAL_SECONDS: int = 300

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def is_production(self) -> bool:
        return self.environment == "production"

    def missing_email_settings(self) -> list[str]:
        """
        Names of the email settings that must be present before any send.

        The list depends on EMAIL_PROVIDER; an empty list means the configured
        transport can be built.
        """
        missing = []
        provider = self.EMAIL_PROVIDER.strip().lower()

        if provider == EMAIL_PROVIDER_RESEND:
            if not self.RESEND_API_KEY:
                missing.append("RESEND_API_KEY")
        elif provider == EMAIL_PROVIDER_SMTP:
            for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
                if not getattr(self, name):
                    missing.append(name)
        else:
            missing.append("EMAIL_PROVIDER")

        if not self.MAIL_FROM:
            missing.append("MAIL_FROM")

        return missing

    def jwks_url(self) -> str | None:
        """JWKS endpoint, derived from the issuer when not set explicitly."""
        if self.AUTH_JWKS_URL:
            return self.AUTH_JWKS_URL
        if self.AUTH_ISSUER:
            return f"{self.AUTH_ISSUER.rstrip('/')}/.well-known/jwks.json"
        return None

    def reminder_dedup_config(self) -> dict:
        return {
            "max_entries": self.REMINDER_DEDUP_MAX_ENTRIES,
            "max_age_ms": self.REMINDER_DEDUP_MAX_AGE_HOURS * 60 * 60 * 1000,
        }


settings = Settings()

"""ClickTales core — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── App ───────────────────────────────────────────────
    app_name: str = "ClickTales"
    environment: str = "development"
    debug: bool = True

    # ── Database (durable key-value store) ────────────────
    database_url: str = "sqlite+aiosqlite:///./clicktales.db"
    database_echo: bool = False

    # ── OTP ───────────────────────────────────────────────
    otp_code_width: int = 6
    otp_ttl_minutes: float = 10
    otp_sweep_interval_seconds: float = 300

    # ── Hosted auth provider ──────────────────────────────
    supabase_url: str = "https://yssclplclymzguvnkogo.supabase.co"
    supabase_anon_key: str = ""
    probe_timeout_seconds: float = 3.0

    # ── Mail relay ────────────────────────────────────────
    relay_base_url: str = "http://localhost:4000"
    relay_rate_limit_max: int = 5
    relay_rate_limit_window_seconds: float = 3600

    # ── SMTP ──────────────────────────────────────────────
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = '"ClickTales" <no-reply@clicktales.com>'

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Singleton settings instance
settings = Settings()

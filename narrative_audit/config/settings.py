from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_format: str = "text"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "narrative_audit"
    db_username: str = "narrative_audit"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    storage_backend: str = "supabase"
    supabase_url: str = ""
    supabase_service_key: str = ""
    upload_bucket: str = "uploads"
    report_bucket: str = "uploads"
    report_prefix: str = "reports"
    local_files_root: str = "/app/files"
    local_public_base_url: str = "http://localhost:8000/files"

    pdf_engine: str = "pdfplumber"

    generation_provider: str = "anthropic"
    generation_api_key: str = ""
    generation_base_url: str = ""
    generation_model: str = "claude-sonnet-4-5"
    generation_max_tokens: int = 16000
    generation_temperature: float = 1.0
    generation_timeout_seconds: int = 600
    generation_max_attempts: int = 3
    generation_retry_delays_seconds: list[float] = Field(
        default_factory=lambda: [2.0, 5.0, 10.0]
    )
    generation_input_price_per_million: float = 3.00
    generation_output_price_per_million: float = 15.00

    report_format: str = "html"
    report_title: str = "Narrative Sparring Diagnostic Report"

    upload_lookback_minutes: int = 10

    email_provider: str = "resend"
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com"
    email_from: str = "Narrative Sparring <reports@narrative-sparring.app>"
    email_timeout_seconds: int = 30
    email_attach_report: bool = False

    upload_token_secret: str = ""
    upload_token_ttl_hours: int = 48

    api_host: str = "0.0.0.0"
    api_port: int = 8000

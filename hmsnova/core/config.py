
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "HMS Nova API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"
    max_upload_size_mb: int = 10

    # OpenAI (SDS extraction)
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_max_tokens: int = Field(default=2000, alias="OPENAI_MAX_TOKENS")
    openai_timeout: int = Field(default=60, alias="OPENAI_TIMEOUT")
    openai_vision_timeout: int = Field(default=90, alias="OPENAI_VISION_TIMEOUT")
    max_pdf_pages_for_vision: int = Field(
        default=4, alias="MAX_PDF_PAGES_FOR_VISION",
    )  # sections 1-3 of an SDS carry the fields we need
    vision_dpi: int = Field(default=150, alias="VISION_DPI")
    sds_text_char_limit: int = Field(default=8000, alias="SDS_TEXT_CHAR_LIMIT")

    # SDS inbox matching
    sds_auto_apply_threshold: float = Field(
        default=0.8, alias="SDS_AUTO_APPLY_THRESHOLD",
    )  # match confidence above this is applied without review
    sds_suggest_threshold: float = Field(
        default=0.5, alias="SDS_SUGGEST_THRESHOLD",
    )  # match confidence above this is surfaced as a suggestion
    sds_parse_confidence_threshold: float = Field(
        default=0.7, alias="SDS_PARSE_CONFIDENCE_THRESHOLD",
    )  # parsed SDS data below this is never written to a chemical
    sds_lookback_days: int = Field(default=7, alias="SDS_LOOKBACK_DAYS")

    # Microsoft Graph (SDS mailbox)
    graph_tenant_id: str | None = Field(default=None, alias="AZURE_AD_TENANT_ID")
    graph_client_id: str | None = Field(default=None, alias="AZURE_AD_CLIENT_ID")
    graph_client_secret: str | None = Field(default=None, alias="AZURE_AD_CLIENT_SECRET")
    sds_mailbox_email: str | None = Field(default=None, alias="SDS_MAILBOX_EMAIL")
    graph_timeout: int = Field(default=30, alias="GRAPH_TIMEOUT")

    # Email (Resend)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    resend_from_email: str = Field(
        default="HMS Nova <noreply@hmsnova.no>", alias="RESEND_FROM_EMAIL",
    )

    # SMS
    sms_provider: str = Field(
        default="mock", alias="SMS_PROVIDER",
    )  # "link_mobility" | "intellisms" | "prosms" | "mock"
    sms_sender_name: str = Field(default="HMS Nova", alias="SMS_SENDER_NAME")
    link_mobility_username: str | None = Field(default=None, alias="LINK_MOBILITY_USERNAME")
    link_mobility_password: str | None = Field(default=None, alias="LINK_MOBILITY_PASSWORD")
    intellisms_username: str | None = Field(default=None, alias="INTELLISMS_USERNAME")
    intellisms_password: str | None = Field(default=None, alias="INTELLISMS_PASSWORD")
    prosms_api_key: str | None = Field(default=None, alias="PROSMS_API_KEY")
    notification_timeout: int = Field(default=15, alias="NOTIFICATION_TIMEOUT")

    # Scheduled jobs (called by the platform cron)
    cron_secret: str | None = Field(default=None, alias="CRON_SECRET")

    # Database (PostgreSQL in production, SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./hmsnova_dev.db",
        alias="DATABASE_URL",
    )

    # Multi-tenancy default
    default_tenant_id: str = Field(default="default", alias="DEFAULT_TENANT_ID")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def ai_enabled(self) -> bool:
        """AI features are available only when an OpenAI key is configured."""
        return bool(self.openai_api_key)

    @property
    def graph_enabled(self) -> bool:
        return bool(
            self.graph_tenant_id
            and self.graph_client_id
            and self.graph_client_secret
            and self.sds_mailbox_email
        )

settings = Settings()

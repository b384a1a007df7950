"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and upstream integrations.

    Environment variable names map directly to field names in uppercase.
    Example: `admin_api_key` reads from `ADMIN_API_KEY`.

    Attributes:
        environment_name: Runtime environment label (`development` exposes raw error messages).
        application_host: Host interface for web server binding.
        port: Web server port.
        version: Service version reported by health and status endpoints.
        admin_api_key: Shared secret expected in the `x-api-key` header of admin routes.
        cors_origin: Comma-separated CORS allow-list; empty reflects any origin.
        paypal_client_id: PayPal REST client id.
        paypal_secret: PayPal REST client secret.
        paypal_env: PayPal environment selector (`live` or `sandbox`).
        paypal_webhook_id: PayPal webhook id used for signature verification.
        google_sheets_id: Spreadsheet id holding revenue bookkeeping.
        google_sheets_api_key: Google API key used for Sheets values reads.
        google_sheets_revenue_range: A1 range of the month-to-date revenue cell.
        revenue_target: Monthly revenue goal used for progress reporting.
        upstream_timeout_seconds: HTTP timeout for upstream provider calls.
        admin_status_timeout_seconds: Upper bound for each admin status fan-out read.
        admin_rate_limit_max_requests: Admin requests allowed per client IP per window.
        admin_rate_limit_window_seconds: Admin rate-limit window length.
        dashboard_dir: Directory holding the static dashboard bundle.
        log_level: Root log level name.
        log_format: Log renderer (`console` or `json`).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="production")
    application_host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    version: str = Field(default="1.0.0")
    admin_api_key: str = Field(default="")
    cors_origin: str = Field(default="")
    paypal_client_id: str = Field(default="")
    paypal_secret: str = Field(default="")
    paypal_env: str = Field(default="sandbox")
    paypal_webhook_id: str = Field(default="")
    google_sheets_id: str = Field(default="")
    google_sheets_api_key: str = Field(default="")
    google_sheets_revenue_range: str = Field(default="Dashboard!B2", min_length=1)
    revenue_target: float = Field(default=100000, gt=0)
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)
    admin_status_timeout_seconds: float = Field(default=15.0, gt=0)
    admin_rate_limit_max_requests: int = Field(default=100, ge=1)
    admin_rate_limit_window_seconds: float = Field(default=900.0, gt=0)
    dashboard_dir: str = Field(default="frontend")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator(
        "admin_api_key",
        "paypal_client_id",
        "paypal_secret",
        "paypal_webhook_id",
        "google_sheets_id",
        "google_sheets_api_key",
    )
    @classmethod
    def _strip_secret_values(cls, value: str) -> str:
        return value.strip()

    @field_validator("paypal_env")
    @classmethod
    def _validate_paypal_env(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in {"live", "sandbox"}:
            raise ValueError("paypal_env must be `live` or `sandbox`")
        return normalized_value

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in {"console", "json"}:
            raise ValueError("log_format must be `console` or `json`")
        return normalized_value

    def config_cors_origins(self) -> list[str]:
        """Return the parsed CORS allow-list.

        Returns:
            list[str]: Trimmed non-empty origins; empty when any origin is allowed.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    def config_is_development(self) -> bool:
        """Return whether the runtime environment is development."""

        return self.environment_name.strip().lower() == "development"


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error

# =============================================================================
# Configuration Models Module
# =============================================================================
# Provides Pydantic Settings models for the archive job:
# - ArchivePolicySettings: retention window, batch size, throttling policy
# - SourceSettings: MongoDB-compatible document store holding live records
# - DestinationSettings: S3-compatible object store receiving archives
# - ArchiveSettings: the three above, loaded once at process start
# =============================================================================

from typing import Optional
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.errors import ConfigError

__all__ = [
    "ArchivePolicySettings",
    "SourceSettings",
    "DestinationSettings",
    "ArchiveSettings",
    "load_archive_settings",
]


_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    case_sensitive=False,
    populate_by_name=True,
    extra="ignore",  # Ignore unrelated env vars from shared .env files
)


# =============================================================================
# Archive Policy Settings
# =============================================================================

class ArchivePolicySettings(BaseSettings):
    """
    Policy knobs for a single archive run.

    Maps environment variables:
    - RETENTION_WINDOW_DAYS → retention_window_days (required)
    - ARCHIVE_BATCH_SIZE → batch_size
    - ARCHIVE_BACKOFF_MIN_SECONDS → backoff_min_seconds
    - ARCHIVE_BACKOFF_MAX_SECONDS → backoff_max_seconds
    - ARCHIVE_THROTTLE_MESSAGE → throttle_message
    - ARCHIVE_MAX_CONSECUTIVE_THROTTLES → max_consecutive_throttles
    """

    retention_window_days: int = Field(..., ge=0, validation_alias="RETENTION_WINDOW_DAYS", description="Minimum record age in days")
    batch_size: int = Field(20, ge=1, validation_alias="ARCHIVE_BATCH_SIZE", description="Records fetched per source round-trip")
    backoff_min_seconds: float = Field(1.5, ge=0, validation_alias="ARCHIVE_BACKOFF_MIN_SECONDS", description="Lower bound of the throttling pause")
    backoff_max_seconds: float = Field(3.0, ge=0, validation_alias="ARCHIVE_BACKOFF_MAX_SECONDS", description="Upper bound of the throttling pause")
    throttle_message: str = Field("request rate is large", min_length=1, validation_alias="ARCHIVE_THROTTLE_MESSAGE", description="Message fragment identifying throttling errors")
    max_consecutive_throttles: Optional[int] = Field(None, ge=1, validation_alias="ARCHIVE_MAX_CONSECUTIVE_THROTTLES", description="Give up after this many pauses without progress (unset = never)")

    model_config = _SETTINGS_CONFIG

    @model_validator(mode="after")
    def check_backoff_window(self) -> "ArchivePolicySettings":
        if self.backoff_min_seconds > self.backoff_max_seconds:
            raise ValueError(
                f"backoff_min_seconds ({self.backoff_min_seconds}) must not exceed "
                f"backoff_max_seconds ({self.backoff_max_seconds})"
            )
        return self


# =============================================================================
# Source Settings (Document Store)
# =============================================================================

class SourceSettings(BaseSettings):
    """
    Configuration for the live document store.

    Maps environment variables:
    - SOURCE_CONNECTION_STRING → connection_string
    - SOURCE_DATABASE_NAME → database
    - SOURCE_COLLECTION_NAME → collection
    - SOURCE_ID_FIELD → id_field (default: "_id")
    - SOURCE_CREATED_AT_FIELD → created_at_field (default: "_created_at")
    """

    connection_string: str = Field(..., min_length=1, validation_alias="SOURCE_CONNECTION_STRING", description="MongoDB connection URI")
    database: str = Field(..., min_length=1, validation_alias="SOURCE_DATABASE_NAME", description="Database name")
    collection: str = Field(..., min_length=1, validation_alias="SOURCE_COLLECTION_NAME", description="Collection to archive from")
    id_field: str = Field("_id", min_length=1, validation_alias="SOURCE_ID_FIELD", description="Unique identity field")
    created_at_field: str = Field("_created_at", min_length=1, validation_alias="SOURCE_CREATED_AT_FIELD", description="Creation timestamp field")

    model_config = _SETTINGS_CONFIG

    @field_validator("connection_string")
    @classmethod
    def validate_scheme(cls, v: str) -> str:
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("connection string must start with mongodb:// or mongodb+srv://")
        return v


# =============================================================================
# Destination Settings (Object Store)
# =============================================================================

class DestinationSettings(BaseSettings):
    """
    Configuration for the S3-compatible archive store.

    The connection string carries endpoint and credentials in URL form:
    ``http(s)://ACCESS_KEY:SECRET_KEY@host:port``. Credentials may be
    percent-encoded.

    Maps environment variables:
    - DESTINATION_CONNECTION_STRING → connection_string
    - DESTINATION_CONTAINER_NAME → bucket
    """

    connection_string: str = Field(..., validation_alias="DESTINATION_CONNECTION_STRING", description="Object store URL with credentials")
    bucket: str = Field(..., min_length=3, validation_alias="DESTINATION_CONTAINER_NAME", description="Archive bucket name")

    model_config = _SETTINGS_CONFIG

    @field_validator("connection_string")
    @classmethod
    def validate_connection_string(cls, v: str) -> str:
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https"):
            raise ValueError("connection string scheme must be http or https")
        if not parts.hostname:
            raise ValueError("connection string has no host")
        if not parts.username or not parts.password:
            raise ValueError("connection string must include access and secret keys")
        return v

    @property
    def endpoint(self) -> str:
        """Endpoint as host[:port], the form the minio client expects."""
        parts = urlsplit(self.connection_string)
        if parts.port:
            return f"{parts.hostname}:{parts.port}"
        return parts.hostname

    @property
    def access_key(self) -> str:
        return unquote(urlsplit(self.connection_string).username)

    @property
    def secret_key(self) -> str:
        return unquote(urlsplit(self.connection_string).password)

    @property
    def use_ssl(self) -> bool:
        return urlsplit(self.connection_string).scheme == "https"


# =============================================================================
# Archive Settings
# =============================================================================

class ArchiveSettings(BaseModel):
    """
    Complete job configuration, constructed once and passed explicitly to
    the Dagster definitions.
    """

    policy: ArchivePolicySettings
    source: SourceSettings
    destination: DestinationSettings


def load_archive_settings() -> ArchiveSettings:
    """
    Read all archive settings from the environment (and `.env`).

    Raises:
        ConfigError: If any required value is missing or fails validation
    """
    try:
        return ArchiveSettings(
            policy=ArchivePolicySettings(),
            source=SourceSettings(),
            destination=DestinationSettings(),
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid archive configuration: {exc}") from exc

"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    DatabaseSchema     → database.yaml
    LoggingSchema      → logging.yaml
    FeaturesSchema     → features.yaml
    SecuritySchema     → security.yaml
    StorageSchema      → storage.yaml
    ConcurrencySchema  → concurrency.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: int
    external_api: int


class TelegramAppSchema(_StrictBase):
    admin_ids: list[str]
    """Telegram user ids that receive the admin role on login."""


class GallerySchema(_StrictBase):
    max_photos_per_gallery: int = Field(gt=0)
    max_upload_bytes: int = Field(gt=0)
    allowed_mime_types: list[str]
    preview_count: int = Field(ge=0)
    folder_prefix: str


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    telegram: TelegramAppSchema
    gallery: GallerySchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    driver: str
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    security_startup_checks_enabled: bool
    api_detailed_errors: bool
    api_request_logging: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_days: int
    audience: str


class SessionCookieSchema(_StrictBase):
    name: str
    http_only: bool
    secure: bool
    same_site: Literal["lax", "strict", "none"]


class SessionSchema(_StrictBase):
    transport: Literal["bearer", "cookie"]
    cookie: SessionCookieSchema


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int


class CorsEnforcementSchema(_StrictBase):
    enforce_in_production: bool


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    session: SessionSchema
    secrets_validation: SecretsValidationSchema
    cors: CorsEnforcementSchema


# =============================================================================
# storage.yaml
# =============================================================================


class CloudinarySchema(_StrictBase):
    cloud_name: str
    thumbnail_width: int
    thumbnail_height: int


class S3Schema(_StrictBase):
    bucket: str
    region: str
    public_base_url: str | None = None


class StorageSchema(_StrictBase):
    provider: str
    """Active backend name; resolved once at startup (cloudinary, s3)."""

    timeout_seconds: float = Field(gt=0)
    cloudinary: CloudinarySchema
    s3: S3Schema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: int


class SemaphoresSchema(_StrictBase):
    external_api: int


class ShutdownSchema(_StrictBase):
    drain_seconds: int


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    semaphores: SemaphoresSchema
    shutdown: ShutdownSchema

"""
Unit Tests for Configuration Management.

Tests run against the real YAML files under config/settings/.
Secrets come from the environment exported by the root conftest.
"""

import pytest
from pydantic import ValidationError

from wedding_tma.backend.core.config import (
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_server_base_url,
    get_settings,
    load_yaml_config,
)
from wedding_tma.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    SecuritySchema,
    StorageSchema,
)


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


class TestFindProjectRoot:
    def test_finds_root_with_settings_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()


class TestLoadYamlConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does-not-exist.yaml")


class TestAppConfig:
    """The shipped YAML files validate against their schemas."""

    def test_application_defaults(self):
        app = get_app_config().application
        assert isinstance(app, ApplicationSchema)
        assert app.api_prefix == "/api/v1"
        assert app.gallery.max_photos_per_gallery == 50
        assert app.gallery.max_upload_bytes == 10 * 1024 * 1024
        assert app.gallery.allowed_mime_types == ["image/jpeg", "image/png", "image/webp"]
        assert app.gallery.preview_count == 3

    def test_security_defaults(self):
        security = get_app_config().security
        assert isinstance(security, SecuritySchema)
        assert security.jwt.access_token_expire_days == 30
        assert security.session.transport in ("bearer", "cookie")
        assert security.session.cookie.name == "jwt"

    def test_storage_defaults(self):
        storage = get_app_config().storage
        assert isinstance(storage, StorageSchema)
        assert storage.provider in ("cloudinary", "s3")
        assert storage.timeout_seconds == 30

    def test_concurrency_loads(self):
        assert isinstance(get_app_config().concurrency, ConcurrencySchema)

    def test_app_config_is_cached(self):
        assert get_app_config() is get_app_config()


class TestSchemas:
    def test_unknown_keys_are_rejected(self):
        raw = get_app_config().storage.model_dump()
        raw["bucket_name"] = "typo"
        with pytest.raises(ValidationError):
            StorageSchema(**raw)

    def test_invalid_session_transport_is_rejected(self):
        raw = get_app_config().security.model_dump()
        raw["session"]["transport"] = "header"
        with pytest.raises(ValidationError):
            SecuritySchema(**raw)

    def test_zero_storage_timeout_is_rejected(self):
        raw = get_app_config().storage.model_dump()
        raw["timeout_seconds"] = 0
        with pytest.raises(ValidationError):
            StorageSchema(**raw)


class TestSettings:
    def test_bot_tokens_are_split_and_trimmed(self):
        settings = Settings(
            db_password="x",
            jwt_secret="y",
            telegram_bot_tokens=" 1:a , 2:b ,, ",
            _env_file=None,
        )
        assert settings.telegram_bot_token_list == ["1:a", "2:b"]

    def test_provider_secrets_default_to_empty(self):
        settings = Settings(db_password="x", jwt_secret="y", telegram_bot_tokens="1:a", _env_file=None)
        assert settings.cloudinary_api_key == ""
        assert settings.aws_secret_access_key == ""

    def test_reads_environment(self):
        assert len(get_settings().telegram_bot_token_list) == 2


class TestUrls:
    def test_database_url_uses_asyncpg(self):
        url = get_database_url()
        assert url.startswith("postgresql+asyncpg://")
        assert ":test_pass@" in url

    def test_sync_database_url(self):
        assert get_database_url(async_driver=False).startswith("postgresql://")

    def test_server_base_url(self):
        base_url, timeout = get_server_base_url()
        assert base_url.startswith("http://")
        assert timeout > 0

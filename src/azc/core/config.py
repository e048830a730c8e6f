"""
azc configuration management.

Client settings (logging, transfer sizes) are validated with Pydantic and
persisted as JSON. Storage credentials are resolved with pydantic-settings,
environment variables taking precedence over a properties file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from azc.core.exceptions import SetupError

MIB = 1024 * 1024
GIB = 1024 * MIB

DEFAULT_PROPERTIES_FILE = Path("azc.properties")
DEFAULT_CONFIG_FILE = Path.home() / ".azc" / "config.json"


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = False
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: Path.home() / ".azc" / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class TransferConfig(BaseModel):
    """Block and range sizes used by the transfer engine."""

    block_size: int = Field(default=8 * MIB, ge=1, le=4000 * MIB)
    max_object_size: int = Field(default=GIB, ge=1)
    download_range: int = Field(default=GIB, ge=1)
    page_size: int = Field(default=1000, ge=1, le=5000)

    @model_validator(mode="after")
    def check_block_fits(self) -> TransferConfig:
        if self.block_size > self.max_object_size:
            raise ValueError("block_size cannot exceed max_object_size")
        return self


class AzcConfig(BaseModel):
    """Main azc client configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    transfer: TransferConfig = Field(default_factory=TransferConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> AzcConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_FILE

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_FILE

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        if self.logging.file_enabled:
            self.logging.log_directory.mkdir(parents=True, exist_ok=True)


class StorageSettings(BaseSettings):
    """Account, container and proxy settings for the blob service.

    Values come from the environment first and fall back to the properties
    file passed as ``_env_file``. Empty environment variables are ignored.
    """

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    account_name: str = Field(validation_alias=AliasChoices("AZURE_STORAGE_ACCOUNT", "account_name"))
    account_key: str = Field(
        validation_alias=AliasChoices("AZURE_STORAGE_ACCESS_KEY", "account_key"),
        repr=False,
    )
    container_name: str = Field(validation_alias=AliasChoices("CONTAINER_NAME", "container_name"))
    use_proxy: bool = Field(default=False, validation_alias=AliasChoices("USE_PROXY", "use_proxy"))
    proxy_host: str | None = Field(default=None, validation_alias=AliasChoices("HTTPS_PROXY", "proxy_host"))
    proxy_port: int | None = Field(
        default=None,
        validation_alias=AliasChoices("HTTPS_PROXY_PORT", "proxy_port"),
        ge=1,
        le=65535,
    )

    @field_validator("account_name", "account_key", "container_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("proxy_host")
    @classmethod
    def strip_scheme(cls, v: str | None) -> str | None:
        # HTTPS_PROXY often holds a URL such as http://host:3128
        if v is None:
            return None
        v = v.strip()
        if "://" in v:
            v = v.split("://", 1)[1]
        return v.rstrip("/") or None

    @model_validator(mode="after")
    def check_proxy(self) -> StorageSettings:
        if self.use_proxy:
            host, port = self._proxy_address()
            if not host or port is None:
                raise ValueError("USE_PROXY requires HTTPS_PROXY and HTTPS_PROXY_PORT")
        return self

    def _proxy_address(self) -> tuple[str, int | None]:
        """Host and port, taking the port from the host value when not set separately."""
        parts = urlsplit(f"//{self.proxy_host or ''}")
        return parts.hostname or "", self.proxy_port or parts.port

    @property
    def account_url(self) -> str:
        return f"https://{self.account_name}.blob.core.windows.net"

    @property
    def proxy_url(self) -> str | None:
        if not self.use_proxy:
            return None
        host, port = self._proxy_address()
        return f"http://{host}:{port}"


def load_settings(properties_path: Path | None = None) -> StorageSettings:
    """Resolve storage settings, raising SetupError when incomplete."""
    if properties_path is None:
        properties_path = DEFAULT_PROPERTIES_FILE

    env_file = properties_path if properties_path.exists() else None
    try:
        return StorageSettings(_env_file=env_file)
    except ValidationError as e:
        missing = [
            str(err["loc"][0]) if err.get("loc") else "settings"
            for err in e.errors()
        ]
        raise SetupError(
            f"Invalid storage settings ({', '.join(missing)}); "
            f"set AZURE_STORAGE_ACCOUNT, AZURE_STORAGE_ACCESS_KEY and CONTAINER_NAME "
            f"in the environment or in {properties_path}"
        ) from e


def load_config(config_path: Path | None = None) -> AzcConfig:
    """Load or create configuration."""
    config = AzcConfig.load(config_path)
    config.ensure_directories()
    return config

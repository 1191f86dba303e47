"""Environment-backed settings shared by the core, adapters and CLI.

Read once, lazily, through ``get_config()``; tests call
``clear_config_cache()`` after changing the environment::

    threshold = get_config().default_threshold
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import TrustThreshold

DEFAULT_GRAPHQL_ENDPOINT = "https://mainnet.intuition.sh/v1/graphql"


class CoreSettings(BaseSettings):
    """Core configuration settings for Trustprint.

    Most settings use the TRUSTPRINT_ prefix. The indexer endpoint and the
    intercom directory keep the names the surrounding tools already export.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- adapters --

    graphql_endpoint: str = Field(
        default=DEFAULT_GRAPHQL_ENDPOINT,
        description="GraphQL indexer endpoint for identity/claim signals",
        validation_alias="INTUITION_GRAPHQL_ENDPOINT",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for indexer requests",
        validation_alias="TRUSTPRINT_REQUEST_TIMEOUT",
    )
    intercom_dir: str = Field(
        default=str(Path.home() / ".clawdbot" / "intercom"),
        description="Directory of intercom message files",
        validation_alias="INTERCOM_DIR",
    )

    # -- trust evaluation --

    min_stake: float = Field(
        default=0.1,
        description="Minimum for-stake required for a trusted verdict",
        validation_alias="TRUSTPRINT_MIN_STAKE",
    )
    min_sentiment: float = Field(
        default=0.8,
        description="Minimum sentiment (for / total stake) for a trusted verdict",
        validation_alias="TRUSTPRINT_MIN_SENTIMENT",
    )
    identity_predicate: str = Field(
        default="is",
        description="Predicate label of the identity claim triple",
        validation_alias="TRUSTPRINT_IDENTITY_PREDICATE",
    )
    identity_object: str = Field(
        default="AI Agent",
        description="Object label of the identity claim triple",
        validation_alias="TRUSTPRINT_IDENTITY_OBJECT",
    )

    # -- logging --

    log_level: str = Field(
        default="INFO",
        description="Root log level name",
        validation_alias="TRUSTPRINT_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="json, text, or empty for JSON whenever stderr is not a TTY",
        validation_alias="TRUSTPRINT_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Also write JSON log lines to this file",
        validation_alias="TRUSTPRINT_LOG_FILE",
    )

    @property
    def default_threshold(self) -> TrustThreshold:
        """Threshold built from min_stake / min_sentiment."""
        return TrustThreshold(min_stake=self.min_stake, min_sentiment=self.min_sentiment)

    @property
    def intercom_path(self) -> Path:
        return Path(self.intercom_dir).expanduser()


_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Return the process-wide settings, loading them on first use."""
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _config
    _config = None

"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

RAILWAY_GRAPHQL_URL = "https://backboard.railway.app/graphql/v2"
RAILWAY_REST_URL = "https://backboard.railway.app/v1"
GITHUB_API_URL = "https://api.github.com"

Strategy = Literal["redeploy", "service", "workflow"]


class DeployTarget(BaseModel):
    """Hosting platform project/service/environment to redeploy."""

    model_config = ConfigDict(frozen=True)

    base_url: str = RAILWAY_GRAPHQL_URL
    rest_url: str = RAILWAY_REST_URL
    project_id: str = ""
    service_id: str = ""
    environment_id: str = ""
    token: str = Field(default="", repr=False)

    def missing_fields(self, url_field: str = "base_url") -> list[str]:
        """Empty required fields; ``url_field`` names the endpoint the strategy uses."""
        return [
            name
            for name in (url_field, "token", "project_id", "service_id", "environment_id")
            if not getattr(self, name)
        ]


class WorkflowTarget(BaseModel):
    """GitHub Actions workflow used by the ``workflow`` strategy."""

    model_config = ConfigDict(frozen=True)

    api_url: str = GITHUB_API_URL
    token: str = Field(default="", repr=False)
    owner: str = ""
    repo: str = ""
    workflow: str = ""
    ref: str = "main"

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("api_url", "token", "owner", "repo", "workflow", "ref")
            if not getattr(self, name)
        ]


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 3000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GHOSTRELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    railway: DeployTarget = Field(default_factory=DeployTarget)
    workflow: WorkflowTarget = Field(default_factory=WorkflowTarget)
    server: ServerConfig = Field(default_factory=ServerConfig)
    strategy: Strategy = "redeploy"
    timeout: float = Field(default=15.0, gt=0)
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Env vars, then .env, win over YAML passed in as init kwargs
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    def deploy_target(self) -> DeployTarget | WorkflowTarget:
        """Target consumed by the configured trigger strategy."""
        if self.strategy == "workflow":
            return self.workflow
        return self.railway


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("GHOSTRELAY_CONFIG")

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # YAML values as defaults, env vars override
    return Settings(**yaml_data)

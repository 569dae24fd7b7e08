"""Tests for settings loading and deploy targets."""

import pytest
from pydantic import ValidationError

from ghostrelay.config import (
    RAILWAY_GRAPHQL_URL,
    RAILWAY_REST_URL,
    DeployTarget,
    Settings,
    WorkflowTarget,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("GHOSTRELAY_CONFIG", raising=False)
    monkeypatch.delenv("GHOSTRELAY_STRATEGY", raising=False)
    monkeypatch.delenv("GHOSTRELAY_RAILWAY__TOKEN", raising=False)
    monkeypatch.delenv("GHOSTRELAY_SERVER__PORT", raising=False)


class TestDeployTarget:
    def test_defaults(self):
        target = DeployTarget()
        assert target.base_url == RAILWAY_GRAPHQL_URL
        assert target.missing_fields() == [
            "token", "project_id", "service_id", "environment_id",
        ]

    def test_complete(self, target):
        assert target.missing_fields() == []

    def test_rest_url_default(self):
        target = DeployTarget()
        assert target.rest_url == RAILWAY_REST_URL
        assert "graphql" not in target.rest_url

    def test_missing_fields_checks_named_url(self, target):
        no_rest = target.model_copy(update={"rest_url": ""})
        assert no_rest.missing_fields() == []
        assert no_rest.missing_fields(url_field="rest_url") == ["rest_url"]

    def test_frozen(self, target):
        with pytest.raises(ValidationError):
            target.token = "other"

    def test_token_hidden_from_repr(self, target):
        assert target.token not in repr(target)


class TestWorkflowTarget:
    def test_defaults(self):
        wf = WorkflowTarget()
        assert wf.api_url == "https://api.github.com"
        assert wf.ref == "main"
        assert wf.missing_fields() == ["token", "owner", "repo", "workflow"]

    def test_complete(self, workflow_target):
        assert workflow_target.missing_fields() == []


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.strategy == "redeploy"
        assert settings.timeout == 15.0
        assert settings.server.port == 3000
        assert settings.server.bind == "0.0.0.0"
        assert settings.log_level == "INFO"
        assert settings.log_json is False

    def test_deploy_target_follows_strategy(self, target, workflow_target):
        settings = Settings(railway=target, workflow=workflow_target)
        assert settings.deploy_target() is settings.railway
        settings = Settings(railway=target, workflow=workflow_target, strategy="service")
        assert settings.deploy_target() is settings.railway
        settings = Settings(railway=target, workflow=workflow_target, strategy="workflow")
        assert settings.deploy_target() is settings.workflow

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(strategy="carrier-pigeon")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(timeout=0)

    def test_nested_env(self, monkeypatch):
        monkeypatch.setenv("GHOSTRELAY_RAILWAY__TOKEN", "env-token")
        monkeypatch.setenv("GHOSTRELAY_STRATEGY", "service")
        settings = Settings()
        assert settings.railway.token == "env-token"
        assert settings.strategy == "service"


class TestLoadSettings:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "strategy: workflow\n"
            "timeout: 10\n"
            "workflow:\n"
            "  owner: acme\n"
            "  repo: blog-site\n"
            "  workflow: deploy.yml\n"
        )
        settings = load_settings(path)
        assert settings.strategy == "workflow"
        assert settings.timeout == 10
        assert settings.workflow.owner == "acme"
        assert settings.workflow.missing_fields() == ["token"]

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("railway:\n  token: yaml-token\n  project_id: p1\n")
        monkeypatch.setenv("GHOSTRELAY_RAILWAY__TOKEN", "env-token")
        settings = load_settings(path)
        assert settings.railway.token == "env-token"
        assert settings.railway.project_id == "p1"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "relay.yaml"
        path.write_text("server:\n  port: 8080\n")
        monkeypatch.setenv("GHOSTRELAY_CONFIG", str(path))
        assert load_settings().server.port == 8080

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.strategy == "redeploy"

    def test_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(
            "GHOSTRELAY_RAILWAY__TOKEN=dotenv-token\n"
            "GHOSTRELAY_SERVER__PORT=8123\n"
            "PORT=9999\n"
        )
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.railway.token == "dotenv-token"
        assert settings.server.port == 8123

    def test_dotenv_overrides_yaml(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("GHOSTRELAY_SERVER__PORT=8123\n")
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 7000\n  bind: 127.0.0.1\n")
        monkeypatch.chdir(tmp_path)
        settings = load_settings(path)
        assert settings.server.port == 8123
        assert settings.server.bind == "127.0.0.1"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path).server.port == 3000

"""
Process configuration tests.

- Deployment mode comes from rules unless overridden by env
- Invalid overrides fail with a clear message
- Required env is enforced at startup
"""

from __future__ import annotations

import pytest

from memberships.app_shell.config import (
    DEPLOYMENT_MODE_ENV,
    SECRET_KEY_ENV,
    USER_TOKEN_ENV,
    build_config,
    missing_required_env,
    resolve_deployment_mode,
    validate_ops_rules,
)
from memberships.domain.entities import DeploymentMode
from memberships.rules.models import Rules


class TestResolveDeploymentMode:
    def test_rules_value_without_override(self, rules: Rules) -> None:
        assert resolve_deployment_mode(rules, {}) is DeploymentMode.AUTHORITATIVE

    def test_env_override(self, rules: Rules) -> None:
        env = {DEPLOYMENT_MODE_ENV: "connected_client"}
        assert resolve_deployment_mode(rules, env) is DeploymentMode.CONNECTED_CLIENT

    def test_override_is_case_insensitive(self, rules: Rules) -> None:
        env = {DEPLOYMENT_MODE_ENV: " Connected_Client "}
        assert resolve_deployment_mode(rules, env) is DeploymentMode.CONNECTED_CLIENT

    def test_invalid_override(self, rules: Rules) -> None:
        with pytest.raises(ValueError, match="must be one of"):
            resolve_deployment_mode(rules, {DEPLOYMENT_MODE_ENV: "hybrid"})


class TestBuildConfig:
    def test_identity_from_rules(self, rules: Rules) -> None:
        config = build_config(rules, env={})

        assert config.identity.site_id == 1
        assert config.deployment_mode is DeploymentMode.AUTHORITATIVE
        assert config.locale == "en_US"
        assert config.user_token is None

    def test_user_token_from_env(self, rules: Rules) -> None:
        config = build_config(rules, env={USER_TOKEN_ENV: "tok"})
        assert config.user_token == "tok"

    def test_secret_key_from_env(self, rules: Rules) -> None:
        assert build_config(rules, env={SECRET_KEY_ENV: "s"}).secret_key == "s"
        assert build_config(rules, env={}).secret_key is None

    def test_empty_token_is_none(self, rules: Rules) -> None:
        config = build_config(rules, env={USER_TOKEN_ENV: ""})
        assert config.user_token is None


class TestOpsValidation:
    def test_authoritative_needs_secret(self, rules: Rules) -> None:
        missing = missing_required_env(rules, DeploymentMode.AUTHORITATIVE, {})
        assert missing == [SECRET_KEY_ENV]

    def test_authoritative_needs_no_token(self, rules: Rules) -> None:
        env = {SECRET_KEY_ENV: "s"}
        assert missing_required_env(rules, DeploymentMode.AUTHORITATIVE, env) == []

    def test_connected_client_needs_token(self, rules: Rules) -> None:
        missing = missing_required_env(rules, DeploymentMode.CONNECTED_CLIENT, {})
        assert missing == [USER_TOKEN_ENV]

    def test_validate_passes(self, rules: Rules) -> None:
        validate_ops_rules(rules, env={SECRET_KEY_ENV: "s"})

    def test_validate_exits_when_env_missing(self, rules: Rules) -> None:
        with pytest.raises(SystemExit) as exc:
            validate_ops_rules(rules, env={DEPLOYMENT_MODE_ENV: "connected_client"})
        assert exc.value.code == 1

    def test_authoritative_exits_without_secret(self, rules: Rules) -> None:
        with pytest.raises(SystemExit) as exc:
            validate_ops_rules(rules, env={})
        assert exc.value.code == 1

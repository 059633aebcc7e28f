"""
Process-wide memberships configuration.

Built once at startup from the rules file and the environment, then passed
by reference to the registrar, resolver and renderer.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

from memberships.components.status import get_site_id
from memberships.domain.entities import DeploymentMode, SiteIdentity
from memberships.rules.models import Rules

logger = logging.getLogger(__name__)

DEPLOYMENT_MODE_ENV = "MEMBERSHIPS_DEPLOYMENT_MODE"
USER_TOKEN_ENV = "MEMBERSHIPS_USER_TOKEN"
SECRET_KEY_ENV = "MEMBERSHIPS_SECRET_KEY"


@dataclass(frozen=True)
class MembershipsConfig:
    """Resolved configuration shared by all components."""

    rules: Rules
    identity: SiteIdentity
    user_token: str | None = None
    secret_key: str | None = None

    @property
    def deployment_mode(self) -> DeploymentMode:
        return self.identity.deployment_mode

    @property
    def locale(self) -> str:
        return self.rules.site.locale


def resolve_deployment_mode(rules: Rules, env: Mapping[str, str]) -> DeploymentMode:
    """Deployment mode from env override, falling back to the rules file."""
    override = env.get(DEPLOYMENT_MODE_ENV)
    if not override:
        return rules.site.deployment_mode
    try:
        return DeploymentMode(override.strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in DeploymentMode)
        raise ValueError(
            f"Invalid {DEPLOYMENT_MODE_ENV}={override!r}: must be one of {allowed}"
        ) from e


def build_config(rules: Rules, env: Mapping[str, str] | None = None) -> MembershipsConfig:
    """Build the process-wide configuration."""
    env = os.environ if env is None else env
    mode = resolve_deployment_mode(rules, env)
    identity = SiteIdentity(site_id=get_site_id(rules, mode), deployment_mode=mode)
    logger.info(f"Memberships configured: site_id={identity.site_id}, mode={mode.value}")
    return MembershipsConfig(
        rules=rules,
        identity=identity,
        user_token=env.get(USER_TOKEN_ENV) or None,
        secret_key=env.get(SECRET_KEY_ENV) or None,
    )


def missing_required_env(rules: Rules, mode: DeploymentMode, env: Mapping[str, str]) -> list[str]:
    """Names of required environment variables that are not set."""
    required = list(rules.ops.required_env)
    if mode is DeploymentMode.AUTHORITATIVE:
        required.extend(rules.ops.required_env_authoritative)
    else:
        required.extend(rules.ops.required_env_connected_client)
    return [name for name in required if name not in env]


def validate_ops_rules(rules: Rules, env: Mapping[str, str] | None = None) -> None:
    """
    Validate operational requirements before startup.
    """
    env = os.environ if env is None else env
    mode = resolve_deployment_mode(rules, env)

    missing = missing_required_env(rules, mode, env)
    if missing:
        print(
            f"CRITICAL: Missing required environment variables: {', '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)

    logger.info("Configuration validated.")

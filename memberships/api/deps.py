import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from memberships.adapters.capability_registry import InMemoryCapabilityRegistry
from memberships.adapters.remote_status import HttpxRemoteStatusClient
from memberships.adapters.sqlite.repos import (
    SQLiteMembershipStatusRepo,
    SQLitePlanRepo,
    SQLitePlanTierLookup,
)
from memberships.app_shell.config import MembershipsConfig, build_config

# Atomic components are stateless, so we import them here for dependency injection.
# Dependencies are injected as ports/repos/adapters.
from memberships.components.button import (
    ButtonRenderContext,
    ButtonRenderer,
    load_context_from_rules,
)
from memberships.components.entitlement import load_config_from_rules
from memberships.components.registrar import FeatureRegistrar
from memberships.components.status import StatusService
from memberships.rules.loader import load_rules
from memberships.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("MEMBERSHIPS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "memberships.db")
        self.rules_path = Path(
            os.environ.get("MEMBERSHIPS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules / Config ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


@lru_cache
def get_config() -> MembershipsConfig:
    return build_config(get_rules())


# --- Repos ---
def get_plan_repo(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> SQLitePlanRepo:
    return SQLitePlanRepo(settings.db_path, meta_prefix=rules.plans.meta_prefix)


def get_status_repo(settings: Settings = Depends(get_settings)) -> SQLiteMembershipStatusRepo:
    return SQLiteMembershipStatusRepo(settings.db_path)


# --- Adapters ---
def get_remote_client(config: MembershipsConfig = Depends(get_config)) -> HttpxRemoteStatusClient:
    remote = config.rules.remote
    return HttpxRemoteStatusClient(
        base_url=remote.base_url,
        user_token=config.user_token,
        timeout=remote.timeout_seconds,
    )


@lru_cache
def get_capability_registry() -> InMemoryCapabilityRegistry:
    """Process-wide capability registry."""
    return InMemoryCapabilityRegistry()


# --- Component Services ---
def get_status_service(
    config: MembershipsConfig = Depends(get_config),
    local_store: SQLiteMembershipStatusRepo = Depends(get_status_repo),
    remote_client: HttpxRemoteStatusClient = Depends(get_remote_client),
) -> StatusService:
    """Get status component service."""
    remote = config.rules.remote
    return StatusService(
        local_store=local_store,
        remote_client=remote_client,
        rest_base=remote.rest_base,
        timeout=remote.timeout_seconds,
    )


def get_button_context(config: MembershipsConfig = Depends(get_config)) -> ButtonRenderContext:
    return load_context_from_rules(config.rules, site_id=config.identity.site_id)


@lru_cache
def get_registrar() -> FeatureRegistrar:
    """
    Process-wide registrar.

    The render callback handed to the host is bound to the configured
    plan repository and render context.
    """
    settings = get_settings()
    config = get_config()
    rules = config.rules
    renderer = ButtonRenderer(
        plan_lookup=SQLitePlanRepo(settings.db_path, meta_prefix=rules.plans.meta_prefix),
        context=load_context_from_rules(rules, site_id=config.identity.site_id),
    )
    lookup = SQLitePlanTierLookup(
        settings.db_path,
        site_id=config.identity.site_id,
        connection_active=config.user_token is not None,
    )
    return FeatureRegistrar(
        identity=config.identity,
        capability_name=rules.button.capability_name,
        plan_tier_lookup=lookup,
        host=get_capability_registry(),
        render_callback=renderer,
        config=load_config_from_rules(rules),
    )


def clear_caches() -> None:
    """Drop cached settings, rules and singletons (tests, reloads)."""
    for cached in (
        get_settings,
        get_rules,
        get_config,
        get_capability_registry,
        get_registrar,
    ):
        cached.cache_clear()

import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from memberships import __version__
from memberships.adapters.sqlite.migrator import apply_migrations
from memberships.api.deps import get_registrar, get_settings
from memberships.app_shell.config import validate_ops_rules
from memberships.rules.loader import load_rules


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        print(f"INFO: Rules loaded from {settings.rules_path}")
    except Exception as e:
        print(f"CRITICAL: Rules load failed: {e}", file=sys.stderr)
        sys.exit(1)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    apply_migrations(settings.db_path)

    # One registration cycle per process
    outcome = get_registrar().register()
    print(f"INFO: Capability {outcome.capability_name} {outcome.state.value}")

    yield
    # Shutdown cleanup if needed


app = FastAPI(
    title="Memberships API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from memberships.api.routes import membership, remote_status  # noqa: E402

app.include_router(membership.router, prefix="/api/memberships", tags=["Memberships"])
app.include_router(remote_status.router, prefix="/v2", tags=["Remote Status"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "memberships"}

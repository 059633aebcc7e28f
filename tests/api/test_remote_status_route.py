"""
Tests for the authoritative status endpoint.

- Bearer token required and verified
- Only the configured site is served
- Served only by authoritative deployments
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from memberships.adapters.sqlite.repos import SQLiteMembershipStatusRepo
from memberships.api import deps
from memberships.api.auth_utils import create_access_token
from memberships.api.main import app as main_app
from memberships.api.routes import remote_status
from memberships.app_shell.config import (
    DEPLOYMENT_MODE_ENV,
    SECRET_KEY_ENV,
    MembershipsConfig,
    build_config,
)
from memberships.domain.entities import ConnectionStatus
from memberships.rules.models import Rules

SECRET = "test-secret"
ENV = {SECRET_KEY_ENV: SECRET}


def bearer(site_id: int = 1, secret: str = SECRET, **kwargs) -> dict[str, str]:
    token = create_access_token({"sub": "user-1", "site_id": site_id}, secret, **kwargs)
    return {"Authorization": f"Bearer {token}"}


AUTH = bearer()


def make_client(config: MembershipsConfig, repo: SQLiteMembershipStatusRepo) -> TestClient:
    app = FastAPI()
    app.include_router(remote_status.router, prefix="/v2")
    app.dependency_overrides[deps.get_config] = lambda: config
    app.dependency_overrides[deps.get_status_repo] = lambda: repo
    return TestClient(app)


@pytest.fixture
def client(rules: Rules, status_repo: SQLiteMembershipStatusRepo) -> TestClient:
    return make_client(build_config(rules, env=ENV), status_repo)


class TestAuthoritativeStatusRoute:
    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/v2/sites/1/memberships/status")

        assert response.status_code == 401
        assert response.json()["code"] == "missing_token"

    @pytest.mark.parametrize(
        "headers",
        [
            {"Authorization": "Bearer user-token"},
            bearer(secret="other-secret"),
            bearer(site_id=3),
            bearer(expires_delta=timedelta(seconds=-1)),
        ],
        ids=["opaque", "wrong-secret", "other-site", "expired"],
    )
    def test_invalid_token_does_not_leak_status(
        self,
        client: TestClient,
        status_repo: SQLiteMembershipStatusRepo,
        headers: dict[str, str],
    ) -> None:
        status_repo.save_status(1, ConnectionStatus(connected_account_id="acct_secret"))

        response = client.get("/v2/sites/1/memberships/status", headers=headers)

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"
        assert "acct_secret" not in response.text

    def test_unsigned_when_secret_unset(
        self, rules: Rules, status_repo: SQLiteMembershipStatusRepo
    ) -> None:
        client = make_client(build_config(rules, env={}), status_repo)

        response = client.get("/v2/sites/1/memberships/status", headers=AUTH)

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_token"

    def test_unknown_site(self, client: TestClient) -> None:
        response = client.get("/v2/sites/2/memberships/status", headers=bearer(site_id=2))

        assert response.status_code == 404
        assert response.json()["code"] == "unknown_site"

    def test_wrong_rest_base(self, client: TestClient) -> None:
        response = client.get("/v2/sites/1/other/status", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["code"] == "rest_no_route"

    def test_default_status(self, client: TestClient) -> None:
        response = client.get("/v2/sites/1/memberships/status", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["products"] == []
        assert response.json()["should_upgrade_to_access_memberships"] is False

    def test_stored_status(
        self, client: TestClient, status_repo: SQLiteMembershipStatusRepo
    ) -> None:
        status_repo.save_status(
            1, ConnectionStatus(connected_account_id="acct_5", upgrade_url="https://u.test")
        )

        data = client.get("/v2/sites/1/memberships/status", headers=AUTH).json()

        assert data["connected_account_id"] == "acct_5"
        assert data["upgrade_url"] == "https://u.test"

    def test_connected_client_does_not_serve(
        self, rules: Rules, status_repo: SQLiteMembershipStatusRepo
    ) -> None:
        config = build_config(rules, env={**ENV, DEPLOYMENT_MODE_ENV: "connected_client"})
        client = make_client(config, status_repo)

        response = client.get("/v2/sites/1/memberships/status", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["code"] == "rest_no_route"


def test_health() -> None:
    response = TestClient(main_app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "memberships"}

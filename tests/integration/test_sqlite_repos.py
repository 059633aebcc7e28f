from decimal import Decimal

import pytest

from memberships.adapters.sqlite.repos import (
    SQLiteMembershipStatusRepo,
    SQLitePlanRepo,
    SQLitePlanTierLookup,
)
from memberships.components.button import (
    ButtonRenderContext,
    ButtonRenderRequest,
    NoRender,
    RenderedButton,
    render,
)
from memberships.components.entitlement import is_feature_enabled
from memberships.components.plans import find_renderable_plan
from memberships.components.status import resolve_status
from memberships.domain.entities import (
    ConnectionStatus,
    DeploymentMode,
    ProductSummary,
    SiteIdentity,
)

# --- Plans ---


def test_create_and_find_plan(plan_repo: SQLitePlanRepo):
    created = plan_repo.create_plan("Gold", price="12.50", currency="EUR", status="published")

    fetched = plan_repo.find_plan(created.id)
    assert fetched is not None
    assert fetched.title == "Gold"
    assert fetched.price == Decimal("12.50")
    assert fetched.currency == "EUR"
    assert fetched.status == "published"
    assert fetched.record_type == "memberships_plan"


def test_find_missing_plan(plan_repo: SQLitePlanRepo):
    assert plan_repo.find_plan(999) is None


def test_price_and_currency_stored_as_prefixed_meta(plan_repo: SQLitePlanRepo):
    assert plan_repo.list_plan_fields() == {
        "price": "memberships_price",
        "currency": "memberships_currency",
    }


def test_custom_meta_prefix(db_path: str):
    repo = SQLitePlanRepo(db_path, meta_prefix="club_")
    plan = repo.create_plan("Club", price="3", status="published")

    assert repo.list_plan_fields()["price"] == "club_price"
    assert repo.find_plan(plan.id).price == Decimal("3")


def test_invalid_currency_rejected_before_write(plan_repo: SQLitePlanRepo):
    with pytest.raises(ValueError):
        plan_repo.create_plan("Bad", currency="euro")


def test_renderability_follows_status(plan_repo: SQLitePlanRepo):
    plan = plan_repo.create_plan("Draft plan")
    assert find_renderable_plan(plan.id, plan_repo).reason == "unpublished"

    plan_repo.set_status(plan.id, "published")
    assert find_renderable_plan(plan.id, plan_repo).found

    plan_repo.set_status(plan.id, "trashed")
    assert find_renderable_plan(plan.id, plan_repo).reason == "unpublished"


def test_other_record_type_is_wrong_kind(plan_repo: SQLitePlanRepo):
    record = plan_repo.create_plan("A page", status="published", record_type="page")
    assert find_renderable_plan(record.id, plan_repo).reason == "wrong_kind"


def test_render_from_stored_plan(plan_repo: SQLitePlanRepo):
    plan = plan_repo.create_plan("Gold", price="5", status="published")
    context = ButtonRenderContext(site_id=1)

    result = render(ButtonRenderRequest(plan_id=str(plan.id)), plan_repo, context)

    assert isinstance(result, RenderedButton)
    assert f'data-plan-id="{plan.id}"' in result.html
    assert isinstance(render(ButtonRenderRequest(plan_id=999), plan_repo, context), NoRender)


# --- Status ---


def test_status_round_trip(status_repo: SQLiteMembershipStatusRepo):
    status = ConnectionStatus(
        products=[
            ProductSummary(id=1, title="Gold", price=Decimal("5"), currency="USD"),
            ProductSummary(id=2, title="Silver"),
        ],
        connected_account_id=4242,
        connect_url="https://connect.example.test",
        should_upgrade_to_access_memberships=True,
    )
    status_repo.save_status(1, status)

    fetched = status_repo.get_status(1)
    assert fetched is not None
    assert [p.title for p in fetched.products] == ["Gold", "Silver"]
    assert fetched.products[0].price == Decimal("5")
    assert fetched.connected_account_id == "4242"
    assert fetched.connect_url == "https://connect.example.test"
    assert fetched.upgrade_url is None
    assert fetched.should_upgrade_to_access_memberships is True


def test_save_status_replaces_products(status_repo: SQLiteMembershipStatusRepo):
    status_repo.save_status(1, ConnectionStatus(products=[ProductSummary(id=1, title="Old")]))
    status_repo.save_status(1, ConnectionStatus(products=[ProductSummary(id=2, title="New")]))

    fetched = status_repo.get_status(1)
    assert [p.title for p in fetched.products] == ["New"]


def test_unknown_site_has_no_status(status_repo: SQLiteMembershipStatusRepo):
    assert status_repo.get_status(77) is None
    assert status_repo.get_connected_account_id(77) is None


def test_connected_account_id(status_repo: SQLiteMembershipStatusRepo):
    status_repo.save_status(1, ConnectionStatus(connected_account_id="acct_9"))
    assert status_repo.get_connected_account_id(1) == "acct_9"


def test_authoritative_resolve_unknown_site_defaults(status_repo: SQLiteMembershipStatusRepo):
    identity = SiteIdentity(site_id=5, deployment_mode=DeploymentMode.AUTHORITATIVE)

    result = resolve_status(identity, local_store=status_repo)

    assert result == ConnectionStatus()


# --- Plan tiers ---


def test_site_markers(tier_lookup: SQLitePlanTierLookup):
    tier_lookup.add_marker(1, "business-plan")
    tier_lookup.add_marker(1, "business-plan")
    tier_lookup.add_marker(2, "premium-plan")

    assert tier_lookup.site_markers(1) == {"business-plan"}
    assert tier_lookup.site_markers(3) == set()


def test_plan_supports_uses_own_site(db_path: str):
    lookup = SQLitePlanTierLookup(db_path, site_id=1, connection_active=True)
    lookup.add_feature(2, "recurring-payments")
    assert not lookup.plan_supports("recurring-payments")

    lookup.add_feature(1, "recurring-payments")
    assert lookup.plan_supports("recurring-payments")
    assert lookup.is_connection_active()


def test_gate_over_sqlite(db_path: str):
    authoritative = SiteIdentity(site_id=1, deployment_mode=DeploymentMode.AUTHORITATIVE)
    connected = SiteIdentity(site_id=1, deployment_mode=DeploymentMode.CONNECTED_CLIENT)
    lookup = SQLitePlanTierLookup(db_path, site_id=1, connection_active=False)

    assert not is_feature_enabled(authoritative, lookup)
    lookup.add_marker(1, "ecommerce-plan")
    assert is_feature_enabled(authoritative, lookup)

    lookup.add_feature(1, "recurring-payments")
    assert not is_feature_enabled(connected, lookup)
    lookup.connection_active = True
    assert is_feature_enabled(connected, lookup)


def test_gate_with_missing_tables_is_disabled(tmp_path):
    lookup = SQLitePlanTierLookup(str(tmp_path / "empty.db"), site_id=1)
    identity = SiteIdentity(site_id=1, deployment_mode=DeploymentMode.AUTHORITATIVE)

    assert is_feature_enabled(identity, lookup) is False

import argparse
import json
import logging
import sys
from datetime import timedelta
from pathlib import Path

from memberships.adapters.asset_registry import RequiredAssets
from memberships.adapters.remote_status import HttpxRemoteStatusClient
from memberships.adapters.sqlite.migrator import apply_migrations
from memberships.adapters.sqlite.repos import (
    SQLiteMembershipStatusRepo,
    SQLitePlanRepo,
    SQLitePlanTierLookup,
)
from memberships.api.auth_utils import create_access_token
from memberships.app_shell.config import MembershipsConfig, build_config
from memberships.components.button import (
    ButtonRenderRequest,
    RenderedButton,
    load_context_from_rules,
    render,
)
from memberships.components.status import StatusError, StatusService
from memberships.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

DB_PATH = "data/memberships.db"
RULES_PATH = "rules.yaml"


def get_config(rules_path: str) -> MembershipsConfig:
    if not Path(rules_path).exists():
        logger.error(f"Rules file {rules_path} not found.")
        sys.exit(1)

    try:
        rules = load_rules(Path(rules_path))
        return build_config(rules)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)


def handle_migrate(args: argparse.Namespace) -> None:
    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    applied = apply_migrations(args.db)
    print(f"Applied {len(applied)} migrations.")


def handle_status(config: MembershipsConfig, args: argparse.Namespace) -> None:
    remote = config.rules.remote
    service = StatusService(
        local_store=SQLiteMembershipStatusRepo(args.db),
        remote_client=HttpxRemoteStatusClient(
            base_url=remote.base_url,
            user_token=config.user_token,
            timeout=remote.timeout_seconds,
        ),
        rest_base=remote.rest_base,
        timeout=remote.timeout_seconds,
    )
    result = service.resolve(config.identity)
    if isinstance(result, StatusError):
        print(json.dumps(result.to_dict(), indent=2))
        sys.exit(1)
    print(result.model_dump_json(indent=2))


def handle_render(config: MembershipsConfig, args: argparse.Namespace) -> None:
    rules = config.rules
    request = ButtonRenderRequest(plan_id=args.plan_id, submit_button_text=args.text)
    result = render(
        request,
        SQLitePlanRepo(args.db, meta_prefix=rules.plans.meta_prefix),
        load_context_from_rules(rules, site_id=config.identity.site_id),
        RequiredAssets(),
    )
    if isinstance(result, RenderedButton):
        print(result.html)
    else:
        logger.info(f"Nothing rendered: {result.reason}")


def handle_add_marker(config: MembershipsConfig, args: argparse.Namespace) -> None:
    site_id = args.site_id or config.identity.site_id
    SQLitePlanTierLookup(args.db, site_id=site_id).add_marker(site_id, args.marker)
    print(f"Site {site_id} marked {args.marker}")


def handle_add_feature(config: MembershipsConfig, args: argparse.Namespace) -> None:
    site_id = args.site_id or config.identity.site_id
    SQLitePlanTierLookup(args.db, site_id=site_id).add_feature(site_id, args.feature)
    print(f"Site {site_id} plan supports {args.feature}")


def handle_issue_token(config: MembershipsConfig, args: argparse.Namespace) -> None:
    if not config.secret_key:
        logger.error("MEMBERSHIPS_SECRET_KEY is not set.")
        sys.exit(1)
    site_id = args.site_id or config.identity.site_id
    token = create_access_token(
        {"sub": args.subject, "site_id": site_id},
        config.secret_key,
        expires_delta=timedelta(days=args.days),
    )
    print(token)


def main() -> None:
    parser = argparse.ArgumentParser(description="Memberships CLI")
    parser.add_argument("--db", default=DB_PATH, help="Path to the SQLite database")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply SQL migrations")

    # status
    subparsers.add_parser("status", help="Print the resolved connection status")

    # render
    render_parser = subparsers.add_parser("render", help="Render the purchase button")
    render_parser.add_argument("--plan-id", required=True, help="Plan id to render")
    render_parser.add_argument("--text", default=None, help="Button label")

    # add-marker
    marker_parser = subparsers.add_parser("add-marker", help="Record a plan tier marker")
    marker_parser.add_argument("marker", help="Marker name, e.g. business-plan")
    marker_parser.add_argument("--site-id", type=int, default=None, help="Defaults to this site")

    # add-feature
    feature_parser = subparsers.add_parser("add-feature", help="Cache a plan feature")
    feature_parser.add_argument("feature", help="Feature name, e.g. memberships")
    feature_parser.add_argument("--site-id", type=int, default=None, help="Defaults to this site")

    # issue-token
    token_parser = subparsers.add_parser("issue-token", help="Issue a status bearer token")
    token_parser.add_argument("--subject", required=True, help="User the token is issued to")
    token_parser.add_argument("--site-id", type=int, default=None, help="Defaults to this site")
    token_parser.add_argument("--days", type=int, default=30, help="Days until expiry")

    args = parser.parse_args()

    if args.command == "migrate":
        handle_migrate(args)
        return

    config = get_config(args.rules)

    if args.command == "status":
        handle_status(config, args)
    elif args.command == "render":
        handle_render(config, args)
    elif args.command == "add-marker":
        handle_add_marker(config, args)
    elif args.command == "add-feature":
        handle_add_feature(config, args)
    elif args.command == "issue-token":
        handle_issue_token(config, args)


if __name__ == "__main__":
    main()

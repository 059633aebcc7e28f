"""
Rules loading and validation tests.

Verifies that the rules loader accepts the project rules.yaml and rejects
malformed or incomplete files with ValueError.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from memberships.domain.entities import DeploymentMode
from memberships.rules.loader import load_rules, parse_rules

MINIMAL_RULES = """
site:
  site_id: 7
  deployment_mode: connected_client
remote:
  base_url: https://api.example.test
"""


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


class TestRulesLoading:
    def test_load_actual_rules_file(self, project_root: Path) -> None:
        rules = load_rules(project_root / "rules.yaml")

        assert rules.site.site_id == 1
        assert rules.site.deployment_mode is DeploymentMode.AUTHORITATIVE
        assert rules.button.capability_name == "memberships/recurring-payments"
        assert "business-plan" in rules.entitlement.qualifying_markers

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.yaml")

    def test_load_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text(MINIMAL_RULES)

        rules = load_rules(path)

        assert rules.site.site_id == 7


class TestParseRules:
    def test_minimal_rules_get_defaults(self) -> None:
        rules = parse_rules(MINIMAL_RULES)

        assert rules.site.deployment_mode is DeploymentMode.CONNECTED_CLIENT
        assert rules.site.locale == "en_US"
        assert rules.remote.rest_base == "memberships"
        assert rules.remote.timeout_seconds == 10.0
        assert rules.entitlement.required_plan.connected_client == "jetpack_premium"
        assert rules.button.default_label == "Your contribution"
        assert rules.plans.meta_prefix == "memberships_"

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ValueError, match="Invalid YAML"):
            parse_rules("site: [unclosed")

    def test_top_level_must_be_mapping(self) -> None:
        with pytest.raises(ValueError, match="mapping"):
            parse_rules("- a\n- b\n")

    def test_missing_site_section(self) -> None:
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules("remote:\n  base_url: https://x.test\n")

    def test_unknown_deployment_mode(self) -> None:
        content = MINIMAL_RULES.replace("connected_client", "standalone")
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules(content)

    def test_site_id_must_be_positive(self) -> None:
        content = MINIMAL_RULES.replace("site_id: 7", "site_id: 0")
        with pytest.raises(ValueError):
            parse_rules(content)

    def test_timeout_must_be_positive(self) -> None:
        content = MINIMAL_RULES + "  timeout_seconds: 0\n"
        with pytest.raises(ValueError):
            parse_rules(content)

"""
JSON renderer for addt.

Outputs machine-readable firewall rules and check results.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from addt.domain.firewall import CheckOutcome, FirewallMode, RuleLayer


class JsonRenderer:
    """
    Renders firewall data as JSON.

    Provides machine-readable output for scripts and in-container
    policy hooks.
    """

    def __init__(self, indent: int = 2) -> None:
        """
        Initialize the JSON renderer.

        Args:
            indent: JSON indentation level.
        """
        self.indent = indent

    def render_check(self, domain: str, outcome: CheckOutcome, mode: FirewallMode) -> str:
        """Render a check result as JSON string."""
        return self._dumps(self.check_to_dict(domain, outcome, mode))

    def render_rules(self, scope: str, rules: RuleLayer, extension: str | None = None) -> str:
        """Render one scope's rules as JSON string."""
        return self._dumps(self.rules_to_dict(scope, rules, extension))

    def check_to_dict(
        self, domain: str, outcome: CheckOutcome, mode: FirewallMode
    ) -> dict[str, Any]:
        return {
            "domain": domain,
            "allowed": outcome.allowed,
            "layer": outcome.layer.value,
            "explicit": outcome.explicit,
            "mode": mode.value,
        }

    def rules_to_dict(
        self, scope: str, rules: RuleLayer, extension: str | None = None
    ) -> dict[str, Any]:
        result: dict[str, Any] = {
            "scope": scope,
            "allowed": list(rules.allowed),
            "denied": list(rules.denied),
        }
        if extension:
            result["extension"] = extension
        return result

    def _dumps(self, data: dict[str, Any]) -> str:
        return json.dumps(data, indent=self.indent)

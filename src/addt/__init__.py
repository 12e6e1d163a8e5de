"""
addt — Run AI coding assistants in isolated containers

Wraps assistants such as claude, cursor and codex in containers with
per-tool configuration, an outbound-network firewall and optional
OpenTelemetry export.

Usage:
    # CLI
    $ addt firewall global allow api.example.com
    $ addt firewall check registry.npmjs.org

    # Python API
    from addt import PolicySnapshot, RuleLayer, evaluate

    snapshot = PolicySnapshot(global_rules=RuleLayer(denied=["registry.npmjs.org"]))
    outcome = evaluate("registry.npmjs.org", snapshot)
"""

from addt.domain.firewall import (
    CheckOutcome,
    FirewallMode,
    Layer,
    PolicySnapshot,
    RuleLayer,
)
from addt.domain.settings import OtelConfig, OtelSettings, ResourceAttrs, SettingValue
from addt.engine.firewall_engine import FirewallEngine, check_domain, evaluate
from addt.engine.otel_env import compose
from addt.engine.settings_merger import apply_env, merge

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Firewall
    "CheckOutcome",
    "FirewallEngine",
    "FirewallMode",
    "Layer",
    "PolicySnapshot",
    "RuleLayer",
    "check_domain",
    "evaluate",
    # Settings
    "OtelConfig",
    "OtelSettings",
    "ResourceAttrs",
    "SettingValue",
    "apply_env",
    "compose",
    "merge",
]

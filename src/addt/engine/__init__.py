"""
Engine layer for addt.

Contains the firewall evaluator, the settings merger and the telemetry
environment composer.
"""

from addt.engine.config_loader import ResolvedConfig, load_config
from addt.engine.firewall_engine import FirewallEngine, check_domain, evaluate
from addt.engine.otel_env import compose
from addt.engine.rule_store import RuleStore, build_snapshot
from addt.engine.settings_merger import apply_env, merge

__all__ = [
    "FirewallEngine",
    "ResolvedConfig",
    "RuleStore",
    "apply_env",
    "build_snapshot",
    "check_domain",
    "compose",
    "evaluate",
    "load_config",
    "merge",
]

"""
Config loader — resolves everything one invocation needs.

Reads the global and project files once and produces the firewall
switches, the telemetry config and the policy snapshot.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from addt.domain.firewall import PolicySnapshot
from addt.domain.settings import FirewallConfig, OtelConfig
from addt.engine.firewall_engine import parse_mode
from addt.engine.rule_store import build_snapshot
from addt.engine.settings_merger import load_firewall_config, load_otel_config

if TYPE_CHECKING:
    from addt.adapters.fs import FileSystemAdapter


class ResolvedConfig(BaseModel):
    """Fully resolved configuration for one invocation."""

    model_config = ConfigDict(frozen=True)

    firewall: FirewallConfig
    otel: OtelConfig
    snapshot: PolicySnapshot


def load_config(
    fs: FileSystemAdapter,
    extension: str = "",
    env: Mapping[str, str] | None = None,
) -> ResolvedConfig:
    """
    Load and resolve configuration.

    Args:
        fs: Filesystem adapter locating the config files.
        extension: Extension whose firewall rules fill the extension layer.
        env: Environment for overrides (defaults to os.environ).

    Returns:
        ResolvedConfig with precedence defaults < global < project < env.

    Raises:
        ConfigError: If a config file is invalid.
    """
    env = os.environ if env is None else env

    global_file = fs.read_global_config()
    project_file = fs.read_project_config()

    firewall = load_firewall_config(
        global_file.firewall_settings, project_file.firewall_settings, env
    )
    otel = load_otel_config(global_file.otel, project_file.otel, env)
    snapshot = build_snapshot(global_file, project_file, extension, parse_mode(firewall.mode))

    return ResolvedConfig(firewall=firewall, otel=otel, snapshot=snapshot)

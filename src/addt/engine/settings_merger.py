"""
Settings merger — folds settings records into resolved configs.

Precedence: defaults < global file < project file < environment.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel

from addt.domain.settings import (
    DEFAULT_FIREWALL_CONFIG,
    DEFAULT_OTEL_CONFIG,
    FirewallConfig,
    FirewallSettings,
    OtelConfig,
    OtelSettings,
    SettingsRecord,
    SettingValue,
)

C = TypeVar("C", bound=BaseModel)


class EnvOverride(NamedTuple):
    """An environment variable that overrides one resolved field."""

    env_var: str
    field: str
    type: type


OTEL_ENV_OVERRIDES: tuple[EnvOverride, ...] = (
    EnvOverride("ADDT_OTEL_ENABLED", "enabled", bool),
    EnvOverride("ADDT_OTEL_ENDPOINT", "endpoint", str),
    EnvOverride("ADDT_OTEL_PROTOCOL", "protocol", str),
    EnvOverride("ADDT_OTEL_SERVICE_NAME", "service_name", str),
    EnvOverride("ADDT_OTEL_HEADERS", "headers", str),
)

FIREWALL_ENV_OVERRIDES: tuple[EnvOverride, ...] = (
    EnvOverride("ADDT_FIREWALL", "enabled", bool),
    EnvOverride("ADDT_FIREWALL_MODE", "mode", str),
)


def merge(defaults: C, layers: Iterable[SettingsRecord | None]) -> C:
    """
    Merge settings records over a fully populated default config.

    Args:
        defaults: Resolved config supplying every field.
        layers: Records in increasing precedence. None is skipped.

    Returns:
        A new resolved config where each field comes from the last
        layer that set it, or from the defaults.
    """
    updates: dict[str, Any] = {}
    for layer in layers:
        if layer is None:
            continue
        for name, value in layer.present_values().items():
            if name in type(defaults).model_fields:
                updates[name] = value

    return defaults.model_copy(update=updates)


def parse_env_value(raw: str, value_type: type) -> SettingValue[Any]:
    """
    Parse an environment string into a typed cell.

    Booleans accept only "true" and "false"; anything else is absent.
    """
    if value_type is bool:
        if raw == "true":
            return SettingValue.of(True)
        if raw == "false":
            return SettingValue.of(False)
        return SettingValue.absent()

    return SettingValue.of(raw)


def apply_env(
    config: C,
    env: Mapping[str, str],
    overrides: Iterable[EnvOverride],
) -> C:
    """
    Overlay recognized environment variables onto a resolved config.

    Args:
        config: Resolved config to start from.
        env: Environment mapping, e.g. os.environ.
        overrides: Variables to look at and the fields they set.

    Returns:
        A new config. Missing, empty or unparseable variables leave
        their field unchanged.
    """
    updates: dict[str, Any] = {}
    for override in overrides:
        raw = env.get(override.env_var, "")
        if not raw:
            continue
        cell = parse_env_value(raw, override.type)
        if cell.is_present:
            updates[override.field] = cell.value

    return config.model_copy(update=updates)


def load_otel_config(
    global_settings: OtelSettings | None,
    project_settings: OtelSettings | None,
    env: Mapping[str, str],
) -> OtelConfig:
    """Resolve telemetry config: defaults < global < project < env."""
    config = merge(DEFAULT_OTEL_CONFIG, [global_settings, project_settings])
    return apply_env(config, env, OTEL_ENV_OVERRIDES)


def load_firewall_config(
    global_settings: FirewallSettings | None,
    project_settings: FirewallSettings | None,
    env: Mapping[str, str],
) -> FirewallConfig:
    """Resolve firewall switches: defaults < global < project < env."""
    config = merge(DEFAULT_FIREWALL_CONFIG, [global_settings, project_settings])
    return apply_env(config, env, FIREWALL_ENV_OVERRIDES)

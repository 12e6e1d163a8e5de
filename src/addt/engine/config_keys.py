"""
Config keys managed by `addt config`.

Each key maps onto one SettingValue field of a config file, either in
the `otel:` section or the top-level firewall switches.
"""

from __future__ import annotations

from typing import NamedTuple

from addt.domain.config import ConfigFile
from addt.domain.exceptions import ConfigError
from addt.domain.firewall import FirewallMode
from addt.domain.settings import OTEL_PROTOCOLS, SettingsRecord
from addt.engine.config_loader import ResolvedConfig
from addt.engine.settings_merger import FIREWALL_ENV_OVERRIDES, OTEL_ENV_OVERRIDES


class KeyInfo(NamedTuple):
    """Describes a config key."""

    key: str
    description: str
    type: str
    env_var: str

    @property
    def section(self) -> str:
        return self.key.split(".", 1)[0]

    @property
    def field(self) -> str:
        return self.key.split(".", 1)[1]


def _env_var(section: str, field: str) -> str:
    overrides = OTEL_ENV_OVERRIDES if section == "otel" else FIREWALL_ENV_OVERRIDES
    return next(o.env_var for o in overrides if o.field == field)


CONFIG_KEYS: tuple[KeyInfo, ...] = (
    KeyInfo("firewall.enabled", "Enable network firewall", "bool", _env_var("firewall", "enabled")),
    KeyInfo("firewall.mode", "Firewall mode: strict, permissive, or off", "string", _env_var("firewall", "mode")),
    KeyInfo("otel.enabled", "Enable OpenTelemetry", "bool", _env_var("otel", "enabled")),
    KeyInfo("otel.endpoint", "OTLP endpoint URL", "string", _env_var("otel", "endpoint")),
    KeyInfo("otel.protocol", "OTLP protocol: http/json, http/protobuf, or grpc", "string", _env_var("otel", "protocol")),
    KeyInfo("otel.service_name", "Service name for telemetry", "string", _env_var("otel", "service_name")),
    KeyInfo("otel.headers", "OTLP headers (key=value,key2=value2)", "string", _env_var("otel", "headers")),
)


def find_key(key: str) -> KeyInfo:
    for info in CONFIG_KEYS:
        if info.key == key:
            return info
    raise ConfigError(f"Unknown config key: {key}", config_key=key)


def _record(config_file: ConfigFile, info: KeyInfo) -> SettingsRecord:
    if info.section == "otel":
        return config_file.otel
    return config_file.firewall_settings


def _replace_record(config_file: ConfigFile, info: KeyInfo, record: SettingsRecord) -> ConfigFile:
    if info.section == "otel":
        return config_file.with_otel(record)  # type: ignore[arg-type]
    return config_file.with_firewall_settings(record)  # type: ignore[arg-type]


def _format(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_value(config_file: ConfigFile, key: str) -> str:
    """Value stored in a config file, or "" when unset."""
    info = find_key(key)
    cell = getattr(_record(config_file, info), info.field)
    return _format(cell.value) if cell.is_present else ""


def set_value(config_file: ConfigFile, key: str, value: str) -> ConfigFile:
    """
    Return a copy of the config file with a key set.

    Raises:
        ConfigError: For an unknown key or a value the key does not accept.
    """
    info = find_key(key)

    parsed: object = value
    if info.type == "bool":
        parsed = value == "true"
    elif key == "otel.protocol" and value not in OTEL_PROTOCOLS:
        raise ConfigError(
            f"Invalid protocol {value!r} (use: {', '.join(OTEL_PROTOCOLS)})", config_key=key
        )
    elif key == "firewall.mode" and value not in {m.value for m in FirewallMode}:
        raise ConfigError(
            f"Invalid firewall mode {value!r} (use: strict, permissive, or off)", config_key=key
        )

    record = _record(config_file, info).with_value(info.field, parsed)
    return _replace_record(config_file, info, record)


def unset_value(config_file: ConfigFile, key: str) -> ConfigFile:
    """Return a copy of the config file with a key cleared."""
    info = find_key(key)
    record = _record(config_file, info).without_value(info.field)
    return _replace_record(config_file, info, record)


def effective_value(resolved: ResolvedConfig, key: str) -> str:
    """Value after merging defaults, both files and the environment."""
    info = find_key(key)
    if key == "firewall.mode":
        # Unknown modes fall back to strict when the snapshot is built
        return resolved.snapshot.mode.value
    config = resolved.otel if info.section == "otel" else resolved.firewall
    return _format(getattr(config, info.field))

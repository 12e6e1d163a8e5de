"""
Config file models.

The global file (~/.addt/config.yaml) and the project file (.addt.yaml)
share one schema. Keys addt does not manage here are kept as extras so
rewriting a file never drops them.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from addt.domain.firewall import RuleLayer, normalize_extension
from addt.domain.settings import FirewallSettings, OtelSettings, SettingValue


logger = logging.getLogger(__name__)


def _unset() -> SettingValue[Any]:
    return SettingValue.absent()


def domain_list(value: Any, key: str) -> list[str]:
    """
    Read a domain list from YAML, treating malformed input as empty.

    A bare string is a one-item list. Non-string entries are dropped and
    any other value yields an empty list; both are logged.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        logger.warning(
            "Ignoring %s: expected a list of domains, got %s", key, type(value).__name__
        )
        return []

    domains = [d for d in value if isinstance(d, str)]
    if len(domains) != len(value):
        logger.warning("Ignoring %d non-string entries in %s", len(value) - len(domains), key)
    return domains


class ExtensionConfig(BaseModel):
    """Per-extension section under `extensions:`."""

    model_config = ConfigDict(frozen=True, extra="allow")

    firewall_allowed: list[str] = Field(default_factory=list)
    firewall_denied: list[str] = Field(default_factory=list)

    @field_validator("firewall_allowed", "firewall_denied", mode="before")
    @classmethod
    def validate_domains(cls, v: Any, info: ValidationInfo) -> list[str]:
        return domain_list(v, info.field_name)

    @property
    def rules(self) -> RuleLayer:
        return RuleLayer(allowed=self.firewall_allowed, denied=self.firewall_denied)

    def to_yaml_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.model_extra or {})
        if self.firewall_allowed:
            data["firewall_allowed"] = list(self.firewall_allowed)
        if self.firewall_denied:
            data["firewall_denied"] = list(self.firewall_denied)
        return data


class ConfigFile(BaseModel):
    """A parsed global or project config file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    firewall: SettingValue[bool] = Field(default_factory=_unset)
    firewall_mode: SettingValue[str] = Field(default_factory=_unset)
    firewall_allowed: list[str] = Field(default_factory=list)
    firewall_denied: list[str] = Field(default_factory=list)
    otel: OtelSettings = Field(default_factory=OtelSettings)
    extensions: dict[str, ExtensionConfig] = Field(default_factory=dict)

    @field_validator("firewall_allowed", "firewall_denied", mode="before")
    @classmethod
    def validate_domains(cls, v: Any, info: ValidationInfo) -> list[str]:
        return domain_list(v, info.field_name)

    @field_validator("otel", mode="before")
    @classmethod
    def validate_otel(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("extensions", mode="before")
    @classmethod
    def validate_extensions(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {normalize_extension(str(name)): ext or {} for name, ext in v.items()}
        return v

    @property
    def firewall_settings(self) -> FirewallSettings:
        return FirewallSettings(enabled=self.firewall, mode=self.firewall_mode)

    @property
    def rules(self) -> RuleLayer:
        return RuleLayer(allowed=self.firewall_allowed, denied=self.firewall_denied)

    def extension_rules(self, name: str) -> RuleLayer:
        extension = self.extensions.get(normalize_extension(name))
        return extension.rules if extension else RuleLayer()

    def with_rules(self, rules: RuleLayer) -> ConfigFile:
        return self.model_copy(
            update={
                "firewall_allowed": list(rules.allowed),
                "firewall_denied": list(rules.denied),
            }
        )

    def with_extension_rules(self, name: str, rules: RuleLayer) -> ConfigFile:
        name = normalize_extension(name)
        current = self.extensions.get(name) or ExtensionConfig()
        updated = current.model_copy(
            update={
                "firewall_allowed": list(rules.allowed),
                "firewall_denied": list(rules.denied),
            }
        )
        return self.model_copy(update={"extensions": {**self.extensions, name: updated}})

    def with_firewall_settings(self, settings: FirewallSettings) -> ConfigFile:
        return self.model_copy(
            update={"firewall": settings.enabled, "firewall_mode": settings.mode}
        )

    def with_otel(self, settings: OtelSettings) -> ConfigFile:
        return self.model_copy(update={"otel": settings})

    def to_yaml_dict(self) -> dict[str, Any]:
        """Plain data for yaml.safe_dump, omitting unset and empty keys."""
        data: dict[str, Any] = dict(self.model_extra or {})

        if self.firewall.is_present:
            data["firewall"] = self.firewall.value
        if self.firewall_mode.is_present:
            data["firewall_mode"] = self.firewall_mode.value
        if self.firewall_allowed:
            data["firewall_allowed"] = list(self.firewall_allowed)
        if self.firewall_denied:
            data["firewall_denied"] = list(self.firewall_denied)

        otel = {**(self.otel.model_extra or {}), **self.otel.present_values()}
        if otel:
            data["otel"] = otel

        extensions = {
            name: ext_data
            for name, ext in self.extensions.items()
            if (ext_data := ext.to_yaml_dict())
        }
        if extensions:
            data["extensions"] = extensions

        return data

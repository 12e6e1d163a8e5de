"""
Domain layer for addt.

Contains the firewall and settings data structures with zero external
dependencies beyond Pydantic.
"""

from addt.domain.config import ConfigFile, ExtensionConfig
from addt.domain.exceptions import (
    AddtError,
    ConfigError,
    InvalidScopeError,
    MalformedDomainError,
)
from addt.domain.firewall import (
    DEFAULT_ALLOWED_DOMAINS,
    CheckOutcome,
    FirewallMode,
    Layer,
    PolicySnapshot,
    RuleLayer,
    Scope,
    normalize_domain,
    normalize_extension,
)
from addt.domain.settings import (
    DEFAULT_FIREWALL_CONFIG,
    DEFAULT_OTEL_CONFIG,
    FirewallConfig,
    FirewallSettings,
    OtelConfig,
    OtelSettings,
    ResourceAttrs,
    SettingValue,
)

__all__ = [
    # Firewall
    "DEFAULT_ALLOWED_DOMAINS",
    "CheckOutcome",
    "FirewallMode",
    "Layer",
    "PolicySnapshot",
    "RuleLayer",
    "Scope",
    "normalize_domain",
    "normalize_extension",
    # Settings
    "DEFAULT_FIREWALL_CONFIG",
    "DEFAULT_OTEL_CONFIG",
    "FirewallConfig",
    "FirewallSettings",
    "OtelConfig",
    "OtelSettings",
    "ResourceAttrs",
    "SettingValue",
    # Config files
    "ConfigFile",
    "ExtensionConfig",
    # Exceptions
    "AddtError",
    "ConfigError",
    "InvalidScopeError",
    "MalformedDomainError",
]

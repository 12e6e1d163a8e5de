"""
Firewall domain models.

Defines the layered egress rules evaluated for every outbound domain
and the outcome returned for a single check.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from addt.domain.exceptions import InvalidScopeError, MalformedDomainError

DEFAULT_ALLOWED_DOMAINS: tuple[str, ...] = (
    "api.anthropic.com",
    "github.com",
    "api.github.com",
    "raw.githubusercontent.com",
    "objects.githubusercontent.com",
    "registry.npmjs.org",
    "pypi.org",
    "files.pythonhosted.org",
    "proxy.golang.org",
    "sum.golang.org",
    "registry-1.docker.io",
    "auth.docker.io",
    "production.cloudflare.docker.com",
    "cdn.jsdelivr.net",
    "unpkg.com",
)


class Layer(str, Enum):
    """Layer that decided a firewall check. Values are part of the CLI output."""

    PROJECT = "project"
    GLOBAL = "global"
    EXTENSION = "extension"
    DEFAULTS = "defaults"
    NONE = "none"  # No layer mentioned the domain
    OFF = "off"  # Firewall mode is off, nothing was evaluated


class FirewallMode(str, Enum):
    """How a check that matched no layer is treated."""

    STRICT = "strict"  # Block all except allowed
    PERMISSIVE = "permissive"  # Allow all except denied
    OFF = "off"  # Disabled


class Scope(str, Enum):
    """User-editable rule scopes."""

    GLOBAL = "global"
    PROJECT = "project"
    EXTENSION = "extension"

    @classmethod
    def parse(cls, value: str) -> Scope:
        try:
            return cls(value)
        except ValueError:
            raise InvalidScopeError(value) from None


def normalize_domain(domain: str) -> str:
    """
    Normalize a domain for storage and comparison.

    Args:
        domain: Raw domain as typed by the user or read from a file.

    Returns:
        The stripped, lowercased domain.

    Raises:
        MalformedDomainError: If nothing is left after stripping.
    """
    normalized = domain.strip().lower()
    if not normalized:
        raise MalformedDomainError(domain)
    return normalized


def normalize_extension(name: str) -> str:
    """Extension names are stored and looked up stripped and lowercased."""
    return name.strip().lower()


class RuleLayer(BaseModel):
    """Allowed and denied domains of a single layer."""

    model_config = ConfigDict(frozen=True)

    allowed: tuple[str, ...] = Field(default=(), description="Explicitly allowed domains")
    denied: tuple[str, ...] = Field(default=(), description="Explicitly denied domains")

    @field_validator("allowed", "denied", mode="before")
    @classmethod
    def validate_domains(cls, v: Any) -> tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(str(d).strip().lower() for d in v if str(d).strip())

    @property
    def is_empty(self) -> bool:
        return not self.allowed and not self.denied

    def with_allowed(self, domain: str) -> RuleLayer:
        """Return a copy with the domain allowed (and no longer denied)."""
        allowed = self.allowed if domain in self.allowed else (*self.allowed, domain)
        denied = tuple(d for d in self.denied if d != domain)
        return RuleLayer(allowed=allowed, denied=denied)

    def with_denied(self, domain: str) -> RuleLayer:
        """Return a copy with the domain denied (and no longer allowed)."""
        denied = self.denied if domain in self.denied else (*self.denied, domain)
        allowed = tuple(d for d in self.allowed if d != domain)
        return RuleLayer(allowed=allowed, denied=denied)

    def without(self, domain: str) -> RuleLayer:
        """Return a copy with the domain removed from both lists."""
        return RuleLayer(
            allowed=tuple(d for d in self.allowed if d != domain),
            denied=tuple(d for d in self.denied if d != domain),
        )


DEFAULTS_LAYER = RuleLayer(allowed=DEFAULT_ALLOWED_DOMAINS)


class PolicySnapshot(BaseModel):
    """
    Immutable view of all firewall rules for one invocation.

    Layers in precedence order: project, global, extension, defaults.
    """

    model_config = ConfigDict(frozen=True)

    project_rules: RuleLayer = Field(default_factory=RuleLayer)
    global_rules: RuleLayer = Field(default_factory=RuleLayer)
    extension_rules: RuleLayer = Field(default_factory=RuleLayer)
    mode: FirewallMode = Field(default=FirewallMode.STRICT)
    extension_name: str = Field(
        default="", description="Extension whose rules fill the extension layer"
    )

    @property
    def defaults(self) -> RuleLayer:
        return DEFAULTS_LAYER

    @property
    def layers(self) -> list[tuple[Layer, RuleLayer]]:
        """All layers, most specific first."""
        return [
            (Layer.PROJECT, self.project_rules),
            (Layer.GLOBAL, self.global_rules),
            (Layer.EXTENSION, self.extension_rules),
            (Layer.DEFAULTS, self.defaults),
        ]

    def replace(self, scope: Scope, rules: RuleLayer) -> PolicySnapshot:
        """Return a new snapshot with one scope's rules swapped out."""
        return self.model_copy(update={f"{scope.value}_rules": rules})


class CheckOutcome(BaseModel):
    """Result of checking a domain against a snapshot."""

    model_config = ConfigDict(frozen=True)

    allowed: bool = Field(..., description="Whether traffic to the domain is allowed")
    layer: Layer = Field(..., description="Layer that decided")

    @property
    def explicit(self) -> bool:
        """Whether a layer actually mentioned the domain."""
        return self.layer not in (Layer.NONE, Layer.OFF)

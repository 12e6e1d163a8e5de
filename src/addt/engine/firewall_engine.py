"""
Firewall engine — evaluates domains against layered egress rules.

Rule evaluation (layered override, most specific wins):
    Defaults -> Extension -> Global -> Project

Each layer checks deny first, then allow. The first layer that
mentions the domain decides. A domain no layer mentions gets the
"none" outcome, which the firewall mode turns into allow or deny.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from addt.domain.exceptions import ConfigError
from addt.domain.firewall import (
    CheckOutcome,
    FirewallMode,
    Layer,
    PolicySnapshot,
    RuleLayer,
    normalize_domain,
)

logger = logging.getLogger(__name__)


def check_layer(domain: str, rules: RuleLayer) -> bool | None:
    """
    Check a single layer's deny and allow lists.

    Returns:
        False if denied, True if allowed, None if the layer is silent.
    """
    if domain in rules.denied:
        return False
    if domain in rules.allowed:
        return True
    return None


def evaluate(domain: str, snapshot: PolicySnapshot) -> CheckOutcome:
    """
    Evaluate a domain against every layer of a snapshot.

    Pure function: the firewall mode is not applied here, see
    check_domain().

    Args:
        domain: Normalized domain to check.
        snapshot: Rules to check against.

    Returns:
        The outcome and the layer that decided, or layer "none".
    """
    for layer, rules in snapshot.layers:
        result = check_layer(domain, rules)
        if result is not None:
            return CheckOutcome(allowed=result, layer=layer)

    return CheckOutcome(allowed=False, layer=Layer.NONE)


def apply_mode(outcome: CheckOutcome, mode: FirewallMode) -> CheckOutcome:
    """Resolve a "none" outcome according to the firewall mode."""
    if mode is FirewallMode.OFF:
        return CheckOutcome(allowed=True, layer=Layer.OFF)
    if outcome.layer is Layer.NONE:
        return CheckOutcome(allowed=mode is FirewallMode.PERMISSIVE, layer=Layer.NONE)
    return outcome


def check_domain(domain: str, snapshot: PolicySnapshot) -> CheckOutcome:
    """Evaluate a domain and apply the snapshot's firewall mode."""
    if snapshot.mode is FirewallMode.OFF:
        return CheckOutcome(allowed=True, layer=Layer.OFF)

    return apply_mode(evaluate(domain, snapshot), snapshot.mode)


def parse_mode(value: str) -> FirewallMode:
    """Parse a configured firewall mode, falling back to strict."""
    try:
        return FirewallMode(value.strip().lower())
    except ValueError:
        logger.warning("Unknown firewall mode %r, using strict", value)
        return FirewallMode.STRICT


class FirewallEngine:
    """
    Answers firewall checks for one snapshot.

    Normalizes incoming domains before they reach the evaluator.
    """

    def __init__(self, snapshot: PolicySnapshot) -> None:
        """
        Initialize the firewall engine.

        Args:
            snapshot: Immutable rules to evaluate against.
        """
        self.snapshot = snapshot

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FirewallEngine:
        """
        Build an engine from plain data.

        Args:
            data: Snapshot fields, e.g. {"mode": "strict",
                "global_rules": {"allowed": [...], "denied": [...]}}.

        Returns:
            FirewallEngine instance.

        Raises:
            ConfigError: If the data does not describe a valid snapshot.
        """
        try:
            snapshot = PolicySnapshot(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid firewall rules: {e}")

        return cls(snapshot)

    def evaluate(self, domain: str) -> CheckOutcome:
        """Evaluate a raw domain without applying the mode."""
        return evaluate(normalize_domain(domain), self.snapshot)

    def check(self, domain: str) -> CheckOutcome:
        """
        Check a raw domain with the firewall mode applied.

        Raises:
            MalformedDomainError: If the domain is empty or whitespace.
        """
        normalized = normalize_domain(domain)
        outcome = check_domain(normalized, self.snapshot)

        logger.debug(
            "Firewall check %s: allowed=%s layer=%s mode=%s",
            normalized,
            outcome.allowed,
            outcome.layer.value,
            self.snapshot.mode.value,
        )
        return outcome

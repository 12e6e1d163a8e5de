"""
Exception hierarchy for addt.

All exceptions inherit from AddtError for easy catching.
"""

from __future__ import annotations


class AddtError(Exception):
    """Base exception for all addt errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidScopeError(AddtError):
    """Raised when a firewall scope is not global, project or extension."""

    def __init__(self, scope: str, reason: str | None = None) -> None:
        super().__init__(
            reason or f"Unknown firewall scope: {scope} (use: global, project, or extension)",
            {"scope": scope},
        )
        self.scope = scope


class MalformedDomainError(AddtError):
    """Raised when a domain argument is empty or only whitespace."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"Invalid domain: {domain!r}", {"domain": domain})
        self.domain = domain


class ConfigError(AddtError):
    """Raised when a config file or config key is invalid."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        config_key: str | None = None,
    ) -> None:
        super().__init__(message, {"config_path": config_path, "config_key": config_key})
        self.config_path = config_path
        self.config_key = config_key

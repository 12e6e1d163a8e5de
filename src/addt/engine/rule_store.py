"""
Rule store — owns the firewall rules read from the config files.

Global and extension rules live in ~/.addt/config.yaml, project rules in
.addt.yaml. Every mutation writes the affected file and swaps in a new
PolicySnapshot; snapshots already handed out are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from addt.domain.config import ConfigFile
from addt.domain.exceptions import InvalidScopeError
from addt.domain.firewall import (
    FirewallMode,
    PolicySnapshot,
    RuleLayer,
    Scope,
    normalize_domain,
    normalize_extension,
)

if TYPE_CHECKING:
    from addt.adapters.fs import FileSystemAdapter

logger = logging.getLogger(__name__)


def build_snapshot(
    global_file: ConfigFile,
    project_file: ConfigFile,
    extension: str = "",
    mode: FirewallMode = FirewallMode.STRICT,
) -> PolicySnapshot:
    """
    Build a snapshot from parsed config files.

    Args:
        global_file: Parsed ~/.addt/config.yaml.
        project_file: Parsed .addt.yaml.
        extension: Extension whose rules fill the extension layer.
        mode: Firewall mode to record on the snapshot.
    """
    extension = normalize_extension(extension)
    return PolicySnapshot(
        project_rules=project_file.rules,
        global_rules=global_file.rules,
        extension_rules=global_file.extension_rules(extension) if extension else RuleLayer(),
        mode=mode,
        extension_name=extension,
    )


class RuleStore:
    """
    Reads and mutates firewall rules per scope.

    The current snapshot is available as `snapshot`; mutations return
    the replacement snapshot.
    """

    def __init__(
        self,
        fs: FileSystemAdapter,
        extension: str = "",
        mode: FirewallMode = FirewallMode.STRICT,
    ) -> None:
        """
        Initialize the rule store by loading both config files.

        Args:
            fs: Filesystem adapter used to read and persist config files.
            extension: Extension whose rules fill the snapshot's extension layer.
            mode: Firewall mode recorded on snapshots.
        """
        self.fs = fs
        self._global_file = fs.read_global_config()
        self._project_file = fs.read_project_config()
        self._snapshot = build_snapshot(
            self._global_file, self._project_file, extension, mode
        )

    @property
    def snapshot(self) -> PolicySnapshot:
        return self._snapshot

    def rules(self, scope: Scope | str, extension: str | None = None) -> RuleLayer:
        """Current rules of one scope."""
        scope = Scope.parse(scope)
        if scope is Scope.GLOBAL:
            return self._global_file.rules
        if scope is Scope.PROJECT:
            return self._project_file.rules
        return self._global_file.extension_rules(self._require_extension(extension))

    def allow(
        self, scope: Scope | str, domain: str, extension: str | None = None
    ) -> PolicySnapshot:
        """Add a domain to a scope's allowed list."""
        scope = Scope.parse(scope)
        domain = normalize_domain(domain)
        logger.info("Allowing %s in %s rules", domain, self._label(scope, extension))
        return self._update(scope, extension, lambda rules: rules.with_allowed(domain))

    def deny(
        self, scope: Scope | str, domain: str, extension: str | None = None
    ) -> PolicySnapshot:
        """Add a domain to a scope's denied list."""
        scope = Scope.parse(scope)
        domain = normalize_domain(domain)
        logger.info("Denying %s in %s rules", domain, self._label(scope, extension))
        return self._update(scope, extension, lambda rules: rules.with_denied(domain))

    def remove(
        self, scope: Scope | str, domain: str, extension: str | None = None
    ) -> PolicySnapshot:
        """Remove a domain from both of a scope's lists."""
        scope = Scope.parse(scope)
        domain = normalize_domain(domain)
        logger.info("Removing %s from %s rules", domain, self._label(scope, extension))
        return self._update(scope, extension, lambda rules: rules.without(domain))

    def reset(self, scope: Scope | str, extension: str | None = None) -> PolicySnapshot:
        """
        Reset a scope.

        Both lists of the scope are cleared. A cleared global scope
        defers to the built-in defaults again.
        """
        scope = Scope.parse(scope)
        logger.info("Resetting %s rules", self._label(scope, extension))
        return self._update(scope, extension, lambda _: RuleLayer())

    def _update(
        self,
        scope: Scope,
        extension: str | None,
        transform: Callable[[RuleLayer], RuleLayer],
    ) -> PolicySnapshot:
        rules = transform(self.rules(scope, extension))

        if scope is Scope.PROJECT:
            self._project_file = self._project_file.with_rules(rules)
            self.fs.write_config(self.fs.project_config_path, self._project_file)
        elif scope is Scope.GLOBAL:
            self._global_file = self._global_file.with_rules(rules)
            self.fs.write_config(self.fs.global_config_path, self._global_file)
        else:
            name = self._require_extension(extension)
            self._global_file = self._global_file.with_extension_rules(name, rules)
            self.fs.write_config(self.fs.global_config_path, self._global_file)
            # Other extensions' rules are not part of this snapshot
            if name != self._snapshot.extension_name:
                return self._snapshot

        self._snapshot = self._snapshot.replace(scope, rules)
        return self._snapshot

    @staticmethod
    def _require_extension(extension: str | None) -> str:
        if not extension or not extension.strip():
            raise InvalidScopeError("extension", "Extension scope requires an extension name")
        return normalize_extension(extension)

    @staticmethod
    def _label(scope: Scope, extension: str | None) -> str:
        if scope is Scope.EXTENSION:
            return f"extension {extension}"
        return scope.value

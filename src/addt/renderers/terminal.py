"""
Terminal renderer using Rich.

Outputs firewall rules, check results and config keys to the terminal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from addt.domain.firewall import DEFAULT_ALLOWED_DOMAINS, Layer

if TYPE_CHECKING:
    from addt.domain.firewall import CheckOutcome, FirewallMode, RuleLayer
    from addt.engine.config_keys import KeyInfo


class TerminalRenderer:
    """
    Renders addt output to the terminal using Rich.

    Provides color-coded allow/deny output and tables.
    """

    def __init__(self, console: Console | None = None) -> None:
        """
        Initialize the terminal renderer.

        Args:
            console: Rich console to use (creates new one if None).
        """
        self.console = console or Console()

    def render_rules(self, label: str, rules: RuleLayer, show_defaults: bool = False) -> None:
        """
        Render one scope's firewall rules.

        Args:
            label: Scope label, e.g. "global" or "extension claude".
            rules: The scope's rules.
            show_defaults: Also list the built-in default domains.
        """
        self.console.print(f"[bold]Firewall rules ({label})[/bold]")

        if rules.is_empty:
            self.console.print("  [dim]No rules configured.[/dim]")
        else:
            table = Table(show_header=True, box=None, padding=(0, 2))
            table.add_column("Rule", style="bold")
            table.add_column("Domain")

            for domain in rules.denied:
                table.add_row("[red]deny[/red]", domain)
            for domain in rules.allowed:
                table.add_row("[green]allow[/green]", domain)

            self.console.print(table)

        if show_defaults:
            self.console.print()
            self.console.print("[bold]Default allowed domains[/bold]")
            for domain in DEFAULT_ALLOWED_DOMAINS:
                self.console.print(f"  [dim]{domain}[/dim]")

    def render_check(self, domain: str, outcome: CheckOutcome, mode: FirewallMode) -> None:
        """Render the result of a firewall check."""
        if outcome.allowed:
            status = "[green]✓ ALLOWED[/green]"
        else:
            status = "[red]✗ DENIED[/red]"

        self.console.print(f"{status} [bold]{domain}[/bold]")

        if outcome.layer is Layer.OFF:
            reason = "firewall mode is off"
        elif outcome.layer is Layer.NONE:
            reason = f"no rule matched ({mode.value} mode)"
        else:
            verb = "allowed" if outcome.allowed else "denied"
            reason = f"{verb} by {outcome.layer.value} rules"

        self.console.print(f"  Layer: [cyan]{outcome.layer.value}[/cyan] [dim]({reason})[/dim]")

    def render_config_keys(self, rows: list[tuple[KeyInfo, str, str]]) -> None:
        """
        Render config keys.

        Args:
            rows: (key info, value in the file, effective value) tuples.
        """
        table = Table(title="addt configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_column("Effective", style="bold")
        table.add_column("Env var", style="dim")
        table.add_column("Description")

        for info, value, effective in rows:
            table.add_row(info.key, value or "-", effective, info.env_var, info.description)

        self.console.print(table)

"""
Main CLI entry point for addt.

Usage:
    addt firewall global allow api.example.com
    addt firewall extension claude list
    addt firewall check registry.npmjs.org
    addt config set otel.enabled true
    addt otel env --extension claude
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from addt import __version__
from addt.domain.exceptions import AddtError
from addt.domain.firewall import Scope, normalize_domain, normalize_extension

if TYPE_CHECKING:
    from addt.adapters.fs import FileSystemAdapter

# Create the main Typer app
app = typer.Typer(
    name="addt",
    help="Run AI coding assistants in isolated containers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

firewall_app = typer.Typer(
    help="Manage network firewall rules.",
    no_args_is_help=True,
)
config_app = typer.Typer(
    help="Manage addt configuration.",
    no_args_is_help=True,
)
otel_app = typer.Typer(
    help="OpenTelemetry settings for containers.",
    no_args_is_help=True,
)

app.add_typer(firewall_app, name="firewall")
app.add_typer(config_app, name="config")
app.add_typer(otel_app, name="otel")

console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    terminal = "terminal"
    json = "json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"addt version {__version__}")
        raise typer.Exit()


def _fail(error: AddtError) -> NoReturn:
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    raise typer.Exit(1)


def _fs() -> FileSystemAdapter:
    from addt.adapters.fs import FileSystemAdapter

    return FileSystemAdapter()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    addt — Run AI coding assistants in isolated containers.

    Examples:

        addt firewall global list

        addt firewall project allow custom-api.com

        addt config set otel.enabled true
    """
    from addt.log import configure_logging

    configure_logging()


# --- Firewall ---


def _scope_label(scope: Scope, extension: str | None) -> str:
    if scope is Scope.EXTENSION:
        return f"extension {extension}"
    return scope.value


def _mutate(ctx: typer.Context, scope: Scope, action: str, domain: str) -> None:
    from addt.engine.rule_store import RuleStore

    extension = ctx.obj if scope is Scope.EXTENSION else None

    try:
        store = RuleStore(_fs())
        getattr(store, action)(scope, domain, extension)
        domain = normalize_domain(domain)
    except AddtError as e:
        _fail(e)

    verbs = {"allow": "Allowed", "deny": "Denied", "remove": "Removed"}
    console.print(
        f"[green]✓ {verbs[action]} {escape(domain)} in "
        f"{escape(_scope_label(scope, extension))} rules[/green]"
    )


def _scope_app(scope: Scope, help: str) -> typer.Typer:
    """Build the allow/deny/remove/list/reset commands for one scope."""
    scope_app = typer.Typer(help=help, no_args_is_help=True)

    @scope_app.command()
    def allow(
        ctx: typer.Context,
        domain: Annotated[str, typer.Argument(help="Domain to add to the allowed list.")],
    ) -> None:
        """Add domain to allowed list."""
        _mutate(ctx, scope, "allow", domain)

    @scope_app.command()
    def deny(
        ctx: typer.Context,
        domain: Annotated[str, typer.Argument(help="Domain to add to the denied list.")],
    ) -> None:
        """Add domain to denied list."""
        _mutate(ctx, scope, "deny", domain)

    @scope_app.command()
    def remove(
        ctx: typer.Context,
        domain: Annotated[str, typer.Argument(help="Domain to remove from both lists.")],
    ) -> None:
        """Remove domain from any list."""
        _mutate(ctx, scope, "remove", domain)

    @scope_app.command("list")
    def list_rules(
        ctx: typer.Context,
        format: Annotated[
            OutputFormat,
            typer.Option("--format", "-f", help="Output format."),
        ] = OutputFormat.terminal,
    ) -> None:
        """List firewall rules."""
        from addt.engine.rule_store import RuleStore
        from addt.renderers.json_renderer import JsonRenderer
        from addt.renderers.terminal import TerminalRenderer

        extension = ctx.obj if scope is Scope.EXTENSION else None

        try:
            rules = RuleStore(_fs()).rules(scope, extension)
        except AddtError as e:
            _fail(e)

        match format:
            case OutputFormat.terminal:
                TerminalRenderer(console=console).render_rules(
                    _scope_label(scope, extension),
                    rules,
                    show_defaults=scope is Scope.GLOBAL,
                )
            case OutputFormat.json:
                typer.echo(JsonRenderer().render_rules(scope.value, rules, extension))

    @scope_app.command()
    def reset(ctx: typer.Context) -> None:
        """Reset to defaults (global) or clear (project/extension)."""
        from addt.engine.rule_store import RuleStore

        extension = ctx.obj if scope is Scope.EXTENSION else None

        try:
            RuleStore(_fs()).reset(scope, extension)
        except AddtError as e:
            _fail(e)

        console.print(
            f"[green]✓ Reset {escape(_scope_label(scope, extension))} rules[/green]"
        )

    return scope_app


firewall_app.add_typer(
    _scope_app(Scope.GLOBAL, "Manage global firewall rules (~/.addt/config.yaml)."),
    name="global",
)
firewall_app.add_typer(
    _scope_app(Scope.PROJECT, "Manage project firewall rules (.addt.yaml)."),
    name="project",
)

extension_app = _scope_app(Scope.EXTENSION, "Manage per-extension firewall rules.")


@extension_app.callback()
def extension_scope(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Extension name, e.g. claude.")],
) -> None:
    """Manage per-extension firewall rules."""
    ctx.obj = normalize_extension(name)


firewall_app.add_typer(extension_app, name="extension")


@firewall_app.command()
def check(
    domain: Annotated[str, typer.Argument(help="Domain to check.")],
    extension: Annotated[
        str,
        typer.Option(
            "--extension",
            "-e",
            help="Include this extension's rules.",
        ),
    ] = "",
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format."),
    ] = OutputFormat.terminal,
) -> None:
    """
    Check whether a domain is allowed.

    Rule evaluation (layered override, most specific wins):
    Defaults → Extension → Global → Project. Each layer checks deny
    first, then allow. Exits 1 when the domain is denied.

    Examples:

        addt firewall check api.anthropic.com

        addt firewall check api.openai.com --extension codex
    """
    from addt.adapters.otel import OtelAdapter
    from addt.domain.settings import ResourceAttrs
    from addt.engine.config_loader import load_config
    from addt.engine.firewall_engine import FirewallEngine
    from addt.renderers.json_renderer import JsonRenderer
    from addt.renderers.terminal import TerminalRenderer

    fs = _fs()
    extension = normalize_extension(extension)

    try:
        config = load_config(fs, extension=extension)
        engine = FirewallEngine(config.snapshot)
        otel = OtelAdapter(
            config.otel,
            ResourceAttrs(extension=extension, version=__version__, project=fs.project_name),
        )

        with otel.firewall_check_span(domain) as span:
            outcome = engine.check(domain)
            otel.record_decision(span, outcome, engine.snapshot.mode)

        domain = normalize_domain(domain)
    except AddtError as e:
        _fail(e)

    match format:
        case OutputFormat.terminal:
            TerminalRenderer(console=console).render_check(
                domain, outcome, engine.snapshot.mode
            )
            if not config.firewall.enabled:
                console.print(
                    "[dim]Note: the firewall is disabled "
                    "(addt config set firewall.enabled true).[/dim]"
                )
        case OutputFormat.json:
            typer.echo(JsonRenderer().render_check(domain, outcome, engine.snapshot.mode))

    if not outcome.allowed:
        raise typer.Exit(1)


# --- Config ---


ProjectOption = Annotated[
    bool,
    typer.Option(
        "--project",
        "-p",
        help="Use the project file (.addt.yaml) instead of ~/.addt/config.yaml.",
    ),
]


@config_app.command("list")
def config_list(project: ProjectOption = False) -> None:
    """List config keys with their stored and effective values."""
    from addt.engine.config_keys import CONFIG_KEYS, effective_value, get_value
    from addt.engine.config_loader import load_config
    from addt.renderers.terminal import TerminalRenderer

    fs = _fs()

    try:
        config_file = fs.read_project_config() if project else fs.read_global_config()
        resolved = load_config(fs)
    except AddtError as e:
        _fail(e)

    rows = [
        (info, get_value(config_file, info.key), effective_value(resolved, info.key))
        for info in CONFIG_KEYS
    ]
    TerminalRenderer(console=console).render_config_keys(rows)


@config_app.command("get")
def config_get(
    key: Annotated[str, typer.Argument(help="Config key, e.g. otel.endpoint.")],
    project: ProjectOption = False,
) -> None:
    """Print the value stored for a key (empty if unset)."""
    from addt.engine.config_keys import get_value

    fs = _fs()

    try:
        config_file = fs.read_project_config() if project else fs.read_global_config()
        value = get_value(config_file, key)
    except AddtError as e:
        _fail(e)

    typer.echo(value)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Config key, e.g. otel.enabled.")],
    value: Annotated[str, typer.Argument(help="Value to store.")],
    project: ProjectOption = False,
) -> None:
    """Set a config key."""
    from addt.engine.config_keys import set_value

    fs = _fs()
    path = fs.project_config_path if project else fs.global_config_path

    try:
        fs.write_config(path, set_value(fs.read_config(path), key, value))
    except AddtError as e:
        _fail(e)

    console.print(f"[green]✓ Set {escape(key)} = {escape(value)}[/green]")


@config_app.command("unset")
def config_unset(
    key: Annotated[str, typer.Argument(help="Config key to clear.")],
    project: ProjectOption = False,
) -> None:
    """Clear a config key so less specific settings apply."""
    from addt.engine.config_keys import unset_value

    fs = _fs()
    path = fs.project_config_path if project else fs.global_config_path

    try:
        fs.write_config(path, unset_value(fs.read_config(path), key))
    except AddtError as e:
        _fail(e)

    console.print(f"[green]✓ Unset {escape(key)}[/green]")


# --- OpenTelemetry ---


@otel_app.command("env")
def otel_env(
    extension: Annotated[
        str,
        typer.Option("--extension", "-e", help="Extension running in the container."),
    ] = "",
    provider: Annotated[
        str,
        typer.Option("--provider", help="Container provider, e.g. podman."),
    ] = "",
    project_name: Annotated[
        Optional[str],
        typer.Option("--project-name", help="Project name (default: current directory)."),
    ] = None,
) -> None:
    """
    Print the OTEL_* environment a container would receive.

    Prints nothing when telemetry is disabled.
    """
    from addt.domain.settings import ResourceAttrs
    from addt.engine.config_loader import load_config
    from addt.engine.otel_env import compose

    fs = _fs()
    extension = normalize_extension(extension)

    try:
        config = load_config(fs, extension=extension)
    except AddtError as e:
        _fail(e)

    attrs = ResourceAttrs(
        extension=extension,
        provider=provider,
        version=__version__,
        project=fs.project_name if project_name is None else project_name,
    )

    for key, value in sorted(compose(config.otel, attrs).items()):
        typer.echo(f"{key}={value}")


if __name__ == "__main__":
    app()

"""CLI for cc-wrap."""

import asyncio
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from cc_wrap import __version__

app = typer.Typer(
    name="cc-wrap",
    help="Launch Claude Code with layered config and render its status line.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"cc-wrap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging on stderr")
    ] = False,
) -> None:
    """Launch Claude Code with layered config and render its status line."""
    from cc_wrap.log import configure_logging

    configure_logging(verbose)


@app.command()
def statusline(
    input_file: Annotated[
        Path | None, typer.Argument(help="JSON payload file (default: stdin)")
    ] = None,
) -> None:
    """Print a one-line session summary from the runtime's JSON payload."""
    from cc_wrap.jsonio import read_text
    from cc_wrap.statusline import generate

    raw = read_text(input_file) if input_file is not None else sys.stdin.read()
    line = asyncio.run(generate(raw))
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def launch(
    ctx: typer.Context,
    provider: Annotated[
        str | None,
        typer.Option("--provider", help="Backend: glm, minimax or chutes"),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model-override", help="Use one model id for every tier"),
    ] = None,
) -> None:
    """Merge config, then run Claude Code. Extra arguments are passed through."""
    from cc_wrap.errors import LaunchError, ProviderCredentialError
    from cc_wrap.launcher import launch as run_launch
    from cc_wrap.providers import ProviderId
    from cc_wrap.settings import default_paths

    provider_id = None
    if provider is not None:
        try:
            provider_id = ProviderId(provider.lower())
        except ValueError:
            choices = ", ".join(p.value for p in ProviderId)
            err_console.print(
                f"[red]Error: Unknown provider {provider!r} (choose from {choices})[/red]"
            )
            raise typer.Exit(2)

    try:
        code = run_launch(
            list(ctx.args),
            dict(os.environ),
            default_paths(),
            provider_id=provider_id,
            model=model,
        )
    except ProviderCredentialError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    except LaunchError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(127)
    # Killed by a signal: report it the way a shell would
    raise typer.Exit(code if code >= 0 else 128 - code)


@app.command()
def providers(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List known backends and whether their key is set."""
    from cc_wrap.providers import PROVIDERS

    rows = [
        {
            "id": provider_id.value,
            "name": config.name,
            "base_url": config.base_url,
            "models": [config.fast_model, config.default_model, config.premium_model],
            "api_key_env_var": config.api_key_env_var,
            "ready": bool(config.credential(os.environ)),
        }
        for provider_id, config in PROVIDERS.items()
    ]

    if json_output:
        console.print_json(data={"providers": rows})
        return

    table = Table("id", "name", "base url", "key", "ready")
    for row in rows:
        ready = "[green]yes[/green]" if row["ready"] else "[yellow]no[/yellow]"
        table.add_row(row["id"], row["name"], row["base_url"], row["api_key_env_var"], ready)
    console.print(table)


@app.command()
def manifest(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the MCP servers a launch would pass to Claude Code."""
    from cc_wrap.mcp import build_mcp_servers, load_descriptors
    from cc_wrap.settings import default_paths

    servers = build_mcp_servers(load_descriptors(default_paths().mcp))

    if json_output:
        console.print_json(data={"mcpServers": servers})
        return

    if not servers:
        console.print("[yellow]No MCP servers enabled.[/yellow]")
        return

    for name, entry in servers.items():
        target = entry.get("url") or " ".join([entry["command"], *entry["args"]])
        console.print(f"[cyan]{name}[/cyan] ({entry['type']}): {target}")


if __name__ == "__main__":
    app()

"""
codeforge — CLI entrypoint.

Usage:
    python -m codeforge.main --help
    python -m codeforge.main chat --query "build a hello-world app"
    python -m codeforge.main create-codebase --description "..." --output-dir out
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from codeforge import __version__
from codeforge.core.observability.logging_config import (
    LOG_FILE_ENV_VAR,
    LOG_FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="codeforge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to codeforge.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """codeforge — interactive CLI with Gemini that writes files and runs commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV_VAR),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV_VAR),
        quiet_third_party=not debug,
    )


def _make_client(ctx: click.Context):
    """Load settings and build a Gemini client, exiting on config errors."""
    from codeforge.core.clients.gemini import GeminiClient
    from codeforge.core.config.loader import ConfigError, load_settings

    try:
        settings = load_settings(ctx.obj.get("config_path"))
        settings.require_api_key()
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    return GeminiClient(settings)


@cli.command()
@click.option("--query", required=True, help="The query to send to Gemini.")
@click.option("--output-dir", default=None, help="Directory actions resolve against.")
@click.option("--interactive", "-i", is_flag=True, help="Keep chatting, replaying feedback.")
@click.option("--mock", is_flag=True, help="Acknowledge actions (and fallback files) without executing or writing them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def chat(
    ctx: click.Context,
    query: str,
    output_dir: str | None,
    interactive: bool,
    mock: bool,
    as_json: bool,
) -> None:
    """Chat with Gemini and execute the commands it returns.

    Examples:

        codeforge chat --query "create a flask hello world in demo/"

        codeforge chat -i --query "scaffold a CLI" --output-dir work
    """
    from codeforge.adapters.registry import default_registry
    from codeforge.core.engine.executor import ActionExecutor
    from codeforge.core.use_cases.chat import ChatState, run_chat_turn

    client = _make_client(ctx)
    output_root = output_dir or client.settings.output_dir
    executor = ActionExecutor(default_registry(mock_mode=mock))
    state = ChatState()

    while True:
        result = run_chat_turn(query, state, client, output_root, executor=executor)
        state = result.state

        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
        else:
            _print_chat_turn(ctx, result)
            if executor.registry.mock_mode:
                click.secho(
                    f"   [mock] {executor.registry.mock_adapter.call_count} actions acknowledged, nothing executed",
                    fg="yellow",
                )

        if not interactive:
            if result.error:
                sys.exit(1)
            return

        query = click.prompt("\ncodeforge", default="", show_default=False)
        if query.strip().lower() in ("", "exit", "quit"):
            return


def _print_chat_turn(ctx: click.Context, result) -> None:
    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        return

    report = result.report
    if result.used_fallback:
        click.secho(
            "📄 Reply was not an action document — materialized it as files",
            fg="yellow",
        )

    if report is not None:
        for fb in report.feedback:
            if fb.ok:
                click.secho("   ✓ ", fg="green", nl=False)
            else:
                click.secho("   ✗ ", fg="red", nl=False)
            click.echo(f"{fb.action_kind}  {fb.action_detail}")
            if fb.message and (fb.failed or ctx.obj.get("verbose")):
                for line in fb.message.split("\n")[:10]:
                    click.echo(f"     │ {line}")

        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
            report.status, "white"
        )
        click.secho(
            f"   Result: {report.succeeded}/{report.total} succeeded",
            fg=status_color,
            bold=True,
        )

    if result.user_message:
        click.echo(f"\n{result.user_message}")


@cli.command()
@click.option("--query", required=True, help="The query to send to Gemini.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def execute(ctx: click.Context, query: str, as_json: bool) -> None:
    """Let Gemini write and run code, and show what it did."""
    from codeforge.core.models.response import (
        CodeExecutionResultPart,
        ExecutableCodePart,
        TextPart,
    )
    from codeforge.core.use_cases.execute import run_execute

    result = run_execute(query, _make_client(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho("\n--- Gemini Response ---", fg="cyan", bold=True)
    for part in result.parts:
        if isinstance(part, TextPart):
            click.echo(part.text)
        elif isinstance(part, ExecutableCodePart):
            click.secho(f"\n--- Generated Code ({part.language}): ---", fg="cyan")
            click.echo(part.code)
            click.secho("--- End of Generated Code ---\n", fg="cyan")
        elif isinstance(part, CodeExecutionResultPart):
            color = "green" if part.outcome.upper().endswith("OK") else "red"
            click.secho(f"\n--- Execution Result: {part.outcome} ---", fg=color)
            click.echo(part.output)
            click.secho("--- End of Execution Result ---\n", fg=color)


@cli.command("create-codebase")
@click.option("--description", required=True, help="Description of the codebase to create.")
@click.option("--output-dir", default=None, help="Output directory for the generated codebase.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create_codebase(
    ctx: click.Context,
    description: str,
    output_dir: str | None,
    as_json: bool,
) -> None:
    """Create a codebase from a description."""
    from codeforge.core.use_cases.create_codebase import run_create_codebase

    client = _make_client(ctx)
    result = run_create_codebase(
        description,
        client,
        output_dir or client.settings.output_dir,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(
        f"\n✅ Created {len(result.created_files)} files in {result.output_dir}",
        fg="green",
        bold=True,
    )
    if not ctx.obj.get("quiet"):
        for path in result.created_files:
            click.echo(f"   • {path}")
    click.echo()


if __name__ == "__main__":
    cli()

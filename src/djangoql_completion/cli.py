"""Typer-based CLI for inspecting how the engine sees a query."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.text import Text

from djangoql_completion.application import DjangoQLCompletion
from djangoql_completion.completion import CompletionResult, render_suggestion
from djangoql_completion.config import CompletionConfig, load_config_file
from djangoql_completion.core import Context, tokenize_all
from djangoql_completion.logger import get_logger, setup_logger

load_dotenv()

logger = get_logger("cli")
console = Console()

app = typer.Typer(
    name="djangoql-complete",
    help="Tokenize DjangoQL queries and show the completions offered at a cursor position",
    epilog="""
    Examples:
    $ djangoql-complete tokens 'author.name ~ "Tol"'
    $ djangoql-complete suggest 'author.' --schema introspections.json
    """,
    add_completion=False,
)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_schema_file(path: str) -> Any:
    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        console.print(Text(f"Schema file not found: {path}", style="red"))
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        console.print(Text(f"Invalid JSON in schema file {path}: {e}", style="red"))
        raise typer.Exit(code=1)


def _print_context(context: Context) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("scope", context.scope.value if context.scope else "-")
    table.add_row("prefix", repr(context.prefix))
    table.add_row("model", context.model or "-")
    table.add_row("field", context.field or "-")
    table.add_row("model stack", " > ".join(context.model_stack) or "-")
    console.print(table)


def _print_result(result: CompletionResult) -> None:
    if not result.suggestions:
        console.print("No suggestions" + (" (still loading)" if result.loading else ""))
        return

    table = Table(title="Suggestions")
    table.add_column("#", justify="right")
    table.add_column("Suggestion")
    table.add_column("Before")
    table.add_column("After")
    for index, suggestion in enumerate(result.suggestions):
        marker = "*" if index == result.selected else ""
        table.add_row(
            f"{marker}{index}",
            render_suggestion(suggestion, result.prefix, result.highlight_case_sensitive),
            repr(suggestion.snippet_before),
            repr(suggestion.snippet_after),
        )
    console.print(table)
    if result.loading:
        console.print("[dim]more values are still loading[/dim]")


async def _suggest(
    query: str,
    cursor_pos: int,
    schema_source: str,
    model: Optional[str],
    config: Optional[CompletionConfig],
) -> Optional[tuple[Context, CompletionResult]]:
    engine = DjangoQLCompletion(config=config)
    try:
        if _is_url(schema_source):
            if not await engine.fetch_introspections(schema_source):
                return None
        else:
            engine.load_introspections(_read_schema_file(schema_source))
        if model:
            engine.set_current_model(model)
        if engine.current_model is None:
            return None

        context = engine.get_context(query, cursor_pos)
        result = engine.generate_suggestions(query, cursor_pos)
        if result.loading:
            # print what the first page brings rather than an empty list
            await engine.value_service.wait_idle()
            result = engine.generate_suggestions(query, cursor_pos)
        return context, result
    finally:
        await engine.aclose()


@app.command()
def tokens(query: str = typer.Argument(..., help="Query to tokenize")) -> None:
    """Print the tokens of a query with their offsets."""
    table = Table(title="Tokens")
    table.add_column("Kind", style="cyan")
    table.add_column("Value")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    for token in tokenize_all(query):
        table.add_row(token.name.value, repr(token.value), str(token.start), str(token.end))
    console.print(table)


@app.command()
def suggest(
    query: str = typer.Argument(..., help="Query text"),
    schema: Optional[str] = typer.Option(
        os.getenv("DJANGOQL_SCHEMA"),
        "--schema",
        help="Path or URL of the introspection JSON",
    ),
    cursor: Optional[int] = typer.Option(None, "--cursor", help="Cursor offset (defaults to the end of the query)"),
    model: Optional[str] = typer.Option(None, "--model", help="Start completion from this model"),
    config: Optional[Path] = typer.Option(None, "--config", help="JSON file with completion options"),
    debug: bool = typer.Option(os.getenv("DJANGOQL_DEBUG", "false").lower() == "true", "--debug", help="Enable debug logging"),
) -> None:
    """Print the context and the suggestions offered at the cursor."""
    setup_logger(log_level="DEBUG" if debug else "WARNING")

    if not schema:
        console.print(Text("No schema given; use --schema or set DJANGOQL_SCHEMA", style="red"))
        raise typer.Exit(code=1)

    cursor_pos = len(query) if cursor is None else cursor
    if not 0 <= cursor_pos <= len(query):
        raise typer.BadParameter(f"cursor must be between 0 and {len(query)}", param_hint="--cursor")

    completion_config = None
    if config is not None:
        try:
            completion_config = load_config_file(config)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            console.print(Text(str(e), style="red"))
            raise typer.Exit(code=1)

    outcome = asyncio.run(_suggest(query, cursor_pos, schema, model, completion_config))
    if outcome is None:
        console.print(Text(f"Could not load a usable schema from {schema}", style="red"))
        raise typer.Exit(code=1)

    context, result = outcome
    logger.debug(f"Context for {query!r} at {cursor_pos}: {context}")
    _print_context(context)
    _print_result(result)


def run():
    """Entry point for the djangoql-complete command."""
    app()


if __name__ == "__main__":
    run()

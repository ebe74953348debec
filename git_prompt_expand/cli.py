"""Typer-based CLI for git-prompt-expand."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .cache import RepoStateCache
from .config import Settings, load_settings
from .evaluator import ExpansionContext
from .exceptions import PromptExpandError
from .git import GitStateProvider
from .models import Domain, RepoState
from .paths import DirectoryRuleApplier


app = typer.Typer(
    help="Expand git-aware zsh prompt escapes, leaving standard escapes for zsh.",
    add_completion=False,
)
console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-prompt-expand {__version__}")
        raise typer.Exit()


@app.command()
def main(
    prompts: Annotated[
        Optional[list[str]],
        typer.Argument(help="Prompt templates to expand. Each is written out in order, separated by --sep."),
    ] = None,
    sep: Annotated[
        Optional[str],
        typer.Option("--sep", "-s", help="Single character placed between expanded prompts (default: newline)."),
    ] = None,
    null: Annotated[
        bool,
        typer.Option("--null", "-0", help="Separate prompts with a NUL character, overriding --sep."),
    ] = False,
    repo: Annotated[
        Optional[Path],
        typer.Option("--repo", "-C", help="Directory to query git in (defaults to the current directory).", file_okay=False),
    ] = None,
    show_state: Annotated[
        bool,
        typer.Option("--show-state", help="Print the resolved repository state to stderr."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Expand each PROMPT and print the results joined by the separator.

    Examples:

        git-prompt-expand '%(G.%r%1(p. ↑%p.).)'

        git-prompt-expand -0 '%/{:~:$HOME}' '%(y.*.)'
    """
    _ = version  # handled via callback
    configure_logging(verbose)
    try:
        settings = load_settings()
        separator = "\0" if null else _resolve_separator(sep, settings)
        context = build_context(settings, repo)
        expanded = [context.expand(prompt) for prompt in prompts or []]
        if show_state:
            render_state(context.cache.snapshot())
    except PromptExpandError as exc:
        _fail(str(exc))
    typer.echo(separator.join(expanded), nl=False)


def build_context(settings: Settings, repo: Path | None = None) -> ExpansionContext:
    """One cache and one working directory shared by every prompt in this run."""

    provider = GitStateProvider(cwd=repo.expanduser() if repo else None, settings=settings)
    return ExpansionContext(cache=RepoStateCache(provider), directory=DirectoryRuleApplier(os.environ))


def render_state(state: RepoState) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Fact")
    table.add_column("Value")
    table.add_row("in repo", str(state.in_repo))
    table.add_row("branch", state.branch or "-")
    table.add_row("ahead", str(state.ahead))
    table.add_row("behind", str(state.behind))
    table.add_row("stashes", str(state.stashes))
    table.add_row("dirty", str(state.dirty))
    table.add_row("modified", str(state.modified))
    table.add_row("staged", str(state.staged))
    table.add_row("domain", f"{state.domain_class} ({Domain(state.domain_class).name.lower()})")
    console.print(table)


def _resolve_separator(sep: str | None, settings: Settings) -> str:
    value = settings.separator if sep is None else sep
    if len(value) != 1:
        raise typer.BadParameter("Separator must be a single character.", param_hint="--sep")
    return value


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""
View Rendering CLI

Renders views, warms the compiled view cache, and clears compiled artifacts.

Commands:
    render  - Render a view to stdout
    compile - Compile one or more views without rendering them
    clear   - Delete compiled artifacts

Examples:\n

    lazyview render home                               # Render views/home.view.*

    lazyview render admin.users.index -p title=Users   # Pass call parameters

    lazyview render home --no-cache                    # Always recompile

    lazyview compile home admin.users.index            # Warm the cache

    lazyview clear                                     # Remove every compiled view
"""

from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from typing_extensions import Annotated

from lazyview.compiler import JinjaViewCompiler
from lazyview.config import LOGS_PATH, load_view_config
from lazyview.exceptions import ViewError
from lazyview.logger import setup_view_logger
from lazyview.view import View

app = typer.Typer(
    help="Render named views and manage the compiled view cache",
    add_completion=False,
    invoke_without_command=True,
)

ViewsDirOption = Annotated[
    Optional[Path],
    typer.Option("--views-dir", "-d", help="Views root (default: VIEWS_PATH or config)"),
]
CompiledDirOption = Annotated[
    Optional[Path],
    typer.Option("--compiled-dir", "-c", help="Compiled views root (default: views root)"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="YAML view config (default: VIEW_CONFIG_PATH)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
]


def _configure_logging(verbose: bool, log_dir: Optional[Path] = None, view: Optional[View] = None) -> None:
    """Console logging for CLI runs, plus a session log file when log_dir is given."""
    if log_dir is not None:
        setup_view_logger(
            log_dir,
            views_dir=view.get_dir() if view else None,
            compiled_dir=view.get_compiled_dir() if view else None,
            cache_enabled=view.enable_cache if view else None,
            console_level="DEBUG" if verbose else "WARNING",
        )
        return

    logger.remove()
    logger.add(
        lambda message: typer.echo(message, err=True, nl=False),
        format="<level>{level: <7}</level> | {message}",
        level="DEBUG" if verbose else "WARNING",
    )


def _build_view(
    views_dir: Optional[Path],
    compiled_dir: Optional[Path],
    config_path: Optional[Path],
    no_cache: bool = False,
) -> View:
    config = load_view_config(config_path)
    if views_dir is not None:
        config.views_dir = views_dir
    if compiled_dir is not None:
        config.compiled_dir = compiled_dir
    if no_cache:
        config.enable_cache = False

    return View(
        views_dir=config.views_dir,
        compiled_dir=config.compiled_dir,
        params=config.params,
        compiler=JinjaViewCompiler(autoescape=config.autoescape, views_dir=config.views_dir),
        enable_cache=config.enable_cache,
    )


def _parse_params(pairs: Optional[List[str]]) -> dict:
    """Parse key=value pairs from the command line."""
    params = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--param")
        params[key] = value
    return params


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    name: Annotated[str, typer.Argument(help="Dotted view name (e.g., admin.users.index)")],
    param: Annotated[
        Optional[List[str]],
        typer.Option("--param", "-p", help="Call parameter as key=value (repeatable)"),
    ] = None,
    views_dir: ViewsDirOption = None,
    compiled_dir: CompiledDirOption = None,
    config_path: ConfigOption = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Ignore existing compiled views and recompile"),
    ] = False,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help=f"Write a session log here (e.g., {LOGS_PATH}/render)"),
    ] = None,
    verbose: VerboseOption = False,
):
    """
    Render a view and print the result to stdout.

    Examples:\n

        $ lazyview render home

        $ lazyview render admin.users.index -p title=Users -p page=2
    """
    params = _parse_params(param)
    view = _build_view(views_dir, compiled_dir, config_path, no_cache=no_cache)
    _configure_logging(verbose, log_dir, view)

    try:
        output = view.render(name, params)
    except ViewError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(output, nl=False)


@app.command("compile")
def compile_command(
    names: Annotated[List[str], typer.Argument(help="Dotted view names to compile")],
    views_dir: ViewsDirOption = None,
    compiled_dir: CompiledDirOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Compile views into the compiled view cache without rendering them.

    Examples:\n

        $ lazyview compile home admin.users.index
    """
    view = _build_view(views_dir, compiled_dir, config_path)
    _configure_logging(verbose)

    failures = 0
    for name in names:
        try:
            compiled_path = view.compile(name)
        except ViewError as e:
            failures += 1
            typer.secho(f"✗ {name}: {e}", fg=typer.colors.RED, err=True)
            continue
        typer.secho(f"✓ {name} -> {compiled_path}", fg=typer.colors.GREEN)

    raise typer.Exit(code=1 if failures else 0)


@app.command("clear")
def clear_command(
    name: Annotated[
        Optional[str],
        typer.Argument(help="Only clear this view (default: all compiled views)"),
    ] = None,
    views_dir: ViewsDirOption = None,
    compiled_dir: CompiledDirOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Delete compiled view artifacts.

    Examples:\n

        $ lazyview clear

        $ lazyview clear admin.users.index
    """
    view = _build_view(views_dir, compiled_dir, config_path)
    _configure_logging(verbose)

    removed = view.clear_compiled(name)
    typer.echo(f"Removed {removed} compiled view(s) from {view.get_compiled_dir()}")


if __name__ == "__main__":
    app()

"""
Main CLI for skillbook using Click.

A thin host tool around the library: it loads a directory of skills into a
DocumentStore and walks the disclosure levels on request.
"""

import json
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from . import __version__
from .config.loader import load_config
from .config.schema import AppConfig
from .disclosure import DisclosureSession
from .errors import DuplicateName, NotFound, SkillbookError
from .logging import configure_logging
from .matcher import TriggerMatcher
from .prompt import read_properties, to_prompt
from .store import DocumentStore

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 3
EXIT_NOT_FOUND = 4


def _build_config(ctx: click.Context, **cli_args: Any) -> AppConfig:
    """Load the configuration using the group options plus command overrides."""
    options = dict(ctx.obj or {})
    config_path = options.pop("config", None)
    options.update({k: v for k, v in cli_args.items() if v is not None})
    try:
        config = load_config(config_path=config_path, cli_args=options)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(config.logging, quiet=options.get("quiet", False))
    return config


def _load_store(config: AppConfig) -> DocumentStore:
    """Build and load the store, exiting with a readable error on failure."""
    store = DocumentStore.from_config(config.store)
    try:
        problems = store.load_all(config.store.root)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except DuplicateName as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILED)

    for problem in problems:
        click.echo(f"Skipped {problem.path}: {problem.reason}", err=True)
    return store


@click.group()
@click.version_option(version=__version__, prog_name="skillbook")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML configuration file",
)
@click.option(
    "-r",
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding the skills (overrides store.root)",
)
@click.option("-v", "--verbose", count=True, help="Technical logs (-v info, -vv debug)")
@click.option("--quiet", is_flag=True, help="Only print command output")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write JSON logs to this file",
)
@click.pass_context
def main(
    ctx: click.Context,
    config: Path | None,
    root: Path | None,
    verbose: int,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """skillbook - progressive disclosure of skill documents.

    Skills are disclosed in three levels: metadata (name + description),
    body, and referenced documents on demand.
    """
    ctx.obj = {
        "config": config,
        "root": root,
        "verbose": verbose,
        "quiet": quiet,
        "log_file": log_file,
    }


@main.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include reference documents")
@click.pass_context
def list_documents(ctx: click.Context, show_all: bool) -> None:
    """List skills and their descriptions."""
    config = _build_config(ctx)
    store = _load_store(config)

    metadata = store.metadata(kind=None if show_all else "skill")
    if not metadata:
        click.echo("  No skills found.")
        return
    for meta in metadata:
        label = "" if meta.kind == "skill" else " (reference)"
        click.echo(f"  {meta.name:24s} {meta.description}{label}")


@main.command()
@click.argument("query")
@click.option("--min-overlap", type=int, help="Minimum query tokens that must match")
@click.option("--limit", type=int, help="Maximum number of results")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def match(
    ctx: click.Context,
    query: str,
    min_overlap: int | None,
    limit: int | None,
    as_json: bool,
) -> None:
    """Rank skills whose description matches QUERY."""
    config = _build_config(ctx, min_overlap=min_overlap, limit=limit)
    store = _load_store(config)

    candidates = TriggerMatcher(config.matcher).rank(query, store.metadata())
    if as_json:
        click.echo(json.dumps(
            [
                {"name": c.name, "overlap": c.overlap, "matched": list(c.matched_tokens)}
                for c in candidates
            ],
            indent=2,
        ))
        return

    if not candidates:
        click.echo("  No matching skills.")
        return
    for c in candidates:
        click.echo(f"  {c.name:24s} overlap={c.overlap} [{', '.join(c.matched_tokens)}]")


@main.command()
@click.argument("name")
@click.option(
    "--references",
    is_flag=True,
    help="Also list the documents the body links to (without expanding them)",
)
@click.pass_context
def show(ctx: click.Context, name: str, references: bool) -> None:
    """Activate and expand NAME, printing its body."""
    config = _build_config(ctx)
    store = _load_store(config)
    session = DisclosureSession(store)

    try:
        session.activate(name)
        click.echo(session.expand(name))
    except NotFound as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_FOUND)

    if not references:
        return

    document = store.get(name)
    click.echo("\n─── References " + "─" * 36)
    if not document.links:
        click.echo("  (none)")
    for link in document.links:
        try:
            target = session.resolve_reference(name, link)
            click.echo(f"  {link} -> {target.name}: {target.description}")
        except NotFound:
            click.echo(f"  {link} -> NOT FOUND")


@main.command("read-properties")
@click.argument("name")
@click.pass_context
def read_properties_cmd(ctx: click.Context, name: str) -> None:
    """Print the front-matter properties of NAME as JSON."""
    config = _build_config(ctx)
    store = _load_store(config)
    try:
        document = store.get(name)
    except NotFound as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_FOUND)

    click.echo(json.dumps(read_properties(document), indent=2, default=str, ensure_ascii=False))


@main.command("to-prompt")
@click.argument("names", nargs=-1)
@click.pass_context
def to_prompt_cmd(ctx: click.Context, names: tuple[str, ...]) -> None:
    """Print the <available_skills> block (all skills, or only NAMES)."""
    config = _build_config(ctx)
    store = _load_store(config)
    try:
        documents = [store.get(n) for n in names] if names else store.documents()
    except NotFound as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_FOUND)

    click.echo(to_prompt(documents, root=Path(config.store.root).resolve()))


@main.command("validate-config")
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the YAML configuration file."""
    config = _build_config(ctx)
    click.echo("Valid configuration")
    click.echo(f"  Root: {config.store.root}")
    click.echo(f"  Skill file: {config.store.skill_file}")
    click.echo(f"  Min token overlap: {config.matcher.min_token_overlap}")


def run() -> None:
    """Console-script entry point."""
    try:
        main()
    except SkillbookError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILED)

"""
Command-line access to the notemark rendering engine.
Renders notes to HTML or JSON, projects search overlays, and lists vault notes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .config import ConfigError, NotemarkConfig, build_config
from .exceptions import StorageError
from .filesystem import collect_file_stat, enforce_file_size, normalize_filepath, safe_read
from .overlay import project_overlay, render_overlay_html
from .parser import parse_markdown
from .render import note_stats, render_html, to_dict
from .storage import VaultStorage

__all__ = ["cli"]


def _load_config(search_path: Path, **overrides: object) -> NotemarkConfig:
    try:
        return build_config(search_path, **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _read_note(filepath: str) -> tuple[str, NotemarkConfig]:
    base_dir = Path.cwd().resolve()
    try:
        path = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    config = _load_config(path.parent)

    try:
        enforce_file_size(collect_file_stat(path), config.max_file_size, path)
        with safe_read(path) as handle:
            return handle.read(), config
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {path}: {error}") from error
    except IOError as error:
        raise click.ClickException(str(error)) from error


@click.group()
@click.version_option(package_name="notemark")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool = False):
    """Render and search Markdown notes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option("--search", "-s", default="", help="Highlight matches of this term")
@click.option("--format", "output_format", type=click.Choice(["html", "json"]), default="html")
@click.option("--allow-raw-html", is_flag=True, help="Emit raw markup unescaped")
def render(filepath: str, search: str, output_format: str, allow_raw_html: bool):
    """
    Render a note to HTML or JSON.

    Args:
        filepath: Path to the Markdown note.
        search: Optional case-insensitive term to highlight.
        output_format: ``html`` or ``json``.
        allow_raw_html: Pass raw markup through unescaped, in addition to the
            `allow_raw_html` configuration setting.

    Raises:
        click.BadParameter: If the path or configuration is invalid.
        click.ClickException: If the note cannot be read.

    Examples:
        notemark render notes/todo.md --search milk
    """
    text, config = _read_note(filepath)
    document = parse_markdown(text, search or None, placeholder=config.empty_placeholder)

    if output_format == "json":
        click.echo(json.dumps(to_dict(document), indent=2, ensure_ascii=False))
        return

    allow_raw = allow_raw_html or config.allow_raw_html
    click.echo(render_html(document, allow_raw_html=allow_raw), nl=False)


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.option("--search", "-s", required=True, help="Term to highlight")
def overlay(filepath: str, search: str):
    """Print the character-aligned search overlay of a note as HTML."""
    text, _ = _read_note(filepath)
    click.echo(render_overlay_html(project_overlay(text, search)), nl=False)


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def stats(filepath: str):
    """Print character and word counts for a note."""
    text, _ = _read_note(filepath)
    counts = note_stats(text)
    click.echo(f"{counts.characters} characters")
    click.echo(f"{counts.words} words")


@cli.command()
@click.option(
    "--vault",
    "vault_dir",
    type=click.Path(file_okay=False),
    help="Vault directory (defaults to the configured `vault_dir`)",
)
def notes(vault_dir: str | None):
    """Create the vault if needed and list its notes."""
    config = _load_config(Path.cwd(), vault_dir=vault_dir)
    vault = VaultStorage(Path(config.vault_dir), max_file_size=config.max_file_size)

    try:
        vault.ensure_vault()
    except StorageError as error:
        raise click.ClickException(str(error)) from error

    for note_id in vault.list_notes():
        click.echo(note_id)


if __name__ == "__main__":
    cli()

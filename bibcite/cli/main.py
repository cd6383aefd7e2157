"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console
from rich.table import Table

from bibcite import __version__
from bibcite.citations.exceptions import ConfigError
from bibcite.citations.generator import CitationGenerator
from bibcite.citations.processor import CiteprocStyleProcessor
from bibcite.citations.styles import CitationStyle, StyleCatalog
from bibcite.cli.config import Settings, load_settings
from bibcite.core.bibtex import load_collection
from bibcite.core.fields import Dialect
from bibcite.core.models import Encoding, Record, RecordCollection
from bibcite.l10n import MessageCatalog

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources."""

    console: Console
    settings: Settings
    catalog: StyleCatalog
    generator: CitationGenerator
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


def build_context(
    settings: Settings, console: Console, debug: bool = False
) -> Context:
    """Create the style catalog and generator described by settings."""
    catalog = StyleCatalog()
    if settings.styles_dir:
        loaded = catalog.load_directory(settings.styles_dir)
        logger.info("Loaded %d styles from %s", len(loaded), settings.styles_dir)

    if settings.messages:
        try:
            localization = MessageCatalog.from_file(settings.messages)
        except (OSError, ValueError) as e:
            raise ConfigError("messages", str(e))
    else:
        localization = MessageCatalog()

    generator = CitationGenerator(
        processor=CiteprocStyleProcessor(locale=settings.locale),
        localization=localization,
    )
    return Context(
        console=console,
        settings=settings,
        catalog=catalog,
        generator=generator,
        debug=debug,
    )


class BibCiteGroup(click.Group):
    """Custom group that handles KeyboardInterrupt and reports errors."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}", markup=True, highlight=False)
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=BibCiteGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--styles-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory with additional CSL styles",
)
@click.version_option(
    version=__version__, prog_name="bibcite", message="bibcite version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    styles_dir: Path | None,
) -> None:
    """Citation and bibliography generator.

    Renders BibTeX and BibLaTeX records with CSL citation styles as HTML
    or plain text.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        settings = load_settings(config)
        if styles_dir:
            settings.styles_dir = str(styles_dir)
        ctx.obj = build_context(settings, console, debug=debug)
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {e}", highlight=False)
        ctx.exit(1)


def resolve_style(catalog: StyleCatalog, name: str) -> CitationStyle:
    """Find a style by catalog name or by path to a ``.csl`` file."""
    path = Path(name)
    if path.suffix == ".csl" and path.is_file():
        return CitationStyle.from_file(path)
    return catalog.get(name)


def select_records(collection: RecordCollection, keys: tuple[str, ...]) -> list[Record]:
    """Pick records by key in the order given, or all records."""
    if not keys:
        return list(collection)

    selected = []
    for key in keys:
        record = collection.resolve(key)
        if record is None:
            raise click.BadParameter(f"No entry with key '{key}'", param_hint="--key")
        selected.append(record)
    return selected


def generation_options(func):
    """Options shared by the generating commands."""
    func = click.option(
        "--dialect",
        type=click.Choice([d.value for d in Dialect], case_sensitive=False),
        help="Field dialect of the file (default: detect)",
    )(func)
    func = click.option(
        "--format",
        "-f",
        "output_format",
        type=click.Choice([e.value for e in Encoding], case_sensitive=False),
        help="Output format",
    )(func)
    func = click.option("--style", "-s", help="Style name or path to a .csl file")(func)
    func = click.option(
        "--key", "-k", "keys", multiple=True, help="Entry key, repeatable"
    )(func)
    func = click.argument(
        "bibfile", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )(func)
    return func


def _prepare(
    obj: Context,
    bibfile: Path,
    keys: tuple[str, ...],
    style: str | None,
    output_format: str | None,
    dialect: str | None,
) -> tuple[list[Record], RecordCollection, CitationStyle, Encoding]:
    settings = obj.settings
    chosen_dialect = Dialect.parse(dialect) if dialect else settings.dialect
    collection = load_collection(bibfile, chosen_dialect)
    logger.debug(
        "Loaded %d records from %s (%s)",
        len(collection),
        bibfile,
        collection.dialect.value,
    )
    records = select_records(collection, keys)
    citation_style = resolve_style(obj.catalog, style or settings.style)
    encoding = Encoding.parse(output_format) if output_format else settings.format
    return records, collection, citation_style, encoding


@cli.command()
@generation_options
@click.pass_obj
def cite(
    obj: Context,
    bibfile: Path,
    keys: tuple[str, ...],
    style: str | None,
    output_format: str | None,
    dialect: str | None,
) -> None:
    """Print an in-text citation for entries of BIBFILE."""
    records, collection, citation_style, encoding = _prepare(
        obj, bibfile, keys, style, output_format, dialect
    )
    citation = obj.generator.generate_citation(
        records, citation_style.source, encoding, collection
    )
    click.echo(citation)


@cli.command()
@generation_options
@click.pass_obj
def bibliography(
    obj: Context,
    bibfile: Path,
    keys: tuple[str, ...],
    style: str | None,
    output_format: str | None,
    dialect: str | None,
) -> None:
    """Print bibliography entries for entries of BIBFILE."""
    records, collection, citation_style, encoding = _prepare(
        obj, bibfile, keys, style, output_format, dialect
    )
    entries = obj.generator.generate_bibliography(
        records, citation_style.source, encoding, collection
    )
    for entry in entries:
        # Plain text entries carry their own line break
        click.echo(entry, nl=not entry.endswith("\n"))


@cli.command()
@click.pass_obj
def styles(obj: Context) -> None:
    """List available citation styles."""
    available = obj.catalog.list_styles()
    if not available:
        obj.console.print("[yellow]No citation styles available[/yellow]")
        return

    table = Table(title=f"Citation Styles ({len(available)} total)")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Format")
    table.add_column("Source", style="dim")

    for style in available:
        table.add_row(
            style.name,
            style.title,
            "numeric" if style.numeric else "other",
            style.path or "bundled",
        )

    obj.console.print(table)


def main() -> None:
    """Entry point for the console script."""
    cli()


if __name__ == "__main__":
    main()

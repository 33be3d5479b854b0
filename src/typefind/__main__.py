import logging
import os
import sys

import click
from dotenv import load_dotenv

from .config import SearchConfig
from .output import FilenameSimplifier, Renderer, SourceReadError, group_matches
from .query import MalformedQueryError, parse_query
from .search import TypeSearcher
from .semantic import ExporterFrontEnd, ExportFileFrontEnd, FrontEndLoadError

logger = logging.getLogger("typefind")

EPILOG = """\b
Example:

   % typefind encoding/json.Encoder.Encode ./...
   handlers.go:145:21:        json.NewEncoder(w).Encode(resp)
   socket.go:125:31:                  if err := enc.Encode(m); err != nil {
"""


def _configure_logging(debug: bool):
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


@click.command(epilog=EPILOG)
@click.argument("query")
@click.argument("packages", nargs=-1, required=True)
@click.option("-s", "--suppress-errors", is_flag=True, help="Do not report packages that fail to type-check")
@click.option("--full-path", is_flag=True, help="Print absolute file paths")
@click.option("--simple", is_flag=True, help="Print base file names only")
@click.option("--column/--no-column", default=True, help="Print the column of the first match on each line")
@click.option("--color/--no-color", default=True, help="Highlight matched tokens with ANSI colors")
@click.option("-l", "--files-with-matches", is_flag=True, help="Print only the names of files with matches")
@click.option("--export-file", is_flag=True, help="PACKAGES are exported JSON-lines documents, not package patterns")
@click.option("--strict", is_flag=True, help="Abort when any package has type errors")
def cli(query, packages, suppress_errors, full_path, simple, column, color, files_with_matches, export_file, strict):
    """Search Go source by type: QUERY is <pkg>.<name>[.<sel>], PACKAGES go to the semantic front end."""
    load_dotenv(os.path.join(os.getcwd(), ".env"))

    if full_path and simple:
        raise click.UsageError("--full-path and --simple are mutually exclusive")

    mode = "full" if full_path else "simple" if simple else "shortest"
    config = SearchConfig.from_env(
        list(packages),
        filename_mode=mode,
        suppress_errors=suppress_errors,
        strict=strict,
        show_column=column,
        color=color,
        files_only=files_with_matches,
    )
    _configure_logging(config.debug)

    try:
        descriptor = parse_query(query)
    except MalformedQueryError as e:
        # an unparsable query can never match anything
        logger.warning(str(e))
        return

    front_end = ExportFileFrontEnd() if export_file else ExporterFrontEnd(config.exporter)
    searcher = TypeSearcher(descriptor, front_end, config)
    renderer = Renderer(
        FilenameSimplifier(config.source_roots, config.filename_mode),
        show_column=config.show_column,
        color=config.color,
    )

    try:
        records = group_matches(searcher.search(list(packages)))
        lines = renderer.render_filenames(records) if config.files_only else renderer.render_all(records)
        for line in lines:
            click.echo(line, color=config.color)
    except (FrontEndLoadError, SourceReadError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()

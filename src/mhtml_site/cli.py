"""CLI interface for MHTML Post Site."""

import logging
import sys
from pathlib import Path

import click

from .builder import SiteBuilder
from .config import MAX_WORKERS, BuildConfig, DateStrategy, FailurePolicy
from .errors import ArchiveError


@click.group()
def main():
    """MHTML Post Site - static pages from archived forum posts."""
    pass


@main.command()
@click.option(
    '--input-dir',
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory of .mhtml files'
)
@click.option(
    '--output-dir',
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory for generated pages'
)
@click.option(
    '--workers',
    default=MAX_WORKERS,
    show_default=True,
    type=click.IntRange(min=1),
    help='Number of archives processed at once'
)
@click.option(
    '--date-strategy',
    default=DateStrategy.ABSOLUTE.value,
    show_default=True,
    type=click.Choice([s.value for s in DateStrategy]),
    help='How post dates are inferred'
)
@click.option(
    '--lenient',
    is_flag=True,
    help='Skip archives that fail instead of stopping the build'
)
@click.option(
    '--no-progress',
    is_flag=True,
    help='Hide the progress bar'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging'
)
def build(input_dir, output_dir, workers, date_strategy, lenient, no_progress, verbose):
    """Generate one page per archived post plus posts.json."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    config = BuildConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        max_workers=workers,
        date_strategy=DateStrategy(date_strategy),
        failure_policy=FailurePolicy.LENIENT if lenient else FailurePolicy.STRICT,
        show_progress=not no_progress,
    )

    try:
        result = SiteBuilder(config).build()
    except (ArchiveError, OSError) as e:
        click.echo(f"Build stopped: {e}", err=True)
        sys.exit(1)

    click.echo(f"Generated {result.num_pages} pages under {output_dir}")
    if result.failures:
        click.echo(f"{len(result.failures)} archives failed:", err=True)
        for failure in result.failures:
            click.echo(f"  {failure.path}: {failure.error}", err=True)


if __name__ == '__main__':
    main()

"""Command-line interface using Click."""

import sys
from pathlib import Path

import click

from . import __version__
from .config import ProgressDirection, default_config
from .core.components.sync import PlaybackStateResolver, prepare_document
from .exceptions import LyricSyncError
from .cli_commands import (
    echo_playback,
    load_document_file,
    run_inspect_command,
    run_replay_command,
)
from .utils.logging import setup_logging
from .utils.validation import (
    validate_offset,
    validate_scroll_position,
    validate_short_line_threshold,
    validate_time_range,
)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """LyricSync - Resolve timed lyrics against a playback clock."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger


def _build_config(offset, threshold, direction=None, position=None):
    config = default_config(direction)
    return config.with_overrides(
        scroll_position_offset_percent=(
            validate_scroll_position(position) if position is not None else None
        ),
        lyric_offset_seconds=validate_offset(offset) if offset is not None else None,
        short_line_group_threshold=(
            validate_short_line_threshold(threshold) if threshold is not None else None
        ),
    )


def _fail(logger, e):
    logger.error(f"❌ {e}")
    sys.exit(1)


@cli.command()
@click.argument('document')
@click.option('--threshold', type=float, default=None,
              help='Short-line grouping threshold in seconds (0-5)')
@click.option('--duration', type=float, default=None,
              help='Track length, used to end the last plain timed line')
@click.pass_context
def inspect(ctx, document, threshold, duration):
    """Show lines, clusters and interludes of a lyric document."""
    logger = ctx.obj['logger']
    try:
        doc = load_document_file(document, duration=duration)
        run_inspect_command(logger=logger, document=doc, config=_build_config(None, threshold))
    except LyricSyncError as e:
        _fail(logger, e)


@cli.command()
@click.argument('document')
@click.option('-t', '--time', 'at_time', type=float, required=True,
              help='Playback time in seconds')
@click.option('--offset', type=float, default=None,
              help='Lyric offset in seconds (positive = lyrics earlier)')
@click.option('--threshold', type=float, default=None,
              help='Short-line grouping threshold in seconds (0-5)')
@click.pass_context
def resolve(ctx, document, at_time, offset, threshold):
    """Print the playback state at a single instant."""
    logger = ctx.obj['logger']
    try:
        doc = load_document_file(document)
        config = _build_config(offset, threshold)
        prepared = prepare_document(doc, config.short_line_group_threshold)
        resolver = PlaybackStateResolver(
            prepared.lines,
            prepared.interludes,
            preactivate_gap_seconds=config.preactivate_gap_seconds,
            preactivate_elapsed_ratio=config.preactivate_elapsed_ratio,
        )
        echo_playback(resolver.resolve(at_time + config.lyric_offset_seconds), prepared.lines)
    except LyricSyncError as e:
        _fail(logger, e)


@cli.command()
@click.argument('document')
@click.option('--start', type=float, default=0.0, help='First tick time in seconds')
@click.option('--end', type=float, default=None,
              help='Last tick time in seconds (default: end of the last line)')
@click.option('--step', type=float, default=0.5, help='Seconds between ticks')
@click.option('--offset', type=float, default=None,
              help='Lyric offset in seconds (positive = lyrics earlier)')
@click.option('--threshold', type=float, default=None,
              help='Short-line grouping threshold in seconds (0-5)')
@click.option('--direction', type=click.Choice([d.value for d in ProgressDirection]),
              default=None, help='Word fill direction')
@click.option('--position', type=int, default=None,
              help='Anchor position as a percentage of the viewport height')
@click.pass_context
def replay(ctx, document, start, end, step, offset, threshold, direction, position):
    """Simulate playback ticks and show how the view would scroll."""
    logger = ctx.obj['logger']
    try:
        doc = load_document_file(document)
        if end is None:
            ends = [div.end for div in doc.divisions]
            end = max(ends) if ends else start
        validate_time_range(start, end, step)
        config = _build_config(offset, threshold, direction, position)
        ticks = run_replay_command(
            logger=logger, document=doc, config=config, start=start, end=end, step=step
        )
        logger.info(f"✅ Replayed {ticks} tick(s)")
    except LyricSyncError as e:
        _fail(logger, e)


if __name__ == '__main__':
    cli()

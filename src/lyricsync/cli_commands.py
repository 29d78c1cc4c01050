"""Execution helpers for CLI commands."""

import json
from typing import List, Optional, Sequence, Tuple

import click
import numpy as np

from .config import SyncConfig
from .core.components.sync import (
    LyricSyncEngine,
    PreparedDocument,
    VirtualScrollable,
    easing_from_string,
    prepare_document,
)
from .core.document import build_document
from .core.models import Document, PlaybackState
from .core.serialization import document_from_timed_lines
from .core.timing import format_time, parse_time_code
from .exceptions import DocumentError
from .utils.validation import validate_document_path


class ReplayClock:
    """Manually advanced clock so replays run as fast as the terminal allows."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


def _timed_line_pairs(data: list) -> List[Tuple[float, str]]:
    pairs: List[Tuple[float, str]] = []
    for i, item in enumerate(data):
        if isinstance(item, dict):
            raw_time, text = item.get("time", item.get("begin")), item.get("text", "")
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            raw_time, text = item
        else:
            raise DocumentError(f"Timed line {i} must be [time, text] or {{time, text}}")
        seconds = parse_time_code(raw_time)
        if seconds is None:
            raise DocumentError(f"Timed line {i} has an unreadable time: {raw_time!r}")
        pairs.append((seconds, str(text or "")))
    return pairs


def load_document_file(path: str, duration: Optional[float] = None) -> Document:
    """Load a document JSON file, or a JSON list of plain timed lines."""
    doc_path = validate_document_path(path)
    try:
        with open(doc_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DocumentError(f"{doc_path.name} is not valid JSON: {e}") from e
    if isinstance(data, list):
        return document_from_timed_lines(_timed_line_pairs(data), duration=duration)
    return build_document(data)


def echo_prepared(prepared: PreparedDocument) -> None:
    """Print lines with their clusters, then interludes."""
    click.echo(f"{len(prepared.lines)} line(s), {prepared.clusters.cluster_count} cluster(s)")
    if prepared.has_agents:
        sides = ", ".join(f"{agent}/{side}" for agent, side in prepared.agent_sides.items())
        click.echo(f"agents: {sides}")
    for line in prepared.lines:
        side = prepared.agent_sides.get(line.agent or "", "")
        agent = f" [{line.agent}{'/' + side if side else ''}]" if line.agent else ""
        click.echo(
            f"  #{line.line_id:<3} {format_time(line.begin)} - {format_time(line.original_end)}"
            f" (group end {format_time(line.group_end)})"
            f" cluster {prepared.clusters.cluster_of(line.line_id)}"
            f" div {line.division_index}{agent}  {line.text}"
        )
    if prepared.interludes:
        click.echo(f"{len(prepared.interludes)} interlude(s)")
        for interlude in prepared.interludes:
            click.echo(
                f"  after div {interlude.division_index}: "
                f"{format_time(interlude.start)} - {format_time(interlude.end)}"
            )


def echo_playback(state: PlaybackState, lines: Sequence) -> None:
    """Print one resolved playback state."""
    click.echo(f"time {format_time(state.time)}")
    if state.active_interlude is not None:
        click.echo(
            f"  interlude {format_time(state.active_interlude.start)}"
            f" - {format_time(state.active_interlude.end)}"
        )
    if state.active_cluster:
        click.echo(
            f"  cluster until {format_time(state.cluster_end)}"
            f" ({state.cluster_progress:.0%})"
        )
        for line_id in state.active_cluster:
            click.echo(
                f"  active #{line_id} {state.line_progress[line_id]:.0%}  {lines[line_id].text}"
            )
    elif state.preactivated_line is not None:
        line = lines[state.preactivated_line]
        click.echo(f"  next #{line.line_id}  {line.text}")
    else:
        click.echo("  (nothing active)")
    click.echo(f"  past: {sum(1 for is_past in state.past.values() if is_past)} line(s)")


def run_inspect_command(*, logger, document: Document, config: SyncConfig) -> None:
    """Execute the `inspect` command implementation."""
    if document.is_empty:
        logger.warning("Document has no lines")
    prepared = prepare_document(document, config.short_line_group_threshold)
    echo_prepared(prepared)


def run_replay_command(
    *,
    logger,
    document: Document,
    config: SyncConfig,
    start: float,
    end: float,
    step: float,
) -> int:
    """Execute the `replay` command implementation. Returns the tick count."""
    clock = ReplayClock(start)
    scrollable = VirtualScrollable(clock=clock, easing=easing_from_string(config.custom_easing))
    engine = LyricSyncEngine(document, config, scrollable=scrollable, clock=clock)
    lines = engine.prepared.lines

    times = np.arange(start, end + step / 2.0, step)
    logger.debug(f"Replaying {len(times)} tick(s) from {start:.2f}s to {end:.2f}s")
    for t in times:
        clock.now = float(t)
        snapshot = engine.tick(float(t))
        focus = snapshot.playback.focus_line
        text = lines[focus].text if focus is not None else ""
        target = snapshot.scroll.target_offset
        click.echo(
            f"{format_time(float(t))}  {engine.coordinator.mode.value:<14}"
            f" offset {scrollable.get_offset():7.1f}"
            f" target {'-' if target is None else f'{target:.1f}':>7}"
            f"  {'' if focus is None else f'#{focus} '}{text}"
        )
    return len(times)

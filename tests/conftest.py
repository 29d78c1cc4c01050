"""Test configuration and fixtures.

Provides reusable fixtures for:
- A manually advanced clock
- Documents built from compact (begin, end, text) tuples
- Parser-style document data (duets, word timings, translations)
- Temporary document files for CLI tests
"""

import json
import pytest
from pathlib import Path
from typing import Sequence, Tuple

from lyricsync.config import SyncConfig
from lyricsync.core.components.sync import (
    LyricLayout,
    PlaybackStateResolver,
    ScrollCoordinator,
    VirtualScrollable,
    build_line_index,
    prepare_document,
)
from lyricsync.core.models import Division, Document, Line


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def _division(spans: Sequence[Tuple]) -> Division:
    lines = []
    for span in spans:
        begin, end, text = span[:3]
        agent = span[3] if len(span) > 3 else None
        lines.append(Line(begin=begin, end=end, text=text, agent=agent))
    if not lines:
        return Division(begin=0.0, end=0.0, lines=())
    return Division(
        begin=min(l.begin for l in lines), end=max(l.end for l in lines), lines=tuple(lines)
    )


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def clock():
    """A FakeClock starting at zero."""
    return FakeClock()


@pytest.fixture
def make_document():
    """Factory: each positional argument is one division's list of spans."""

    def _make(*divisions: Sequence[Tuple]) -> Document:
        return Document(divisions=tuple(_division(spans) for spans in divisions))

    return _make


@pytest.fixture
def make_index(make_document):
    """Factory returning the LineIndex of a document built from spans."""

    def _make(*divisions):
        return build_line_index(make_document(*divisions))

    return _make


@pytest.fixture
def steady_document(make_document):
    """Twenty back-to-back three-second lines in one division."""
    return make_document([(3.0 * i, 3.0 * i + 3.0, f"line {i}") for i in range(20)])


@pytest.fixture
def two_verse_document(make_document):
    """Two divisions separated by a six-second instrumental break."""
    return make_document(
        [(0.0, 3.0, "first"), (3.0, 6.0, "second")],
        [(12.0, 15.0, "third"), (15.0, 18.0, "fourth")],
    )


# =============================================================================
# Parser-style Data
# =============================================================================


@pytest.fixture
def duet_data():
    """Word-timed duet as the lyric parser would hand it over."""
    return {
        "agents": [
            {"id": "v1", "type": "person", "name": "Alice"},
        ],
        "wordTimingMode": "Word",
        "divisions": [
            {
                "lines": [
                    {
                        "begin": "0:01.00",
                        "end": "0:03.00",
                        "agent": "v1",
                        "words": [
                            {"text": "Hello", "begin": 1.0, "end": 1.5},
                            {"text": "there", "begin": 1.5, "end": 3.0},
                        ],
                        "backgroundWords": [
                            {"text": "(hey)", "begin": 2.0, "end": 2.5},
                        ],
                        "translationWords": [
                            [{"text": "Hola", "begin": 1.0, "end": 3.0}],
                        ],
                    },
                    {
                        "begin": 2.5,
                        "end": 5.0,
                        "agent": "v2",
                        "text": "General Kenobi",
                    },
                ]
            },
            {
                "begin": 12.0,
                "end": 16.0,
                "lines": [
                    {"begin": 12.0, "end": 16.0, "agent": "chorus", "text": "All together"},
                ],
            },
        ],
    }


# =============================================================================
# Scroll Fixtures
# =============================================================================


@pytest.fixture
def scroll_rig(clock):
    """Factory wiring resolver, layout, scrollable and coordinator around a document."""

    def _make(document, viewport_height=600.0, cooldown_ms=2000):
        prepared = prepare_document(document, 0.6)
        resolver = PlaybackStateResolver(prepared.lines, prepared.interludes)
        layout = LyricLayout(
            prepared.index, prepared.interludes, viewport_height=viewport_height, line_height=60.0
        )
        scrollable = VirtualScrollable(clock=clock)
        coordinator = ScrollCoordinator(
            scrollable,
            layout,
            resolver,
            SyncConfig(user_scroll_cooldown_ms=cooldown_ms, scroll_position_offset_percent=50),
            clock=clock,
        )
        return resolver, scrollable, coordinator

    return _make


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def write_json(tmp_path):
    """Factory writing data to a JSON file under tmp_path."""

    def _write(data, name="lyrics.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write

"""Tests for document and playback data models."""

import dataclasses

import pytest

from lyricsync.core.models import (
    Agent,
    AgentType,
    Division,
    Document,
    Interlude,
    Line,
    PlaybackState,
    ScrollMode,
    ScrollState,
    Word,
    WordTrack,
)

# ------------------------------
# Word / Line Tests
# ------------------------------


class TestWord:
    def test_duration(self):
        assert Word(text="la", begin=1.0, end=1.5).duration == pytest.approx(0.5)

    def test_frozen(self):
        word = Word(text="la", begin=1.0, end=1.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            word.text = "da"


class TestLine:
    def test_display_text_falls_back_to_words(self):
        line = Line(
            begin=0.0,
            end=1.0,
            words=(Word("hello", 0.0, 0.5), Word("world", 0.5, 1.0)),
        )
        assert line.display_text == "hello world"

    def test_display_text_prefers_text(self):
        line = Line(begin=0.0, end=1.0, text="Hello, world", words=(Word("hello", 0.0, 1.0),))
        assert line.display_text == "Hello, world"

    def test_track_lookup(self):
        bg = (Word("ooh", 0.2, 0.4),)
        tr = (Word("hola", 0.0, 1.0),)
        line = Line(begin=0.0, end=1.0, background_words=bg, translation_words=((), tr))
        assert line.track(WordTrack.MAIN) == ()
        assert line.track(WordTrack.BACKGROUND) == bg
        assert line.track(WordTrack.TRANSLATION0) == ()
        assert line.track(WordTrack.TRANSLATION1) == tr
        assert line.track(WordTrack.PRONUNCIATION) == ()

    def test_extra_rows(self):
        w = (Word("x", 0.0, 1.0),)
        assert Line(begin=0.0, end=1.0).extra_rows() == 0
        line = Line(
            begin=0.0,
            end=1.0,
            background_words=w,
            translation_words=(w, w),
            pronunciation_words=w,
        )
        assert line.extra_rows() == 4


# ------------------------------
# Document Tests
# ------------------------------


class TestDocument:
    def test_agent_lookup(self):
        doc = Document(agents=(Agent("v1", AgentType.PERSON, "Alice"),))
        assert doc.agent("v1").name == "Alice"
        assert doc.agent("v2") is None
        assert doc.agent(None) is None

    def test_line_count_and_empty(self):
        assert Document().is_empty
        doc = Document(divisions=(Division(0.0, 1.0, (Line(0.0, 1.0, "a"),)), Division(2.0, 2.0)))
        assert doc.line_count == 1
        assert not doc.is_empty


# ------------------------------
# Interlude Tests
# ------------------------------


class TestInterlude:
    def test_window_is_half_open(self):
        interlude = Interlude(start=10.0, end=16.0, division_index=0)
        assert interlude.contains(10.0)
        assert interlude.contains(15.999)
        assert not interlude.contains(16.0)
        assert not interlude.contains(9.999)

    def test_key_and_duration(self):
        interlude = Interlude(start=10.0, end=16.0, division_index=2)
        assert interlude.duration == pytest.approx(6.0)
        assert interlude.key == "2:10.0-16.0"


# ------------------------------
# Playback / Scroll state
# ------------------------------


class TestPlaybackState:
    def test_focus_prefers_active_cluster(self):
        state = PlaybackState(time=1.0, active_cluster=[3, 4], preactivated_line=5)
        assert state.focus_line == 3

    def test_focus_falls_back_to_preactivated(self):
        state = PlaybackState(time=1.0, preactivated_line=5)
        assert state.focus_line == 5
        assert not state.is_empty

    def test_empty(self):
        state = PlaybackState.empty(2.0)
        assert state.is_empty
        assert state.focus_line is None
        assert not state.is_past(0)


class TestScrollState:
    def test_modes(self):
        state = ScrollState()
        assert state.mode is ScrollMode.FOLLOWING
        state.auto_scroll_enabled = False
        assert state.mode is ScrollMode.USER_OVERRIDE
        state.interlude_hold_active = True
        assert state.mode is ScrollMode.INTERLUDE_HOLD

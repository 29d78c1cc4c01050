"""Tests for mapping playback time to display state."""

import numpy as np
import pytest

from lyricsync.core.components.sync import PlaybackStateResolver, prepare_document
from lyricsync.core.document import build_document
from lyricsync.core.models import Division, Document, Interlude, Line, Word, WordKey, WordTrack


@pytest.fixture
def resolver_for():
    def _make(document, threshold=0.6):
        prepared = prepare_document(document, threshold)
        return PlaybackStateResolver(prepared.lines, prepared.interludes)

    return _make


def _worded_document(words, begin=0.0, end=4.0, background=()):
    line = Line(begin=begin, end=end, words=tuple(words), background_words=tuple(background))
    return Document(divisions=(Division(begin, end, (line,)),))


# ------------------------------
# Active cluster
# ------------------------------


class TestActiveCluster:
    def test_single_line(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 2.0, "a")]))
        state = resolver.resolve(1.0)
        assert state.active_cluster == [0]
        assert state.cluster_end == 2.0
        assert state.line_progress[0] == pytest.approx(0.5)
        assert state.cluster_progress == pytest.approx(0.5)

    def test_end_is_exclusive(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 2.0, "a")]))
        state = resolver.resolve(2.0)
        assert state.active_cluster == []
        assert state.is_past(0)

    def test_overlapping_lines_stay_active_together(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 2.0, "a"), (1.5, 3.0, "b")]))
        state = resolver.resolve(2.5)
        assert state.active_cluster == [0, 1]
        assert state.cluster_end == 3.0
        assert not state.is_past(0)

    def test_short_line_stays_until_group_end(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 0.3, "hey"), (1.0, 2.0, "you")]))
        assert resolver.resolve(0.5).active_cluster == [0]
        assert resolver.resolve(1.5).active_cluster == [0, 1]

    def test_past_lines(self, resolver_for, steady_document):
        state = resolver_for(steady_document).resolve(10.0)
        assert state.active_cluster == [3]
        assert [i for i in range(20) if state.is_past(i)] == [0, 1, 2]

    def test_before_first_line(self, resolver_for, steady_document):
        state = resolver_for(steady_document).resolve(-1.0)
        assert state.is_empty
        assert not any(state.past.values())

    def test_after_last_line(self, resolver_for, steady_document):
        state = resolver_for(steady_document).resolve(100.0)
        assert state.is_empty
        assert all(state.past.values())

    def test_empty_document(self, resolver_for):
        state = resolver_for(Document()).resolve(3.0)
        assert state.is_empty
        assert state.past == {}

    def test_empty_document_ignores_interludes(self):
        resolver = PlaybackStateResolver([], (Interlude(start=10.0, end=16.0, division_index=0),))
        state = resolver.resolve(12.0)
        assert state.active_interlude is None
        assert state.is_empty


# ------------------------------
# Pre-activation
# ------------------------------


class TestPreactivation:
    # The gap and elapsed-share thresholds are tuned by feel; these tests
    # pin the current values rather than any deeper rule.

    def test_short_gap_hands_over_immediately(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 2.0, "a"), (2.5, 4.0, "b")]))
        state = resolver.resolve(2.1)
        assert state.active_cluster == []
        assert state.preactivated_line == 1
        assert state.focus_line == 1

    def test_long_gap_waits_for_elapsed_share(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 2.0, "a"), (6.0, 8.0, "b")]))
        assert resolver.resolve(2.5).preactivated_line is None
        assert resolver.resolve(3.5).preactivated_line == 1

    def test_no_preactivation_before_first_line(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(5.0, 6.0, "a")]))
        assert resolver.resolve(4.9).preactivated_line is None


# ------------------------------
# Progress
# ------------------------------


class TestProgress:
    def test_word_progress_midpoint(self, resolver_for):
        resolver = resolver_for(_worded_document([Word("la", 1.0, 3.0)]))
        state = resolver.resolve(2.0)
        assert state.word_progress[WordKey(0, WordTrack.MAIN, 0)] == pytest.approx(0.5)

    def test_word_progress_is_monotonic(self, resolver_for):
        words = [Word("one", 0.5, 1.0), Word("two", 1.0, 1.0), Word("three", 1.2, 3.5)]
        resolver = resolver_for(_worded_document(words))
        previous = {}
        for t in np.linspace(0.0, 3.99, 200):
            progress = resolver.resolve(float(t)).word_progress
            for key, value in progress.items():
                assert 0.0 <= value <= 1.0
                assert value >= previous.get(key, 0.0)
            previous = progress

    def test_word_progress_bounds(self, resolver_for):
        resolver = resolver_for(_worded_document([Word("la", 1.0, 3.0)]))
        key = WordKey(0, WordTrack.MAIN, 0)
        assert resolver.resolve(1.0).word_progress[key] == 0.0
        assert resolver.resolve(3.0).word_progress[key] == 1.0

    def test_line_progress_follows_words(self, resolver_for):
        words = [Word("a", 1.0, 2.0), Word("b", 2.0, 3.5)]
        resolver = resolver_for(_worded_document(words))
        assert resolver.resolve(2.25).line_progress[0] == pytest.approx(0.5)

    def test_background_words_tracked(self, resolver_for):
        doc = _worded_document([Word("a", 0.0, 4.0)], background=[Word("ooh", 2.0, 3.0)])
        state = resolver_for(doc).resolve(2.5)
        assert state.word_progress[WordKey(0, WordTrack.BACKGROUND, 0)] == pytest.approx(0.5)

    def test_only_active_lines_get_word_progress(self, resolver_for, duet_data):
        resolver = resolver_for(build_document(duet_data))
        state = resolver.resolve(13.0)
        assert state.active_cluster == [2]
        assert all(key.line_id == 2 for key in state.word_progress)


# ------------------------------
# Interludes and seeking
# ------------------------------


class TestInterludesAndSeeking:
    def test_active_interlude(self, resolver_for, two_verse_document):
        resolver = resolver_for(two_verse_document)
        state = resolver.resolve(8.0)
        assert state.active_interlude == Interlude(start=6.0, end=12.0, division_index=0)
        assert state.active_cluster == []
        assert resolver.resolve(12.0).active_interlude is None

    def test_backward_seek_has_no_bleed_through(self, resolver_for, steady_document):
        resolver = resolver_for(steady_document)
        resolver.resolve(5.0)
        after_seek = resolver.resolve(1.0)
        fresh = resolver_for(steady_document).resolve(1.0)
        assert after_seek == fresh
        assert after_seek.active_cluster == [0]
        assert not after_seek.is_past(1)

    def test_resolve_is_repeatable(self, resolver_for, duet_data):
        resolver = resolver_for(build_document(duet_data))
        assert resolver.resolve(2.7) == resolver.resolve(2.7)


# ------------------------------
# Next event gap
# ------------------------------


class TestNextEventGap:
    def test_gap_to_next_line(self, resolver_for, make_document):
        resolver = resolver_for(make_document([(0.0, 1.0, "a"), (1.5, 2.5, "b"), (3.0, 4.0, "c")]))
        assert resolver.next_event_gap(0, [0], 0.12) == pytest.approx(1.5)
        assert resolver.next_event_gap(2, [2], 0.12) is None

    def test_skips_cluster_members_and_near_simultaneous_lines(self, resolver_for, make_document):
        resolver = resolver_for(
            make_document([(0.0, 1.0, "a"), (0.05, 0.9, "b"), (0.5, 2.0, "c"), (3.0, 4.0, "d")])
        )
        assert resolver.next_event_gap(0, [], 0.12) == pytest.approx(0.5)
        assert resolver.next_event_gap(0, [0, 1, 2], 0.12) == pytest.approx(3.0)

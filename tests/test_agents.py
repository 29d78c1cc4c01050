"""Tests for duet agent placement."""

from lyricsync.core.components.sync import assign_agent_sides, has_agents, prepare_document
from lyricsync.core.components.sync.agents import LEFT, RIGHT
from lyricsync.core.document import build_document


def _doc(*agent_ids, declared=()):
    return build_document(
        {
            "agents": [{"id": a, "type": t} for a, t in declared],
            "lines": [
                {"begin": float(i), "end": float(i) + 1.0, "text": f"line {i}", "agent": agent_id}
                for i, agent_id in enumerate(agent_ids)
            ],
        }
    )


def _sides(document):
    return assign_agent_sides(document, prepare_document(document, 0.6).lines)


class TestAgentSides:
    def test_first_two_persons_split(self):
        assert _sides(_doc("v1", "v2", "v1")) == {"v1": LEFT, "v2": RIGHT}

    def test_extra_numbered_voices_by_parity(self):
        sides = _sides(_doc("v1", "v2", "v3", "v4"))
        assert sides["v3"] == LEFT
        assert sides["v4"] == RIGHT

    def test_groups_fill_emptier_side(self):
        sides = _sides(_doc("v1", "v2", "v3", "chorus"))
        assert sides["chorus"] == RIGHT

    def test_groups_only(self):
        sides = _sides(_doc("chorus", "band", declared=(("chorus", "group"), ("band", "group"))))
        assert sides == {"chorus": LEFT, "band": RIGHT}

    def test_playback_order_decides(self):
        doc = build_document(
            {
                "lines": [
                    {"begin": 5.0, "end": 6.0, "text": "later", "agent": "v1"},
                    {"begin": 1.0, "end": 2.0, "text": "first", "agent": "v2"},
                ]
            }
        )
        assert _sides(doc) == {"v2": LEFT, "v1": RIGHT}

    def test_duet_fixture(self, duet_data):
        doc = build_document(duet_data)
        assert _sides(doc) == {"v1": LEFT, "v2": RIGHT, "chorus": LEFT}


class TestHasAgents:
    def test_no_agents(self):
        doc = _doc(None, None)
        assert not has_agents(doc, prepare_document(doc, 0.6).lines)

    def test_enriched_agents(self, duet_data):
        doc = build_document(duet_data)
        assert has_agents(doc, prepare_document(doc, 0.6).lines)

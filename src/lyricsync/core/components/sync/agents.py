"""Left/right placement of duet agents."""

import re
from typing import Dict, List, Sequence

from ...models import AgentType, Document, IndexedLine

LEFT = "left"
RIGHT = "right"

_NUMBERED_VOICE_RE = re.compile(r"^v(\d+)$", re.IGNORECASE)


def agents_in_lines(lines: Sequence[IndexedLine]) -> List[str]:
    """Distinct agent ids in playback order."""
    seen: List[str] = []
    for line in lines:
        if line.agent and line.agent not in seen:
            seen.append(line.agent)
    return seen


def has_agents(document: Document, lines: Sequence[IndexedLine]) -> bool:
    """True when lines carry agents and every one of them is declared."""
    used = agents_in_lines(lines)
    if not used and len(document.agents) <= 1:
        return False
    declared = {agent.id for agent in document.agents}
    return all(agent_id in declared for agent_id in used)


def assign_agent_sides(document: Document, lines: Sequence[IndexedLine]) -> Dict[str, str]:
    """Decide which side of the view each agent's lines align to.

    The first two person agents take left and right. Further numbered
    voices (``v3``, ``v4``...) alternate by parity, other persons go right,
    and groups or unknown agents fill whichever side has fewer agents.
    """
    used = agents_in_lines(lines)
    sides: Dict[str, str] = {}
    counts = {LEFT: 0, RIGHT: 0}

    def assign(agent_id: str, side: str) -> None:
        if agent_id in sides:
            return
        sides[agent_id] = side
        counts[side] += 1

    def agent_type(agent_id: str) -> AgentType:
        agent = document.agent(agent_id)
        return agent.type if agent else AgentType.OTHER

    persons = [a for a in used if agent_type(a) is AgentType.PERSON]
    if persons:
        assign(persons[0], LEFT)
    if len(persons) > 1:
        assign(persons[1], RIGHT)
    for agent_id in persons[2:]:
        match = _NUMBERED_VOICE_RE.match(agent_id)
        if match:
            assign(agent_id, LEFT if int(match.group(1)) % 2 == 1 else RIGHT)
        else:
            assign(agent_id, RIGHT)

    for agent_id in used:
        assign(agent_id, LEFT if counts[LEFT] <= counts[RIGHT] else RIGHT)

    return sides

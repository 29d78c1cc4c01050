"""Document construction: parse -> validate -> enrich -> freeze.

The raw input is the JSON-compatible structure produced by the lyric text
parser. Every repair (malformed timestamps, missing word timings,
undeclared agents) happens here, while the Document is being built, so the
frozen result can be shared freely afterwards.
"""

import logging
import re
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import DocumentError, ParseError
from .models import (
    Agent,
    AgentType,
    BackgroundPosition,
    Division,
    Document,
    Line,
    Word,
    WordTimingMode,
)
from .timing import normalize_interval, parse_time_code

logger = logging.getLogger(__name__)

_NUMBERED_VOICE_RE = re.compile(r"^v(\d+)$", re.IGNORECASE)


def _get(data: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Fetch the first present key among camelCase/snake_case spellings."""
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def _as_list(value: Any, what: str) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise DocumentError(f"{what} must be a list, got {type(value).__name__}")


def _parse_words(raw_words: Any, context: str) -> Optional[Tuple[Word, ...]]:
    """Build a word tuple, or None when any word lacks usable timing."""
    words: List[Word] = []
    for raw in _as_list(raw_words, f"{context} words"):
        if not isinstance(raw, Mapping):
            raise DocumentError(f"Word entries must be mappings ({context})")
        text = str(_get(raw, "text", default="")).strip()
        begin = parse_time_code(_get(raw, "begin", "start", "start_time"))
        end = parse_time_code(_get(raw, "end", "end_time"))
        if begin is None or end is None:
            logger.warning(f"Word {text!r} in {context} has no usable timing")
            return None
        begin, end = normalize_interval(begin, end, f"word {text!r} of {context}")
        words.append(Word(text=text, begin=begin, end=end))
    return tuple(words)


def _timed_words(raw_words: Any, context: str) -> Tuple[Word, ...]:
    words = _parse_words(raw_words, context)
    return words if words is not None else ()


def _parse_translations(raw: Mapping[str, Any], context: str) -> Tuple[Tuple[Word, ...], Tuple[Word, ...]]:
    slots = _get(raw, "translationWords", "translation_words")
    if slots is None:
        first = _get(raw, "translationWords1", "translation_words1")
        second = _get(raw, "translationWords2", "translation_words2")
        slots = [first, second]
    slots = _as_list(slots, f"{context} translations")
    if slots and isinstance(slots[0], Mapping):
        # A single flat track of words fills the first slot
        slots = [slots]
    padded = (slots + [None, None])[:2]
    return (
        _timed_words(padded[0], f"{context} translation 1"),
        _timed_words(padded[1], f"{context} translation 2"),
    )


def _parse_line(raw: Any, context: str) -> Line:
    if not isinstance(raw, Mapping):
        raise DocumentError(f"Line entries must be mappings ({context})")

    words = _parse_words(_get(raw, "words"), context)
    text = _get(raw, "text")
    if words is None:
        # Word timings are incomplete: keep the text, drop to line timing
        raw_words = _as_list(_get(raw, "words"), f"{context} words")
        text = text or " ".join(
            str(_get(w, "text", default="")).strip() for w in raw_words if isinstance(w, Mapping)
        )
        words = ()

    begin = parse_time_code(_get(raw, "begin", "start", "start_time"))
    end = parse_time_code(_get(raw, "end", "end_time"))
    if begin is None and words:
        begin = words[0].begin
    if end is None and words:
        end = max(w.end for w in words)
    begin, end = normalize_interval(begin, end, context)

    position = str(_get(raw, "backgroundPosition", "background_position", default="below"))
    try:
        background_position = BackgroundPosition(position)
    except ValueError:
        logger.warning(f"Unknown background position {position!r} in {context}")
        background_position = BackgroundPosition.BELOW

    agent = _get(raw, "agent")
    return Line(
        begin=begin,
        end=end,
        text=str(text or "").strip() or " ".join(w.text for w in words),
        words=words,
        background_words=_timed_words(_get(raw, "backgroundWords", "background_words"), context),
        background_position=background_position,
        translation_words=_parse_translations(raw, context),
        pronunciation_words=_timed_words(
            _get(raw, "pronunciationWords", "pronunciation_words"), context
        ),
        agent=str(agent) if agent else None,
    )


def _parse_division(raw: Any, index: int) -> Division:
    if not isinstance(raw, Mapping):
        raise DocumentError(f"Division {index} must be a mapping")
    lines = tuple(
        _parse_line(line, f"division {index} line {i}")
        for i, line in enumerate(_as_list(_get(raw, "lines"), f"division {index} lines"))
    )
    begin = parse_time_code(_get(raw, "begin", "start"))
    end = parse_time_code(_get(raw, "end"))
    if begin is None and lines:
        begin = min(line.begin for line in lines)
    if end is None and lines:
        end = max(line.end for line in lines)
    begin, end = normalize_interval(begin, end, f"division {index}")
    return Division(begin=begin, end=end, lines=lines)


def _parse_agent(raw: Any) -> Agent:
    if not isinstance(raw, Mapping):
        raise DocumentError("Agent entries must be mappings")
    agent_id = str(_get(raw, "id", "xml:id", default="")).strip()
    if not agent_id:
        raise DocumentError("Agent entries need an id")
    kind = str(_get(raw, "type", default="other")).lower()
    try:
        agent_type = AgentType(kind)
    except ValueError:
        agent_type = AgentType.OTHER
    return Agent(id=agent_id, type=agent_type, name=_get(raw, "name") or None)


def _parse_mode(value: Any) -> WordTimingMode:
    if isinstance(value, WordTimingMode):
        return value
    return WordTimingMode.WORD if str(value or "").lower() == "word" else WordTimingMode.LINE


def synthesize_agent(agent_id: str) -> Agent:
    """Minimal stand-in for an agent a line references but nobody declared."""
    match = _NUMBERED_VOICE_RE.match(agent_id)
    is_person = bool(match) and int(match.group(1)) < 1000
    return Agent(
        id=agent_id,
        type=AgentType.PERSON if is_person else AgentType.GROUP,
        name=f"Singer {agent_id}",
    )


def referenced_agent_ids(divisions: Iterable[Division]) -> List[str]:
    """Agent ids used by lines, in first-seen order."""
    seen: List[str] = []
    for div in divisions:
        for line in div.lines:
            if line.agent and line.agent not in seen:
                seen.append(line.agent)
    return seen


def enrich_document(document: Document) -> Document:
    """Return a Document whose agent list covers every referenced id.

    The input is left untouched; a new value is returned when agents had
    to be synthesized.
    """
    declared = {agent.id for agent in document.agents}
    missing = [
        agent_id
        for agent_id in referenced_agent_ids(document.divisions)
        if agent_id not in declared
    ]
    if not missing:
        return document
    logger.info(f"Synthesizing {len(missing)} undeclared agent(s): {', '.join(missing)}")
    return replace(
        document, agents=document.agents + tuple(synthesize_agent(a) for a in missing)
    )


def build_document(data: Mapping[str, Any]) -> Document:
    """Build a frozen Document from parser output.

    Raises:
        DocumentError: If the input is not structured like a document at all.
    """
    if not isinstance(data, Mapping):
        raise DocumentError(f"Document data must be a mapping, got {type(data).__name__}")

    raw_divisions = _as_list(_get(data, "divisions", "divs"), "divisions")
    if not raw_divisions and _get(data, "lines") is not None:
        # Flat documents: everything in one division
        raw_divisions = [{"lines": _get(data, "lines")}]

    agents: Sequence[Agent] = [_parse_agent(a) for a in _as_list(_get(data, "agents"), "agents")]
    document = Document(
        agents=tuple(agents),
        divisions=tuple(_parse_division(div, i) for i, div in enumerate(raw_divisions)),
        word_timing_mode=_parse_mode(_get(data, "wordTimingMode", "word_timing_mode", "timing")),
    )
    document = enrich_document(document)
    logger.debug(
        f"Built document: {len(document.divisions)} division(s), "
        f"{document.line_count} line(s), {len(document.agents)} agent(s)"
    )
    return document


def document_from_parser(parse: Callable[[str], Any], raw_text: str) -> Document:
    """Run the external text parser and finish construction of its result.

    The parser may return a Document, the JSON-compatible structure, or a
    ParseError (returned or raised).

    Raises:
        ParseError: If the parser failed or produced something unusable.
    """
    result = parse(raw_text)
    if isinstance(result, ParseError):
        raise result
    if isinstance(result, Document):
        return enrich_document(result)
    if isinstance(result, Mapping):
        try:
            return build_document(result)
        except DocumentError as e:
            raise ParseError(f"Parser produced an invalid document: {e}") from e
    raise ParseError(f"Parser returned {type(result).__name__}, expected a document")

"""JSON serialization for lyric documents."""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .document import build_document
from .models import Division, Document, Line, Word

# Plain timed lines: a line longer than this is cut short and ends its division
MAX_PLAIN_LINE_SECONDS = 10.0
CAPPED_LINE_SECONDS = 5.0
LAST_LINE_SECONDS = 3.0


def _words_to_json(words: Sequence[Word]) -> List[dict]:
    return [{"text": w.text, "begin": w.begin, "end": w.end} for w in words]


def line_to_json(line: Line) -> Dict[str, Any]:
    """Convert a Line into a JSON-serializable dict."""
    data: Dict[str, Any] = {
        "begin": line.begin,
        "end": line.end,
        "text": line.text,
    }
    if line.words:
        data["words"] = _words_to_json(line.words)
    if line.background_words:
        data["backgroundWords"] = _words_to_json(line.background_words)
        data["backgroundPosition"] = line.background_position.value
    if any(line.translation_words):
        data["translationWords"] = [_words_to_json(slot) for slot in line.translation_words]
    if line.pronunciation_words:
        data["pronunciationWords"] = _words_to_json(line.pronunciation_words)
    if line.agent:
        data["agent"] = line.agent
    return data


def document_to_json(document: Document) -> Dict[str, Any]:
    """Convert a Document into the parser's JSON structure."""
    return {
        "agents": [
            {"id": a.id, "type": a.type.value, "name": a.name} for a in document.agents
        ],
        "divisions": [
            {
                "begin": div.begin,
                "end": div.end,
                "lines": [line_to_json(line) for line in div.lines],
            }
            for div in document.divisions
        ],
        "wordTimingMode": document.word_timing_mode.value,
    }


def document_from_json(data: Dict[str, Any]) -> Document:
    """Convert JSON data back into a Document."""
    return build_document(data)


def save_document_json(filepath: str, document: Document) -> None:
    """Save a document to a JSON file."""
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(document_to_json(document), f, ensure_ascii=False, indent=2)


def load_document_json(filepath: str) -> Document:
    """Load a document from a JSON file."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return document_from_json(data)


def _close_division(lines: List[Line]) -> Division:
    return Division(begin=lines[0].begin, end=max(l.end for l in lines), lines=tuple(lines))


def document_from_timed_lines(
    timed_lines: Sequence[Tuple[float, str]], duration: Optional[float] = None
) -> Document:
    """Build a line-timed Document from plain (timestamp, text) pairs.

    Each line lasts until the next timestamp. Blank lines mark instrumental
    breaks and start a new division, as does a line that had to be cut
    short because the next timestamp was too far away.
    """
    ordered = sorted(timed_lines, key=lambda item: item[0])
    divisions: List[Division] = []
    current: List[Line] = []

    for i, (start_time, text) in enumerate(ordered):
        text = text.strip()
        if not text:
            if current:
                divisions.append(_close_division(current))
                current = []
            continue

        capped = False
        if i + 1 < len(ordered):
            end_time = ordered[i + 1][0]
            if end_time - start_time > MAX_PLAIN_LINE_SECONDS:
                end_time = start_time + CAPPED_LINE_SECONDS
                capped = True
        elif duration is not None and duration > start_time:
            end_time = duration
        else:
            end_time = start_time + LAST_LINE_SECONDS

        current.append(Line(begin=start_time, end=end_time, text=text))
        if capped:
            divisions.append(_close_division(current))
            current = []

    if current:
        divisions.append(_close_division(current))
    return Document(divisions=tuple(divisions))

"""Data models for timed lyric documents and per-tick playback state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple


class AgentType(str, Enum):
    """Kind of performer a duet agent represents."""

    PERSON = "person"
    GROUP = "group"
    OTHER = "other"


class WordTimingMode(str, Enum):
    """Whether a document carries per-word or only per-line timings."""

    LINE = "Line"
    WORD = "Word"


class BackgroundPosition(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class WordTrack(str, Enum):
    """Which word sequence of a line a word belongs to."""

    MAIN = "main"
    BACKGROUND = "background"
    TRANSLATION0 = "translation0"
    TRANSLATION1 = "translation1"
    PRONUNCIATION = "pronunciation"


@dataclass(frozen=True)
class Word:
    """A single word with timing information."""

    text: str
    begin: float
    end: float

    @property
    def duration(self) -> float:
        return max(self.end - self.begin, 0.0)


@dataclass(frozen=True)
class Line:
    """A lyric line as delivered by the parser."""

    begin: float
    end: float
    text: str = ""
    words: Tuple[Word, ...] = ()
    background_words: Tuple[Word, ...] = ()
    background_position: BackgroundPosition = BackgroundPosition.BELOW
    translation_words: Tuple[Tuple[Word, ...], Tuple[Word, ...]] = ((), ())
    pronunciation_words: Tuple[Word, ...] = ()
    agent: Optional[str] = None

    @property
    def display_text(self) -> str:
        if self.text:
            return self.text
        return " ".join(w.text for w in self.words)

    @property
    def background_text(self) -> str:
        return " ".join(w.text for w in self.background_words)

    def track(self, track: WordTrack) -> Tuple[Word, ...]:
        """Return the word sequence for one track."""
        if track is WordTrack.MAIN:
            return self.words
        if track is WordTrack.BACKGROUND:
            return self.background_words
        if track is WordTrack.TRANSLATION0:
            return self.translation_words[0]
        if track is WordTrack.TRANSLATION1:
            return self.translation_words[1]
        return self.pronunciation_words

    def extra_rows(self) -> int:
        """Number of auxiliary text rows rendered alongside the main text."""
        rows = 0
        if self.background_words:
            rows += 1
        rows += sum(1 for slot in self.translation_words if slot)
        if self.pronunciation_words:
            rows += 1
        return rows


@dataclass(frozen=True)
class Division:
    """A structural section (verse, chorus) holding lines."""

    begin: float
    end: float
    lines: Tuple[Line, ...] = ()


@dataclass(frozen=True)
class Agent:
    """A duet performer referenced by lines through its id."""

    id: str
    type: AgentType = AgentType.OTHER
    name: Optional[str] = None


@dataclass(frozen=True)
class Document:
    """A normalized lyric document. Immutable once built."""

    agents: Tuple[Agent, ...] = ()
    divisions: Tuple[Division, ...] = ()
    word_timing_mode: WordTimingMode = WordTimingMode.LINE

    def agent(self, agent_id: Optional[str]) -> Optional[Agent]:
        """Resolve an agent id to its record."""
        if not agent_id:
            return None
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    @property
    def line_count(self) -> int:
        return sum(len(div.lines) for div in self.divisions)

    @property
    def is_empty(self) -> bool:
        return self.line_count == 0


@dataclass(frozen=True)
class IndexedLine:
    """A Line placed in global time order with derived timing fields."""

    line_id: int
    order: int
    division_index: int
    begin: float
    end: float
    original_end: float
    group_end: float
    source: Line

    @property
    def text(self) -> str:
        return self.source.display_text

    @property
    def agent(self) -> Optional[str]:
        return self.source.agent

    @property
    def duration(self) -> float:
        return self.original_end - self.begin


@dataclass(frozen=True)
class Interlude:
    """An instrumental window between two divisions."""

    start: float
    end: float
    division_index: int

    @property
    def key(self) -> str:
        return f"{self.division_index}:{self.start}-{self.end}"

    @property
    def duration(self) -> float:
        return max(0.0, self.end - self.start)

    def contains(self, time: float) -> bool:
        return self.start <= time < self.end


class WordKey(NamedTuple):
    """Identifies one word: line id, word track and position in the track."""

    line_id: int
    track: WordTrack
    index: int


@dataclass
class PlaybackState:
    """Everything the display needs to know about one instant."""

    time: float
    active_cluster: List[int] = field(default_factory=list)
    cluster_end: Optional[float] = None
    preactivated_line: Optional[int] = None
    past: Dict[int, bool] = field(default_factory=dict)
    word_progress: Dict[WordKey, float] = field(default_factory=dict)
    line_progress: Dict[int, float] = field(default_factory=dict)
    cluster_progress: float = 0.0
    active_interlude: Optional[Interlude] = None

    @property
    def focus_line(self) -> Optional[int]:
        """Line the view should follow: first active line, else the upcoming one."""
        if self.active_cluster:
            return self.active_cluster[0]
        return self.preactivated_line

    @property
    def is_empty(self) -> bool:
        return not self.active_cluster and self.preactivated_line is None

    def is_past(self, line_id: int) -> bool:
        return self.past.get(line_id, False)

    @classmethod
    def empty(cls, time: float) -> "PlaybackState":
        return cls(time=time)


class ScrollMode(str, Enum):
    FOLLOWING = "following"
    USER_OVERRIDE = "user_override"
    INTERLUDE_HOLD = "interlude_hold"


@dataclass
class ScrollState:
    """Scroll bookkeeping carried across ticks by the ScrollCoordinator."""

    auto_scroll_enabled: bool = True
    last_scrolled_line_id: Optional[int] = None
    last_scroll_timestamp: Optional[float] = None
    suppress_until: Optional[float] = None
    interlude_hold_active: bool = False

    @property
    def mode(self) -> ScrollMode:
        if self.interlude_hold_active:
            return ScrollMode.INTERLUDE_HOLD
        if not self.auto_scroll_enabled:
            return ScrollMode.USER_OVERRIDE
        return ScrollMode.FOLLOWING


@dataclass(frozen=True)
class ScrollOutput:
    """Scroll values handed to the presentation layer each tick."""

    target_offset: Optional[float]
    animation_duration_ms: int
    is_animating: bool

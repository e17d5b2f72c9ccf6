from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class MatchKind(str, Enum):
    MATCHED = "MATCHED"     # Local chapter paired with a catalog chapter
    INSERTED = "INSERTED"   # Local chapter with no catalog counterpart


@dataclass(frozen=True)
class LocalChapter:
    """
    A chapter marker read from the audio file's own metadata.
    Offsets are milliseconds from the start of the book.
    """
    title: str
    start_ms: int
    end_ms: int

    @classmethod
    def from_seconds(cls, title: str, start: float, end: float) -> "LocalChapter":
        return cls(title=title, start_ms=round(start * 1000), end_ms=round(end * 1000))

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def to_dict(self) -> dict:
        return {"title": self.title, "start_ms": self.start_ms, "end_ms": self.end_ms}


@dataclass(frozen=True)
class RemoteChapter:
    """A chapter as listed by the external catalog (e.g. Audible)."""
    title: str
    start_ms: int
    duration_ms: int

    def to_dict(self) -> dict:
        return {"title": self.title, "start_ms": self.start_ms, "duration_ms": self.duration_ms}


@dataclass(frozen=True)
class NormalizedChapter:
    """Common shape both chapter sources are converted to before scoring."""
    index: int
    start_ms: int
    end_ms: int
    title: str


# Alignment steps. Exactly one of these describes each move through the DP table.

@dataclass(frozen=True)
class Matched:
    local_index: int
    remote_index: int
    cost: float


@dataclass(frozen=True)
class LocalUnmatched:
    local_index: int


@dataclass(frozen=True)
class RemoteUnmatched:
    remote_index: int


AlignmentStep = Union[Matched, LocalUnmatched, RemoteUnmatched]


@dataclass(frozen=True)
class AlignedChapter:
    """
    One entry per local chapter, in local order.
    suggested_name is "" when no catalog chapter was paired with it.
    """
    index: int
    start_ms: int
    duration_ms: int
    current_name: str
    suggested_name: str
    confidence: float
    kind: MatchKind
    remote_index: Optional[int] = None

    def __repr__(self):
        return (f"<AlignedChapter {self.index}: '{self.current_name}' -> "
                f"'{self.suggested_name}' Kind={self.kind.value} "
                f"Confidence={self.confidence:.2f}>")

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "start_ms": self.start_ms,
            "duration_ms": self.duration_ms,
            "current_name": self.current_name,
            "suggested_name": self.suggested_name,
            "confidence": self.confidence,
            "kind": self.kind.value,
            "remote_index": self.remote_index,
        }


@dataclass(frozen=True)
class AnalysisResult:
    total: int = 0
    placeholder_count: int = 0
    placeholder_ratio: float = 0.0
    needs_update: bool = False

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "placeholder_count": self.placeholder_count,
            "placeholder_ratio": self.placeholder_ratio,
            "needs_update": self.needs_update,
        }


@dataclass(frozen=True)
class AlignmentResult:
    aligned: Tuple[AlignedChapter, ...] = ()
    overall_confidence: float = 0.0
    needs_update: bool = False
    chapter_count_match: bool = True
    unmatched_remote: Tuple[int, ...] = ()

    @property
    def matched(self) -> Tuple[AlignedChapter, ...]:
        return tuple(a for a in self.aligned if a.kind is MatchKind.MATCHED)

    def to_dict(self) -> dict:
        return {
            "chapters": [a.to_dict() for a in self.aligned],
            "overall_confidence": self.overall_confidence,
            "needs_update": self.needs_update,
            "chapter_count_match": self.chapter_count_match,
            "unmatched_remote": list(self.unmatched_remote),
        }

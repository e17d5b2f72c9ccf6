from typing import List, Sequence

from .models import LocalChapter, NormalizedChapter, RemoteChapter


def seconds_to_ms(seconds: float) -> int:
    return round(seconds * 1000)


def normalize_local(chapters: Sequence[LocalChapter]) -> List[NormalizedChapter]:
    """
    Converts local markers into the canonical record shape.
    Order is kept and nothing is dropped: empty titles and zero-length
    chapters are valid input that simply scores poorly later.
    """
    return [
        NormalizedChapter(index=i, start_ms=int(ch.start_ms), end_ms=int(ch.end_ms), title=ch.title or "")
        for i, ch in enumerate(chapters)
    ]


def normalize_remote(chapters: Sequence[RemoteChapter]) -> List[NormalizedChapter]:
    """Converts catalog chapters (start + duration) into start/end records."""
    return [
        NormalizedChapter(
            index=i,
            start_ms=int(ch.start_ms),
            end_ms=int(ch.start_ms) + int(ch.duration_ms),
            title=ch.title or "",
        )
        for i, ch in enumerate(chapters)
    ]

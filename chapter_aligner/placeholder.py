import re
from typing import Optional, Sequence

from .config import AlignmentConfig
from .models import AnalysisResult, LocalChapter
from .utils import get_logger

logger = get_logger("Placeholder")

_NUMBER_WORDS = "one|two|three|four|five|six|seven|eight|nine|ten"

# Auto-generated naming schemes seen in ripped or re-encoded audiobooks
PLACEHOLDER_PATTERNS = [
    re.compile(r"^chapter\s+\d+$", re.IGNORECASE),
    re.compile(rf"^chapter\s+({_NUMBER_WORDS})$", re.IGNORECASE),
    re.compile(r"^track\s+\d+$", re.IGNORECASE),
    re.compile(r"^part\s+\d+$", re.IGNORECASE),
    re.compile(rf"^part\s+({_NUMBER_WORDS})$", re.IGNORECASE),
    re.compile(r"^\d+$"),
    re.compile(r"^\d+\.\s*$"),
    re.compile(r"^\d+\s*-\s*$"),
]


def is_placeholder_title(title: str) -> bool:
    """True for empty titles and generic auto-numbered ones ("Chapter 3", "Track 07", "12")."""
    name = (title or "").strip()
    if not name:
        return True
    return any(pattern.match(name) for pattern in PLACEHOLDER_PATTERNS)


def analyze(local: Sequence[LocalChapter], config: Optional[AlignmentConfig] = None) -> AnalysisResult:
    """
    Flags a book whose local titles look auto-generated.

    Works on local titles alone, so it still gives a signal when the
    catalog lookup failed entirely. needs_update is set when the
    placeholder ratio reaches the threshold or any title is empty.
    """
    config = (config or AlignmentConfig()).validate()

    if not local:
        return AnalysisResult()

    titles = [ch.title or "" for ch in local]
    placeholder_count = sum(1 for t in titles if is_placeholder_title(t))
    has_empty = any(not t.strip() for t in titles)
    ratio = placeholder_count / len(titles)

    needs_update = ratio >= config.needs_update_threshold or has_empty
    logger.debug(
        f"Placeholder titles: {placeholder_count}/{len(titles)} "
        f"(ratio {ratio:.2f}, empty={has_empty}) -> needs_update={needs_update}"
    )

    return AnalysisResult(
        total=len(titles),
        placeholder_count=placeholder_count,
        placeholder_ratio=ratio,
        needs_update=needs_update,
    )

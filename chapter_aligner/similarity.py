import re
from typing import List

from thefuzz import fuzz

from .config import AlignmentConfig
from .models import NormalizedChapter

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

JACCARD_WEIGHT = 0.5
EDIT_WEIGHT = 0.5


def normalize_title(title: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    text = _PUNCTUATION.sub(" ", (title or "").lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    """Distinct tokens in first-seen order."""
    tokens = []
    for token in text.split(" "):
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def jaccard(tokens_a: List[str], tokens_b: List[str]) -> float:
    union = list(tokens_a)
    for token in tokens_b:
        if token not in union:
            union.append(token)
    if not union:
        return 0.0
    shared = [t for t in tokens_a if t in tokens_b]
    return len(shared) / len(union)


def text_similarity(a: str, b: str) -> float:
    """
    Scores two chapter titles in [0, 1].

    Half token-set Jaccard overlap, half normalized edit-distance
    similarity. A missing title can never confirm a match, so an empty
    title on either side scores 0.
    """
    norm_a = normalize_title(a)
    norm_b = normalize_title(b)

    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0

    overlap = jaccard(tokenize(norm_a), tokenize(norm_b))
    edit = fuzz.ratio(norm_a, norm_b) / 100.0
    return JACCARD_WEIGHT * overlap + EDIT_WEIGHT * edit


def time_similarity(local_start_ms: int, remote_start_ms: int, window_ms: int = 30000) -> float:
    """1.0 at identical starts, decaying linearly to 0 at window_ms apart."""
    offset = abs(local_start_ms - remote_start_ms)
    if offset >= window_ms:
        return 0.0
    return 1.0 - offset / window_ms


def pair_cost(local: NormalizedChapter, remote: NormalizedChapter, config: AlignmentConfig) -> float:
    """
    Cost of pairing one local chapter with one catalog chapter.
    Start-time proximity is the primary anchor; the title corroborates.
    """
    score = (
        config.weight_time * time_similarity(local.start_ms, remote.start_ms, config.time_window_ms)
        + config.weight_text * text_similarity(local.title, remote.title)
    )
    return min(1.0, max(0.0, 1.0 - score))

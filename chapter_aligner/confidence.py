from typing import Sequence

from .models import AlignedChapter, MatchKind


def pair_confidence(cost: float) -> float:
    return min(1.0, max(0.0, 1.0 - cost))


def overall_confidence(aligned: Sequence[AlignedChapter]) -> float:
    """
    Unweighted mean over matched entries, so one long chapter cannot
    dominate. 0 when nothing matched.
    """
    scores = [a.confidence for a in aligned if a.kind is MatchKind.MATCHED]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)

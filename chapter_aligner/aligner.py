from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .confidence import overall_confidence, pair_confidence
from .config import AlignmentConfig
from .models import (AlignedChapter, AlignmentResult, AlignmentStep, LocalChapter,
                     LocalUnmatched, Matched, MatchKind, NormalizedChapter,
                     RemoteChapter, RemoteUnmatched)
from .normalizer import normalize_local, normalize_remote
from .placeholder import analyze
from .similarity import pair_cost
from .utils import get_logger

logger = get_logger("Aligner")


class _Move(Enum):
    MATCH = "D"         # diagonal
    SKIP_LOCAL = "U"    # local chapter left unmatched
    SKIP_REMOTE = "L"   # catalog chapter left unmatched


def align_sequences(
    local: Sequence[NormalizedChapter],
    remote: Sequence[NormalizedChapter],
    config: AlignmentConfig,
) -> List[AlignmentStep]:
    """
    Minimum-cost order-preserving partial matching of two chapter sequences.

    Fills the full (m+1) x (n+1) table and records the chosen move per cell.
    Ties resolve match > local unmatched > remote unmatched so that equal
    floating-point costs always produce the same path.
    """
    m, n = len(local), len(remote)
    ins, dele = config.insert_cost, config.delete_cost

    dp = [[0.0] * (n + 1) for _ in range(m + 1)]
    moves = [[_Move.MATCH] * (n + 1) for _ in range(m + 1)]
    costs = [[0.0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        dp[i][0] = i * ins
        moves[i][0] = _Move.SKIP_LOCAL
    for j in range(1, n + 1):
        dp[0][j] = j * dele
        moves[0][j] = _Move.SKIP_REMOTE

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = pair_cost(local[i - 1], remote[j - 1], config)
            costs[i][j] = cost

            best = dp[i - 1][j - 1] + cost
            move = _Move.MATCH

            skip_local = dp[i - 1][j] + ins
            if skip_local < best:
                best, move = skip_local, _Move.SKIP_LOCAL

            skip_remote = dp[i][j - 1] + dele
            if skip_remote < best:
                best, move = skip_remote, _Move.SKIP_REMOTE

            dp[i][j] = best
            moves[i][j] = move

    logger.debug(f"Alignment table {m + 1}x{n + 1}, total cost {dp[m][n]:.4f}")

    # Traceback
    steps: List[AlignmentStep] = []
    i, j = m, n
    while i > 0 or j > 0:
        move = moves[i][j]
        if move is _Move.MATCH:
            steps.append(Matched(local_index=i - 1, remote_index=j - 1, cost=costs[i][j]))
            i -= 1
            j -= 1
        elif move is _Move.SKIP_LOCAL:
            steps.append(LocalUnmatched(local_index=i - 1))
            i -= 1
        else:
            steps.append(RemoteUnmatched(remote_index=j - 1))
            j -= 1
    steps.reverse()
    return steps


def _to_aligned(
    steps: Iterable[AlignmentStep],
    local: Sequence[NormalizedChapter],
    remote: Sequence[NormalizedChapter],
) -> Tuple[List[AlignedChapter], List[int]]:
    aligned: List[AlignedChapter] = []
    unmatched_remote: List[int] = []

    for step in steps:
        if isinstance(step, Matched):
            lc = local[step.local_index]
            aligned.append(AlignedChapter(
                index=lc.index,
                start_ms=lc.start_ms,
                duration_ms=lc.end_ms - lc.start_ms,
                current_name=lc.title,
                suggested_name=remote[step.remote_index].title,
                confidence=pair_confidence(step.cost),
                kind=MatchKind.MATCHED,
                remote_index=step.remote_index,
            ))
        elif isinstance(step, LocalUnmatched):
            lc = local[step.local_index]
            aligned.append(AlignedChapter(
                index=lc.index,
                start_ms=lc.start_ms,
                duration_ms=lc.end_ms - lc.start_ms,
                current_name=lc.title,
                suggested_name="",
                confidence=0.0,
                kind=MatchKind.INSERTED,
            ))
        elif isinstance(step, RemoteUnmatched):
            unmatched_remote.append(step.remote_index)
        else:
            raise TypeError(f"Unknown alignment step: {step!r}")

    return aligned, unmatched_remote


def align(
    local: Sequence[LocalChapter],
    remote: Sequence[RemoteChapter],
    config: Optional[AlignmentConfig] = None,
) -> AlignmentResult:
    """
    Suggests catalog titles for the local chapters.

    Local timing is never touched; only catalog names are borrowed. Every
    local chapter gets exactly one entry, in order. Catalog chapters with
    no local counterpart are reported only through unmatched_remote.
    """
    config = (config or AlignmentConfig()).validate()

    norm_local = normalize_local(local)
    norm_remote = normalize_remote(remote)

    steps = align_sequences(norm_local, norm_remote, config)
    aligned, unmatched_remote = _to_aligned(steps, norm_local, norm_remote)

    analysis = analyze(local, config)
    result = AlignmentResult(
        aligned=tuple(aligned),
        overall_confidence=overall_confidence(aligned),
        needs_update=analysis.needs_update,
        chapter_count_match=len(local) == len(remote),
        unmatched_remote=tuple(unmatched_remote),
    )

    logger.debug(
        f"Aligned {len(local)} local / {len(remote)} catalog chapters: "
        f"{len(result.matched)} matched, {len(unmatched_remote)} catalog unmatched, "
        f"confidence {result.overall_confidence:.2f}"
    )
    return result


def apply_suggestions(
    local: Sequence[LocalChapter],
    aligned: Sequence[AlignedChapter],
    rejected: Iterable[int] = (),
    min_confidence: float = 0.0,
) -> List[LocalChapter]:
    """
    Returns a renamed copy of the local chapters.

    A chapter keeps its title when it has no suggestion, its index was
    rejected, or the suggestion's confidence is below min_confidence.
    Timing is copied unchanged.
    """
    rejected = list(rejected)
    renames = {}
    for entry in aligned:
        if not entry.suggested_name or entry.index in rejected:
            continue
        if entry.confidence < min_confidence:
            continue
        renames[entry.index] = entry.suggested_name

    renamed = [
        LocalChapter(title=renames.get(i, ch.title), start_ms=ch.start_ms, end_ms=ch.end_ms)
        for i, ch in enumerate(local)
    ]
    logger.info(f"Applied {len(renames)} of {len(local)} chapter name suggestions.")
    return renamed

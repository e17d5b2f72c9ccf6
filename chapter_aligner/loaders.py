import json
import pathlib
from typing import List, Optional

from .audio_metadata import get_duration_ms, is_audio_file, read_local_chapters
from .catalog import parse_catalog_chapters
from .models import LocalChapter, RemoteChapter
from .normalizer import seconds_to_ms
from .utils import ChapterSourceError, get_logger, parse_timestamp_to_seconds

logger = get_logger("Loaders")


def _read_json(path: pathlib.Path):
    if not path.exists():
        logger.error(f"File not found: {path}")
        raise ChapterSourceError(f"File not found: {path}", path=path)
    try:
        with open(path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        raise ChapterSourceError(f"Invalid JSON in {path}", path=path) from e


def _from_timestamps(items: list, total_duration_ms: Optional[int], path) -> List[LocalChapter]:
    """
    Timestamp export rows only carry a start. Each chapter ends where the
    next starts; the last ends at total_duration_ms (or its own start).
    Rows with a blank start_time are kept at the previous chapter's start.
    """
    starts = []
    previous = 0
    for item in items:
        ts = item.get("start_time", "")
        try:
            start = seconds_to_ms(parse_timestamp_to_seconds(ts)) if ts else previous
        except ValueError as e:
            raise ChapterSourceError(f"Bad start_time '{ts}' in {path}", path=path) from e
        starts.append(start)
        previous = start

    chapters = []
    for i, item in enumerate(items):
        if i + 1 < len(starts):
            end = starts[i + 1]
        elif total_duration_ms is not None:
            end = total_duration_ms
        else:
            end = starts[i]
        chapters.append(LocalChapter(title=item.get("title", "") or "", start_ms=starts[i], end_ms=max(end, starts[i])))
    return chapters


def load_local_chapters(path, total_duration_ms: Optional[int] = None) -> List[LocalChapter]:
    """
    Loads local chapters from an audio file (via ffprobe) or a JSON file.

    JSON may be a list of {title, start_ms, end_ms} objects, or the
    timestamp export format {title, start_time "HH:MM:SS", seconds}.
    """
    path = pathlib.Path(path)
    if is_audio_file(path):
        if not path.exists():
            logger.error(f"Audio file not found: {path}")
            raise ChapterSourceError(f"File not found: {path}", path=path)
        return read_local_chapters(str(path))

    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("chapters", [])
    if not isinstance(data, list):
        raise ChapterSourceError(f"Expected a list of chapters in {path}", path=path)
    if not all(isinstance(item, dict) for item in data):
        raise ChapterSourceError(f"Every chapter in {path} must be a JSON object", path=path)

    with_ms = [item for item in data if "start_ms" in item]
    if with_ms and len(with_ms) != len(data):
        raise ChapterSourceError(f"{path} mixes start_ms rows with timestamp rows", path=path)

    if with_ms:
        try:
            chapters = [
                LocalChapter(
                    title=item.get("title", "") or "",
                    start_ms=int(item["start_ms"]),
                    end_ms=int(item.get("end_ms", item["start_ms"])),
                )
                for item in data
            ]
        except (TypeError, ValueError) as e:
            raise ChapterSourceError(f"Invalid chapter offsets in {path}", path=path) from e
    else:
        chapters = _from_timestamps(data, total_duration_ms, path)

    logger.info(f"Loaded {len(chapters)} local chapters from {path}")
    return chapters


def load_remote_chapters(path) -> List[RemoteChapter]:
    """Loads catalog chapters from a saved catalog response (JSON)."""
    path = pathlib.Path(path)
    return parse_catalog_chapters(_read_json(path))


def read_total_duration(path) -> Optional[int]:
    """Total duration in ms for audio files, None for anything else."""
    if is_audio_file(path):
        return get_duration_ms(str(path))
    return None

import json
import subprocess
from typing import List

from .models import LocalChapter
from .normalizer import seconds_to_ms
from .utils import ChapterSourceError, get_logger, ms_to_hms

logger = get_logger(__name__)

AUDIO_EXTENSIONS = (".m4b", ".m4a", ".mp3", ".mka", ".mp4", ".ogg", ".opus", ".flac")


def _run_tool(cmd: List[str], audio_path: str) -> str:
    try:
        return subprocess.check_output(cmd).decode()
    except FileNotFoundError as e:
        logger.error("ffprobe not found. Install FFmpeg to read chapters from audio files.")
        raise ChapterSourceError("ffprobe is not installed", path=audio_path) from e
    except subprocess.CalledProcessError as e:
        logger.error(f"ffprobe failed on {audio_path}: {e}")
        raise ChapterSourceError(f"ffprobe failed on {audio_path}", path=audio_path) from e


def get_duration_ms(audio_path: str) -> int:
    """Returns total duration of audio file in milliseconds using ffprobe."""
    cmd = [
        "ffprobe", "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        audio_path
    ]
    output = _run_tool(cmd, audio_path).strip()
    try:
        return seconds_to_ms(float(output))
    except ValueError as e:
        raise ChapterSourceError(f"Unreadable duration '{output}' for {audio_path}", path=audio_path) from e


def read_local_chapters(audio_path: str) -> List[LocalChapter]:
    """
    Reads the chapter markers embedded in an audio container.
    Titles come from each chapter's 'title' tag; missing tags give "".
    """
    cmd = [
        "ffprobe", "-v", "error",
        "-show_chapters",
        "-print_format", "json",
        audio_path
    ]
    output = _run_tool(cmd, audio_path)

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ChapterSourceError(f"ffprobe returned invalid JSON for {audio_path}", path=audio_path) from e

    chapters = []
    for raw in data.get("chapters", []):
        try:
            start = float(raw.get("start_time", 0.0))
            end = float(raw.get("end_time", start))
        except (TypeError, ValueError):
            logger.warning(f"Skipping timing for chapter id={raw.get('id')}: unparseable offsets")
            start, end = 0.0, 0.0
        title = (raw.get("tags") or {}).get("title", "")
        chapters.append(LocalChapter(title=title, start_ms=seconds_to_ms(start), end_ms=seconds_to_ms(end)))

    logger.info(f"Read {len(chapters)} chapters from {audio_path}")
    for chap in chapters[:10]:
        logger.debug(f"  {ms_to_hms(chap.start_ms)} {chap.title}")
    return chapters


def is_audio_file(path: str) -> bool:
    return str(path).lower().endswith(AUDIO_EXTENSIONS)

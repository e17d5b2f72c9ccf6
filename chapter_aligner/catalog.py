"""
Catalog chapter payloads.

Fetching from the catalog happens elsewhere; this module only turns an
already-downloaded Audible metadata response into RemoteChapter records.
Expected shape:

    {"content_metadata": {"chapter_info": {"chapters": [
        {"title": "...", "start_offset_ms": 0, "length_ms": 600000}, ...
    ]}}}

A bare list of chapter objects is accepted too.
"""
import re
from typing import List, Union

from .models import RemoteChapter
from .utils import ChapterSourceError, get_logger

logger = get_logger("Catalog")

_ASIN = re.compile(r"^[A-Z0-9]{10}$")


def validate_asin(asin: str) -> str:
    """Returns the normalized ASIN or raises ChapterSourceError."""
    candidate = (asin or "").strip().upper()
    if not _ASIN.match(candidate):
        raise ChapterSourceError(f"Invalid catalog identifier: '{asin}'")
    return candidate


def _chapter_list(payload: Union[dict, list]) -> list:
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        raise ChapterSourceError(f"Unsupported catalog payload type: {type(payload).__name__}")

    metadata = payload.get("content_metadata", payload)
    info = metadata.get("chapter_info", metadata)
    chapters = info.get("chapters")
    if chapters is None:
        raise ChapterSourceError("Catalog payload has no chapter list")
    return chapters


def parse_catalog_chapters(payload: Union[dict, list]) -> List[RemoteChapter]:
    chapters = []
    for i, raw in enumerate(_chapter_list(payload)):
        try:
            start = int(raw.get("start_offset_ms", raw.get("start_ms", 0)))
            length = int(raw.get("length_ms", raw.get("duration_ms", 0)))
        except (TypeError, ValueError, AttributeError) as e:
            raise ChapterSourceError(f"Catalog chapter {i} has invalid offsets: {raw!r}") from e
        chapters.append(RemoteChapter(title=raw.get("title", "") or "", start_ms=start, duration_ms=length))

    logger.info(f"Parsed {len(chapters)} catalog chapters.")
    return chapters

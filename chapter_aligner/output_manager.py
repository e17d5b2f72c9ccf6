import json
import pathlib
from typing import List, Optional

from .models import AlignmentResult, LocalChapter, MatchKind
from .utils import get_logger, ms_to_hms, sanitize

logger = get_logger("OutputManager")


def get_output_dir(title: str, asin: Optional[str] = None, base_dir="repo") -> pathlib.Path:
    """
    Returns the Path object for the book's report directory.
    Format: repo/{Title} [{ASIN}] (or repo/{Title} without an ASIN)
    """
    name = sanitize(title) or "Untitled"
    if asin:
        name = f"{name} [{asin}]"
    return pathlib.Path(base_dir) / name


def format_report_rows(result: AlignmentResult) -> List[dict]:
    rows = []
    for entry in result.aligned:
        rows.append({
            "index": entry.index,
            "start_time": ms_to_hms(entry.start_ms),
            "current": entry.current_name,
            "suggested": entry.suggested_name,
            "confidence": f"{entry.confidence:.2f}" if entry.kind is MatchKind.MATCHED else "",
            "kind": entry.kind.value,
        })
    return rows


def save_report(result: AlignmentResult, output_dir: pathlib.Path) -> pathlib.Path:
    """
    Writes the alignment report as JSON and as a Markdown table.
    Returns the JSON path.
    """
    output_dir = pathlib.Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # 1. JSON
    json_path = output_dir / "chapter_alignment.json"
    with open(json_path, "w") as f:
        json.dump(result.to_dict(), f, indent=4)

    # 2. Markdown Table
    md_path = output_dir / "chapter_alignment.md"
    with open(md_path, "w") as f:
        f.write("# Chapter Alignment\n")
        f.write(f"**Overall Confidence:** {result.overall_confidence:.2f}\n")
        f.write(f"**Needs Update:** {'yes' if result.needs_update else 'no'}\n")
        f.write(f"**Chapter Count Match:** {'yes' if result.chapter_count_match else 'no'}\n\n")
        f.write("| # | Start | Current | Suggested | Confidence | Kind |\n")
        f.write("| :--- | :--- | :--- | :--- | :--- | :--- |\n")
        for row in format_report_rows(result):
            f.write(
                f"| {row['index']} | {row['start_time']} | {row['current']} | "
                f"{row['suggested']} | {row['confidence']} | {row['kind']} |\n"
            )

    logger.info(f"Report saved to:\n  - {json_path}\n  - {md_path}")
    return json_path


def save_chapters(chapters: List[LocalChapter], json_path: pathlib.Path) -> pathlib.Path:
    """Writes a chapter list in the {title, start_ms, end_ms} format load_local_chapters reads."""
    json_path = pathlib.Path(json_path)
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, "w") as f:
        json.dump([c.to_dict() for c in chapters], f, indent=4)
    logger.info(f"✅ Saved {len(chapters)} chapters to {json_path}")
    return json_path

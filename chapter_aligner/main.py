import argparse
import json
import os
import sys

from .aligner import align, apply_suggestions
from .config import AlignmentConfig, ConfigurationError, load_config
from .catalog import validate_asin
from .loaders import load_local_chapters, load_remote_chapters, read_total_duration
from .output_manager import get_output_dir, save_chapters, save_report
from .placeholder import analyze
from .user_interaction import print_suggestions, review_suggestions
from .utils import ChapterSourceError, get_logger, setup_logging

logger = get_logger("Main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audiobook Chapter Name Aligner")
    parser.add_argument("local", help="Local chapters: audio file (M4B/MP3) or chapter JSON")
    parser.add_argument("remote", nargs="?", help="Catalog chapter payload (JSON)")
    parser.add_argument("--config", help="JSON file with alignment settings")
    parser.add_argument("--time-window", type=int, dest="time_window_ms", help="Time window in ms")
    parser.add_argument("--insert-cost", type=float, help="Cost of leaving a local chapter unmatched")
    parser.add_argument("--delete-cost", type=float, help="Cost of leaving a catalog chapter unmatched")
    parser.add_argument("--audio", help="Audio file giving the total duration for timestamp JSON input")
    parser.add_argument("--title", default="", help="Book title used to name the report directory")
    parser.add_argument("--asin", help="Catalog identifier used to name the report directory")
    parser.add_argument("--output", help="Directory for the alignment report")
    parser.add_argument("--review", action="store_true", help="Interactively reject suggestions")
    parser.add_argument("--apply", help="Write the renamed chapter list to this JSON file")
    parser.add_argument("--min-confidence", type=float, default=0.0,
                        help="Only apply suggestions at or above this confidence")
    parser.add_argument("--analyze-only", action="store_true",
                        help="Only check local titles for placeholders")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def resolve_config(args) -> AlignmentConfig:
    config = load_config(args.config) if args.config else AlignmentConfig()
    return config.with_overrides(
        time_window_ms=args.time_window_ms,
        insert_cost=args.insert_cost,
        delete_cost=args.delete_cost,
    ).validate()


def main():
    parser = build_parser()
    args = parser.parse_args()

    log_level = "DEBUG" if args.verbose else "INFO"
    setup_logging(log_level)

    if not os.path.exists(args.local):
        logger.error(f"Local chapter source not found: {args.local}")
        sys.exit(1)

    if not args.analyze_only:
        if not args.remote:
            logger.error("A catalog chapter file is required unless --analyze-only is given.")
            sys.exit(1)
        if not os.path.exists(args.remote):
            logger.error(f"Catalog chapter file not found: {args.remote}")
            sys.exit(1)

    try:
        config = resolve_config(args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        total_duration_ms = read_total_duration(args.audio) if args.audio else None
        local = load_local_chapters(args.local, total_duration_ms=total_duration_ms)
        remote = [] if args.analyze_only else load_remote_chapters(args.remote)
        asin = validate_asin(args.asin) if args.asin else None
    except ChapterSourceError as e:
        logger.error(f"Could not load chapters: {e}")
        sys.exit(1)

    if args.analyze_only:
        analysis = analyze(local, config)
        print(json.dumps(analysis.to_dict(), indent=4))
        return

    logger.info(f"Aligning {len(local)} local chapters against {len(remote)} catalog chapters")
    result = align(local, remote, config)
    logger.info(
        f"Overall confidence {result.overall_confidence:.2f}, "
        f"needs update: {result.needs_update}"
    )

    rejected = []
    if args.review:
        rejected = review_suggestions(result)
    else:
        print_suggestions(result)

    if args.output or args.asin or args.title:
        output_dir = args.output or get_output_dir(args.title or "Untitled", asin)
        save_report(result, output_dir)

    if args.apply:
        renamed = apply_suggestions(local, result.aligned, rejected=rejected,
                                    min_confidence=args.min_confidence)
        save_chapters(renamed, args.apply)


if __name__ == "__main__":
    main()

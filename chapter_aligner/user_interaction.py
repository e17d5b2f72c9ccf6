from typing import List

from .models import AlignmentResult, MatchKind
from .utils import get_logger, ms_to_hms

logger = get_logger("UserInteraction")


def parse_id_list(user_input: str) -> List[int]:
    """
    Parses "1, 2, 5-8" into [1, 2, 5, 6, 7, 8].
    Raises ValueError on anything that is not a number or a range.
    """
    ids: List[int] = []
    parts = [p.strip() for p in user_input.split(",") if p.strip()]

    for part in parts:
        if "-" in part:
            # Range logic: "1-5"
            start_str, end_str = part.split("-", 1)
            start, end = int(start_str.strip()), int(end_str.strip())
            if start > end:
                # Swap if user did 10-1
                start, end = end, start
            candidates = range(start, end + 1)
        else:
            candidates = [int(part)]

        for i in candidates:
            if i not in ids:
                ids.append(i)

    return sorted(ids)


def print_suggestions(result: AlignmentResult):
    print("\n" + "=" * 100)
    print(f"CHAPTER NAME SUGGESTIONS (overall confidence {result.overall_confidence:.2f})")
    if result.needs_update:
        print("Local chapter titles look like placeholders.")
    print("=" * 100)
    print(f"{'ID':<5} | {'START':<8} | {'CURRENT':<35} | {'SUGGESTED':<35} | {'CONF':<5}")
    print("-" * 100)

    for entry in result.aligned:
        if entry.kind is MatchKind.MATCHED:
            suggested = entry.suggested_name[:33]
            conf = f"{entry.confidence:.2f}"
        else:
            suggested = "(no catalog match)"
            conf = "-"
        print(
            f"{entry.index:<5} | {ms_to_hms(entry.start_ms):<8} | "
            f"{entry.current_name[:33]:<35} | {suggested:<35} | {conf:<5}"
        )

    print("-" * 100)


def review_suggestions(result: AlignmentResult) -> List[int]:
    """
    Displays the suggestions and asks the user which ones to reject.
    Returns the rejected chapter indices.
    """
    print_suggestions(result)
    print("\nReview the list above.")
    print("Enter the IDs of suggestions to REJECT.")
    print("Supports comma-separated numbers and ranges (e.g., '1, 2, 5-8').")
    print("Press ENTER to accept all.")

    user_input = input("> ").strip()

    if not user_input:
        logger.info("No suggestions rejected.")
        return []

    try:
        rejected = parse_id_list(user_input)
    except ValueError:
        logger.error("Invalid input. Please enter numbers or ranges (e.g. '1-5') only.")
        return review_suggestions(result)  # Recursive retry

    known = [entry.index for entry in result.aligned]
    rejected = [i for i in rejected if i in known]
    logger.info(f"Rejected {len(rejected)} suggestions based on user input.")
    return rejected

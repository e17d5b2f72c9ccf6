import logging
import sys


class ChapterSourceError(Exception):
    """A chapter list could not be read from a file, audio container or payload."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


def seconds_to_hms(seconds: int) -> str:
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    seconds = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def ms_to_hms(ms: int) -> str:
    # Floor to whole seconds
    return seconds_to_hms(int(ms) // 1000)


def parse_timestamp_to_seconds(ts_str: str) -> float:
    """Converts HH:MM:SS or MM:SS to seconds float."""
    if not ts_str:
        return 0.0
    parts = ts_str.strip().split(":")
    seconds = 0
    if len(parts) == 3:
        h, m, s = map(int, parts)
        seconds = h * 3600 + m * 60 + s
    elif len(parts) == 2:
        m, s = map(int, parts)
        seconds = m * 60 + s
    return float(seconds)


def setup_logging(level=logging.INFO):
    """Configures the root logger with a standard format."""
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def get_logger(name: str):
    return logging.getLogger(name)


def sanitize(s: str) -> str:
    # Allow alphanumeric, space, dash, underscore, dots, commas, parens
    allowed = set(" -_.,()")
    return "".join(c for c in s if c.isalnum() or c in allowed).strip()

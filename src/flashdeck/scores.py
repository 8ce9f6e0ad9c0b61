"""Session score history kept in a flashcard file's stats block."""
import re
from datetime import datetime

from flashdeck.models import FlashFile

SCORE_SEPARATOR = "    "
SCORE_TIME_FORMAT = "%Y/%m/%d %H:%M"

_FRACTION = re.compile(r"^\s*(\d+)/(\d+)\s*$")


def format_score(correct: int, total: int, timestamp: datetime) -> str:
    return f"{timestamp.strftime(SCORE_TIME_FORMAT)}{SCORE_SEPARATOR}{correct}/{total}"


def append_score(flash_file: FlashFile, correct: int, total: int, timestamp: datetime) -> str:
    """Append a new score line to the file's stats and return it."""
    line = format_score(correct, total, timestamp)
    flash_file.stats.append(line)
    return line


def _timestamp_key(line: str) -> str:
    return line.split(SCORE_SEPARATOR, 1)[0]


def previous_scores(flash_file: FlashFile) -> list[str]:
    """All score lines, newest first.

    Returns an empty list when there is at most one score, since a single
    line is the score that was just recorded.
    """
    if len(flash_file.stats) <= 1:
        return []
    # Timestamps are fixed-width and zero-padded, so string order is time order.
    return sorted(flash_file.stats, key=_timestamp_key, reverse=True)


def score_percentages(lines: list[str]) -> list[float]:
    """Convert newest-first score lines into percentages, oldest first.

    Lines without a ``<timestamp>    <correct>/<total>`` shape are skipped.
    """
    percentages = []
    for line in reversed(lines):
        parts = line.split(SCORE_SEPARATOR)
        if len(parts) != 2:
            continue
        match = _FRACTION.match(parts[1])
        if not match:
            continue
        correct, total = int(match.group(1)), int(match.group(2))
        if total == 0:
            continue
        percentages.append(correct / total * 100)
    return percentages


def format_trend(percentages: list[float], width: int = 20) -> list[str]:
    if len(percentages) < 2:
        return []
    lines = []
    for pct in percentages:
        filled = round(pct / 100 * width)
        lines.append(f"{'█' * filled}{'░' * (width - filled)} {pct:3.0f}%")
    return lines

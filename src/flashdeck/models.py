"""Data classes for flashcard files and review sessions."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

CORRECT = "Y"
WRONG = "N"
REVIEW_DATE_FORMAT = "%Y/%m/%d"


@dataclass
class Flashcard:
    front: str
    back: str
    reviewed: list[str] = field(default_factory=list)

    @property
    def last_outcome(self) -> Optional[str]:
        """Outcome suffix of the most recent review record, if any."""
        if not self.reviewed:
            return None
        last = self.reviewed[-1].rstrip()
        if last.endswith(CORRECT):
            return CORRECT
        if last.endswith(WRONG):
            return WRONG
        return None

    def record(self, outcome: str, day: date) -> str:
        line = f"{day.strftime(REVIEW_DATE_FORMAT)} {outcome}"
        self.reviewed.append(line)
        return line


@dataclass
class FlashFile:
    title: str = ""
    stats: list[str] = field(default_factory=list)
    cards: list[Flashcard] = field(default_factory=list)
    filename: str = ""


@dataclass
class SessionResult:
    correct: int = 0
    total: int = 0
    completed: bool = False
    score_line: Optional[str] = None

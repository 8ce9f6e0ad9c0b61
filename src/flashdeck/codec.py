"""Read and write the .flsh flashcard file format.

Layout::

    ###
    <title lines>
    ###
    &&&
    <score lines>
    &&&
    ***

    !FRONT

    <front text>

    !BACK

    <back text>

    !REVIEWED

    <review records>

    ***

The title and stats blocks are each taken from their first occurrence,
whichever comes first. Decoding is permissive: missing delimiters yield empty
or partial fields and an unterminated card is dropped, but nothing raises.
"""
import os
import tempfile
from enum import Enum
from pathlib import Path

from loguru import logger

from flashdeck.models import Flashcard, FlashFile

TITLE_MARK = "###"
STATS_MARK = "&&&"
CARD_MARK = "***"
FRONT_MARK = "!FRONT"
BACK_MARK = "!BACK"
REVIEWED_MARK = "!REVIEWED"

SECTION_MARKS = {FRONT_MARK: "front", BACK_MARK: "back", REVIEWED_MARK: "reviewed"}


class ParserState(Enum):
    OUTSIDE = "outside"
    TITLE = "title"
    STATS = "stats"
    IN_CARD = "in_card"


BLOCK_MARKS = {ParserState.TITLE: TITLE_MARK, ParserState.STATS: STATS_MARK}

# (state, delimiter line) -> next state. Any pair not listed is content.
# A title or stats block missing its closing line ends at the next other
# delimiter instead of running to the end of the file.
TRANSITIONS = {
    (ParserState.OUTSIDE, TITLE_MARK): ParserState.TITLE,
    (ParserState.OUTSIDE, STATS_MARK): ParserState.STATS,
    (ParserState.OUTSIDE, CARD_MARK): ParserState.IN_CARD,
    (ParserState.TITLE, TITLE_MARK): ParserState.OUTSIDE,
    (ParserState.TITLE, STATS_MARK): ParserState.STATS,
    (ParserState.TITLE, CARD_MARK): ParserState.IN_CARD,
    (ParserState.STATS, STATS_MARK): ParserState.OUTSIDE,
    (ParserState.STATS, TITLE_MARK): ParserState.TITLE,
    (ParserState.STATS, CARD_MARK): ParserState.IN_CARD,
    (ParserState.IN_CARD, CARD_MARK): ParserState.OUTSIDE,
}


class _Decoder:
    def __init__(self):
        self.state = ParserState.OUTSIDE
        self.title: list[str] = []
        self.stats: list[str] = []
        self.cards: list[Flashcard] = []
        self._finished: set[ParserState] = set()
        self._sections: dict[str, list[str]] = {}
        self._section = None

    def feed(self, line: str) -> None:
        next_state = TRANSITIONS.get((self.state, line))
        if next_state is None:
            self._content(line)
            return

        # Only the first title block and the first stats block count.
        if next_state in self._finished:
            next_state = ParserState.OUTSIDE
        if self.state in BLOCK_MARKS:
            if line != BLOCK_MARKS[self.state]:
                logger.debug("Unclosed {} block ended by {!r}", self.state.value, line)
            self._finished.add(self.state)
        elif self.state is ParserState.IN_CARD:
            self._close_card()
        if next_state is ParserState.IN_CARD:
            self._open_card()
        self.state = next_state

    def _content(self, line: str) -> None:
        if self.state is ParserState.TITLE:
            self.title.append(line)
        elif self.state is ParserState.STATS:
            if line:
                self.stats.append(line)
        elif self.state is ParserState.IN_CARD:
            self._card_line(line)

    def _open_card(self) -> None:
        self._sections = {"front": [], "back": [], "reviewed": []}
        self._section = None

    def _card_line(self, line: str) -> None:
        if line in SECTION_MARKS:
            self._section = SECTION_MARKS[line]
            if self._section == "reviewed":
                self._sections["reviewed"] = []
        elif line and self._section is not None:
            self._sections[self._section].append(line)

    def has_pending_content(self) -> bool:
        return any(self._sections.values())

    def _close_card(self) -> None:
        front = "\n".join(self._sections["front"])
        back = "\n".join(self._sections["back"])
        if front or back:
            self.cards.append(Flashcard(front, back, list(self._sections["reviewed"])))
        else:
            logger.debug("Skipping card with empty front and back")


def decode(text: str, filename: str = "") -> FlashFile:
    decoder = _Decoder()
    for line in text.splitlines():
        decoder.feed(line)
    if decoder.state is ParserState.IN_CARD and decoder.has_pending_content():
        logger.warning("Dropping unterminated card at end of {}", filename or "input")
    return FlashFile(
        title="\n".join(decoder.title),
        stats=decoder.stats,
        cards=decoder.cards,
        filename=filename,
    )


def encode(flash_file: FlashFile) -> str:
    parts = [TITLE_MARK, "\n", flash_file.title, "\n", TITLE_MARK, "\n"]

    parts.append(STATS_MARK + "\n")
    stats = "\n".join(flash_file.stats)
    parts.append(stats)
    if stats and not stats.endswith("\n"):
        parts.append("\n")
    parts.append(STATS_MARK + "\n")

    parts.append(CARD_MARK + "\n")
    for i, card in enumerate(flash_file.cards):
        parts.append(f"\n{FRONT_MARK}\n\n")
        parts.append(card.front.strip())
        parts.append(f"\n\n{BACK_MARK}\n\n")
        parts.append(card.back.strip())
        parts.append(f"\n\n{REVIEWED_MARK}\n\n")
        parts.append("\n".join(card.reviewed).strip())
        parts.append(f"\n\n{CARD_MARK}\n")
        if i < len(flash_file.cards) - 1:
            parts.append(CARD_MARK + "\n")
    return "".join(parts)


def load_flash_file(path) -> FlashFile:
    """Read and decode a flashcard file. OSError propagates to the caller."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    flash_file = decode(text, filename=str(path))
    logger.debug("Loaded {} ({} cards, {} scores)", path, len(flash_file.cards), len(flash_file.stats))
    return flash_file


def save_flash_file(flash_file: FlashFile) -> None:
    """Overwrite the backing file, writing to a temp file first and renaming."""
    path = Path(flash_file.filename)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(encode(flash_file))
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved {} ({} cards)", path, len(flash_file.cards))


def new_flash_file(path, title: str | None = None) -> FlashFile:
    path = Path(path)
    return FlashFile(title=path.stem if title is None else title, filename=str(path))

"""Review session state machine.

Each card moves SHOW_FRONT -> SHOW_BACK -> RECORDED, or to ABORTED when the
user quits. One routine drives both the full review and the wrong-card
review; the caller decides whether the session score goes into the file's
stats and when to save.
"""
from datetime import date, datetime
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from flashdeck.config import Settings, get_settings
from flashdeck.models import CORRECT, WRONG, Flashcard, FlashFile, SessionResult
from flashdeck.presenter import ADVANCE_KEYS, ENTER, Presenter
from flashdeck.review import select_wrong_cards
from flashdeck.scores import append_score

Clock = Callable[[], datetime]


class CardState(Enum):
    SHOW_FRONT = "show_front"
    SHOW_BACK = "show_back"
    RECORDED = "recorded"
    ABORTED = "aborted"


def _show_front(card: Flashcard, presenter: Presenter, settings: Settings) -> CardState:
    presenter.clear()
    presenter.show("Front:", "title")
    presenter.show(card.front)
    while True:
        key = presenter.read_key(f"Press ENTER to see back, {settings.quit_key} to quit")
        if key == settings.quit_key:
            return CardState.ABORTED
        if key in ADVANCE_KEYS:
            return CardState.SHOW_BACK


def _show_back(card: Flashcard, presenter: Presenter, settings: Settings, today: date) -> CardState:
    presenter.clear()
    presenter.show("Front:", "title")
    presenter.show(card.front)
    presenter.show("")
    presenter.show("Back:", "title")
    presenter.show(card.back)
    while True:
        key = presenter.read_key(f"Did you get it right? (y/n) ({settings.quit_key} to quit)")
        if key == settings.quit_key:
            return CardState.ABORTED
        if key and key in settings.yes_keys:
            card.record(CORRECT, today)
            return CardState.RECORDED
        if key and key in settings.no_keys:
            card.record(WRONG, today)
            return CardState.RECORDED


def review_card(card: Flashcard, presenter: Presenter, settings: Settings, today: date) -> CardState:
    """Run one card to RECORDED or ABORTED."""
    state = CardState.SHOW_FRONT
    while True:
        if state is CardState.SHOW_FRONT:
            state = _show_front(card, presenter, settings)
        elif state is CardState.SHOW_BACK:
            state = _show_back(card, presenter, settings, today)
        else:
            return state


def run_session(
    flash_file: FlashFile,
    cards: list[Flashcard],
    presenter: Presenter,
    *,
    record_score: bool,
    settings: Optional[Settings] = None,
    clock: Clock = datetime.now,
) -> SessionResult:
    """Review ``cards`` in order and aggregate the outcome.

    Cards recorded before a quit keep their new review records. The score is
    appended to ``flash_file.stats`` only when every card was recorded and
    ``record_score`` is set.
    """
    settings = settings or get_settings()
    result = SessionResult()
    for card in cards:
        state = review_card(card, presenter, settings, clock().date())
        if state is CardState.ABORTED:
            logger.info("Session aborted after {} of {} cards", result.total, len(cards))
            return result
        result.total += 1
        if card.last_outcome == CORRECT:
            result.correct += 1

    result.completed = True
    if record_score and result.total > 0:
        result.score_line = append_score(flash_file, result.correct, result.total, clock())
        logger.info("Recorded score {}", result.score_line)
    return result


def show_title_page(flash_file: FlashFile, presenter: Presenter, settings: Settings) -> bool:
    presenter.clear()
    presenter.show(flash_file.title, "title")
    presenter.show("")
    while True:
        key = presenter.read_key(f"Press ENTER to continue, {settings.quit_key} to quit")
        if key == settings.quit_key:
            return False
        if key == ENTER:
            return True


def full_review(
    flash_file: FlashFile,
    presenter: Presenter,
    settings: Optional[Settings] = None,
    clock: Clock = datetime.now,
) -> Optional[SessionResult]:
    """Title page, then every card in file order. None if quit at the title."""
    settings = settings or get_settings()
    if not show_title_page(flash_file, presenter, settings):
        return None
    return run_session(
        flash_file, flash_file.cards, presenter,
        record_score=True, settings=settings, clock=clock,
    )


def review_wrong_cards(
    flash_file: FlashFile,
    presenter: Presenter,
    settings: Optional[Settings] = None,
    clock: Clock = datetime.now,
) -> Optional[SessionResult]:
    """Review only cards missed last time. None when there is nothing to review.

    The file's stats are never changed by this session.
    """
    cards = select_wrong_cards(flash_file.cards)
    if not cards:
        return None
    return run_session(
        flash_file, cards, presenter,
        record_score=False, settings=settings, clock=clock,
    )

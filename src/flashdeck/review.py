"""Selection of cards that were answered wrong last time."""
from flashdeck.models import WRONG, Flashcard


def select_wrong_cards(cards: list[Flashcard]) -> list[Flashcard]:
    """Cards whose most recent review record is a miss, in file order."""
    return [card for card in cards if card.last_outcome == WRONG]

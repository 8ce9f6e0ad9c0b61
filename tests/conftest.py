from datetime import datetime

import pytest

from flashdeck.config import Settings
from flashdeck.models import Flashcard, FlashFile

SAMPLE = """###
Spanish Basics

Week 1
###
&&&
2024/01/01 10:00    1/2

2024/03/01 09:00    2/2
&&&
***

!FRONT

hola

!BACK

hello

!REVIEWED

2024/01/01 Y
2024/03/01 N

***
***

!FRONT

adios
see you

!BACK

goodbye

!REVIEWED

***
"""


class FakePresenter:
    """Presenter that replays scripted keys and text entries."""

    def __init__(self, keys=(), texts=()):
        self.keys = list(keys)
        self.texts = list(texts)
        self.shown = []
        self.prompts = []

    def clear(self):
        self.shown.append(("<clear>", None))

    def show(self, text, style=None):
        self.shown.append((text, style))

    def read_key(self, prompt):
        self.prompts.append(prompt)
        if not self.keys:
            raise AssertionError(f"no scripted key left for prompt: {prompt}")
        return self.keys.pop(0)

    def read_text(self, prompt):
        self.prompts.append(prompt)
        return self.texts.pop(0) if self.texts else ""

    def size(self):
        return 80, 24

    def shown_text(self):
        return "\n".join(text for text, _ in self.shown)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def clock():
    return lambda: datetime(2024, 5, 6, 7, 8)


@pytest.fixture
def sample_file(tmp_path):
    """Write the sample deck to a temporary .flsh file and return its path."""
    path = tmp_path / "spanish.flsh"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def three_card_file():
    return FlashFile(
        title="Capitals",
        stats=["2024/01/01 10:00    1/3"],
        cards=[
            Flashcard("France?", "Paris"),
            Flashcard("Spain?", "Madrid"),
            Flashcard("Italy?", "Rome"),
        ],
        filename="capitals.flsh",
    )

"""Terminal flashcard study tool backed by plain-text .flsh files."""
__version__ = "0.1.0"

import pytest

from conftest import SAMPLE
from flashdeck.codec import (
    ParserState, TRANSITIONS, decode, encode, load_flash_file, new_flash_file, save_flash_file,
)
from flashdeck.models import Flashcard, FlashFile


def test_decode_sample():
    ff = decode(SAMPLE, filename="spanish.flsh")
    assert ff.title == "Spanish Basics\n\nWeek 1"
    assert ff.filename == "spanish.flsh"
    assert len(ff.cards) == 2
    assert ff.cards[0].front == "hola"
    assert ff.cards[0].back == "hello"
    assert ff.cards[0].reviewed == ["2024/01/01 Y", "2024/03/01 N"]
    assert ff.cards[1].front == "adios\nsee you"
    assert ff.cards[1].back == "goodbye"
    assert ff.cards[1].reviewed == []


def test_decode_drops_blank_stat_lines():
    ff = decode(SAMPLE)
    assert ff.stats == ["2024/01/01 10:00    1/2", "2024/03/01 09:00    2/2"]


def test_encode_exact_layout():
    ff = FlashFile(
        title="T",
        stats=["2024/01/01 10:00    1/2"],
        cards=[Flashcard("Q", "A", ["2024/01/01 Y"])],
    )
    assert encode(ff) == (
        "###\nT\n###\n"
        "&&&\n2024/01/01 10:00    1/2\n&&&\n"
        "***\n\n!FRONT\n\nQ\n\n!BACK\n\nA\n\n!REVIEWED\n\n2024/01/01 Y\n\n***\n"
    )


def test_encode_separates_cards_with_extra_marker():
    ff = FlashFile(title="T", cards=[Flashcard("Q1", "A1"), Flashcard("Q2", "A2")])
    text = encode(ff)
    assert "\n***\n***\n\n!FRONT\n\nQ2" in text
    assert text.endswith("!REVIEWED\n\n\n\n***\n")
    assert text.count("***") == 4


def test_encode_empty_stats():
    text = encode(FlashFile(title="T"))
    assert text == "###\nT\n###\n&&&\n&&&\n***\n"


def test_round_trip():
    ff = FlashFile(
        title="Biology\n\nChapter 2",
        stats=["2024/01/01 10:00    1/2", "2024/01/02 11:30    2/2"],
        cards=[
            Flashcard("What is ATP?", "Energy currency\nof the cell", ["2024/01/01 N", "2024/01/02 Y"]),
            Flashcard("Mitochondria", "Powerhouse", []),
        ],
    )
    decoded = decode(encode(ff))
    assert decoded.title == ff.title
    assert decoded.stats == ff.stats
    assert [(c.front, c.back, c.reviewed) for c in decoded.cards] == [
        (c.front, c.back, c.reviewed) for c in ff.cards
    ]


def test_round_trip_trims_whitespace():
    ff = FlashFile(title="T", cards=[Flashcard("  front  \n", "\nback\n\n")])
    card = decode(encode(ff)).cards[0]
    assert card.front == "front"
    assert card.back == "back"


def test_encode_is_idempotent():
    once = encode(decode(SAMPLE))
    twice = encode(decode(once))
    assert once == twice


def test_odd_card_markers_drop_unterminated_card():
    text = SAMPLE + "***\n\n!FRONT\n\nunfinished\n\n!BACK\n\nnever closed\n"
    ff = decode(text)
    assert [c.front for c in ff.cards] == ["hola", "adios\nsee you"]


def test_missing_title_close_is_permissive():
    ff = decode("###\nOnly a title\nand more")
    assert ff.title == "Only a title\nand more"
    assert ff.stats == []
    assert ff.cards == []


def test_empty_input():
    ff = decode("")
    assert ff.title == ""
    assert ff.stats == []
    assert ff.cards == []


def test_card_with_empty_front_and_back_is_skipped():
    text = "###\nT\n###\n&&&\n&&&\n***\n\n!FRONT\n\n!BACK\n\n!REVIEWED\n\n***\n"
    assert decode(text).cards == []


def test_second_reviewed_section_resets_records():
    text = (
        "###\nT\n###\n&&&\n&&&\n***\n!FRONT\nQ\n!BACK\nA\n"
        "!REVIEWED\n2024/01/01 Y\n!REVIEWED\n2024/02/02 N\n***\n"
    )
    assert decode(text).cards[0].reviewed == ["2024/02/02 N"]


def test_lines_before_first_section_are_ignored():
    text = "###\nT\n###\n&&&\n&&&\n***\nstray\n!FRONT\nQ\n!BACK\nA\n***\n"
    card = decode(text).cards[0]
    assert card.front == "Q"
    assert card.back == "A"


def test_crlf_line_endings():
    ff = decode(SAMPLE.replace("\n", "\r\n"))
    assert ff.title == "Spanish Basics\n\nWeek 1"
    assert len(ff.cards) == 2


def test_cards_without_stats_block():
    ff = decode("###\nT\n###\n***\n!FRONT\nQ\n!BACK\nA\n***\n")
    assert ff.stats == []
    assert len(ff.cards) == 1


def test_stats_block_before_title_block():
    ff = decode("&&&\n2024/01/01 10:00    1/2\n&&&\n###\nMy Deck\n###\n***\n!FRONT\nQ\n!BACK\nA\n***\n")
    assert ff.title == "My Deck"
    assert ff.stats == ["2024/01/01 10:00    1/2"]
    assert [(c.front, c.back) for c in ff.cards] == [("Q", "A")]


def test_unclosed_title_stops_at_stats_block():
    ff = decode("###\nMy Deck\n&&&\n2024/01/01 10:00    1/2\n&&&\n***\n!FRONT\nQ\n!BACK\nA\n***\n")
    assert ff.title == "My Deck"
    assert ff.stats == ["2024/01/01 10:00    1/2"]
    assert [(c.front, c.back) for c in ff.cards] == [("Q", "A")]


def test_unclosed_stats_stops_at_first_card():
    ff = decode("###\nMy Deck\n###\n&&&\n2024/01/01 10:00    1/2\n***\n!FRONT\nQ\n!BACK\nA\n***\n")
    assert ff.stats == ["2024/01/01 10:00    1/2"]
    assert len(ff.cards) == 1


def test_only_first_title_block_counts():
    ff = decode("###\nFirst\n###\n###\nSecond\n###\n&&&\n&&&\n")
    assert ff.title == "First"


def test_transition_table():
    assert TRANSITIONS[(ParserState.OUTSIDE, "***")] is ParserState.IN_CARD
    assert TRANSITIONS[(ParserState.IN_CARD, "***")] is ParserState.OUTSIDE
    assert TRANSITIONS[(ParserState.OUTSIDE, "&&&")] is ParserState.STATS
    assert TRANSITIONS[(ParserState.TITLE, "&&&")] is ParserState.STATS
    assert (ParserState.IN_CARD, "###") not in TRANSITIONS


def test_save_and_load(tmp_path):
    path = tmp_path / "deck.flsh"
    ff = FlashFile(title="Deck", cards=[Flashcard("Q", "A")], filename=str(path))
    save_flash_file(ff)
    loaded = load_flash_file(path)
    assert loaded.title == "Deck"
    assert loaded.cards[0].front == "Q"
    assert loaded.filename == str(path)
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["deck.flsh"]


def test_save_overwrites_whole_file(sample_file):
    ff = load_flash_file(sample_file)
    ff.cards = ff.cards[:1]
    save_flash_file(ff)
    assert "adios" not in sample_file.read_text()


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_flash_file(tmp_path / "missing.flsh")


def test_new_flash_file_defaults_title_to_stem(tmp_path):
    ff = new_flash_file(tmp_path / "german.flsh")
    assert ff.title == "german"
    assert ff.cards == []
    assert ff.stats == []


def test_new_flash_file_then_add_card_round_trip(tmp_path):
    ff = new_flash_file(tmp_path / "german.flsh")
    save_flash_file(ff)
    loaded = load_flash_file(ff.filename)
    assert loaded.cards == []
    loaded.cards.append(Flashcard("Hund", "dog"))
    save_flash_file(loaded)
    assert load_flash_file(ff.filename).cards[0].back == "dog"

import pytest

from app.scoring.darts import QUICK_ENTRY_VALUES, Dart, is_valid_dart_value, parse_dart_input


def test_dart_scores() -> None:
    assert Dart(20, 3).score == 60
    assert Dart(25, 2).score == 50
    assert Dart(25, 1).score == 25
    assert Dart(0, 0).score == 0


@pytest.mark.parametrize(
    "value,multiplier",
    [(25, 3), (21, 1), (0, 1), (5, 0), (20, 4)],
)
def test_invalid_segments_rejected(value: int, multiplier: int) -> None:
    with pytest.raises(ValueError):
        Dart(value, multiplier)


def test_quick_entry_values_cover_the_board() -> None:
    assert QUICK_ENTRY_VALUES[0] == 0
    assert QUICK_ENTRY_VALUES[-1] == 60
    assert 25 in QUICK_ENTRY_VALUES
    assert 50 in QUICK_ENTRY_VALUES
    # 23 is not a single, double or triple of any bed.
    assert 23 not in QUICK_ENTRY_VALUES
    assert 59 not in QUICK_ENTRY_VALUES


def test_dart_value_range() -> None:
    assert is_valid_dart_value(0)
    assert is_valid_dart_value(180)
    assert not is_valid_dart_value(-1)
    assert not is_valid_dart_value(181)
    assert not is_valid_dart_value(True)
    assert not is_valid_dart_value("20")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("20", 20),
        (" 57 ", 57),
        ("0", 0),
        ("180", 180),
        # Unreachable on a board but accepted as typed.
        ("163", 163),
        ("181", None),
        ("-5", None),
        ("+5", None),
        ("", None),
        ("   ", None),
        ("abc", None),
        ("2.5", None),
        (None, None),
    ],
)
def test_parse_dart_input(text, expected) -> None:
    assert parse_dart_input(text) == expected

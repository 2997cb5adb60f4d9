from __future__ import annotations

from dataclasses import dataclass

MIN_DART_VALUE = 0
MAX_DART_VALUE = 180

BULL = 25


@dataclass(frozen=True)
class Dart:
    """
    A quick-entry board segment.

    - value: 1-20 for standard beds, 25 for bull, 0 for a miss
    - multiplier: 0 (miss), 1 (single), 2 (double), 3 (triple)
    """

    value: int
    multiplier: int

    def __post_init__(self) -> None:
        if self.multiplier not in (0, 1, 2, 3):
            raise ValueError("multiplier must be 0, 1, 2, or 3")

        if self.multiplier == 0:
            if self.value != 0:
                raise ValueError("miss must have value=0")
            return

        if self.value not in (*range(1, 21), BULL):
            raise ValueError("value must be 1-20, 25 (bull), or 0 (miss)")

        if self.value == BULL and self.multiplier == 3:
            raise ValueError("bull cannot be a triple")

    @property
    def score(self) -> int:
        return self.value * self.multiplier


def _quick_entry_values() -> tuple[int, ...]:
    values = {0, BULL, BULL * 2}
    for v in range(1, 21):
        values.update((v, v * 2, v * 3))
    return tuple(sorted(values))


QUICK_ENTRY_VALUES: tuple[int, ...] = _quick_entry_values()


def is_valid_dart_value(value: object) -> bool:
    # bool is an int subclass; True is not a dart.
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_DART_VALUE <= value <= MAX_DART_VALUE


def parse_dart_input(text: str | None) -> int | None:
    """
    Parse a free-text dart entry.

    Returns None when the text is empty, not made of digits, or out of range,
    so the caller can leave the input in place for correction.
    """
    if text is None:
        return None
    stripped = text.strip()
    if not stripped or not (stripped.isascii() and stripped.isdigit()):
        return None
    value = int(stripped)
    if not is_valid_dart_value(value):
        return None
    return value

"""Optional values, errors and validated integers."""

from __future__ import annotations

from dataclasses import dataclass

_INVALID_DIGIT = "invalid digit found in string"


def _parse_int(text: str, bits: int) -> int:
    """Parse a signed integer of the given width with strict decimal rules."""
    if not text:
        raise ValueError("cannot parse integer from empty string")
    negative = text[0] == "-"
    digits = text[1:] if text[0] in "+-" else text
    if not digits:
        raise ValueError(_INVALID_DIGIT)
    limit = 2 ** (bits - 1) if negative else 2 ** (bits - 1) - 1
    value = 0
    for char in digits:
        if not "0" <= char <= "9":
            raise ValueError(_INVALID_DIGIT)
        value = value * 10 + ord(char) - ord("0")
        if value > limit:
            raise ValueError(
                "number too small to fit in target type"
                if negative
                else "number too large to fit in target type"
            )
    return -value if negative else value


def maybe_icecream(time_of_day: int) -> int | None:
    """Pieces of ice cream left at an hour of the day; None past 23."""
    if time_of_day < 22:
        return 5
    if time_of_day < 24:
        return 0
    return None


def generate_nametag_text(name: str) -> str:
    """Text for a name tag; an empty name is refused."""
    if not name:
        raise ValueError("`name` was empty; it must be nonempty.")
    return f"Hi! My name is {name}"


def total_cost(item_quantity: str) -> int:
    """Cost of items at 5 tokens each plus a processing fee of 1."""
    processing_fee = 1
    cost_per_item = 5
    quantity = _parse_int(item_quantity, 32)
    return quantity * cost_per_item + processing_fee


class CreationError(ValueError):
    """A value that is not a positive, nonzero integer."""

    NEGATIVE = "negative"
    ZERO = "zero"

    def __init__(self, kind: str) -> None:
        if kind not in (self.NEGATIVE, self.ZERO):
            raise ValueError(f"unknown creation error: {kind!r}")
        super().__init__(f"number is {kind}")
        self.kind = kind


@dataclass(frozen=True)
class PositiveNonzeroInteger:
    """An integer known to be greater than zero."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise CreationError(CreationError.NEGATIVE)
        if self.value == 0:
            raise CreationError(CreationError.ZERO)


class ParsePosNonzeroError(ValueError):
    """Parsing text into a PositiveNonzeroInteger failed."""

    CREATION = "creation"
    PARSE_INT = "parse_int"

    def __init__(self, cause: ValueError) -> None:
        super().__init__(str(cause))
        self.cause = cause

    @property
    def kind(self) -> str:
        if isinstance(self.cause, CreationError):
            return self.CREATION
        return self.PARSE_INT


def parse_pos_nonzero(text: str) -> PositiveNonzeroInteger:
    """Parse text into a PositiveNonzeroInteger."""
    try:
        value = _parse_int(text, 64)
    except ValueError as exc:
        raise ParsePosNonzeroError(exc) from exc
    try:
        return PositiveNonzeroInteger(value)
    except CreationError as exc:
        raise ParsePosNonzeroError(exc) from exc
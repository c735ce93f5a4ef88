import pytest

from rustdrill.lessons.errors import (
    CreationError,
    ParsePosNonzeroError,
    PositiveNonzeroInteger,
    generate_nametag_text,
    maybe_icecream,
    parse_pos_nonzero,
    total_cost,
)


@pytest.mark.parametrize(
    ("hour", "expected"), [(9, 5), (10, 5), (23, 0), (22, 0), (25, None)]
)
def test_check_icecream(hour, expected):
    assert maybe_icecream(hour) == expected


def test_raw_value():
    assert maybe_icecream(12) == 5


def test_nametag_for_nonempty_name():
    assert generate_nametag_text("Beyoncé") == "Hi! My name is Beyoncé"


def test_nametag_explains_failure():
    with pytest.raises(ValueError) as info:
        generate_nametag_text("")
    assert str(info.value) == "`name` was empty; it must be nonempty."


def test_total_cost_valid_number():
    assert total_cost("34") == 171


def test_total_cost_invalid_number():
    with pytest.raises(ValueError) as info:
        total_cost("beep boop")
    assert str(info.value) == "invalid digit found in string"


def test_total_cost_empty_input():
    with pytest.raises(ValueError) as info:
        total_cost("")
    assert str(info.value) == "cannot parse integer from empty string"


def test_total_cost_overflow():
    with pytest.raises(ValueError) as info:
        total_cost("2147483648")
    assert str(info.value) == "number too large to fit in target type"


def test_total_cost_signed_input():
    assert total_cost("-2") == -9


def test_creation_positive():
    assert PositiveNonzeroInteger(10).value == 10


def test_creation_negative():
    with pytest.raises(CreationError) as info:
        PositiveNonzeroInteger(-10)
    assert info.value.kind == CreationError.NEGATIVE
    assert str(info.value) == "number is negative"


def test_creation_zero():
    with pytest.raises(CreationError) as info:
        PositiveNonzeroInteger(0)
    assert info.value.kind == CreationError.ZERO
    assert str(info.value) == "number is zero"


def test_parse_error():
    with pytest.raises(ParsePosNonzeroError) as info:
        parse_pos_nonzero("not a number")
    assert info.value.kind == ParsePosNonzeroError.PARSE_INT
    assert not isinstance(info.value.cause, CreationError)


def test_parse_negative():
    with pytest.raises(ParsePosNonzeroError) as info:
        parse_pos_nonzero("-555")
    assert info.value.kind == ParsePosNonzeroError.CREATION
    assert info.value.cause.kind == CreationError.NEGATIVE


def test_parse_zero():
    with pytest.raises(ParsePosNonzeroError) as info:
        parse_pos_nonzero("0")
    assert info.value.kind == ParsePosNonzeroError.CREATION
    assert info.value.cause.kind == CreationError.ZERO


def test_parse_positive():
    assert parse_pos_nonzero("42") == PositiveNonzeroInteger(42)


def test_parse_error_keeps_cause_chain():
    with pytest.raises(ParsePosNonzeroError) as info:
        parse_pos_nonzero("")
    assert info.value.__cause__ is info.value.cause
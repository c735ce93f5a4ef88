import pytest

from rustdrill.lessons.basics import (
    animal_habitat,
    bigger,
    calculate_price_of_apples,
    compose_me,
    foo_if_fizz,
    is_a_color_word,
    is_even,
    replace_me,
    sale_price,
    square,
    trim_me,
)


@pytest.mark.parametrize("count, price", [(35, 70), (40, 80), (41, 41), (65, 65)])
def test_price_of_apples(count, price):
    assert calculate_price_of_apples(count) == price


def test_sale_price():
    assert sale_price(51) == 48
    assert sale_price(50) == 40


def test_is_even():
    assert is_even(4)
    assert not is_even(5)


def test_square():
    assert square(3) == 9


@pytest.mark.parametrize("a, b, expected", [(10, 8, 10), (32, 42, 42), (42, 42, 42)])
def test_bigger(a, b, expected):
    assert bigger(a, b) == expected


@pytest.mark.parametrize(
    "word, expected",
    [("fizz", "foo"), ("fuzz", "bar"), ("literally anything", "baz")],
)
def test_foo_if_fizz(word, expected):
    assert foo_if_fizz(word) == expected


@pytest.mark.parametrize(
    "animal, habitat",
    [("gopher", "Burrow"), ("snake", "Desert"), ("crab", "Beach"), ("dinosaur", "Unknown")],
)
def test_animal_habitat(animal, habitat):
    assert animal_habitat(animal) == habitat


def test_is_a_color_word():
    assert is_a_color_word("green")
    assert is_a_color_word("red")
    assert not is_a_color_word("purple")


def test_trim_a_string():
    assert trim_me("Hello!     ") == "Hello!"
    assert trim_me("  What's up!") == "What's up!"
    assert trim_me("   Hola!  ") == "Hola!"


def test_compose_a_string():
    assert compose_me("Hello") == "Hello world!"
    assert compose_me("Goodbye") == "Goodbye world!"


def test_replace_a_string():
    assert replace_me("I think cars are cool") == "I think balloons are cool"
    assert replace_me("I love to look at cars") == "I love to look at balloons"
from dataclasses import replace

import pytest

from rustdrill.lessons.objects import (
    ChangeColor,
    Cons,
    Echo,
    Licensed,
    Move,
    Order,
    OtherSoftware,
    Package,
    Point,
    Quit,
    ReportCard,
    SomeSoftware,
    State,
    Wrapper,
    append_bar,
    compare_license_types,
    create_empty_list,
    create_non_empty_list,
    create_order_template,
)


def test_generate_numeric_report_card():
    card = ReportCard(grade=2.1, student_name="Tom Wriggle", student_age=12)
    assert card.render() == "Tom Wriggle (12) - achieved a grade of 2.1"


def test_generate_alphabetic_report_card():
    card = ReportCard(grade="A+", student_name="Gary Plotter", student_age=11)
    assert card.render() == "Gary Plotter (11) - achieved a grade of A+"


def test_your_order():
    template = create_order_template()
    order = replace(template, name="Hacker in Rust", count=1)
    assert order.name == "Hacker in Rust"
    assert order.year == template.year
    assert order.made_by_phone == template.made_by_phone
    assert order.made_by_mobile == template.made_by_mobile
    assert order.made_by_email == template.made_by_email
    assert order.item_number == template.item_number
    assert order.count == 1


def test_order_template_values():
    assert create_order_template() == Order("Bob", 2019, False, False, True, 123, 0)


def test_fail_creating_weightless_package():
    with pytest.raises(ValueError):
        Package("Spain", "Austria", 5)


def test_create_international_package():
    assert Package("Spain", "Russia", 1200).is_international() is True


def test_create_local_package():
    assert Package("Canada", "Canada", 1200).is_international() is False


def test_calculate_transport_fees():
    package = Package("Spain", "Spain", 1500)
    assert package.get_fees(3) == 4500
    assert package.get_fees(6) == 9000


def test_match_message_call():
    state = State(
        color=(0, 0, 0), position=Point(0, 0), message="hello world", should_quit=False
    )
    state.process(ChangeColor(255, 0, 255))
    state.process(Echo("Hello world!"))
    state.process(Move(Point(10, 15)))
    state.process(Quit())
    assert state.color == (255, 0, 255)
    assert state.position.x == 10
    assert state.position.y == 15
    assert state.should_quit is True
    assert state.message == "Hello world!"


def test_process_rejects_unknown_message():
    with pytest.raises(TypeError):
        State().process("jump")


def test_store_u32_in_wrapper():
    assert Wrapper(42).value == 42


def test_store_str_in_wrapper():
    assert Wrapper("Foo").value == "Foo"


def test_is_foo_bar():
    assert append_bar("Foo") == "FooBar"


def test_is_bar_bar():
    assert append_bar(append_bar("")) == "BarBar"


def test_is_vec_pop_eq_bar():
    foo = append_bar(["Foo"])
    assert foo.pop() == "Bar"
    assert foo.pop() == "Foo"


def test_append_bar_rejects_other_types():
    with pytest.raises(TypeError):
        append_bar(3)


def test_is_licensing_info_the_same():
    some = SomeSoftware(version_number=1)
    other = OtherSoftware(version_number="v2.0.0")
    assert some.licensing_info() == "Some information"
    assert other.licensing_info() == "Some information"


def test_compare_license_information():
    assert compare_license_types(SomeSoftware(), OtherSoftware()) is True


def test_compare_license_information_backwards():
    assert compare_license_types(OtherSoftware(), SomeSoftware()) is True


def test_compare_license_differs_when_overridden():
    class Custom(Licensed):
        def licensing_info(self):
            return "other"

    assert compare_license_types(SomeSoftware(), Custom()) is False


def test_create_empty_list():
    assert create_empty_list() is None


def test_create_non_empty_list():
    assert create_empty_list() != create_non_empty_list()


def test_cons_iterates_values():
    assert list(Cons(1, Cons(2, Cons(3)))) == [1, 2, 3]
    assert list(create_non_empty_list()) == [1, 2]
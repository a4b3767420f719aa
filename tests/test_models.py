import re

import pytest

from cafe.models import (
    ANIMALS,
    MenuItem,
    Order,
    UserIdentity,
    animal_emoji,
    animal_label,
    generate_order_id,
    parse_menu_rows,
    parse_order_rows,
    parse_price,
)


def test_menu_rows_are_parsed_and_filtered():
    rows = [
        ["Cafe Latte", 450, True, "Soft Drinks", "Mika"],
        ["Pudding", "300", "TRUE", "Dessert"],
        ["Craft Beer", 700, "false", "Alcohol", ""],
        ["Onigiri", 200, "3"],
        ["", 100, True],
        ["Free Water", 0, True],
        "not a row",
    ]

    items = parse_menu_rows(rows)

    assert [item.name for item in items] == ["Cafe Latte", "Pudding", "Craft Beer", "Onigiri"]
    assert items[0].creator == "Mika"
    assert items[1].price == 300
    assert items[1].in_stock is True
    assert items[2].in_stock is False
    assert items[3].stock == 3
    assert items[3].in_stock is True
    assert items[3].section == "Other"


def test_menu_item_with_zero_count_is_out_of_stock():
    assert MenuItem(name="Cake", price=500, stock=0).in_stock is False


def test_menu_item_row_round_trip():
    item = MenuItem(name="Cafe Latte", price=450, stock=True, category="Soft Drinks")

    assert MenuItem.from_row(item.to_row()) == item


def test_order_rows_default_completed_to_false():
    rows = [
        ["order_1", "2024-06-10T09:30:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Latte", 450],
        ["order_2", "2024-06-10T09:31:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Cake", "500", "true"],
        ["order_3", "2024-06-10T09:32:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Cake", 500, True],
        ["", "2024-06-10T09:33:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Cake", 500, False],
    ]

    orders = parse_order_rows(rows)

    assert [order.order_id for order in orders] == ["order_1", "order_2", "order_3"]
    assert [order.completed for order in orders] == [False, True, True]
    assert orders[1].price == 500


def test_order_payload_uses_wire_names(make_order):
    order = make_order(order_id="order_9", completed=True)

    payload = order.to_payload()

    assert payload["orderId"] == "order_9"
    assert payload["userId"] == "Mika_Cat"
    assert payload["completed"] is True
    assert Order.from_row(order.to_row()) == order


def test_generated_order_ids_are_unique_and_well_formed():
    first, second = generate_order_id(), generate_order_id()

    assert first != second
    assert re.fullmatch(r"order_\d{13}_[0-9a-z]{7}", first)


def test_identity_user_id_joins_nickname_and_animal():
    identity = UserIdentity.create("  Mika ", "🐱 Cat")

    assert identity.nickname == "Mika"
    assert identity.user_id == "Mika_Cat"
    assert identity.is_admin("admin") is False
    assert UserIdentity.create("admin", ANIMALS[0]).is_admin("admin") is True


@pytest.mark.parametrize(
    "nickname, animal",
    [("   ", "🐱 Cat"), ("x" * 21, "🐱 Cat"), ("Mika", "🦄 Unicorn")],
)
def test_identity_rejects_bad_input(nickname, animal):
    with pytest.raises(ValueError):
        UserIdentity.create(nickname, animal)


def test_animal_helpers():
    assert animal_label("🐶 Dog") == "Dog"
    assert animal_emoji("🐶 Dog") == "🐶"


@pytest.mark.parametrize(
    "cell, expected",
    [
        (450, 450),
        ("450", 450),
        (" 300.0 ", 300),
        (True, 0),
        ("abc", 0),
        ("", 0),
        (None, 0),
        ("inf", 0),
        ("Infinity", 0),
        ("-Infinity", 0),
        ("1e400", 0),
        ("nan", 0),
        (float("inf"), 0),
        (float("nan"), 0),
    ],
)
def test_price_cells(cell, expected):
    assert parse_price(cell) == expected


def test_order_with_infinite_price_is_dropped():
    rows = [
        ["order_1", "2024-06-10T09:30:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Latte", 450],
        ["order_2", "2024-06-10T09:31:00.000Z", "Mika_Cat", "Mika", "🐱 Cat", "Cake", "Infinity"],
    ]

    assert [order.order_id for order in parse_order_rows(rows)] == ["order_1"]

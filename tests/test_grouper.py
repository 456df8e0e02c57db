"""Unit tests for numbered entity grouping."""

# pylint: disable=redefined-outer-name,unused-variable

import pytest

from annotation_metadata.grouper import group_entities
from annotation_metadata.types import KeyKind


@pytest.mark.unit
def test_groups_orders_by_ordinal(make_element, config):
    """Elements sharing an ordinal fold into one entity."""
    elements = [
        make_element("ORDER1_ID", "A100"),
        make_element("ORDER1_TOTAL", "$50"),
        make_element("ORDER2_ID", "A200"),
    ]
    orders = group_entities(elements, KeyKind.ORDER, config)

    assert [o.ordinal for o in orders] == [1, 2]
    assert orders[0].fields == {"ID": "A100", "TOTAL": "$50"}
    assert orders[1].fields == {"ID": "A200"}
    assert [el.key for el in orders[0].elements] == ["ORDER1_ID", "ORDER1_TOTAL"]
    assert all(o.kind is KeyKind.ORDER for o in orders)


@pytest.mark.unit
def test_hidden_elements_are_excluded(make_element, config):
    """Hidden elements never join a bucket."""
    elements = [
        make_element("ORDER1_ID", "A100", visible=False),
        make_element("ORDER1_TOTAL", "$50"),
        make_element("ORDER2_ID", "A200", visible=False),
    ]
    orders = group_entities(elements, KeyKind.ORDER, config)

    assert len(orders) == 1
    assert orders[0].ordinal == 1
    assert orders[0].fields == {"TOTAL": "$50"}
    assert [el.key for el in orders[0].elements] == ["ORDER1_TOTAL"]


@pytest.mark.unit
def test_only_numbered_keys_of_the_family(make_element, config):
    """Flat keys, bare keys and other families are ignored."""
    elements = [
        make_element("ORDER_TOTAL", "$1"),
        make_element("ORDERS", "x"),
        make_element("ORDER1_", "no attribute"),
        make_element("PRODUCT1_NAME", "Lamp"),
        make_element("ORDER3_ID", "C"),
    ]
    orders = group_entities(elements, KeyKind.ORDER, config)
    assert [(o.ordinal, o.fields) for o in orders] == [(3, {"ID": "C"})]


@pytest.mark.unit
def test_groups_products(make_element, config):
    """Products group the same way, with any attribute names."""
    elements = [
        make_element("PRODUCT2_NAME", "Chair"),
        make_element("PRODUCT1_NAME", "Lamp"),
        make_element("PRODUCT1_PRICE", "19.99"),
        make_element("PRODUCT1_COLOR", "Red"),
    ]
    products = group_entities(elements, KeyKind.PRODUCT, config)

    # First-seen order; sorting by position is the caller's job
    assert [p.ordinal for p in products] == [2, 1]
    assert products[1].fields == {
        "NAME": "Lamp",
        "PRICE": "19.99",
        "COLOR": "Red",
    }


@pytest.mark.unit
def test_duplicate_attribute_last_wins(make_element, config):
    """A repeated attribute keeps the last value but every element."""
    elements = [
        make_element("ORDER1_ID", "old"),
        make_element("ORDER1_ID", "new"),
    ]
    (order,) = group_entities(elements, KeyKind.ORDER, config)
    assert order.fields == {"ID": "new"}
    assert len(order.elements) == 2


@pytest.mark.unit
def test_multi_digit_ordinals(make_element, config):
    """Ordinals are parsed as integers."""
    (order,) = group_entities(
        [make_element("ORDER10_ID", "J")], KeyKind.ORDER, config
    )
    assert order.ordinal == 10


@pytest.mark.unit
def test_empty_input(config):
    """No elements, no entities."""
    assert group_entities([], KeyKind.ORDER, config) == []

from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import stored_item_count
from storefront import errors, schemas
from storefront.entities import OrderStatus


def line(product_id, quantity):
    return schemas.OrderLine(product_id=product_id, quantity=quantity)


def test_electronics_scenario(services, watch):
    order = services.orders.place_order(1, [line(watch.id, 2)])
    assert order.total == Decimal("399.98")
    assert order.status == OrderStatus.PENDING
    assert order.user_id == 1
    assert order.created_at is not None

    detail = services.orders.get_order(order.id)
    assert detail.order.id == order.id
    assert len(detail.items) == 1
    item = detail.items[0]
    assert item.product_id == watch.id
    assert item.price == Decimal("199.99")
    assert item.quantity == 2
    assert item.order_id == order.id


def test_total_is_sum_of_lines(services, electronics, watch):
    cable = services.catalog.create_product(
        schemas.ProductCreate(
            name="Cable",
            description="USB-C cable",
            price=Decimal("0.10"),
            image_url="https://example.com/cable.jpg",
            category_id=electronics.id,
        )
    )
    order = services.orders.place_order(7, [line(watch.id, 1), line(cable.id, 3), {"product_id": cable.id, "quantity": 1}])
    assert order.total == Decimal("199.99") + Decimal("0.40")

    items = services.orders.get_order(order.id).items
    assert len(items) == 3
    assert sum(i.price * i.quantity for i in items) == order.total


def test_unknown_product_aborts_whole_order(services, watch):
    with pytest.raises(errors.InvalidProductReference) as exc:
        services.orders.place_order(1, [line(watch.id, 1), line(9999, 1)])
    assert exc.value.product_id == 9999
    # nothing persisted
    assert services.orders.get_all_orders() == []
    assert stored_item_count(services) == 0


def test_invalid_product_reference_is_a_validation_failure():
    assert issubclass(errors.InvalidProductReference, errors.ValidationFailed)


def test_empty_or_malformed_lines_rejected(services, watch):
    with pytest.raises(errors.ValidationFailed):
        services.orders.place_order(1, [])
    with pytest.raises(errors.ValidationFailed):
        services.orders.place_order(1, [{"product_id": watch.id, "quantity": 0}])
    assert services.orders.get_all_orders() == []


def test_item_price_is_a_snapshot(services, watch):
    order = services.orders.place_order(1, [line(watch.id, 2)])
    services.catalog.update_product(watch.id, schemas.ProductUpdate(price=Decimal("99.00")))

    detail = services.orders.get_order(order.id)
    assert detail.items[0].price == Decimal("199.99")
    assert detail.order.total == Decimal("399.98")

    # deleting the product does not touch the order either
    services.catalog.delete_product(watch.id)
    assert services.orders.get_order(order.id).items[0].product_id == watch.id


def test_placing_an_order_does_not_touch_the_catalog(services, watch):
    before = services.catalog.get_product(watch.id)
    services.orders.place_order(1, [line(watch.id, 5)])
    assert services.catalog.get_product(watch.id) == before


@pytest.mark.parametrize("start, target", [
    ("completed", "pending"),
    ("cancelled", "processing"),
    ("pending", "completed"),
    ("processing", "cancelled"),
    ("pending", "pending"),
])
def test_status_overwrites_unconditionally(services, watch, start, target):
    # No transition graph: every move between the four statuses is accepted
    order = services.orders.place_order(1, [line(watch.id, 1)])
    services.orders.update_order_status(order.id, start)
    updated = services.orders.update_order_status(order.id, target)
    assert updated.status == OrderStatus(target)
    assert services.orders.get_order(order.id).order.status == OrderStatus(target)
    # total is untouched by status changes
    assert updated.total == order.total


def test_status_update_errors(services, watch):
    order = services.orders.place_order(1, [line(watch.id, 1)])
    with pytest.raises(errors.ValidationFailed):
        services.orders.update_order_status(order.id, "shipped")
    with pytest.raises(errors.NotFound):
        services.orders.update_order_status(999, OrderStatus.COMPLETED)
    assert services.orders.get_order(order.id).order.status == OrderStatus.PENDING


def test_orders_for_user_and_all_orders(services, watch):
    a = services.orders.place_order(1, [line(watch.id, 1)])
    b = services.orders.place_order(2, [line(watch.id, 1)])
    c = services.orders.place_order(1, [line(watch.id, 3)])

    assert [o.id for o in services.orders.get_orders_for_user(1)] == [a.id, c.id]
    assert [o.id for o in services.orders.get_orders_for_user(3)] == []
    assert [o.id for o in services.orders.get_all_orders()] == [a.id, b.id, c.id]


def test_get_missing_order(services):
    with pytest.raises(errors.NotFound):
        services.orders.get_order(1)


def test_large_order_total_keeps_every_cent(services, electronics):
    tv = services.catalog.create_product(
        schemas.ProductCreate(
            name="Video wall",
            description="Modular display wall",
            price=Decimal("12345.67"),
            image_url="https://example.com/wall.jpg",
            category_id=electronics.id,
        )
    )
    order = services.orders.place_order(1, [line(tv.id, schemas.MAX_QUANTITY - 1)])

    detail = services.orders.get_order(order.id)
    assert detail.order.total == Decimal("12345.67") * 9999
    assert detail.order.total == sum(i.price * i.quantity for i in detail.items)
    assert detail.items[0].price == Decimal("12345.67")


def test_amounts_beyond_storage_range_rejected(services, electronics, watch):
    with pytest.raises(errors.ValidationFailed) as exc:
        services.orders.place_order(1, [line(watch.id, 1), {"product_id": watch.id, "quantity": schemas.MAX_QUANTITY + 1}])
    assert not isinstance(exc.value, errors.InvalidProductReference)

    priciest = services.catalog.create_product(
        schemas.ProductCreate(
            name="Yacht",
            description="Ocean going",
            price=schemas.MAX_PRICE,
            image_url="https://example.com/yacht.jpg",
            category_id=electronics.id,
        )
    )
    assert services.catalog.get_product(priciest.id).price == schemas.MAX_PRICE
    with pytest.raises(errors.ValidationFailed):
        services.orders.place_order(1, [line(priciest.id, schemas.MAX_QUANTITY)])
    assert services.orders.get_all_orders() == []
    assert stored_item_count(services) == 0


def test_created_at_is_utc_on_every_read(services, watch):
    order = services.orders.place_order(1, [line(watch.id, 1)])
    reads = [
        order,
        services.orders.get_order(order.id).order,
        services.orders.get_orders_for_user(1)[0],
        services.orders.get_all_orders()[0],
        services.orders.update_order_status(order.id, "processing"),
    ]
    for read in reads:
        assert read.created_at.utcoffset() == timedelta(0)

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Mapping, Sequence, Union

from pydantic import ValidationError

from . import errors, schemas
from .catalog import CatalogStore
from .entities import Order, OrderDetail, OrderStatus
from .repository import OrderRepository
from .utils import round_amount

logger = logging.getLogger(__name__)

LineRequest = Union[schemas.OrderLine, Mapping[str, int]]


class OrderEngine:
    """Turns a cart into an order priced from the catalog, and tracks its status.

    The engine reads products through the catalog and never changes them.
    """

    def __init__(self, orders: OrderRepository, catalog: CatalogStore):
        self.orders = orders
        self.catalog = catalog

    def place_order(self, user_id: int, lines: Sequence[LineRequest]) -> Order:
        """Price every line from the catalog, then persist order and items in one go.

        Raises InvalidProductReference if any line names an unknown product;
        nothing is stored in that case.
        """
        try:
            lines = [schemas.OrderLine.model_validate(line) for line in lines]
        except ValidationError as e:
            raise errors.ValidationFailed(str(e)) from e
        if not lines:
            raise errors.ValidationFailed("an order needs at least one item")

        items = []
        total = Decimal("0")
        for line in lines:
            try:
                product = self.catalog.get_product(line.product_id)
            except errors.NotFound:
                logger.warning("order for user %s rejected: unknown product %s", user_id, line.product_id)
                raise errors.InvalidProductReference(line.product_id) from None
            total += product.price * line.quantity
            items.append({"product_id": product.id, "quantity": line.quantity, "price": product.price})

        total = round_amount(total)
        if total > schemas.MAX_ORDER_TOTAL:
            raise errors.ValidationFailed(f"order total {total} exceeds {schemas.MAX_ORDER_TOTAL}")

        order = self.orders.add(
            user_id=user_id,
            status=OrderStatus.PENDING,
            total=total,
            created_at=datetime.now(timezone.utc),
            items=items,
        )
        logger.info("order %s placed by user %s: %d item(s), total %s", order.id, user_id, len(items), order.total)
        return order

    def get_order(self, order_id: int) -> OrderDetail:
        detail = self.orders.get(order_id)
        if detail is None:
            raise errors.NotFound(f"order {order_id} not found")
        return detail

    def get_orders_for_user(self, user_id: int) -> List[Order]:
        return self.orders.list_for_user(user_id)

    def get_all_orders(self) -> List[Order]:
        return self.orders.list_all()

    def update_order_status(self, order_id: int, status: Union[OrderStatus, str]) -> Order:
        # Any status may follow any other; there is no transition graph.
        try:
            status = OrderStatus(status)
        except ValueError:
            raise errors.ValidationFailed(f"unknown order status: {status!r}") from None
        order = self.orders.set_status(order_id, status)
        if order is None:
            raise errors.NotFound(f"order {order_id} not found")
        logger.info("order %s status set to %s", order_id, status.value)
        return order

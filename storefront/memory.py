"""In-process repositories backed by dicts; state lives as long as the process."""
import itertools
from dataclasses import replace
from typing import Dict, List

from . import errors
from .entities import Category, Order, OrderDetail, OrderItem, Product, User
from .repository import CategoryRepository, OrderRepository, ProductRepository, UserRepository


class MemoryUserRepository(UserRepository):
    def __init__(self):
        self._rows: Dict[int, User] = {}
        self._ids = itertools.count(1)

    def get(self, user_id):
        row = self._rows.get(user_id)
        return replace(row) if row else None

    def get_by_username(self, username):
        for row in self._rows.values():
            if row.username == username:
                return replace(row)
        return None

    def add(self, fields):
        if self.get_by_username(fields["username"]) is not None:
            raise errors.Conflict(f"username {fields['username']!r} already exists")
        user = User(id=next(self._ids), **fields)
        self._rows[user.id] = user
        return replace(user)


class MemoryCategoryRepository(CategoryRepository):
    def __init__(self):
        self._rows: Dict[int, Category] = {}
        self._ids = itertools.count(1)

    def list(self):
        return [replace(row) for row in self._rows.values()]

    def get(self, category_id):
        row = self._rows.get(category_id)
        return replace(row) if row else None

    def get_by_slug(self, slug):
        for row in self._rows.values():
            if row.slug == slug:
                return replace(row)
        return None

    def add(self, fields):
        if self.get_by_slug(fields["slug"]) is not None:
            raise errors.Conflict(f"category slug {fields['slug']!r} already exists")
        category = Category(id=next(self._ids), **fields)
        self._rows[category.id] = category
        return replace(category)

    def delete(self, category_id):
        return self._rows.pop(category_id, None) is not None


class MemoryProductRepository(ProductRepository):
    def __init__(self):
        self._rows: Dict[int, Product] = {}
        self._ids = itertools.count(1)

    def list(self):
        return [replace(row) for row in self._rows.values()]

    def get(self, product_id):
        row = self._rows.get(product_id)
        return replace(row) if row else None

    def list_by_category(self, category_id):
        return [replace(row) for row in self._rows.values() if row.category_id == category_id]

    def search(self, text):
        needle = text.lower()

        def matches(product: Product) -> bool:
            haystacks = (product.name, product.description, product.brand or "")
            return any(needle in h.lower() for h in haystacks)

        return [replace(row) for row in self._rows.values() if matches(row)]

    def add(self, fields):
        product = Product(id=next(self._ids), **fields)
        self._rows[product.id] = product
        return replace(product)

    def update(self, product_id, changes):
        row = self._rows.get(product_id)
        if row is None:
            return None
        updated = replace(row, **changes)
        self._rows[product_id] = updated
        return replace(updated)

    def delete(self, product_id):
        return self._rows.pop(product_id, None) is not None


class MemoryOrderRepository(OrderRepository):
    def __init__(self):
        self._orders: Dict[int, Order] = {}
        self._items: Dict[int, List[OrderItem]] = {}
        self._order_ids = itertools.count(1)
        self._item_ids = itertools.count(1)

    def add(self, user_id, status, total, created_at, items):
        order = Order(id=next(self._order_ids), user_id=user_id, status=status, total=total, created_at=created_at)
        rows = [
            OrderItem(
                id=next(self._item_ids),
                order_id=order.id,
                product_id=item["product_id"],
                quantity=item["quantity"],
                price=item["price"],
            )
            for item in items
        ]
        # both maps are written only once every row is built
        self._orders[order.id] = order
        self._items[order.id] = rows
        return replace(order)

    def get(self, order_id):
        order = self._orders.get(order_id)
        if order is None:
            return None
        return OrderDetail(order=replace(order), items=[replace(i) for i in self._items.get(order_id, [])])

    def list_for_user(self, user_id):
        return [replace(o) for o in self._orders.values() if o.user_id == user_id]

    def list_all(self):
        return [replace(o) for o in self._orders.values()]

    def set_status(self, order_id, status):
        order = self._orders.get(order_id)
        if order is None:
            return None
        updated = replace(order, status=status)
        self._orders[order_id] = updated
        return replace(updated)

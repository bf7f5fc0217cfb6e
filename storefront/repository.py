"""Storage interfaces, one per entity.

`memory` implements them over dicts, `sql` over SQLAlchemy. Lookups return
None (or False for deletes) when nothing matches; turning that into an error
is the caller's job.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .entities import Category, Order, OrderDetail, OrderStatus, Product, User


class UserRepository(ABC):
    @abstractmethod
    def get(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def add(self, fields: Mapping[str, Any]) -> User:
        """Store a new user; raises Conflict if the username is taken."""


class CategoryRepository(ABC):
    @abstractmethod
    def list(self) -> List[Category]: ...

    @abstractmethod
    def get(self, category_id: int) -> Optional[Category]: ...

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Category]: ...

    @abstractmethod
    def add(self, fields: Mapping[str, Any]) -> Category:
        """Store a new category; raises Conflict if the slug is taken."""

    @abstractmethod
    def delete(self, category_id: int) -> bool: ...


class ProductRepository(ABC):
    @abstractmethod
    def list(self) -> List[Product]: ...

    @abstractmethod
    def get(self, product_id: int) -> Optional[Product]: ...

    @abstractmethod
    def list_by_category(self, category_id: int) -> List[Product]: ...

    @abstractmethod
    def search(self, text: str) -> List[Product]:
        """Case-insensitive substring match over name, description and brand."""

    @abstractmethod
    def add(self, fields: Mapping[str, Any]) -> Product: ...

    @abstractmethod
    def update(self, product_id: int, changes: Mapping[str, Any]) -> Optional[Product]: ...

    @abstractmethod
    def delete(self, product_id: int) -> bool: ...


class OrderRepository(ABC):
    @abstractmethod
    def add(
        self,
        user_id: int,
        status: OrderStatus,
        total: Decimal,
        created_at: datetime,
        items: Sequence[Dict[str, Any]],
    ) -> Order:
        """Persist an order and its items together, or nothing at all.

        Each item is a dict with product_id, quantity and price.
        """

    @abstractmethod
    def get(self, order_id: int) -> Optional[OrderDetail]: ...

    @abstractmethod
    def list_for_user(self, user_id: int) -> List[Order]: ...

    @abstractmethod
    def list_all(self) -> List[Order]: ...

    @abstractmethod
    def set_status(self, order_id: int, status: OrderStatus) -> Optional[Order]: ...

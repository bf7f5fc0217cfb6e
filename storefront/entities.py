"""Plain records handed out by the repositories, whatever backs them."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class User:
    id: int
    username: str
    password_hash: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = False

    @property
    def role(self) -> str:
        return "admin" if self.is_admin else "user"


@dataclass
class Category:
    id: int
    name: str
    slug: str


@dataclass
class Product:
    id: int
    name: str
    description: str
    price: Decimal
    image_url: str
    category_id: int
    short_description: Optional[str] = None
    rating: Optional[float] = None
    in_stock: bool = True
    is_new: bool = False
    is_sale: bool = False
    brand: Optional[str] = None


@dataclass
class Order:
    id: int
    user_id: int
    status: OrderStatus
    total: Decimal
    created_at: datetime


@dataclass
class OrderItem:
    id: int
    order_id: int
    product_id: int
    quantity: int
    # unit price captured when the order was placed
    price: Decimal


@dataclass
class OrderDetail:
    order: Order
    items: List[OrderItem]

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator
from pydantic.config import ConfigDict

from .entities import OrderStatus

# Bounds keep money inside the Numeric(10, 2) / Numeric(12, 2) columns
MAX_PRICE = Decimal("99999999.99")
MAX_QUANTITY = 10_000
MAX_ORDER_TOTAL = Decimal("9999999999.99")


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    email: str = Field(..., max_length=254)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("email")
    def looks_like_email(cls, v: str):
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("invalid email address")
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class UserRead(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class TokenRead(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

    @field_validator("slug")
    def not_all_digits(cls, v: str):
        # an all-digit slug would be read as a category id
        if v.isdigit():
            raise ValueError("slug may not be all digits")
        return v


class CategoryRead(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    short_description: Optional[str] = Field(default=None, max_length=200)
    price: Decimal = Field(..., gt=Decimal("0"), le=MAX_PRICE)
    image_url: str = Field(..., min_length=1)
    category_id: PositiveInt
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    in_stock: bool = True
    is_new: bool = False
    is_sale: bool = False
    brand: Optional[str] = Field(default=None, max_length=100)


class ProductUpdate(BaseModel):
    """Partial update: only fields the client actually sent are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    short_description: Optional[str] = Field(default=None, max_length=200)
    price: Optional[Decimal] = Field(default=None, gt=Decimal("0"), le=MAX_PRICE)
    image_url: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[PositiveInt] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    in_stock: Optional[bool] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    brand: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name", "description", "price", "image_url", "category_id", "in_stock", "is_new", "is_sale")
    def not_null(cls, v):
        # these columns are required on the product; omit them rather than send null
        if v is None:
            raise ValueError("may not be null")
        return v


class ProductRead(BaseModel):
    id: int
    name: str
    description: str
    short_description: Optional[str] = None
    price: Decimal
    image_url: str
    category_id: int
    rating: Optional[float] = None
    in_stock: bool
    is_new: bool
    is_sale: bool
    brand: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderLine(BaseModel):
    product_id: PositiveInt
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)


class OrderCreate(BaseModel):
    items: List[OrderLine] = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderRead(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderItemRead(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderDetailRead(BaseModel):
    order: OrderRead
    items: List[OrderItemRead]

    model_config = ConfigDict(from_attributes=True)
